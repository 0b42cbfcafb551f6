import datetime as dt
from typing import Any, Optional

from libs.common.schemas import CamelModel
from services.cpd_service.schemas import CPDResponse
from services.members_service.models import SubscriptionPlan, SubscriptionStatus, UserRole
from services.sessions_service.schemas import SessionResponse


class AdminUserResponse(CamelModel):
    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    icf_level: str
    country: Optional[str] = None
    role: UserRole
    created_at: Optional[dt.datetime] = None
    last_seen_at: Optional[dt.datetime] = None
    total_sessions: int = 0
    total_cpd_entries: int = 0
    total_coaching_hours: float = 0


class CountryCount(CamelModel):
    country: str
    count: int


class UserStatsResponse(CamelModel):
    total_users: int
    active_users_30d: int
    total_sessions: int
    total_cpd_entries: int
    avg_sessions_per_user: float
    new_users_this_month: int
    growth_rate_percent: int
    avg_session_duration: int
    active_users_7d: int
    users_with_sessions_this_month: int
    mcc_users: int
    pcc_users: int
    acc_users: int
    no_level_users: int
    top_countries: list[CountryCount]
    total_coaching_hours: int
    avg_cpd_hours_per_user: float
    most_active_day: str


class RoleUpdate(CamelModel):
    role: UserRole


class UserActivityResponse(CamelModel):
    sessions: list[SessionResponse]
    cpd_entries: list[CPDResponse]
    summary: dict[str, Any]


class OnlineUserResponse(CamelModel):
    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    last_seen_at: Optional[dt.datetime] = None


class SubscriptionRow(CamelModel):
    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    subscription_plan: SubscriptionPlan
    subscription_status: SubscriptionStatus
    subscription_id: Optional[str] = None
    stripe_customer_id: Optional[str] = None
    subscription_current_period_start: Optional[dt.datetime] = None
    subscription_current_period_end: Optional[dt.datetime] = None
    cancel_at_period_end: bool = False
    created_at: Optional[dt.datetime] = None


class SubscriptionStatsResponse(CamelModel):
    total_users: int
    active_subscriptions: int
    free_users: int
    starter_users: int
    pro_users: int
    canceled_subscriptions: int
    trial_users: int


class PlanUpdate(CamelModel):
    plan: SubscriptionPlan
