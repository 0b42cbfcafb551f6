import datetime as dt
from typing import Optional

from libs.common.schemas import CamelModel
from pydantic import Field, field_validator
from services.members_service.models import (
    IcfLevel,
    NotificationType,
    SubscriptionPlan,
    SubscriptionStatus,
    UserRole,
)


class ProfileResponse(CamelModel):
    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    icf_level: IcfLevel
    currency: str
    country: Optional[str] = None
    cpd_renewal_date: Optional[dt.date] = None
    role: UserRole
    subscription_plan: SubscriptionPlan
    subscription_status: SubscriptionStatus
    cancel_at_period_end: bool = False
    subscription_current_period_end: Optional[dt.datetime] = None
    calendly_url: Optional[str] = None
    has_calendly_token: bool = False
    created_at: Optional[dt.datetime] = None


class ProfileUpdate(CamelModel):
    name: Optional[str] = None
    icf_level: Optional[IcfLevel] = None
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    country: Optional[str] = Field(default=None, min_length=2, max_length=2)
    cpd_renewal_date: Optional[dt.date] = None
    calendly_url: Optional[str] = None
    calendly_access_token: Optional[str] = None

    @field_validator("currency", "country")
    @classmethod
    def upper(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else v


class UsageResponse(CamelModel):
    total_entries: int
    cpd_count: int
    session_count: int
    is_subscribed: bool
    limit: int
    remaining: Optional[int] = None
    plan: str
    percentage: float
    color: str
    show_warning: bool
    can_add: bool
    reason: Optional[str] = None


class ProgressResponse(CamelModel):
    current_level: str
    next_level: Optional[str] = None
    coaching_hours: float
    cpd_hours: float
    required_coaching_hours: Optional[int] = None
    required_training_hours: Optional[int] = None
    coaching_percent: float
    training_percent: float
    renewal_cce_hours: int
    ready: bool


class LatestEntryDateResponse(CamelModel):
    latest_date: Optional[dt.date] = None


class NotificationPreferencesResponse(CamelModel):
    email_types: list[str]
    push_types: list[str]
    email_enabled: bool
    push_enabled: bool
    push_subscribed: bool
    available_types: list[str] = [t.value for t in NotificationType]


class EmailPreferencesUpdate(CamelModel):
    types: list[str]


class PushSubscriptionUpdate(CamelModel):
    subscription: Optional[dict] = None
    types: list[str]
