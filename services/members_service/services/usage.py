"""
Free-tier usage gate.

Free accounts may hold a limited number of combined sessions and CPD
entries. Subscribers (active status, or any paid plan) are never gated.
"""

from dataclasses import dataclass
from typing import Optional

from libs.common.config import get_settings
from libs.common.errors import EntryLimitReached
from services.cpd_service.models import CPDEntry
from services.members_service.models import Profile, SubscriptionPlan, SubscriptionStatus
from services.sessions_service.models import CoachingSession
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession


@dataclass
class UsageData:
    total_entries: int
    cpd_count: int
    session_count: int
    is_subscribed: bool
    limit: int
    plan: str = "free"

    @property
    def remaining(self) -> Optional[int]:
        if self.is_subscribed:
            return None
        return max(self.limit - self.total_entries, 0)


@dataclass
class EntryPermission:
    can_add: bool
    usage: UsageData
    reason: Optional[str] = None


@dataclass
class UsageProgress:
    percentage: float
    color: str
    show_warning: bool


def limit_message(limit: int) -> str:
    return f"You've reached your free limit of {limit} entries. Please upgrade to continue."


async def get_user_usage(db: AsyncSession, user_id: str) -> UsageData:
    session_count = await db.scalar(
        select(func.count()).select_from(CoachingSession).where(
            CoachingSession.user_id == user_id
        )
    )
    cpd_count = await db.scalar(
        select(func.count()).select_from(CPDEntry).where(CPDEntry.user_id == user_id)
    )
    profile = (
        await db.execute(select(Profile).where(Profile.user_id == user_id))
    ).scalar_one_or_none()

    is_subscribed = False
    plan = SubscriptionPlan.FREE.value
    if profile:
        is_subscribed = (
            profile.subscription_status == SubscriptionStatus.ACTIVE
            or profile.subscription_plan != SubscriptionPlan.FREE
        )
        plan = profile.subscription_plan.value

    session_count = session_count or 0
    cpd_count = cpd_count or 0
    return UsageData(
        total_entries=session_count + cpd_count,
        cpd_count=cpd_count,
        session_count=session_count,
        is_subscribed=is_subscribed,
        limit=get_settings().FREE_ENTRY_LIMIT,
        plan=plan,
    )


def check_permission(usage: UsageData, adding: int = 1) -> EntryPermission:
    if usage.is_subscribed:
        return EntryPermission(can_add=True, usage=usage)
    if usage.total_entries + adding > usage.limit:
        return EntryPermission(
            can_add=False, usage=usage, reason=limit_message(usage.limit)
        )
    return EntryPermission(can_add=True, usage=usage)


async def can_add_new_entry(db: AsyncSession, user_id: str) -> EntryPermission:
    usage = await get_user_usage(db, user_id)
    return check_permission(usage)


async def ensure_can_add_entry(db: AsyncSession, user_id: str) -> UsageData:
    """Raise ``EntryLimitReached`` when a free account is at its limit."""
    permission = await can_add_new_entry(db, user_id)
    if not permission.can_add:
        raise EntryLimitReached(permission.reason)
    return permission.usage


def get_usage_progress(usage: UsageData) -> UsageProgress:
    if usage.is_subscribed or usage.limit <= 0:
        return UsageProgress(percentage=0, color="green", show_warning=False)

    percentage = min(usage.total_entries / usage.limit * 100, 100)
    if percentage >= 80:
        color = "red"
    elif percentage >= 60:
        color = "yellow"
    else:
        color = "green"
    return UsageProgress(
        percentage=round(percentage, 1), color=color, show_warning=percentage >= 80
    )
