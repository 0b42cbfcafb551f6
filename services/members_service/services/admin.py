"""
Admin dashboard queries: user directory, platform statistics, role and
subscription management.
"""

import datetime as dt
from collections import Counter
from dataclasses import asdict, dataclass
from datetime import timedelta
from typing import Optional

from libs.common.datetime_utils import start_of_month, utc_now
from libs.common.errors import NotFound
from libs.common.logging import get_logger
from services.cpd_service.models import CPDEntry
from services.members_service.models import (
    IcfLevel,
    Profile,
    SubscriptionPlan,
    SubscriptionStatus,
    UserRole,
)
from services.members_service.services.activity import get_activity_summaries
from services.sessions_service.models import CoachingSession
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

ONLINE_WINDOW = timedelta(minutes=5)
RECENT_ACTIVITY_LIMIT = 10


@dataclass
class AdminUserRow:
    user_id: str
    name: Optional[str]
    email: Optional[str]
    icf_level: str
    country: Optional[str]
    role: str
    created_at: Optional[dt.datetime]
    last_seen_at: Optional[dt.datetime]
    total_sessions: int = 0
    total_cpd_entries: int = 0
    total_coaching_hours: float = 0.0


async def list_admin_users(
    db: AsyncSession, search: Optional[str] = None
) -> list[AdminUserRow]:
    """Every profile with session, CPD and coaching-hour totals."""
    query = select(Profile).order_by(Profile.created_at.desc())
    if search:
        pattern = f"%{search.lower()}%"
        query = query.where(
            or_(
                func.lower(Profile.name).like(pattern),
                func.lower(Profile.email).like(pattern),
            )
        )
    profiles = (await db.execute(query)).scalars().all()
    user_ids = [p.user_id for p in profiles]
    if not user_ids:
        return []

    session_totals = {
        user_id: (count, minutes or 0)
        for user_id, count, minutes in await db.execute(
            select(
                CoachingSession.user_id,
                func.count(CoachingSession.id),
                func.sum(CoachingSession.duration),
            )
            .where(CoachingSession.user_id.in_(user_ids))
            .group_by(CoachingSession.user_id)
        )
    }
    cpd_totals = {
        user_id: count
        for user_id, count in await db.execute(
            select(CPDEntry.user_id, func.count(CPDEntry.id))
            .where(CPDEntry.user_id.in_(user_ids))
            .group_by(CPDEntry.user_id)
        )
    }

    rows = []
    for profile in profiles:
        sessions, minutes = session_totals.get(profile.user_id, (0, 0))
        rows.append(
            AdminUserRow(
                user_id=profile.user_id,
                name=profile.name,
                email=profile.email,
                icf_level=profile.icf_level.value,
                country=profile.country,
                role=profile.role.value,
                created_at=profile.created_at,
                last_seen_at=profile.last_seen_at,
                total_sessions=sessions,
                total_cpd_entries=cpd_totals.get(profile.user_id, 0),
                total_coaching_hours=round(minutes / 60, 1),
            )
        )
    return rows


async def _count(db: AsyncSession, query) -> int:
    return (await db.scalar(query)) or 0


async def _distinct_session_users_since(db: AsyncSession, since: dt.date) -> int:
    return await _count(
        db,
        select(func.count(func.distinct(CoachingSession.user_id))).where(
            CoachingSession.date >= since
        ),
    )


async def get_user_stats(db: AsyncSession) -> dict:
    """Platform-wide metrics for the admin dashboard."""
    now = utc_now()
    today = now.date()
    first_of_month = start_of_month(now)
    first_of_last_month = start_of_month(first_of_month - timedelta(days=1))

    total_users = await _count(db, select(func.count()).select_from(Profile))
    total_sessions = await _count(db, select(func.count()).select_from(CoachingSession))
    total_cpd_entries = await _count(db, select(func.count()).select_from(CPDEntry))

    new_users_this_month = await _count(
        db,
        select(func.count()).select_from(Profile).where(
            Profile.created_at >= first_of_month
        ),
    )
    new_users_last_month = await _count(
        db,
        select(func.count()).select_from(Profile).where(
            Profile.created_at >= first_of_last_month,
            Profile.created_at < first_of_month,
        ),
    )
    growth_rate = (
        round((new_users_this_month - new_users_last_month) / new_users_last_month * 100)
        if new_users_last_month
        else 0
    )

    session_rows = (
        await db.execute(select(CoachingSession.duration, CoachingSession.date))
    ).all()
    total_minutes = sum(duration or 0 for duration, _ in session_rows)
    avg_session_duration = round(total_minutes / len(session_rows)) if session_rows else 0
    day_counts = Counter(session_date.strftime("%A") for _, session_date in session_rows)
    most_active_day = day_counts.most_common(1)[0][0] if day_counts else "No data"

    profile_rows = (await db.execute(select(Profile.icf_level, Profile.country))).all()
    levels = Counter(level for level, _ in profile_rows)
    countries = Counter(country or "Unknown" for _, country in profile_rows)

    total_cpd_hours = await db.scalar(
        select(func.coalesce(func.sum(CPDEntry.hours), 0))
    )

    return {
        "total_users": total_users,
        "active_users_30d": await _distinct_session_users_since(db, today - timedelta(days=30)),
        "total_sessions": total_sessions,
        "total_cpd_entries": total_cpd_entries,
        "avg_sessions_per_user": round(total_sessions / total_users, 2) if total_users else 0,
        "new_users_this_month": new_users_this_month,
        "growth_rate_percent": growth_rate,
        "avg_session_duration": avg_session_duration,
        "active_users_7d": await _distinct_session_users_since(db, today - timedelta(days=7)),
        "users_with_sessions_this_month": await _distinct_session_users_since(
            db, first_of_month.date()
        ),
        "mcc_users": levels.get(IcfLevel.MCC, 0),
        "pcc_users": levels.get(IcfLevel.PCC, 0),
        "acc_users": levels.get(IcfLevel.ACC, 0),
        "no_level_users": sum(
            count
            for level, count in levels.items()
            if level not in (IcfLevel.ACC, IcfLevel.PCC, IcfLevel.MCC)
        ),
        "top_countries": [
            {"country": country, "count": count}
            for country, count in countries.most_common(5)
        ],
        "total_coaching_hours": round(total_minutes / 60),
        "avg_cpd_hours_per_user": (
            round(float(total_cpd_hours or 0) / total_users, 2) if total_users else 0
        ),
        "most_active_day": most_active_day,
    }


async def _require_profile(db: AsyncSession, user_id: str) -> Profile:
    profile = (
        await db.execute(select(Profile).where(Profile.user_id == user_id))
    ).scalar_one_or_none()
    if not profile:
        raise NotFound("User not found")
    return profile


async def update_user_role(db: AsyncSession, user_id: str, role: UserRole) -> Profile:
    profile = await _require_profile(db, user_id)
    profile.role = role
    await db.commit()
    await db.refresh(profile)
    logger.info(f"Role for user {user_id} set to {role.value}")
    return profile


async def get_user_activity(db: AsyncSession, user_id: str) -> dict:
    """The user's ten most recent sessions and CPD entries."""
    await _require_profile(db, user_id)
    sessions = (
        await db.execute(
            select(CoachingSession)
            .where(CoachingSession.user_id == user_id)
            .order_by(CoachingSession.date.desc())
            .limit(RECENT_ACTIVITY_LIMIT)
        )
    ).scalars().all()
    cpd_entries = (
        await db.execute(
            select(CPDEntry)
            .where(CPDEntry.user_id == user_id)
            .order_by(CPDEntry.activity_date.desc())
            .limit(RECENT_ACTIVITY_LIMIT)
        )
    ).scalars().all()
    summary = (await get_activity_summaries(db, [user_id]))[user_id]
    return {
        "sessions": list(sessions),
        "cpd_entries": list(cpd_entries),
        "summary": asdict(summary),
    }


async def list_online_users(db: AsyncSession) -> list[Profile]:
    cutoff = utc_now() - ONLINE_WINDOW
    result = await db.execute(
        select(Profile)
        .where(Profile.last_seen_at >= cutoff)
        .order_by(Profile.last_seen_at.desc())
    )
    return list(result.scalars().all())


# ---------------------------------------------------------------------------
# Subscriptions
# ---------------------------------------------------------------------------


async def list_subscriptions(db: AsyncSession, search: Optional[str] = None) -> list[Profile]:
    query = select(Profile).order_by(Profile.created_at.desc())
    if search:
        pattern = f"%{search.lower()}%"
        query = query.where(
            or_(
                func.lower(Profile.name).like(pattern),
                func.lower(Profile.email).like(pattern),
            )
        )
    return list((await db.execute(query)).scalars().all())


async def get_subscription_stats(db: AsyncSession) -> dict:
    rows = (
        await db.execute(select(Profile.subscription_plan, Profile.subscription_status))
    ).all()
    plans = Counter(plan for plan, _ in rows)
    statuses = Counter(status for _, status in rows)
    return {
        "total_users": len(rows),
        "active_subscriptions": statuses.get(SubscriptionStatus.ACTIVE, 0),
        "free_users": plans.get(SubscriptionPlan.FREE, 0),
        "starter_users": plans.get(SubscriptionPlan.STARTER, 0),
        "pro_users": plans.get(SubscriptionPlan.PRO, 0),
        "canceled_subscriptions": statuses.get(SubscriptionStatus.CANCELED, 0),
        "trial_users": statuses.get(SubscriptionStatus.TRIALING, 0),
    }


async def update_subscription_plan(
    db: AsyncSession, user_id: str, plan: SubscriptionPlan
) -> Profile:
    """Manual plan override. Free means inactive; any paid plan is active."""
    profile = await _require_profile(db, user_id)
    profile.subscription_plan = plan
    profile.subscription_status = (
        SubscriptionStatus.INACTIVE if plan == SubscriptionPlan.FREE else SubscriptionStatus.ACTIVE
    )
    await db.commit()
    await db.refresh(profile)
    logger.info(f"Subscription plan for user {user_id} set to {plan.value}")
    return profile
