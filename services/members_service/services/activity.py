"""
Per-user activity aggregates shared by admin dashboards and reminder emails.
"""

import datetime as dt
from dataclasses import dataclass
from typing import Iterable, Optional

from services.cpd_service.models import CPDEntry, MentoringSession
from services.sessions_service.models import CoachingSession
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession


@dataclass
class ActivitySummary:
    session_count: int = 0
    cpd_hours: float = 0.0
    last_activity_date: Optional[dt.date] = None


def counts_as_cce():
    """Entries are ICF CCE hours unless explicitly marked otherwise."""
    return or_(CPDEntry.icf_cce_hours.is_(None), CPDEntry.icf_cce_hours.is_(True))


async def get_activity_summaries(
    db: AsyncSession, user_ids: Iterable[str]
) -> dict[str, ActivitySummary]:
    """Session count, CCE hours and last session date for each user."""
    user_ids = list(user_ids)
    summaries = {user_id: ActivitySummary() for user_id in user_ids}
    if not user_ids:
        return summaries

    session_rows = await db.execute(
        select(
            CoachingSession.user_id,
            func.count(CoachingSession.id),
            func.max(CoachingSession.date),
        )
        .where(CoachingSession.user_id.in_(user_ids))
        .group_by(CoachingSession.user_id)
    )
    for user_id, count, last_date in session_rows:
        summaries[user_id].session_count = count
        summaries[user_id].last_activity_date = last_date

    cpd_rows = await db.execute(
        select(CPDEntry.user_id, func.coalesce(func.sum(CPDEntry.hours), 0))
        .where(CPDEntry.user_id.in_(user_ids), counts_as_cce())
        .group_by(CPDEntry.user_id)
    )
    for user_id, hours in cpd_rows:
        summaries[user_id].cpd_hours = round(float(hours or 0), 1)

    return summaries


async def get_coaching_hours(db: AsyncSession, user_id: str) -> float:
    minutes = await db.scalar(
        select(func.coalesce(func.sum(CoachingSession.duration), 0)).where(
            CoachingSession.user_id == user_id
        )
    )
    return (minutes or 0) / 60


async def get_cce_hours(db: AsyncSession, user_id: str) -> float:
    hours = await db.scalar(
        select(func.coalesce(func.sum(CPDEntry.hours), 0)).where(
            CPDEntry.user_id == user_id, counts_as_cce()
        )
    )
    return float(hours or 0)


async def fetch_most_recent_entry_date(
    db: AsyncSession, user_id: str
) -> Optional[dt.date]:
    """Latest date across sessions, CPD and mentoring, in that order of preference."""
    candidates = (
        select(func.max(CoachingSession.date)).where(CoachingSession.user_id == user_id),
        select(func.max(CPDEntry.activity_date)).where(CPDEntry.user_id == user_id),
        select(func.max(MentoringSession.date)).where(MentoringSession.user_id == user_id),
    )
    latest: Optional[dt.date] = None
    for query in candidates:
        value = await db.scalar(query)
        if value and (latest is None or value > latest):
            latest = value
    return latest
