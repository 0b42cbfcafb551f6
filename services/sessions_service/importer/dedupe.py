"""
Session duplicate detection for imports.

A candidate is a duplicate when a session with the same client name, date
and duration already exists for the owner, or was accepted earlier in the
same upload.
"""

import datetime as dt
from typing import Iterable

from libs.auth.models import OwnerContext
from services.sessions_service.importer.mapper import CandidateSession
from services.sessions_service.models import CoachingSession
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

SessionKey = tuple[str, dt.date, int]


async def load_existing_keys(db: AsyncSession, owner: OwnerContext) -> set[SessionKey]:
    result = await db.execute(
        select(
            CoachingSession.client_name,
            CoachingSession.date,
            CoachingSession.duration,
        ).where(CoachingSession.user_id == owner.user_id)
    )
    return {(name, date, duration) for name, date, duration in result}


def split_duplicates(
    candidates: Iterable[CandidateSession], existing_keys: set[SessionKey]
) -> tuple[list[CandidateSession], int]:
    """Return the candidates to insert and how many were duplicates."""
    seen = set(existing_keys)
    accepted: list[CandidateSession] = []
    skipped = 0
    for candidate in candidates:
        key = candidate.dedupe_key
        if key in seen:
            skipped += 1
            continue
        seen.add(key)
        accepted.append(candidate)
    return accepted, skipped
