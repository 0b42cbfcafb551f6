"""
Match candidate clients against the owner's existing clients.

Email is the stronger identity: an existing client with the same email
absorbs the candidate even when the spelling of the name differs. Name
matching is the fallback for rows without an email.
"""

import datetime as dt
from dataclasses import dataclass, field
from typing import Iterable, Optional

from libs.auth.models import OwnerContext
from libs.common.logging import get_logger
from services.sessions_service.importer.mapper import CandidateClient
from services.sessions_service.models import Client
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


def auto_created_note(today: dt.date) -> str:
    return f"Auto-created from session import on {today.isoformat()}"


@dataclass
class ReconcileResult:
    clients_by_key: dict[str, Client] = field(default_factory=dict)
    created: list[Client] = field(default_factory=list)

    @property
    def clients_added(self) -> int:
        return len(self.created)


def match_existing(
    candidate: CandidateClient, existing: Iterable[Client]
) -> Optional[Client]:
    existing = list(existing)
    if candidate.email:
        wanted = candidate.email.lower()
        for client in existing:
            if client.email and client.email.lower() == wanted:
                return client
    for client in existing:
        if client.name == candidate.name:
            return client
    return None


async def reconcile_clients(
    db: AsyncSession,
    owner: OwnerContext,
    candidates: Iterable[CandidateClient],
    today: Optional[dt.date] = None,
) -> ReconcileResult:
    """Resolve every candidate to a client row, creating the missing ones.

    New clients are flushed one at a time so their ids are available to the
    sessions that follow; committing is left to the caller.
    """
    today = today or dt.date.today()
    result = await db.execute(select(Client).where(Client.user_id == owner.user_id))
    known = list(result.scalars().all())

    outcome = ReconcileResult()
    for candidate in candidates:
        if candidate.key in outcome.clients_by_key:
            continue
        client = match_existing(candidate, known)
        if client is None:
            client = Client(
                user_id=owner.user_id,
                name=candidate.name,
                email=candidate.email or candidate.contact,
                notes=auto_created_note(today),
            )
            db.add(client)
            await db.flush()
            known.append(client)
            outcome.created.append(client)
            logger.debug(f"Created client {candidate.name!r} during import")
        outcome.clients_by_key[candidate.key] = client
    return outcome
