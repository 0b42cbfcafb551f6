"""
Spreadsheet session import: read, map, reconcile clients, drop duplicates,
persist.

Client creation and session inserts share one transaction, so a failed
import leaves neither orphan clients nor a partial batch of sessions.
Free accounts are gated on the number of sessions the batch would add,
not only on whether one more entry fits.
"""

import datetime as dt
from dataclasses import dataclass
from typing import Optional

from libs.auth.models import OwnerContext
from libs.common.errors import EntryLimitReached, PersistenceError
from libs.common.logging import get_logger
from services.members_service.services.usage import check_permission, get_user_usage
from services.sessions_service.importer.dedupe import load_existing_keys, split_duplicates
from services.sessions_service.importer.mapper import (
    CandidateClient,
    CandidateSession,
    SkipReason,
    map_row,
)
from services.sessions_service.importer.reconcile import reconcile_clients
from services.sessions_service.importer.rows import extract_rows, read_grid
from services.sessions_service.models import CoachingSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


@dataclass
class ImportResult:
    sessions_added: int = 0
    clients_added: int = 0
    sessions_skipped: int = 0
    rows_skipped: int = 0


def map_rows(
    rows: list[dict], owner: OwnerContext, today: Optional[dt.date] = None
) -> tuple[list[CandidateSession], list[CandidateClient], int]:
    """Map every row; returns sessions, unique clients (first seen wins), unusable row count."""
    sessions: list[CandidateSession] = []
    clients: dict[str, CandidateClient] = {}
    unusable = 0
    for raw in rows:
        mapped = map_row(raw, owner, today=today)
        if isinstance(mapped, SkipReason):
            unusable += 1
            continue
        sessions.append(mapped.session)
        clients.setdefault(mapped.client.key, mapped.client)
    return sessions, list(clients.values()), unusable


def _to_model(candidate: CandidateSession, owner: OwnerContext, client_id) -> CoachingSession:
    return CoachingSession(
        user_id=owner.user_id,
        client_id=client_id,
        client_name=candidate.client_name,
        date=candidate.date,
        finish_date=candidate.finish_date,
        duration=candidate.duration,
        types=candidate.types,
        number_in_group=candidate.number_in_group,
        payment_type=candidate.payment_type,
        payment_amount=candidate.payment_amount,
        additional_notes=candidate.additional_notes,
        coaching_tools=[],
        icf_competencies=[],
    )


async def import_rows(
    db: AsyncSession,
    owner: OwnerContext,
    rows: list[dict],
    today: Optional[dt.date] = None,
) -> ImportResult:
    candidates, candidate_clients, unusable = map_rows(rows, owner, today=today)
    if unusable:
        logger.info(f"Import for {owner.user_id}: {unusable} rows had no usable session")

    try:
        reconciled = await reconcile_clients(db, owner, candidate_clients, today=today)
        existing_keys = await load_existing_keys(db, owner)
        accepted, duplicates = split_duplicates(candidates, existing_keys)

        usage = await get_user_usage(db, owner.user_id)
        permission = check_permission(usage, adding=len(accepted))
        if not permission.can_add:
            await db.rollback()
            logger.info(
                f"Import for {owner.user_id} refused: {len(accepted)} new sessions, "
                f"{usage.remaining} of {usage.limit} free entries left"
            )
            raise EntryLimitReached(
                f"This import would add {len(accepted)} sessions but only "
                f"{usage.remaining} of your {usage.limit} free entries remain. "
                "Please upgrade to import the full log."
            )

        db.add_all(
            _to_model(c, owner, reconciled.clients_by_key[c.client_key].id)
            for c in accepted
        )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Import for {owner.user_id} rolled back: {e}")
        raise PersistenceError(f"Import failed: {e}") from e

    result = ImportResult(
        sessions_added=len(accepted),
        clients_added=reconciled.clients_added,
        sessions_skipped=duplicates,
        rows_skipped=unusable,
    )
    logger.info(
        f"Import for {owner.user_id}: {result.sessions_added} sessions added, "
        f"{result.clients_added} clients added, {result.sessions_skipped} duplicates skipped"
    )
    return result


async def import_spreadsheet(
    db: AsyncSession,
    owner: OwnerContext,
    content: bytes,
    filename: Optional[str],
    today: Optional[dt.date] = None,
) -> ImportResult:
    """Import an uploaded ICF log (xlsx or csv) for ``owner``."""
    rows = extract_rows(read_grid(content, filename))
    return await import_rows(db, owner, rows, today=today)
