"""Coaching session endpoints: CRUD, bulk delete, spreadsheet import and exports."""

import uuid
from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile, status
from fastapi.responses import Response
from libs.auth.models import OwnerContext
from libs.common.config import get_settings
from libs.common.exports import CSV_MEDIA_TYPE, XLSX_MEDIA_TYPE
from libs.common.logging import get_logger
from libs.common.rate_limit import upload_limit
from libs.db.session import get_async_db
from services.members_service.services.owner import get_owner_context
from services.members_service.services.usage import ensure_can_add_entry
from services.sessions_service.importer import import_spreadsheet
from services.sessions_service.models import Client, CoachingSession
from services.sessions_service.schemas import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    ImportResultResponse,
    SessionCreate,
    SessionResponse,
    SessionUpdate,
)
from services.sessions_service.services import exports
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/sessions", tags=["sessions"])
logger = get_logger(__name__)


async def _get_owned_session(
    db: AsyncSession, owner: OwnerContext, session_id: uuid.UUID
) -> CoachingSession:
    result = await db.execute(
        select(CoachingSession).where(
            CoachingSession.id == session_id,
            CoachingSession.user_id == owner.user_id,
        )
    )
    session = result.scalar_one_or_none()
    if not session:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Session not found"
        )
    return session


async def _check_client(db: AsyncSession, owner: OwnerContext, client_id: Optional[uuid.UUID]):
    if client_id is None:
        return
    owned = await db.scalar(
        select(Client.id).where(Client.id == client_id, Client.user_id == owner.user_id)
    )
    if not owned:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Client not found"
        )


@router.get("", response_model=List[SessionResponse])
async def list_sessions(
    client_id: Optional[uuid.UUID] = None,
    start: Optional[date] = Query(None, description="Earliest session date"),
    end: Optional[date] = Query(None, description="Latest session date"),
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    query = (
        select(CoachingSession)
        .where(CoachingSession.user_id == owner.user_id)
        .order_by(CoachingSession.date.desc(), CoachingSession.created_at.desc())
    )
    if client_id:
        query = query.where(CoachingSession.client_id == client_id)
    if start:
        query = query.where(CoachingSession.date >= start)
    if end:
        query = query.where(CoachingSession.date <= end)
    result = await db.execute(query)
    return result.scalars().all()


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: SessionCreate,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    await ensure_can_add_entry(db, owner.user_id)
    await _check_client(db, owner, payload.client_id)

    data = payload.model_dump()
    data["types"] = [t.value for t in payload.types]
    session = CoachingSession(user_id=owner.user_id, **data)
    db.add(session)
    await db.commit()
    await db.refresh(session)
    return session


@router.post("/bulk-delete", response_model=BulkDeleteResponse)
async def bulk_delete_sessions(
    payload: BulkDeleteRequest,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Delete several sessions at once. With ``deleteClients`` the clients of
    those sessions are removed too, unless they still have other sessions.
    """
    result = await db.execute(
        select(CoachingSession.id, CoachingSession.client_id).where(
            CoachingSession.user_id == owner.user_id,
            CoachingSession.id.in_(payload.ids),
        )
    )
    rows = result.all()
    session_ids = [row.id for row in rows]
    client_ids = {row.client_id for row in rows if row.client_id}

    await db.execute(delete(CoachingSession).where(CoachingSession.id.in_(session_ids)))

    clients_deleted = 0
    if payload.delete_clients and client_ids:
        still_used = set(
            (
                await db.execute(
                    select(CoachingSession.client_id)
                    .where(CoachingSession.client_id.in_(client_ids))
                    .group_by(CoachingSession.client_id)
                )
            ).scalars()
        )
        orphaned = client_ids - still_used
        if orphaned:
            clients = (
                await db.execute(
                    select(Client).where(
                        Client.id.in_(orphaned), Client.user_id == owner.user_id
                    )
                )
            ).scalars().all()
            for client in clients:
                await db.delete(client)
            clients_deleted = len(clients)

    await db.commit()
    logger.info(
        f"User {owner.user_id} bulk-deleted {len(session_ids)} sessions, {clients_deleted} clients"
    )
    return BulkDeleteResponse(
        sessions_deleted=len(session_ids), clients_deleted=clients_deleted
    )


@router.post("/import", response_model=ImportResultResponse)
@upload_limit
async def import_sessions(
    request: Request,
    file: UploadFile = File(...),
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    """Import an ICF Client Coaching Log spreadsheet (.xlsx or .csv)."""
    await ensure_can_add_entry(db, owner.user_id)

    content = await file.read()
    if len(content) > get_settings().MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="File too large. Maximum size is 10MB.",
        )
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty"
        )

    result = await import_spreadsheet(db, owner, content, file.filename)
    return ImportResultResponse(
        sessions_added=result.sessions_added,
        clients_added=result.clients_added,
        sessions_skipped=result.sessions_skipped,
        rows_skipped=result.rows_skipped,
    )


@router.get("/export")
async def export_sessions(
    format: Literal["icf", "csv", "xlsx"] = "icf",
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    sessions = (
        await db.execute(
            select(CoachingSession)
            .where(CoachingSession.user_id == owner.user_id)
            .order_by(CoachingSession.date.asc())
        )
    ).scalars().all()

    if format == "csv":
        return Response(
            content=exports.sessions_csv(sessions),
            media_type=CSV_MEDIA_TYPE,
            headers={"Content-Disposition": 'attachment; filename="sessions-data.csv"'},
        )
    if format == "xlsx":
        return Response(
            content=exports.sessions_xlsx(sessions),
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": 'attachment; filename="sessions-data.xlsx"'},
        )

    clients = {
        client.id: client
        for client in (
            await db.execute(select(Client).where(Client.user_id == owner.user_id))
        ).scalars()
    }
    return Response(
        content=exports.build_icf_log_workbook(sessions, clients),
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": 'attachment; filename="ICF-Client-Coaching-Log.xlsx"'
        },
    )


@router.get("/stats")
async def get_session_stats(
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    """Totals for the dashboard cards."""
    row = (
        await db.execute(
            select(
                func.count(CoachingSession.id),
                func.coalesce(func.sum(CoachingSession.duration), 0),
                func.count(func.distinct(CoachingSession.client_name)),
            ).where(CoachingSession.user_id == owner.user_id)
        )
    ).one()
    count, minutes, clients = row
    return {
        "totalSessions": count,
        "totalHours": round((minutes or 0) / 60, 1),
        "uniqueClients": clients,
    }


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: uuid.UUID,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    return await _get_owned_session(db, owner, session_id)


@router.patch("/{session_id}", response_model=SessionResponse)
async def update_session(
    session_id: uuid.UUID,
    updates: SessionUpdate,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    session = await _get_owned_session(db, owner, session_id)
    data = updates.model_dump(exclude_unset=True)
    if data.get("types") is not None:
        data["types"] = [t.value for t in updates.types]
    if "client_id" in data:
        await _check_client(db, owner, data["client_id"])
    for field, value in data.items():
        setattr(session, field, value)

    if session.finish_date and session.finish_date < session.date:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="finishDate cannot be before date",
        )
    await db.commit()
    await db.refresh(session)
    return session


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: uuid.UUID,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    session = await _get_owned_session(db, owner, session_id)
    await db.delete(session)
    await db.commit()
