"""CPD entry endpoints: CRUD, evidence upload and exports."""

import uuid
from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from fastapi.responses import Response
from libs.auth.models import OwnerContext
from libs.common.config import get_settings
from libs.common.exports import CSV_MEDIA_TYPE, XLSX_MEDIA_TYPE
from libs.common.logging import get_logger
from libs.common.rate_limit import upload_limit
from libs.common.storage import StorageService, get_storage
from libs.db.session import get_async_db
from services.cpd_service.models import CPDEntry
from services.cpd_service.schemas import (
    CPDCreate,
    CPDResponse,
    CPDUpdate,
    check_category_hours,
)
from services.cpd_service.services import exports
from services.members_service.services.owner import get_owner_context
from services.members_service.services.usage import ensure_can_add_entry
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/cpd", tags=["cpd"])
logger = get_logger(__name__)

EVIDENCE_TYPES = {"application/pdf", "image/jpeg", "image/png", "image/webp"}


async def _get_owned_entry(
    db: AsyncSession, owner: OwnerContext, entry_id: uuid.UUID
) -> CPDEntry:
    result = await db.execute(
        select(CPDEntry).where(
            CPDEntry.id == entry_id, CPDEntry.user_id == owner.user_id
        )
    )
    entry = result.scalar_one_or_none()
    if not entry:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="CPD entry not found"
        )
    return entry


@router.get("", response_model=List[CPDResponse])
async def list_cpd_entries(
    year: Optional[int] = None,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    query = (
        select(CPDEntry)
        .where(CPDEntry.user_id == owner.user_id)
        .order_by(CPDEntry.activity_date.desc())
    )
    if year:
        query = query.where(
            CPDEntry.activity_date >= date(year, 1, 1),
            CPDEntry.activity_date <= date(year, 12, 31),
        )
    result = await db.execute(query)
    return result.scalars().all()


@router.post("", response_model=CPDResponse, status_code=status.HTTP_201_CREATED)
async def create_cpd_entry(
    payload: CPDCreate,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    await ensure_can_add_entry(db, owner.user_id)

    entry = CPDEntry(user_id=owner.user_id, **payload.model_dump())
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    return entry


@router.get("/export")
async def export_cpd_entries(
    format: Literal["csv", "xlsx"] = "csv",
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    entries = (
        await db.execute(
            select(CPDEntry)
            .where(CPDEntry.user_id == owner.user_id)
            .order_by(CPDEntry.activity_date.asc())
        )
    ).scalars().all()

    if format == "xlsx":
        return Response(
            content=exports.cpd_xlsx(entries),
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": 'attachment; filename="cpd-data.xlsx"'},
        )
    return Response(
        content=exports.cpd_csv(entries),
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="cpd-data.csv"'},
    )


@router.get("/{entry_id}", response_model=CPDResponse)
async def get_cpd_entry(
    entry_id: uuid.UUID,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    return await _get_owned_entry(db, owner, entry_id)


@router.patch("/{entry_id}", response_model=CPDResponse)
async def update_cpd_entry(
    entry_id: uuid.UUID,
    updates: CPDUpdate,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    entry = await _get_owned_entry(db, owner, entry_id)
    for field, value in updates.model_dump(exclude_unset=True).items():
        setattr(entry, field, value)

    try:
        check_category_hours(
            entry.hours,
            entry.core_competency,
            entry.resource_development,
            entry.core_competency_hours,
            entry.resource_development_hours,
        )
    except ValueError as e:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    await db.commit()
    await db.refresh(entry)
    return entry


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cpd_entry(
    entry_id: uuid.UUID,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    entry = await _get_owned_entry(db, owner, entry_id)
    await db.delete(entry)
    await db.commit()


@router.post("/{entry_id}/document", response_model=CPDResponse)
@upload_limit
async def upload_cpd_document(
    request: Request,
    entry_id: uuid.UUID,
    file: UploadFile = File(...),
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
    storage: StorageService = Depends(get_storage),
):
    """Attach a certificate or other evidence to an entry."""
    entry = await _get_owned_entry(db, owner, entry_id)

    content = await file.read()
    if len(content) > get_settings().MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="File too large. Maximum size is 10MB.",
        )
    content_type = file.content_type or "application/octet-stream"
    if content_type not in EVIDENCE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only PDF and image files are accepted",
        )

    path = storage.build_path(f"cpd/{owner.user_id}", file.filename or "evidence")
    entry.supporting_document_url = await storage.upload(path, content, content_type)
    await db.commit()
    await db.refresh(entry)
    logger.info(f"Attached evidence to CPD entry {entry.id}")
    return entry
