"""Mentor coaching and supervision log."""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from libs.auth.models import OwnerContext
from libs.db.session import get_async_db
from services.cpd_service.models import DeliveryType, MentoringKind, MentoringSession
from services.cpd_service.schemas import (
    MentoringCreate,
    MentoringResponse,
    MentoringUpdate,
)
from services.members_service.services.owner import get_owner_context
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/mentoring", tags=["mentoring"])


async def _get_owned_record(
    db: AsyncSession, owner: OwnerContext, record_id: uuid.UUID
) -> MentoringSession:
    result = await db.execute(
        select(MentoringSession).where(
            MentoringSession.id == record_id,
            MentoringSession.user_id == owner.user_id,
        )
    )
    record = result.scalar_one_or_none()
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Record not found"
        )
    return record


@router.get("", response_model=List[MentoringResponse])
async def list_mentoring(
    session_type: Optional[MentoringKind] = None,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    query = (
        select(MentoringSession)
        .where(MentoringSession.user_id == owner.user_id)
        .order_by(MentoringSession.date.desc())
    )
    if session_type:
        query = query.where(MentoringSession.session_type == session_type)
    result = await db.execute(query)
    return result.scalars().all()


@router.post("", response_model=MentoringResponse, status_code=status.HTTP_201_CREATED)
async def create_mentoring(
    payload: MentoringCreate,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    record = MentoringSession(user_id=owner.user_id, **payload.model_dump())
    db.add(record)
    await db.commit()
    await db.refresh(record)
    return record


@router.get("/{record_id}", response_model=MentoringResponse)
async def get_mentoring(
    record_id: uuid.UUID,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    return await _get_owned_record(db, owner, record_id)


@router.patch("/{record_id}", response_model=MentoringResponse)
async def update_mentoring(
    record_id: uuid.UUID,
    updates: MentoringUpdate,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    record = await _get_owned_record(db, owner, record_id)
    for field, value in updates.model_dump(exclude_unset=True).items():
        setattr(record, field, value)

    if (
        record.session_type == MentoringKind.MENTORING
        and record.delivery_type == DeliveryType.PEER
    ):
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Peer delivery is only available for supervision",
        )

    await db.commit()
    await db.refresh(record)
    return record


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_mentoring(
    record_id: uuid.UUID,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    record = await _get_owned_record(db, owner, record_id)
    await db.delete(record)
    await db.commit()
