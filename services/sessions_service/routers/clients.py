"""Client endpoints, including per-client document storage."""

import uuid
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from libs.auth.models import OwnerContext
from libs.common.config import get_settings
from libs.common.logging import get_logger
from libs.common.rate_limit import upload_limit
from libs.common.storage import StorageService, get_storage
from libs.db.session import get_async_db
from services.members_service.services.owner import get_owner_context
from services.sessions_service.models import Client, ClientDocument, CoachingSession
from services.sessions_service.schemas import (
    ClientCreate,
    ClientDocumentResponse,
    ClientResponse,
    ClientUpdate,
)
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/clients", tags=["clients"])
logger = get_logger(__name__)

ALLOWED_DOCUMENT_TYPES = {
    "application/pdf",
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "text/plain",
    "text/csv",
}


async def _get_owned_client(
    db: AsyncSession, owner: OwnerContext, client_id: uuid.UUID
) -> Client:
    result = await db.execute(
        select(Client).where(Client.id == client_id, Client.user_id == owner.user_id)
    )
    client = result.scalar_one_or_none()
    if not client:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Client not found"
        )
    return client


@router.get("", response_model=List[ClientResponse])
async def list_clients(
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    clients = (
        await db.execute(
            select(Client).where(Client.user_id == owner.user_id).order_by(Client.name)
        )
    ).scalars().all()
    totals = {
        client_id: (count, minutes or 0)
        for client_id, count, minutes in await db.execute(
            select(
                CoachingSession.client_id,
                func.count(CoachingSession.id),
                func.sum(CoachingSession.duration),
            )
            .where(CoachingSession.user_id == owner.user_id)
            .group_by(CoachingSession.client_id)
        )
    }

    responses = []
    for client in clients:
        count, minutes = totals.get(client.id, (0, 0))
        response = ClientResponse.model_validate(client)
        response.session_count = count
        response.total_hours = round(minutes / 60, 1)
        responses.append(response)
    return responses


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    payload: ClientCreate,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    client = Client(user_id=owner.user_id, **payload.model_dump())
    db.add(client)
    await db.commit()
    await db.refresh(client)
    return client


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: uuid.UUID,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    return await _get_owned_client(db, owner, client_id)


@router.patch("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: uuid.UUID,
    updates: ClientUpdate,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    client = await _get_owned_client(db, owner, client_id)
    for field, value in updates.model_dump(exclude_unset=True).items():
        setattr(client, field, value)
    await db.commit()
    await db.refresh(client)
    return client


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: uuid.UUID,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
    storage: StorageService = Depends(get_storage),
):
    """Delete a client and its documents. Its sessions are kept, unlinked."""
    client = await _get_owned_client(db, owner, client_id)
    await db.refresh(client, ["documents"])
    paths = [doc.file_path for doc in client.documents]

    sessions = (
        await db.execute(
            select(CoachingSession).where(CoachingSession.client_id == client.id)
        )
    ).scalars().all()
    for session in sessions:
        session.client_id = None

    await db.delete(client)
    await db.commit()
    for path in paths:
        await storage.remove(path)


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


@router.get("/{client_id}/documents", response_model=List[ClientDocumentResponse])
async def list_client_documents(
    client_id: uuid.UUID,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    client = await _get_owned_client(db, owner, client_id)
    result = await db.execute(
        select(ClientDocument)
        .where(ClientDocument.client_id == client.id)
        .order_by(ClientDocument.created_at.desc())
    )
    return result.scalars().all()


@router.post(
    "/{client_id}/documents",
    response_model=ClientDocumentResponse,
    status_code=status.HTTP_201_CREATED,
)
@upload_limit
async def upload_client_document(
    request: Request,
    client_id: uuid.UUID,
    file: UploadFile = File(...),
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
    storage: StorageService = Depends(get_storage),
):
    client = await _get_owned_client(db, owner, client_id)

    content = await file.read()
    if len(content) > get_settings().MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="File too large. Maximum size is 10MB.",
        )
    content_type = file.content_type or "application/octet-stream"
    if content_type not in ALLOWED_DOCUMENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported file type: {content_type}",
        )

    filename = file.filename or "document"
    path = storage.build_path(f"{owner.user_id}/{client.id}", filename)
    url = await storage.upload(path, content, content_type)

    document = ClientDocument(
        client_id=client.id,
        user_id=owner.user_id,
        file_name=filename,
        file_path=path,
        file_size=len(content),
        file_url=url,
        content_type=content_type,
    )
    db.add(document)
    await db.commit()
    await db.refresh(document)
    logger.info(f"Stored document {filename} for client {client.id}")
    return document


@router.delete(
    "/{client_id}/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def delete_client_document(
    client_id: uuid.UUID,
    document_id: uuid.UUID,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
    storage: StorageService = Depends(get_storage),
):
    await _get_owned_client(db, owner, client_id)
    document = (
        await db.execute(
            select(ClientDocument).where(
                ClientDocument.id == document_id,
                ClientDocument.client_id == client_id,
                ClientDocument.user_id == owner.user_id,
            )
        )
    ).scalar_one_or_none()
    if not document:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Document not found"
        )
    path = document.file_path
    await db.delete(document)
    await db.commit()
    await storage.remove(path)
