import datetime as dt
import uuid
from typing import Optional

from libs.common.schemas import CamelModel
from pydantic import Field


class ClientBase(CamelModel):
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None


class ClientCreate(ClientBase):
    pass


class ClientUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None


class ClientDocumentResponse(CamelModel):
    id: uuid.UUID
    client_id: uuid.UUID
    file_name: str
    file_size: int
    file_url: str
    content_type: Optional[str] = None
    created_at: dt.datetime


class ClientResponse(ClientBase):
    id: uuid.UUID
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None
    session_count: int = 0
    total_hours: float = 0
