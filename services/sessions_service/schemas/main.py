import datetime as dt
import uuid
from typing import Optional

from libs.common.schemas import CamelModel
from pydantic import Field, model_validator
from services.sessions_service.models import PaymentType, SessionType


class SessionBase(CamelModel):
    client_id: Optional[uuid.UUID] = None
    client_name: str = Field(..., min_length=1)
    date: dt.date
    finish_date: Optional[dt.date] = None
    duration: int = Field(..., ge=0, description="Minutes")
    types: list[SessionType] = [SessionType.INDIVIDUAL]
    number_in_group: Optional[int] = Field(default=None, ge=1)

    payment_type: PaymentType = PaymentType.PAID
    payment_amount: Optional[float] = Field(default=None, ge=0)

    focus_area: Optional[str] = None
    key_outcomes: Optional[str] = None
    client_progress: Optional[str] = None
    coaching_tools: list[str] = []
    icf_competencies: list[str] = []
    notes: Optional[str] = None
    additional_notes: Optional[str] = None
    calendly_booking_id: Optional[str] = None

    @model_validator(mode="after")
    def finish_not_before_start(self):
        if self.finish_date and self.finish_date < self.date:
            raise ValueError("finishDate cannot be before date")
        return self


class SessionCreate(SessionBase):
    pass


class SessionUpdate(CamelModel):
    client_id: Optional[uuid.UUID] = None
    client_name: Optional[str] = Field(default=None, min_length=1)
    date: Optional[dt.date] = None
    finish_date: Optional[dt.date] = None
    duration: Optional[int] = Field(default=None, ge=0)
    types: Optional[list[SessionType]] = None
    number_in_group: Optional[int] = Field(default=None, ge=1)
    payment_type: Optional[PaymentType] = None
    payment_amount: Optional[float] = Field(default=None, ge=0)
    focus_area: Optional[str] = None
    key_outcomes: Optional[str] = None
    client_progress: Optional[str] = None
    coaching_tools: Optional[list[str]] = None
    icf_competencies: Optional[list[str]] = None
    notes: Optional[str] = None
    additional_notes: Optional[str] = None


class SessionResponse(SessionBase):
    id: uuid.UUID
    types: list[str] = []
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None


class BulkDeleteRequest(CamelModel):
    ids: list[uuid.UUID] = Field(..., min_length=1)
    delete_clients: bool = False


class BulkDeleteResponse(CamelModel):
    sessions_deleted: int
    clients_deleted: int = 0


class ImportResultResponse(CamelModel):
    sessions_added: int
    clients_added: int
    sessions_skipped: int
    rows_skipped: int = 0


class CalendlyEventResponse(CamelModel):
    """An upcoming booking shaped like a session the coach can log."""

    calendly_booking_id: str
    event_name: str
    client_name: str
    client_email: Optional[str] = None
    date: dt.date
    start_time: dt.datetime
    end_time: Optional[dt.datetime] = None
    duration: int
    types: list[str]
    number_in_group: int = 1
    location: Optional[str] = None
