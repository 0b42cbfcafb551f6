import datetime as dt
import uuid
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.sessions_service.models.enums import PaymentType, enum_values
from sqlalchemy import JSON, Date, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship


class Client(Base):
    """A coachee belonging to one coach."""

    __tablename__ = "clients"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    documents: Mapped[list["ClientDocument"]] = relationship(
        back_populates="client", cascade="all, delete-orphan", lazy="selectin"
    )

    def __repr__(self):
        return f"<Client {self.name}>"


class ClientDocument(Base):
    """A file (agreement, intake form, notes) attached to a client."""

    __tablename__ = "client_documents"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("clients.id", ondelete="CASCADE"), index=True
    )
    user_id: Mapped[str] = mapped_column(String, index=True)
    file_name: Mapped[str] = mapped_column(String, nullable=False)
    file_path: Mapped[str] = mapped_column(String, nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False)
    file_url: Mapped[str] = mapped_column(String, nullable=False)
    content_type: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    client: Mapped[Client] = relationship(back_populates="documents")


class CoachingSession(Base):
    """One logged coaching session; counts towards ICF coaching hours."""

    __tablename__ = "sessions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String, index=True)
    client_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("clients.id", ondelete="SET NULL"), nullable=True, index=True
    )
    client_name: Mapped[str] = mapped_column(String, nullable=False)

    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    finish_date: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    # Minutes
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    types: Mapped[list] = mapped_column(JSON, default=lambda: ["individual"])
    number_in_group: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    payment_type: Mapped[PaymentType] = mapped_column(
        SAEnum(
            PaymentType,
            name="payment_type_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=PaymentType.PAID,
        nullable=False,
    )
    payment_amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    focus_area: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    key_outcomes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    client_progress: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    coaching_tools: Mapped[list] = mapped_column(JSON, default=list)
    icf_competencies: Mapped[list] = mapped_column(JSON, default=list)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    additional_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    calendly_booking_id: Mapped[Optional[str]] = mapped_column(
        String, nullable=True, index=True
    )

    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    @property
    def hours(self) -> float:
        return (self.duration or 0) / 60

    def __repr__(self):
        return f"<CoachingSession {self.client_name} {self.date}>"
