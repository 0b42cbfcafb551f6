import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.communications_service.models.enums import (
    RecipientType,
    ScheduledEmailStatus,
    enum_values,
)
from sqlalchemy import JSON, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column


class ScheduledEmail(Base):
    """An admin broadcast, either queued for later or logged after an immediate send."""

    __tablename__ = "scheduled_emails"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_by: Mapped[str] = mapped_column(String, index=True)
    subject: Mapped[str] = mapped_column(String, nullable=False)
    email_content: Mapped[str] = mapped_column(Text, nullable=False)

    recipient_type: Mapped[RecipientType] = mapped_column(
        SAEnum(
            RecipientType,
            name="recipient_type_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=RecipientType.ALL,
        nullable=False,
    )
    recipient_user_ids: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)

    scheduled_for: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    status: Mapped[ScheduledEmailStatus] = mapped_column(
        SAEnum(
            ScheduledEmailStatus,
            name="scheduled_email_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=ScheduledEmailStatus.PENDING,
        nullable=False,
    )
    sent_count: Mapped[int] = mapped_column(Integer, default=0)
    failed_count: Mapped[int] = mapped_column(Integer, default=0)
    error_details: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    processed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )
