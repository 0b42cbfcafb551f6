import datetime as dt
import uuid
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.cpd_service.models.enums import (
    CpdType,
    DeliveryType,
    DocumentType,
    LearningMethod,
    MentoringKind,
    enum_values,
)
from sqlalchemy import JSON, Boolean, Date, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Float, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column


class CPDEntry(Base):
    """A continuing professional development activity.

    When both ``core_competency`` and ``resource_development`` are set the
    two category hour fields must add up to ``hours``; that is checked when
    the entry is submitted, not here.
    """

    __tablename__ = "cpd"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String, index=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    activity_date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    hours: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    cpd_type: Mapped[Optional[CpdType]] = mapped_column(
        SAEnum(CpdType, name="cpd_type_enum", values_callable=enum_values),
        nullable=True,
    )
    learning_method: Mapped[Optional[LearningMethod]] = mapped_column(
        SAEnum(LearningMethod, name="learning_method_enum", values_callable=enum_values),
        nullable=True,
    )
    provider_organization: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    key_learnings: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    application_to_practice: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    icf_competencies: Mapped[list] = mapped_column(JSON, default=list)

    document_type: Mapped[Optional[DocumentType]] = mapped_column(
        SAEnum(DocumentType, name="cpd_document_type_enum", values_callable=enum_values),
        nullable=True,
    )
    supporting_document_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    core_competency: Mapped[bool] = mapped_column(Boolean, default=False)
    resource_development: Mapped[bool] = mapped_column(Boolean, default=False)
    core_competency_hours: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    resource_development_hours: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    # False excludes the entry from ICF CCE totals
    icf_cce_hours: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )


class MentoringSession(Base):
    """Mentor coaching or supervision received by the coach."""

    __tablename__ = "mentoring_supervision"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String, index=True)
    session_type: Mapped[MentoringKind] = mapped_column(
        SAEnum(
            MentoringKind,
            name="mentoring_kind_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    # Minutes
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=60)
    provider_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    credential_level: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    delivery_type: Mapped[DeliveryType] = mapped_column(
        SAEnum(
            DeliveryType,
            name="delivery_type_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=DeliveryType.INDIVIDUAL,
        nullable=False,
    )
    focus_area: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    file_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    is_formal_supervision: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )
