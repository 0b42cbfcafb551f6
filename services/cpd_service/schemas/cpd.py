import datetime as dt
import uuid
from typing import Optional

from libs.common.schemas import CamelModel
from pydantic import Field, model_validator
from services.cpd_service.models import CpdType, DocumentType, LearningMethod

CATEGORY_HOURS_TOLERANCE = 0.01


def check_category_hours(
    hours: Optional[float],
    core_competency: Optional[bool],
    resource_development: Optional[bool],
    core_competency_hours: Optional[float],
    resource_development_hours: Optional[float],
) -> None:
    """Split hours must add up to the total when an entry is in both categories."""
    if not (core_competency and resource_development):
        return
    total = (core_competency_hours or 0) + (resource_development_hours or 0)
    if abs(total - (hours or 0)) > CATEGORY_HOURS_TOLERANCE:
        raise ValueError(
            f"Core competency hours ({core_competency_hours or 0}) and resource "
            f"development hours ({resource_development_hours or 0}) must add up to "
            f"the total hours ({hours or 0})"
        )


class CPDBase(CamelModel):
    title: str = Field(..., min_length=1)
    activity_date: dt.date
    hours: float = Field(..., gt=0)
    cpd_type: Optional[CpdType] = None
    learning_method: Optional[LearningMethod] = None
    provider_organization: Optional[str] = None
    description: Optional[str] = None
    key_learnings: Optional[str] = None
    application_to_practice: Optional[str] = None
    icf_competencies: list[str] = []
    document_type: Optional[DocumentType] = None
    supporting_document_url: Optional[str] = None
    core_competency: bool = False
    resource_development: bool = False
    core_competency_hours: Optional[float] = Field(default=None, ge=0)
    resource_development_hours: Optional[float] = Field(default=None, ge=0)
    icf_cce_hours: bool = True


class CPDCreate(CPDBase):
    @model_validator(mode="after")
    def category_hours_add_up(self):
        check_category_hours(
            self.hours,
            self.core_competency,
            self.resource_development,
            self.core_competency_hours,
            self.resource_development_hours,
        )
        return self


class CPDUpdate(CamelModel):
    """Partial update; the category split is re-checked against the merged record."""

    title: Optional[str] = Field(default=None, min_length=1)
    activity_date: Optional[dt.date] = None
    hours: Optional[float] = Field(default=None, gt=0)
    cpd_type: Optional[CpdType] = None
    learning_method: Optional[LearningMethod] = None
    provider_organization: Optional[str] = None
    description: Optional[str] = None
    key_learnings: Optional[str] = None
    application_to_practice: Optional[str] = None
    icf_competencies: Optional[list[str]] = None
    document_type: Optional[DocumentType] = None
    supporting_document_url: Optional[str] = None
    core_competency: Optional[bool] = None
    resource_development: Optional[bool] = None
    core_competency_hours: Optional[float] = Field(default=None, ge=0)
    resource_development_hours: Optional[float] = Field(default=None, ge=0)
    icf_cce_hours: Optional[bool] = None


class CPDResponse(CPDBase):
    id: uuid.UUID
    hours: float
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None
