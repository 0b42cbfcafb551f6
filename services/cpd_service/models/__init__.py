"""CPD Service models package."""

from services.cpd_service.models.core import CPDEntry, MentoringSession
from services.cpd_service.models.enums import (
    ICF_CORE_COMPETENCIES,
    CpdType,
    DeliveryType,
    DocumentType,
    LearningMethod,
    MentoringKind,
)

__all__ = [
    "CPDEntry",
    "CpdType",
    "DeliveryType",
    "DocumentType",
    "ICF_CORE_COMPETENCIES",
    "LearningMethod",
    "MentoringKind",
    "MentoringSession",
]
