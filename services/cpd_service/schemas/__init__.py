"""CPD Service schemas package."""

from services.cpd_service.schemas.cpd import (  # noqa: F401
    CPDCreate,
    CPDResponse,
    CPDUpdate,
    check_category_hours,
)
from services.cpd_service.schemas.mentoring import (  # noqa: F401
    MentoringCreate,
    MentoringResponse,
    MentoringUpdate,
)
