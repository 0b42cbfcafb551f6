"""CPD service routers."""

from services.cpd_service.routers.cpd import router as cpd_router
from services.cpd_service.routers.mentoring import router as mentoring_router
from services.cpd_service.routers.reports import router as reports_router

__all__ = [
    "cpd_router",
    "mentoring_router",
    "reports_router",
]
