"""Sessions service routers."""

from services.sessions_service.routers.calendly import router as calendly_router
from services.sessions_service.routers.clients import router as clients_router
from services.sessions_service.routers.sessions import router as sessions_router

__all__ = [
    "calendly_router",
    "clients_router",
    "sessions_router",
]
