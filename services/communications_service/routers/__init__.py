"""Communications service routers package."""

from services.communications_service.routers.admin import router as admin_router
from services.communications_service.routers.notify import router as notify_router
from services.communications_service.routers.reminders import router as reminders_router

__all__ = [
    "admin_router",
    "notify_router",
    "reminders_router",
]
