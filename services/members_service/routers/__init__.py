"""Members service routers package."""

from services.members_service.routers.admin import router as admin_router
from services.members_service.routers.notifications import (
    router as notifications_router,
)
from services.members_service.routers.profile import router as profile_router

__all__ = ["admin_router", "notifications_router", "profile_router"]
