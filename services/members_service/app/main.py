"""FastAPI application for the Members Service."""

from fastapi import FastAPI
from libs.common.error_handler import add_exception_handlers
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from services.members_service.routers import (
    admin_router,
    notifications_router,
    profile_router,
)
from slowapi.errors import RateLimitExceeded


def create_app() -> FastAPI:
    """Create and configure the Members Service FastAPI app."""
    app = FastAPI(
        title="ICF Log Members Service",
        version="0.1.0",
        description="Profiles, usage limits, notification preferences and admin dashboards.",
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "members"}

    app.include_router(profile_router)
    app.include_router(notifications_router)
    app.include_router(admin_router)

    return app


app = create_app()
