"""FastAPI application for the Communications Service."""

from fastapi import FastAPI
from libs.common.error_handler import add_exception_handlers
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from services.communications_service.routers import (
    admin_router,
    notify_router,
    reminders_router,
)
from slowapi.errors import RateLimitExceeded


def create_app() -> FastAPI:
    """Create and configure the Communications Service FastAPI app."""
    app = FastAPI(
        title="ICF Log Communications Service",
        version="0.1.0",
        description="Reminder emails, push alerts and admin broadcasts.",
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "communications"}

    app.include_router(notify_router)
    app.include_router(admin_router)
    app.include_router(reminders_router)

    return app


app = create_app()
