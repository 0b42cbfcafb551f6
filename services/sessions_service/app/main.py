"""FastAPI application for the Sessions Service."""

from fastapi import FastAPI
from libs.common.error_handler import add_exception_handlers
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from services.sessions_service.routers import (
    calendly_router,
    clients_router,
    sessions_router,
)
from slowapi.errors import RateLimitExceeded


def create_app() -> FastAPI:
    """Create and configure the Sessions Service FastAPI app."""
    app = FastAPI(
        title="ICF Log Sessions Service",
        version="0.1.0",
        description="Coaching sessions, clients, spreadsheet import and ICF log export.",
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "sessions"}

    app.include_router(sessions_router)
    app.include_router(clients_router)
    app.include_router(calendly_router)

    return app


app = create_app()
