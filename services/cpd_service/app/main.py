"""FastAPI application for the CPD Service."""

from fastapi import FastAPI
from libs.common.error_handler import add_exception_handlers
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from services.cpd_service.routers import cpd_router, mentoring_router, reports_router
from slowapi.errors import RateLimitExceeded


def create_app() -> FastAPI:
    """Create and configure the CPD Service FastAPI app."""
    app = FastAPI(
        title="ICF Log CPD Service",
        version="0.1.0",
        description="CPD activities, mentoring/supervision log and annual reports.",
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "cpd"}

    app.include_router(cpd_router)
    app.include_router(mentoring_router)
    app.include_router(reports_router)

    return app


app = create_app()
