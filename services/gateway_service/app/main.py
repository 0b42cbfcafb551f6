"""FastAPI application entrypoint for the ICF Log API gateway.

Every service router is mounted in-process under ``/api``; the services
share one database, so there is nothing to proxy.
"""

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

load_dotenv()

from libs.common.config import get_settings  # noqa: E402
from libs.common.error_handler import add_exception_handlers  # noqa: E402
from libs.common.logging import get_logger  # noqa: E402
from libs.common.middleware import add_observability_middleware  # noqa: E402
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler  # noqa: E402
from libs.db.config import create_all_tables  # noqa: E402
from services.communications_service.routers import (  # noqa: E402
    admin_router as broadcast_admin_router,
)
from services.communications_service.routers import (  # noqa: E402
    notify_router,
    reminders_router,
)
from services.cpd_service.routers import (  # noqa: E402
    cpd_router,
    mentoring_router,
    reports_router,
)
from services.members_service.routers import (  # noqa: E402
    admin_router,
    notifications_router,
    profile_router,
)
from services.sessions_service.routers import (  # noqa: E402
    calendly_router,
    clients_router,
    sessions_router,
)

API_PREFIX = "/api"
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_all_tables()
    logger.info("Database tables ready")
    yield


def create_app(create_tables: bool = True) -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = get_settings()
    app = FastAPI(
        title="ICF Log API",
        version="0.1.0",
        description="Coaching log, CPD tracking and ICF credential reporting.",
        lifespan=lifespan if create_tables else None,
    )

    # Add rate limiter state to app
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability (structured logging + request tracing)
    add_observability_middleware(app)

    # Add global exception handlers for consistent error responses
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple readiness endpoint."""
        return {"status": "ok"}

    for router in (
        profile_router,
        notifications_router,
        admin_router,
        sessions_router,
        clients_router,
        calendly_router,
        cpd_router,
        mentoring_router,
        reports_router,
        notify_router,
        broadcast_admin_router,
        reminders_router,
    ):
        app.include_router(router, prefix=API_PREFIX)

    return app


app = create_app()
