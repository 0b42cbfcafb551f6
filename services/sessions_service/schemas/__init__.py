"""Sessions Service schemas package."""

from services.sessions_service.schemas.clients import (
    ClientCreate,
    ClientDocumentResponse,
    ClientResponse,
    ClientUpdate,
)
from services.sessions_service.schemas.main import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    CalendlyEventResponse,
    ImportResultResponse,
    SessionBase,
    SessionCreate,
    SessionResponse,
    SessionUpdate,
)

__all__ = [
    "BulkDeleteRequest",
    "BulkDeleteResponse",
    "CalendlyEventResponse",
    "ClientCreate",
    "ClientDocumentResponse",
    "ClientResponse",
    "ClientUpdate",
    "ImportResultResponse",
    "SessionBase",
    "SessionCreate",
    "SessionResponse",
    "SessionUpdate",
]
