"""Sessions Service models package."""

from services.sessions_service.models.core import (
    Client,
    ClientDocument,
    CoachingSession,
)
from services.sessions_service.models.enums import PaymentType, SessionType

__all__ = [
    "Client",
    "ClientDocument",
    "CoachingSession",
    "PaymentType",
    "SessionType",
]
