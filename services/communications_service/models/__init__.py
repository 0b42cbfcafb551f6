"""Communications Service models package."""

from services.communications_service.models.core import ScheduledEmail
from services.communications_service.models.enums import (
    RecipientType,
    ScheduledEmailStatus,
)

__all__ = ["RecipientType", "ScheduledEmail", "ScheduledEmailStatus"]
