import datetime as dt
import uuid
from typing import Optional

from libs.common.schemas import CamelModel
from pydantic import Field
from services.communications_service.models import RecipientType, ScheduledEmailStatus
from services.members_service.models import NotificationType


# ===== USER NOTIFICATIONS =====
class SendNotificationEmailRequest(CamelModel):
    notification_type: NotificationType
    title: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)

    @property
    def is_test(self) -> bool:
        """Test messages from the settings screen skip the preference check."""
        return "Test" in self.title or "test" in self.body.lower()


class SendPushRequest(CamelModel):
    notification_type: NotificationType
    title: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
    url: str = "/dashboard"
    user_id: Optional[str] = None


class SendResult(CamelModel):
    success: bool = True
    sent: int = 0
    failed: int = 0


# ===== ADMIN BROADCASTS =====
class RecipientError(CamelModel):
    email: str
    error: str


class SendRemindersRequest(CamelModel):
    send_to_all: bool = False
    user_ids: list[str] = []


class BulkSendResponse(CamelModel):
    success: bool = True
    total: int
    sent: int
    failed: int
    errors: list[RecipientError] = []


class CustomReminderRequest(CamelModel):
    subject: str = Field(..., min_length=1)
    email_content: str = Field(..., min_length=1)
    recipient_type: RecipientType = RecipientType.ALL
    recipient_user_ids: list[str] = []


class ScheduleEmailRequest(CustomReminderRequest):
    scheduled_for: dt.datetime


class ScheduledEmailResponse(CamelModel):
    id: uuid.UUID
    created_by: str
    subject: str
    email_content: str
    recipient_type: RecipientType
    recipient_user_ids: Optional[list[str]] = None
    scheduled_for: dt.datetime
    status: ScheduledEmailStatus
    sent_count: int = 0
    failed_count: int = 0
    error_details: Optional[dict] = None
    processed_at: Optional[dt.datetime] = None
    created_at: dt.datetime


class ProcessScheduledResponse(CamelModel):
    processed: int
    sent: int
    failed: int


# ===== AUTOMATED REMINDERS =====
class ReminderTally(CamelModel):
    sent: int = 0
    failed: int = 0


class ReminderRunResponse(CamelModel):
    session_reminders: ReminderTally
    reflection_reminders: ReminderTally
    cpd_activity_reminders: ReminderTally
    cpd_deadline_reminders: ReminderTally
    errors: list[str] = []
    timestamp: dt.datetime
