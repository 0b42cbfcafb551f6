"""
Admin email broadcasts and the scheduled-email queue.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status
from libs.auth.models import OwnerContext
from libs.common.rate_limit import admin_limit
from libs.db.session import get_async_db
from services.communications_service.models import RecipientType
from services.communications_service.schemas import (
    BulkSendResponse,
    CustomReminderRequest,
    ProcessScheduledResponse,
    ScheduledEmailResponse,
    ScheduleEmailRequest,
    SendRemindersRequest,
)
from services.communications_service.services import broadcast
from services.members_service.services.owner import require_admin, require_admin_or_cron
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/admin", tags=["admin"])


def _bulk_response(result: broadcast.BulkResult) -> BulkSendResponse:
    return BulkSendResponse(
        total=result.total,
        sent=result.sent,
        failed=result.failed,
        errors=result.errors,
    )


@router.post("/send-reminders", response_model=BulkSendResponse)
@admin_limit
async def send_reminders(
    request: Request,
    payload: SendRemindersRequest,
    admin: OwnerContext = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Send the standard activity reminder to everyone or to selected users."""
    recipient_type = RecipientType.ALL if payload.send_to_all else RecipientType.SELECTED
    recipients = await broadcast.resolve_recipients(db, recipient_type, payload.user_ids)
    return _bulk_response(await broadcast.send_activity_reminders(db, recipients))


@router.post("/send-custom-reminders", response_model=BulkSendResponse)
@admin_limit
async def send_custom_reminders(
    request: Request,
    payload: CustomReminderRequest,
    admin: OwnerContext = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    recipients = await broadcast.resolve_recipients(
        db, payload.recipient_type, payload.recipient_user_ids
    )
    result = await broadcast.send_custom_emails(
        db, recipients, payload.subject, payload.email_content
    )
    await broadcast.log_broadcast(
        db,
        created_by=admin.user_id,
        subject=payload.subject,
        content=payload.email_content,
        recipient_type=payload.recipient_type,
        recipient_user_ids=payload.recipient_user_ids,
        result=result,
    )
    return _bulk_response(result)


@router.post(
    "/schedule-email",
    response_model=ScheduledEmailResponse,
    status_code=status.HTTP_201_CREATED,
)
async def schedule_email(
    payload: ScheduleEmailRequest,
    admin: OwnerContext = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await broadcast.schedule_email(
        db,
        created_by=admin.user_id,
        subject=payload.subject,
        content=payload.email_content,
        recipient_type=payload.recipient_type,
        recipient_user_ids=payload.recipient_user_ids,
        scheduled_for=payload.scheduled_for,
    )


@router.get("/scheduled-emails", response_model=List[ScheduledEmailResponse])
async def list_scheduled_emails(
    admin: OwnerContext = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await broadcast.list_scheduled_emails(db)


@router.api_route(
    "/process-scheduled-emails",
    methods=["GET", "POST"],
    response_model=ProcessScheduledResponse,
)
async def process_scheduled_emails(
    caller: Optional[OwnerContext] = Depends(require_admin_or_cron),
    db: AsyncSession = Depends(get_async_db),
):
    """Send due scheduled emails. Called by the scheduler or manually by an admin."""
    result = await broadcast.process_due_emails(db)
    return ProcessScheduledResponse(
        processed=result.processed, sent=result.sent, failed=result.failed
    )
