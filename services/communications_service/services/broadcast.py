"""
Admin email broadcasts: activity reminders, custom messages and the
scheduled-email queue.

One failing recipient never aborts a batch; failures are collected per
address and returned alongside the counts.
"""

import datetime as dt
from dataclasses import dataclass, field
from typing import Optional, Sequence

from libs.common.datetime_utils import utc_now
from libs.common.emails.core import send_email
from libs.common.errors import ValidationFailed
from libs.common.logging import get_logger
from services.communications_service.models import (
    RecipientType,
    ScheduledEmail,
    ScheduledEmailStatus,
)
from services.communications_service.templates.reminders import (
    RenderedEmail,
    render_custom_email,
    reminder_email,
)
from services.members_service.models import Profile
from services.members_service.services.activity import (
    ActivitySummary,
    get_activity_summaries,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

SEND_FAILED = "Failed to send email"


@dataclass
class BulkResult:
    total: int = 0
    sent: int = 0
    failed: int = 0
    errors: list[dict] = field(default_factory=list)

    @property
    def status(self) -> ScheduledEmailStatus:
        return ScheduledEmailStatus.SENT if self.failed == 0 else ScheduledEmailStatus.FAILED


async def resolve_recipients(
    db: AsyncSession,
    recipient_type: RecipientType,
    user_ids: Optional[Sequence[str]] = None,
) -> list[Profile]:
    """Profiles with an email address, either everyone or the selected users."""
    query = select(Profile).where(Profile.email.is_not(None)).order_by(Profile.created_at)
    if recipient_type == RecipientType.SELECTED:
        if not user_ids:
            raise ValidationFailed("No users specified")
        query = query.where(Profile.user_id.in_(list(user_ids)))
    result = await db.execute(query)
    return list(result.scalars().all())


async def _deliver(result: BulkResult, to_email: str, email: RenderedEmail) -> None:
    ok = await send_email(
        to_email=to_email, subject=email.subject, body=email.text, html_body=email.html
    )
    if ok:
        result.sent += 1
    else:
        result.failed += 1
        result.errors.append({"email": to_email, "error": SEND_FAILED})


async def send_activity_reminders(
    db: AsyncSession, recipients: Sequence[Profile]
) -> BulkResult:
    """The standard reminder email, personalised with each coach's activity."""
    summaries = await get_activity_summaries(db, [p.user_id for p in recipients])
    result = BulkResult(total=len(recipients))
    for profile in recipients:
        summary = summaries.get(profile.user_id, ActivitySummary())
        email = reminder_email(
            user_name=profile.name,
            last_activity_date=summary.last_activity_date,
            session_count=summary.session_count,
            cpd_hours=summary.cpd_hours,
        )
        await _deliver(result, profile.email, email)
    logger.info(f"Activity reminders: {result.sent} sent, {result.failed} failed")
    return result


async def send_custom_emails(
    db: AsyncSession,
    recipients: Sequence[Profile],
    subject: str,
    content: str,
) -> BulkResult:
    """Admin-written content with per-recipient placeholder substitution."""
    summaries = await get_activity_summaries(db, [p.user_id for p in recipients])
    result = BulkResult(total=len(recipients))
    for profile in recipients:
        summary = summaries.get(profile.user_id, ActivitySummary())
        email = render_custom_email(
            subject,
            content,
            user_name=profile.name,
            session_count=summary.session_count,
            cpd_hours=summary.cpd_hours,
            last_activity_date=summary.last_activity_date,
        )
        await _deliver(result, profile.email, email)
    logger.info(f"Custom emails: {result.sent} sent, {result.failed} failed")
    return result


def _error_details(result: BulkResult) -> Optional[dict]:
    return {"errors": result.errors} if result.errors else None


async def log_broadcast(
    db: AsyncSession,
    created_by: str,
    subject: str,
    content: str,
    recipient_type: RecipientType,
    recipient_user_ids: Optional[Sequence[str]],
    result: BulkResult,
) -> ScheduledEmail:
    """Record an immediate send in the scheduled-email history."""
    now = utc_now()
    record = ScheduledEmail(
        created_by=created_by,
        subject=subject,
        email_content=content,
        recipient_type=recipient_type,
        recipient_user_ids=list(recipient_user_ids or []) or None,
        scheduled_for=now,
        status=result.status,
        sent_count=result.sent,
        failed_count=result.failed,
        error_details=_error_details(result),
        processed_at=now,
    )
    db.add(record)
    await db.commit()
    await db.refresh(record)
    return record


async def schedule_email(
    db: AsyncSession,
    created_by: str,
    subject: str,
    content: str,
    recipient_type: RecipientType,
    recipient_user_ids: Optional[Sequence[str]],
    scheduled_for: dt.datetime,
) -> ScheduledEmail:
    if scheduled_for.tzinfo is None:
        scheduled_for = scheduled_for.replace(tzinfo=dt.timezone.utc)
    if scheduled_for <= utc_now():
        raise ValidationFailed("Scheduled time must be in the future")
    if recipient_type == RecipientType.SELECTED and not recipient_user_ids:
        raise ValidationFailed("No users specified")

    record = ScheduledEmail(
        created_by=created_by,
        subject=subject,
        email_content=content,
        recipient_type=recipient_type,
        recipient_user_ids=list(recipient_user_ids or []) or None,
        scheduled_for=scheduled_for,
        status=ScheduledEmailStatus.PENDING,
    )
    db.add(record)
    await db.commit()
    await db.refresh(record)
    logger.info(f"Scheduled email {record.id} for {scheduled_for.isoformat()}")
    return record


@dataclass
class ProcessResult:
    processed: int = 0
    sent: int = 0
    failed: int = 0


async def process_due_emails(
    db: AsyncSession, now: Optional[dt.datetime] = None
) -> ProcessResult:
    """Send every pending scheduled email whose time has come."""
    now = now or utc_now()
    due = (
        await db.execute(
            select(ScheduledEmail)
            .where(
                ScheduledEmail.status == ScheduledEmailStatus.PENDING,
                ScheduledEmail.scheduled_for <= now,
            )
            .order_by(ScheduledEmail.scheduled_for)
        )
    ).scalars().all()

    totals = ProcessResult()
    for record in due:
        try:
            recipients = await resolve_recipients(
                db, record.recipient_type, record.recipient_user_ids
            )
        except ValidationFailed as e:
            record.status = ScheduledEmailStatus.FAILED
            record.error_details = {"error": e.detail}
            record.processed_at = now
            await db.commit()
            continue

        result = await send_custom_emails(
            db, recipients, record.subject, record.email_content
        )
        record.status = result.status
        record.sent_count = result.sent
        record.failed_count = result.failed
        record.error_details = _error_details(result)
        record.processed_at = now
        await db.commit()

        totals.processed += 1
        totals.sent += result.sent
        totals.failed += result.failed

    if due:
        logger.info(
            f"Processed {totals.processed} scheduled emails: {totals.sent} sent, {totals.failed} failed"
        )
    return totals


async def list_scheduled_emails(db: AsyncSession, limit: int = 100) -> list[ScheduledEmail]:
    result = await db.execute(
        select(ScheduledEmail).order_by(ScheduledEmail.scheduled_for.desc()).limit(limit)
    )
    return list(result.scalars().all())
