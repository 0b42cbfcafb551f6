"""
Automated reminder run, triggered daily by the scheduler.

For each coach four checks run, each gated by that coach's push and email
preferences:

1. Session logging: no session dated within the last 7 days.
2. Post-session reflection: a session created in the last 2 hours has no notes.
3. CPD activity: no CPD activity dated within the last 14 days.
4. CPD deadline: the renewal date is 90, 75, 50 or 25 days away (give or take a day).
"""

import datetime as dt
from dataclasses import dataclass, field
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.common.emails.core import send_email
from libs.common.logging import get_logger
from services.communications_service.services.push import PushNotConfigured, send_to_subscriptions
from services.communications_service.templates.reminders import notification_email
from services.cpd_service.models import CPDEntry
from services.members_service.models import NotificationType, Profile
from services.members_service.services.owner import get_profile
from services.members_service.services.preferences import (
    get_push_subscription,
    load_preferences,
)
from services.sessions_service.models import CoachingSession
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

SESSION_GAP_DAYS = 7
CPD_GAP_DAYS = 14
REFLECTION_WINDOW = dt.timedelta(hours=2)
RENEWAL_MILESTONES = (90, 75, 50, 25)
RENEWAL_PERIOD_DAYS = 365


@dataclass
class Tally:
    sent: int = 0
    failed: int = 0


@dataclass
class ReminderRun:
    session_reminders: Tally = field(default_factory=Tally)
    reflection_reminders: Tally = field(default_factory=Tally)
    cpd_activity_reminders: Tally = field(default_factory=Tally)
    cpd_deadline_reminders: Tally = field(default_factory=Tally)
    errors: list[str] = field(default_factory=list)
    timestamp: dt.datetime = field(default_factory=utc_now)


def renewal_milestone_due(days_until: int) -> bool:
    return any(m - 1 <= days_until <= m + 1 for m in RENEWAL_MILESTONES)


def renewal_progress_percent(days_until: int) -> int:
    """How far through a one-year renewal window the coach is."""
    return round((1 - days_until / RENEWAL_PERIOD_DAYS) * 100)


class _Recipient:
    """One coach's delivery channels for this run."""

    def __init__(self, profile: Profile, email_types, push_types, subscription):
        self.profile = profile
        self.email_types = email_types
        self.push_types = push_types
        self.subscription = subscription

    def wants(self, notification_type: NotificationType) -> bool:
        return (
            notification_type.value in self.email_types
            or notification_type.value in self.push_types
        )

    async def notify(
        self,
        notification_type: NotificationType,
        title: str,
        body: str,
        path: str,
        tally: Tally,
    ) -> None:
        if notification_type.value in self.push_types and self.subscription:
            try:
                sent, failed = send_to_subscriptions(
                    [self.subscription], notification_type.value, title, body, path
                )
            except PushNotConfigured:
                sent, failed = 0, 1
            tally.sent += sent
            tally.failed += failed

        if notification_type.value in self.email_types and self.profile.email:
            email = notification_email(title, body, path, self.profile.name)
            ok = await send_email(
                to_email=self.profile.email,
                subject=email.subject,
                body=email.text,
                html_body=email.html,
            )
            if ok:
                tally.sent += 1
            else:
                tally.failed += 1


async def _last_session_date(db: AsyncSession, user_id: str) -> Optional[dt.date]:
    return await db.scalar(
        select(func.max(CoachingSession.date)).where(CoachingSession.user_id == user_id)
    )


async def _last_cpd_date(db: AsyncSession, user_id: str) -> Optional[dt.date]:
    return await db.scalar(
        select(func.max(CPDEntry.activity_date)).where(CPDEntry.user_id == user_id)
    )


async def _session_missing_notes(
    db: AsyncSession, user_id: str, since: dt.datetime
) -> Optional[CoachingSession]:
    result = await db.execute(
        select(CoachingSession)
        .where(
            CoachingSession.user_id == user_id,
            CoachingSession.created_at >= since,
            or_(CoachingSession.notes.is_(None), func.trim(CoachingSession.notes) == ""),
        )
        .order_by(CoachingSession.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def _check_profile(
    db: AsyncSession, profile: Profile, run: ReminderRun, now: dt.datetime
) -> None:
    preferences = await load_preferences(db, profile)
    subscription = (
        await get_push_subscription(db, profile.user_id) if preferences.push_types else None
    )
    recipient = _Recipient(
        profile, preferences.email_types, preferences.push_types, subscription
    )
    today = now.date()

    if recipient.wants(NotificationType.SESSION_LOGGING):
        last = await _last_session_date(db, profile.user_id)
        if last is None or last < today - dt.timedelta(days=SESSION_GAP_DAYS):
            await recipient.notify(
                NotificationType.SESSION_LOGGING,
                "Session Logging Reminder",
                "You haven't logged a coaching session in 7 days. "
                "Don't forget to log your recent sessions!",
                "/dashboard/sessions/log",
                run.session_reminders,
            )

    if recipient.wants(NotificationType.POST_SESSION_REFLECTION):
        session = await _session_missing_notes(db, profile.user_id, now - REFLECTION_WINDOW)
        if session is not None:
            await recipient.notify(
                NotificationType.POST_SESSION_REFLECTION,
                "Add Session Notes",
                "You logged a session but didn't add notes. Consider adding "
                "reflection notes while it's fresh in your mind!",
                f"/dashboard/sessions/edit/{session.id}",
                run.reflection_reminders,
            )

    if recipient.wants(NotificationType.CPD_ACTIVITY):
        last = await _last_cpd_date(db, profile.user_id)
        if last is None or last < today - dt.timedelta(days=CPD_GAP_DAYS):
            await recipient.notify(
                NotificationType.CPD_ACTIVITY,
                "CPD Activity Reminder",
                "You haven't logged any CPD activities in 14 days. "
                "Keep your professional development on track!",
                "/dashboard/cpd/log",
                run.cpd_activity_reminders,
            )

    if profile.cpd_renewal_date and recipient.wants(NotificationType.CPD_DEADLINE):
        days_until = (profile.cpd_renewal_date - today).days
        if renewal_milestone_due(days_until):
            percent = renewal_progress_percent(days_until)
            await recipient.notify(
                NotificationType.CPD_DEADLINE,
                "CPD Deadline Reminder",
                f"Your CPD renewal deadline is in {days_until} days ({percent}% of the way "
                "through your renewal period). Make sure you've logged all your required hours!",
                "/dashboard/cpd",
                run.cpd_deadline_reminders,
            )


async def run_reminder_checks(
    db: AsyncSession, now: Optional[dt.datetime] = None
) -> ReminderRun:
    now = now or utc_now()
    run = ReminderRun(timestamp=now)
    user_ids = (
        await db.execute(select(Profile.user_id).order_by(Profile.created_at))
    ).scalars().all()
    for user_id in user_ids:
        try:
            profile = await get_profile(db, user_id)
            await _check_profile(db, profile, run, now)
        except Exception as e:
            # One coach's failure must not stop the run
            logger.exception(f"Reminder checks failed for user {user_id}")
            await db.rollback()
            run.errors.append(f"User {user_id}: {e}")
    logger.info(
        f"Reminder run: sessions {run.session_reminders.sent}, "
        f"reflection {run.reflection_reminders.sent}, "
        f"cpd {run.cpd_activity_reminders.sent}, "
        f"deadline {run.cpd_deadline_reminders.sent}"
    )
    return run
