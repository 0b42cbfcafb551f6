"""
User-triggered notifications: a single email or push alert to the caller.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from libs.auth.models import OwnerContext
from libs.common.emails.core import send_email
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.communications_service.schemas import (
    SendNotificationEmailRequest,
    SendPushRequest,
    SendResult,
)
from services.communications_service.services.push import (
    send_to_subscriptions,
    subscribed_to,
    vapid_claims,
)
from services.communications_service.templates.reminders import notification_email
from services.members_service.services.owner import get_owner_context, get_profile
from services.members_service.services.preferences import (
    get_push_subscription,
    load_preferences,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["notifications"])
logger = get_logger(__name__)


@router.post("/notifications/send-email", response_model=SendResult)
async def send_notification_email(
    payload: SendNotificationEmailRequest,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Email the caller. The notification type must be enabled in their email
    preferences, except for test messages sent from the settings screen.
    """
    profile = await get_profile(db, owner.user_id)
    if not profile or not profile.email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No email address on file",
        )

    if not payload.is_test:
        preferences = await load_preferences(db, profile)
        if payload.notification_type.value not in preferences.email_types:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email notifications are not enabled for this type",
            )

    email = notification_email(payload.title, payload.body, "/dashboard", profile.name)
    ok = await send_email(
        to_email=profile.email,
        subject=email.subject,
        body=email.text,
        html_body=email.html,
    )
    if not ok:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to send email"
        )
    return SendResult(sent=1)


@router.post("/push/send", response_model=SendResult)
async def send_push_notification(
    payload: SendPushRequest,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    if payload.user_id and payload.user_id != owner.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot send notifications to other users",
        )
    # Fail before touching subscriptions when VAPID keys are missing
    vapid_claims()

    subscription = await get_push_subscription(db, owner.user_id)
    if not subscription:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="No push subscriptions found"
        )
    notification_type = payload.notification_type.value
    if not subscribed_to(subscription, notification_type):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No subscriptions found for this notification type",
        )

    sent, failed = send_to_subscriptions(
        [subscription], notification_type, payload.title, payload.body, payload.url
    )
    logger.info(f"Push to {owner.user_id}: {sent} sent, {failed} failed")
    return SendResult(success=sent > 0, sent=sent, failed=failed)
