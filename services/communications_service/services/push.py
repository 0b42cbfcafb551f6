"""Web Push delivery through pywebpush with the deployment's VAPID keys."""

import json
from typing import Iterable

from libs.common.config import get_settings
from libs.common.errors import AppError
from libs.common.logging import get_logger
from pywebpush import WebPushException, webpush
from services.members_service.models import PushSubscription
from services.members_service.services.preferences import filter_notification_types

logger = get_logger(__name__)


class PushNotConfigured(AppError):
    code = "PUSH_NOT_CONFIGURED"


def vapid_claims() -> dict[str, str]:
    settings = get_settings()
    if not (settings.VAPID_PUBLIC_KEY and settings.VAPID_PRIVATE_KEY and settings.VAPID_EMAIL):
        raise PushNotConfigured("Push notifications are not configured")
    subject = settings.VAPID_EMAIL
    if not subject.startswith("mailto:"):
        subject = f"mailto:{subject}"
    return {"sub": subject}


def subscribed_to(subscription: PushSubscription, notification_type: str) -> bool:
    return notification_type in filter_notification_types(subscription.notification_types)


def send_push(subscription_info: dict, title: str, body: str, url: str = "/dashboard") -> bool:
    """Deliver one notification. Returns False when the push service rejects it."""
    claims = vapid_claims()
    payload = json.dumps({"title": title, "body": body, "url": url})
    try:
        webpush(
            subscription_info=subscription_info,
            data=payload,
            vapid_private_key=get_settings().VAPID_PRIVATE_KEY,
            vapid_claims=dict(claims),
        )
        return True
    except WebPushException as e:
        logger.warning(f"Push delivery failed: {e}")
        return False


def send_to_subscriptions(
    subscriptions: Iterable[PushSubscription],
    notification_type: str,
    title: str,
    body: str,
    url: str = "/dashboard",
) -> tuple[int, int]:
    """Push to every subscription opted into ``notification_type``; (sent, failed)."""
    sent = failed = 0
    for subscription in subscriptions:
        if not subscribed_to(subscription, notification_type):
            continue
        if send_push(subscription.subscription, title, body, url):
            sent += 1
        else:
            failed += 1
    return sent, failed
