"""Notification preference storage.

Stored lists can outlive the options offered in the app, so every read
prunes unknown values and persists the pruned list.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Optional

from libs.common.logging import get_logger
from services.members_service.models import NotificationType, Profile, PushSubscription
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

VALID_NOTIFICATION_TYPES = tuple(t.value for t in NotificationType)


def filter_notification_types(values: Any) -> list[str]:
    """Keep only known notification types, in stored order, without repeats.

    Accepts a list or its JSON-encoded form; anything else yields ``[]``.
    """
    if isinstance(values, str):
        try:
            values = json.loads(values)
        except ValueError:
            return []
    if not isinstance(values, (list, tuple)):
        return []

    cleaned: list[str] = []
    for value in values:
        if isinstance(value, NotificationType):
            value = value.value
        if value in VALID_NOTIFICATION_TYPES and value not in cleaned:
            cleaned.append(value)
    return cleaned


@dataclass
class NotificationPreferences:
    email_types: list[str] = field(default_factory=list)
    push_types: list[str] = field(default_factory=list)
    push_subscribed: bool = False

    @property
    def push_enabled(self) -> bool:
        return bool(self.push_types)

    @property
    def email_enabled(self) -> bool:
        return bool(self.email_types)


async def get_push_subscription(
    db: AsyncSession, user_id: str
) -> Optional[PushSubscription]:
    result = await db.execute(
        select(PushSubscription).where(PushSubscription.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def load_preferences(db: AsyncSession, profile: Profile) -> NotificationPreferences:
    """Read both preference lists, writing back any that needed pruning."""
    changed = False

    stored_email = profile.email_notification_types
    email_types = filter_notification_types(stored_email)
    if email_types != stored_email:
        profile.email_notification_types = email_types
        changed = True

    subscription = await get_push_subscription(db, profile.user_id)
    push_types: list[str] = []
    if subscription:
        stored_push = subscription.notification_types
        push_types = filter_notification_types(stored_push)
        if push_types != stored_push:
            subscription.notification_types = push_types
            changed = True

    if changed:
        logger.info(f"Pruned obsolete notification types for user {profile.user_id}")
        await db.commit()

    return NotificationPreferences(
        email_types=email_types,
        push_types=push_types,
        push_subscribed=subscription is not None,
    )


async def save_email_types(
    db: AsyncSession, profile: Profile, types: list[str]
) -> list[str]:
    cleaned = filter_notification_types(types)
    profile.email_notification_types = cleaned
    await db.commit()
    return cleaned


async def save_push_subscription(
    db: AsyncSession,
    user_id: str,
    subscription_info: Optional[dict],
    types: list[str],
) -> PushSubscription:
    """Create or update the user's push subscription row.

    ``subscription_info`` may be omitted to change only the types of an
    existing subscription.
    """
    cleaned = filter_notification_types(types)
    subscription = await get_push_subscription(db, user_id)
    if subscription is None:
        if not subscription_info:
            raise ValueError("A push subscription is required to enable push notifications")
        subscription = PushSubscription(
            user_id=user_id, subscription=subscription_info, notification_types=cleaned
        )
        db.add(subscription)
    else:
        if subscription_info:
            subscription.subscription = subscription_info
        subscription.notification_types = cleaned

    await db.commit()
    await db.refresh(subscription)
    return subscription


async def delete_push_subscription(db: AsyncSession, user_id: str) -> bool:
    subscription = await get_push_subscription(db, user_id)
    if not subscription:
        return False
    await db.delete(subscription)
    await db.commit()
    return True
