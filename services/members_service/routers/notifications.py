"""
Notification preference endpoints (email types and the push subscription).
"""

from fastapi import APIRouter, Depends, HTTPException, status
from libs.auth.models import OwnerContext
from libs.db.session import get_async_db
from services.members_service.schemas import (
    EmailPreferencesUpdate,
    NotificationPreferencesResponse,
    PushSubscriptionUpdate,
)
from services.members_service.services.owner import get_owner_context, get_profile
from services.members_service.services.preferences import (
    NotificationPreferences,
    delete_push_subscription,
    load_preferences,
    save_email_types,
    save_push_subscription,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _to_response(prefs: NotificationPreferences) -> NotificationPreferencesResponse:
    return NotificationPreferencesResponse(
        email_types=prefs.email_types,
        push_types=prefs.push_types,
        email_enabled=prefs.email_enabled,
        push_enabled=prefs.push_enabled,
        push_subscribed=prefs.push_subscribed,
    )


@router.get("/preferences", response_model=NotificationPreferencesResponse)
async def get_preferences(
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Current email and push selections. Obsolete stored values are dropped
    and the cleaned lists saved.
    """
    profile = await get_profile(db, owner.user_id)
    return _to_response(await load_preferences(db, profile))


@router.put("/preferences/email", response_model=NotificationPreferencesResponse)
async def update_email_preferences(
    payload: EmailPreferencesUpdate,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    profile = await get_profile(db, owner.user_id)
    await save_email_types(db, profile, payload.types)
    return _to_response(await load_preferences(db, profile))


@router.put("/push-subscription", response_model=NotificationPreferencesResponse)
async def update_push_subscription(
    payload: PushSubscriptionUpdate,
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    try:
        await save_push_subscription(db, owner.user_id, payload.subscription, payload.types)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    profile = await get_profile(db, owner.user_id)
    return _to_response(await load_preferences(db, profile))


@router.delete("/push-subscription", status_code=status.HTTP_204_NO_CONTENT)
async def remove_push_subscription(
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    if not await delete_push_subscription(db, owner.user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="No push subscription found"
        )
