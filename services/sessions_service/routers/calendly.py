"""Upcoming Calendly bookings not yet logged as sessions."""

from typing import List

from fastapi import APIRouter, Depends
from libs.auth.models import OwnerContext
from libs.common.config import get_settings
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.members_service.services.owner import get_owner_context, get_profile
from services.sessions_service.models import CoachingSession
from services.sessions_service.schemas import CalendlyEventResponse
from services.sessions_service.services.calendly import fetch_upcoming_bookings
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/calendly", tags=["calendly"])
logger = get_logger(__name__)


@router.get("/events", response_model=List[CalendlyEventResponse])
async def list_calendly_events(
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Upcoming bookings for the coach's Calendly account.

    The coach's own token wins over the deployment-wide one. Without either,
    the list is simply empty. Bookings already logged are left out.
    """
    profile = await get_profile(db, owner.user_id)
    token = profile.calendly_access_token if profile else None
    token = token or get_settings().CALENDLY_API_TOKEN
    if not token:
        logger.debug(f"No Calendly token for user {owner.user_id}")
        return []

    logged = set(
        (
            await db.execute(
                select(CoachingSession.calendly_booking_id).where(
                    CoachingSession.user_id == owner.user_id,
                    CoachingSession.calendly_booking_id.is_not(None),
                )
            )
        ).scalars()
    )
    return await fetch_upcoming_bookings(token, logged)
