"""Profile, usage and credential progress endpoints for the signed-in coach."""

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser, OwnerContext
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.members_service.schemas import (
    LatestEntryDateResponse,
    ProfileResponse,
    ProfileUpdate,
    ProgressResponse,
    UsageResponse,
)
from services.members_service.services.activity import (
    fetch_most_recent_entry_date,
    get_cce_hours,
    get_coaching_hours,
)
from services.members_service.services.credentials import compute_progress
from services.members_service.services.owner import (
    get_or_create_profile,
    get_owner_context,
    get_profile,
)
from services.members_service.services.usage import (
    check_permission,
    get_usage_progress,
    get_user_usage,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["profile"])
logger = get_logger(__name__)


@router.get("/profile/me", response_model=ProfileResponse)
async def get_my_profile(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    return await get_or_create_profile(db, current_user)


@router.patch("/profile/me", response_model=ProfileResponse)
async def update_my_profile(
    updates: ProfileUpdate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    profile = await get_or_create_profile(db, current_user)
    for field, value in updates.model_dump(exclude_unset=True).items():
        setattr(profile, field, value)
    await db.commit()
    await db.refresh(profile)
    return profile


@router.post("/profile/me/heartbeat", status_code=status.HTTP_204_NO_CONTENT)
async def heartbeat(
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    """Record that the coach has the app open; feeds the admin online list."""
    profile = await get_profile(db, owner.user_id)
    profile.last_seen_at = utc_now()
    await db.commit()


@router.get("/usage", response_model=UsageResponse)
async def get_usage(
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    usage = await get_user_usage(db, owner.user_id)
    permission = check_permission(usage)
    progress = get_usage_progress(usage)
    return UsageResponse(
        total_entries=usage.total_entries,
        cpd_count=usage.cpd_count,
        session_count=usage.session_count,
        is_subscribed=usage.is_subscribed,
        limit=usage.limit,
        remaining=usage.remaining,
        plan=usage.plan,
        percentage=progress.percentage,
        color=progress.color,
        show_warning=progress.show_warning,
        can_add=permission.can_add,
        reason=permission.reason,
    )


@router.get("/progress", response_model=ProgressResponse)
async def get_progress(
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    profile = await get_profile(db, owner.user_id)
    progress = compute_progress(
        profile.icf_level.value,
        coaching_hours=await get_coaching_hours(db, owner.user_id),
        cpd_hours=await get_cce_hours(db, owner.user_id),
    )
    return ProgressResponse(
        current_level=progress.current_level,
        next_level=progress.next_level,
        coaching_hours=progress.coaching_hours,
        cpd_hours=progress.cpd_hours,
        required_coaching_hours=progress.required_coaching_hours,
        required_training_hours=progress.required_training_hours,
        coaching_percent=progress.coaching_percent,
        training_percent=progress.training_percent,
        renewal_cce_hours=progress.renewal_cce_hours,
        ready=progress.ready,
    )


@router.get("/entries/latest-date", response_model=LatestEntryDateResponse)
async def get_latest_entry_date(
    owner: OwnerContext = Depends(get_owner_context),
    db: AsyncSession = Depends(get_async_db),
):
    """Most recent logged date, used to seed date pickers."""
    return LatestEntryDateResponse(
        latest_date=await fetch_most_recent_entry_date(db, owner.user_id)
    )
