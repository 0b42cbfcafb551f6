"""Admin router - user directory, platform statistics, roles and subscriptions."""

from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from libs.auth.models import OwnerContext
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.members_service.schemas import (
    AdminUserResponse,
    OnlineUserResponse,
    PlanUpdate,
    RoleUpdate,
    SubscriptionRow,
    SubscriptionStatsResponse,
    UserActivityResponse,
    UserStatsResponse,
)
from services.members_service.services import admin as admin_service
from services.members_service.services.owner import require_admin, require_super_admin
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/admin", tags=["admin"])
logger = get_logger(__name__)


@router.get("/users", response_model=List[AdminUserResponse])
async def list_users(
    _admin: OwnerContext = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    rows = await admin_service.list_admin_users(db)
    return [asdict(row) for row in rows]


@router.get("/users/search", response_model=List[AdminUserResponse])
async def search_users(
    q: str = Query(..., min_length=1, description="Name or email fragment"),
    _admin: OwnerContext = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    rows = await admin_service.list_admin_users(db, search=q)
    return [asdict(row) for row in rows]


@router.get("/stats", response_model=UserStatsResponse)
async def get_stats(
    _admin: OwnerContext = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await admin_service.get_user_stats(db)


@router.get("/users/{user_id}/activity", response_model=UserActivityResponse)
async def get_user_activity(
    user_id: str,
    _admin: OwnerContext = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await admin_service.get_user_activity(db, user_id)


@router.patch("/users/{user_id}/role", response_model=AdminUserResponse)
async def update_user_role(
    user_id: str,
    payload: RoleUpdate,
    admin: OwnerContext = Depends(require_super_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Change a user's role. Super admins only."""
    profile = await admin_service.update_user_role(db, user_id, payload.role)
    logger.info(f"{admin.user_id} changed role of {user_id} to {payload.role.value}")
    return AdminUserResponse(
        user_id=profile.user_id,
        name=profile.name,
        email=profile.email,
        icf_level=profile.icf_level.value,
        country=profile.country,
        role=profile.role,
        created_at=profile.created_at,
        last_seen_at=profile.last_seen_at,
    )


@router.get("/online-users", response_model=List[OnlineUserResponse])
async def list_online_users(
    _admin: OwnerContext = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await admin_service.list_online_users(db)


@router.get("/subscriptions", response_model=List[SubscriptionRow])
async def list_subscriptions(
    search: Optional[str] = None,
    _admin: OwnerContext = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await admin_service.list_subscriptions(db, search=search)


@router.get("/subscriptions/stats", response_model=SubscriptionStatsResponse)
async def get_subscription_stats(
    _admin: OwnerContext = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await admin_service.get_subscription_stats(db)


@router.patch("/subscriptions/{user_id}/plan", response_model=SubscriptionRow)
async def update_subscription_plan(
    user_id: str,
    payload: PlanUpdate,
    admin: OwnerContext = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Manually move a user to another plan (support cases, comps)."""
    logger.info(f"{admin.user_id} set plan of {user_id} to {payload.plan.value}")
    return await admin_service.update_subscription_plan(db, user_id, payload.plan)
