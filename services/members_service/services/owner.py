"""Request-scoped owner resolution and role checks.

Every owner-scoped route depends on ``get_owner_context``; the profile is
loaded (or provisioned on first sign-in) once and the resulting
``OwnerContext`` is passed down explicitly.
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from jose import JWTError
from libs.auth.dependencies import (
    bearer_matches_secret,
    decode_token,
    get_current_user,
    optional_security,
)
from libs.auth.models import AuthUser, OwnerContext
from libs.common.config import get_settings
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from pydantic import ValidationError
from services.members_service.models import Profile, UserRole
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def get_profile(db: AsyncSession, user_id: str) -> Optional[Profile]:
    result = await db.execute(select(Profile).where(Profile.user_id == user_id))
    return result.scalar_one_or_none()


async def get_or_create_profile(db: AsyncSession, user: AuthUser) -> Profile:
    profile = await get_profile(db, user.user_id)
    if profile:
        return profile

    profile = Profile(user_id=user.user_id, email=user.email)
    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    logger.info(f"Provisioned profile for user {user.user_id}")
    return profile


def owner_from_profile(profile: Profile) -> OwnerContext:
    return OwnerContext(
        user_id=profile.user_id,
        email=profile.email,
        name=profile.name,
        country=profile.country,
        currency=profile.currency or "USD",
        role=profile.role.value if profile.role else UserRole.USER.value,
    )


async def get_owner_context(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
) -> OwnerContext:
    profile = await get_or_create_profile(db, current_user)
    return owner_from_profile(profile)


async def require_admin(
    owner: OwnerContext = Depends(get_owner_context),
) -> OwnerContext:
    """Admins and super admins, as recorded on the profile."""
    if not owner.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return owner


async def require_super_admin(
    owner: OwnerContext = Depends(get_owner_context),
) -> OwnerContext:
    if owner.role != UserRole.SUPER_ADMIN.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Super admin privileges required",
        )
    return owner


async def require_admin_or_cron(
    credentials: Annotated[
        Optional[HTTPAuthorizationCredentials], Depends(optional_security)
    ],
    db: AsyncSession = Depends(get_async_db),
) -> Optional[OwnerContext]:
    """Accept either the cron secret or an admin's access token.

    Returns the admin's context, or ``None`` when the scheduler called.
    """
    if bearer_matches_secret(credentials, get_settings().CRON_SECRET_KEY):
        return None

    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized"
    )
    if not credentials:
        raise unauthorized
    try:
        user = decode_token(credentials.credentials)
    except (JWTError, ValidationError):
        raise unauthorized

    profile = await get_profile(db, user.user_id)
    if not profile or profile.role not in (UserRole.ADMIN, UserRole.SUPER_ADMIN):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return owner_from_profile(profile)
