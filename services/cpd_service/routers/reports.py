"""Admin-only annual report download."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response
from libs.auth.models import OwnerContext
from libs.common.datetime_utils import utc_today
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.cpd_service.models import CPDEntry
from services.cpd_service.services.report import render_report, report_filename
from services.members_service.services.owner import get_profile, require_admin
from services.sessions_service.models import CoachingSession
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/admin", tags=["admin"])
logger = get_logger(__name__)


@router.get("/users/{user_id}/report")
async def download_user_report(
    user_id: str,
    year: Optional[int] = None,
    admin: OwnerContext = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """A coach's sessions and CPD for one calendar year as an HTML file."""
    profile = await get_profile(db, user_id)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
        )
    year = year or utc_today().year
    start, end = date(year, 1, 1), date(year, 12, 31)

    sessions = (
        await db.execute(
            select(CoachingSession)
            .where(
                CoachingSession.user_id == user_id,
                CoachingSession.date >= start,
                CoachingSession.date <= end,
            )
            .order_by(CoachingSession.date)
        )
    ).scalars().all()
    entries = (
        await db.execute(
            select(CPDEntry)
            .where(
                CPDEntry.user_id == user_id,
                CPDEntry.activity_date >= start,
                CPDEntry.activity_date <= end,
            )
            .order_by(CPDEntry.activity_date)
        )
    ).scalars().all()

    filename = report_filename(profile.name or profile.email or "User", year)
    logger.info(f"Admin {admin.user_id} exported {filename}")
    return Response(
        content=render_report(profile, year, sessions, entries),
        media_type="text/html; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
