"""Daily automated reminder run."""

from dataclasses import asdict

from fastapi import APIRouter, Depends
from libs.auth.dependencies import require_reminder_cron
from libs.db.session import get_async_db
from services.communications_service.schemas import ReminderRunResponse
from services.communications_service.services.reminders import run_reminder_checks
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/reminders", tags=["reminders"])


@router.post(
    "/check-and-send",
    response_model=ReminderRunResponse,
    dependencies=[Depends(require_reminder_cron)],
)
async def check_and_send_reminders(db: AsyncSession = Depends(get_async_db)):
    run = await run_reminder_checks(db)
    return ReminderRunResponse(**asdict(run))
