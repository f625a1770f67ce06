from fastapi import APIRouter, Depends, HTTPException, Request
from starlette import status
from yello_admin.database import SessionLocal
from typing import Annotated, Optional, List
from datetime import datetime
from sqlalchemy.orm import Session
from yello_admin.services.cron_log_service import CronLogService
from yello_admin.schemas.cron import CronLogResponse, SchedulerStatus, VisibilityResult
from yello_admin.limits import limiter

router = APIRouter(prefix="/cron", tags=["cron"])


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


db_dependency = Annotated[Session, Depends(get_db)]


def _get_scheduler(request: Request):
    return getattr(request.app.state, "visibility_scheduler", None)


@router.get("/logs", response_model=List[CronLogResponse], status_code=status.HTTP_200_OK)
def get_cron_logs(
    db: db_dependency,
    level: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    limit: int = 100,
    skip: int = 0,
):
    """Scheduler run history, newest first"""
    return CronLogService().get_logs(
        db=db,
        level=level,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        skip=skip,
    )


@router.get("/status", response_model=SchedulerStatus, status_code=status.HTTP_200_OK)
def get_scheduler_status(request: Request):
    scheduler = _get_scheduler(request)
    if scheduler is None:
        return SchedulerStatus(running=False)
    return scheduler.health()


@router.post(
    "/visibility/run", response_model=VisibilityResult, status_code=status.HTTP_200_OK
)
@limiter.limit("5/minute")
def run_visibility_update(request: Request):
    """Run one visibility tick now instead of waiting for the timer"""
    scheduler = _get_scheduler(request)
    if scheduler is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Visibility scheduler is disabled",
        )
    result = scheduler.run_once()
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A visibility update is already running",
        )
    return result
