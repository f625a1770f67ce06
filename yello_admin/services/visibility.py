"""Scheduled announcement visibility transitions.

Each run flips ``visibility`` on announcements whose schedule edge has been
reached:

* ``scheduled_start <= now`` and hidden  -> visible ("activate")
* ``scheduled_end <= now`` and visible   -> hidden  ("deactivate")

Both phases select the matching ids first and then update exactly those ids,
so a row edited between the read and the write is never swept up by a range
update. Phase failures are captured, logged and written to ``cron_logs``; they
never propagate to the caller, and the next run re-derives whatever was missed.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from yello_admin.models.announcement import Announcement
from yello_admin.schemas.cron import VisibilityResult
from yello_admin.services.cron_log_service import CronLogService

logger = logging.getLogger(__name__)

ACTIVATE = "activate"
DEACTIVATE = "deactivate"


class VisibilityJobError(Exception):
    """A backend call made by the visibility job failed."""

    operation = "backend"

    def __init__(self, phase: str, original: Exception):
        self.phase = phase
        self.original = original
        super().__init__(f"{self.operation} failed during {phase}: {original}")

    def to_meta(self) -> dict:
        return {
            "phase": self.phase,
            "operation": self.operation,
            "message": str(self.original),
        }


class SelectError(VisibilityJobError):
    operation = "select"


class UpdateError(VisibilityJobError):
    operation = "update"


def _select_ids(db: Session, phase: str, column, visibility: bool, now: datetime) -> list[str]:
    stmt = select(Announcement.id).where(
        column.is_not(None),
        column <= now,
        Announcement.visibility == visibility,
    )
    try:
        return list(db.execute(stmt).scalars().all())
    except SQLAlchemyError as e:
        db.rollback()
        raise SelectError(phase, e) from e


def _set_visibility(db: Session, phase: str, ids: list[str], visibility: bool) -> None:
    stmt = (
        update(Announcement)
        .where(Announcement.id.in_(ids))
        .values(visibility=visibility)
        .execution_options(synchronize_session=False)
    )
    try:
        db.execute(stmt)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise UpdateError(phase, e) from e


def _record_run(
    db: Session,
    result: VisibilityResult,
    ids_by_phase: dict[str, list[str]],
    errors: list[VisibilityJobError],
) -> None:
    level = "error" if errors else "info"
    message = (
        "Visibility update finished with errors"
        if errors
        else "Visibility update completed"
    )
    meta = {
        "now": result.timestamp,
        "activated_count": result.activated_count,
        "deactivated_count": result.deactivated_count,
        "activated_ids": ids_by_phase.get(ACTIVATE, []),
        "deactivated_ids": ids_by_phase.get(DEACTIVATE, []),
        "errors": [e.to_meta() for e in errors],
    }
    try:
        CronLogService().create_log(db=db, level=level, message=message, meta=meta)
    except SQLAlchemyError:
        logger.exception("Could not write cron log entry for visibility run")


def update_announcement_visibility(
    db: Session, now: Optional[datetime] = None
) -> VisibilityResult:
    """Run both transition phases once and return what changed."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    else:
        # SQLite drops the offset when binding, so compare in UTC
        now = now.astimezone(timezone.utc)

    logger.info(f"Running announcement visibility update at {now.isoformat()}")

    phases = (
        (ACTIVATE, Announcement.scheduled_start, True),
        (DEACTIVATE, Announcement.scheduled_end, False),
    )
    counts = {ACTIVATE: 0, DEACTIVATE: 0}
    ids_by_phase: dict[str, list[str]] = {}
    errors: list[VisibilityJobError] = []

    for phase, column, target in phases:
        try:
            ids = _select_ids(db, phase, column, not target, now)
            if ids:
                _set_visibility(db, phase, ids, target)
        except VisibilityJobError as e:
            logger.error(f"Visibility {phase} failed: {e}")
            errors.append(e)
            continue
        counts[phase] = len(ids)
        ids_by_phase[phase] = ids

    result = VisibilityResult(
        timestamp=now.isoformat(),
        activated_count=counts[ACTIVATE],
        deactivated_count=counts[DEACTIVATE],
        error="; ".join(str(e) for e in errors) or None,
    )
    logger.info(
        f"Visibility update done: activated={result.activated_count} "
        f"deactivated={result.deactivated_count} errors={len(errors)}"
    )
    _record_run(db, result, ids_by_phase, errors)
    return result
