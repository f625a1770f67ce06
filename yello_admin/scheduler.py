"""
Owned background timer for the announcement visibility job.

The FastAPI lifespan creates one VisibilityScheduler, starts it on startup and
stops it on shutdown. Ticks never overlap: APScheduler is told to keep a single
instance of the job, and run_once() holds a non-blocking lock so a manual
trigger arriving mid-tick is skipped too.
"""
import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.orm import Session

from yello_admin.schemas.cron import SchedulerStatus, VisibilityResult
from yello_admin.services.visibility import update_announcement_visibility

logger = logging.getLogger(__name__)

JOB_ID = "announcement_visibility"


class VisibilityScheduler:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        interval_minutes: int = 5,
        run_on_start: bool = True,
    ):
        self.session_factory = session_factory
        self.interval_minutes = interval_minutes
        self.run_on_start = run_on_start
        self._scheduler: Optional[BackgroundScheduler] = None
        self._run_lock = threading.Lock()
        # Guards the run stats below; written by the worker thread, read by health()
        self._state_lock = threading.Lock()
        self._run_count = 0
        self._last_run: Optional[datetime] = None
        self._last_result: Optional[VisibilityResult] = None

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        if self._scheduler is not None:
            logger.warning("Visibility scheduler already started")
            return

        scheduler = BackgroundScheduler(daemon=True, timezone=timezone.utc)
        job_kwargs = {}
        if self.run_on_start:
            # First tick right away, then every interval
            job_kwargs["next_run_time"] = datetime.now(timezone.utc)
        scheduler.add_job(
            func=self._tick,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id=JOB_ID,
            name="Announcement visibility update",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
            **job_kwargs,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info(
            f"Visibility scheduler started (interval: {self.interval_minutes} min)"
        )

    def stop(self) -> None:
        if self._scheduler is None:
            return
        self._scheduler.shutdown(wait=True)
        self._scheduler = None
        logger.info("Visibility scheduler stopped")

    def run_once(self, now: Optional[datetime] = None) -> Optional[VisibilityResult]:
        """Run one guarded tick. Returns None if a run is already in flight."""
        if not self._run_lock.acquire(blocking=False):
            logger.warning("Visibility update already running, skipping this tick")
            return None
        try:
            db = self.session_factory()
            try:
                result = update_announcement_visibility(db, now=now)
            finally:
                db.close()
            with self._state_lock:
                self._run_count += 1
                self._last_run = datetime.now(timezone.utc)
                self._last_result = result
            return result
        finally:
            self._run_lock.release()

    def _tick(self) -> None:
        try:
            self.run_once()
        except Exception as e:
            # Keep the timer alive; the next tick retries
            logger.exception(f"Error in visibility scheduler tick: {e}")

    def health(self) -> SchedulerStatus:
        with self._state_lock:
            run_count = self._run_count
            last_run = self._last_run
            last_result = self._last_result
        return SchedulerStatus(
            running=self.is_running,
            interval_minutes=self.interval_minutes,
            run_count=run_count,
            last_run=last_run.isoformat() if last_run else None,
            last_result=last_result,
        )
