from typing import Optional, List
from sqlalchemy.orm import Session
from sqlalchemy import desc
from yello_admin.models.cron_log import CronLog
from datetime import datetime


class CronLogService:
    """Append-only store for scheduler run outcomes"""

    def create_log(
        self,
        db: Session,
        level: str,
        message: str,
        meta: Optional[dict] = None,
    ) -> CronLog:
        """Create a cron log entry"""
        log = CronLog(level=level, message=message, meta=meta)

        db.add(log)
        try:
            db.commit()
            db.refresh(log)
        except Exception:
            db.rollback()
            raise
        return log

    def get_logs(
        self,
        db: Session,
        level: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 100,
        skip: int = 0,
    ) -> List[CronLog]:
        """Query cron logs with filters, newest first"""
        query = db.query(CronLog)

        if level is not None:
            query = query.filter(CronLog.level == level)
        if start_date is not None:
            query = query.filter(CronLog.created_at >= start_date)
        if end_date is not None:
            query = query.filter(CronLog.created_at <= end_date)

        return (
            query.order_by(desc(CronLog.created_at), desc(CronLog.id))
            .offset(max(0, skip))
            .limit(max(1, min(limit, 1000)))
            .all()
        )
