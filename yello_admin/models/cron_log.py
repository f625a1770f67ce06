from sqlalchemy import JSON, Column, Integer, String, DateTime, Text
from sqlalchemy.sql import func
from yello_admin.database import Base


class CronLog(Base):
    __tablename__ = "cron_logs"

    id = Column(Integer, primary_key=True, index=True)
    level = Column(String, nullable=False, index=True)  # "info", "error"
    message = Column(Text, nullable=False)
    # e.g. {"now": ..., "activated_count": 2, "errors": [...]}
    meta = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
