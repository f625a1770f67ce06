# Import all models so they're registered with Base.metadata
from yello_admin.models.announcement import Announcement
from yello_admin.models.cron_log import CronLog

__all__ = [
    "Announcement",
    "CronLog",
]
