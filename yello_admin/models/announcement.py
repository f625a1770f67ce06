import uuid
from sqlalchemy import JSON, Boolean, Column, DateTime, String
from yello_admin.database import Base
from sqlalchemy.sql import func


def _new_id() -> str:
    return str(uuid.uuid4())


class Announcement(Base):
    __tablename__ = "announcements"
    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), nullable=True, index=True)
    slug = Column(String, unique=True, nullable=False)
    bar_name = Column(String, nullable=True)
    type = Column(String, nullable=False, default="default")
    content = Column(JSON, nullable=True)
    background = Column(String, nullable=False, default="#FFFFFF")
    text_color = Column(String, nullable=False, default="#000000")
    is_sticky = Column(Boolean, nullable=False, default=False)
    is_closable = Column(Boolean, nullable=False, default=False)

    # Only the visibility job and manual admin toggles write this
    visibility = Column(Boolean, nullable=False, default=False, index=True)
    # The hosted table uses camelCase column names for the schedule
    scheduled_start = Column("scheduledStart", DateTime(timezone=True), nullable=True)
    scheduled_end = Column("scheduledEnd", DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
