from pydantic import BaseModel, Field
from datetime import datetime
from typing import Any, Optional


class VisibilityResult(BaseModel):
    timestamp: str
    activated_count: int = 0
    deactivated_count: int = 0
    error: Optional[str] = Field(None)


class CronLogResponse(BaseModel):
    id: int
    level: str
    message: str
    meta: Optional[dict[str, Any]] = Field(None)
    created_at: Optional[datetime] = Field(None)

    class Config:
        from_attributes = True


class SchedulerStatus(BaseModel):
    running: bool
    interval_minutes: Optional[int] = Field(None)
    run_count: int = 0
    last_run: Optional[str] = Field(None)
    last_result: Optional[VisibilityResult] = Field(None)
