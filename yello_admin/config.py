from pydantic_settings import BaseSettings
from pydantic import ConfigDict, field_validator
import json


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./yello_admin.db"

    # Visibility scheduler
    SCHEDULER_ENABLED: bool = True
    VISIBILITY_INTERVAL_MINUTES: int = 5
    VISIBILITY_RUN_ON_START: bool = True

    LOG_LEVEL: str = "INFO"

    # JSON list or comma separated origins
    CORS_ORIGINS: str = "*"

    @field_validator("VISIBILITY_INTERVAL_MINUTES")
    @classmethod
    def check_interval(cls, v):
        if v < 1:
            raise ValueError("VISIBILITY_INTERVAL_MINUTES must be at least 1")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper()

    @property
    def cors_origin_list(self) -> list[str]:
        value = self.CORS_ORIGINS.strip()
        if value.startswith("["):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                raise ValueError(f"Invalid JSON in CORS_ORIGINS: {value}")
        return [origin.strip() for origin in value.split(",") if origin.strip()]

    model_config = ConfigDict(env_file=".env")


settings = Settings()
