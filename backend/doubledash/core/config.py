"""
Application configuration.
All values loaded from environment variables or a local .env file.
"""
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    APP_NAME: str = "DoubleDash Analytics"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or console

    # Calendar policy used for month/week bucketing
    # Any IANA zone name; activities are bucketed in this zone, not their own
    ANALYTICS_TIMEZONE: str = "UTC"
    WEEK_START_DAY: str = "sunday"

    # Analytics defaults
    WEEKLY_WINDOW_WEEKS: int = 12
    YEARLY_GOAL_MILES: float = 800.0

    # What to do with activities whose start_date cannot be parsed: raise or skip
    INVALID_DATE_POLICY: str = "raise"

    # Host-layer activity cache
    ACTIVITY_CACHE_TTL_SECONDS: int = 300

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
