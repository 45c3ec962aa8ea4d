"""
Configuration for the traffic statistics tools.

We use pydantic-settings (Pydantic v2) to load settings from:
- environment variables
- a local `.env` file in the project root
"""

from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application-wide settings.

    Environment variables (with defaults):

    - DATABASE_URL:           SQLAlchemy URL of the sample store (default: "sqlite:///./traffic.sqlite")
    - DEFAULT_INTERVAL:       Chart bucket width shorthand, e.g. "5m", "1h" (default: 5m)
    - CHART_ROWS:             Height of the insight chart in rows, at least 3 (default: 15)
    - CHART_WIDTH:            Fallback terminal width when it cannot be detected (default: 120)
    - HOURLY_MAX_GAP_SECONDS: Longest sample gap kept for hour-of-day analysis (default: 600)
    - HOURLY_MIN_SAMPLES:     Observations needed before an hour is summarized (default: 3)
    - REPORT_TIMEZONE:        IANA zone for hour-of-day classes and time labels (default: local)
    - LOG_LEVEL:              Logging level name (default: WARNING)
    """

    database_url: str = "sqlite:///./traffic.sqlite"

    default_interval: str = "5m"

    chart_rows: int = 15
    chart_width: int = 120

    hourly_max_gap_seconds: int = 600
    hourly_min_samples: int = 3

    # None means the process local zone.
    report_timezone: Optional[str] = None

    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("chart_width", "hourly_max_gap_seconds", "hourly_min_samples")
    @classmethod
    def must_be_positive(cls, v):
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("chart_rows")
    @classmethod
    def enough_rows(cls, v):
        # top, middle and zero axis labels need three distinct rows
        if v < 3:
            raise ValueError("must be at least 3")
        return v

    @field_validator("report_timezone", mode="before")
    @classmethod
    def parse_timezone(cls, v):
        """
        Accept an empty string as "use local time" and reject unknown zones
        early instead of failing halfway through a report.
        """
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown time zone {v!r}") from exc
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def tz(self) -> Optional[ZoneInfo]:
        """The configured report zone, or None for local time."""
        if self.report_timezone is None:
            return None
        return ZoneInfo(self.report_timezone)


# Single global settings object
settings = Settings()
