"""Application configuration via pydantic-settings."""

from __future__ import annotations

from datetime import time
from functools import lru_cache
from typing import List, Literal, Optional
from zoneinfo import ZoneInfo

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Venue Portal"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 4

    # Database
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "venue_portal"
    postgres_password: str = Field(default="venue_portal_secret")
    postgres_db: str = "venue_portal"
    db_pool_size: int = 20
    db_max_overflow: int = 10

    @computed_field
    @property
    def database_url(self) -> str:
        """Async PostgreSQL connection URL."""
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # Redis (rate limiting)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    redis_db: int = 0

    @computed_field
    @property
    def redis_url(self) -> str:
        """Redis connection URL."""
        auth = f":{self.redis_password}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"

    # JWT (tokens are issued by the identity provider, we only verify them)
    jwt_secret_key: str = Field(default="your-super-secret-key-change-in-production")
    jwt_algorithm: str = "HS256"
    jwt_audience: Optional[str] = None

    # Email (SendGrid)
    sendgrid_api_key: Optional[str] = None
    email_from_address: str = "noreply@venueportal.local"
    email_from_name: str = "Venue Portal"
    approval_notify_email: Optional[str] = None

    # CORS
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Rate Limiting
    booking_requests_per_minute: int = 10

    # Scheduling policy
    timezone: str = "Asia/Kolkata"
    min_days_co_curricular: int = 30
    min_days_open_all: int = 20
    min_days_closed_club: int = 1
    weekday_opening_time: time = time(16, 0)
    weekend_opening_time: time = time(8, 0)
    co_curricular_limit: int = 2

    # Same-cohort conflict rule, superseded by venue-only conflicts.
    enforce_group_conflicts: bool = False

    @property
    def tzinfo(self) -> ZoneInfo:
        """Local timezone used for operating hours and semesters."""
        return ZoneInfo(self.timezone)

    @property
    def min_days_by_event_type(self) -> dict[str, int]:
        """Advance-notice thresholds keyed by event type."""
        return {
            "co_curricular": self.min_days_co_curricular,
            "open_all": self.min_days_open_all,
            "closed_club": self.min_days_closed_club,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
