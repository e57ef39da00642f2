"""Application configuration management."""
from pydantic import model_validator, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from sqlalchemy.engine.url import make_url, URL
from typing import Optional
import logging

SQLITE_LOCAL_URL = "sqlite+aiosqlite:///./pitchside.db"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = SQLITE_LOCAL_URL
    db_pool_size: int = 5
    db_max_overflow: int = 10

    # Application
    environment: str = "development"
    allowed_origins: str = "*"  # Comma-separated list of CORS origins
    log_dir: str = "logs"

    # Cache layer
    cache_ttl_seconds: int = 7 * 60
    cache_refresh_interval_seconds: int = 7 * 60  # Matches the TTL so expired entries are repopulated promptly
    cache_refresh_enabled: bool = True
    rankings_page_size: int = 250

    # VIP
    vip_duration_days: int = 30
    vip_default_color: str = "#ffffff"

    @field_validator("environment", mode="before")
    @classmethod
    def normalize_environment(cls, value):
        """Lower-case the environment name."""
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def cors_origins(self) -> list[str]:
        """Split the configured CORS origins."""
        origins = [item.strip() for item in self.allowed_origins.split(",") if item.strip()]
        return origins or ["*"]

    @model_validator(mode="after")
    def validate_all_config(self):
        """Validate cache settings and normalize Postgres URLs."""
        logger = logging.getLogger(__name__)

        if self.cache_ttl_seconds < 1:
            raise ValueError("cache_ttl_seconds must be at least 1 second")

        if self.cache_refresh_interval_seconds < 1:
            raise ValueError("cache_refresh_interval_seconds must be at least 1 second")

        if self.rankings_page_size < 1:
            raise ValueError("rankings_page_size must be at least 1")

        if self.vip_duration_days < 1:
            raise ValueError("vip_duration_days must be at least 1 day")

        url = self.database_url
        if not url:
            logger.warning("Empty DATABASE_URL, using SQLite fallback")
            self.database_url = SQLITE_LOCAL_URL
            return self

        parsed: Optional[URL] = None
        try:
            parsed = make_url(url)
        except Exception as e:  # pragma: no cover
            logger.error(f"Failed to parse DATABASE_URL: {e}")
            self.database_url = SQLITE_LOCAL_URL
            return self

        drivername = parsed.drivername
        if drivername.startswith("postgres") and "+asyncpg" not in drivername:
            old_drivername = drivername
            parsed = parsed.set(drivername="postgresql+asyncpg")
            logger.info(f"Driver normalized: {old_drivername} -> {parsed.drivername}")

        # render_as_string re-encodes special characters in the password
        self.database_url = parsed.render_as_string(hide_password=False)
        return self

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
