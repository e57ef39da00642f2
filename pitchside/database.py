"""Database connection and session management."""
import logging
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import declarative_base
from sqlalchemy.engine.url import make_url
from pitchside.config import get_settings

logger = logging.getLogger(__name__)

# Base class for models
Base = declarative_base()


def create_engine_from_settings() -> AsyncEngine:
    """Create the async engine for the remote store described by the settings."""
    settings = get_settings()
    parsed_url = make_url(settings.database_url)

    engine_kwargs = {
        "echo": False,
        "future": True,
        "pool_pre_ping": True,  # Verify connections before use
    }

    if parsed_url.drivername.startswith("sqlite"):
        logger.debug("Using SQLite (no pool sizing, no SSL)")
    else:
        # Hosted Postgres requires SSL outside local development
        if settings.environment == "production":
            engine_kwargs["connect_args"] = {"ssl": "require"}
            logger.debug("SSL connection enabled (ssl=require)")
        engine_kwargs["pool_size"] = max(1, settings.db_pool_size)
        engine_kwargs["max_overflow"] = max(0, settings.db_max_overflow)
        engine_kwargs["pool_recycle"] = 3600  # Recycle connections every hour

    try:
        engine = create_async_engine(settings.database_url, **engine_kwargs)
        logger.debug("Database engine created successfully")
    except Exception as e:
        logger.error(f"Failed to create database engine: {e}")
        raise
    return engine
