"""
Configuration management for profstore.

Uses pydantic-settings for environment variable binding.
All settings can be overridden via environment variables with PROFSTORE_ prefix.
"""

import logging
import sys
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable binding."""

    model_config = SettingsConfigDict(
        env_prefix="PROFSTORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================
    # Backend Connection
    # ==========================================
    dsn: str = "memory://"
    """Backend data source name, e.g. redis://localhost:6379/0."""

    username: str = ""
    password: str = ""

    # ==========================================
    # Storage Layout
    # ==========================================
    lifetime: int = 86400
    """Seconds before a stored profile and the index expire. 0 disables expiry."""

    key_prefix: str = "sf_profiler_"
    """Namespace prefix shared by item keys and the index key."""

    max_key_length: int = 250
    """Largest key (in bytes) the cache backends accept."""

    # ==========================================
    # Logging
    # ==========================================
    log_level: str = "INFO"
    log_file: Path | None = None


# Global settings instance
settings = Settings()


def setup_logging(level: str | None = None) -> None:
    """Configure application logging."""
    log_level = level or settings.log_level

    handlers: list[logging.Handler] = [
        logging.StreamHandler(sys.stdout),
    ]

    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file))

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        handlers=handlers,
    )

    # Quiet noisy libraries
    logging.getLogger("redis").setLevel(logging.WARNING)
    logging.getLogger("diskcache").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name."""
    return logging.getLogger(f"profstore.{name}")
