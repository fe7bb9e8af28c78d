"""
Core module - Configuration, errors, and type definitions.
"""

from profstore.core.config import settings, setup_logging, get_logger
from profstore.core.errors import (
    ConfigurationError,
    CyclicDataError,
    ProfstoreError,
    UnknownBackendError,
)
from profstore.core.types import Profile, ProfileRecord, ProfileSummary

__all__ = [
    "settings",
    "setup_logging",
    "get_logger",
    "ConfigurationError",
    "CyclicDataError",
    "ProfstoreError",
    "UnknownBackendError",
    "Profile",
    "ProfileRecord",
    "ProfileSummary",
]
