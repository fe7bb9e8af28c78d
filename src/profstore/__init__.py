"""
profstore

Request profile storage on expiring key-value caches.
Stores flat profile records, keeps an append-only index for filtered
listing, and rebuilds parent/child profile trees on read.
"""

__version__ = "0.1.0"

from profstore.core.config import settings
from profstore.core.errors import ConfigurationError, CyclicDataError
from profstore.core.types import Profile, ProfileSummary
from profstore.storage.engine import ProfilerStorage

__all__ = [
    "settings",
    "ConfigurationError",
    "CyclicDataError",
    "Profile",
    "ProfileSummary",
    "ProfilerStorage",
]
