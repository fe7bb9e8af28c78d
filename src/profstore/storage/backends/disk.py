"""
On-disk backend built on diskcache.

DSN: diskcache:///var/cache/profstore

diskcache has no native append, so the read-concatenate-write happens
inside a cache transaction, which serializes it against other writers
of the same directory.
"""

import sqlite3
from pathlib import Path
from urllib.parse import urlparse

from diskcache import Cache, Timeout

from profstore.core.config import get_logger
from profstore.storage.backends.base import CacheBackend

logger = get_logger("storage.backends.disk")

_FAILURES = (Timeout, sqlite3.Error, OSError)


class DiskCacheBackend(CacheBackend):
    """diskcache.Cache wrapper storing raw bytes values."""

    scheme = "diskcache"
    supports_prefix_delete = True

    def __init__(self, dsn: str = "", username: str = "", password: str = "", directory: Path | None = None):
        self.dsn = dsn
        if directory is None:
            parsed = urlparse(dsn)
            directory = Path(parsed.netloc + parsed.path)
        self.directory = directory
        self._cache = Cache(str(directory))

    @staticmethod
    def _expire(expiration: int) -> int | None:
        return expiration if expiration > 0 else None

    def get(self, key: str) -> bytes | None:
        try:
            return self._cache.get(key)
        except _FAILURES as e:
            logger.warning(f"diskcache get failed for {key}: {e}")
            return None

    def set(self, key: str, value: bytes, expiration: int = 0) -> bool:
        try:
            return bool(self._cache.set(key, value, expire=self._expire(expiration)))
        except _FAILURES as e:
            logger.warning(f"diskcache set failed for {key}: {e}")
            return False

    def append(self, key: str, value: bytes, expiration: int = 0) -> bool:
        try:
            with self._cache.transact():
                current = self._cache.get(key, default=b"")
                return bool(self._cache.set(key, current + value, expire=self._expire(expiration)))
        except _FAILURES as e:
            logger.warning(f"diskcache append failed for {key}: {e}")
            return False

    def flush(self) -> bool:
        try:
            self._cache.clear()
            return True
        except _FAILURES as e:
            logger.warning(f"diskcache clear failed: {e}")
            return False

    def delete_prefix(self, prefix: str) -> bool:
        try:
            doomed = [key for key in self._cache.iterkeys() if isinstance(key, str) and key.startswith(prefix)]
            for key in doomed:
                self._cache.delete(key)
        except _FAILURES as e:
            logger.warning(f"diskcache delete by prefix {prefix!r} failed: {e}")
            return False
        logger.debug(f"Deleted {len(doomed)} keys with prefix {prefix!r}")
        return True

    def close(self) -> None:
        self._cache.close()

    def __repr__(self) -> str:
        return f"DiskCacheBackend(directory={str(self.directory)!r})"
