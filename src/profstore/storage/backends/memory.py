"""
In-process backend backed by a dict.

Useful for tests and single-process development servers. Expired keys are
dropped lazily when they are read.
"""

import threading
import time

from profstore.core.config import get_logger
from profstore.storage.backends.base import CacheBackend

logger = get_logger("storage.backends.memory")


class MemoryBackend(CacheBackend):
    """Thread-safe dict of key -> (value, deadline)."""

    scheme = "memory"
    supports_prefix_delete = True

    def __init__(self, dsn: str = "memory://", username: str = "", password: str = ""):
        self.dsn = dsn
        self._items: dict[str, tuple[bytes, float | None]] = {}
        self._lock = threading.RLock()

    @staticmethod
    def _deadline(expiration: int) -> float | None:
        return time.monotonic() + expiration if expiration > 0 else None

    def _live_value(self, key: str) -> bytes | None:
        item = self._items.get(key)
        if item is None:
            return None
        value, deadline = item
        if deadline is not None and deadline <= time.monotonic():
            del self._items[key]
            return None
        return value

    def get(self, key: str) -> bytes | None:
        with self._lock:
            return self._live_value(key)

    def set(self, key: str, value: bytes, expiration: int = 0) -> bool:
        with self._lock:
            self._items[key] = (value, self._deadline(expiration))
        return True

    def append(self, key: str, value: bytes, expiration: int = 0) -> bool:
        with self._lock:
            current = self._live_value(key) or b""
            self._items[key] = (current + value, self._deadline(expiration))
        return True

    def flush(self) -> bool:
        with self._lock:
            self._items.clear()
        return True

    def delete_prefix(self, prefix: str) -> bool:
        with self._lock:
            doomed = [key for key in self._items if key.startswith(prefix)]
            for key in doomed:
                del self._items[key]
        logger.debug(f"Deleted {len(doomed)} keys with prefix {prefix!r}")
        return True

    def keys(self) -> list[str]:
        """Live keys, mostly for inspection in tests."""
        with self._lock:
            return [key for key in list(self._items) if self._live_value(key) is not None]

    def __repr__(self) -> str:
        return f"MemoryBackend(items={len(self._items)})"
