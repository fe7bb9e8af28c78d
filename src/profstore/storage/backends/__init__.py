"""
Cache backends and the DSN registry that builds them.

Schemes registered by default:
- memory://         → MemoryBackend (in-process dict)
- redis://, rediss:// → RedisBackend
- diskcache:///dir  → DiskCacheBackend
"""

from urllib.parse import urlparse

from profstore.core.config import get_logger
from profstore.core.errors import UnknownBackendError
from profstore.storage.backends.base import CacheBackend
from profstore.storage.backends.disk import DiskCacheBackend
from profstore.storage.backends.memory import MemoryBackend
from profstore.storage.backends.redis_backend import RedisBackend

logger = get_logger("storage.backends")


class BackendRegistry:
    """
    Registry mapping DSN schemes to backend classes.

    Example:
        registry = BackendRegistry()
        registry.register("custom", CustomBackend)
        backend = registry.create("custom://host")
    """

    def __init__(self) -> None:
        self._backends: dict[str, type[CacheBackend]] = {}

    def register(self, scheme: str, backend_class: type[CacheBackend]) -> None:
        """Register a backend class for a DSN scheme."""
        self._backends[scheme] = backend_class

    def create(self, dsn: str, username: str = "", password: str = "") -> CacheBackend:
        """Create the backend responsible for ``dsn``."""
        scheme = urlparse(dsn).scheme
        if scheme not in self._backends:
            raise UnknownBackendError(
                f'Unsupported DSN "{dsn}". '
                f"Available schemes: {self.list_schemes()}"
            )
        backend = self._backends[scheme](dsn, username=username, password=password)
        logger.debug(f"Created {backend!r} for scheme {scheme}")
        return backend

    def list_schemes(self) -> list[str]:
        """List registered scheme names."""
        return list(self._backends.keys())


# Global registry with default backends
backend_registry = BackendRegistry()
backend_registry.register("memory", MemoryBackend)
backend_registry.register("redis", RedisBackend)
backend_registry.register("rediss", RedisBackend)
backend_registry.register("diskcache", DiskCacheBackend)


def create_backend(dsn: str, username: str = "", password: str = "") -> CacheBackend:
    """Create a backend from a DSN using the global registry."""
    return backend_registry.create(dsn, username=username, password=password)


__all__ = [
    "BackendRegistry",
    "CacheBackend",
    "DiskCacheBackend",
    "MemoryBackend",
    "RedisBackend",
    "backend_registry",
    "create_backend",
]
