"""
Cache backend capability - the only collaborator the storage engine talks to.

Implementations own their client handle and translate client exceptions
into failed results: get() returns None, the mutating calls return False.
Nothing backend-specific escapes to the engine.
"""

from abc import ABC, abstractmethod


class CacheBackend(ABC):
    """
    Abstract key-value cache with expiration and string append.

    Expiration is given in seconds; 0 means the key never expires.
    """

    scheme: str = ""
    """DSN scheme this backend registers under."""

    supports_prefix_delete: bool = False
    """Whether delete_prefix() can remove keys without flushing everything."""

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the stored value, or None on a miss or failure."""

    @abstractmethod
    def set(self, key: str, value: bytes, expiration: int = 0) -> bool:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def append(self, key: str, value: bytes, expiration: int = 0) -> bool:
        """
        Append ``value`` to the bytes stored at ``key``.

        A missing key is created. The expiration is reset to ``expiration``.
        """

    @abstractmethod
    def flush(self) -> bool:
        """Remove every key visible to this backend connection."""

    def delete_prefix(self, prefix: str) -> bool:
        """Remove every key starting with ``prefix``."""
        raise NotImplementedError(f"{type(self).__name__} cannot delete by prefix")

    def close(self) -> None:
        """Release the underlying client."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
