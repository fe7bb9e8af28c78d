"""
Key naming for the profile store.

Every key is the namespace prefix followed by either a profile token or
the literal ``index``. Cache servers reject keys over 250 bytes, so names
are validated here instead of letting the backend fail later.
"""

from profstore.core.config import settings
from profstore.core.errors import ConfigurationError

INDEX_SUFFIX = "index"


class KeyNamer:
    """Derives and validates backend keys."""

    def __init__(self, prefix: str | None = None, max_length: int | None = None):
        self.prefix = settings.key_prefix if prefix is None else prefix
        self.max_length = max_length or settings.max_key_length
        # Fail at construction if even the index key cannot fit.
        self.index_key()

    def item_key(self, token: str) -> str:
        """Key under which the record for ``token`` is stored."""
        if token == INDEX_SUFFIX:
            raise ConfigurationError(
                f'The token "{token}" is reserved for the index key.',
                key=f"{self.prefix}{token}",
            )
        return self._validate(f"{self.prefix}{token}")

    def index_key(self) -> str:
        """Key of the shared index log."""
        return self._validate(f"{self.prefix}{INDEX_SUFFIX}")

    def _validate(self, key: str) -> str:
        length = len(key.encode("utf-8"))
        if length > self.max_length:
            raise ConfigurationError(
                f'The cache key "{key}" is too long ({length} bytes). '
                f"Allowed maximum size is {self.max_length} bytes.",
                key=key,
                length=length,
            )
        return key
