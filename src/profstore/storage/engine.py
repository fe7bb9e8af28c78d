"""
Profiler Storage - the facade over key naming, codec, index, and tree building.

Write path:
1. Encode the profile into a flat record
2. SET the record under its item key with the configured lifetime
3. Only if that worked, APPEND the index row

The two steps are not transactional. An interruption between them leaves
a record that read() finds but find() does not list.
"""

from profstore.core.config import settings, get_logger
from profstore.core.types import Profile, ProfileSummary
from profstore.storage.backends import create_backend
from profstore.storage.backends.base import CacheBackend
from profstore.storage.codec import RecordCodec
from profstore.storage.index import IndexLog
from profstore.storage.keys import KeyNamer
from profstore.storage.tree import TreeBuilder

logger = get_logger("storage.engine")


class ProfilerStorage:
    """
    Profile store on top of an expiring key-value cache.

    The backend is owned by the caller; close() only forwards to it.
    """

    def __init__(
        self,
        backend: CacheBackend,
        lifetime: int | None = None,
        key_prefix: str | None = None,
        max_key_length: int | None = None,
    ):
        """Initialize the storage."""
        self.backend = backend
        self.lifetime = settings.lifetime if lifetime is None else int(lifetime)
        self.keys = KeyNamer(key_prefix, max_key_length)
        self.codec = RecordCodec()
        self.index = IndexLog(backend, self.keys, self.codec)
        self.tree = TreeBuilder(backend, self.keys, self.codec)

    @classmethod
    def from_dsn(
        cls,
        dsn: str | None = None,
        username: str | None = None,
        password: str | None = None,
        lifetime: int | None = None,
    ) -> "ProfilerStorage":
        """Build a storage whose backend is chosen by the DSN scheme."""
        backend = create_backend(
            dsn or settings.dsn,
            username=settings.username if username is None else username,
            password=settings.password if password is None else password,
        )
        return cls(backend, lifetime=lifetime)

    def find(
        self,
        ip: str = "",
        url: str = "",
        limit: int | None = None,
        method: str = "",
    ) -> list[ProfileSummary]:
        """List profiles from the index, filtered by substring and capped at ``limit``."""
        return self.index.find(ip=ip, url=url, limit=limit, method=method)

    def read(self, token: str | None) -> Profile | None:
        """
        Load a profile with its parent chain and children.

        Returns None for an empty token (without touching the backend) and
        for tokens that expired or were never written.
        """
        if not token:
            return None

        record = self.tree.fetch(token)
        if record is None:
            logger.debug(f"Profile {token} not found")
            return None

        return self.tree.build(token, record)

    def write(self, profile: Profile) -> bool:
        """Store a profile and add it to the index."""
        key = self.keys.item_key(profile.token)
        record = self.codec.encode(profile)

        if not self.backend.set(key, self.codec.dumps(record), self.lifetime):
            logger.warning(f"Failed to store profile {profile.token}")
            return False

        if not self.index.append(profile, self.lifetime):
            logger.warning(f"Stored profile {profile.token} but failed to index it")
            return False

        logger.debug(f"Wrote profile {profile.token}")
        return True

    def purge(self) -> bool:
        """
        Remove every stored profile and the index.

        Only keys under this store's prefix are removed when the backend can
        delete by prefix. Otherwise the whole backend is flushed, including
        keys that belong to other users of the same cache.
        """
        if self.backend.supports_prefix_delete:
            return self.backend.delete_prefix(self.keys.prefix)

        logger.warning(f"{self.backend!r} cannot delete by prefix, flushing the entire backend")
        return self.backend.flush()

    def compact(self) -> int:
        """Drop superseded index rows. Returns how many were removed."""
        return self.index.compact(self.lifetime)

    def close(self) -> None:
        self.backend.close()

    def __enter__(self) -> "ProfilerStorage":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
