"""
Redis backend.

DSN examples:
- redis://localhost:6379/0
- rediss://cache.internal:6380/2

Credentials given separately override those embedded in the DSN.
"""

import re
from typing import Any

import redis
from redis.exceptions import RedisError

from profstore.core.config import get_logger
from profstore.storage.backends.base import CacheBackend

logger = get_logger("storage.backends.redis")

_GLOB_SPECIAL = re.compile(r"([\\*?\[\]])")


class RedisBackend(CacheBackend):
    """
    Redis-backed cache using native APPEND and key expiry.

    Append and expire are sent in one MULTI/EXEC pipeline so the index key
    never grows without its lifetime being refreshed.
    """

    scheme = "redis"
    supports_prefix_delete = True

    def __init__(
        self,
        dsn: str = "redis://localhost:6379/0",
        username: str = "",
        password: str = "",
        socket_timeout: float = 2.0,
        client: redis.Redis | None = None,
        **kwargs: Any,
    ):
        self.dsn = dsn
        if client is not None:
            self._client = client
        else:
            if username:
                kwargs["username"] = username
            if password:
                kwargs["password"] = password
            self._client = redis.Redis.from_url(
                dsn,
                socket_timeout=socket_timeout,
                decode_responses=False,
                **kwargs,
            )

    @property
    def client(self) -> redis.Redis:
        return self._client

    def get(self, key: str) -> bytes | None:
        try:
            return self._client.get(key)
        except RedisError as e:
            logger.warning(f"Redis get failed for {key}: {e}")
            return None

    def set(self, key: str, value: bytes, expiration: int = 0) -> bool:
        try:
            return bool(self._client.set(key, value, ex=expiration if expiration > 0 else None))
        except RedisError as e:
            logger.warning(f"Redis set failed for {key}: {e}")
            return False

    def append(self, key: str, value: bytes, expiration: int = 0) -> bool:
        try:
            with self._client.pipeline(transaction=True) as pipe:
                pipe.append(key, value)
                if expiration > 0:
                    pipe.expire(key, expiration)
                else:
                    pipe.persist(key)
                pipe.execute()
            return True
        except RedisError as e:
            logger.warning(f"Redis append failed for {key}: {e}")
            return False

    def flush(self) -> bool:
        try:
            return bool(self._client.flushdb())
        except RedisError as e:
            logger.warning(f"Redis flush failed: {e}")
            return False

    def delete_prefix(self, prefix: str) -> bool:
        pattern = _GLOB_SPECIAL.sub(r"\\\1", prefix) + "*"
        deleted = 0
        try:
            batch: list[bytes] = []
            for key in self._client.scan_iter(match=pattern, count=500):
                batch.append(key)
                if len(batch) >= 500:
                    deleted += self._client.delete(*batch)
                    batch = []
            if batch:
                deleted += self._client.delete(*batch)
        except RedisError as e:
            logger.warning(f"Redis delete by prefix {prefix!r} failed after {deleted} keys: {e}")
            return False
        logger.debug(f"Deleted {deleted} keys with prefix {prefix!r}")
        return True

    def close(self) -> None:
        self._client.close()

    def __repr__(self) -> str:
        return f"RedisBackend(dsn={self.dsn!r})"
