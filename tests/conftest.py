"""
Pytest configuration and fixtures for profstore tests.
"""

import os
from collections import Counter

import pytest

# Set test environment before importing app modules
os.environ["PROFSTORE_DSN"] = "memory://"
os.environ["PROFSTORE_LIFETIME"] = "3600"
os.environ["PROFSTORE_KEY_PREFIX"] = "sf_profiler_"

from profstore.core.types import Profile
from profstore.storage.backends.memory import MemoryBackend
from profstore.storage.engine import ProfilerStorage


class RecordingBackend(MemoryBackend):
    """Memory backend that counts calls and can be told to fail."""

    def __init__(self, fail_set: bool = False, fail_append: bool = False, scoped: bool = True):
        super().__init__()
        self.calls: Counter[str] = Counter()
        self.fail_set = fail_set
        self.fail_append = fail_append
        self.supports_prefix_delete = scoped

    def get(self, key):
        self.calls["get"] += 1
        return super().get(key)

    def set(self, key, value, expiration=0):
        self.calls["set"] += 1
        if self.fail_set:
            return False
        return super().set(key, value, expiration)

    def append(self, key, value, expiration=0):
        self.calls["append"] += 1
        if self.fail_append:
            return False
        return super().append(key, value, expiration)

    def flush(self):
        self.calls["flush"] += 1
        return super().flush()

    def delete_prefix(self, prefix):
        self.calls["delete_prefix"] += 1
        return super().delete_prefix(prefix)


@pytest.fixture
def backend() -> RecordingBackend:
    """A fresh in-memory backend that records calls."""
    return RecordingBackend()


@pytest.fixture
def backend_factory():
    """Factory for recording backends with injected failures."""
    return RecordingBackend


@pytest.fixture
def storage(backend) -> ProfilerStorage:
    """Storage over the recording backend."""
    return ProfilerStorage(backend, lifetime=3600)


@pytest.fixture
def make_profile():
    """Factory for profiles with realistic request metadata."""
    def _make(
        token: str,
        ip: str = "127.0.0.1",
        method: str = "GET",
        url: str = "http://example.com/",
        time: int = 1700000000,
        parent_token: str | None = None,
        collectors: dict | None = None,
    ) -> Profile:
        return Profile(
            token=token,
            ip=ip,
            method=method,
            url=url,
            time=time,
            parent_token=parent_token,
            collectors=collectors or {},
        )
    return _make
