"""
Storage Layer - profile records, the index log, and cache backends.

The storage hierarchy:
1. Cache backend → raw key-value store with expiry (memory, Redis, diskcache)
2. Item keys → one flat record per profile token
3. Index key → append-only log used for filtered listing

All storage operations should go through ProfilerStorage.
"""

from profstore.storage.engine import ProfilerStorage
from profstore.storage.index import IndexLog
from profstore.storage.keys import KeyNamer
from profstore.storage.codec import RecordCodec
from profstore.storage.tree import TreeBuilder

__all__ = [
    "ProfilerStorage",
    "IndexLog",
    "KeyNamer",
    "RecordCodec",
    "TreeBuilder",
]
