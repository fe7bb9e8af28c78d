"""
Tree Builder - rebuilds the parent/child profile graph on read.

Each record only knows its parent token and its children's tokens.
Reading a profile therefore walks up the parent chain first, then down
through every listed child, fetching one record per token.

Decoding a node goes through:

    metadata loaded -> parent resolving -> parent resolved
                    -> children resolving -> complete

Parent resolution only happens on the way up (children are always decoded
with their parent already known), which is what keeps the walk finite for
well-formed data. Corrupt data that loops is detected instead of recursing
forever.
"""

from dataclasses import dataclass, field

from profstore.core.config import get_logger
from profstore.core.errors import CyclicDataError
from profstore.core.types import Profile, ProfileRecord
from profstore.storage.backends.base import CacheBackend
from profstore.storage.codec import RecordCodec
from profstore.storage.keys import KeyNamer

logger = get_logger("storage.tree")


@dataclass
class _BuildState:
    """Per-read bookkeeping."""

    arena: dict[str, Profile] = field(default_factory=dict)
    records: dict[str, ProfileRecord] = field(default_factory=dict)
    path: list[str] = field(default_factory=list)
    """Tokens currently being decoded, outermost first."""

    linked: set[str] = field(default_factory=set)
    """Tokens already attached as somebody's child."""

    awaiting_parent: set[str] = field(default_factory=set)
    """Tokens on the path whose parent lookup is still in progress."""


class TreeBuilder:
    """Resolves parents and children for a profile record."""

    def __init__(
        self,
        backend: CacheBackend,
        keys: KeyNamer | None = None,
        codec: RecordCodec | None = None,
    ):
        self.backend = backend
        self.keys = keys or KeyNamer()
        self.codec = codec or RecordCodec()

    def fetch(self, token: str) -> ProfileRecord | None:
        """Load the stored record for ``token``, or None on a miss."""
        raw = self.backend.get(self.keys.item_key(token))
        if raw is None:
            return None
        return self.codec.loads(raw)

    def build(self, token: str, record: ProfileRecord) -> Profile:
        """Decode ``record`` and link in its ancestors and descendants."""
        return self._decode(token, record, None, _BuildState())

    def _decode(
        self,
        token: str,
        record: ProfileRecord,
        parent: Profile | None,
        state: _BuildState,
    ) -> Profile:
        profile = self.codec.decode(token, record)
        state.arena[token] = profile
        state.records[token] = record
        state.path.append(token)

        try:
            if parent is None and record.parent:
                state.awaiting_parent.add(token)
                try:
                    parent = self._resolve_parent(record.parent, state)
                finally:
                    state.awaiting_parent.discard(token)

            if parent is not None:
                profile.set_parent(parent)

            for child_token in record.children:
                if not child_token:
                    continue
                child = self._resolve_child(profile, child_token, state)
                if child is not None:
                    state.linked.add(child_token)
                    profile.add_child(child)
        finally:
            state.path.pop()

        return profile

    def _resolve_parent(self, parent_token: str, state: _BuildState) -> Profile | None:
        if parent_token in state.path:
            raise CyclicDataError(parent_token, list(state.path))

        record = self.fetch(parent_token)
        if record is None:
            logger.debug(f"Parent {parent_token} of {state.path[-1]} is gone, dropping the link")
            return None

        return self._decode(parent_token, record, None, state)

    def _resolve_child(self, profile: Profile, child_token: str, state: _BuildState) -> Profile | None:
        if child_token in state.linked:
            logger.warning(f"Profile {child_token} is already linked as a child, skipping")
            return None

        if child_token in state.path:
            if child_token not in state.awaiting_parent:
                # Already an ancestor on the way down: following it never ends.
                raise CyclicDataError(child_token, list(state.path))
            if state.path[-2] == child_token:
                # The node whose parent lookup led here is already half built.
                return state.arena[child_token]
            logger.warning(f"Profile {child_token} is listed by {profile.token}, which is not its parent, skipping")
            return None

        if child_token in state.arena:
            logger.warning(f"Profile {child_token} is already part of the tree, skipping")
            return None

        record = self.fetch(child_token)
        if record is None:
            logger.debug(f"Child {child_token} of {profile.token} is gone, skipping")
            return None

        return self._decode(child_token, record, profile, state)
