"""
Core type definitions for profstore.

These types represent what the store persists and returns:
- Profile: a request's diagnostic snapshot, linked into a parent/child tree
- ProfileRecord: the flat shape a Profile is stored as under its item key
- ProfileSummary: one row of the secondary index, as returned by find()
"""

from typing import Any

from pydantic import BaseModel, Field, PrivateAttr, field_validator


# ============================================
# Profiles
# ============================================

class Profile(BaseModel):
    """
    Diagnostic data collected for a single request.

    The parent and children links are object references populated by the
    storage layer on read. Only ``parent_token`` and the children's tokens
    are persisted.
    """

    token: str = Field(frozen=True)
    """Unique identifier of the profile."""

    parent_token: str | None = None
    """Token of the parent profile, None at the root of a tree."""

    ip: str = ""
    method: str = ""
    url: str = ""

    time: int = 0
    """Unix timestamp of the profiled request."""

    collectors: dict[str, Any] = Field(default_factory=dict)
    """Opaque collector payload, keyed by collector name. Must be JSON serializable."""

    _parent: "Profile | None" = PrivateAttr(default=None)
    _children: list["Profile"] = PrivateAttr(default_factory=list)

    def __eq__(self, other: object) -> bool:
        # Private links form cycles, so compare persisted fields only.
        if not isinstance(other, Profile):
            return NotImplemented
        return self.model_dump() == other.model_dump()

    @property
    def parent(self) -> "Profile | None":
        return self._parent

    def set_parent(self, parent: "Profile | None") -> None:
        """Link this profile under ``parent`` (or detach it with None)."""
        self._parent = parent
        self.parent_token = parent.token if parent is not None else None

    @property
    def children(self) -> list["Profile"]:
        return list(self._children)

    def set_children(self, children: list["Profile"]) -> None:
        self._children = []
        for child in children:
            self.add_child(child)

    def add_child(self, child: "Profile") -> None:
        """Append a child profile and point its parent back at this one."""
        self._children.append(child)
        child.set_parent(self)

    @property
    def child_tokens(self) -> list[str]:
        return [child.token for child in self._children]

    def get_collector(self, name: str) -> Any:
        if name not in self.collectors:
            raise KeyError(f'Collector "{name}" does not exist.')
        return self.collectors[name]

    def has_collector(self, name: str) -> bool:
        return name in self.collectors

    def add_collector(self, name: str, data: Any) -> None:
        self.collectors[name] = data


# ============================================
# Persisted shapes
# ============================================

class ProfileRecord(BaseModel):
    """The value stored under a profile's item key."""

    token: str
    parent: str | None = None
    children: list[str] = Field(default_factory=list)
    """Tokens of the immediate children only. Sub-trees are rebuilt on read."""

    data: dict[str, Any] = Field(default_factory=dict)
    ip: str = ""
    method: str = ""
    url: str = ""
    time: int = 0


class ProfileSummary(BaseModel):
    """One parsed line of the index log."""

    token: str
    ip: str
    method: str
    url: str
    time: int
    parent: str | None = None

    @field_validator("parent", mode="before")
    @classmethod
    def _empty_parent_is_none(cls, value: Any) -> Any:
        return value or None
