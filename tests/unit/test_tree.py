"""Tests for profile tree reconstruction."""

import pytest

from profstore.core.errors import CyclicDataError
from profstore.core.types import ProfileRecord
from profstore.storage.codec import RecordCodec


def store_record(backend, **fields) -> None:
    """Store a raw record, bypassing the engine."""
    record = ProfileRecord(**fields)
    backend.set(f"sf_profiler_{record.token}", RecordCodec().dumps(record))


@pytest.fixture
def family(storage, make_profile):
    """
    Write a three-level tree:

        root
        ├── a
        │   └── a1
        └── b
    """
    root = make_profile("root", url="http://example.com/")
    a = make_profile("a", url="http://example.com/_fragment/a")
    a1 = make_profile("a1", url="http://example.com/_fragment/a1")
    b = make_profile("b", url="http://example.com/_fragment/b")
    a.add_child(a1)
    root.add_child(a)
    root.add_child(b)

    for profile in (root, a, a1, b):
        assert storage.write(profile)
    return storage


class TestTreeBuilder:
    """Tests for TreeBuilder via ProfilerStorage.read."""

    def test_read_root_resolves_descendants(self, family):
        """Test that reading the root loads the whole tree."""
        root = family.read("root")

        assert root.parent is None
        assert root.child_tokens == ["a", "b"]
        a = root.children[0]
        assert a.parent is root
        assert a.child_tokens == ["a1"]
        assert a.children[0].parent is a

    def test_read_child_resolves_ancestors(self, family):
        """Test that reading a leaf loads its parent chain."""
        a1 = family.read("a1")

        assert a1.parent_token == "a"
        assert a1.parent.token == "a"
        assert a1.parent.parent.token == "root"
        assert a1.parent.parent.parent is None

    def test_ancestors_reuse_the_requested_node(self, family):
        """Test that the parent's children contain the node itself, not a copy."""
        a = family.read("a")

        assert a.parent.child_tokens == ["a", "b"]
        assert a.parent.children[0] is a
        assert a.child_tokens == ["a1"]

    def test_missing_parent_is_dropped(self, storage, make_profile):
        """Test that a dangling parent reference degrades gracefully."""
        storage.write(make_profile("orphan", parent_token="evicted"))

        profile = storage.read("orphan")

        assert profile is not None
        assert profile.parent is None
        assert profile.parent_token is None

    def test_missing_child_is_skipped(self, storage, make_profile):
        """Test that only resolvable children are attached."""
        parent = make_profile("parent")
        children = [make_profile(f"child{i}") for i in range(3)]
        for child in children:
            parent.add_child(child)

        storage.write(parent)
        storage.write(children[0])
        storage.write(children[2])

        profile = storage.read("parent")

        assert profile.child_tokens == ["child0", "child2"]

    def test_empty_child_tokens_are_ignored(self, storage, backend):
        """Test that blank entries in the children list are skipped."""
        store_record(backend, token="p", children=["", "c"])
        store_record(backend, token="c", parent="p")

        assert storage.read("p").child_tokens == ["c"]

    def test_parent_cycle_raises(self, storage, backend):
        """Test that parents pointing at each other are detected."""
        store_record(backend, token="x", parent="y")
        store_record(backend, token="y", parent="x")

        with pytest.raises(CyclicDataError) as exc_info:
            storage.read("x")

        assert exc_info.value.token == "x"

    def test_child_cycle_raises(self, storage, backend):
        """Test that a descendant listing an ancestor is detected."""
        store_record(backend, token="x", children=["y"])
        store_record(backend, token="y", children=["x"])

        with pytest.raises(CyclicDataError):
            storage.read("x")

    def test_self_child_raises(self, storage, backend):
        """Test that a profile listing itself as a child is detected."""
        store_record(backend, token="x", children=["x"])

        with pytest.raises(CyclicDataError):
            storage.read("x")

    def test_grandparent_listing_a_grandchild_is_skipped(self, storage, backend):
        """Test that a node listed by an ancestor other than its parent is attached once."""
        store_record(backend, token="g", children=["p", "x"])
        store_record(backend, token="p", parent="g", children=["x"])
        store_record(backend, token="x", parent="p")

        x = storage.read("x")

        assert x.parent.token == "p"
        assert x.parent.parent.token == "g"
        assert x.parent.parent.child_tokens == ["p"]
        assert x.parent.child_tokens == ["x"]
        assert x.parent.children[0] is x

    def test_duplicate_child_is_attached_once(self, storage, backend):
        """Test that a child listed twice appears once."""
        store_record(backend, token="p", children=["c", "c"])
        store_record(backend, token="c", parent="p")

        assert storage.read("p").child_tokens == ["c"]

    def test_corrupt_child_record_is_skipped(self, storage, backend):
        """Test that an undecodable child is treated as missing."""
        store_record(backend, token="p", children=["bad", "good"])
        backend.set("sf_profiler_bad", b"{not json")
        store_record(backend, token="good", parent="p")

        assert storage.read("p").child_tokens == ["good"]
