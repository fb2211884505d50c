"""Tests for identity based reference handles."""

from refwalker import ABSENT, ReferenceHandle


class TestReferenceHandle:
    """Tests for ReferenceHandle equality and hashing."""

    def test_equal_values_are_different_references(self):
        """Two equal but distinct objects get different handles."""
        a, b = [], []

        assert a == b
        assert ReferenceHandle(a) != ReferenceHandle(b)
        assert len({ReferenceHandle(a), ReferenceHandle(b)}) == 2

    def test_same_object_is_same_reference(self):
        """Two handles of one object are equal and hash alike."""
        obj = {"key": "value"}

        assert ReferenceHandle(obj) == ReferenceHandle(obj)
        assert hash(ReferenceHandle(obj)) == hash(ReferenceHandle(obj))

    def test_unhashable_objects(self):
        """Unhashable objects can be used as set members through a handle."""
        visited = {ReferenceHandle([1, 2]), ReferenceHandle({})}
        assert len(visited) == 2

    def test_absent(self):
        """The handle of None is the canonical absent handle."""
        assert ReferenceHandle(None) == ABSENT
        assert hash(ReferenceHandle(None)) == hash(ABSENT)
        assert ABSENT.is_absent
        assert ABSENT != ReferenceHandle(object())

    def test_not_equal_to_other_types(self):
        obj = object()
        assert ReferenceHandle(obj) != obj

    def test_of_wraps_objects(self):
        obj = object()
        handle = ReferenceHandle.of(obj)

        assert handle.value is obj
        assert ReferenceHandle.of(handle) is handle

    def test_of_treats_numbers_as_values(self):
        """Plain numbers are values, not references."""
        assert ReferenceHandle.of(None) is ABSENT
        assert ReferenceHandle.of(42) is ABSENT
        assert ReferenceHandle.of(1.5) is ABSENT
        assert ReferenceHandle.of(True) is ABSENT

    def test_repr(self):
        assert repr(ABSENT) == "None"
        assert repr(ReferenceHandle([])).startswith("list@0x")
