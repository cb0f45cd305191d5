"""Tests for the entity registry."""

from __future__ import annotations

import pytest

from eventbridge.errors import EventDecodeError, UnresolvedReferenceError
from eventbridge.model.registry import EntityRegistry


@pytest.fixture
def registry() -> EntityRegistry:
    reg = EntityRegistry()
    reg.resolve_group({"id": 1, "name": None, "parentID": None})
    reg.resolve_group({"id": 2, "name": "math", "parentID": 1})
    return reg


class TestResolveTest:
    """Tests for creating and looking up tests."""

    def test_nested_definition_creates(self, registry):
        """A testStart-shaped object defines the nested test."""
        test = registry.resolve_test({
            "type": "testStart",
            "test": {"id": 3, "name": "math adds", "groupIDs": [1, 2]},
            "time": 10,
        })
        assert test.id == 3
        assert registry.tests[3] is test
        assert test.base_name == "adds"

    def test_reference_returns_same_entity(self, registry):
        """A testID reference resolves to the defined test."""
        created = registry.resolve_test({"test": {"id": 3, "name": "math adds", "groupIDs": [2]}})
        found = registry.resolve_test({"testID": 3, "message": "hi"})
        assert found is created

    def test_redefinition_overwrites(self, registry):
        """A second definition with the same id replaces the first."""
        registry.resolve_test({"id": 4, "name": "first"})
        second = registry.resolve_test({"id": 4, "name": "second"})
        assert registry.tests[4] is second
        assert len(registry.tests) == 1

    def test_unknown_reference_raises(self, registry):
        with pytest.raises(UnresolvedReferenceError) as exc_info:
            registry.resolve_test({"testID": 42})
        assert exc_info.value.kind == "test"
        assert exc_info.value.item_id == 42

    def test_no_id_raises(self, registry):
        with pytest.raises(EventDecodeError, match="No test id"):
            registry.resolve_test({"type": "print", "message": "x"})

    def test_null_object_raises(self, registry):
        with pytest.raises(EventDecodeError):
            registry.resolve_test(None)

    def test_test_and_group_ids_do_not_collide(self, registry):
        """A test may share its numeric id with a group."""
        test = registry.resolve_test({"id": 2, "name": "math two", "groupIDs": [2]})
        assert registry.groups[2].name == "math"
        assert registry.tests[2] is test
        assert test.parent is registry.groups[2]


class TestResolveGroup:
    """Tests for creating and looking up groups."""

    def test_parent_resolved(self, registry):
        group = registry.resolve_group({"id": 5, "name": "math big", "parentID": 2})
        assert group.valid_parent_id == 2
        assert group.base_name == "big"

    def test_unknown_group_reference(self, registry):
        with pytest.raises(UnresolvedReferenceError) as exc_info:
            registry.resolve_group({"testID": 9})
        assert exc_info.value.kind == "group"

    def test_no_id_raises(self, registry):
        with pytest.raises(EventDecodeError, match="No group id"):
            registry.resolve_group({"name": "x"})


class TestClear:
    """Tests for run-boundary clearing."""

    def test_clear_empties_both_arenas(self, registry):
        registry.resolve_test({"id": 3, "name": "t"})
        assert len(registry) == 3
        registry.clear()
        assert len(registry) == 0
        assert registry.tests == {}
        assert registry.groups == {}

    def test_iter_groups_snapshot(self, registry):
        """Groups can be iterated while the arena is being cleared."""
        seen = []
        for group in registry.iter_groups():
            seen.append(group.id)
            registry.clear()
        assert seen == [1, 2]

    def test_find_test(self, registry):
        assert registry.find_test(3) is None
        registry.resolve_test({"id": 3, "name": "t"})
        assert registry.find_test(3) is not None


class TestDerivedThroughArena:
    """Items built by the registry resolve parents through its group arena."""

    def test_parent_attributes(self, registry):
        test = registry.resolve_test({"id": 3, "name": "math adds", "groupIDs": [1, 2]})
        assert test.parent is registry.groups[2]
        assert [item.id for item in test.ancestry()] == [3, 2, 1]
        assert test.has_valid_parent
        assert test.valid_parent_id == 2
        assert test.name_list() == ["math", "adds"]

    def test_clear_detaches_parents(self, registry):
        test = registry.resolve_test({"id": 3, "name": "math adds", "groupIDs": [1, 2]})
        registry.clear()
        assert test.parent is None
        assert test.valid_parent_id == 0
