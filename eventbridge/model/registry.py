"""Entity registry: the run-scoped arenas of tests and groups.

Tests and groups are stored in two separate id-keyed arenas, so a test
and a group may share a numeric id.  An event object either *defines* an
item (it carries ``id``), *references* one (it carries ``testID``), or
wraps a definition in a nested ``test`` object.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from eventbridge.errors import EventDecodeError, UnresolvedReferenceError
from eventbridge.events.fields import get_int, get_object
from eventbridge.model.items import Group, Test


class EntityRegistry:
    """Holds the tests and groups seen during one run."""

    def __init__(self) -> None:
        self.tests: dict[int, Test] = {}
        self.groups: dict[int, Group] = {}

    def __len__(self) -> int:
        return len(self.tests) + len(self.groups)

    def clear(self) -> None:
        """Drop every test and group."""
        self.tests.clear()
        self.groups.clear()

    def resolve_test(self, obj: dict[str, Any] | None) -> Test:
        """Create or look up the test described by *obj*.

        Args:
            obj: An event object, or a nested ``test`` definition.

        Returns:
            The newly defined test (replacing any previous entry with the
            same id) or the existing test referenced by ``testID``.

        Raises:
            EventDecodeError: *obj* neither defines nor references a test.
            UnresolvedReferenceError: ``testID`` names an undefined test.
        """
        if obj is None:
            raise EventDecodeError("Unexpected null event object")
        if obj.get("id") is not None:
            test = Test.from_json(obj, self.groups)
            self.tests[test.id] = test
            return test
        if obj.get("testID") is not None:
            test_id = get_int(obj, "testID")
            found = self.tests.get(test_id)
            if found is None:
                raise UnresolvedReferenceError("test", test_id)
            return found
        nested = get_object(obj, "test")
        if nested is not None:
            return self.resolve_test(nested)
        raise EventDecodeError("No test id in event object")

    def resolve_group(self, obj: dict[str, Any] | None) -> Group:
        """Create or look up the group described by *obj*.

        A ``testID`` reference on a group object is resolved against the
        group arena, mirroring :meth:`resolve_test`.
        """
        if obj is None:
            raise EventDecodeError("Unexpected null event object")
        if obj.get("id") is not None:
            group = Group.from_json(obj, self.groups)
            self.groups[group.id] = group
            return group
        if obj.get("testID") is not None:
            group_id = get_int(obj, "testID")
            found = self.groups.get(group_id)
            if found is None:
                raise UnresolvedReferenceError("group", group_id)
            return found
        raise EventDecodeError("No group id in event object")

    def find_test(self, test_id: int) -> Test | None:
        """Return the test with *test_id*, or ``None``."""
        return self.tests.get(test_id)

    def iter_groups(self) -> Iterator[Group]:
        """Iterate over a snapshot of the known groups in insertion order."""
        return iter(list(self.groups.values()))
