"""Tests and groups reconstructed from the engine's flat event stream.

The engine identifies every test and group by an integer id and links
children to parents by id only.  Items keep that shape: the parent is an
id resolved through the run's group arena on demand, never an owning
reference, so clearing the arena at a run boundary drops every item at
once.

Names are hierarchical.  A test called ``"parser handles empty input"``
inside the group ``"parser"`` has the base name ``"handles empty input"``.
The engine also sends *artificial* groups that have no name at all (the
per-file root group, for instance).  They are never reported, but their
own parent links still take part in ancestry walks.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from eventbridge.errors import EventDecodeError
from eventbridge.events.fields import get_int, get_int_list, get_object

# Name given to items whose record carries no name
NO_NAME = "<no name>"

# Separator between a parent's name and a child's base name
NAME_SEPARATOR = " "

# Parent id reported for items without a valid parent
NO_PARENT_ID = 0

_SIMPLE_ESCAPES = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
    "\\": "\\\\",
    '"': '\\"',
}

_NON_PRINTABLE_CATEGORIES = frozenset({"Cc", "Cf", "Cn", "Co", "Cs", "Zl", "Zp"})


def escape_string_characters(text: str) -> str:
    """Escape *text* the way a Java string literal would spell it.

    Control and other non-printable characters become ``\\uXXXX``
    (characters outside the BMP as a UTF-16 surrogate pair).
    """
    out: list[str] = []
    for ch in text:
        simple = _SIMPLE_ESCAPES.get(ch)
        if simple is not None:
            out.append(simple)
        elif unicodedata.category(ch) in _NON_PRINTABLE_CATEGORIES:
            units = ch.encode("utf-16-be")
            for i in range(0, len(units), 2):
                out.append("\\u%04x" % int.from_bytes(units[i:i + 2], "big"))
        else:
            out.append(ch)
    return "".join(out)


@dataclass(frozen=True)
class Metadata:
    """Skip flags attached to a test or group."""

    skip: bool = False
    skip_reason: str | None = None

    @classmethod
    def from_json(cls, obj: dict[str, Any] | None) -> Metadata:
        """Build metadata from a ``metadata`` object; ``None`` gives defaults."""
        if not obj:
            return cls()
        skip = obj.get("skip")
        reason = obj.get("skipReason")
        return cls(
            skip=skip is True,
            skip_reason=reason if isinstance(reason, str) else None,
        )


def _extract_id(obj: dict[str, Any]) -> int:
    item_id = get_int(obj, "id")
    if item_id < 0:
        raise EventDecodeError(f"Negative id in event object: {item_id}")
    return item_id


def _extract_name(obj: dict[str, Any]) -> str:
    name = obj.get("name")
    if name is None:
        return NO_NAME
    if not isinstance(name, str):
        raise EventDecodeError(f"Value of 'name' is not a string: {name!r}")
    return name


@dataclass
class Item:
    """Common shape of a test or a group.

    ``groups`` is the run's group arena, used only for parent lookups.
    """

    id: int
    name: str
    parent_id: int | None = None
    metadata: Metadata = field(default_factory=Metadata)
    groups: Mapping[int, Group] = field(
        default_factory=dict, repr=False, compare=False,
    )

    @property
    def parent(self) -> Group | None:
        """The parent group, or ``None`` if absent from the arena."""
        if self.parent_id is None:
            return None
        return self.groups.get(self.parent_id)

    @property
    def is_artificial(self) -> bool:
        """True for nameless items, which are never reported."""
        return self.name == NO_NAME

    @property
    def has_valid_parent(self) -> bool:
        """True if the parent exists and is not artificial."""
        parent = self.parent
        return parent is not None and not parent.is_artificial

    @property
    def valid_parent_id(self) -> int:
        """Parent id for reporting; ``0`` when there is no valid parent."""
        if self.has_valid_parent:
            assert self.parent_id is not None
            return self.parent_id
        return NO_PARENT_ID

    @property
    def base_name(self) -> str:
        """The name with the valid parent's name prefix removed."""
        if self.has_valid_parent:
            parent = self.parent
            assert parent is not None
            prefix = parent.name + NAME_SEPARATOR
            if self.name.startswith(prefix):
                return self.name[len(prefix):]
        return self.name

    def ancestry(self) -> Iterator[Item]:
        """Yield this item, then each ancestor up to the root.

        Raises:
            EventDecodeError: If the parent links form a cycle.
        """
        seen: set[int] = set()
        node: Item | None = self
        while node is not None:
            yield node
            if node.parent_id is None:
                return
            if node.parent_id in seen:
                raise EventDecodeError(
                    f"Cyclic group parent chain at group id {node.parent_id}"
                )
            seen.add(node.parent_id)
            node = node.parent

    def name_list(self) -> list[str]:
        """Escaped base names from the root down to this item.

        Artificial groups on the way are skipped.
        """
        names = [
            escape_string_characters(item.base_name)
            for item in self.ancestry()
            if not item.is_artificial
        ]
        names.reverse()
        return names


@dataclass
class Test(Item):
    """A single test; its parent is the innermost of its groups."""

    @classmethod
    def from_json(cls, obj: dict[str, Any], groups: Mapping[int, Group]) -> Test:
        """Build a test from its full definition object."""
        group_ids = get_int_list(obj, "groupIDs")
        parent_id = None
        if group_ids and group_ids[-1] in groups:
            parent_id = group_ids[-1]
        return cls(
            id=_extract_id(obj),
            name=_extract_name(obj),
            parent_id=parent_id,
            metadata=Metadata.from_json(get_object(obj, "metadata")),
            groups=groups,
        )


@dataclass
class Group(Item):
    """A group of tests; its parent is given by ``parentID``."""

    @classmethod
    def from_json(cls, obj: dict[str, Any], groups: Mapping[int, Group]) -> Group:
        """Build a group from its full definition object."""
        parent_id = None
        raw_parent = obj.get("parentID")
        if raw_parent is not None:
            candidate = get_int(obj, "parentID")
            if candidate in groups:
                parent_id = candidate
        return cls(
            id=_extract_id(obj),
            name=_extract_name(obj),
            parent_id=parent_id,
            metadata=Metadata.from_json(get_object(obj, "metadata")),
            groups=groups,
        )
