"""Run model: tests, groups, and the registry that resolves them by id."""

from eventbridge.model.items import (
    NO_NAME,
    NO_PARENT_ID,
    Group,
    Item,
    Metadata,
    Test,
    escape_string_characters,
)
from eventbridge.model.registry import EntityRegistry

__all__ = [
    "NO_NAME",
    "NO_PARENT_ID",
    "EntityRegistry",
    "Group",
    "Item",
    "Metadata",
    "Test",
    "escape_string_characters",
]
