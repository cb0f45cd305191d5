"""Typed accessors over decoded JSON event objects.

Required accessors raise :class:`EventDecodeError` when a field is absent
or carries the wrong JSON type.  ``None`` as the object itself is treated
like an object with no fields, so callers can chain lookups on optional
nested objects without guarding each step.
"""

from __future__ import annotations

from typing import Any

from eventbridge.errors import EventDecodeError


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


def get_int(obj: dict[str, Any] | None, name: str) -> int:
    """Return a required integer field.

    Integral floats (``3.0``) are accepted; booleans are not.
    """
    value = None if obj is None else obj.get(name)
    if isinstance(value, bool) or value is None:
        raise EventDecodeError(f"Value of {name!r} is not type int: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise EventDecodeError(f"Value of {name!r} is not type int: {value!r}")


def get_bool(obj: dict[str, Any] | None, name: str) -> bool:
    """Return a required boolean field."""
    value = None if obj is None else obj.get(name)
    if not isinstance(value, bool):
        raise EventDecodeError(
            f"Value of {name!r} is not type boolean: {value!r}"
        )
    return value


def get_object(
    obj: dict[str, Any] | None, name: str, required: bool = False,
) -> dict[str, Any] | None:
    """Return a nested object field, or ``None`` when it is absent."""
    value = None if obj is None else obj.get(name)
    if value is None:
        if required:
            raise EventDecodeError(f"Missing object field {name!r}")
        return None
    if not isinstance(value, dict):
        raise EventDecodeError(
            f"Value of {name!r} is not an object: {value!r}"
        )
    return value


def get_int_list(obj: dict[str, Any] | None, name: str) -> list[int]:
    """Return an optional list of integers (empty when absent or null)."""
    value = None if obj is None else obj.get(name)
    if value is None:
        return []
    if not isinstance(value, list):
        raise EventDecodeError(f"Value of {name!r} is not a list: {value!r}")
    return [get_int({name: v}, name) for v in value]


def has_scalar(obj: dict[str, Any] | None, name: str) -> bool:
    """True if *obj* carries a non-null scalar value for *name*."""
    return obj is not None and _is_scalar(obj.get(name))


def string_or_default(
    obj: dict[str, Any] | None, name: str, default: str,
) -> str:
    """Return a scalar field as text, or *default* when absent or not scalar."""
    value = None if obj is None else obj.get(name)
    if not _is_scalar(value):
        return default
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
