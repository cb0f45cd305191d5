"""Engine event decoding: JSON event records and typed field access."""

from eventbridge.events.decoder import EVENT_TYPES, EventRecord, decode_event
from eventbridge.events.fields import (
    get_bool,
    get_int,
    get_int_list,
    get_object,
    has_scalar,
    string_or_default,
)

__all__ = [
    "EVENT_TYPES",
    "EventRecord",
    "decode_event",
    "get_bool",
    "get_int",
    "get_int_list",
    "get_object",
    "has_scalar",
    "string_or_default",
]
