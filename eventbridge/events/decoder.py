"""Event decoder for the test engine's JSON event stream.

Each chunk of engine output is either one JSON event object or arbitrary
text (compiler diagnostics, stray prints, service messages written by
something else).  Text that does not decode to a JSON object is not an
error: the caller forwards it unchanged.  A JSON object is a protocol
event, so it must carry a known ``type`` discriminator.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from eventbridge.errors import EventDecodeError, ProtocolMismatchError

# Event type discriminators
TYPE_START = "start"
TYPE_TEST_START = "testStart"
TYPE_ERROR = "error"
TYPE_GROUP = "group"
TYPE_PRINT = "print"
TYPE_TEST_DONE = "testDone"
TYPE_DONE = "done"

EVENT_TYPES = frozenset({
    TYPE_START,
    TYPE_TEST_START,
    TYPE_ERROR,
    TYPE_GROUP,
    TYPE_PRINT,
    TYPE_TEST_DONE,
    TYPE_DONE,
})


@dataclass(frozen=True)
class EventRecord:
    """A decoded protocol event.

    ``payload`` is the full JSON object, including ``type``; ``raw`` is
    the text it was decoded from.
    """

    type: str
    payload: dict[str, Any] = field(default_factory=dict)
    raw: str = ""


def decode_event(text: str) -> EventRecord | None:
    """Decode one chunk of engine output.

    Args:
        text: A single line or chunk of output text.

    Returns:
        The decoded :class:`EventRecord`, or ``None`` when the text is not
        a JSON object and should be passed through unchanged.

    Raises:
        EventDecodeError: The object has no string ``type`` field.
        ProtocolMismatchError: The ``type`` is not a known event kind.
    """
    try:
        entry = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None

    if not isinstance(entry, dict):
        return None

    event_type = entry.get("type")
    if not isinstance(event_type, str) or not event_type:
        raise EventDecodeError(f"Event object missing type field: {text!r}")

    if event_type not in EVENT_TYPES:
        raise ProtocolMismatchError(event_type)

    return EventRecord(type=event_type, payload=entry, raw=text)
