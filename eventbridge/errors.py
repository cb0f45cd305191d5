"""Error taxonomy for event conversion.

Plain text that is not a structured event is never an error; it is
forwarded to the sink unchanged.  Everything below signals a corrupted
or incompatible event stream and is propagated to the caller, which
surfaces it as a run-level failure.
"""

from __future__ import annotations


class ConversionError(ValueError):
    """Base class for fatal conversion failures."""


class EventDecodeError(ConversionError):
    """A recognized event is missing a required field or has a bad value."""


class ProtocolMismatchError(EventDecodeError):
    """The producer emitted an event type this converter does not know.

    Raised once per unknown type; it usually means the test engine's
    event vocabulary changed in a way the converter was never taught.
    """

    def __init__(self, event_type: str) -> None:
        super().__init__(
            f"Unexpected event type: {event_type!r} "
            "(check for a test engine protocol update)"
        )
        self.event_type: str = event_type


class UnresolvedReferenceError(EventDecodeError):
    """An event referenced a test or group id that was never defined."""

    def __init__(self, kind: str, item_id: int) -> None:
        super().__init__(f"Reference to undefined {kind} id {item_id}")
        self.kind: str = kind
        self.item_id: int = item_id
