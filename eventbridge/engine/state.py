"""Mutable conversion state threaded through the event handlers."""

from __future__ import annotations

from dataclasses import dataclass

from eventbridge.model.items import NO_PARENT_ID


@dataclass
class DispatcherState:
    """Context carried from one event to the next within a session.

    ``node_id`` and ``parent_id`` are the ids stamped on the next emitted
    message.  ``start_millis`` is the timestamp of the most recent test
    start, shared by all tests, so interleaved tests can be attributed a
    duration measured from a sibling's start.  ``location`` is the file
    location of the most recent load marker, if any.
    """

    node_id: int = 0
    parent_id: int = NO_PARENT_ID
    start_millis: int = 0
    location: str | None = None
    output_appeared: bool = False

    def next_synthetic_id(self) -> int:
        """Advance ``node_id`` for a message with no engine-assigned id."""
        self.node_id += 1
        return self.node_id
