"""Conversion engine: event dispatch, run lifecycle, and the session facade."""

from eventbridge.engine.converter import TestEventsConverter
from eventbridge.engine.dispatcher import EventDispatcher
from eventbridge.engine.failures import FailureDetails, decompose_failure
from eventbridge.engine.lifecycle import RunLifecycle
from eventbridge.engine.state import DispatcherState

__all__ = [
    "DispatcherState",
    "EventDispatcher",
    "FailureDetails",
    "RunLifecycle",
    "TestEventsConverter",
    "decompose_failure",
]
