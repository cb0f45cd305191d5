"""Translate test engine JSON events into hierarchical service messages."""

from eventbridge.config import ConverterConfig
from eventbridge.engine.converter import TestEventsConverter
from eventbridge.errors import (
    ConversionError,
    EventDecodeError,
    ProtocolMismatchError,
    UnresolvedReferenceError,
)
from eventbridge.messages.emitter import CollectingSink, StreamSink

__all__ = [
    "CollectingSink",
    "ConversionError",
    "ConverterConfig",
    "EventDecodeError",
    "ProtocolMismatchError",
    "StreamSink",
    "TestEventsConverter",
    "UnresolvedReferenceError",
]
