"""Downstream wire format: service messages, the emitter, and sinks."""

from eventbridge.messages.emitter import (
    CollectingSink,
    MessageEmitter,
    MessageSink,
    StreamSink,
)
from eventbridge.messages.service_message import (
    ServiceMessage,
    escape_value,
    parse_service_message,
    unescape_value,
)

__all__ = [
    "CollectingSink",
    "MessageEmitter",
    "MessageSink",
    "ServiceMessage",
    "StreamSink",
    "escape_value",
    "parse_service_message",
    "unescape_value",
]
