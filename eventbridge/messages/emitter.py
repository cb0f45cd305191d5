"""Message emitter and the sinks it writes to.

A sink is any callable taking ``(text, channel)`` and returning ``True``
when the text was accepted.  The channel names the host output stream the
text belongs to (``"stdout"`` or ``"stderr"``); the emitter forwards it
unchanged so passthrough text stays on the stream it arrived on.
"""

from __future__ import annotations

import logging
from typing import Callable, TextIO

from eventbridge.messages.service_message import ServiceMessage

logger = logging.getLogger(__name__)

MessageSink = Callable[[str, str], bool]

DEFAULT_CHANNEL = "stdout"


class CollectingSink:
    """Sink that records every ``(text, channel)`` pair it receives."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str]] = []

    def __call__(self, text: str, channel: str) -> bool:
        self.records.append((text, channel))
        return True

    @property
    def lines(self) -> list[str]:
        """The received texts, without channels."""
        return [text for text, _ in self.records]


class StreamSink:
    """Sink that writes each text to a stream, newline terminated."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def __call__(self, text: str, channel: str) -> bool:
        self.stream.write(text if text.endswith("\n") else text + "\n")
        return True


class MessageEmitter:
    """Renders service messages and forwards them to a sink.

    Every emitted message is tagged with ``nodeId`` and ``parentNodeId``
    so the downstream consumer can rebuild the tree.
    """

    def __init__(self, sink: MessageSink) -> None:
        self.sink = sink
        self.channel: str = DEFAULT_CHANNEL

    def emit(
        self, message: ServiceMessage, node_id: int, parent_node_id: int,
    ) -> bool:
        """Tag, render, and forward *message*.

        Returns:
            The sink's result.
        """
        message.add_attribute("nodeId", str(node_id))
        message.add_attribute("parentNodeId", str(parent_node_id))
        return bool(self.sink(message.render(), self.channel))

    def forward(self, text: str) -> bool:
        """Pass *text* through to the sink unchanged."""
        logger.debug("Passing through non-event text on %s", self.channel)
        return bool(self.sink(text, self.channel))
