"""Conversion session: decoder, dispatcher, and lifecycle behind one call.

The host feeds every chunk of engine output, in order, to
:meth:`TestEventsConverter.process`.  The converter is synchronous and
keeps all of its state on the instance; it must not be shared between
threads without external serialization.
"""

from __future__ import annotations

import logging

from eventbridge.config import ConverterConfig
from eventbridge.engine.dispatcher import EventDispatcher
from eventbridge.engine.state import DispatcherState
from eventbridge.events.decoder import decode_event
from eventbridge.messages.emitter import DEFAULT_CHANNEL, MessageEmitter, MessageSink
from eventbridge.model.registry import EntityRegistry

logger = logging.getLogger(__name__)


class TestEventsConverter:
    """Converts engine JSON events into service messages for one session.

    Example::

        sink = CollectingSink()
        converter = TestEventsConverter(sink)
        for line in engine_output:
            converter.process(line)
        converter.flush()
    """

    def __init__(
        self,
        sink: MessageSink,
        config: ConverterConfig | None = None,
    ) -> None:
        self.config = config if config is not None else ConverterConfig()
        self.registry = EntityRegistry()
        self.state = DispatcherState()
        self.emitter = MessageEmitter(sink)
        self.dispatcher = EventDispatcher(
            self.registry, self.emitter, self.state, self.config,
        )

    def process(self, text: str, channel: str = DEFAULT_CHANNEL) -> bool:
        """Convert one chunk of engine output.

        Args:
            text: A single line or chunk of output.
            channel: The host output stream the chunk arrived on.

        Returns:
            ``True`` if the chunk was handled and every resulting message
            was accepted by the sink.

        Raises:
            EventDecodeError: The chunk is a malformed or unknown event
                (see :mod:`eventbridge.errors`).
        """
        self.emitter.channel = channel
        record = decode_event(text)
        if record is None:
            return self.emitter.forward(text)
        return self.dispatcher.dispatch(record)

    def flush(self) -> bool:
        """Finalize a stream that ended without a ``done`` event.

        Closes every open group and clears the registry; a no-op when
        nothing is pending.
        """
        if not self.registry.groups and not self.registry.tests:
            return True
        logger.debug("Flushing run without a done event")
        return self.dispatcher.lifecycle.finish_run()
