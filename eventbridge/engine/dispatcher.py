"""Event dispatcher: maps decoded engine events to service messages.

Each event kind updates the registry and the shared conversion state and
emits zero or more messages.  Tests move through
``pending -> started -> {ignored | passed | failed}``; groups are started
by their ``group`` event and only finalized by the run lifecycle.

Known gap: the engine runs tests asynchronously, so a ``testDone`` with
``success`` may be followed later by an ``error`` for the same test.  The
test is then reported as both finished and failed; nothing is retracted.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from eventbridge.config import ConverterConfig
from eventbridge.engine.failures import decompose_failure
from eventbridge.engine.lifecycle import RunLifecycle
from eventbridge.engine.state import DispatcherState
from eventbridge.errors import EventDecodeError
from eventbridge.events import decoder
from eventbridge.events.decoder import EventRecord
from eventbridge.events.fields import (
    get_bool,
    get_int,
    get_object,
    has_scalar,
    string_or_default,
)
from eventbridge.messages.emitter import MessageEmitter
from eventbridge.messages.service_message import ServiceMessage
from eventbridge.model.items import Test
from eventbridge.model.registry import EntityRegistry

logger = logging.getLogger(__name__)

# testDone result values
RESULT_SUCCESS = "success"
RESULT_FAILURE = "failure"
RESULT_ERROR = "error"

# Placeholders for absent text fields
NO_ERROR_MESSAGE = "<no error message>"
NO_MESSAGE = "<no message>"
NO_STACK_TRACE = "<no stack trace>"
NO_RESULT = "<no result>"

NEWLINE = "\n"


class EventDispatcher:
    """Translates decoded events into emitted service messages."""

    def __init__(
        self,
        registry: EntityRegistry,
        emitter: MessageEmitter,
        state: DispatcherState,
        config: ConverterConfig | None = None,
    ) -> None:
        self.registry = registry
        self.emitter = emitter
        self.state = state
        self.config = config if config is not None else ConverterConfig()
        self.lifecycle = RunLifecycle(registry, emitter, state)
        self._handlers: dict[str, Callable[[dict[str, Any]], bool]] = {
            decoder.TYPE_START: self._handle_start,
            decoder.TYPE_TEST_START: self._handle_test_start,
            decoder.TYPE_TEST_DONE: self._handle_test_done,
            decoder.TYPE_ERROR: self._handle_error,
            decoder.TYPE_PRINT: self._handle_print,
            decoder.TYPE_GROUP: self._handle_group,
            decoder.TYPE_DONE: self._handle_done,
        }

    def dispatch(self, record: EventRecord) -> bool:
        """Handle one decoded event.

        Returns:
            ``True`` if every message the event required was accepted by
            the sink.

        Raises:
            EventDecodeError: A required field is missing or malformed, or
                the event references an undefined id.
        """
        handler = self._handlers.get(record.type)
        if handler is None:
            raise EventDecodeError(f"No handler for event type {record.type!r}")
        return handler(record.payload)

    def _emit(self, message: ServiceMessage) -> bool:
        return self.emitter.emit(message, self.state.node_id, self.state.parent_id)

    def _duration(self, obj: dict[str, Any]) -> str:
        return str(get_int(obj, "time") - self.state.start_millis)

    def _location_hint(self, test: Test) -> str:
        if self.state.location is None:
            return self.config.unknown_location
        names = json.dumps(test.name_list(), separators=(",", ":"))
        return f"{self.state.location},{names}"

    # -- run boundaries -------------------------------------------------

    def _handle_start(self, obj: dict[str, Any]) -> bool:
        return self.lifecycle.begin_run()

    def _handle_done(self, obj: dict[str, Any]) -> bool:
        return self.lifecycle.finish_run()

    # -- tests ----------------------------------------------------------

    def _handle_test_start(self, obj: dict[str, Any]) -> bool:
        test_obj = get_object(obj, "test", required=True)
        self.state.node_id = get_int(test_obj, "id")
        test = self.registry.resolve_test(obj)

        loading_prefix = self.config.loading_prefix
        if not test.has_valid_parent and test.name.startswith(loading_prefix):
            path = test.name[len(loading_prefix):]
            if path:
                self.state.location = self.config.location_prefix + path
                logger.debug("Load marker for %s", path)
            return True

        name = test.base_name
        started = ServiceMessage.test_started(name)
        started.add_attribute("locationHint", self._location_hint(test))
        self.state.start_millis = get_int(obj, "time")
        self.state.output_appeared = False
        self.state.parent_id = test.valid_parent_id

        result = self._emit(started)
        if result and test.metadata.skip:
            ignored = ServiceMessage.test_ignored(name)
            if test.metadata.skip_reason is not None:
                ignored.add_attribute("message", test.metadata.skip_reason)
            return self._emit(ignored)
        return result

    def _handle_test_done(self, obj: dict[str, Any]) -> bool:
        if get_bool(obj, "hidden"):
            return True
        result = string_or_default(obj, "result", NO_RESULT)
        if result == RESULT_SUCCESS:
            return self._test_finished(obj)
        if result in (RESULT_FAILURE, RESULT_ERROR):
            # Already reported by the preceding error event.
            return True
        raise EventDecodeError(f"Unknown test result: {result!r}")

    def _test_finished(self, obj: dict[str, Any]) -> bool:
        test = self.registry.resolve_test(obj)
        if test.metadata.skip:
            return True
        # Groups never report completion, so re-anchor on the test's parent.
        if test.has_valid_parent:
            self.state.parent_id = test.valid_parent_id
        finished = ServiceMessage.test_finished(test.base_name)
        finished.add_attribute("duration", self._duration(obj))
        return self._emit(finished)

    def _handle_error(self, obj: dict[str, Any]) -> bool:
        message = string_or_default(obj, "error", NO_ERROR_MESSAGE)
        if message.startswith(self.config.failed_to_load_prefix) and has_scalar(obj, "testID"):
            known = self.registry.find_test(get_int(obj, "testID"))
            if known is None or not known.has_valid_parent:
                return self._failed_to_load(message)

        test = self.registry.resolve_test(obj)
        details = decompose_failure(message, self.config.comparison_failed)

        failed = ServiceMessage.test_failed(test.base_name)
        if details.is_comparison:
            failed.add_attribute("expected", details.expected or "")
            failed.add_attribute("actual", details.actual or "")
        if not get_bool(obj, "isFailure"):
            failed.add_attribute("error", "true")
        failed.add_attribute("message", details.headline + NEWLINE)
        failed.add_attribute("duration", self._duration(obj))

        stderr = ServiceMessage.test_std_err(test.base_name)
        stderr.add_attribute(
            "out", string_or_default(obj, "stackTrace", NO_STACK_TRACE),
        )
        return self._emit(failed) and self._emit(stderr)

    def _failed_to_load(self, message: str) -> bool:
        """Report a load failure as a synthetic started and failed test."""
        name = self.config.failed_to_load_name
        node_id = self.state.next_synthetic_id()
        logger.debug("Synthesizing load failure node %d", node_id)
        self._emit(ServiceMessage.test_started(name))
        failed = ServiceMessage.test_failed(name)
        failed.add_attribute("message", message)
        self._emit(failed)
        return True

    def _handle_print(self, obj: dict[str, Any]) -> bool:
        test = self.registry.resolve_test(obj)
        text = string_or_default(obj, "message", NO_MESSAGE) + NEWLINE
        if not self.state.output_appeared:
            text = NEWLINE + text
        self.state.output_appeared = True
        out = ServiceMessage.test_std_out(test.base_name)
        out.add_attribute("out", text)
        return self._emit(out)

    # -- groups ---------------------------------------------------------

    def _handle_group(self, obj: dict[str, Any]) -> bool:
        group = self.registry.resolve_group(get_object(obj, "group", required=True))
        if group.is_artificial:
            return True
        self.state.node_id = group.id
        self.state.parent_id = group.valid_parent_id
        result = self._emit(ServiceMessage.test_suite_started(group.base_name))
        self.state.parent_id = group.id
        return result
