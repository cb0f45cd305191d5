"""Run lifecycle: registry reset at run start, group finalization at the end.

The engine never announces that a group has finished, because tests in
different groups may run concurrently.  Every group seen during the run
is therefore closed in one pass when the run reports ``done``, or when
the caller flushes a stream that ended without it.
"""

from __future__ import annotations

import logging

from eventbridge.engine.state import DispatcherState
from eventbridge.messages.emitter import MessageEmitter
from eventbridge.messages.service_message import ServiceMessage
from eventbridge.model.registry import EntityRegistry

logger = logging.getLogger(__name__)


class RunLifecycle:
    """Begins and finishes runs against a shared registry and state."""

    def __init__(
        self,
        registry: EntityRegistry,
        emitter: MessageEmitter,
        state: DispatcherState,
    ) -> None:
        self.registry = registry
        self.emitter = emitter
        self.state = state

    def begin_run(self) -> bool:
        """Forget every test and group from a previous run."""
        self.registry.clear()
        return True

    def finish_run(self) -> bool:
        """Emit a suite-finished message per real group, then clear.

        Groups are closed in registry order; the downstream consumer does
        not depend on it because every message carries explicit ids.
        """
        finished = 0
        for group in self.registry.iter_groups():
            if group.is_artificial:
                continue
            self.state.node_id = group.id
            self.state.parent_id = group.valid_parent_id
            self.emitter.emit(
                ServiceMessage.test_suite_finished(group.base_name),
                self.state.node_id,
                self.state.parent_id,
            )
            finished += 1
        logger.debug("Run finished, closed %d group(s)", finished)
        self.registry.clear()
        return True
