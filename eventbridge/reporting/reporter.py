"""Run summary generation from converted output.

Reads the service messages produced by the converter (other lines are
ignored) and builds a per-test summary: outcome, duration, failure
message, and the expected/actual pair of comparison failures.  Tests are
keyed by ``nodeId``, which is unique within a run.

Outcome model:
passed, failed, ignored, incomplete (started but never finished).
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from eventbridge.messages import service_message as sm
from eventbridge.messages.service_message import ServiceMessage, parse_service_message

# Valid outcome values
VALID_OUTCOMES = frozenset({
    "passed",
    "failed",
    "ignored",
    "incomplete",
})


@dataclass
class TestOutcome:
    """Accumulated outcome of one reported test."""

    name: str
    node_id: str
    parent_node_id: str
    outcome: str = "incomplete"
    duration_ms: int | None = None
    message: str | None = None
    expected: str | None = None
    actual: str | None = None
    is_error: bool = False


def _parse_duration(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


class RunReporter:
    """Collects converted messages and generates YAML run summaries."""

    def __init__(self) -> None:
        self.tests: dict[str, TestOutcome] = {}
        self.suites_started: int = 0
        self.suites_finished: int = 0
        self.passthrough_lines: int = 0

    def add_line(self, line: str) -> None:
        """Record one line of converter output."""
        message = parse_service_message(line)
        if message is None:
            self.passthrough_lines += 1
            return
        self.add_message(message)

    def add_lines(self, lines: list[str]) -> None:
        """Record several lines of converter output."""
        for line in lines:
            self.add_line(line)

    def add_message(self, message: ServiceMessage) -> None:
        """Record one parsed service message."""
        kind = message.message_name
        attrs = message.attributes
        node_id = attrs.get("nodeId", "")

        if kind == sm.TEST_SUITE_STARTED:
            self.suites_started += 1
            return
        if kind == sm.TEST_SUITE_FINISHED:
            self.suites_finished += 1
            return
        if kind == sm.TEST_STARTED:
            self.tests[node_id] = TestOutcome(
                name=message.name or "",
                node_id=node_id,
                parent_node_id=attrs.get("parentNodeId", ""),
            )
            return

        outcome = self.tests.get(node_id)
        if outcome is None:
            return
        if kind == sm.TEST_FINISHED:
            # A late success never overrides an earlier failure.
            if outcome.outcome == "incomplete":
                outcome.outcome = "passed"
            outcome.duration_ms = _parse_duration(attrs.get("duration"))
        elif kind == sm.TEST_IGNORED:
            outcome.outcome = "ignored"
            outcome.message = attrs.get("message")
        elif kind == sm.TEST_FAILED:
            outcome.outcome = "failed"
            message_text = attrs.get("message")
            outcome.message = message_text.rstrip("\n") if message_text else None
            outcome.expected = attrs.get("expected")
            outcome.actual = attrs.get("actual")
            outcome.is_error = attrs.get("error") == "true"
            outcome.duration_ms = _parse_duration(attrs.get("duration"))

    def _compute_summary(self) -> dict[str, Any]:
        counts = {name: 0 for name in sorted(VALID_OUTCOMES)}
        for outcome in self.tests.values():
            counts[outcome.outcome] += 1
        return {
            "total": len(self.tests),
            **counts,
            "suites": self.suites_started,
        }

    def _format_outcome(self, outcome: TestOutcome) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "name": outcome.name,
            "node_id": outcome.node_id,
            "parent_node_id": outcome.parent_node_id,
            "outcome": outcome.outcome,
        }
        if outcome.duration_ms is not None:
            entry["duration_ms"] = outcome.duration_ms
        if outcome.message is not None:
            entry["message"] = outcome.message
        if outcome.expected is not None:
            entry["expected"] = outcome.expected
            entry["actual"] = outcome.actual
        if outcome.is_error:
            entry["error"] = True
        return entry

    def generate_report(self) -> dict[str, Any]:
        """Generate the report data structure.

        Returns:
            Dictionary representing the full report, suitable for YAML
            serialization.
        """
        now = datetime.datetime.now(tz=datetime.timezone.utc).isoformat()
        report: dict[str, Any] = {
            "generated_at": now,
            "summary": self._compute_summary(),
            "tests": [self._format_outcome(t) for t in self.tests.values()],
        }
        if self.suites_started != self.suites_finished:
            report["unfinished_suites"] = self.suites_started - self.suites_finished
        return {"report": report}

    def write_yaml(self, path: Path) -> None:
        """Write the report as a YAML file.

        Args:
            path: File path to write the YAML report to.
        """
        report = self.generate_report()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(
                report,
                f,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )
