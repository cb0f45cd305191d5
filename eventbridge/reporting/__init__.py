"""Run reporting: YAML summaries of converted test output."""

from eventbridge.reporting.reporter import RunReporter, TestOutcome

__all__ = [
    "RunReporter",
    "TestOutcome",
]
