"""Decomposition of free-text failure messages.

Assertion failures from the engine's matcher library look like::

    Expected: <2>
      Actual: <3>
       ^
     Differ at offset 0

When a message contains such a block, the expected and actual values are
lifted into structured attributes and the headline is shortened to the
text that precedes the block.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from eventbridge.config import DEFAULT_CONFIG

EXPECTED_MARKER = "Expected: "

EXPECTED_ACTUAL = re.compile(
    r"Expected: (.*)\n  Actual: (.*)\n *\^\n Differ.*\n"
)

COMPARISON_FAILED = DEFAULT_CONFIG["comparison_failed"]


@dataclass(frozen=True)
class FailureDetails:
    """Headline plus the optional expected/actual pair of a failure."""

    headline: str
    expected: str | None = None
    actual: str | None = None

    @property
    def is_comparison(self) -> bool:
        return self.expected is not None


def decompose_failure(
    message: str, comparison_headline: str = COMPARISON_FAILED,
) -> FailureDetails:
    """Split a failure message into headline, expected, and actual.

    Args:
        message: The engine's error text.
        comparison_headline: Headline used when the message starts with
            the expected/actual block.

    Returns:
        The decomposed failure; the headline is the full message when no
        expected/actual block is found.
    """
    marker = message.find(EXPECTED_MARKER)
    if marker < 0:
        return FailureDetails(headline=message)

    match = EXPECTED_ACTUAL.match(message, marker)
    if match is None:
        return FailureDetails(headline=message)

    headline = comparison_headline if marker == 0 else message[:marker]
    return FailureDetails(
        headline=headline,
        expected=match.group(1),
        actual=match.group(2),
    )
