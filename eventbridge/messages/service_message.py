"""Service messages: the downstream test-progress wire format.

A message is one line of the form::

    ##teamcity[testStarted name='parses input' nodeId='3' parentNodeId='1']

Attribute values are escaped with ``|`` as the escape character.  The
format has no native nesting; the tree is carried by the ``nodeId`` and
``parentNodeId`` attributes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

# Prefix and suffix of every rendered message
MESSAGE_PREFIX = "##teamcity["
MESSAGE_SUFFIX = "]"

# Message names
TEST_STARTED = "testStarted"
TEST_FINISHED = "testFinished"
TEST_IGNORED = "testIgnored"
TEST_FAILED = "testFailed"
TEST_STD_OUT = "testStdOut"
TEST_STD_ERR = "testStdErr"
TEST_SUITE_STARTED = "testSuiteStarted"
TEST_SUITE_FINISHED = "testSuiteFinished"


_ESCAPES = {
    "|": "||",
    "'": "|'",
    "\n": "|n",
    "\r": "|r",
    "[": "|[",
    "]": "|]",
    "\u0085": "|x",
    "\u2028": "|l",
    "\u2029": "|p",
}

_UNESCAPES = {
    "|": "|",
    "'": "'",
    "n": "\n",
    "r": "\r",
    "[": "[",
    "]": "]",
    "x": "\u0085",
    "l": "\u2028",
    "p": "\u2029",
}

_ATTRIBUTE = re.compile(r"\s*([\w.-]+)='((?:\|.|[^|'])*)'", re.DOTALL)
_MESSAGE_NAME = re.compile(r"[\w.-]+")


def escape_value(value: str) -> str:
    """Escape an attribute value for embedding between single quotes."""
    return "".join(_ESCAPES.get(ch, ch) for ch in value)


def unescape_value(value: str) -> str:
    """Reverse :func:`escape_value`, also decoding ``|0xNNNN`` escapes."""
    out: list[str] = []
    i = 0
    while i < len(value):
        ch = value[i]
        if ch != "|" or i + 1 >= len(value):
            out.append(ch)
            i += 1
            continue
        nxt = value[i + 1]
        if nxt == "0" and value[i + 2:i + 3] == "x":
            digits = value[i + 3:i + 7]
            try:
                out.append(chr(int(digits, 16)))
                i += 7
                continue
            except ValueError:
                pass
        out.append(_UNESCAPES.get(nxt, nxt))
        i += 2
    return "".join(out)


@dataclass
class ServiceMessage:
    """A service message under construction.

    Attributes keep insertion order, with ``name`` first.
    """

    message_name: str
    attributes: dict[str, str] = field(default_factory=dict)

    @classmethod
    def named(cls, message_name: str, name: str) -> ServiceMessage:
        return cls(message_name=message_name, attributes={"name": name})

    @classmethod
    def test_started(cls, name: str) -> ServiceMessage:
        return cls.named(TEST_STARTED, name)

    @classmethod
    def test_finished(cls, name: str) -> ServiceMessage:
        return cls.named(TEST_FINISHED, name)

    @classmethod
    def test_ignored(cls, name: str) -> ServiceMessage:
        return cls.named(TEST_IGNORED, name)

    @classmethod
    def test_failed(cls, name: str) -> ServiceMessage:
        return cls.named(TEST_FAILED, name)

    @classmethod
    def test_std_out(cls, name: str) -> ServiceMessage:
        return cls.named(TEST_STD_OUT, name)

    @classmethod
    def test_std_err(cls, name: str) -> ServiceMessage:
        return cls.named(TEST_STD_ERR, name)

    @classmethod
    def test_suite_started(cls, name: str) -> ServiceMessage:
        return cls.named(TEST_SUITE_STARTED, name)

    @classmethod
    def test_suite_finished(cls, name: str) -> ServiceMessage:
        return cls.named(TEST_SUITE_FINISHED, name)

    @property
    def name(self) -> str | None:
        return self.attributes.get("name")

    def add_attribute(self, key: str, value: str) -> ServiceMessage:
        """Set an attribute and return the message for chaining."""
        self.attributes[key] = value
        return self

    def render(self) -> str:
        """Render the message as a single wire-format line."""
        parts = [
            f"{key}='{escape_value(value)}'"
            for key, value in self.attributes.items()
        ]
        body = " ".join([self.message_name, *parts])
        return f"{MESSAGE_PREFIX}{body}{MESSAGE_SUFFIX}"

    def __str__(self) -> str:
        return self.render()


def parse_service_message(line: str) -> ServiceMessage | None:
    """Parse one rendered message line.

    Surrounding whitespace is ignored.  Lines that are not well-formed
    service messages return ``None``.
    """
    text = line.strip()
    if not text.startswith(MESSAGE_PREFIX) or not text.endswith(MESSAGE_SUFFIX):
        return None
    body = text[len(MESSAGE_PREFIX):-len(MESSAGE_SUFFIX)]

    name_match = _MESSAGE_NAME.match(body)
    if name_match is None:
        return None
    message = ServiceMessage(message_name=name_match.group(0))

    pos = name_match.end()
    while pos < len(body):
        attr_match = _ATTRIBUTE.match(body, pos)
        if attr_match is None:
            if body[pos:].strip():
                return None
            break
        message.attributes[attr_match.group(1)] = unescape_value(
            attr_match.group(2)
        )
        pos = attr_match.end()
    return message
