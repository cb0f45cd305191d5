"""Tests for the conversion session facade."""

from __future__ import annotations

import json

import pytest

from eventbridge.config import ConverterConfig
from eventbridge.engine.converter import TestEventsConverter
from eventbridge.errors import ProtocolMismatchError
from eventbridge.messages.emitter import CollectingSink
from eventbridge.messages.service_message import parse_service_message


def _group(group_id: int, name: str | None, parent_id: int | None = None) -> str:
    return json.dumps({
        "type": "group",
        "group": {"id": group_id, "name": name, "parentID": parent_id},
        "time": 0,
    })


class TestPassthrough:
    """Non-event text is forwarded verbatim."""

    def test_plain_text_forwarded(self):
        sink = CollectingSink()
        conv = TestEventsConverter(sink)
        assert conv.process("Compiling...\n", channel="stderr")
        assert sink.records == [("Compiling...\n", "stderr")]

    def test_garbled_json_forwarded(self):
        sink = CollectingSink()
        conv = TestEventsConverter(sink)
        text = '{"type":"testStart","test":{"id":1,'
        conv.process(text)
        assert sink.lines == [text]

    def test_non_object_json_forwarded(self):
        sink = CollectingSink()
        conv = TestEventsConverter(sink)
        conv.process("[1, 2]")
        conv.process("123")
        assert sink.lines == ["[1, 2]", "123"]

    def test_passthrough_does_not_touch_state(self):
        sink = CollectingSink()
        conv = TestEventsConverter(sink)
        conv.process(_group(1, "g"))
        conv.process("noise")
        assert conv.state.parent_id == 1
        assert 1 in conv.registry.groups


class TestProtocolErrors:
    """Fatal decode errors propagate out of process()."""

    def test_unknown_type_raises(self):
        conv = TestEventsConverter(CollectingSink())
        with pytest.raises(ProtocolMismatchError):
            conv.process('{"type": "debug", "id": 1}')


class TestRunBoundaries:
    """Tests for start, done, and flush."""

    def test_start_resets_registry(self):
        sink = CollectingSink()
        conv = TestEventsConverter(sink)
        conv.process(_group(1, "g"))
        conv.process('{"type": "start", "time": 0}')
        assert len(conv.registry) == 0

    def test_done_finishes_groups_and_clears(self):
        sink = CollectingSink()
        conv = TestEventsConverter(sink)
        conv.process(_group(1, "G1"))
        conv.process(_group(2, "G1 G2", 1))
        sink.records.clear()
        assert conv.process('{"type": "done", "success": true, "time": 9}')
        names = sorted(parse_service_message(line).name for line in sink.lines)
        assert names == ["G1", "G2"]
        assert conv.registry.tests == {}
        assert conv.registry.groups == {}

    def test_flush_without_done(self):
        sink = CollectingSink()
        conv = TestEventsConverter(sink)
        conv.process(_group(1, "G1"))
        sink.records.clear()
        assert conv.flush()
        (line,) = sink.lines
        assert parse_service_message(line).message_name == "testSuiteFinished"
        assert len(conv.registry) == 0

    def test_flush_after_done_is_noop(self):
        sink = CollectingSink()
        conv = TestEventsConverter(sink)
        conv.process(_group(1, "G1"))
        conv.process('{"type": "done"}')
        sink.records.clear()
        assert conv.flush()
        assert sink.lines == []


class TestConfig:
    """Converter honours its configuration."""

    def test_custom_location_prefix(self):
        sink = CollectingSink()
        cfg = ConverterConfig(None)
        cfg.set_config(location_prefix="file://")
        conv = TestEventsConverter(sink, cfg)
        conv.process(json.dumps({
            "type": "testStart",
            "test": {"id": 0, "name": "loading a_test.dart", "groupIDs": []},
            "time": 0,
        }))
        conv.process(json.dumps({
            "type": "testStart",
            "test": {"id": 1, "name": "solo", "groupIDs": []},
            "time": 0,
        }))
        (line,) = sink.lines
        hint = parse_service_message(line).attributes["locationHint"]
        assert hint == 'file://a_test.dart,["solo"]'
