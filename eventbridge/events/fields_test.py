"""Tests for typed event field accessors."""

from __future__ import annotations

import pytest

from eventbridge.errors import EventDecodeError
from eventbridge.events.fields import (
    get_bool,
    get_int,
    get_int_list,
    get_object,
    has_scalar,
    string_or_default,
)


class TestGetInt:
    """Tests for get_int."""

    def test_int_value(self):
        assert get_int({"time": 120}, "time") == 120

    def test_integral_float(self):
        """Integral floats are accepted."""
        assert get_int({"time": 5.0}, "time") == 5

    def test_missing_raises(self):
        with pytest.raises(EventDecodeError, match="not type int"):
            get_int({}, "time")

    def test_none_object_raises(self):
        with pytest.raises(EventDecodeError):
            get_int(None, "id")

    def test_bool_rejected(self):
        """true is not an integer."""
        with pytest.raises(EventDecodeError):
            get_int({"id": True}, "id")

    def test_string_rejected(self):
        with pytest.raises(EventDecodeError):
            get_int({"id": "3"}, "id")


class TestGetBool:
    """Tests for get_bool."""

    def test_bool_value(self):
        assert get_bool({"hidden": False}, "hidden") is False
        assert get_bool({"hidden": True}, "hidden") is True

    def test_missing_raises(self):
        """A missing required flag is a decode error."""
        with pytest.raises(EventDecodeError, match="not type boolean"):
            get_bool({"testID": 1}, "hidden")

    def test_int_rejected(self):
        with pytest.raises(EventDecodeError):
            get_bool({"hidden": 1}, "hidden")


class TestGetObject:
    """Tests for get_object."""

    def test_present(self):
        assert get_object({"test": {"id": 1}}, "test") == {"id": 1}

    def test_absent_optional(self):
        assert get_object({}, "metadata") is None

    def test_absent_required(self):
        with pytest.raises(EventDecodeError, match="Missing object"):
            get_object({}, "group", required=True)

    def test_wrong_type(self):
        with pytest.raises(EventDecodeError, match="not an object"):
            get_object({"test": [1]}, "test")


class TestGetIntList:
    """Tests for get_int_list."""

    def test_list(self):
        assert get_int_list({"groupIDs": [1, 2]}, "groupIDs") == [1, 2]

    def test_absent_or_null(self):
        assert get_int_list({}, "groupIDs") == []
        assert get_int_list({"groupIDs": None}, "groupIDs") == []

    def test_bad_element(self):
        with pytest.raises(EventDecodeError):
            get_int_list({"groupIDs": [1, "x"]}, "groupIDs")

    def test_not_a_list(self):
        with pytest.raises(EventDecodeError):
            get_int_list({"groupIDs": 3}, "groupIDs")


class TestStringOrDefault:
    """Tests for string_or_default and has_scalar."""

    def test_string_value(self):
        assert string_or_default({"error": "boom"}, "error", "x") == "boom"

    def test_absent_uses_default(self):
        assert string_or_default({}, "error", "<none>") == "<none>"

    def test_null_uses_default(self):
        assert string_or_default({"stackTrace": None}, "stackTrace", "-") == "-"

    def test_object_uses_default(self):
        assert string_or_default({"message": {"a": 1}}, "message", "-") == "-"

    def test_scalars_rendered_as_text(self):
        assert string_or_default({"m": 3}, "m", "-") == "3"
        assert string_or_default({"m": True}, "m", "-") == "true"

    def test_has_scalar(self):
        assert has_scalar({"testID": 0}, "testID")
        assert not has_scalar({"testID": None}, "testID")
        assert not has_scalar({}, "testID")
        assert not has_scalar(None, "testID")
