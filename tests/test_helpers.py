"""Tests for shared helpers."""

import pytest

from nexavalidate.utils.helpers import (
    camel_case,
    get_nested,
    is_empty,
    set_nested,
    snake_case,
    split_list,
    str_to_arg,
    to_bool,
    to_float,
    to_int,
    to_number,
    value_len,
)


class TestStringHelpers:
    @pytest.mark.parametrize(
        "text, expected",
        [("customValidator", "custom_validator"), ("HTTPServer", "http_server"), ("min-len", "min_len")],
    )
    def test_snake_case(self, text, expected):
        assert snake_case(text) == expected

    @pytest.mark.parametrize(
        "text, expected",
        [("min_len", "minLen"), ("gtField", "gtField"), ("Required", "required"), ("__", "")],
    )
    def test_camel_case(self, text, expected):
        assert camel_case(text) == expected

    def test_split_list(self):
        assert split_list("name, email,,") == ["name", "email"]
        assert split_list("a;b", ";") == ["a", "b"]
        assert split_list("  ") == []


class TestPathHelpers:
    """Tests for dot-path access."""

    def test_get_nested(self):
        data = {"user": {"tags": ["a", "b"], "name": "inhere"}}

        assert get_nested(data, "user.name") == ("inhere", True)
        assert get_nested(data, "user.tags.1") == ("b", True)
        assert get_nested(data, "user.tags.5") == (None, False)
        assert get_nested(data, "user.age") == (None, False)
        assert get_nested(data, "user.name.first") == (None, False)

    def test_get_nested_none_value_is_found(self):
        assert get_nested({"a": None}, "a") == (None, True)

    def test_set_nested(self):
        data = {"items": [{"id": 1}]}

        set_nested(data, "user.name", "inhere")
        set_nested(data, "items.0.id", 2)

        assert data == {"user": {"name": "inhere"}, "items": [{"id": 2}]}

    def test_set_nested_on_scalar(self):
        with pytest.raises(TypeError):
            set_nested({"a": 1}, "a.b", 2)


class TestValueHelpers:
    """Tests for conversions and emptiness."""

    def test_str_to_arg(self):
        assert str_to_arg(" 12 ") == 12
        assert str_to_arg("-3") == -3
        assert str_to_arg("1.5") == 1.5
        assert str_to_arg("TRUE") is True
        assert str_to_arg("false") is False
        assert str_to_arg("abc") == "abc"

    def test_to_int(self):
        assert to_int("42") == 42
        assert to_int(b"7") == 7
        assert to_int(3.0) == 3

        with pytest.raises(ValueError):
            to_int(3.5)
        with pytest.raises(ValueError):
            to_int("4x")
        with pytest.raises(ValueError):
            to_int(None)

    def test_to_float(self):
        assert to_float("1.5") == 1.5
        assert to_float(2) == 2.0

        with pytest.raises(ValueError):
            to_float("abc")

    def test_to_bool(self):
        assert to_bool("on") is True
        assert to_bool(" No ") is False
        assert to_bool(0) is False

        with pytest.raises(ValueError):
            to_bool("maybe")

    def test_to_number(self):
        assert to_number("3") == 3
        assert isinstance(to_number("3"), int)
        assert to_number("3.5") == 3.5

        with pytest.raises(ValueError):
            to_number("x")

    @pytest.mark.parametrize("value", [None, "", [], {}, (), set(), b""])
    def test_empty_values(self, value):
        assert is_empty(value)

    @pytest.mark.parametrize("value", [0, False, "0", "  ", [0], 0.0])
    def test_non_empty_values(self, value):
        assert not is_empty(value)

    def test_value_len(self):
        assert value_len("abc") == 3
        assert value_len({"a": 1}) == 1

        with pytest.raises(TypeError):
            value_len(12)
