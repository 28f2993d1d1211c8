"""Tests for built-in filters and filter rules."""

import pytest

from nexavalidate import ConfigurationError, FilterError, add_filter, new
from nexavalidate.validation import filters as f
from nexavalidate.validation.filters import apply_filters, filter_name, global_filters, parse_filter_rule


@pytest.fixture
def restore_global_filters():
    saved = dict(global_filters)
    yield
    global_filters.clear()
    global_filters.update(saved)


class TestFilterRules:
    """Tests for parsing and applying filter rules."""

    def test_parse(self):
        assert parse_filter_rule("trim|toInt") == [("trim", ()), ("int", ())]
        assert parse_filter_rule("split:;") == [("strToList", (";",))]
        assert parse_filter_rule(" |lower| ") == [("lower", ())]

    @pytest.mark.parametrize(
        "name, expected",
        [("toInt", "int"), ("trimSpace", "trim"), ("lowercase", "lower"), ("snake_case", "snakeCase")],
    )
    def test_aliases(self, name, expected):
        assert filter_name(name) == expected

    def test_apply_in_order(self):
        assert apply_filters("  42 ", "trim|int") == 42
        assert apply_filters(" A;b ", "trim|lower|strToList:;") == ["a", "b"]

    def test_unknown_filter(self):
        with pytest.raises(ConfigurationError):
            apply_filters("x", "nope")

    def test_conversion_error(self):
        with pytest.raises(FilterError, match="cannot convert 'abc'"):
            apply_filters("abc", "int")

    def test_global_filter(self, restore_global_filters):
        add_filter("reverse", lambda value: value[::-1])

        v = new({"code": "cba"})
        v.filter_rule("code", "reverse")
        v.string_rule("code", "startsWith:abc")
        assert v.validate() is True

        with pytest.raises(ConfigurationError):
            add_filter("bad", None)


class TestBuiltinFilters:
    """Tests for the built-in filters."""

    def test_numbers(self):
        assert f.to_int_filter("12") == 12
        assert f.to_uint_filter("3") == 3
        assert f.to_float_filter("1.5") == 1.5
        assert f.to_bool_filter("yes") is True

        with pytest.raises(FilterError):
            f.to_uint_filter("-3")
        with pytest.raises(FilterError):
            f.to_float_filter("x")
        with pytest.raises(FilterError):
            f.to_bool_filter("maybe")

    def test_strings(self):
        assert f.to_string(12) == "12"
        assert f.to_string(b"ab") == "ab"
        assert f.trim(" a ") == "a"
        assert f.ltrim(" a ") == "a "
        assert f.rtrim(" a ") == " a"
        assert f.upper("a") == "A"
        assert f.title("hello world") == "Hello World"
        assert f.snake_case_filter("userName") == "user_name"
        assert f.camel_case_filter("user_name") == "userName"
        assert f.escape_html("<b>") == "&lt;b&gt;"
        assert f.strip_tags("<b>bold</b>") == "bold"
        assert f.email(" Some@E.com ") == "some@e.com"
        assert f.str_to_list("a, b,,c") == ["a", "b", "c"]
        assert f.str_to_list(["a"]) == ["a"]

    def test_text_filters_need_strings(self):
        with pytest.raises(FilterError):
            f.trim(12)
