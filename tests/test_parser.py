"""Tests for rule strings and rule objects."""

import pytest

from nexavalidate import ConfigurationError, Rule, Translator, new
from nexavalidate.validation.parser import RuleSpec, parse_string_rule


class TestParseStringRule:
    """Tests for parse_string_rule()."""

    def test_basic_rules(self):
        specs = parse_string_rule("required|int:1,5|minLen:7")

        assert specs == [
            RuleSpec("required"),
            RuleSpec("isInt", (1, 5)),
            RuleSpec("minLength", (7,)),
        ]

    def test_skips_empty_tokens(self):
        specs = parse_string_rule(" |required||minLen:2|: ")
        assert [s.name for s in specs] == ["required", "minLength"]

    def test_argument_coercion(self):
        (spec,) = parse_string_rule("between:1.5,abc,true")
        assert spec.name == "between"
        assert spec.args == (1.5, "abc", True)

    def test_enum_arguments_are_grouped(self):
        specs = parse_string_rule("in:1,2,3|notIn:a,b")

        assert specs[0] == RuleSpec("enum", ([1, 2, 3],))
        assert specs[1] == RuleSpec("notIn", (["a", "b"],))

    def test_regexp_keeps_remainder(self):
        (spec,) = parse_string_rule(r"regexp:^\w{2,4}:\d+$")
        assert spec.args == (r"^\w{2,4}:\d+$",)

    def test_default(self):
        specs = parse_string_rule("int|default:18")

        assert specs[1].is_default
        assert specs[1].args == (18,)
        assert not specs[0].is_default

    def test_snake_case_names(self):
        (spec,) = parse_string_rule("max_len:10")
        assert spec.name == "maxLength"


class TestRule:
    """Tests for the Rule model."""

    def test_fields_split_and_kept_in_order(self):
        rule = Rule("name, email,name", "required")
        assert rule.fields == ["name", "email", "name"]

    def test_fields_from_list(self):
        assert Rule(["a", "b,c"], "required").fields == ["a", "b", "c"]

    def test_empty_fields_rejected(self):
        with pytest.raises(ConfigurationError):
            Rule("", "required")

    def test_alias_normalized(self):
        rule = Rule("age", "range", 1, 9)
        assert rule.validator == "between"
        assert rule.arguments == (1, 9)

    def test_chainable_setters(self):
        rule = (
            Rule("age", "min", 1)
            .set_scene("create,update")
            .set_optional()
            .set_skip_empty(False)
            .set_message("bad age")
        )

        assert rule.scene == ["create", "update"]
        assert rule.in_scene("update")
        assert not rule.in_scene("delete")
        assert rule.optional is True
        assert rule.skip_empty is False

    def test_check_func_signature(self):
        """Test check funcs are checked against the rule arguments."""
        rule = Rule("age", "between", 1, 9)

        rule.set_check_func(lambda value, low, high: low <= value <= high)
        assert rule.check_func.call(5, 1, 9) == (True, None)

        with pytest.raises(ConfigurationError):
            rule.set_check_func(lambda value: True)
        with pytest.raises(ConfigurationError):
            rule.set_check_func(lambda: True)

    def test_error_message_precedence(self):
        trans = Translator(field_map={"age": "Age"})
        rule = Rule("age", "min", 18)

        assert rule.error_message("age", "min", trans) == "Age min value is 18"
        assert rule.error_message("age", "min", trans, fallback="from check") == "from check"

        rule.set_message("{field} is too low")
        assert rule.error_message("age", "min", trans) == "Age is too low"

        rule.set_messages({"age": "age message"})
        assert rule.error_message("age", "min", trans) == "age message"

        rule.set_messages({"age.min": "need {0}"})
        assert rule.error_message("age", "min", trans) == "need 18"

    def test_message_keys_accept_validator_aliases(self):
        rule = Rule("name", "minLen", 7).set_messages({"name.minLen": "custom too short"})
        assert rule.error_message("name", rule.validator, Translator()) == "custom too short"

        v = new({"name": "inhere"})
        v.add_rule("name", "minLen", 7).set_messages({"name.minLen": "custom too short"})
        assert v.validate() is False
        assert v.errors.get("name") == "custom too short"
