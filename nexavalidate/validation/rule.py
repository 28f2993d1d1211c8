"""
NexaValidate Rule
=================

A rule binds one validator (with its arguments) to one or more
fields, plus the options controlling when and how it runs.

Example:
    v.add_rule("name,email", "required")
    v.add_rule("age", "between", 1, 99).set_message("age is out of range")
    v.add_rule("code", "length", 4).set_scene("create").set_optional(True)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from nexavalidate.core.exceptions import ConfigurationError
from nexavalidate.utils.helpers import split_list
from nexavalidate.validation.messages import render
from nexavalidate.validation.validators import FuncMeta, check_validator_func, validator_name

if TYPE_CHECKING:
    from nexavalidate.validation.messages import Translator
    from nexavalidate.validation.validation import Validation

BeforeFunc = Callable[[str, "Validation"], bool]
FilterFunc = Callable[[Any], Any]

Fields = Union[str, Sequence[str]]


def split_fields(fields: Fields) -> List[str]:
    """Split comma-separated field names, keeping order."""
    if isinstance(fields, str):
        return split_list(fields)
    names: List[str] = []
    for item in fields:
        names.extend(split_list(item))
    return names


class Rule:
    """
    Validation rule.

    Attributes:
        fields: Field paths the rule applies to
        validator: Canonical validator name
        arguments: Arguments passed after the field value
        scene: Scenes the rule runs in, empty for all
        optional: Skip absent values
        skip_empty: Skip empty values
        message: Message for any failure of this rule
        messages: Messages keyed "field" or "field.validator"
    """

    def __init__(self, fields: Fields, validator: str, *args: Any) -> None:
        """
        Initialize rule.

        Raises:
            ConfigurationError: if no field name is given
        """
        self.fields: List[str] = split_fields(fields)
        if not self.fields:
            raise ConfigurationError(f"rule '{validator}' must have at least one field")

        self.validator = validator_name(validator)
        self.arguments: Tuple[Any, ...] = args

        self.scene: List[str] = []
        self.optional = False
        self.skip_empty = True
        self.message = ""
        self.messages: Dict[str, str] = {}

        self.before_func: Optional[BeforeFunc] = None
        self.filter_func: Optional[FilterFunc] = None
        self.check_func: Optional[FuncMeta] = None

    # =========================================================================
    # Chainable setters
    # =========================================================================

    def set_scene(self, scene: Fields) -> "Rule":
        self.scene = split_fields(scene) if scene else []
        return self

    def set_optional(self, optional: bool = True) -> "Rule":
        self.optional = optional
        return self

    def set_skip_empty(self, skip_empty: bool = True) -> "Rule":
        self.skip_empty = skip_empty
        return self

    def set_message(self, message: str) -> "Rule":
        self.message = message
        return self

    def set_messages(self, messages: Mapping[str, str]) -> "Rule":
        """
        Set per-field messages ("name" or "name.minLength" keys).

        Validator aliases ("name.minLen") are also stored under the
        canonical validator name.
        """
        for key, template in messages.items():
            self.messages[key] = template
            prefix, _, name = key.rpartition(".")
            canonical = validator_name(name)
            if prefix and canonical and canonical != name:
                self.messages[f"{prefix}.{canonical}"] = template
        return self

    def set_before_func(self, func: BeforeFunc) -> "Rule":
        """Set a hook deciding per field whether the rule runs."""
        self.before_func = func
        return self

    def set_filter_func(self, func: FilterFunc) -> "Rule":
        """Set a filter applied to the value before the check."""
        self.filter_func = func
        return self

    def set_check_func(self, func: Callable[..., Any]) -> "Rule":
        """
        Set a custom check used instead of the named validator.

        Raises:
            ConfigurationError: if func cannot take the value plus the rule arguments
        """
        self.check_func = check_validator_func(self.validator, func, len(self.arguments))
        return self

    # =========================================================================
    # Queries
    # =========================================================================

    def in_scene(self, scene: str) -> bool:
        """Check if the rule runs in the active scene."""
        return not self.scene or scene in self.scene

    def error_message(
        self,
        field: str,
        validator: str,
        trans: "Translator",
        fallback: Optional[str] = None,
        args: Optional[Sequence[Any]] = None,
    ) -> str:
        """
        Resolve the failure message for field.

        Rule messages win over the fallback from a (bool, error)
        check, which wins over the translator. Templates see the
        display name of the field and the rule arguments, or args
        when given.
        """
        args = self.arguments if args is None else tuple(args)
        for key in (f"{field}.{validator}", field):
            if key in self.messages:
                return render(self.messages[key], trans.field(field), args)
        if self.message:
            return render(self.message, trans.field(field), args)
        if fallback:
            return fallback
        return trans.message(validator, field, *args)

    def __repr__(self) -> str:
        return f"<Rule {','.join(self.fields)} {self.validator} args={list(self.arguments)}>"
