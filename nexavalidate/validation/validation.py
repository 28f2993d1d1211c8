"""
NexaValidate Validation
=======================

Core validation engine.

Runs rules against a data source and collects errors and the
safe (validated) data.

Example:
    v = MapData({"name": "inhere", "age": 100}).create()
    v.string_rules({
        "name": "required|minLen:7",
        "age": "required|int|range:1,99",
    })

    if v.validate():
        print(v.safe_data)
    else:
        print(v.errors.one())  # 'name min length is 7'
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    MutableMapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from nexavalidate.core.config import get_options
from nexavalidate.core.exceptions import (
    ConfigurationError,
    FilterError,
    InvalidDataError,
    SetValueError,
    ValidationError,
    ValidationStateError,
)
from nexavalidate.data.base import DataSource
from nexavalidate.data.form import FormData
from nexavalidate.data.map import MapData
from nexavalidate.data.struct import StructData
from nexavalidate.utils.helpers import is_empty, set_nested
from nexavalidate.utils.logger import get_logger
from nexavalidate.validation.errors import Errors
from nexavalidate.validation.filters import FilterFunc, apply_filters, filter_name
from nexavalidate.validation.messages import Translator
from nexavalidate.validation.parser import parse_string_rule
from nexavalidate.validation.rule import Fields, Rule, split_fields
from nexavalidate.validation.validators import (
    EXCLUDE,
    FIELD_VALIDATORS,
    REQUIRED_VALIDATORS,
    SAFE,
    FuncMeta,
    ValidatorFunc,
    Validators,
    check_validator_func,
    enum,
    global_validators,
    gt,
    lt,
    max_value,
    min_value,
    required,
)

logger = get_logger("nexavalidate.validation")

# Error key of construction errors
ERROR_KEY = "_validate"

RuleInput = Union[str, Rule, Sequence[Union[str, Rule]]]


@dataclass
class ValidationResult:
    """
    Result of validation.

    Contains safe data and any errors.
    """

    valid: bool
    data: Dict[str, Any] = field(default_factory=dict)
    errors: Dict[str, List[str]] = field(default_factory=dict)

    def __bool__(self) -> bool:
        """Allow using result as boolean."""
        return self.valid

    def failed(self) -> bool:
        """Check if validation failed."""
        return not self.valid

    def has_error(self, field_name: str) -> bool:
        """Check if field has error."""
        return field_name in self.errors

    def get_errors(self, field_name: str) -> List[str]:
        """Get errors for field."""
        return self.errors.get(field_name, [])

    def first_error(self, field_name: Optional[str] = None) -> Optional[str]:
        """Get first error message."""
        if field_name:
            messages = self.errors.get(field_name, [])
            return messages[0] if messages else None
        for messages in self.errors.values():
            if messages:
                return messages[0]
        return None

    def all_errors(self) -> List[str]:
        """Get all error messages as flat list."""
        all_msgs = []
        for messages in self.errors.values():
            all_msgs.extend(messages)
        return all_msgs

    def raise_if_invalid(self) -> None:
        """Raise ValidationError if invalid."""
        if not self.valid:
            raise ValidationError(errors=self.errors)


class _Halt(Exception):
    # Raised inside a run to stop at the first error
    pass


class Validation:
    """
    Validation engine bound to one data source.

    A run goes unvalidated -> validating -> passed/failed. Running
    again requires `reset_result()` first.

    Attributes:
        data: Data source being validated
        rules: Rules in declaration order
        scene: Active scene name
        stop_on_error: Stop the run at the first error
        skip_on_empty: Default skip_empty for rules appended later
        errors: Collected errors
        trans: Message translator
    """

    def __init__(
        self,
        data: Optional[DataSource],
        error: Optional[Exception] = None,
        scene: Optional[str] = None,
    ) -> None:
        """
        Initialize validation.

        Args:
            data: Data source to validate
            error: Construction error; when set validate() returns False
            scene: Initial scene name
        """
        if data is None:
            data = MapData()
            error = error or InvalidDataError()

        self.options = get_options()
        self.data: DataSource = data
        self.rules: List[Rule] = []
        self.scene = scene or ""
        self.scenes: Dict[str, List[str]] = {}
        self.stop_on_error = self.options.stop_on_error
        self.skip_on_empty = self.options.skip_on_empty

        self.errors = Errors()
        self.trans = Translator()

        self._safe_data: Dict[str, Any] = {}
        self._validators = Validators()
        self._filters: Dict[str, FilterFunc] = {}
        self._filter_rules: Dict[str, List[str]] = {}
        self._defaults: Dict[str, Any] = {}
        self._struct_funcs: Dict[str, Optional[FuncMeta]] = {}
        self._validated = False

        self.error = error
        if error is not None:
            self.errors.add(ERROR_KEY, str(error) or InvalidDataError().args[0])

    # =========================================================================
    # Rule declaration
    # =========================================================================

    def add_rule(self, fields: Fields, validator: str, *args: Any) -> Rule:
        """
        Add a rule for one or more comma-separated fields.

        Raises:
            ConfigurationError: if no field is given
        """
        return self.append_rule(Rule(fields, validator, *args))

    def append_rule(self, rule: Rule) -> Rule:
        """Append a rule; it inherits the engine's skip_on_empty."""
        rule.skip_empty = self.skip_on_empty
        self.rules.append(rule)
        return rule

    def string_rule(
        self,
        fields: Fields,
        rule: str,
        filter_rule: Optional[str] = None,
    ) -> "Validation":
        """
        Add rules from a rule string.

        Example:
            v.string_rule("age", "required|int:1,99|default:18", "trim|int")
        """
        names = split_fields(fields)
        for spec in parse_string_rule(rule):
            if spec.is_default:
                for name in names:
                    self.set_def_value(name, spec.args[0])
            else:
                self.add_rule(names, spec.name, *spec.args)

        if filter_rule:
            self.filter_rule(names, filter_rule)
        return self

    def string_rules(
        self,
        rules: Union[Mapping[str, RuleInput], Iterable[Tuple[str, RuleInput]]],
    ) -> "Validation":
        """
        Add rules for several fields.

        Rule values may be rule strings, Rule objects or lists of
        either. Mappings are evaluated in insertion order.
        """
        items = rules.items() if isinstance(rules, Mapping) else rules
        for fields, spec in items:
            self._add_rule_input(fields, spec)
        return self

    # Same as string_rules, for rule maps loaded from configuration
    config_rules = string_rules

    def _add_rule_input(self, fields: str, spec: RuleInput) -> None:
        if isinstance(spec, Rule):
            self.append_rule(spec)
        elif isinstance(spec, str):
            self.string_rule(fields, spec)
        else:
            for item in spec:
                self._add_rule_input(fields, item)

    def filter_rule(self, fields: Fields, rule: str) -> "Validation":
        """Add a filter rule ("trim|int") applied before any validator."""
        for name in split_fields(fields):
            self._filter_rules.setdefault(name, []).append(rule)
        return self

    def filter_rules(self, rules: Mapping[str, str]) -> "Validation":
        for fields, rule in rules.items():
            self.filter_rule(fields, rule)
        return self

    def set_def_value(self, field: str, value: Any) -> "Validation":
        """Set value used when the field is absent or None."""
        self._defaults[field] = value
        return self

    # =========================================================================
    # Scenes
    # =========================================================================

    def with_scenes(self, scenes: Mapping[str, Fields]) -> "Validation":
        """
        Set the fields checked per scene.

        Example:
            v.with_scenes({"create": ["name", "age"], "update": "name"})
        """
        self.scenes = {name: split_fields(fields) for name, fields in scenes.items()}
        return self

    def set_scene(self, scene: Optional[str] = None) -> "Validation":
        if scene:
            self.scene = scene
        return self

    def scene_fields(self) -> Optional[List[str]]:
        """Fields of the active scene, None when every field is checked."""
        if self.scene and self.scene in self.scenes:
            return self.scenes[self.scene]
        return None

    # =========================================================================
    # Registration
    # =========================================================================

    def add_validator(self, name: str, func: ValidatorFunc) -> "Validation":
        """
        Register a validator for this validation only.

        Raises:
            ConfigurationError: for unsupported signatures
        """
        self._validators.add(name, func)
        return self

    def add_validators(self, funcs: Mapping[str, ValidatorFunc]) -> "Validation":
        self._validators.add_many(funcs)
        return self

    def add_filter(self, name: str, func: FilterFunc) -> "Validation":
        """Register a filter for this validation only."""
        if not callable(func):
            raise ConfigurationError(f"filter '{name}' must be callable")
        self._filters[filter_name(name)] = func
        return self

    def add_translates(self, field_map: Mapping[str, str]) -> "Validation":
        """Set field display names used in messages."""
        self.trans.add_field_map(field_map)
        return self

    def add_messages(self, messages: Mapping[str, str]) -> "Validation":
        """Set message templates ("minLength" or "name.minLength" keys)."""
        self.trans.add_messages(messages)
        return self

    # =========================================================================
    # Data access
    # =========================================================================

    def get(self, field: str) -> Tuple[Any, bool]:
        """Get current value of a field from the data source."""
        return self._value(field)

    def set(self, field: str, value: Any) -> None:
        """
        Write a value into the data source.

        Raises:
            SetValueError: if the data source refuses the value
        """
        self.data.set(field, value)

    def _value(self, field: str) -> Tuple[Any, bool]:
        value, found = self.data.get(field)
        if (not found or value is None) and isinstance(self.data, FormData):
            if self.data.has_file(field):
                return self.data.get_file(field), True
        return value, found

    # =========================================================================
    # Running
    # =========================================================================

    def validate(self, scene: Optional[str] = None) -> bool:
        """
        Run every rule.

        Returns:
            True when no errors were found

        Raises:
            ValidationStateError: if already run without reset_result()
            ConfigurationError: for unknown validators or filters
        """
        if self.error is not None:
            return False
        if self._validated:
            raise ValidationStateError(
                "validation already ran, call reset_result() before validating again"
            )
        self._validated = True
        self.set_scene(scene)

        scene_fields = self.scene_fields()
        excluded = {f for rule in self.rules if rule.validator == EXCLUDE for f in rule.fields}

        def in_scope(name: str) -> bool:
            if name in excluded:
                return False
            return scene_fields is None or name in scene_fields

        logger.debug(
            "Validation started",
            scene=self.scene,
            rules=len(self.rules),
            stop_on_error=self.stop_on_error,
        )

        checked: Dict[str, None] = {}
        safe_fields: Dict[str, None] = {}

        try:
            self._apply_defaults(in_scope)
            self._apply_filter_rules(in_scope)

            for rule in self.rules:
                if rule.validator == EXCLUDE or not rule.in_scene(self.scene):
                    continue

                for name in rule.fields:
                    if not in_scope(name):
                        continue
                    if rule.validator == SAFE:
                        safe_fields[name] = None
                        continue
                    if self._check_field(rule, name):
                        checked[name] = None
        except _Halt:
            pass

        if self.errors.empty():
            for name in (*checked, *safe_fields):
                value, found = self._value(name)
                if found:
                    self._safe_data[name] = value

        logger.debug(
            "Validation finished",
            scene=self.scene,
            passed=self.errors.empty(),
            errors=len(self.errors),
        )
        return self.errors.empty()

    def _record(self, field: str, message: str) -> None:
        self.errors.add(field, message)
        if self.stop_on_error:
            raise _Halt()

    def _apply_defaults(self, in_scope: Callable[[str], bool]) -> None:
        for name, default in self._defaults.items():
            if not in_scope(name):
                continue
            value, found = self.data.get(name)
            if found and value is not None:
                continue
            try:
                self.data.set(name, default)
            except SetValueError as e:
                logger.warning("Default value not set", field=name, reason=e.reason)

    def _apply_filter_rules(self, in_scope: Callable[[str], bool]) -> None:
        for name, rules in self._filter_rules.items():
            if not in_scope(name):
                continue
            value, found = self.data.get(name)
            if not found:
                continue
            try:
                for rule in rules:
                    value = apply_filters(value, rule, self._filters)
                self.data.set(name, value)
            except (FilterError, SetValueError) as e:
                logger.warning("Filter failed", field=name, error=str(e))
                self._record(name, self.trans.message("_filter", name))

    def _check_field(self, rule: Rule, name: str) -> bool:
        """
        Check one field against a rule.

        Returns:
            True if the validator ran
        """
        validator = rule.validator

        if rule.before_func is not None and not rule.before_func(name, self):
            logger.debug("Rule skipped by before func", field=name, validator=validator)
            return False

        value, found = self._value(name)

        if validator not in REQUIRED_VALIDATORS:
            if rule.optional and (not found or value is None):
                return False
            if rule.skip_empty and is_empty(value):
                logger.debug("Empty value skipped", field=name, validator=validator)
                return False

        if rule.filter_func is not None:
            try:
                value = rule.filter_func(value)
                self.data.set(name, value)
            except Exception as e:
                logger.warning("Rule filter failed", field=name, validator=validator, error=str(e))
                self._record(name, self.trans.message("_filter", name))
                return True

        ok, err = self._call(rule, name, value)
        if not ok:
            args = rule.arguments
            if validator in FIELD_VALIDATORS and args:
                args = (self.trans.field(str(args[0])), *args[1:])
            message = rule.error_message(name, validator, self.trans, fallback=err, args=args)
            logger.debug("Validation failed", field=name, validator=validator)
            self._record(name, message)
        return True

    def _call(self, rule: Rule, name: str, value: Any) -> Tuple[bool, Optional[str]]:
        validator = rule.validator
        args = rule.arguments

        if rule.check_func is not None:
            return rule.check_func.call(value, *args)

        meta = self._validators.get(validator) or self._struct_func(validator)
        if meta is None and validator in FIELD_VALIDATORS:
            if not args:
                raise ConfigurationError(f"validator '{validator}' needs the name of another field")
            return bool(getattr(self, FIELD_VALIDATORS[validator])(value, *args)), None
        if meta is None:
            meta = global_validators.get(validator)
        if meta is None:
            raise ConfigurationError(f"validator '{validator}' does not exist")

        if not meta.accepts(len(args)):
            raise ConfigurationError(
                f"validator '{validator}' cannot be called with {len(args)} argument(s) "
                f"for field '{name}'"
            )
        return meta.call(value, *args)

    def _struct_func(self, validator: str) -> Optional[FuncMeta]:
        if not isinstance(self.data, StructData):
            return None
        if validator not in self._struct_funcs:
            method = self.data.method(validator)
            self._struct_funcs[validator] = (
                check_validator_func(validator, method) if method is not None else None
            )
        return self._struct_funcs[validator]

    # =========================================================================
    # Field comparison validators
    # =========================================================================

    def _other(self, other: Any) -> Tuple[Any, bool]:
        return self._value(str(other))

    def eq_field(self, value: Any, other: Any) -> bool:
        """Value equals the other field's value."""
        other_value, found = self._other(other)
        return found and value == other_value

    def ne_field(self, value: Any, other: Any) -> bool:
        other_value, found = self._other(other)
        return not found or value != other_value

    def gt_field(self, value: Any, other: Any) -> bool:
        other_value, found = self._other(other)
        return found and gt(value, other_value)

    def gte_field(self, value: Any, other: Any) -> bool:
        other_value, found = self._other(other)
        return found and min_value(value, other_value)

    def lt_field(self, value: Any, other: Any) -> bool:
        other_value, found = self._other(other)
        return found and lt(value, other_value)

    def lte_field(self, value: Any, other: Any) -> bool:
        other_value, found = self._other(other)
        return found and max_value(value, other_value)

    def required_if(self, value: Any, other: Any, *values: Any) -> bool:
        """Value is required when the other field has one of the values."""
        other_value, found = self._other(other)
        if found and enum(other_value, *values):
            return required(value)
        return True

    def required_unless(self, value: Any, other: Any, *values: Any) -> bool:
        """Value is required unless the other field has one of the values."""
        other_value, found = self._other(other)
        if found and enum(other_value, *values):
            return True
        return required(value)

    def required_with(self, value: Any, *others: Any) -> bool:
        """Value is required when any of the other fields is present."""
        if any(required(self._other(o)[0]) for o in others):
            return required(value)
        return True

    def required_without(self, value: Any, *others: Any) -> bool:
        """Value is required when any of the other fields is missing."""
        if any(not required(self._other(o)[0]) for o in others):
            return required(value)
        return True

    # =========================================================================
    # Results
    # =========================================================================

    def reset_result(self) -> "Validation":
        """Clear errors and safe data so validate() can run again."""
        self.errors = Errors()
        if self.error is not None:
            self.errors.add(ERROR_KEY, str(self.error) or InvalidDataError().args[0])
        self._safe_data = {}
        self._validated = False
        return self

    @property
    def validated(self) -> bool:
        return self._validated

    @property
    def safe_data(self) -> Dict[str, Any]:
        """Values of the validated fields, filled only when the run passed."""
        return self._safe_data

    def safe_val(self, field: str) -> Any:
        return self._safe_data.get(field)

    def is_ok(self) -> bool:
        return self.errors.empty()

    def is_fail(self) -> bool:
        return not self.errors.empty()

    def result(self) -> ValidationResult:
        return ValidationResult(
            valid=self.is_ok(),
            data=dict(self._safe_data),
            errors=self.errors.to_dict(),
        )

    def bind_safe_data(self, target: Any) -> Any:
        """
        Copy safe data onto a dataclass, mapping or object.

        Raises:
            SetValueError: if a dataclass target refuses a value
        """
        if dataclasses.is_dataclass(target) and not isinstance(target, type):
            data = StructData(target)
            for name, value in self._safe_data.items():
                data.set(name, value)
        elif isinstance(target, MutableMapping):
            for name, value in self._safe_data.items():
                set_nested(target, name, value)
        else:
            for name, value in self._safe_data.items():
                setattr(target, name, value)
        return target

    def validate_or_fail(self, scene: Optional[str] = None) -> Dict[str, Any]:
        """
        Validate (if not done yet) and return the safe data.

        Raises:
            ValidationError: if validation failed
        """
        if not self._validated:
            self.validate(scene)
        if self.is_fail():
            raise ValidationError(errors=self.errors.to_dict())
        return dict(self._safe_data)

    def __repr__(self) -> str:
        return (
            f"<Validation data={type(self.data).__name__} rules={len(self.rules)} "
            f"scene={self.scene!r} validated={self._validated}>"
        )


# Convenience functions

def validate(
    data: Any,
    rules: Mapping[str, RuleInput],
    messages: Optional[Mapping[str, str]] = None,
    scene: Optional[str] = None,
) -> ValidationResult:
    """
    Validate data with rules.

    Data may be anything `factory.new()` accepts.

    Example:
        result = validate(
            {"email": "test@example.com"},
            {"email": "required|email"},
        )
    """
    from nexavalidate.factory import new

    v = new(data)
    v.string_rules(rules)
    if messages:
        v.add_messages(messages)
    v.validate(scene)
    return v.result()


def validate_or_fail(
    data: Any,
    rules: Mapping[str, RuleInput],
    messages: Optional[Mapping[str, str]] = None,
    scene: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Validate data and raise on failure.

    Returns safe data if successful.
    Raises ValidationError if validation fails.

    Example:
        try:
            data = validate_or_fail(payload, {"email": "required|email"})
        except ValidationError as e:
            return {"errors": e.errors}
    """
    result = validate(data, rules, messages, scene)
    result.raise_if_invalid()
    return result.data
