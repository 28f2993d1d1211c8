"""
NexaValidate Validation System
==============================

Rule-based validation for mappings, JSON, dataclasses and forms.

Features:
- String rules ("required|int:1,99|minLen:7")
- Custom validators and filters
- Scenes and field display names
- Error message templates
"""

from nexavalidate.validation.errors import Errors
from nexavalidate.validation.filters import (
    BUILTIN_FILTERS,
    add_filter,
    apply_filters,
    parse_filter_rule,
)
from nexavalidate.validation.messages import DEFAULT_MESSAGES, Translator
from nexavalidate.validation.parser import RuleSpec, parse_string_rule
from nexavalidate.validation.rule import Rule
from nexavalidate.validation.validation import (
    Validation,
    ValidationResult,
    validate,
    validate_or_fail,
)
from nexavalidate.validation.validators import (
    BUILTIN_VALIDATORS,
    FuncMeta,
    Validators,
    add_validator,
    add_validators,
    check_validator_func,
    validator_name,
)

__all__ = [
    # Core
    "Validation",
    "ValidationResult",
    "validate",
    "validate_or_fail",
    # Rules
    "Rule",
    "RuleSpec",
    "parse_string_rule",
    # Validators
    "BUILTIN_VALIDATORS",
    "FuncMeta",
    "Validators",
    "add_validator",
    "add_validators",
    "check_validator_func",
    "validator_name",
    # Filters
    "BUILTIN_FILTERS",
    "add_filter",
    "apply_filters",
    "parse_filter_rule",
    # Messages
    "DEFAULT_MESSAGES",
    "Errors",
    "Translator",
]
