"""
NexaValidate Rule Parser
========================

Compiles pipe-separated rule strings into rule directives.

Example:
    >>> parse_string_rule("required|int:1,5|in:1,2,3")
    [RuleSpec(name='required', args=(), kind='rule'),
     RuleSpec(name='isInt', args=(1, 5), kind='rule'),
     RuleSpec(name='enum', args=([1, 2, 3],), kind='rule')]

Directive syntax:
- "name": validator without arguments
- "name:a,b": arguments split on commas, numbers and booleans coerced
- "regexp:<pattern>": the whole remainder is the pattern
- "in:a,b,c" / "notIn:a,b": arguments passed as one list
- "default:value": default value for the field, not a validator
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Tuple

from nexavalidate.utils.helpers import str_to_arg
from nexavalidate.validation.validators import validator_name

RULE = "rule"
DEFAULT = "default"

# Validators taking the whole remainder as one argument
RAW_ARG_VALIDATORS = frozenset({"regexp"})

# Validators taking their arguments as one list
LIST_ARG_VALIDATORS = frozenset({"enum", "notIn"})


@dataclass(frozen=True)
class RuleSpec:
    """
    One compiled rule directive.

    Attributes:
        name: Canonical validator name (or "default")
        args: Arguments for the validator
        kind: RULE or DEFAULT
    """

    name: str
    args: Tuple[Any, ...] = ()
    kind: str = RULE

    @property
    def is_default(self) -> bool:
        return self.kind == DEFAULT


def _coerce_args(text: str) -> List[Any]:
    return [str_to_arg(part) for part in text.split(",")]


def parse_token(token: str) -> RuleSpec:
    """Compile a single rule token."""
    if ":" not in token:
        return RuleSpec(validator_name(token))

    name, rest = token.split(":", 1)
    name = validator_name(name)

    if name == DEFAULT:
        return RuleSpec(DEFAULT, (str_to_arg(rest),), DEFAULT)
    if name in RAW_ARG_VALIDATORS:
        return RuleSpec(name, (rest,))
    if name in LIST_ARG_VALIDATORS:
        return RuleSpec(name, (_coerce_args(rest),))
    return RuleSpec(name, tuple(_coerce_args(rest)))


def parse_string_rule(rule: str) -> List[RuleSpec]:
    """
    Compile a rule string into directives, in order.

    Empty tokens are skipped, so "required||minLen:2|" is fine.
    """
    specs: List[RuleSpec] = []
    for token in rule.strip().strip("|:").split("|"):
        token = token.strip().strip(":")
        if token:
            specs.append(parse_token(token))
    return specs
