"""
NexaValidate Filters
====================

Value filters applied to fields before validation.

A filter receives the current value (plus rule arguments) and
returns the converted value. A value it cannot convert raises
`FilterError`; the engine records that under the field.

Filter rules use the same pipe syntax as validation rules:

    v.filter_rule("age", "trim|int")
    v.filter_rule("tags", "strToList:;")
"""

from __future__ import annotations

import html
import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from nexavalidate.core.exceptions import ConfigurationError, FilterError
from nexavalidate.utils.helpers import (
    camel_case,
    snake_case,
    str_to_arg,
    to_bool,
    to_float,
    to_int,
)

FilterFunc = Callable[..., Any]

FILTER_ALIASES: Dict[str, str] = {
    "toInt": "int",
    "integer": "int",
    "toUint": "uint",
    "toFloat": "float",
    "toBool": "bool",
    "boolean": "bool",
    "toString": "string",
    "str": "string",
    "trimSpace": "trim",
    "lowercase": "lower",
    "toLower": "lower",
    "uppercase": "upper",
    "toUpper": "upper",
    "snake": "snakeCase",
    "camel": "camelCase",
    "escape": "escapeHtml",
    "split": "strToList",
    "toList": "strToList",
}

_TAG_PATTERN = re.compile(r"<[^>]*>")


def filter_name(name: str) -> str:
    """Normalize a filter name, resolving aliases."""
    name = camel_case(name.strip())
    return FILTER_ALIASES.get(name, name)


def _convert(name: str, func: Callable[[Any], Any], value: Any) -> Any:
    try:
        return func(value)
    except (TypeError, ValueError) as e:
        raise FilterError(name, value, str(e)) from e


def to_int_filter(value: Any) -> int:
    return _convert("int", to_int, value)


def to_uint_filter(value: Any) -> int:
    number = _convert("uint", to_int, value)
    if number < 0:
        raise FilterError("uint", value, "value is negative")
    return number


def to_float_filter(value: Any) -> float:
    return _convert("float", to_float, value)


def to_bool_filter(value: Any) -> bool:
    return _convert("bool", to_bool, value)


def to_string(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return "" if value is None else str(value)


def _text(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise FilterError(name, value, "expected a string")
    return value


def trim(value: Any, chars: Optional[str] = None) -> str:
    return _text("trim", value).strip(chars)


def ltrim(value: Any, chars: Optional[str] = None) -> str:
    return _text("ltrim", value).lstrip(chars)


def rtrim(value: Any, chars: Optional[str] = None) -> str:
    return _text("rtrim", value).rstrip(chars)


def lower(value: Any) -> str:
    return _text("lower", value).lower()


def upper(value: Any) -> str:
    return _text("upper", value).upper()


def title(value: Any) -> str:
    return _text("title", value).title()


def snake_case_filter(value: Any) -> str:
    return snake_case(_text("snakeCase", value))


def camel_case_filter(value: Any) -> str:
    return camel_case(_text("camelCase", value))


def escape_html(value: Any) -> str:
    return html.escape(_text("escapeHtml", value))


def strip_tags(value: Any) -> str:
    return _TAG_PATTERN.sub("", _text("stripTags", value))


def email(value: Any) -> str:
    """Normalize an email address."""
    return _text("email", value).strip().lower()


def str_to_list(value: Any, separator: str = ",") -> List[str]:
    """Split a string into trimmed, non-empty items."""
    if isinstance(value, (list, tuple)):
        return list(value)
    text = _text("strToList", value)
    return [item.strip() for item in text.split(separator) if item.strip()]


BUILTIN_FILTERS: Dict[str, FilterFunc] = {
    "int": to_int_filter,
    "uint": to_uint_filter,
    "float": to_float_filter,
    "bool": to_bool_filter,
    "string": to_string,
    "trim": trim,
    "ltrim": ltrim,
    "rtrim": rtrim,
    "lower": lower,
    "upper": upper,
    "title": title,
    "snakeCase": snake_case_filter,
    "camelCase": camel_case_filter,
    "escapeHtml": escape_html,
    "stripTags": strip_tags,
    "email": email,
    "strToList": str_to_list,
}

# Process-wide filter registry. Register custom filters at startup.
global_filters: Dict[str, FilterFunc] = dict(BUILTIN_FILTERS)


def add_filter(name: str, func: FilterFunc) -> None:
    """
    Register a filter for every validation.

    Raises:
        ConfigurationError: if func is not callable
    """
    if not callable(func):
        raise ConfigurationError(f"filter '{name}' must be callable")
    global_filters[filter_name(name)] = func


def parse_filter_rule(rule: str) -> List[Tuple[str, Tuple[Any, ...]]]:
    """
    Parse a pipe-separated filter rule.

    Example:
        >>> parse_filter_rule("trim|strToList:;")
        [('trim', ()), ('strToList', (';',))]
    """
    parsed: List[Tuple[str, Tuple[Any, ...]]] = []
    for token in rule.strip().strip("|").split("|"):
        token = token.strip().strip(":")
        if not token:
            continue
        if ":" in token:
            name, rest = token.split(":", 1)
            args = tuple(str_to_arg(a) if a.strip() else a for a in rest.split(","))
        else:
            name, args = token, ()
        parsed.append((filter_name(name), args))
    return parsed


def apply_filters(
    value: Any,
    rule: str,
    filters: Optional[Mapping[str, FilterFunc]] = None,
) -> Any:
    """
    Run value through each filter of the rule in order.

    Raises:
        ConfigurationError: for unknown filter names
        FilterError: when a filter cannot convert the value
    """
    for name, args in parse_filter_rule(rule):
        func = (filters or {}).get(name) or global_filters.get(name)
        if func is None:
            raise ConfigurationError(f"filter '{name}' does not exist")
        try:
            value = func(value, *args)
        except FilterError:
            raise
        except (TypeError, ValueError) as e:
            raise FilterError(name, value, str(e)) from e
    return value
