"""
NexaValidate Helpers
====================

String, path and value helpers shared by the data sources,
the rule parser and the built-in validators/filters.
"""

from __future__ import annotations

import re
from typing import Any, List, Mapping, MutableMapping, Tuple, Union


# =============================================================================
# String Helpers
# =============================================================================

def snake_case(text: str) -> str:
    """
    Convert text to snake_case.

    Example:
        >>> snake_case("customValidator")
        'custom_validator'
    """
    # Insert underscore before uppercase letters
    text = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", text)
    text = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", text)

    # Replace spaces and hyphens
    text = re.sub(r"[-\s]+", "_", text)

    return text.lower()


def camel_case(text: str) -> str:
    """
    Convert text to camelCase.

    Already camelCased text is returned unchanged, so validator
    names can be normalized repeatedly.

    Example:
        >>> camel_case("min_len")
        'minLen'
        >>> camel_case("gtField")
        'gtField'
    """
    parts = [p for p in re.split(r"[_\-\s]+", text) if p]

    if not parts:
        return ""

    first = parts[0]
    first = first[0].lower() + first[1:]
    return first + "".join(p[0].upper() + p[1:] for p in parts[1:])


def split_list(text: str, separator: str = ",") -> List[str]:
    """
    Split text and drop empty, whitespace-only items.

    Example:
        >>> split_list("name, email,,")
        ['name', 'email']
    """
    return [item.strip() for item in text.split(separator) if item.strip()]


# =============================================================================
# Path Helpers
# =============================================================================

def get_nested(
    obj: Union[Mapping, List, Any],
    path: str,
    separator: str = ".",
) -> Tuple[Any, bool]:
    """
    Get nested value from dict/list using dot notation.

    Args:
        obj: Source object
        path: Dot-separated path
        separator: Path separator

    Returns:
        Tuple of (value, found)

    Example:
        >>> get_nested({"a": {"b": 1}}, "a.b")
        (1, True)
        >>> get_nested({"a": {}}, "a.c")
        (None, False)
    """
    current = obj

    for key in path.split(separator):
        try:
            if isinstance(current, Mapping):
                current = current[key]
            elif isinstance(current, (list, tuple)) and key.isdigit():
                current = current[int(key)]
            else:
                return None, False
        except (KeyError, IndexError, TypeError):
            return None, False

    return current, True


def set_nested(
    obj: MutableMapping,
    path: str,
    value: Any,
    separator: str = ".",
) -> MutableMapping:
    """
    Set nested value in dict using dot notation.

    Missing intermediate mappings are created. List segments are
    addressed by index and must already exist.

    Raises:
        KeyError, IndexError, TypeError: when a segment cannot hold the value

    Example:
        >>> set_nested({}, "a.b.c", 1)
        {'a': {'b': {'c': 1}}}
    """
    keys = path.split(separator)
    current: Any = obj

    for key in keys[:-1]:
        if isinstance(current, list):
            current = current[int(key)]
            continue
        if key not in current:
            current[key] = {}
        current = current[key]

    last = keys[-1]
    if isinstance(current, list):
        current[int(last)] = value
    elif isinstance(current, MutableMapping):
        current[last] = value
    else:
        raise TypeError(f"cannot set '{last}' on {type(current).__name__}")

    return obj


# =============================================================================
# Value Helpers
# =============================================================================

_INT_PATTERN = re.compile(r"^[-+]?\d+$")
_FLOAT_PATTERN = re.compile(r"^[-+]?(\d+\.\d*|\.\d+|\d+)([eE][-+]?\d+)?$")

TRUE_STRINGS = ("1", "on", "yes", "true")
FALSE_STRINGS = ("0", "off", "no", "false")


def str_to_arg(value: str) -> Any:
    """
    Convert a rule argument string to a primitive when it looks like one.

    Ambiguous tokens stay strings.

    Example:
        >>> str_to_arg("12"), str_to_arg("1.5"), str_to_arg("true"), str_to_arg("abc")
        (12, 1.5, True, 'abc')
    """
    text = value.strip()

    if _INT_PATTERN.match(text):
        return int(text)
    if _FLOAT_PATTERN.match(text):
        return float(text)
    if text.lower() == "true":
        return True
    if text.lower() == "false":
        return False

    return text


def to_int(value: Any) -> int:
    """
    Convert value to int.

    Raises:
        ValueError: when the value is not integral
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{value!r} is not an integer")
        return int(value)
    if isinstance(value, (str, bytes)):
        text = value.decode() if isinstance(value, bytes) else value
        text = text.strip()
        if _INT_PATTERN.match(text):
            return int(text)
    raise ValueError(f"cannot convert {value!r} to int")


def to_float(value: Any) -> float:
    """
    Convert value to float.

    Raises:
        ValueError: when the value is not numeric
    """
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str) and _FLOAT_PATTERN.match(value.strip()):
        return float(value.strip())
    raise ValueError(f"cannot convert {value!r} to float")


def to_bool(value: Any) -> bool:
    """
    Convert value to bool.

    Raises:
        ValueError: for strings that are not a known boolean word
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lower = value.strip().lower()
        if lower in TRUE_STRINGS:
            return True
        if lower in FALSE_STRINGS:
            return False
    raise ValueError(f"cannot convert {value!r} to bool")


def to_number(value: Any) -> Union[int, float]:
    """Convert value to int when integral, float otherwise."""
    try:
        return to_int(value)
    except ValueError:
        return to_float(value)


def is_empty(value: Any) -> bool:
    """
    Check if value is empty.

    None, "" and empty containers are empty. Numbers and booleans
    never are, nor is whitespace; a trim filter turns blank input
    into "" first.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, dict, set, bytes)):
        return len(value) == 0
    return False


def value_len(value: Any) -> int:
    """
    Length of a string or container.

    Raises:
        TypeError: for values without a length
    """
    if isinstance(value, (str, bytes, list, tuple, dict, set)):
        return len(value)
    raise TypeError(f"{type(value).__name__} has no length")
