"""
NexaValidate Validators
=======================

Validator registry and the built-in validator catalog.

A validator is any callable taking the field value first and the
rule arguments after it, returning a bool or a (bool, error) pair:

    def is_even(value, *args) -> bool:
        return int(value) % 2 == 0

Signatures are checked when a validator is registered, never when it
is called, so a misdeclared validator fails at setup time.
"""

from __future__ import annotations

import inspect
import ipaddress
import re
import typing
import uuid as uuid_module
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Pattern, Tuple, Union

import orjson

from nexavalidate.core.exceptions import ConfigurationError
from nexavalidate.utils.helpers import (
    camel_case,
    is_empty,
    to_bool,
    to_float,
    to_int,
    to_number,
    value_len,
)

ValidatorFunc = Callable[..., Any]

# Validator that excludes fields from validation
EXCLUDE = "-"

# Validator that marks fields safe without checking them
SAFE = "safe"

# Alternative names accepted in rules
ALIASES: Dict[str, str] = {
    "int": "isInt",
    "integer": "isInt",
    "uint": "isUint",
    "float": "isFloat",
    "bool": "isBool",
    "boolean": "isBool",
    "string": "isString",
    "slice": "isSlice",
    "list": "isSlice",
    "array": "isSlice",
    "map": "isMap",
    "dict": "isMap",
    "number": "isNumber",
    "numeric": "isNumber",
    "alpha": "isAlpha",
    "alphaNum": "isAlphaNum",
    "email": "isEmail",
    "url": "isURL",
    "isUrl": "isURL",
    "fullUrl": "isFullURL",
    "isFullUrl": "isFullURL",
    "ip": "isIP",
    "isIp": "isIP",
    "json": "isJSON",
    "isJson": "isJSON",
    "uuid": "isUUID",
    "isUuid": "isUUID",
    "date": "isDate",
    "file": "isFile",
    "image": "isImage",
    "mimes": "inMimeTypes",
    "mimeTypes": "inMimeTypes",
    "range": "between",
    "in": "enum",
    "minLen": "minLength",
    "maxLen": "maxLength",
    "len": "length",
    "strLen": "stringLength",
    "strLength": "stringLength",
    "regex": "regexp",
}

# Validators that run on absent/empty values
REQUIRED_VALIDATORS = frozenset({
    "required",
    "requiredIf",
    "requiredUnless",
    "requiredWith",
    "requiredWithout",
})

# Validators comparing against another field, bound to the engine
FIELD_VALIDATORS: Dict[str, str] = {
    "eqField": "eq_field",
    "neField": "ne_field",
    "gtField": "gt_field",
    "gteField": "gte_field",
    "ltField": "lt_field",
    "lteField": "lte_field",
    "requiredIf": "required_if",
    "requiredUnless": "required_unless",
    "requiredWith": "required_with",
    "requiredWithout": "required_without",
}


def validator_name(name: str) -> str:
    """
    Normalize a validator name.

    snake_case names are accepted and aliases resolve to their
    canonical name.

    Example:
        >>> validator_name("min_len"), validator_name("in"), validator_name("gtField")
        ('minLength', 'enum', 'gtField')
    """
    name = name.strip()
    if name in (EXCLUDE, ""):
        return name
    name = camel_case(name)
    return ALIASES.get(name, name)


# =============================================================================
# Function metadata
# =============================================================================

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)

_BOOL_RETURNS = ("bool", "builtins.bool")


def _return_ok(annotation: Any) -> bool:
    if annotation is inspect.Signature.empty or annotation is bool or annotation is Any:
        return True
    if isinstance(annotation, str):
        text = annotation.replace(" ", "")
        return text in _BOOL_RETURNS or text.startswith(("Tuple[bool", "tuple[bool", "Union[bool", "bool|"))
    origin = typing.get_origin(annotation)
    if origin is tuple:
        args = typing.get_args(annotation)
        return not args or args[0] is bool
    if origin is typing.Union:
        return bool in typing.get_args(annotation)
    return False


@dataclass(frozen=True)
class FuncMeta:
    """
    Registered validator function.

    Attributes:
        name: Validator name
        func: The callable
        num_in: Positional parameters, value included
        required: Positional parameters without defaults
        variadic: Accepts *args
    """

    name: str
    func: ValidatorFunc
    num_in: int
    required: int
    variadic: bool = False

    def accepts(self, num_args: int) -> bool:
        """Check if the function can be called with the value plus num_args arguments."""
        total = num_args + 1
        if total < self.required:
            return False
        return self.variadic or total <= self.num_in

    def call(self, value: Any, *args: Any) -> Tuple[bool, Optional[str]]:
        """
        Call the function.

        Returns:
            Tuple of (passed, error message from a (bool, error) result)
        """
        result = self.func(value, *args)
        if isinstance(result, tuple):
            ok = bool(result[0]) if result else False
            err = result[1] if len(result) > 1 else None
            if err:
                return False, str(err)
            return ok, None
        return bool(result), None


def check_validator_func(
    name: str,
    func: Any,
    num_args: Optional[int] = None,
) -> FuncMeta:
    """
    Validate a validator function's signature.

    Args:
        name: Validator name, for error messages
        func: Candidate callable
        num_args: Rule argument count the function must accept

    Raises:
        ConfigurationError: if the signature is not supported
    """
    if not callable(func):
        raise ConfigurationError(f"validator '{name}' must be callable, got {type(func).__name__}")

    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"validator '{name}' has no inspectable signature: {e}") from e

    num_in = 0
    required = 0
    variadic = False
    for param in signature.parameters.values():
        if param.kind in _POSITIONAL:
            num_in += 1
            if param.default is inspect.Parameter.empty:
                required += 1
        elif param.kind is inspect.Parameter.VAR_POSITIONAL:
            variadic = True
        elif param.kind is inspect.Parameter.KEYWORD_ONLY and param.default is inspect.Parameter.empty:
            raise ConfigurationError(
                f"validator '{name}' has required keyword-only parameter '{param.name}'"
            )

    if num_in == 0 and not variadic:
        raise ConfigurationError(
            f"validator '{name}' must accept the field value as its first argument"
        )

    if not _return_ok(signature.return_annotation):
        raise ConfigurationError(
            f"validator '{name}' must return bool or (bool, error), "
            f"declared {signature.return_annotation!r}"
        )

    meta = FuncMeta(
        name=name,
        func=func,
        num_in=num_in,
        required=required,
        variadic=variadic,
    )

    if num_args is not None and not meta.accepts(num_args):
        raise ConfigurationError(
            f"validator '{name}' cannot be called with a value and {num_args} argument(s)"
        )

    return meta


class Validators:
    """
    Validator registry.

    Example:
        registry = Validators()
        registry.add("isEven", lambda value: int(value) % 2 == 0)

        registry.get("isEven").call(4)  # (True, None)
    """

    def __init__(self, funcs: Optional[Mapping[str, ValidatorFunc]] = None) -> None:
        self._funcs: Dict[str, FuncMeta] = {}
        if funcs:
            self.add_many(funcs)

    def add(self, name: str, func: ValidatorFunc) -> FuncMeta:
        """
        Register a validator.

        Raises:
            ConfigurationError: for empty names or unsupported signatures
        """
        if not name or not name.strip():
            raise ConfigurationError("validator name cannot be empty")
        meta = check_validator_func(name, func)
        self._funcs[validator_name(name)] = meta
        return meta

    def add_many(self, funcs: Mapping[str, ValidatorFunc]) -> "Validators":
        for name, func in funcs.items():
            self.add(name, func)
        return self

    def get(self, name: str) -> Optional[FuncMeta]:
        meta = self._funcs.get(name)
        if meta is None:
            meta = self._funcs.get(validator_name(name))
        return meta

    def has(self, name: str) -> bool:
        return self.get(name) is not None

    def names(self) -> List[str]:
        return list(self._funcs.keys())

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __len__(self) -> int:
        return len(self._funcs)


# =============================================================================
# Built-in validators
# =============================================================================

_EMAIL_PATTERN: Pattern = re.compile(
    r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
)

_URL_PATTERN: Pattern = re.compile(
    r"^(?:[a-z][a-z0-9+.-]*://)?"
    r"(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+[A-Z]{2,6}\.?|"
    r"localhost|"
    r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})"
    r"(?::\d+)?"
    r"(?:/?|[/?]\S+)$",
    re.IGNORECASE,
)

_FULL_URL_PATTERN: Pattern = re.compile(r"^https?://", re.IGNORECASE)

IMAGE_MIME_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp", "image/bmp", "image/svg+xml")


def _int_arg(validator: str, arg: Any) -> int:
    try:
        return to_int(arg)
    except ValueError:
        raise ConfigurationError(f"validator '{validator}' needs an integer argument, got {arg!r}") from None


def _number_arg(validator: str, arg: Any) -> Union[int, float]:
    try:
        return to_number(arg)
    except ValueError:
        raise ConfigurationError(f"validator '{validator}' needs a numeric argument, got {arg!r}") from None


def _compare(value: Any, other: Any, op: Callable[[Any, Any], bool]) -> bool:
    try:
        return op(to_number(value), to_number(other))
    except (ValueError, TypeError):
        return False


def _loose_in(value: Any, items: Iterable[Any]) -> bool:
    items = list(items)
    if value in items:
        return True
    text = str(value)
    return any(text == str(item) for item in items)


def _group(args: Tuple[Any, ...]) -> List[Any]:
    # enum/notIn take one list argument, or the items spread
    if len(args) == 1 and isinstance(args[0], (list, tuple, set, frozenset)):
        return list(args[0])
    return list(args)


def required(value: Any) -> bool:
    """Value is present and not empty."""
    return not is_empty(value)


def is_int(value: Any, minimum: Any = None, maximum: Any = None) -> bool:
    """Value is an integer, optionally within [minimum, maximum]."""
    low = _number_arg("isInt", minimum) if minimum is not None else None
    high = _number_arg("isInt", maximum) if maximum is not None else None
    if isinstance(value, (bool, float)):
        return False
    try:
        number = to_int(value)
    except ValueError:
        return False
    if low is not None and number < low:
        return False
    if high is not None and number > high:
        return False
    return True


def is_uint(value: Any) -> bool:
    """Value is an unsigned integer."""
    return is_int(value) and to_int(value) >= 0


def is_float(value: Any) -> bool:
    """Value is a float or numeric string."""
    if isinstance(value, bool):
        return False
    try:
        to_float(value)
    except ValueError:
        return False
    return True


def is_bool(value: Any) -> bool:
    """Value is a boolean or a boolean word."""
    if isinstance(value, bool):
        return True
    if isinstance(value, (int, float)):
        return value in (0, 1)
    try:
        to_bool(value)
    except ValueError:
        return False
    return True


def is_string(value: Any, min_len: Any = None, max_len: Any = None) -> bool:
    """Value is a string, optionally with a length range."""
    if not isinstance(value, str):
        return False
    if min_len is not None and len(value) < _int_arg("isString", min_len):
        return False
    if max_len is not None and len(value) > _int_arg("isString", max_len):
        return False
    return True


def is_slice(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_map(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_number(value: Any) -> bool:
    """Value is numeric."""
    if isinstance(value, bool):
        return False
    return is_float(value)


def is_alpha(value: Any) -> bool:
    return isinstance(value, str) and value.isalpha()


def is_alpha_num(value: Any) -> bool:
    return isinstance(value, str) and value.isalnum()


def is_email(value: Any) -> bool:
    return isinstance(value, str) and bool(_EMAIL_PATTERN.match(value))


def is_url(value: Any) -> bool:
    return isinstance(value, str) and bool(_URL_PATTERN.match(value))


def is_full_url(value: Any) -> bool:
    """URL including an http(s) scheme."""
    return is_url(value) and bool(_FULL_URL_PATTERN.match(value))


def is_ip(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def is_json(value: Any) -> bool:
    if not isinstance(value, (str, bytes)):
        return False
    try:
        orjson.loads(value)
    except orjson.JSONDecodeError:
        return False
    return True


def is_uuid(value: Any, version: Any = None) -> bool:
    try:
        parsed = uuid_module.UUID(str(value))
    except (ValueError, AttributeError):
        return False
    if version is not None:
        return parsed.version == _int_arg("isUUID", version)
    return True


def is_date(value: Any, format: str = "%Y-%m-%d") -> bool:
    """Value is a date/datetime or a string in the given format."""
    if isinstance(value, date):
        return True
    if isinstance(value, str):
        try:
            datetime.strptime(value, format)
        except ValueError:
            return False
        return True
    return False


def min_value(value: Any, minimum: Any) -> bool:
    """Numeric value is at least minimum."""
    return _compare(value, minimum, lambda a, b: a >= b)


def max_value(value: Any, maximum: Any) -> bool:
    """Numeric value is at most maximum."""
    return _compare(value, maximum, lambda a, b: a <= b)


def lt(value: Any, other: Any) -> bool:
    return _compare(value, other, lambda a, b: a < b)


def gt(value: Any, other: Any) -> bool:
    return _compare(value, other, lambda a, b: a > b)


def between(value: Any, low: Any, high: Any) -> bool:
    """Numeric value is within [low, high]."""
    return min_value(value, low) and max_value(value, high)


def enum(value: Any, *allowed: Any) -> bool:
    """Value is in the allowed set."""
    return _loose_in(value, _group(allowed))


def not_in(value: Any, *disallowed: Any) -> bool:
    """Value is not in the disallowed set."""
    return not _loose_in(value, _group(disallowed))


def min_length(value: Any, length: Any) -> bool:
    size = _int_arg("minLength", length)
    try:
        return value_len(value) >= size
    except (TypeError, ValueError):
        return False


def max_length(value: Any, length: Any) -> bool:
    size = _int_arg("maxLength", length)
    try:
        return value_len(value) <= size
    except (TypeError, ValueError):
        return False


def length(value: Any, size: Any) -> bool:
    """Exact length."""
    expected = _int_arg("length", size)
    try:
        return value_len(value) == expected
    except (TypeError, ValueError):
        return False


def string_length(value: Any, min_len: Any, max_len: Any = None) -> bool:
    """String length in characters within [min, max]."""
    return is_string(value, min_len, max_len)


def regexp(value: Any, pattern: Any) -> bool:
    """String matches pattern."""
    if not isinstance(value, str):
        return False
    if isinstance(pattern, str):
        try:
            pattern = re.compile(pattern)
        except re.error as e:
            raise ConfigurationError(f"validator 'regexp' has an invalid pattern: {e}") from e
    return bool(pattern.match(value))


def starts_with(value: Any, prefix: Any) -> bool:
    return isinstance(value, str) and value.startswith(str(prefix))


def ends_with(value: Any, suffix: Any) -> bool:
    return isinstance(value, str) and value.endswith(str(suffix))


def is_file(value: Any) -> bool:
    """Value is an uploaded file."""
    return hasattr(value, "filename") and hasattr(value, "read")


def is_image(value: Any, *extensions: Any) -> bool:
    """Uploaded file is an image, optionally with one of the extensions."""
    if not is_file(value) or getattr(value, "content_type", None) not in IMAGE_MIME_TYPES:
        return False
    if extensions:
        suffix = str(value.filename).rsplit(".", 1)[-1].lower()
        return suffix in {str(ext).lower().lstrip(".") for ext in extensions}
    return True


def in_mime_types(value: Any, *mime_types: Any) -> bool:
    """Uploaded file has one of the MIME types."""
    if not is_file(value):
        return False
    return getattr(value, "content_type", None) in {str(m) for m in mime_types}


BUILTIN_VALIDATORS: Dict[str, ValidatorFunc] = {
    "required": required,
    # Types
    "isInt": is_int,
    "isUint": is_uint,
    "isFloat": is_float,
    "isBool": is_bool,
    "isString": is_string,
    "isSlice": is_slice,
    "isMap": is_map,
    "isNumber": is_number,
    "isAlpha": is_alpha,
    "isAlphaNum": is_alpha_num,
    "isEmail": is_email,
    "isURL": is_url,
    "isFullURL": is_full_url,
    "isIP": is_ip,
    "isJSON": is_json,
    "isUUID": is_uuid,
    "isDate": is_date,
    # Values
    "min": min_value,
    "max": max_value,
    "lt": lt,
    "gt": gt,
    "between": between,
    "enum": enum,
    "notIn": not_in,
    # Strings
    "minLength": min_length,
    "maxLength": max_length,
    "length": length,
    "stringLength": string_length,
    "regexp": regexp,
    "startsWith": starts_with,
    "endsWith": ends_with,
    # Files
    "isFile": is_file,
    "isImage": is_image,
    "inMimeTypes": in_mime_types,
}

# Process-wide registry. Register custom validators at startup.
global_validators = Validators(BUILTIN_VALIDATORS)


def add_validator(name: str, func: ValidatorFunc) -> FuncMeta:
    """Register a validator for every validation."""
    return global_validators.add(name, func)


def add_validators(funcs: Mapping[str, ValidatorFunc]) -> None:
    global_validators.add_many(funcs)
