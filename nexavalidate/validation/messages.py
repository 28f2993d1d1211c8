"""
NexaValidate Messages
=====================

Error message templates and field display names.

Templates use `{field}` for the field's display name and `{0}`,
`{1}`... for the rule arguments:

    trans = Translator()
    trans.add_messages({"minLength": "{field} needs {0}+ characters"})
    trans.add_field_map({"name": "User Name"})

    trans.message("minLength", "name", 7)
    # 'User Name needs 7+ characters'
"""

from __future__ import annotations

import string
from typing import Any, Dict, Mapping, Optional, Sequence

from nexavalidate.validation.validators import validator_name

# Fallback template key
DEFAULT_KEY = "_"

DEFAULT_MESSAGES: Dict[str, str] = {
    DEFAULT_KEY: "{field} did not pass validate",
    "_validate": "{field} is invalid input data",
    "_filter": "{field} data is invalid",
    "required": "{field} is required",
    "requiredIf": "{field} is required when {0} is {1}",
    "requiredUnless": "{field} field is required unless {0} is in {1}",
    "requiredWith": "{field} field is required when {0} is present",
    "requiredWithout": "{field} field is required when {0} is not present",
    # Types
    "isInt": "{field} value must be an integer",
    "isInt1": "{field} value must be an integer and min value is {0}",
    "isInt2": "{field} value must be an integer and in the range {0} - {1}",
    "isUint": "{field} value must be an unsigned integer(>= 0)",
    "isFloat": "{field} value must be a float",
    "isBool": "{field} value must be a bool",
    "isString": "{field} value must be a string",
    "isString1": "{field} value must be a string and min length is {0}",
    "isString2": "{field} value must be a string and length in the range {0} - {1}",
    "isSlice": "{field} value must be a slice",
    "isMap": "{field} value must be a map",
    "isNumber": "{field} value must be a number",
    "isAlpha": "{field} value contains only alpha char",
    "isAlphaNum": "{field} value contains only alpha char and num",
    "isEmail": "{field} value is an invalid email address",
    "isURL": "{field} must be a valid URL address",
    "isFullURL": "{field} must be a valid full URL address",
    "isIP": "{field} value is an invalid IP address",
    "isJSON": "{field} value should be a JSON string",
    "isUUID": "{field} value should be a UUID string",
    "isDate": "{field} value should be a date string",
    # Values
    "min": "{field} min value is {0}",
    "max": "{field} max value is {0}",
    "lt": "{field} value should be less than {0}",
    "gt": "{field} value should be greater than {0}",
    "between": "{field} value must be in the range {0} - {1}",
    "enum": "{field} value must be in the enum {0}",
    "notIn": "{field} value must not be in the given enum list {0}",
    # Strings
    "minLength": "{field} min length is {0}",
    "maxLength": "{field} max length is {0}",
    "length": "{field} length must be {0}",
    "stringLength": "{field} length must be in the range {0} - {1}",
    "stringLength1": "{field} min length is {0}",
    "regexp": "{field} must match pattern {0}",
    "startsWith": "{field} value does not start with {0}",
    "endsWith": "{field} value does not end with {0}",
    # Fields
    "eqField": "{field} value must be equal the field {0}",
    "neField": "{field} value cannot be equal to the field {0}",
    "ltField": "{field} value should be less than the field {0}",
    "lteField": "{field} value should be less than or equal to the field {0}",
    "gtField": "{field} value must be greater than the field {0}",
    "gteField": "{field} value should be greater or equal to the field {0}",
    # Files
    "isFile": "{field} must be an uploaded file",
    "isImage": "{field} must be an uploaded image file",
    "inMimeTypes": "{field} file should be one of the types {0}",
}


class _TemplateFormatter(string.Formatter):
    # Missing placeholders render empty instead of raising
    def get_value(self, key: Any, args: Sequence[Any], kwargs: Mapping[str, Any]) -> Any:
        if isinstance(key, int):
            return args[key] if key < len(args) else ""
        return kwargs.get(key, "")


_formatter = _TemplateFormatter()


def render(template: str, field: str, args: Sequence[Any] = ()) -> str:
    """Fill a message template."""
    try:
        return _formatter.format(template, *args, field=field)
    except (ValueError, IndexError, AttributeError, KeyError):
        # Unbalanced braces in a user template
        return template


class Translator:
    """
    Message translator.

    Holds custom message templates and field display names on top
    of the library defaults.
    """

    def __init__(
        self,
        messages: Optional[Mapping[str, str]] = None,
        field_map: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._messages: Dict[str, str] = dict(messages or {})
        self._field_map: Dict[str, str] = dict(field_map or {})

    def add_messages(self, messages: Mapping[str, str]) -> "Translator":
        """
        Add message templates.

        Keys are a validator name ("minLength") or a field
        qualified one ("name.minLength"). Aliases ("name.minLen")
        are also stored under the canonical validator name.
        """
        for key, template in messages.items():
            self._messages[key] = template
            prefix, _, name = key.rpartition(".")
            canonical = validator_name(name)
            if canonical and canonical != name:
                self._messages[f"{prefix}.{canonical}" if prefix else canonical] = template
        return self

    def add_field_map(self, field_map: Mapping[str, str]) -> "Translator":
        """Add field display names."""
        self._field_map.update(field_map)
        return self

    def has_field(self, field: str) -> bool:
        return field in self._field_map

    def has_message(self, key: str) -> bool:
        return key in self._messages

    def field(self, name: str) -> str:
        """Get display name of a field."""
        return self._field_map.get(name, name)

    def template(self, validator: str, field: str, num_args: int = 0) -> str:
        """Find the template for a validator failure on a field."""
        for key in (f"{field}.{validator}", validator):
            if key in self._messages:
                return self._messages[key]

        for key in (f"{validator}{num_args}", validator):
            if key in DEFAULT_MESSAGES:
                return DEFAULT_MESSAGES[key]

        return DEFAULT_MESSAGES[DEFAULT_KEY]

    def message(self, validator: str, field: str, *args: Any) -> str:
        """Render the error message for a validator failure."""
        template = self.template(validator, field, len(args))
        return render(template, self.field(field), args)

    def reset(self) -> None:
        self._messages.clear()
        self._field_map.clear()

    def __repr__(self) -> str:
        return f"<Translator messages={len(self._messages)} fields={len(self._field_map)}>"
