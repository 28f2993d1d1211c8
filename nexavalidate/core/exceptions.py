"""
NexaValidate Exceptions
=======================

Construction, configuration and data-source errors surface to the
caller immediately. Field and filter failures never leave
`Validation.validate()`; they are collected in the error bag and only
raised, as `ValidationError`, by the `validate_or_fail` helpers.
"""

from __future__ import annotations

from typing import Dict, List, Optional


class ValidationError(Exception):
    """
    Validation failed exception.

    Contains all validation errors.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[Dict[str, List[str]]] = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or {}

    def __str__(self) -> str:
        if self.errors:
            error_list = []
            for field_name, messages in self.errors.items():
                for msg in messages:
                    error_list.append(f"  - {field_name}: {msg}")
            return "Validation failed:\n" + "\n".join(error_list)
        return "Validation failed"

    def first(self, field_name: Optional[str] = None) -> Optional[str]:
        """Get first error message."""
        if field_name:
            messages = self.errors.get(field_name, [])
            return messages[0] if messages else None
        for messages in self.errors.values():
            if messages:
                return messages[0]
        return None


class InvalidDataError(ValueError):
    """Input data could not be turned into a data source."""

    def __init__(self, message: str = "invalid input data") -> None:
        super().__init__(message)


class ConfigurationError(TypeError):
    """
    Invalid validation setup.

    Raised for unsupported custom-check signatures, unknown
    validator or filter names and rules without fields.
    """


class ValidationStateError(RuntimeError):
    """Validation already ran; call `reset_result()` before running it again."""


class SetValueError(ValueError):
    """A data source refused to store a value at a field path."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"cannot set field '{field}': {reason}")
        self.field = field
        self.reason = reason


class FilterError(ValueError):
    """A filter could not convert a value."""

    def __init__(self, name: str, value: object, reason: str = "") -> None:
        message = f"filter '{name}' cannot convert {value!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.name = name
        self.value = value
