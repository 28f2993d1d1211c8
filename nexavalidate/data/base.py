"""
NexaValidate Data Sources
=========================

Uniform access to the values being validated.

Every data source answers the same four questions for a dotted
field path, whatever the shape of the input behind it:
- get: the value and whether it exists
- set: write a (filtered) value back in place
- type_of: the kind of value stored at the path
- field_names: the top-level names it knows about
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

if TYPE_CHECKING:
    from nexavalidate.validation.validation import Validation


class Kind(Enum):
    """Kinds of values a data source can report."""

    INVALID = "invalid"
    NONE = "none"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    BYTES = "bytes"
    LIST = "list"
    MAP = "map"
    STRUCT = "struct"
    FILE = "file"
    OBJECT = "object"

    @property
    def is_numeric(self) -> bool:
        return self in (Kind.INT, Kind.FLOAT)


def kind_of(value: Any) -> Kind:
    """Get kind of a runtime value."""
    if value is None:
        return Kind.NONE
    if isinstance(value, bool):
        return Kind.BOOL
    if isinstance(value, int):
        return Kind.INT
    if isinstance(value, float):
        return Kind.FLOAT
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, (bytes, bytearray)):
        return Kind.BYTES
    if isinstance(value, (list, tuple, set)):
        return Kind.LIST
    if isinstance(value, dict):
        return Kind.MAP
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return Kind.STRUCT
    if hasattr(value, "filename") and hasattr(value, "read"):
        return Kind.FILE
    return Kind.OBJECT


class DataSource(ABC):
    """
    Abstract data source.

    Implementations wrap one input shape (mapping, dataclass,
    JSON document, form data) and expose it through field paths.
    """

    @abstractmethod
    def get(self, field: str) -> Tuple[Any, bool]:
        """
        Get value at a field path.

        Returns:
            Tuple of (value, found). Missing segments give (None, False).
        """
        ...

    @abstractmethod
    def set(self, field: str, value: Any) -> None:
        """
        Write value at a field path, in place.

        Raises:
            SetValueError: if the path cannot hold the value
        """
        ...

    @abstractmethod
    def type_of(self, field: str) -> Kind:
        """Get kind stored at a field path, `Kind.INVALID` when unknown."""
        ...

    @abstractmethod
    def field_names(self) -> List[str]:
        """Get top-level field names."""
        ...

    def has(self, field: str) -> bool:
        """Check if field exists."""
        return self.get(field)[1]

    def validation(self, error: Optional[Exception] = None) -> "Validation":
        """
        Create a validation bound to this data source.

        Args:
            error: Construction error to surface on validate()
        """
        from nexavalidate.validation.validation import Validation

        return Validation(self, error=error)

    def create(self, scene: Optional[str] = None) -> "Validation":
        """Create a validation, optionally with a scene."""
        return self.validation().set_scene(scene)
