"""
NexaValidate Map Data
=====================

Data source over plain mappings and decoded JSON objects.
"""

from __future__ import annotations

from typing import Any, Dict, List, MutableMapping, Optional, Tuple, Union

import orjson

from nexavalidate.core.exceptions import InvalidDataError, SetValueError
from nexavalidate.data.base import DataSource, Kind, kind_of
from nexavalidate.utils.helpers import get_nested, set_nested


class MapData(DataSource):
    """
    Mapping-backed data source.

    Field paths address nested mappings and list items with dots.

    Example:
        data = MapData({"user": {"name": "inhere", "tags": ["a", "b"]}})

        data.get("user.name")    # ("inhere", True)
        data.get("user.tags.1")  # ("b", True)
        data.get("user.age")     # (None, False)
    """

    def __init__(
        self,
        data: Optional[MutableMapping[str, Any]] = None,
        json_bytes: Optional[bytes] = None,
    ) -> None:
        """
        Initialize map data.

        Args:
            data: Backing mapping, mutated in place by set()
            json_bytes: Original JSON document when decoded from JSON
        """
        self.data: MutableMapping[str, Any] = data if data is not None else {}
        self.json_bytes = json_bytes

    @classmethod
    def from_json(cls, source: Union[str, bytes, bytearray]) -> "MapData":
        """
        Decode a JSON object.

        Raises:
            InvalidDataError: for malformed JSON or non-object documents
        """
        raw = source.encode("utf-8") if isinstance(source, str) else bytes(source)

        try:
            decoded = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise InvalidDataError(f"invalid JSON data: {e}") from e

        if not isinstance(decoded, dict):
            raise InvalidDataError(
                f"invalid JSON data: expected an object, got {type(decoded).__name__}"
            )

        return cls(decoded, json_bytes=raw)

    @property
    def is_json(self) -> bool:
        return self.json_bytes is not None

    def get(self, field: str) -> Tuple[Any, bool]:
        if field in self.data:
            return self.data[field], True
        if "." not in field:
            return None, False
        return get_nested(self.data, field)

    def set(self, field: str, value: Any) -> None:
        try:
            set_nested(self.data, field, value)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise SetValueError(field, str(e)) from e

    def type_of(self, field: str) -> Kind:
        value, found = self.get(field)
        if not found:
            return Kind.INVALID
        return kind_of(value)

    def field_names(self) -> List[str]:
        return list(self.data.keys())

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.data)

    def to_json(self) -> bytes:
        """Encode current data, including filtered values."""
        return orjson.dumps(dict(self.data))

    def __repr__(self) -> str:
        kind = "json" if self.is_json else "map"
        return f"<MapData {kind} fields={self.field_names()}>"
