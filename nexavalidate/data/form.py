"""
NexaValidate Form Data
======================

Data source over multi-valued form/query data and uploaded files.

Files live in their own namespace: `get()` only sees form values,
file validators reach uploads through `get_file()`.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from nexavalidate.core.request import UploadedFile
from nexavalidate.data.base import DataSource, Kind, kind_of

FormValues = Mapping[str, Union[Iterable[Any], Any]]


class FormData(DataSource):
    """
    Form-backed data source.

    Supports:
    - Single values: ?name=value -> data.get("name") = ("value", True)
    - Multiple values: ?tag=a&tag=b -> data.get_list("tag") = ["a", "b"]
    - Accumulation from several sources (body values plus query values)

    Example:
        data = FormData()
        data.add_values({"name": ["inhere"], "tag": ["a", "b"]})
        data.add_values(parse_query("page=2"))

        data.get("page")  # ("2", True)
    """

    def __init__(
        self,
        values: Optional[FormValues] = None,
        files: Optional[Mapping[str, Union[UploadedFile, Iterable[UploadedFile]]]] = None,
    ) -> None:
        self.values: Dict[str, List[Any]] = {}
        self.files: Dict[str, List[UploadedFile]] = {}

        if values:
            self.add_values(values)
        if files:
            self.add_files(files)

    def add(self, key: str, value: Any) -> "FormData":
        """Append a value for key."""
        self.values.setdefault(key, []).append(value)
        return self

    def add_values(self, values: FormValues) -> "FormData":
        """
        Append values from another source.

        List/tuple values are spread; anything else is one value.
        """
        for key, vals in values.items():
            if isinstance(vals, (list, tuple)):
                for val in vals:
                    self.add(key, val)
            else:
                self.add(key, vals)
        return self

    def add_file(self, key: str, file: UploadedFile) -> "FormData":
        """Attach an uploaded file."""
        self.files.setdefault(key, []).append(file)
        return self

    def add_files(
        self,
        files: Mapping[str, Union[UploadedFile, Iterable[UploadedFile]]],
    ) -> "FormData":
        for key, items in files.items():
            if isinstance(items, UploadedFile):
                self.add_file(key, items)
            else:
                for item in items:
                    self.add_file(key, item)
        return self

    def get(self, field: str) -> Tuple[Any, bool]:
        vals = self.values.get(field)
        if not vals:
            return None, False
        return vals[0], True

    def get_list(self, field: str) -> List[Any]:
        """Get all values for a field."""
        return list(self.values.get(field, []))

    def set(self, field: str, value: Any) -> None:
        """Replace every value of the field with a single value."""
        self.values[field] = [value]

    def type_of(self, field: str) -> Kind:
        vals = self.values.get(field)
        if vals:
            return Kind.LIST if len(vals) > 1 else kind_of(vals[0])
        if field in self.files:
            return Kind.FILE
        return Kind.INVALID

    def field_names(self) -> List[str]:
        return list(self.values.keys())

    def has_file(self, field: str) -> bool:
        return bool(self.files.get(field))

    def get_file(self, field: str) -> Optional[UploadedFile]:
        """Get first uploaded file for a field."""
        files = self.files.get(field)
        return files[0] if files else None

    def file_names(self) -> List[str]:
        return list(self.files.keys())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (single values unwrapped)."""
        return {k: v[0] if len(v) == 1 else list(v) for k, v in self.values.items()}

    def __repr__(self) -> str:
        return f"<FormData fields={self.field_names()} files={self.file_names()}>"
