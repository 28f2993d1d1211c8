"""
NexaValidate Struct Data
========================

Data source over dataclass instances.

Field information is read once per dataclass type into a
descriptor table and cached, so repeated lookups during a run
never inspect the type again.

A record may carry its own validation setup:
- field metadata: {"validate": "required|minLen:7", "filter": "trim", "label": "User Name"}
- messages(): validator/field message templates
- translates(): field display names
- config_validation(v): called once when a validation is created
- any other method, used as a custom validator by name

Example:
    @dataclass
    class UserForm:
        name: str = field(default="", metadata={"validate": "required|minLen:7"})
        code: str = field(default="", metadata={"validate": "customValidator"})

        def custom_validator(self, value: str) -> bool:
            return len(value) == 4

        def translates(self) -> dict:
            return {"name": "User Name"}
"""

from __future__ import annotations

import dataclasses
import functools
import types
import typing
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    Mapping,
    MutableMapping,
    Optional,
    Tuple,
)

from nexavalidate.core.config import get_options
from nexavalidate.core.exceptions import InvalidDataError, SetValueError
from nexavalidate.core.request import UploadedFile
from nexavalidate.data.base import DataSource, Kind, kind_of
from nexavalidate.utils.helpers import snake_case

if TYPE_CHECKING:
    from nexavalidate.validation.validation import Validation

# Methods a record may expose that are never custom validators
CAPABILITY_METHODS = ("messages", "translates", "config_validation")

_SCALAR_KINDS = {
    bool: Kind.BOOL,
    int: Kind.INT,
    float: Kind.FLOAT,
    str: Kind.STRING,
    bytes: Kind.BYTES,
}

_CONTAINER_KINDS = {
    list: Kind.LIST,
    tuple: Kind.LIST,
    set: Kind.LIST,
    frozenset: Kind.LIST,
    dict: Kind.MAP,
}


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Static description of one dataclass field.

    Attributes:
        name: Attribute name
        type: Resolved annotation
        kind: Kind of the annotation
        nullable: Annotation allows None
        metadata: dataclasses field metadata
    """

    name: str
    type: Any
    kind: Kind
    nullable: bool = False
    metadata: Mapping[str, Any] = dataclasses.field(default_factory=dict)

    @property
    def nested(self) -> Optional["StructSchema"]:
        """Descriptor table of a nested dataclass field."""
        if self.kind is Kind.STRUCT:
            return describe(self.type)
        return None

    def accepts(self, value: Any) -> bool:
        """Check if value is compatible with the declared kind."""
        if self.kind in (Kind.INVALID, Kind.OBJECT):
            return True
        actual = kind_of(value)
        if actual is Kind.NONE:
            return self.nullable
        if actual is self.kind:
            return True
        return self.kind is Kind.FLOAT and actual is Kind.INT


@dataclass(frozen=True)
class StructSchema:
    """Descriptor table of a dataclass type."""

    type: type
    fields: Dict[str, FieldDescriptor]

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self.fields.values())


def _unwrap_optional(tp: Any) -> Tuple[Any, bool]:
    origin = typing.get_origin(tp)
    if origin is typing.Union or origin is getattr(types, "UnionType", None):
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        nullable = len(args) != len(typing.get_args(tp))
        if len(args) == 1:
            return args[0], nullable
        return tp, nullable
    return tp, False


def _kind_of_type(tp: Any) -> Kind:
    if tp is typing.Any:
        return Kind.INVALID
    origin = typing.get_origin(tp) or tp
    if origin in _SCALAR_KINDS:
        return _SCALAR_KINDS[origin]
    if origin in _CONTAINER_KINDS:
        return _CONTAINER_KINDS[origin]
    if isinstance(origin, type):
        if dataclasses.is_dataclass(origin):
            return Kind.STRUCT
        if issubclass(origin, UploadedFile):
            return Kind.FILE
        if issubclass(origin, Mapping):
            return Kind.MAP
        return Kind.OBJECT
    return Kind.INVALID


@functools.lru_cache(maxsize=None)
def describe(cls: type) -> StructSchema:
    """
    Build the descriptor table of a dataclass type.

    Results are cached per type.
    """
    try:
        hints = typing.get_type_hints(cls)
    except (NameError, TypeError):
        hints = {}

    fields: Dict[str, FieldDescriptor] = {}
    for f in dataclasses.fields(cls):
        annotation = hints.get(f.name, f.type)
        if isinstance(annotation, str):
            tp, nullable, kind = annotation, False, Kind.INVALID
        else:
            tp, nullable = _unwrap_optional(annotation)
            kind = _kind_of_type(tp)
        fields[f.name] = FieldDescriptor(
            name=f.name,
            type=tp,
            kind=kind,
            nullable=nullable,
            metadata=dict(f.metadata),
        )

    return StructSchema(type=cls, fields=fields)


def _call_map(obj: Any, name: str) -> Dict[str, str]:
    method = getattr(obj, name, None)
    if not callable(method):
        return {}
    return dict(method() or {})


class StructData(DataSource):
    """
    Dataclass-backed data source.

    Nested dataclass members, mappings and list items are
    addressable with dotted paths ("extra.status1").
    """

    def __init__(self, src: Any) -> None:
        """
        Initialize struct data.

        Raises:
            InvalidDataError: if src is not a dataclass instance
        """
        if src is None or not dataclasses.is_dataclass(src) or isinstance(src, type):
            raise InvalidDataError()

        self.src = src
        self.schema = describe(type(src))

        # Record capabilities, probed once
        self.messages: Dict[str, str] = _call_map(src, "messages")
        self.translates: Dict[str, str] = _call_map(src, "translates")
        hook = getattr(src, "config_validation", None)
        self.config_hook: Optional[Callable[["Validation"], Any]] = (
            hook if callable(hook) else None
        )
        self._methods: Dict[str, Optional[Callable[..., Any]]] = {}

    # =========================================================================
    # Path resolution
    # =========================================================================

    def _step(self, current: Any, key: str) -> Tuple[Any, bool]:
        if dataclasses.is_dataclass(current) and not isinstance(current, type):
            if key in describe(type(current)).fields:
                return getattr(current, key), True
            return None, False
        if isinstance(current, Mapping):
            if key in current:
                return current[key], True
            return None, False
        if isinstance(current, (list, tuple)) and key.isdigit():
            idx = int(key)
            if idx < len(current):
                return current[idx], True
        return None, False

    def get(self, field: str) -> Tuple[Any, bool]:
        current = self.src
        for key in field.split("."):
            current, found = self._step(current, key)
            if not found:
                return None, False
        return current, True

    def set(self, field: str, value: Any) -> None:
        *parents, last = field.split(".")
        current = self.src
        for key in parents:
            current, found = self._step(current, key)
            if not found:
                raise SetValueError(field, f"path segment '{key}' does not exist")

        if dataclasses.is_dataclass(current) and not isinstance(current, type):
            descriptor = describe(type(current)).fields.get(last)
            if descriptor is None:
                raise SetValueError(field, "no such field")
            if not descriptor.accepts(value):
                raise SetValueError(
                    field,
                    f"expected {descriptor.kind.value}, got {kind_of(value).value}",
                )
            try:
                setattr(current, last, value)
            except dataclasses.FrozenInstanceError as e:
                raise SetValueError(field, "record is read-only") from e
            return

        if isinstance(current, MutableMapping):
            current[last] = value
            return
        if isinstance(current, list) and last.isdigit() and int(last) < len(current):
            current[int(last)] = value
            return

        raise SetValueError(field, f"{type(current).__name__} is read-only")

    def descriptor(self, field: str) -> Optional[FieldDescriptor]:
        """Get the descriptor for a path made only of dataclass fields."""
        schema: Optional[StructSchema] = self.schema
        found: Optional[FieldDescriptor] = None
        for key in field.split("."):
            if schema is None or key not in schema.fields:
                return None
            found = schema.fields[key]
            schema = found.nested
        return found

    def type_of(self, field: str) -> Kind:
        descriptor = self.descriptor(field)
        if descriptor is not None and descriptor.kind not in (Kind.INVALID, Kind.OBJECT):
            return descriptor.kind

        value, found = self.get(field)
        return kind_of(value) if found else Kind.INVALID

    def field_names(self) -> List[str]:
        return list(self.schema.fields.keys())

    # =========================================================================
    # Record capabilities
    # =========================================================================

    def method(self, name: str) -> Optional[Callable[..., Any]]:
        """
        Find a custom validator method on the record.

        Looks up the exact name first, then its snake_case form.
        """
        if name in self._methods:
            return self._methods[name]

        found = None
        for candidate in (name, snake_case(name)):
            if candidate in CAPABILITY_METHODS or candidate in self.schema.fields:
                continue
            attr = getattr(self.src, candidate, None)
            if callable(attr):
                found = attr
                break

        self._methods[name] = found
        return found

    def iter_fields(
        self,
        obj: Any = None,
        prefix: str = "",
    ) -> Iterator[Tuple[str, FieldDescriptor]]:
        """Walk descriptors depth-first through nested records, yielding dotted paths."""
        obj = self.src if obj is None else obj
        for descriptor in describe(type(obj)):
            path = prefix + descriptor.name
            yield path, descriptor
            value = getattr(obj, descriptor.name, None)
            if dataclasses.is_dataclass(value) and not isinstance(value, type):
                yield from self.iter_fields(value, path + ".")

    def validation(self, error: Optional[Exception] = None) -> "Validation":
        """
        Create a validation loaded with the record's setup.

        Rules come from field metadata; messages, display names and
        the config hook come from the record.
        """
        v = super().validation(error)
        if error is not None:
            return v

        opt = get_options()
        v.add_translates(self.translates)
        v.add_messages(self.messages)

        for path, descriptor in self.iter_fields():
            label = descriptor.metadata.get(opt.label_tag)
            if label and not v.trans.has_field(path):
                v.add_translates({path: label})

            rule = descriptor.metadata.get(opt.validate_tag)
            filter_rule = descriptor.metadata.get(opt.filter_tag)
            if rule:
                v.string_rule(path, rule, filter_rule)
            elif filter_rule:
                v.filter_rule(path, filter_rule)

        if self.config_hook is not None:
            self.config_hook(v)

        return v

    def __repr__(self) -> str:
        return f"<StructData {type(self.src).__name__} fields={self.field_names()}>"
