"""
NexaValidate Data Sources
=========================

Mapping, JSON, dataclass and form/request inputs behind one interface.
"""

from nexavalidate.data.base import DataSource, Kind, kind_of
from nexavalidate.data.form import FormData
from nexavalidate.data.map import MapData
from nexavalidate.data.struct import FieldDescriptor, StructData, StructSchema, describe

__all__ = [
    "DataSource",
    "Kind",
    "kind_of",
    "FormData",
    "MapData",
    "StructData",
    "StructSchema",
    "FieldDescriptor",
    "describe",
]
