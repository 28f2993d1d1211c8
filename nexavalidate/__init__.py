"""
███╗   ██╗███████╗██╗  ██╗ █████╗ ██╗   ██╗ █████╗ ██╗     ██╗██████╗
████╗  ██║██╔════╝╚██╗██╔╝██╔══██╗██║   ██║██╔══██╗██║     ██║██╔══██╗
██╔██╗ ██║█████╗   ╚███╔╝ ███████║██║   ██║███████║██║     ██║██║  ██║
██║╚██╗██║██╔══╝   ██╔██╗ ██╔══██║╚██╗ ██╔╝██╔══██║██║     ██║██║  ██║
██║ ╚████║███████╗██╔╝ ██╗██║  ██║ ╚████╔╝ ██║  ██║███████╗██║██████╔╝
╚═╝  ╚═══╝╚══════╝╚═╝  ╚═╝╚═╝  ╚═╝  ╚═══╝  ╚═╝  ╚═╝╚══════╝╚═╝╚═════╝

NexaValidate - Data Validation and Filtering for Python
========================================================

Validate mappings, JSON documents, dataclasses and HTTP form/query
data with compact rule strings, then read back only the data that
passed.

Features:
---------
- String rules ("required|int:1,99|minLen:7") and rule objects
- Mapping, JSON, dataclass and request/form data sources
- Value filters applied before validation ("trim|int")
- Scenes selecting the fields checked per use case
- Custom validators, per-field messages and display names

Quick Start:
    from nexavalidate import new

    v = new({"name": "inhere", "age": 100})
    v.string_rules({"name": "required|minLen:7", "age": "int|max:99"})

    if not v.validate():
        print(v.errors.one())  # name min length is 7
"""

from __future__ import annotations

__version__ = "1.0.0"
__license__ = "MIT"

from nexavalidate.core.config import configure, get_options, reset_options
from nexavalidate.core.exceptions import (
    ConfigurationError,
    FilterError,
    InvalidDataError,
    SetValueError,
    ValidationError,
    ValidationStateError,
)
from nexavalidate.core.request import UploadedFile
from nexavalidate.data import DataSource, FormData, Kind, MapData, StructData
from nexavalidate.factory import (
    for_form,
    for_json,
    for_map,
    for_request,
    for_struct,
    from_json,
    from_json_bytes,
    from_map,
    from_query,
    from_request,
    from_struct,
    from_url_values,
    new,
)
from nexavalidate.validation import (
    Errors,
    Rule,
    Translator,
    Validation,
    ValidationResult,
    add_filter,
    add_validator,
    add_validators,
    validate,
    validate_or_fail,
)

__all__ = [
    # Metadata
    "__version__",
    "__license__",
    # Construction
    "new",
    "for_form",
    "for_json",
    "for_map",
    "for_request",
    "for_struct",
    "from_json",
    "from_json_bytes",
    "from_map",
    "from_query",
    "from_request",
    "from_struct",
    "from_url_values",
    # Data
    "DataSource",
    "FormData",
    "Kind",
    "MapData",
    "StructData",
    "UploadedFile",
    # Validation
    "Errors",
    "Rule",
    "Translator",
    "Validation",
    "ValidationResult",
    "add_filter",
    "add_validator",
    "add_validators",
    "validate",
    "validate_or_fail",
    # Config
    "configure",
    "get_options",
    "reset_options",
    # Exceptions
    "ConfigurationError",
    "FilterError",
    "InvalidDataError",
    "SetValueError",
    "ValidationError",
    "ValidationStateError",
]
