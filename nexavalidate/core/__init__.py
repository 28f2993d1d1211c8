"""
NexaValidate Core
=================

Global options, exceptions and request decoding.
"""

from nexavalidate.core.config import (
    GlobalOption,
    configure,
    get_options,
    load_env_overrides,
    reset_options,
)
from nexavalidate.core.exceptions import (
    ConfigurationError,
    FilterError,
    InvalidDataError,
    SetValueError,
    ValidationError,
    ValidationStateError,
)
from nexavalidate.core.request import Headers, RequestData, UploadedFile

__all__ = [
    # Config
    "GlobalOption",
    "configure",
    "get_options",
    "load_env_overrides",
    "reset_options",
    # Exceptions
    "ConfigurationError",
    "FilterError",
    "InvalidDataError",
    "SetValueError",
    "ValidationError",
    "ValidationStateError",
    # Request
    "Headers",
    "RequestData",
    "UploadedFile",
]
