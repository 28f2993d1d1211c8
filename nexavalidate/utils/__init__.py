"""
NexaValidate Utils Package
==========================

Logging and value/path helpers.
"""

from __future__ import annotations

from nexavalidate.utils.logger import (
    Logger,
    LogLevel,
    configure_logging,
    get_logger,
    set_log_level,
)
from nexavalidate.utils.helpers import (
    camel_case,
    get_nested,
    is_empty,
    set_nested,
    snake_case,
    split_list,
    str_to_arg,
    to_bool,
    to_float,
    to_int,
    to_number,
    value_len,
)

__all__ = [
    # Logging
    "Logger",
    "LogLevel",
    "configure_logging",
    "get_logger",
    "set_log_level",
    # Helpers
    "camel_case",
    "get_nested",
    "is_empty",
    "set_nested",
    "snake_case",
    "split_list",
    "str_to_arg",
    "to_bool",
    "to_float",
    "to_int",
    "to_number",
    "value_len",
]
