"""
NexaValidate Global Options
===========================

Process-wide defaults shared by every validation engine.

Options are held in a frozen dataclass. `configure()` swaps the
whole object in one assignment and every engine snapshots the
current options when it is created, so configuration must be done
at startup, before validations run concurrently.

Configuration Loading Priority (highest to lowest):
1. Runtime overrides (`configure(...)`)
2. Environment variables (NEXAVALIDATE_*), via `load_env_overrides()`
3. Default values

Example:
    from nexavalidate.core.config import configure, get_options

    configure(stop_on_error=False)

    def tune(opt):
        opt["validate_tag"] = "rules"

    configure(tune)

    get_options().stop_on_error  # False
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

import orjson

from nexavalidate.utils.logger import set_log_level

ENV_PREFIX = "NEXAVALIDATE_"

# 32 MB, the multipart body limit
DEFAULT_MAX_MEMORY = 32 << 20


@dataclass(frozen=True)
class GlobalOption:
    """
    Global validation options.

    Attributes:
        stop_on_error: Stop the run at the first failing field
        skip_on_empty: Default skip-empty policy for new rules
        validate_tag: Dataclass metadata key holding rule strings
        filter_tag: Dataclass metadata key holding filter rules
        label_tag: Dataclass metadata key holding display names
        max_memory: Largest request body accepted, in bytes
        log_level: Level for the nexavalidate loggers
    """

    stop_on_error: bool = True
    skip_on_empty: bool = True
    validate_tag: str = "validate"
    filter_tag: str = "filter"
    label_tag: str = "label"
    max_memory: int = DEFAULT_MAX_MEMORY
    log_level: str = "WARNING"


_options = GlobalOption()


def get_options() -> GlobalOption:
    """Get current global options."""
    return _options


def configure(
    fn: Optional[Callable[[Dict[str, Any]], None]] = None,
    **overrides: Any,
) -> GlobalOption:
    """
    Replace the global options.

    Args:
        fn: Callback receiving a mutable dict copy of the options
        **overrides: Option values to set

    Returns:
        The new options

    Raises:
        TypeError: for unknown option names
    """
    global _options

    values = dataclasses.asdict(_options)
    if fn is not None:
        fn(values)
    values.update(overrides)

    unknown = set(values) - {f.name for f in dataclasses.fields(GlobalOption)}
    if unknown:
        raise TypeError(f"unknown option(s): {', '.join(sorted(unknown))}")

    _options = GlobalOption(**values)
    set_log_level(_options.log_level)
    return _options


def reset_options() -> GlobalOption:
    """Restore default options."""
    global _options

    _options = GlobalOption()
    set_log_level(_options.log_level)
    return _options


def load_env_overrides(environ: Optional[Mapping[str, str]] = None) -> GlobalOption:
    """
    Load overrides from NEXAVALIDATE_* environment variables.

    NEXAVALIDATE_STOP_ON_ERROR=false maps to `stop_on_error=False`.
    Variables that do not name an option are ignored.
    """
    environ = os.environ if environ is None else environ
    defaults = dataclasses.asdict(GlobalOption())
    overrides: Dict[str, Any] = {}

    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX):].lower()
        if name not in defaults:
            continue
        # Text options keep their raw value
        if isinstance(defaults[name], str):
            overrides[name] = value
        else:
            overrides[name] = _parse_env_value(value)

    return configure(**overrides)


def _parse_env_value(value: str) -> Any:
    """Parse environment variable value to appropriate type."""
    # Boolean
    if value.lower() in ("true", "yes", "on"):
        return True
    if value.lower() in ("false", "no", "off"):
        return False

    # Integer
    try:
        return int(value)
    except ValueError:
        pass

    # Float
    try:
        return float(value)
    except ValueError:
        pass

    # JSON (for complex values)
    if value.startswith(("{", "[")):
        try:
            return orjson.loads(value)
        except orjson.JSONDecodeError:
            pass

    return value
