"""
NexaValidate Factory
====================

Builds data sources and validations from common inputs.

Data-source builders (`from_*`) raise `InvalidDataError`. Engine
builders (`new`, `for_*`) never raise for bad input: the error is
stored on the validation, shows up in its errors and makes
`validate()` return False.

Example:
    v = new({"name": "inhere"})
    v = new('{"name": "inhere"}')
    v = new(UserForm(name="inhere"))
    v = new(request)
"""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, Mapping, MutableMapping, Optional, Union

from nexavalidate.core.config import get_options
from nexavalidate.core.exceptions import InvalidDataError
from nexavalidate.core.request import (
    RequestData,
    parse_multipart,
    parse_query,
    parse_urlencoded,
)
from nexavalidate.data.base import DataSource
from nexavalidate.data.form import FormData, FormValues
from nexavalidate.data.map import MapData
from nexavalidate.data.struct import StructData
from nexavalidate.utils.logger import get_logger
from nexavalidate.validation.validation import Validation

logger = get_logger("nexavalidate.factory")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
MULTIPART_CONTENT_TYPE = "multipart/form-data"
JSON_CONTENT_TYPE = "application/json"


# =============================================================================
# Data sources
# =============================================================================

def from_map(data: Optional[MutableMapping[str, Any]]) -> MapData:
    """
    Create map data.

    Raises:
        InvalidDataError: if data is None or not a mapping
    """
    if data is None or not isinstance(data, MutableMapping):
        raise InvalidDataError()
    return MapData(data)


def from_json(source: str) -> MapData:
    """
    Create map data from a JSON object string.

    Raises:
        InvalidDataError: for malformed JSON or non-object documents
    """
    return MapData.from_json(source)


def from_json_bytes(source: bytes) -> MapData:
    return MapData.from_json(source)


def from_struct(src: Any) -> StructData:
    """
    Create struct data from a dataclass instance.

    Raises:
        InvalidDataError: if src is not a dataclass instance
    """
    return StructData(src)


def from_url_values(values: FormValues) -> FormData:
    """Create form data from multi-valued data ({"tag": ["a", "b"]})."""
    return FormData(values)


def from_query(query: Union[str, FormValues]) -> FormData:
    """Create form data from a query string or parsed query values."""
    if isinstance(query, (str, bytes)):
        text = query.decode("utf-8") if isinstance(query, bytes) else query
        return FormData(parse_query(text.lstrip("?")))
    return FormData(query)


def _base_content_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


def from_request(request: Any, max_memory: Optional[int] = None) -> DataSource:
    """
    Create a data source from a request-like object.

    GET/DELETE/HEAD/OPTIONS requests read the query string. Other
    methods read the body by content type: urlencoded and multipart
    bodies give form data (query values appended), JSON bodies give
    map data.

    Args:
        request: Object with method, headers, query string and body
        max_memory: Body size limit, defaults to the global option

    Raises:
        InvalidDataError: for missing method, oversized or malformed
            bodies and unsupported content types
    """
    req = RequestData.of(request)
    limit = get_options().max_memory if max_memory is None else max_memory

    if not req.has_body:
        return FormData(parse_query(req.query_string))

    if len(req.body) > limit:
        raise InvalidDataError(
            f"request body too large: {len(req.body)} bytes exceeds {limit}"
        )

    content_type = _base_content_type(req.content_type)

    if content_type == FORM_CONTENT_TYPE:
        data = FormData(parse_urlencoded(req.body))
        return data.add_values(parse_query(req.query_string))

    if content_type == MULTIPART_CONTENT_TYPE:
        values, files = parse_multipart(req.body, req.content_type)
        data = FormData(values, files)
        return data.add_values(parse_query(req.query_string))

    if content_type == JSON_CONTENT_TYPE or content_type.endswith("+json"):
        return MapData.from_json(req.body)

    raise InvalidDataError("empty data")


# =============================================================================
# Validations
# =============================================================================

def _build(builder: Callable[[], DataSource], scene: Optional[str] = None) -> Validation:
    try:
        data = builder()
    except InvalidDataError as e:
        logger.warning("Invalid input data", error=str(e))
        return Validation(MapData(), error=e, scene=scene)
    return data.validation().set_scene(scene)


def for_map(data: Optional[MutableMapping[str, Any]], scene: Optional[str] = None) -> Validation:
    return _build(lambda: from_map(data), scene)


def for_json(source: Union[str, bytes], scene: Optional[str] = None) -> Validation:
    return _build(lambda: MapData.from_json(source), scene)


def for_struct(src: Any, scene: Optional[str] = None) -> Validation:
    """Create a validation loaded with a dataclass record's rules."""
    return _build(lambda: from_struct(src), scene)


def for_request(
    request: Any,
    scene: Optional[str] = None,
    max_memory: Optional[int] = None,
) -> Validation:
    return _build(lambda: from_request(request, max_memory), scene)


def for_form(values: FormValues, scene: Optional[str] = None) -> Validation:
    return _build(lambda: from_url_values(values), scene)


def new(data: Any, scene: Optional[str] = None) -> Validation:
    """
    Create a validation for any supported input.

    Accepts a data source, a mapping, a JSON object string or bytes,
    a dataclass instance or a request-like object. Anything else
    (None included) gives a validation that fails with
    "invalid input data".
    """
    if isinstance(data, DataSource):
        return data.validation().set_scene(scene)
    if isinstance(data, MutableMapping):
        return for_map(data, scene)
    if isinstance(data, Mapping):
        return for_map(dict(data), scene)
    if isinstance(data, (str, bytes, bytearray)):
        return for_json(data, scene)
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return for_struct(data, scene)
    if data is not None and hasattr(data, "method") and hasattr(data, "headers"):
        return for_request(data, scene)
    return _build(lambda: from_map(None), scene)
