"""
NexaValidate Request Decoding
=============================

Turns HTTP-request-like objects into plain form values and uploaded
files that the form data source can validate.

Any object exposing the usual request attributes works:
- method: HTTP method
- headers: mapping or list of (name, value) pairs
- query_string (str/bytes) or url.query
- body (bytes), read() or content (bytes)

This covers httpx/requests request objects as well as test doubles.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import parse_qs

from nexavalidate.core.exceptions import InvalidDataError

# Methods whose data is read from the query string
QUERY_METHODS = frozenset({"GET", "DELETE", "HEAD", "OPTIONS"})


@dataclass
class UploadedFile:
    """
    Represents an uploaded file from multipart form data.

    Attributes:
        filename: Original filename
        content_type: MIME type
        size: File size in bytes
        content: File content as bytes
    """

    filename: str
    content_type: str
    size: int
    content: bytes = field(repr=False)

    @classmethod
    def from_bytes(
        cls,
        filename: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> "UploadedFile":
        return cls(
            filename=filename,
            content_type=content_type,
            size=len(content),
            content=content,
        )

    async def save(self, path: str) -> None:
        """Save uploaded file to disk."""
        import aiofiles
        async with aiofiles.open(path, "wb") as f:
            await f.write(self.content)

    def read(self) -> bytes:
        """Read file content."""
        return self.content

    def text(self, encoding: str = "utf-8") -> str:
        """Read file content as text."""
        return self.content.decode(encoding)


class Headers:
    """
    Case-insensitive HTTP headers container.

    Example:
        headers["Content-Type"]  # application/json
        headers["content-type"]  # application/json (same)
        headers.get("X-Custom", "default")
    """

    def __init__(
        self,
        raw_headers: Union[Mapping[Any, Any], Iterable[Tuple[Any, Any]], None] = None,
    ) -> None:
        self._headers: Dict[str, str] = {}

        if raw_headers is None:
            return

        items = raw_headers.items() if hasattr(raw_headers, "items") else raw_headers
        for key, value in items:
            # Decode bytes if needed
            if isinstance(key, bytes):
                key = key.decode("latin-1")
            if isinstance(value, bytes):
                value = value.decode("latin-1")
            self._headers[str(key).lower()] = str(value)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get header value."""
        return self._headers.get(key.lower(), default)

    def __getitem__(self, key: str) -> str:
        return self._headers[key.lower()]

    def __contains__(self, key: str) -> bool:
        return key.lower() in self._headers

    def keys(self) -> List[str]:
        return list(self._headers.keys())

    def to_dict(self) -> Dict[str, str]:
        return self._headers.copy()


@dataclass
class RequestData:
    """
    Snapshot of the request parts needed for validation.

    Attributes:
        method: Upper-cased HTTP method
        headers: Case-insensitive headers
        query_string: Raw query string
        body: Raw body bytes
    """

    method: str = "GET"
    headers: Headers = field(default_factory=Headers)
    query_string: str = ""
    body: bytes = b""

    @classmethod
    def of(cls, request: Any) -> "RequestData":
        """
        Build a snapshot from a request-like object.

        Raises:
            InvalidDataError: if the object has no method
        """
        if isinstance(request, RequestData):
            return request

        method = getattr(request, "method", None)
        if not method:
            raise InvalidDataError("invalid request: missing method")
        if isinstance(method, bytes):
            method = method.decode("latin-1")

        headers = getattr(request, "headers", None)
        if not isinstance(headers, Headers):
            headers = Headers(headers)

        return cls(
            method=str(method).upper(),
            headers=headers,
            query_string=_query_string_of(request),
            body=_body_of(request),
        )

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "") or ""

    @property
    def has_body(self) -> bool:
        """Check if the method carries a body."""
        return self.method not in QUERY_METHODS


def _query_string_of(request: Any) -> str:
    query = getattr(request, "query_string", None)
    if query is None:
        url = getattr(request, "url", None)
        query = getattr(url, "query", None) if url is not None else None
    if query is None:
        return ""
    if isinstance(query, bytes):
        try:
            return query.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidDataError(f"invalid query string: {e}") from e
    return str(query)


def _body_of(request: Any) -> bytes:
    body = getattr(request, "body", None)
    if body is None and callable(getattr(request, "read", None)):
        body = request.read()
    if body is None:
        body = getattr(request, "content", None)
    if body is None:
        return b""
    if isinstance(body, str):
        return body.encode("utf-8")
    return bytes(body)


def parse_query(query_string: str) -> Dict[str, List[str]]:
    """Parse a query or urlencoded string into multi-valued data."""
    return parse_qs(query_string, keep_blank_values=True)


def parse_urlencoded(body: bytes) -> Dict[str, List[str]]:
    """
    Parse application/x-www-form-urlencoded body.

    Raises:
        InvalidDataError: for bodies that are not valid UTF-8
    """
    try:
        return parse_query(body.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise InvalidDataError(f"invalid form body: {e}") from e


def parse_multipart(
    body: bytes,
    content_type: str,
) -> Tuple[Dict[str, List[str]], Dict[str, List[UploadedFile]]]:
    """
    Parse multipart form data.

    Returns:
        Tuple of (form values, uploaded files)

    Raises:
        InvalidDataError: when the boundary is missing
    """
    # Extract boundary
    boundary_match = re.search(r'boundary="?([^";\s]+)"?', content_type)
    if not boundary_match:
        raise InvalidDataError("invalid multipart body: missing boundary")

    boundary = boundary_match.group(1).encode()

    form_data: Dict[str, List[str]] = {}
    files: Dict[str, List[UploadedFile]] = {}

    # Split by boundary
    parts = body.split(b"--" + boundary)

    for part in parts[1:-1]:  # Skip preamble and closing
        if not part.strip() or part.strip() == b"--":
            continue

        # Split headers from content
        try:
            headers_end = part.index(b"\r\n\r\n")
        except ValueError:
            continue

        headers_raw = part[:headers_end].decode("utf-8", errors="replace")
        content = part[headers_end + 4:]
        if content.endswith(b"\r\n"):
            content = content[:-2]

        # Parse Content-Disposition
        name_match = re.search(r'\bname="([^"]*)"', headers_raw)
        filename_match = re.search(r'\bfilename="([^"]*)"', headers_raw)
        content_type_match = re.search(r"Content-Type:\s*([^\r\n]+)", headers_raw, re.I)

        if not name_match:
            continue

        field_name = name_match.group(1)

        if filename_match:
            files.setdefault(field_name, []).append(
                UploadedFile(
                    filename=filename_match.group(1),
                    content_type=(
                        content_type_match.group(1).strip()
                        if content_type_match
                        else "application/octet-stream"
                    ),
                    size=len(content),
                    content=content,
                )
            )
        else:
            form_data.setdefault(field_name, []).append(
                content.decode("utf-8", errors="replace")
            )

    return form_data, files
