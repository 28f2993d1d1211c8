"""Tests for request decoding and the construction surface."""

from dataclasses import dataclass
from types import SimpleNamespace

import httpx
import pytest

from nexavalidate import (
    FormData,
    InvalidDataError,
    MapData,
    StructData,
    UploadedFile,
    configure,
    for_form,
    for_json,
    for_request,
    from_request,
    new,
)
from nexavalidate.core.request import Headers, RequestData, parse_multipart, parse_urlencoded

URL = "http://test/users"


@dataclass
class Simple:
    name: str = ""


class TestRequestData:
    """Tests for request snapshots."""

    def test_snapshot_of_httpx_request(self):
        request = httpx.Request("POST", URL + "?page=2", data={"name": "inhere"})
        req = RequestData.of(request)

        assert req.method == "POST"
        assert req.query_string == "page=2"
        assert req.body == b"name=inhere"
        assert req.content_type == "application/x-www-form-urlencoded"
        assert req.has_body

    def test_missing_method(self):
        with pytest.raises(InvalidDataError, match="missing method"):
            RequestData.of(object())

    def test_query_methods_have_no_body(self):
        assert not RequestData.of(httpx.Request("GET", URL)).has_body
        assert RequestData.of(httpx.Request("DELETE", URL)).has_body is False

    def test_bad_utf8_query(self):
        request = SimpleNamespace(method="GET", headers={}, query_string=b"a=\xff", body=b"")

        with pytest.raises(InvalidDataError, match="invalid query string"):
            RequestData.of(request)

    def test_headers_are_case_insensitive(self):
        headers = Headers([("Content-Type", "application/json")])

        assert headers["content-type"] == "application/json"
        assert "CONTENT-TYPE" in headers
        assert headers.get("x-missing", "none") == "none"

    def test_parse_urlencoded_rejects_bad_utf8(self):
        with pytest.raises(InvalidDataError):
            parse_urlencoded(b"name=\xff\xfe")

    def test_parse_multipart_requires_boundary(self):
        with pytest.raises(InvalidDataError, match="boundary"):
            parse_multipart(b"", "multipart/form-data")


class TestFromRequest:
    """Tests for from_request()."""

    def test_get_reads_query(self):
        data = from_request(httpx.Request("GET", URL + "?name=inhere&tag=a&tag=b"))

        assert isinstance(data, FormData)
        assert data.get("name") == ("inhere", True)
        assert data.get_list("tag") == ["a", "b"]

    def test_urlencoded_body_with_query(self):
        request = httpx.Request("POST", URL + "?page=2", data={"name": "inhere", "age": "20"})
        data = from_request(request)

        assert isinstance(data, FormData)
        assert data.get("name") == ("inhere", True)
        assert data.get("age") == ("20", True)
        assert data.get("page") == ("2", True)

    def test_multipart_body(self):
        request = httpx.Request(
            "POST",
            URL,
            data={"name": "inhere"},
            files={"avatar": ("a.png", b"\x89PNG\r\n", "image/png")},
        )
        data = from_request(request)

        assert isinstance(data, FormData)
        assert data.get("name") == ("inhere", True)
        upload = data.get_file("avatar")
        assert upload.filename == "a.png"
        assert upload.content_type == "image/png"
        assert upload.read() == b"\x89PNG\r\n"

    def test_json_body(self):
        data = from_request(httpx.Request("PUT", URL, json={"name": "inhere", "age": 20}))

        assert isinstance(data, MapData)
        assert data.is_json
        assert data.get("age") == (20, True)

    def test_unsupported_content_type(self):
        request = httpx.Request("POST", URL, content=b"hello", headers={"Content-Type": "text/plain"})

        with pytest.raises(InvalidDataError, match="empty data"):
            from_request(request)

    def test_body_too_large(self):
        request = httpx.Request("POST", URL, data={"name": "inhere"})

        with pytest.raises(InvalidDataError, match="too large"):
            from_request(request, max_memory=4)

    def test_global_max_memory(self):
        configure(max_memory=4)
        request = httpx.Request("POST", URL, data={"name": "inhere"})

        with pytest.raises(InvalidDataError):
            from_request(request)


class TestFactory:
    """Tests for engine builders."""

    def test_for_request_validates_form(self):
        request = httpx.Request(
            "POST",
            URL,
            data={"name": "inhere"},
            files={"avatar": ("a.png", b"\x89PNG", "image/png")},
        )
        v = for_request(request)
        v.string_rules({"name": "required|minLen:3", "avatar": "required|image:png"})

        assert v.validate() is True
        assert v.safe_val("name") == "inhere"
        assert isinstance(v.safe_val("avatar"), UploadedFile)

    def test_for_request_stores_error(self):
        request = httpx.Request("POST", URL, content=b"hello", headers={"Content-Type": "text/plain"})
        v = for_request(request)

        assert v.validate() is False
        assert v.errors.get("_validate") == "empty data"

    def test_for_request_stores_query_error(self):
        request = SimpleNamespace(method="GET", headers={}, query_string=b"a=\xff", body=b"")
        v = for_request(request)

        assert v.validate() is False
        assert v.errors.get("_validate").startswith("invalid query string")

    def test_new_dispatch(self):
        """Test new() picks the data source from the input type."""
        assert isinstance(new({"a": 1}).data, MapData)
        assert new('{"a": 1}').data.is_json
        assert new(b'{"a": 1}').data.is_json
        assert isinstance(new(Simple()).data, StructData)
        assert isinstance(new(httpx.Request("GET", URL + "?a=1")).data, FormData)

        data = FormData({"a": "1"})
        assert new(data).data is data

    def test_new_with_scene(self):
        assert new({"a": 1}, scene="create").scene == "create"

    def test_new_rejects_unknown_input(self):
        v = new(42)
        assert v.validate() is False
        assert "invalid input data" in str(v.errors)

    def test_for_json_invalid(self):
        v = for_json("[1, 2]")

        assert v.validate() is False
        assert v.errors.get("_validate").startswith("invalid JSON data")

    def test_for_json_collects_errors(self):
        v = for_json('{"name": "inhere", "age": 100}')
        v.stop_on_error = False
        v.string_rules({"name": "required|minLen:7", "age": "required|int|range:1,99"})

        assert v.validate() is False
        assert v.errors.get("name") == "name min length is 7"
        assert v.errors.get("age") == "age value must be in the range 1 - 99"

    def test_for_form(self):
        v = for_form({"tag": ["a", "b"], "name": "inhere"})
        v.string_rule("name", "required")

        assert v.validate() is True
        assert v.data.get_list("tag") == ["a", "b"]


class TestUploadedFile:
    """Tests for uploaded files."""

    def test_from_bytes(self):
        upload = UploadedFile.from_bytes("a.txt", b"hello", "text/plain")

        assert upload.size == 5
        assert upload.text() == "hello"

    @pytest.mark.asyncio
    async def test_save(self, tmp_path):
        """Test uploads are written to disk asynchronously."""
        upload = UploadedFile.from_bytes("a.txt", b"hello", "text/plain")
        target = tmp_path / "a.txt"

        await upload.save(str(target))

        assert target.read_bytes() == b"hello"
