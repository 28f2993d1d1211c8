"""Tests for mapping, JSON and form data sources."""

import pytest

from nexavalidate import FormData, InvalidDataError, Kind, MapData, SetValueError, UploadedFile
from nexavalidate.factory import from_json, from_json_bytes, from_map, from_query, from_url_values


class TestMapData:
    """Tests for MapData."""

    def test_get_paths(self):
        data = MapData({"user": {"name": "inhere", "tags": ["a", "b"]}, "a.b": 1})

        assert data.get("user.name") == ("inhere", True)
        assert data.get("user.tags.1") == ("b", True)
        assert data.get("user.age") == (None, False)
        assert data.get("a.b") == (1, True)

    def test_none_value_is_found(self):
        assert MapData({"x": None}).get("x") == (None, True)

    def test_set_in_place(self):
        raw = {"user": {"name": "inhere"}}
        data = MapData(raw)

        data.set("user.name", "tom")
        data.set("meta.page", 2)

        assert raw["user"]["name"] == "tom"
        assert raw["meta"] == {"page": 2}

    def test_set_through_scalar_fails(self):
        data = MapData({"name": "inhere"})
        with pytest.raises(SetValueError):
            data.set("name.first", "x")

    def test_type_of(self):
        data = MapData({"age": 1, "name": "x", "tags": [], "meta": {}, "none": None})

        assert data.type_of("age") is Kind.INT
        assert data.type_of("name") is Kind.STRING
        assert data.type_of("tags") is Kind.LIST
        assert data.type_of("meta") is Kind.MAP
        assert data.type_of("none") is Kind.NONE
        assert data.type_of("missing") is Kind.INVALID

    def test_from_map_rejects_none(self):
        with pytest.raises(InvalidDataError, match="invalid input data"):
            from_map(None)


class TestJsonData:
    """Tests for JSON documents."""

    def test_from_json_keeps_bytes(self):
        data = from_json('{"name": "inhere", "age": 100}')

        assert data.is_json
        assert data.json_bytes == b'{"name": "inhere", "age": 100}'
        assert data.get("age") == (100, True)
        assert data.field_names() == ["name", "age"]

    def test_from_json_bytes(self):
        data = from_json_bytes(b'{"user": {"id": 1}}')
        assert data.get("user.id") == (1, True)

    @pytest.mark.parametrize("source", ["[1, 2]", '"text"', "{bad json", ""])
    def test_invalid_documents(self, source):
        """Test only JSON objects are accepted."""
        with pytest.raises(InvalidDataError):
            from_json(source)

    def test_to_json_reflects_filtered_values(self):
        data = from_json('{"age": "10"}')
        data.set("age", 10)
        assert data.to_json() == b'{"age":10}'


class TestFormData:
    """Tests for FormData."""

    def test_multi_values(self):
        data = from_url_values({"name": ["inhere"], "tag": ["a", "b"]})

        assert data.get("name") == ("inhere", True)
        assert data.get("tag") == ("a", True)
        assert data.get_list("tag") == ["a", "b"]
        assert data.type_of("tag") is Kind.LIST
        assert data.type_of("name") is Kind.STRING
        assert data.get("missing") == (None, False)

    def test_accumulates_sources(self):
        data = FormData({"name": "inhere"})
        data.add_values({"tag": ["a"]}).add("tag", "b")

        assert data.get_list("tag") == ["a", "b"]
        assert data.to_dict() == {"name": "inhere", "tag": ["a", "b"]}

    def test_set_replaces_values(self):
        data = from_query("?age=10&age=20")
        data.set("age", 10)
        assert data.get_list("age") == [10]

    def test_files_are_separate(self):
        upload = UploadedFile.from_bytes("a.png", b"\x89PNG", "image/png")
        data = FormData({"name": "x"}, files={"avatar": upload})

        assert data.get("avatar") == (None, False)
        assert data.has_file("avatar")
        assert data.get_file("avatar") is upload
        assert data.type_of("avatar") is Kind.FILE
        assert data.file_names() == ["avatar"]
        assert data.field_names() == ["name"]

    def test_file_validators_see_uploads(self):
        """Test the engine falls back to the file namespace."""
        data = FormData({"name": "inhere"})
        data.add_file("avatar", UploadedFile.from_bytes("a.png", b"\x89PNG", "image/png"))
        data.add_files({"doc": [UploadedFile.from_bytes("a.txt", b"hi", "text/plain")]})

        v = data.create()
        v.string_rules({
            "avatar": "required|file|image:png,jpg",
            "doc": "file|mimes:text/plain",
        })

        assert v.validate() is True
        assert v.safe_val("avatar").filename == "a.png"

    def test_image_validator_rejects_other_files(self):
        data = FormData(files={"avatar": UploadedFile.from_bytes("a.txt", b"hi", "text/plain")})
        v = data.create()
        v.string_rule("avatar", "image")

        assert v.validate() is False
        assert v.errors.get("avatar") == "avatar must be an uploaded image file"
