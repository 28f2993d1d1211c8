"""Tests for dataclass data sources and their validations."""

from dataclasses import dataclass, field
from typing import List, Optional

import pytest

from nexavalidate import InvalidDataError, Kind, SetValueError, StructData, configure, for_struct, new
from nexavalidate.data.struct import describe


@dataclass
class UserForm:
    """Record carrying its own rules, messages and display names."""

    name: str = field(default="", metadata={"validate": "required|minLen:7"})
    email: str = field(default="", metadata={"validate": "email", "label": "Email Address"})
    age: int = field(default=0, metadata={"validate": "required|int|min:1|max:99"})
    code: str = field(default="", metadata={"validate": "customValidator"})
    status: str = field(default="", metadata={"filter": "trim|upper"})

    def custom_validator(self, value) -> bool:
        return len(value) == 4

    def messages(self):
        return {
            "required": "oh! the {field} is required",
            "name.required": "message for special field",
        }

    def translates(self):
        return {"name": "User Name"}


@dataclass
class Extra:
    status1: int = field(default=0, metadata={"validate": "required|min:1"})


@dataclass
class Order:
    id: int = field(default=0, metadata={"validate": "required"})
    extra: Extra = field(default_factory=Extra)
    price: float = 0.0
    note: Optional[str] = None
    tags: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FrozenForm:
    name: str = field(default="", metadata={"validate": "required", "filter": "trim"})


@dataclass(frozen=True)
class FrozenProfile:
    nick: Optional[str] = None


@dataclass
class HookedForm:
    code: str = ""

    def config_validation(self, v):
        v.string_rule("code", "required|len:4")


class TestStructData:
    """Tests for StructData access."""

    def test_rejects_non_dataclass(self):
        """Test only dataclass instances are accepted."""
        with pytest.raises(InvalidDataError):
            StructData({"name": "inhere"})
        with pytest.raises(InvalidDataError):
            StructData(UserForm)
        with pytest.raises(InvalidDataError):
            StructData(None)

    def test_get_nested(self):
        data = StructData(Order(id=1, extra=Extra(status1=3), tags=["a"]))

        assert data.get("id") == (1, True)
        assert data.get("extra.status1") == (3, True)
        assert data.get("tags.0") == ("a", True)
        assert data.get("extra.missing") == (None, False)
        assert data.has("extra")

    def test_type_of(self):
        data = StructData(Order())

        assert data.type_of("id") is Kind.INT
        assert data.type_of("price") is Kind.FLOAT
        assert data.type_of("note") is Kind.STRING
        assert data.type_of("extra") is Kind.STRUCT
        assert data.type_of("extra.status1") is Kind.INT
        assert data.type_of("tags") is Kind.LIST
        assert data.type_of("missing") is Kind.INVALID

    def test_set_checks_declared_kind(self):
        """Test writes must match the declared field type."""
        order = Order()
        data = StructData(order)

        data.set("extra.status1", 5)
        data.set("price", 3)
        data.set("note", None)
        assert order.extra.status1 == 5
        assert order.price == 3

        with pytest.raises(SetValueError):
            data.set("id", "not a number")
        with pytest.raises(SetValueError):
            data.set("missing", 1)
        with pytest.raises(SetValueError):
            data.set("id", None)

    def test_set_frozen_record(self):
        with pytest.raises(SetValueError, match="read-only"):
            StructData(FrozenForm(name="x")).set("name", "y")

    def test_descriptor_table_is_cached(self):
        assert describe(Order) is describe(Order)
        assert describe(Order).fields["extra"].nested is describe(Extra)

    def test_capabilities(self):
        data = StructData(UserForm())

        assert data.translates == {"name": "User Name"}
        assert "name.required" in data.messages
        assert data.method("customValidator") is not None
        assert data.method("translates") is None
        assert data.method("name") is None
        assert data.field_names() == ["name", "email", "age", "code", "status"]


class TestStructValidation:
    """Tests for validations built from records."""

    def test_display_name_in_message(self):
        """Test translates() feeds the message display name."""
        v = new(UserForm(name="inhere", email="some@e.com", age=20, code="abcd"))

        assert v.validate() is False
        assert v.errors.get("name") == "User Name min length is 7"
        assert v.trans.has_field("name")
        assert v.trans.has_message("name.required")

    def test_record_messages_and_labels(self):
        """Test record messages, labels and custom validator methods."""
        v = for_struct(UserForm(name="", email="bad", age=0, code="abc"))
        v.stop_on_error = False

        assert v.validate() is False
        assert v.errors.field("name") == ["message for special field"]
        assert v.errors.get("email") == "Email Address value is an invalid email address"
        assert v.errors.get("age") == "age min value is 1"
        assert v.errors.get("code") == "code did not pass validate"

    def test_passing_record(self):
        """Test filters write back into the record and safe data is filled."""
        form = UserForm(name="inhere-go", email="some@e.com", age=20, code="abcd", status="  ok ")
        v = new(form)

        assert v.validate() is True
        assert form.status == "OK"
        assert v.safe_data == {"name": "inhere-go", "email": "some@e.com", "age": 20, "code": "abcd"}

    def test_nested_record(self):
        v = new(Order(id=1, extra=Extra(status1=0)))

        assert v.validate() is False
        assert v.errors.get("extra.status1") == "extra.status1 min value is 1"

    def test_frozen_record_filter(self):
        """Test a filter that cannot write back is a field error."""
        v = new(FrozenForm(name=" x "))

        assert v.validate() is False
        assert v.errors.get("name") == "name data is invalid"

    def test_unwritable_default_is_skipped(self):
        """Test a default a frozen record refuses is logged, not reported."""
        v = new(FrozenProfile())
        v.string_rule("nick", "default:guest|minLen:3")

        assert v.validate() is True
        assert v.errors.empty()
        assert v.get("nick") == (None, True)

    def test_config_validation_hook(self):
        v = new(HookedForm(code="abc"))

        assert v.validate() is False
        assert v.errors.get("code") == "code length must be 4"

    def test_custom_validate_tag(self):
        """Test the metadata keys come from global options."""

        @dataclass
        class Tagged:
            name: str = field(default="", metadata={"rules": "required"})

        configure(validate_tag="rules")
        v = new(Tagged())

        assert v.validate() is False
        assert v.errors.get("name") == "name is required"

    def test_bind_safe_data_to_record(self):
        v = new({"id": 7, "extra": {"status1": 2}})
        v.string_rules({"id": "int", "extra.status1": "int"})
        v.validate()

        order = v.bind_safe_data(Order())
        assert order.id == 7
        assert order.extra.status1 == 2

    def test_for_struct_invalid_input(self):
        """Test a non-dataclass argument gives a failing validation."""
        v = for_struct({"name": "inhere"})

        assert v.validate() is False
        assert "invalid input data" in str(v.errors)
