"""Tests for notelink.schema.inference — validation and documentation conversion."""

import logging

import pytest
from pydantic import BaseModel, TypeAdapter, ValidationError

from notelink.schema.fields import field
from notelink.schema.inference import (
    fallback_to_documentation,
    to_documentation_schema,
    to_validation,
)
from notelink.schema.inputs import ANY_SCHEMA, Compiled, Raw, as_schema_input


class User(BaseModel):
    id: int
    name: str


class Address(BaseModel):
    city: str


class Customer(BaseModel):
    address: Address
    nickname: str | None = None
    billing: Address | None = None


class TestAsSchemaInput:
    def test_mapping_becomes_raw(self) -> None:
        assert isinstance(as_schema_input({"name": "string"}), Raw)

    def test_model_class_becomes_compiled(self) -> None:
        compiled = as_schema_input(User)
        assert isinstance(compiled, Compiled)
        assert compiled.schema is User

    def test_type_adapter_becomes_compiled(self) -> None:
        adapter = TypeAdapter(list[int])
        assert as_schema_input(adapter).schema is adapter


class TestToValidation:
    def test_compiled_passes_through_unchanged(self) -> None:
        compiled = Compiled(User)
        assert to_validation(compiled) is compiled

    def test_applying_twice_changes_nothing(self) -> None:
        once = to_validation({"!id": "number"})
        assert to_validation(once) is once

    def test_required_and_optional(self) -> None:
        schema = to_validation({"!name": "string", "age": "number"})
        assert schema.validate({"name": "Ada"}) == {"name": "Ada"}
        with pytest.raises(ValidationError):
            schema.validate({"age": 36})

    def test_absent_optional_fields_are_omitted(self) -> None:
        schema = to_validation({"name": "string", "age": "number"})
        assert schema.validate({"age": 36}) == {"age": 36}

    def test_number_accepts_int_and_float(self) -> None:
        schema = to_validation({"!n": "number"})
        assert schema.validate({"n": 3})["n"] == 3
        assert schema.validate({"n": 2.5})["n"] == 2.5
        with pytest.raises(ValidationError):
            schema.validate({"n": "abc"})

    def test_tokens_are_case_insensitive(self) -> None:
        schema = to_validation({"!flag": "BOOLEAN", "!tags": "Array"})
        assert schema.validate({"flag": True, "tags": [1, "x"]}) == {
            "flag": True,
            "tags": [1, "x"],
        }

    def test_object_and_array_tokens(self) -> None:
        schema = to_validation({"!meta": "object", "!items": "array"})
        with pytest.raises(ValidationError):
            schema.validate({"meta": [], "items": []})
        with pytest.raises(ValidationError):
            schema.validate({"meta": {}, "items": {}})

    def test_unknown_token_fails_open(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="notelink.schema"):
            schema = to_validation({"!id": "uuid"})
        assert schema.validate({"id": {"anything": 1}}) == {"id": {"anything": 1}}
        assert "uuid" in caplog.text

    def test_nested_objects(self) -> None:
        schema = to_validation({"!address": {"!city": "string", "zip": "string"}})
        assert schema.validate({"address": {"city": "Oslo"}}) == {"address": {"city": "Oslo"}}
        with pytest.raises(ValidationError):
            schema.validate({"address": {"zip": "0150"}})

    def test_extra_keys_are_kept(self) -> None:
        schema = to_validation({"!name": "string"})
        assert schema.validate({"name": "Ada", "role": "admin"}) == {
            "name": "Ada",
            "role": "admin",
        }

    def test_awkward_field_names(self) -> None:
        schema = to_validation({"!user-id": "number", "_private": "string", "json": "string"})
        assert schema.validate({"user-id": 1, "_private": "x", "json": "y"}) == {
            "user-id": 1,
            "_private": "x",
            "json": "y",
        }

    def test_structured_fields(self) -> None:
        schema = to_validation([field("id", "number", required=True), field("name")])
        with pytest.raises(ValidationError):
            schema.validate({"name": "Ada"})

    def test_user_model_returns_instance(self) -> None:
        result = to_validation(User).validate({"id": 1, "name": "Ada"})
        assert result == User(id=1, name="Ada")

    def test_any_schema_accepts_anything(self) -> None:
        assert ANY_SCHEMA.validate(None) is None
        assert ANY_SCHEMA.validate([1, 2]) == [1, 2]


class TestToDocumentationSchema:
    def test_flat_definition(self) -> None:
        assert to_documentation_schema({"!id": "number", "name": "string", "ok": "boolean"}) == {
            "type": "object",
            "properties": {
                "id": {"type": "number"},
                "name": {"type": "string"},
                "ok": {"type": "boolean"},
            },
            "required": ["id"],
        }

    def test_no_required_list_when_nothing_required(self) -> None:
        assert "required" not in to_documentation_schema({"name": "string"})

    def test_array_and_object_tokens(self) -> None:
        doc = to_documentation_schema({"tags": "array", "meta": "object"})
        assert doc["properties"] == {
            "tags": {"type": "array", "items": {"type": "object"}},
            "meta": {"type": "object"},
        }

    def test_unknown_token_documents_as_string(self) -> None:
        doc = to_documentation_schema({"id": "uuid"})
        assert doc["properties"]["id"] == {"type": "string"}

    def test_nested_required(self) -> None:
        doc = to_documentation_schema({"!address": {"!city": "string", "zip": "string"}})
        assert doc == {
            "type": "object",
            "properties": {
                "address": {
                    "type": "object",
                    "properties": {"city": {"type": "string"}, "zip": {"type": "string"}},
                    "required": ["city"],
                }
            },
            "required": ["address"],
        }

    def test_field_description(self) -> None:
        doc = to_documentation_schema([field("id", "number", description="User id")])
        assert doc["properties"]["id"] == {"type": "number", "description": "User id"}

    def test_compiled_uses_json_schema(self) -> None:
        doc = to_documentation_schema(User)
        assert doc["properties"]["id"]["type"] == "integer"
        assert doc["required"] == ["id", "name"]

    def test_nested_model_refers_to_components(self) -> None:
        doc = to_documentation_schema(Customer)
        assert doc["properties"]["address"] == {"$ref": "#/components/schemas/Address"}
        assert doc["$defs"]["Address"]["required"] == ["city"]

    def test_optional_fields_are_nullable(self) -> None:
        nickname = to_documentation_schema(Customer)["properties"]["nickname"]
        assert nickname["type"] == "string"
        assert nickname["nullable"] is True
        assert "anyOf" not in nickname

    def test_optional_model_reference_is_wrapped(self) -> None:
        billing = to_documentation_schema(Customer)["properties"]["billing"]
        assert billing["allOf"] == [{"$ref": "#/components/schemas/Address"}]
        assert billing["nullable"] is True


class TestFallbackToDocumentation:
    def test_none_is_generic_object(self) -> None:
        assert fallback_to_documentation(None) == {"type": "object"}

    def test_empty_list_is_array_of_objects(self) -> None:
        assert fallback_to_documentation([]) == {"type": "array", "items": {"type": "object"}}

    def test_list_of_definition_documents_items(self) -> None:
        doc = fallback_to_documentation([{"!id": "number"}])
        assert doc == {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {"id": {"type": "number"}},
                "required": ["id"],
            },
        }

    @pytest.mark.parametrize("value", ["User", 42, True])
    def test_other_values_are_generic_objects(self, value: object) -> None:
        assert fallback_to_documentation(value) == {"type": "object"}

    def test_list_of_names_is_array_of_objects(self) -> None:
        assert fallback_to_documentation(["User"]) == {"type": "array", "items": {"type": "object"}}

    def test_model_class(self) -> None:
        assert fallback_to_documentation(User)["properties"]["id"]["type"] == "integer"

    def test_mapping_goes_through_compact_conversion(self) -> None:
        doc = fallback_to_documentation({"!id": "number", "name": "string"})
        assert doc["properties"]["id"] == {"type": "number"}
        assert doc["required"] == ["id"]
