"""Schema inputs — the ``Raw | Compiled`` tagged union.

Every schema a route descriptor carries is lifted into one of two tags
at the boundary:

- ``Raw`` wraps compact notation (parsed into ``FieldSpec`` tuples).
- ``Compiled`` wraps a runtime validation schema: a pydantic model
  class or a ``TypeAdapter``.

Compilers match on the tag, so passing an already-compiled schema
through unchanged never depends on probing the object.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, TypeAdapter
from pydantic_core import PydanticUndefined

from notelink.schema.fields import (
    FieldSpec,
    SchemaDefinition,
    is_field_sequence,
    parse_definition,
)

DEFAULT_REF_TEMPLATE = "#/$defs/{model}"


@dataclass(frozen=True, slots=True)
class Raw:
    """Compact notation awaiting compilation."""

    fields: tuple[FieldSpec, ...]

    @classmethod
    def of(cls, definition: SchemaDefinition) -> Raw:
        return cls(parse_definition(definition))


@dataclass(frozen=True, slots=True)
class Compiled:
    """A runtime validation schema.

    ``generated`` is True for models built from compact notation. Their
    validated output is a plain dict holding only the fields the client
    sent plus declared defaults; user-supplied models return the model
    instance.
    """

    schema: type[BaseModel] | TypeAdapter[Any]
    generated: bool = False

    def validate(self, data: Any) -> Any:
        """Validate *data*. Raises ``pydantic.ValidationError`` on failure."""
        if isinstance(self.schema, TypeAdapter):
            return self.schema.validate_python(data)

        if data is None and self.generated:
            data = {}
        instance = self.schema.model_validate(data)
        if not self.generated:
            return instance

        dumped = instance.model_dump(by_alias=True, exclude_unset=True)
        for name, info in type(instance).model_fields.items():
            key = info.alias or name
            if key not in dumped and info.default not in (None, PydanticUndefined):
                dumped[key] = info.default
        return dumped

    def json_schema(self, *, ref_template: str = DEFAULT_REF_TEMPLATE) -> dict[str, Any]:
        """The JSON schema pydantic derives for this validator.

        Nested models are emitted under ``$defs`` and referenced through
        *ref_template*.
        """
        if isinstance(self.schema, TypeAdapter):
            return self.schema.json_schema(ref_template=ref_template)
        return self.schema.model_json_schema(ref_template=ref_template)


type SchemaInput = Raw | Compiled

# Accepts any value at all; used for bodies without a declared shape
ANY_SCHEMA = Compiled(TypeAdapter(Any))


def is_schema_input(value: Any) -> bool:
    """True for values ``as_schema_input`` accepts: definitions and validators."""
    return (
        isinstance(value, Raw | Compiled | TypeAdapter | Mapping)
        or is_field_sequence(value)
        or (isinstance(value, type) and issubclass(value, BaseModel))
    )


def as_schema_input(value: Any) -> SchemaInput:
    """Lift a user-supplied schema into the tagged union.

    Pydantic model classes and ``TypeAdapter`` instances become
    ``Compiled``; everything else is parsed as compact notation.
    """
    match value:
        case Raw() | Compiled():
            return value
        case TypeAdapter():
            return Compiled(value)
        case type() if issubclass(value, BaseModel):
            return Compiled(value)
        case _:
            return Raw.of(value)
