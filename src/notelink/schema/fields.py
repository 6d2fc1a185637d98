"""Compact schema notation and its structured field descriptors.

A compact definition is a mapping of field name to type token, optionally
nested::

    {"!id": "number", "name": "string", "address": {"city": "string"}}

A leading ``!`` marks a field as required and is stripped from the
field name. The same shape can be spelled without the marker using
structured descriptors, which also allows a literal leading ``!``::

    (field("id", "number", required=True), field("name"), field("!bang"))

Both spellings parse into a tuple of ``FieldSpec``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from notelink.errors import ConfigurationError

# Supported type tokens (matched case-insensitively)
FIELD_TYPES: frozenset[str] = frozenset({"string", "number", "boolean", "object", "array"})

REQUIRED_MARKER = "!"

# A field type is a token, a nested field tuple, or None (untyped)
type FieldType = str | tuple[FieldSpec, ...] | None

# What callers may write: compact mapping or a sequence of FieldSpec
type SchemaDefinition = Mapping[str, Any] | Sequence[FieldSpec]


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One field of a schema definition.

    ``type`` is a type token (``"number"``), a nested tuple of
    ``FieldSpec`` for an object with known properties, or ``None`` for
    a value the notation could not type.
    """

    name: str
    type: FieldType = "string"
    required: bool = False
    description: str | None = None

    @property
    def is_nested(self) -> bool:
        return isinstance(self.type, tuple)

    @property
    def token(self) -> str | None:
        """Lower-cased type token, or ``None`` for nested and untyped fields."""
        if isinstance(self.type, str):
            return self.type.lower()
        return None

    @property
    def is_known_type(self) -> bool:
        return self.is_nested or self.token in FIELD_TYPES


def field(
    name: str,
    type: str | SchemaDefinition = "string",  # noqa: A002
    *,
    required: bool = False,
    description: str | None = None,
) -> FieldSpec:
    """Build a ``FieldSpec``. A nested definition may be passed as *type*."""
    field_type: FieldType = type if isinstance(type, str) else parse_definition(type)
    return FieldSpec(name=name, type=field_type, required=required, description=description)


def is_field_sequence(value: object) -> bool:
    """True for a non-empty list/tuple made only of ``FieldSpec``."""
    return (
        isinstance(value, (list, tuple))
        and bool(value)
        and all(isinstance(item, FieldSpec) for item in value)
    )


def parse_definition(definition: SchemaDefinition) -> tuple[FieldSpec, ...]:
    """Parse compact notation (or pass through FieldSpecs) into field descriptors.

    Key order is preserved. Values that are neither a token string nor a
    nested definition become untyped fields.

    Raises ``ConfigurationError`` when *definition* is neither a mapping
    nor a sequence of ``FieldSpec``.
    """
    if isinstance(definition, Mapping):
        return tuple(_parse_entry(key, value) for key, value in definition.items())

    if isinstance(definition, (list, tuple)) and all(
        isinstance(item, FieldSpec) for item in definition
    ):
        return tuple(definition)

    msg = (
        "A schema definition must be a mapping of field name to type token "
        f"or a sequence of FieldSpec, got {type(definition).__name__}"
    )
    raise ConfigurationError(msg)


def _parse_entry(key: object, value: object) -> FieldSpec:
    name = str(key)
    required = name.startswith(REQUIRED_MARKER)
    if required:
        name = name[len(REQUIRED_MARKER) :]

    if isinstance(value, str):
        return FieldSpec(name=name, type=value, required=required)
    if isinstance(value, Mapping) or is_field_sequence(value):
        return FieldSpec(name=name, type=parse_definition(value), required=required)  # type: ignore[arg-type]
    return FieldSpec(name=name, type=None, required=required)
