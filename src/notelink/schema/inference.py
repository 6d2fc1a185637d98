"""Type inference — compact notation to validation and documentation schemas.

Two independent conversions of the same input:

- ``to_validation`` builds a pydantic model used to validate requests.
- ``to_documentation_schema`` builds the OpenAPI schema object.

Type tokens are matched case-insensitively. An unrecognized token
accepts any value during validation and is documented as a string; a
warning is logged on ``notelink.schema`` when the validator is built.
"""

import copy
import logging
import re
from typing import Any

from pydantic import ConfigDict, Field, create_model

from notelink.schema.fields import FieldSpec, is_field_sequence
from notelink.schema.inputs import Compiled, Raw, as_schema_input, is_schema_input

logger = logging.getLogger("notelink.schema")

_VALIDATION_TYPES: dict[str, Any] = {
    "string": str,
    "number": int | float,
    "boolean": bool,
    "object": dict[str, Any],
    "array": list[Any],
}

_DOCUMENTATION_TYPES: dict[str, dict[str, Any]] = {
    "string": {"type": "string"},
    "number": {"type": "number"},
    "boolean": {"type": "boolean"},
    "object": {"type": "object"},
    "array": {"type": "array", "items": {"type": "object"}},
}

# Undeclared keys are kept; only declared fields are checked
MODEL_CONFIG = ConfigDict(extra="allow")

_NAME_CHARS = re.compile(r"[^0-9A-Za-z_]")

# Nested pydantic models are hoisted into the document's components
COMPONENT_REF_TEMPLATE = "#/components/schemas/{model}"

_NULL_SCHEMA = {"type": "null"}


def model_name(*parts: str) -> str:
    """A readable, identifier-safe model name (``GET /users/:id`` -> ``GET_users_id``)."""
    joined = "_".join(p for p in (_NAME_CHARS.sub("_", part).strip("_") for part in parts) if p)
    return joined or "Schema"


def validation_type(token: str | None, *, field_name: str = "") -> Any:
    """The Python annotation for a type token. Unknown tokens yield ``Any``."""
    if token is None:
        return Any
    annotation = _VALIDATION_TYPES.get(token.lower())
    if annotation is None:
        _warn_unknown(token, field_name)
        return Any
    return annotation


def documentation_type(token: str | None) -> dict[str, Any]:
    """The OpenAPI schema for a type token. Unknown tokens document as string."""
    if token is None:
        return {"type": "string"}
    return copy.deepcopy(_DOCUMENTATION_TYPES.get(token.lower(), {"type": "string"}))


def to_validation(value: Any, *, name: str = "Schema") -> Compiled:
    """Convert a schema input to a runtime validator.

    Compact notation becomes a generated pydantic model named *name*.
    An input that is already compiled is returned as-is, so applying
    the conversion twice changes nothing.
    """
    match as_schema_input(value):
        case Compiled() as compiled:
            return compiled
        case Raw(fields=fields):
            return Compiled(build_model(name, fields), generated=True)


def build_model(name: str, fields: tuple[FieldSpec, ...]) -> type:
    """Generate a pydantic model for *fields*.

    Each field gets a synthetic attribute name and keeps its declared
    name as the alias, so any key (``user-id``, ``_id``, ``json``) is
    usable. Non-required fields default to ``None`` and are dropped from
    the validated output when the client omits them.
    """
    definitions: dict[str, Any] = {}
    for index, spec in enumerate(fields):
        if isinstance(spec.type, tuple):
            annotation: Any = build_model(model_name(name, spec.name), spec.type)
        else:
            annotation = validation_type(spec.token, field_name=spec.name)

        if not spec.required:
            annotation = annotation | None
        default = ... if spec.required else None
        definitions[f"f{index}"] = (
            annotation,
            Field(default, alias=spec.name, description=spec.description),
        )
    return create_model(name, __config__=MODEL_CONFIG, **definitions)


def to_documentation_schema(value: Any) -> dict[str, Any]:
    """Convert a schema input to an OpenAPI object schema.

    Nested definitions become nested object schemas. A ``required`` list
    is present only when at least one field is required. Compiled
    schemas are documented by the JSON schema pydantic derives for them,
    with references pointing at ``#/components/schemas`` and ``null``
    unions spelled as OpenAPI 3.0 ``nullable``. Their nested models stay
    under ``$defs`` until the document is assembled.
    """
    match as_schema_input(value):
        case Compiled() as compiled:
            return nullable_to_openapi(compiled.json_schema(ref_template=COMPONENT_REF_TEMPLATE))
        case Raw(fields=fields):
            return _document_fields(fields)


def _document_fields(fields: tuple[FieldSpec, ...]) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    required: list[str] = []
    for spec in fields:
        if isinstance(spec.type, tuple):
            prop = _document_fields(spec.type)
        else:
            prop = documentation_type(spec.token)
        if spec.description:
            prop["description"] = spec.description
        properties[spec.name] = prop
        if spec.required:
            required.append(spec.name)

    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def fallback_to_documentation(value: Any) -> dict[str, Any]:
    """Document a route-level response schema.

    Used when a response entry carries no schema of its own:

    - A list or tuple (other than a ``FieldSpec`` sequence) is an array
      whose items follow its first element, or generic objects when
      that element is not a definition.
    - Definitions and validators go through ``to_documentation_schema``.
    - Anything else (``None``, a model name string, a number) documents
      as a generic object.
    """
    if isinstance(value, (list, tuple)) and not is_field_sequence(value):
        first = value[0] if value else None
        return {"type": "array", "items": fallback_to_documentation(first)}
    if is_schema_input(value):
        return to_documentation_schema(value)
    return {"type": "object"}


def nullable_to_openapi(node: Any) -> Any:
    """Rewrite JSON Schema ``null`` unions as OpenAPI 3.0 ``nullable``.

    ``{"anyOf": [{"type": "string"}, {"type": "null"}]}`` becomes
    ``{"type": "string", "nullable": true}``. A lone remaining ``$ref``
    is kept under ``allOf``, since OpenAPI 3.0 ignores siblings of
    ``$ref``.
    """
    if isinstance(node, list):
        return [nullable_to_openapi(item) for item in node]
    if not isinstance(node, dict):
        return node

    converted = {key: nullable_to_openapi(item) for key, item in node.items()}
    options = converted.get("anyOf")
    if isinstance(options, list) and _NULL_SCHEMA in options:
        rest = [option for option in options if option != _NULL_SCHEMA]
        del converted["anyOf"]
        if len(rest) == 1 and "$ref" not in rest[0]:
            converted = {**rest[0], **converted}
        elif len(rest) == 1:
            converted["allOf"] = rest
        elif rest:
            converted["anyOf"] = rest
        converted["nullable"] = True
    return converted


def _warn_unknown(token: str, field_name: str) -> None:
    logger.warning(
        "Unknown type token %r for field %r; accepting any value and documenting it as string",
        token,
        field_name,
    )
