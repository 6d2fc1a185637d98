"""Schema — compact notation, type inference and parameter/response schemas.

Compact notation (``{"!id": "number", "name": "string"}``) is the
authoring format. It is converted twice: to a pydantic validator for
requests and to an OpenAPI schema for documentation.
"""

from notelink.schema.fields import FIELD_TYPES, FieldSpec, field, parse_definition
from notelink.schema.inference import (
    fallback_to_documentation,
    to_documentation_schema,
    to_validation,
)
from notelink.schema.inputs import ANY_SCHEMA, Compiled, Raw, SchemaInput, as_schema_input
from notelink.schema.params import (
    Parameter,
    ParameterSchemas,
    build_parameter_schemas,
    parameters_to_openapi,
)
from notelink.schema.responses import ResponseDefinition, build_responses

__all__ = [
    "ANY_SCHEMA",
    "FIELD_TYPES",
    "Compiled",
    "FieldSpec",
    "Parameter",
    "ParameterSchemas",
    "Raw",
    "ResponseDefinition",
    "SchemaInput",
    "as_schema_input",
    "build_parameter_schemas",
    "build_responses",
    "fallback_to_documentation",
    "field",
    "parameters_to_openapi",
    "parse_definition",
    "to_documentation_schema",
    "to_validation",
]
