"""Response documentation.

Each entry of a route's response table becomes an OpenAPI response
object. An entry's own schema wins; otherwise 200 and 201 fall back to
the route-level response schema; everything else is documented as a
generic object.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from notelink.errors import ConfigurationError
from notelink.schema.inference import fallback_to_documentation, to_documentation_schema

# Only success statuses inherit the route-level response schema
FALLBACK_STATUSES: frozenset[str] = frozenset({"200", "201"})


@dataclass(frozen=True, slots=True)
class ResponseDefinition:
    """One documented response: a description and an optional body schema."""

    description: str
    schema: Any = None


type ResponseEntry = str | ResponseDefinition | Mapping[str, Any]


def as_response_definition(entry: ResponseEntry) -> ResponseDefinition:
    """Accept a bare description, a ``ResponseDefinition`` or a mapping."""
    match entry:
        case ResponseDefinition():
            return entry
        case str():
            return ResponseDefinition(description=entry)
        case Mapping():
            return ResponseDefinition(
                description=str(entry.get("description", "")),
                schema=entry.get("schema"),
            )
        case _:
            msg = f"Unsupported response entry {entry!r}"
            raise ConfigurationError(msg)


def build_responses(
    responses: Mapping[str | int, ResponseEntry],
    fallback_schema: Any = None,
) -> dict[str, dict[str, Any]]:
    """Build the OpenAPI ``responses`` object. Status codes become strings."""
    documented: dict[str, dict[str, Any]] = {}
    for status, entry in responses.items():
        code = str(status)
        definition = as_response_definition(entry)

        if definition.schema is not None:
            schema = to_documentation_schema(definition.schema)
        elif fallback_schema is not None and code in FALLBACK_STATUSES:
            schema = fallback_to_documentation(fallback_schema)
        else:
            schema = {"type": "object"}

        documented[code] = {
            "description": definition.description,
            "content": {"application/json": {"schema": schema}},
        }
    return documented
