"""Route compiler — one descriptor in, validation plus documentation out.

Compilation happens once, at registration. The result is immutable and
shared by the engine (validation) and the OpenAPI builder (docs).
"""

from dataclasses import dataclass, field
from typing import Any

from notelink.routes.descriptor import BODY_METHODS, RouteDescriptor
from notelink.schema.inference import model_name, to_documentation_schema, to_validation
from notelink.schema.inputs import ANY_SCHEMA, Compiled
from notelink.schema.params import build_parameter_schemas, parameters_to_openapi
from notelink.schema.responses import build_responses

BEARER_SECURITY: tuple[dict[str, list[str]], ...] = ({"bearerAuth": []},)


@dataclass(frozen=True, slots=True)
class CompiledRouteSchema:
    """Validators by location plus the route's OpenAPI operation object.

    A ``None`` validator means that location is not checked. Treat
    ``documentation`` as read-only; the OpenAPI builder copies it.
    """

    documentation: dict[str, Any] = field(default_factory=dict)
    query: Compiled | None = None
    params: Compiled | None = None
    headers: Compiled | None = None
    body: Compiled | None = None

    @property
    def requires_auth(self) -> bool:
        return "security" in self.documentation


def compile_route(descriptor: RouteDescriptor) -> CompiledRouteSchema:
    """Compile a descriptor.

    - Summary falls back to the description, then to ``METHOD path``.
    - Declared params produce per-location validators and the
      ``parameters`` array.
    - A request schema is validated and documented as the JSON body;
      POST, PUT and PATCH without one accept any body.
    - A response table produces ``responses``.
    - Auth-required routes are marked with the bearer security scheme.
    """
    name = model_name(descriptor.method, descriptor.path)
    documentation: dict[str, Any] = {
        "summary": descriptor.summary or descriptor.description or descriptor.operation,
        "tags": list(descriptor.tags),
    }
    if descriptor.description:
        documentation["description"] = descriptor.description

    query = params = headers = None
    if descriptor.params:
        schemas = build_parameter_schemas(descriptor.params, name=name)
        query, params, headers = schemas.query, schemas.path, schemas.header
        documentation["parameters"] = parameters_to_openapi(descriptor.params)

    body: Compiled | None = None
    if descriptor.request_schema is not None:
        body = to_validation(descriptor.request_schema, name=model_name(name, "body"))
        documentation["requestBody"] = {
            "required": True,
            "content": {
                "application/json": {"schema": to_documentation_schema(descriptor.request_schema)}
            },
        }
    elif descriptor.method in BODY_METHODS:
        body = ANY_SCHEMA

    if descriptor.responses is not None:
        documentation["responses"] = build_responses(
            descriptor.responses, descriptor.response_schema
        )

    if descriptor.requires_auth:
        documentation["security"] = [dict(entry) for entry in BEARER_SECURITY]

    return CompiledRouteSchema(
        documentation=documentation,
        query=query,
        params=params,
        headers=headers,
        body=body,
    )
