"""OpenAPI document assembly.

Every documented route contributes one operation object, compiled once
at registration. This module only stitches them together with the API
metadata, so building the document never touches the handlers.
"""

import copy
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from notelink.config import ApiConfig
from notelink.routes.compiler import CompiledRouteSchema
from notelink.routing.router import parse_path

OPENAPI_VERSION = "3.0.3"

BEARER_SCHEME: dict[str, str] = {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}

_DEFAULT_RESPONSES: dict[str, dict[str, str]] = {"200": {"description": "Successful response"}}


@dataclass(frozen=True, slots=True)
class DocumentedRoute:
    """A registered route as the document sees it: full path and compiled schema."""

    method: str
    path: str
    schema: CompiledRouteSchema


def openapi_path(path: str) -> str:
    """Rewrite a route path in OpenAPI template form (``/users/:id`` -> ``/users/{id}``)."""
    parts = []
    for seg in parse_path(path):
        if seg.catch_all:
            parts.append("{wildcard}")
        elif seg.is_param:
            parts.append(f"{{{seg.param_name}}}")
        else:
            parts.append(seg.value)
    return "/" + "/".join(parts)


def build_openapi_document(config: ApiConfig, routes: Iterable[DocumentedRoute]) -> dict[str, Any]:
    """Build the full OpenAPI document.

    A later registration of the same method and path replaces the earlier
    one, as it does in the router. Models nested in pydantic schemas are
    collected into ``components.schemas``, where their references point.
    """
    paths: dict[str, dict[str, Any]] = {}
    schemas: dict[str, Any] = {}
    tags: list[str] = []
    secured = False

    for route in routes:
        operation = copy.deepcopy(route.schema.documentation)
        operation.setdefault("responses", copy.deepcopy(_DEFAULT_RESPONSES))
        hoist_definitions(operation, schemas)
        paths.setdefault(openapi_path(route.path), {})[route.method.lower()] = operation
        for tag in operation.get("tags", ()):
            if tag not in tags:
                tags.append(tag)
        secured = secured or route.schema.requires_auth

    document: dict[str, Any] = {
        "openapi": OPENAPI_VERSION,
        "info": {
            "title": config.title,
            "description": config.description,
            "version": config.version,
        },
        "servers": [],
        "tags": [{"name": tag} for tag in tags],
        "paths": paths,
    }
    components: dict[str, Any] = {}
    if schemas:
        components["schemas"] = schemas
    if secured:
        components["securitySchemes"] = {"bearerAuth": dict(BEARER_SCHEME)}
    if components:
        document["components"] = components
    return document


def hoist_definitions(node: Any, into: dict[str, Any]) -> None:
    """Move every ``$defs`` block found in *node* into *into*, in place.

    The first definition registered under a name is kept.
    """
    if isinstance(node, dict):
        definitions = node.pop("$defs", None) or {}
        for name, schema in definitions.items():
            hoist_definitions(schema, into)
            into.setdefault(name, schema)
        for child in node.values():
            hoist_definitions(child, into)
    elif isinstance(node, list):
        for item in node:
            hoist_definitions(item, into)
