"""Tests for notelink.routes.compiler — descriptor to validators and docs."""

import pytest

from notelink.errors import ConfigurationError
from notelink.routes.compiler import compile_route
from notelink.routes.descriptor import RouteDescriptor
from notelink.schema.inputs import ANY_SCHEMA
from notelink.schema.params import Parameter


def handler(ctx):
    return None


class TestRouteDescriptor:
    def test_method_is_normalized(self) -> None:
        assert RouteDescriptor(method="get", path="/x", handler=handler).method == "GET"

    def test_rejects_unknown_method(self) -> None:
        with pytest.raises(ConfigurationError, match="TRACE"):
            RouteDescriptor(method="TRACE", path="/x", handler=handler)

    def test_rejects_relative_path(self) -> None:
        with pytest.raises(ConfigurationError):
            RouteDescriptor(method="GET", path="x", handler=handler)

    def test_rejects_non_callable_handler(self) -> None:
        with pytest.raises(ConfigurationError):
            RouteDescriptor(method="GET", path="/x", handler="nope")  # type: ignore[arg-type]

    def test_param_mappings_are_coerced(self) -> None:
        descriptor = RouteDescriptor(
            method="GET", path="/x/:id", handler=handler, params=[{"name": "id", "in": "path"}]
        )
        assert descriptor.params == (Parameter("id", "path"),)

    def test_single_tag_string(self) -> None:
        assert RouteDescriptor(method="GET", path="/", handler=handler, tags="Users").tags == ("Users",)


class TestCompileRoute:
    def test_summary_falls_back_to_description(self) -> None:
        schema = compile_route(
            RouteDescriptor(method="GET", path="/todos", handler=handler, description="List todos")
        )
        assert schema.documentation["summary"] == "List todos"
        assert schema.documentation["description"] == "List todos"

    def test_summary_falls_back_to_operation(self) -> None:
        schema = compile_route(RouteDescriptor(method="GET", path="/todos", handler=handler))
        assert schema.documentation["summary"] == "GET /todos"
        assert "description" not in schema.documentation

    def test_explicit_summary_wins(self) -> None:
        schema = compile_route(
            RouteDescriptor(
                method="GET", path="/", handler=handler, summary="Short", description="Long"
            )
        )
        assert schema.documentation["summary"] == "Short"

    def test_tags_always_present(self) -> None:
        schema = compile_route(RouteDescriptor(method="GET", path="/", handler=handler))
        assert schema.documentation["tags"] == []

    def test_request_body_documented(self) -> None:
        schema = compile_route(
            RouteDescriptor(
                method="POST", path="/todos", handler=handler, request_schema={"!title": "string"}
            )
        )
        body = schema.documentation["requestBody"]
        assert body["required"] is True
        assert body["content"]["application/json"]["schema"]["required"] == ["title"]
        assert schema.body is not None
        assert schema.body.validate({"title": "x"}) == {"title": "x"}

    def test_body_method_without_schema_accepts_anything(self) -> None:
        schema = compile_route(RouteDescriptor(method="PUT", path="/x", handler=handler))
        assert schema.body is ANY_SCHEMA
        assert "requestBody" not in schema.documentation

    def test_get_without_schema_has_no_body(self) -> None:
        assert compile_route(RouteDescriptor(method="GET", path="/x", handler=handler)).body is None

    def test_parameters(self) -> None:
        schema = compile_route(
            RouteDescriptor(
                method="GET",
                path="/todos/:id",
                handler=handler,
                params=[Parameter("id", "path", type="number"), Parameter("q", "query")],
            )
        )
        assert [p["name"] for p in schema.documentation["parameters"]] == ["id", "q"]
        assert schema.params is not None
        assert schema.query is not None
        assert schema.headers is None

    def test_responses_use_response_schema(self) -> None:
        schema = compile_route(
            RouteDescriptor(
                method="GET",
                path="/me",
                handler=handler,
                response_schema={"!id": "number"},
                responses={200: "Me", 401: "Unauthorized"},
            )
        )
        responses = schema.documentation["responses"]
        assert responses["200"]["content"]["application/json"]["schema"]["required"] == ["id"]
        assert responses["401"]["content"]["application/json"]["schema"] == {"type": "object"}

    def test_no_responses_without_table(self) -> None:
        schema = compile_route(RouteDescriptor(method="GET", path="/", handler=handler))
        assert "responses" not in schema.documentation

    def test_auth_adds_security(self) -> None:
        schema = compile_route(
            RouteDescriptor(method="GET", path="/me", handler=handler, requires_auth=True)
        )
        assert schema.documentation["security"] == [{"bearerAuth": []}]
        assert schema.requires_auth

    def test_public_route_has_no_security(self) -> None:
        schema = compile_route(RouteDescriptor(method="GET", path="/", handler=handler))
        assert "security" not in schema.documentation
        assert not schema.requires_auth
