"""Parameter descriptors and the per-location schemas built from them.

A route declares its query, path and header parameters as a flat list::

    Parameter("id", "path", type="number", required=True)
    Parameter("page", "query", type="number", default=1)

The list is split into one validation schema each for query, path and
header parameters, plus the OpenAPI ``parameters`` array, which also
documents cookie parameters.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import BeforeValidator, Field, create_model
from pydantic_core import PydanticUndefined

from notelink.errors import ConfigurationError
from notelink.schema.inference import (
    MODEL_CONFIG,
    documentation_type,
    model_name,
    validation_type,
)
from notelink.schema.inputs import Compiled

PARAMETER_LOCATIONS: frozenset[str] = frozenset({"query", "path", "header", "cookie"})

# Cookie parameters are documented but not validated
VALIDATED_LOCATIONS: tuple[str, ...] = ("query", "path", "header")


@dataclass(frozen=True, slots=True)
class Parameter:
    """A single declared request parameter.

    A parameter is optional when it is not required or when it has a
    default. ``None`` is a default like any other; leaving ``default``
    unset means there is none.
    """

    name: str
    location: str
    type: str = "string"
    description: str | None = None
    required: bool = False
    default: Any = PydanticUndefined

    def __post_init__(self) -> None:
        if not self.name:
            msg = "Parameter name must be non-empty."
            raise ConfigurationError(msg)
        if self.location not in PARAMETER_LOCATIONS:
            msg = (
                f"Parameter {self.name!r} has unsupported location {self.location!r}. "
                f"Expected one of: {', '.join(sorted(PARAMETER_LOCATIONS))}"
            )
            raise ConfigurationError(msg)

    @property
    def has_default(self) -> bool:
        return self.default is not PydanticUndefined

    @property
    def optional(self) -> bool:
        return not self.required or self.has_default

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Parameter:
        """Build from a plain mapping using OpenAPI's ``in`` key for the location."""
        try:
            return cls(
                name=data["name"],
                location=data.get("in", data.get("location", "")),
                type=data.get("type", "string"),
                description=data.get("description"),
                required=bool(data.get("required", False)),
                default=data.get("default", PydanticUndefined),
            )
        except KeyError as exc:
            msg = f"Parameter definition {dict(data)!r} is missing {exc.args[0]!r}"
            raise ConfigurationError(msg) from exc


def as_parameter(value: Parameter | Mapping[str, Any]) -> Parameter:
    if isinstance(value, Parameter):
        return value
    if isinstance(value, Mapping):
        return Parameter.from_dict(value)
    msg = f"Expected a Parameter or mapping, got {type(value).__name__}"
    raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class ParameterSchemas:
    """One validation schema per location; ``None`` where nothing is declared."""

    query: Compiled | None = None
    path: Compiled | None = None
    header: Compiled | None = None


def build_parameter_schemas(params: Iterable[Parameter], *, name: str = "Route") -> ParameterSchemas:
    """Partition *params* by location and build a schema for each non-empty group."""
    groups: dict[str, list[Parameter]] = {location: [] for location in VALIDATED_LOCATIONS}
    for param in params:
        if param.location in groups:
            groups[param.location].append(param)

    def build(location: str) -> Compiled | None:
        if not groups[location]:
            return None
        return build_parameter_schema(groups[location], name=model_name(name, location))

    return ParameterSchemas(query=build("query"), path=build("path"), header=build("header"))


def build_parameter_schema(params: Iterable[Parameter], *, name: str) -> Compiled:
    """A validation schema over one location's parameters.

    Header names are matched case-insensitively (the engine lower-cases
    incoming header names). Missing optional parameters take their
    default, or are left out when they have none. A single value for an
    ``array`` parameter (``?tag=a``) is accepted as a one-item list.
    """
    definitions: dict[str, Any] = {}
    for index, param in enumerate(params):
        key = param.name.lower() if param.location == "header" else param.name
        annotation: Any = validation_type(param.type, field_name=param.name)
        if param.optional:
            annotation = annotation | None
            default = param.default if param.has_default else None
        else:
            default = ...
        if param.type.lower() == "array":
            annotation = Annotated[annotation, BeforeValidator(_as_list)]
        definitions[f"p{index}"] = (
            annotation,
            Field(default, alias=key, description=param.description),
        )
    return Compiled(create_model(name, __config__=MODEL_CONFIG, **definitions), generated=True)


def _as_list(value: Any) -> Any:
    if value is None or isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    return [value]


def parameters_to_openapi(params: Iterable[Parameter]) -> list[dict[str, Any]]:
    """The OpenAPI ``parameters`` array. Path parameters are always required."""
    documented: list[dict[str, Any]] = []
    for param in params:
        schema = documentation_type(param.type)
        if param.has_default and param.default is not None:
            schema["default"] = param.default
        entry: dict[str, Any] = {
            "name": param.name,
            "in": param.location,
            "required": param.location == "path" or not param.optional,
            "schema": schema,
        }
        if param.description:
            entry["description"] = param.description
        documented.append(entry)
    return documented
