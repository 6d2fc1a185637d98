"""Engine route records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from notelink._internal.types import EngineHandler

if TYPE_CHECKING:
    from notelink.routes.compiler import CompiledRouteSchema


@dataclass(frozen=True, slots=True)
class Route:
    """One entry in the engine's route table.

    Documented routes carry their compiled ``schema`` and the engine
    validates against it. Raw routes and the documentation endpoints
    have no schema and are ``hidden``.
    """

    path: str
    handler: EngineHandler
    methods: frozenset[str]
    schema: CompiledRouteSchema | None = None
    hidden: bool = False


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """The route a request resolved to and the path parameters it captured."""

    route: Route
    path_params: dict[str, str] = field(default_factory=dict)
