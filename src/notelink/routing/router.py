"""Path matching for the engine.

Route paths are split into segments and stored in a trie keyed by
literal text, with one shared parameter edge and an optional catch-all
per level. Literal segments win over parameters, parameters over the
catch-all.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from notelink.errors import ConfigurationError, MethodNotAllowed, NotFound
from notelink.routing.route import Route, RouteMatch

_PARAM_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

CATCH_ALL = "*"


@dataclass(frozen=True, slots=True)
class PathSegment:
    """One segment of a route path: literal text, a named parameter or the catch-all."""

    value: str
    is_param: bool = False
    param_name: str | None = None
    catch_all: bool = False


def _split(path: str) -> list[str]:
    return [part for part in path.split("/") if part]


def parse_path(path: str) -> list[PathSegment]:
    """Split a route path into segments.

    ``/users/:id`` and ``/users/{id}`` both declare a parameter named
    ``id``; a final ``*`` captures the remainder of the path under the
    name ``*``. Raises ``ConfigurationError`` for a parameter name that
    is not an identifier or a ``*`` before the last segment.
    """
    parts = _split(path)
    segments: list[PathSegment] = []
    for position, part in enumerate(parts, start=1):
        if part == CATCH_ALL:
            if position != len(parts):
                msg = f"Catch-all '*' must be the last segment in {path!r}"
                raise ConfigurationError(msg)
            segments.append(PathSegment(part, is_param=True, param_name=CATCH_ALL, catch_all=True))
        elif part[0] == ":" or (part[0] == "{" and part[-1] == "}"):
            name = part[1:] if part[0] == ":" else part[1:-1]
            if not _PARAM_NAME.match(name):
                msg = f"Invalid path parameter {part!r} in {path!r}"
                raise ConfigurationError(msg)
            segments.append(PathSegment(part, is_param=True, param_name=name))
        else:
            segments.append(PathSegment(part))
    return segments


class _Node:
    __slots__ = ("catch_all", "literal", "param", "routes")

    def __init__(self) -> None:
        self.literal: dict[str, _Node] = {}
        self.param: _Node | None = None
        # method -> route, for paths ending here
        self.routes: dict[str, Route] = {}
        # method -> route, for a trailing "*" at this level
        self.catch_all: dict[str, Route] = {}


type _Found = tuple[dict[str, Route], tuple[str, ...]]


class Router:
    """The engine's route table.

    Usage::

        router = Router()
        router.add(Route("/users/:id", handler, frozenset({"GET"})))
        router.compile()
        router.match("GET", "/users/42").path_params  # {"id": "42"}

    Parameter values are captured by position and named after the route
    that matched, so ``/users/:id`` and ``/users/:user_id/posts`` can
    live side by side.
    """

    __slots__ = ("_compiled", "_param_names", "_root")

    def __init__(self) -> None:
        self._root = _Node()
        self._compiled = False
        self._param_names: dict[int, tuple[str, ...]] = {}

    def add(self, route: Route) -> None:
        """Insert *route*. The same method and path added twice keeps the later route."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        segments = parse_path(route.path)
        self._param_names[id(route)] = tuple(
            seg.param_name for seg in segments if seg.param_name is not None
        )

        node = self._root
        table = node.routes
        for seg in segments:
            if seg.catch_all:
                table = node.catch_all
                break
            if seg.is_param:
                node.param = node.param or _Node()
                node = node.param
            else:
                node = node.literal.setdefault(seg.value, _Node())
            table = node.routes
        for method in route.methods:
            table[method] = route

    def compile(self) -> None:
        """Close the table to further additions."""
        self._compiled = True

    @property
    def routes(self) -> list[Route]:
        """Every route still in the table, each once."""
        found: dict[int, Route] = {}
        pending = [self._root]
        while pending:
            node = pending.pop()
            for route in (*node.routes.values(), *node.catch_all.values()):
                found.setdefault(id(route), route)
            pending.extend(node.literal.values())
            if node.param is not None:
                pending.append(node.param)
        return list(found.values())

    def match(self, method: str, path: str) -> RouteMatch:
        """Resolve *method* and *path* to a route.

        Candidates are tried in priority order (literal, parameter,
        catch-all) and the first one serving *method* wins, so
        ``POST /users/new`` does not hide ``GET /users/:id``. ``HEAD`` is
        served by the ``GET`` route when no ``HEAD`` route exists.

        Raises ``NotFound`` when no route has this path and
        ``MethodNotAllowed`` when routes have it but not for *method*.
        """
        allowed: set[str] = set()
        for by_method, values in self._candidates(self._root, _split(path), ()):
            route = by_method.get(method)
            if route is None and method == "HEAD":
                route = by_method.get("GET")
            if route is not None:
                names = self._param_names.get(id(route), ())
                return RouteMatch(route, dict(zip(names, values, strict=False)))
            allowed.update(by_method)

        if not allowed:
            raise NotFound(f"No route matches {method} {path!r}")
        if "GET" in allowed:
            allowed.add("HEAD")
        raise MethodNotAllowed(frozenset(allowed))

    def _candidates(
        self, node: _Node, parts: list[str], values: tuple[str, ...]
    ) -> Iterator[_Found]:
        if not parts:
            if node.routes:
                yield node.routes, values
            if node.catch_all:
                yield node.catch_all, (*values, "")
            return

        head, rest = parts[0], parts[1:]
        child = node.literal.get(head)
        if child is not None:
            yield from self._candidates(child, rest, values)
        if node.param is not None:
            yield from self._candidates(node.param, rest, (*values, head))
        if node.catch_all:
            yield node.catch_all, (*values, "/".join(parts))
