"""Router protocol and a compiled trie router.

Routes are registered during setup and compiled into an immutable
lookup structure. The same route table answers both directions:
``match()`` turns a request path into a ``RouteResult`` and
``generate_uri()`` turns a route name plus params back into a path.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from perch.errors import ConfigurationError, MissingParameterError, RouteNotFoundError
from perch.routing.params import CONVERTERS, format_param
from perch.routing.result import RouteResult
from perch.routing.route import PathSegment, Route

logger = logging.getLogger("perch.routing")


class Router(Protocol):
    """What the URL helper needs from a router.

    Implementations raise a ``RouterError`` subclass when the name is
    unknown or required params are missing. Callers propagate those
    errors unchanged.
    """

    def generate_uri(
        self,
        name: str,
        params: Mapping[str, Any],
        options: Mapping[str, Any] | None = None,
    ) -> str: ...


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"          -> [PathSegment("users")]
        "/users/{id}"     -> [PathSegment("users"), PathSegment("{id}", is_param=True, ...)]
        "/users/{id:int}" -> [PathSegment("{id:int}", is_param=True, param_type="int")]
        "/files/{path:path}" -> [PathSegment("{path:path}", is_param=True, param_type="path")]
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            if ":" in inner:
                param_name, param_type = inner.split(":", 1)
            else:
                param_name = inner
                param_type = "str"
            if param_type not in CONVERTERS:
                msg = f"Unknown converter {param_type!r} in route path {path!r}."
                raise ConfigurationError(msg)
            segments.append(
                PathSegment(
                    value=part,
                    is_param=True,
                    param_name=param_name,
                    param_type=param_type,
                )
            )
        else:
            segments.append(PathSegment(value=part))
    return segments


class _TrieNode:
    """A node in the route trie. Mutable during compilation only."""

    __slots__ = ("catch_all", "children", "param_child", "routes_by_method")

    def __init__(self) -> None:
        # Static segment children: "users" -> node
        self.children: dict[str, _TrieNode] = {}
        # Single parameter child (only one param pattern per level)
        self.param_child: _ParamEdge | None = None
        # Catch-all edge (path converter)
        self.catch_all: _CatchAllEdge | None = None
        # Routes at this node, keyed by HTTP method
        self.routes_by_method: dict[str, Route] = {}


@dataclass(slots=True)
class _ParamEdge:
    """A parameter edge in the trie."""

    param_name: str
    param_type: str
    regex: re.Pattern[str]
    node: _TrieNode


@dataclass(slots=True)
class _CatchAllEdge:
    """A catch-all (path) edge, consumes the remaining path."""

    param_name: str
    routes_by_method: dict[str, Route]


class TrieRouter:
    """Compiled router with trie-based path matching and URI generation.

    Usage::

        router = TrieRouter()
        router.add(Route("/users/{id:int}", name="user"))
        router.compile()
        result = router.match("GET", "/users/42")
        router.generate_uri("user", {"id": 42})  # "/users/42"
    """

    __slots__ = ("_compiled", "_named", "_root")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._named: dict[str, list[PathSegment]] = {}
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise ConfigurationError(msg)

        segments = parse_path(route.path)
        if route.name is not None and route.name in self._named:
            msg = f"Duplicate route name {route.name!r}."
            raise ConfigurationError(msg)
        self._check_param_conflicts(route.path, segments)
        if route.name is not None:
            self._named[route.name] = segments

        node = self._root
        for seg in segments:
            if seg.is_param and seg.param_type == "path":
                # Catch-all: consumes rest of path, must be last segment
                if node.catch_all is None:
                    node.catch_all = _CatchAllEdge(
                        param_name=seg.param_name or "path",
                        routes_by_method={},
                    )
                for method in route.methods:
                    node.catch_all.routes_by_method[method] = route
                return

            if seg.is_param:
                if node.param_child is None:
                    pattern, _ = CONVERTERS[seg.param_type]
                    node.param_child = _ParamEdge(
                        param_name=seg.param_name or "",
                        param_type=seg.param_type,
                        regex=re.compile(pattern),
                        node=_TrieNode(),
                    )
                node = node.param_child.node
            else:
                node = node.children.setdefault(seg.value, _TrieNode())

        for method in route.methods:
            node.routes_by_method[method] = route

    def _check_param_conflicts(self, path: str, segments: list[PathSegment]) -> None:
        """Reject a param whose position is already taken by a differently named param.

        Each trie level holds a single param edge, so sibling routes must
        agree on the param name and converter at every shared position.
        """
        node: _TrieNode | None = self._root
        for seg in segments:
            if node is None:
                return
            if seg.is_param and seg.param_type == "path":
                edge = node.catch_all
                if edge is not None and edge.param_name != (seg.param_name or "path"):
                    msg = (
                        f"Route {path!r} uses {{{seg.param_name}:path}} where another route "
                        f"already uses {{{edge.param_name}:path}}."
                    )
                    raise ConfigurationError(msg)
                return
            if seg.is_param:
                param = node.param_child
                if param is None:
                    return
                if (param.param_name, param.param_type) != (seg.param_name, seg.param_type):
                    msg = (
                        f"Route {path!r} uses {seg.value} where another route already uses "
                        f"{{{param.param_name}:{param.param_type}}}."
                    )
                    raise ConfigurationError(msg)
                node = param.node
            else:
                node = node.children.get(seg.value)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    # -- Matching --

    def match(self, method: str, path: str) -> RouteResult:
        """Match a request path and method against the route table.

        Never raises for request data: an unknown path yields a plain
        failure, a known path with the wrong method yields a method
        failure listing the allowed methods.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        found = self._match_node(self._root, parts, 0, {})

        if found is None:
            logger.debug("No route matches %s %s", method, path)
            return RouteResult.from_failure()

        routes_by_method, params = found
        route = routes_by_method.get(method)
        if route is None:
            logger.debug("Method %s not allowed for %s", method, path)
            return RouteResult.from_failure(frozenset(routes_by_method))
        return RouteResult.from_route(route, params)

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> tuple[dict[str, Route], dict[str, str]] | None:
        """Recursively match path parts against the trie."""
        if index == len(parts):
            if node.routes_by_method:
                return node.routes_by_method, params
            return None

        part = parts[index]

        # 1. Static child first (exact match)
        if part in node.children:
            found = self._match_node(node.children[part], parts, index + 1, params)
            if found is not None:
                return found

        # 2. Parameter child
        edge = node.param_child
        if edge is not None and edge.regex.fullmatch(part):
            found = self._match_node(
                edge.node, parts, index + 1, {**params, edge.param_name: part}
            )
            if found is not None:
                return found

        # 3. Catch-all
        if node.catch_all is not None:
            remaining = "/".join(parts[index:])
            return node.catch_all.routes_by_method, {
                **params,
                node.catch_all.param_name: remaining,
            }

        return None

    # -- Generation --

    def generate_uri(
        self,
        name: str,
        params: Mapping[str, Any],
        options: Mapping[str, Any] | None = None,
    ) -> str:
        """Build the path for route *name* from *params*.

        ``options["defaults"]`` supplies values for params the caller
        left out. Params that do not appear in the route path are ignored.

        Raises ``RouteNotFoundError`` for an unknown name and
        ``MissingParameterError`` when a value is missing or does not
        satisfy its converter.
        """
        segments = self._named.get(name)
        if segments is None:
            raise RouteNotFoundError(name)

        defaults: Mapping[str, Any] = (options or {}).get("defaults", {})
        parts: list[str] = []
        for seg in segments:
            if not seg.is_param:
                parts.append(seg.value)
                continue
            param = seg.param_name or ""
            if param in params:
                value = params[param]
            elif param in defaults:
                value = defaults[param]
            else:
                raise MissingParameterError(name, param)
            try:
                parts.append(format_param(value, seg.param_type))
            except ValueError:
                raise MissingParameterError(
                    name, param, f"not a valid {seg.param_type}"
                ) from None
        return "/" + "/".join(parts)
