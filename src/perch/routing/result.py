"""RouteResult — the immutable outcome of a routing attempt."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from perch.routing.route import Route


@dataclass(frozen=True, slots=True)
class RouteResult:
    """Outcome of matching a request against the route table.

    Success carries the matched route name and captured params. Failure
    carries nothing, except for a method failure (path matched, method
    did not) which records the methods the path does allow.

    Build with the named constructors rather than directly::

        RouteResult.from_route(route, {"id": "42"})
        RouteResult.from_failure()
        RouteResult.from_failure(frozenset({"GET", "POST"}))
    """

    is_failure: bool
    matched_route_name: str | None = None
    matched_params: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    allowed_methods: frozenset[str] | None = None

    @classmethod
    def from_route(cls, route: Route, params: Mapping[str, str] | None = None) -> RouteResult:
        """A successful match of *route* with captured *params*."""
        return cls(
            is_failure=False,
            matched_route_name=route.name,
            matched_params=MappingProxyType(dict(params or {})),
        )

    @classmethod
    def from_failure(cls, allowed_methods: frozenset[str] | None = None) -> RouteResult:
        """A failed match; pass *allowed_methods* for a 405-style failure."""
        return cls(is_failure=True, allowed_methods=allowed_methods)

    @property
    def is_success(self) -> bool:
        return not self.is_failure

    @property
    def is_method_failure(self) -> bool:
        """True when the path matched but the request method did not."""
        return self.is_failure and self.allowed_methods is not None
