"""Perch exception hierarchy.

Shared across the router, the URL helper, body parsing, and middleware
so every module raises and catches the same types.
"""

from dataclasses import dataclass


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when helpers or routes are wired up incorrectly."""


@dataclass(frozen=True, slots=True)
class HTTPError(PerchError):
    """An error that maps directly to an HTTP status code."""

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class MalformedRequestBody(HTTPError):  # noqa: N818
    """400 — the request body could not be parsed for its content type."""

    def __init__(self, detail: str = "Malformed request body") -> None:
        super().__init__(status=400, detail=detail)


# -- Router errors --


class RouterError(PerchError):
    """Raised by a router when it cannot synthesize a URI."""


class RouteNotFoundError(RouterError, LookupError):
    """No route is registered under the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No route named {name!r} is registered.")


class MissingParameterError(RouterError):
    """A route parameter is missing or does not satisfy its converter."""

    def __init__(self, route: str, param: str, reason: str = "missing") -> None:
        self.route = route
        self.param = param
        super().__init__(
            f"Cannot generate URI for route {route!r}: parameter {param!r} is {reason}."
        )


# -- URL helper errors --


class UrlHelperError(PerchError):
    """Base for errors raised by the URL helper itself."""


class InvalidArgumentError(UrlHelperError, ValueError):
    """A caller passed a malformed argument (fragment, base path, result).

    Carries ``code = 400`` so HTTP-facing callers can map it directly.
    """

    code = 400


class MissingRouteResultError(UrlHelperError, RuntimeError):
    """No route name was given and no route result has been recorded."""


class RoutingFailedError(UrlHelperError, RuntimeError):
    """No route name was given and the recorded result is a routing failure."""
