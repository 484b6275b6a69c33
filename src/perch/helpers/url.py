"""URL generation that reconciles the matched route with caller overrides.

The helper is told about every routing outcome (``set_route_result``)
and, when asked for a URL, decides which params to feed the router:

- no route name: regenerate the matched route, caller params on top;
- same route name as the match: same merge, unless
  ``reuse_result_params`` is off;
- any other route name: caller params only.

The router builds the path; the helper then adds the base path, the
query string, and the fragment.

Thread safety:
    The recorded result lives in a per-instance ``ContextVar``, so one
    helper can be shared across concurrent requests (asyncio tasks or
    threads) without one request seeing another's match. Within a
    single context each notification overwrites the previous one.
"""

import logging
import re
from collections.abc import Mapping
from contextvars import ContextVar
from typing import Any
from urllib.parse import urlencode

from perch.config import HelperConfig
from perch.errors import InvalidArgumentError, MissingRouteResultError, RoutingFailedError
from perch.routing.result import RouteResult
from perch.routing.router import Router

logger = logging.getLogger("perch.helpers")

# RFC 3986 section 3.5: fragment = *( pchar / "/" / "?" ), at least one char here
FRAGMENT_RE = re.compile(r"(?:[A-Za-z0-9\-._~!$&'()*+,;=:@/?]|%[0-9A-Fa-f]{2})+")


class UrlHelper:
    """Generate URLs for named routes, reusing the current match's params.

    Usage::

        helper = UrlHelper(router)
        helper.set_route_result(router.match("GET", "/users/42"))

        helper()                               # "/users/42"
        helper(route_params={"id": "7"})       # "/users/7"
        helper("user_posts", {"id": "7"}, {"page": "2"}, "latest")
        # "/users/7/posts?page=2#latest"
    """

    __slots__ = ("_base_path", "_reuse_result_params", "_route_result", "router")

    def __init__(
        self,
        router: Router,
        *,
        base_path: str = "",
        reuse_result_params: bool = True,
    ) -> None:
        self.router = router
        self._route_result: ContextVar[RouteResult | None] = ContextVar(
            "perch_route_result", default=None
        )
        self._reuse_result_params = reuse_result_params
        self._base_path = ""
        self.set_base_path(base_path)

    @classmethod
    def from_config(cls, router: Router, config: HelperConfig) -> "UrlHelper":
        """Build a helper from a ``HelperConfig``."""
        return cls(
            router,
            base_path=config.base_path,
            reuse_result_params=config.reuse_result_params,
        )

    # -- Route result notification --

    def set_route_result(self, result: RouteResult) -> None:
        """Record *result* as the current routing outcome.

        Called once per routing attempt, before anything generates a URL.
        Replaces whatever was recorded before.
        """
        if not isinstance(result, RouteResult):
            msg = f"Expected a RouteResult, got {type(result).__name__}."
            raise InvalidArgumentError(msg)
        self._route_result.set(result)

    on_route_matched = set_route_result

    @property
    def route_result(self) -> RouteResult | None:
        """The most recently recorded result, or None."""
        return self._route_result.get()

    # -- Base path --

    @property
    def base_path(self) -> str:
        return self._base_path

    def set_base_path(self, path: str) -> None:
        """Set the prefix for generated URLs; a leading ``/`` is added if missing."""
        if not isinstance(path, str):
            msg = f"Base path must be a string, got {type(path).__name__}."
            raise InvalidArgumentError(msg)
        if path and not path.startswith("/"):
            path = "/" + path
        self._base_path = path

    # -- Generation --

    def __call__(
        self,
        route_name: str | None = None,
        route_params: Mapping[str, Any] | None = None,
        query_params: Mapping[str, Any] | None = None,
        fragment: str | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> str:
        return self.generate(route_name, route_params, query_params, fragment, options)

    def generate(
        self,
        route_name: str | None = None,
        route_params: Mapping[str, Any] | None = None,
        query_params: Mapping[str, Any] | None = None,
        fragment: str | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> str:
        """Generate a URL for *route_name* (or the matched route).

        Args:
            route_name: Route to generate. ``None`` means the matched route.
            route_params: Path params; they win over matched params.
            query_params: Appended as a query string, in insertion order.
            fragment: Appended after ``#``; must be RFC 3986 conformant.
            options: ``router`` (mapping passed to the router verbatim) and
                ``reuse_result_params`` (overrides the helper default).

        Raises:
            InvalidArgumentError: The fragment is empty or malformed.
            MissingRouteResultError: No route name and nothing recorded.
            RoutingFailedError: No route name and the recorded result failed.
            RouterError: Whatever the router raises, unchanged.
        """
        if fragment is not None and not FRAGMENT_RE.fullmatch(fragment):
            msg = f"Fragment identifier {fragment!r} must conform to RFC 3986."
            raise InvalidArgumentError(msg)

        options = options or {}
        route_params = route_params or {}
        result = self._route_result.get()

        if route_name is None:
            if result is None:
                msg = (
                    "Attempting to use matched result when none was injected; "
                    "no matched result available, aborting."
                )
                raise MissingRouteResultError(msg)
            if result.is_failure:
                msg = "Attempting to use matched result when routing failed; aborting."
                raise RoutingFailedError(msg)
            route_name = result.matched_route_name
            params = {**result.matched_params, **route_params}
        else:
            reuse = options.get("reuse_result_params", self._reuse_result_params)
            params = self._merge_params(route_name, result, route_params, reuse=reuse)

        uri = self.router.generate_uri(route_name, params, options.get("router", {}))
        logger.debug("Generated %s for route %r", uri, route_name)

        if self._base_path and self._base_path != "/":
            uri = self._base_path + uri
        if query_params:
            uri = f"{uri}?{urlencode(query_params)}"
        if fragment is not None:
            uri = f"{uri}#{fragment}"
        return uri

    @staticmethod
    def _merge_params(
        route_name: str,
        result: RouteResult | None,
        params: Mapping[str, Any],
        *,
        reuse: bool,
    ) -> dict[str, Any]:
        """Merge matched params under *params* when the match is for *route_name*.

        Returns *params* verbatim when there is no result, the result is a
        failure, it matched a different route, or reuse is disabled.
        """
        if not reuse or result is None or result.is_failure:
            return dict(params)
        if result.matched_route_name != route_name:
            return dict(params)
        return {**result.matched_params, **params}
