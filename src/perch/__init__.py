"""Perch — URL generation and body-parsing helpers for async web apps.

Generate URLs that reuse the current route's params, and parse request
bodies by content type.

Basic usage::

    from perch import Route, TrieRouter, UrlHelper

    router = TrieRouter()
    router.add(Route("/users/{id}", name="user"))
    router.compile()

    helper = UrlHelper(router)
    helper.set_route_result(router.match("GET", "/users/42"))
    helper(query_params={"tab": "posts"})  # "/users/42?tab=posts"

Multipart bodies (``pip install perch[forms]``)::

    from perch import BodyParamsMiddleware
    mw = BodyParamsMiddleware()  # JSON, URL-encoded and multipart
"""

import importlib

__version__ = "0.1.0"
__all__ = [
    "BodyParamsMiddleware",
    "ConfigurationError",
    "FormUrlEncodedStrategy",
    "HTTPError",
    "HelperConfig",
    "InvalidArgumentError",
    "JsonStrategy",
    "MalformedRequestBody",
    "Middleware",
    "MissingRouteResultError",
    "MultipartStrategy",
    "Next",
    "PerchError",
    "Request",
    "Response",
    "Route",
    "RouteMiddleware",
    "RouteResult",
    "Router",
    "RouterError",
    "RoutingFailedError",
    "TrieRouter",
    "UrlHelper",
    "UrlHelperMiddleware",
    "build_pipeline",
]

# Public name -> module that defines it
_LAZY_IMPORTS: dict[str, str] = {
    "BodyParamsMiddleware": "perch.middleware.body_params",
    "ConfigurationError": "perch.errors",
    "FormUrlEncodedStrategy": "perch.body_params.form_strategy",
    "HTTPError": "perch.errors",
    "HelperConfig": "perch.config",
    "InvalidArgumentError": "perch.errors",
    "JsonStrategy": "perch.body_params.json_strategy",
    "MalformedRequestBody": "perch.errors",
    "Middleware": "perch.middleware.protocol",
    "MissingRouteResultError": "perch.errors",
    "MultipartStrategy": "perch.body_params.multipart_strategy",
    "Next": "perch.middleware.protocol",
    "PerchError": "perch.errors",
    "Request": "perch.http.request",
    "Response": "perch.http.response",
    "Route": "perch.routing.route",
    "RouteMiddleware": "perch.middleware.routing",
    "RouteResult": "perch.routing.result",
    "Router": "perch.routing.router",
    "RouterError": "perch.errors",
    "RoutingFailedError": "perch.errors",
    "TrieRouter": "perch.routing.router",
    "UrlHelper": "perch.helpers.url",
    "UrlHelperMiddleware": "perch.middleware.routing",
    "build_pipeline": "perch.pipeline",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    module = _LAZY_IMPORTS.get(name)
    if module is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    return getattr(importlib.import_module(module), name)
