"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware:
    BodyParamsMiddleware -- Parse request bodies by content type
    RouteMiddleware -- Match the request and attach its RouteResult
    UrlHelperMiddleware -- Feed each request's RouteResult to a UrlHelper
"""

from perch.middleware.body_params import BodyParamsMiddleware
from perch.middleware.protocol import Middleware, Next
from perch.middleware.routing import ROUTE_RESULT_ATTRIBUTE, RouteMiddleware, UrlHelperMiddleware

__all__ = [
    "ROUTE_RESULT_ATTRIBUTE",
    "BodyParamsMiddleware",
    "Middleware",
    "Next",
    "RouteMiddleware",
    "UrlHelperMiddleware",
]
