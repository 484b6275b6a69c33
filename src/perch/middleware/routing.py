"""Routing middleware: attach the RouteResult and notify the URL helper.

``RouteMiddleware`` performs the match and stores the outcome on the
request; ``UrlHelperMiddleware`` hands that outcome to a ``UrlHelper``
so URLs generated while handling the request can reuse its params.
Place ``RouteMiddleware`` outside ``UrlHelperMiddleware``.
"""

import logging

from perch.helpers.url import UrlHelper
from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.protocol import Next
from perch.routing.result import RouteResult
from perch.routing.router import TrieRouter

logger = logging.getLogger("perch.routing")

ROUTE_RESULT_ATTRIBUTE = "route_result"


class RouteMiddleware:
    """Match each request against a router and record the result.

    The ``RouteResult`` is stored in the ``route_result`` request
    attribute and matched params are merged into ``path_params``.
    Failures are recorded too; deciding on 404/405 is left to the
    dispatch callable.
    """

    __slots__ = ("router",)

    def __init__(self, router: TrieRouter) -> None:
        self.router = router

    async def __call__(self, request: Request, next: Next) -> Response:
        result = self.router.match(request.method, request.path)
        request = request.with_attribute(ROUTE_RESULT_ATTRIBUTE, result)
        if result.is_success:
            request = request.with_path_params(result.matched_params)
        return await next(request)


class UrlHelperMiddleware:
    """Notify a ``UrlHelper`` of the request's routing outcome.

    Requests without a ``route_result`` attribute (no routing ran) pass
    through and leave the helper untouched.
    """

    __slots__ = ("helper",)

    def __init__(self, helper: UrlHelper) -> None:
        self.helper = helper

    async def __call__(self, request: Request, next: Next) -> Response:
        result = request.get_attribute(ROUTE_RESULT_ATTRIBUTE)
        if isinstance(result, RouteResult):
            self.helper.set_route_result(result)
        else:
            logger.debug(
                "No route result on %s %s; URL helper not updated", request.method, request.path
            )
        return await next(request)
