"""Compose middleware around a dispatch callable.

The host application owns dispatch; perch only provides the chaining::

    handler = build_pipeline(
        [RouteMiddleware(router), UrlHelperMiddleware(helper), BodyParamsMiddleware()],
        dispatch,
    )
    response = await handler(request)
"""

from collections.abc import Sequence
from typing import Any

from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.protocol import Middleware, Next


def build_pipeline(middleware: Sequence[Middleware], dispatch: Next) -> Next:
    """Wrap *middleware* around *dispatch*; the first entry runs outermost."""
    handler = dispatch
    for mw in reversed(middleware):
        outer = handler

        async def make_next(req: Request, _mw: Any = mw, _next: Next = outer) -> Response:
            return await _mw(req, _next)

        handler = make_next
    return handler
