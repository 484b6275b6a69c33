"""Body-params middleware: parse request bodies before the handler runs."""

import logging
from collections.abc import Iterable

from perch.body_params.form_strategy import FormUrlEncodedStrategy
from perch.body_params.json_strategy import JsonStrategy
from perch.body_params.multipart_strategy import MultipartStrategy
from perch.body_params.protocol import Strategy
from perch.config import HelperConfig
from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.protocol import Next

logger = logging.getLogger("perch.body_params")


class BodyParamsMiddleware:
    """Populate ``request.parsed_body`` using the first matching strategy.

    Handles:
    - JSON (``application/json``, ``application/*+json``)
    - URL-encoded forms
    - Multipart forms, when ``HelperConfig.multipart`` is on

    Requests whose method carries no body (``GET``, ``HEAD``,
    ``OPTIONS`` by default), requests without a Content-Type, and
    content types no strategy claims pass through unchanged.

    Usage::

        mw = BodyParamsMiddleware()
        mw.add_strategy(YamlStrategy())
    """

    __slots__ = ("_strategies", "config")

    def __init__(
        self,
        strategies: Iterable[Strategy] | None = None,
        config: HelperConfig | None = None,
    ) -> None:
        self.config = config or HelperConfig()
        if strategies is None:
            strategies = [JsonStrategy(), FormUrlEncodedStrategy()]
            if self.config.multipart:
                strategies.append(MultipartStrategy())
        self._strategies: list[Strategy] = list(strategies)

    @property
    def strategies(self) -> tuple[Strategy, ...]:
        return tuple(self._strategies)

    def add_strategy(self, strategy: Strategy) -> None:
        """Append *strategy*; earlier strategies take precedence."""
        self._strategies.append(strategy)

    def clear_strategies(self) -> None:
        """Remove every registered strategy, built-ins included."""
        self._strategies.clear()

    def _select(self, content_type: str) -> Strategy | None:
        for strategy in self._strategies:
            if strategy.match(content_type):
                return strategy
        return None

    async def __call__(self, request: Request, next: Next) -> Response:
        if request.method.upper() in self.config.body_methods_skipped:
            return await next(request)

        content_type = request.content_type
        if not content_type:
            return await next(request)

        strategy = self._select(content_type)
        if strategy is None:
            logger.debug(
                "No body strategy for %r on %s %s", content_type, request.method, request.path
            )
            return await next(request)

        return await next(await strategy.parse(request))
