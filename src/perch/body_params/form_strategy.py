"""URL-encoded form bodies (stdlib ``urllib.parse``, no extra dependency)."""

import re
from typing import Any
from urllib.parse import parse_qs

from perch.errors import MalformedRequestBody
from perch.http.request import Request

_FORM_RE = re.compile(r"^application/x-www-form-urlencoded($|[ ;])")


def parse_urlencoded(body: str) -> dict[str, Any]:
    """Parse a URL-encoded body into a dict.

    Single values are flattened to strings; repeated keys keep all
    their values as a list.
    """
    parsed = parse_qs(body, keep_blank_values=True)
    return {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}


class FormUrlEncodedStrategy:
    """Parse ``application/x-www-form-urlencoded`` bodies.

    A request that already carries a parsed body (a server that decoded
    the form itself) is returned as-is, as is a request with no body.
    """

    __slots__ = ()

    def match(self, content_type: str) -> bool:
        return _FORM_RE.match(content_type) is not None

    async def parse(self, request: Request) -> Request:
        if request.parsed_body:
            return request

        raw = await request.body()
        if not raw:
            return request
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedRequestBody(
                f"Error when parsing URL-encoded request body: {exc}"
            ) from exc
        return request.with_parsed_body(parse_urlencoded(text))
