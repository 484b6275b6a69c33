"""JSON request bodies."""

import json
import logging
import re

from perch.errors import MalformedRequestBody
from perch.http.request import Request

logger = logging.getLogger("perch.body_params")

_JSON_MIME_RE = re.compile(r"[/+]json$")


class JsonStrategy:
    """Parse ``application/json`` and structured-syntax ``+json`` bodies.

    The raw body text is kept in the ``raw_body`` attribute. An empty
    body parses to ``None``; anything else must be valid JSON.
    """

    __slots__ = ()

    def match(self, content_type: str) -> bool:
        mime = content_type.split(";", 1)[0].strip()
        return _JSON_MIME_RE.search(mime) is not None

    async def parse(self, request: Request) -> Request:
        raw = await request.body()
        request = request.with_attribute("raw_body", raw.decode("utf-8", errors="replace"))
        if not raw:
            return request.with_parsed_body(None)

        try:
            parsed = json.loads(raw)
        except ValueError as exc:  # JSONDecodeError or UnicodeDecodeError
            logger.debug("Rejected JSON body for %s %s: %s", request.method, request.path, exc)
            raise MalformedRequestBody(f"Error when parsing JSON request body: {exc}") from exc
        return request.with_parsed_body(parsed)
