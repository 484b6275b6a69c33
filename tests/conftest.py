"""Shared helpers for building ASGI scopes and requests."""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any

from perch.http.request import Request


def make_receive(*bodies: bytes) -> Callable[[], Awaitable[MutableMapping[str, Any]]]:
    """Create an ASGI receive callable that yields *bodies* in order."""
    messages = [
        {"type": "http.request", "body": body, "more_body": i < len(bodies) - 1}
        for i, body in enumerate(bodies)
    ]
    if not messages:
        messages.append({"type": "http.request", "body": b"", "more_body": False})
    it = iter(messages)

    async def receive() -> MutableMapping[str, Any]:
        return next(it)

    return receive


def make_request(
    method: str = "POST",
    path: str = "/",
    *,
    body: bytes = b"",
    content_type: str | None = None,
) -> Request:
    """Build a Request from a minimal ASGI scope."""
    headers = []
    if content_type is not None:
        headers.append((b"content-type", content_type.encode("latin-1")))
    scope = {"type": "http", "method": method, "path": path, "headers": headers}
    return Request.from_asgi(scope, make_receive(body))
