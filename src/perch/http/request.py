"""Immutable HTTP request.

Frozen metadata with async body access. Middleware never mutates a
request; it derives a new one with ``with_parsed_body()``,
``with_attribute()`` or ``with_path_params()`` and hands that to ``next``.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable, Mapping, MutableMapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, TypeAlias

from perch.http.headers import Headers

Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]


async def _empty_receive() -> MutableMapping[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Body is accessed asynchronously via ``.body()`` / ``.text()``; the
    body cache is shared by every copy derived from the same request,
    so the ASGI receive channel is consumed once.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    path_params: Mapping[str, str] = field(default_factory=dict)
    parsed_body: Any = None
    attributes: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    # Private: ASGI receive callable for body streaming
    _receive: Receive = _empty_receive

    # Private: mutable cache for the raw body
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    def get_attribute(self, name: str, default: Any = None) -> Any:
        """Return a request attribute, or *default* if unset."""
        return self.attributes.get(name, default)

    # -- Derived copies --

    def with_parsed_body(self, parsed_body: Any) -> Request:
        """Return a copy carrying *parsed_body*."""
        return replace(self, parsed_body=parsed_body)

    def with_attribute(self, name: str, value: Any) -> Request:
        """Return a copy with attribute *name* set to *value*."""
        return replace(self, attributes=MappingProxyType({**self.attributes, name: value}))

    def with_path_params(self, params: Mapping[str, str]) -> Request:
        """Return a copy whose path params are merged with *params*."""
        return replace(self, path_params={**self.path_params, **params})

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body (cached after the first read)."""
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any], receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            _receive=receive,
        )
