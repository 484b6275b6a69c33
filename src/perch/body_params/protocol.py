"""Strategy protocol for body parsing.

A strategy is any object with this shape::

    class YamlStrategy:
        def match(self, content_type: str) -> bool: ...
        async def parse(self, request: Request) -> Request: ...

No base class required.
"""

from typing import Protocol

from perch.http.request import Request


class Strategy(Protocol):
    """Protocol for body-parsing strategies."""

    def match(self, content_type: str) -> bool:
        """Return True if this strategy parses bodies of *content_type*."""
        ...

    async def parse(self, request: Request) -> Request:
        """Return *request*, or a copy with its parsed body populated."""
        ...
