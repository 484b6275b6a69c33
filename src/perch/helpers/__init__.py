"""Helpers layered on top of routing and HTTP messages."""

from perch.helpers.url import UrlHelper

__all__ = ["UrlHelper"]
