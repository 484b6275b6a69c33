"""Routing — route results, the Router protocol, and a reference trie router.

The URL helper only depends on ``RouteResult`` and ``Router``;
``TrieRouter`` is one concrete collaborator that can both match
requests and generate URIs for named routes.
"""

from perch.routing.result import RouteResult
from perch.routing.route import PathSegment, Route
from perch.routing.router import Router, TrieRouter, parse_path

__all__ = ["PathSegment", "Route", "RouteResult", "Router", "TrieRouter", "parse_path"]
