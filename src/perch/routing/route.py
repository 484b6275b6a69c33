"""Route and PathSegment frozen dataclasses."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/users``  (is_param=False)
    Param:   ``/{id}``   (is_param=True, param_name="id")
    Typed:   ``/{id:int}`` (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class Route:
    """A named route definition.

    The router only needs a path, the allowed methods, and a name for
    URI generation; handlers are the host application's business.
    """

    path: str
    methods: frozenset[str] = frozenset({"GET"})
    name: str | None = None
