"""Path parameter converters.

Built-in converters for route path segments like ``{id:int}``, used both
when matching incoming paths and when formatting values into a URI.
"""

import re
from urllib.parse import quote

# (regex_pattern, python_type) for each supported converter
CONVERTERS: dict[str, tuple[str, type]] = {
    "str": (r"[^/]+", str),
    "int": (r"\d+", int),
    "float": (r"\d+(?:\.\d+)?", float),
    "path": (r".+", str),
}


def format_param(value: object, param_type: str) -> str:
    """Render *value* as a URI path segment for *param_type*.

    The value must satisfy the converter's pattern; ``ValueError`` is
    raised otherwise. ``path`` values keep their slashes, everything
    else is fully percent-encoded.
    """
    text = str(value)
    pattern, _ = CONVERTERS[param_type]
    if not re.fullmatch(pattern, text):
        msg = f"{text!r} does not match the {param_type!r} converter"
        raise ValueError(msg)
    if param_type == "path":
        return quote(text, safe="/")
    return quote(text, safe="")
