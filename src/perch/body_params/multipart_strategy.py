"""Multipart form bodies via ``python-multipart``.

``python-multipart`` is an optional dependency (``pip install perch[forms]``);
the strategy can be registered without it and only fails when a
multipart body actually arrives.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from perch.errors import ConfigurationError, MalformedRequestBody
from perch.http.request import Request

logger = logging.getLogger("perch.body_params")


@dataclass(frozen=True, slots=True)
class UploadFile:
    """An uploaded file from a multipart form submission.

    The content is held in memory as bytes, which suits typical web
    uploads. Read ``request.stream()`` directly for large files.
    """

    filename: str
    content_type: str
    size: int
    _content: bytes

    async def read(self) -> bytes:
        """Return the file content as bytes."""
        return self._content

    async def save(self, path: Path) -> None:
        """Write the file content to *path*. Parent directories must exist."""
        path.write_bytes(self._content)

    def __repr__(self) -> str:
        return f"UploadFile({self.filename!r}, {self.content_type!r}, {self.size} bytes)"


class MultipartStrategy:
    """Parse ``multipart/form-data`` bodies.

    Text fields become the parsed body (flattened like URL-encoded
    forms); files are exposed through the ``uploads`` attribute as a
    ``dict[str, UploadFile]``. When a file field repeats, the last upload
    wins.
    """

    __slots__ = ()

    def match(self, content_type: str) -> bool:
        return content_type.split(";", 1)[0].strip() == "multipart/form-data"

    async def parse(self, request: Request) -> Request:
        raw = await request.body()
        if not raw:
            return request
        fields, files = _parse_multipart(raw, request.content_type or "")
        flat = {key: values[0] if len(values) == 1 else values for key, values in fields.items()}
        return request.with_parsed_body(flat).with_attribute("uploads", files)


def _parse_multipart(
    body: bytes, content_type: str
) -> tuple[dict[str, list[str]], dict[str, UploadFile]]:
    """Split a multipart body into text fields and uploaded files.

    Raises ``ConfigurationError`` if ``python-multipart`` is not installed
    and ``MalformedRequestBody`` when the boundary is missing or the body
    does not parse.
    """
    try:
        from python_multipart.exceptions import MultipartParseError
        from python_multipart.multipart import MultipartParser, parse_options_header
    except ImportError:
        msg = (
            "Multipart body parsing requires the 'python-multipart' package. "
            "Install it with: pip install perch[forms]"
        )
        raise ConfigurationError(msg) from None

    _, options = parse_options_header(content_type)
    boundary = options.get(b"boundary")
    if not boundary:
        raise MalformedRequestBody("Multipart request body is missing its boundary parameter")

    fields: dict[str, list[str]] = {}
    files: dict[str, UploadFile] = {}

    # Current part state
    headers: dict[str, str] = {}
    header_field = bytearray()
    header_value = bytearray()
    data = bytearray()

    def on_part_begin() -> None:
        headers.clear()
        data.clear()

    def on_header_field(chunk: bytes, start: int, end: int) -> None:
        header_field.extend(chunk[start:end])

    def on_header_value(chunk: bytes, start: int, end: int) -> None:
        header_value.extend(chunk[start:end])

    def on_header_end() -> None:
        headers[header_field.decode("latin-1").lower()] = header_value.decode("latin-1")
        header_field.clear()
        header_value.clear()

    def on_part_data(chunk: bytes, start: int, end: int) -> None:
        data.extend(chunk[start:end])

    def on_part_end() -> None:
        _, params = parse_options_header(headers.get("content-disposition", ""))
        name = params.get(b"name")
        if name is None:
            return
        field_name = name.decode("utf-8")
        filename = params.get(b"filename")
        if filename is None:
            fields.setdefault(field_name, []).append(data.decode("utf-8", errors="replace"))
            return
        content = bytes(data)
        files[field_name] = UploadFile(
            filename=filename.decode("utf-8"),
            content_type=headers.get("content-type", "application/octet-stream"),
            size=len(content),
            _content=content,
        )

    callbacks: dict[str, Any] = {
        "on_part_begin": on_part_begin,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
        "on_header_end": on_header_end,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
    }

    parser = MultipartParser(boundary, callbacks)
    try:
        parser.write(body)
        parser.finalize()
    except MultipartParseError as exc:
        logger.debug("Rejected multipart body: %s", exc)
        raise MalformedRequestBody(f"Error when parsing multipart request body: {exc}") from exc
    return fields, files
