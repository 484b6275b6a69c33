"""Tests for perch.body_params — JSON, URL-encoded and multipart strategies."""

import pytest
from conftest import make_request

from perch.body_params import FormUrlEncodedStrategy, JsonStrategy, MultipartStrategy, UploadFile
from perch.errors import MalformedRequestBody

# ---------------------------------------------------------------------------
# JsonStrategy
# ---------------------------------------------------------------------------


class TestJsonStrategyMatch:
    @pytest.mark.parametrize(
        "content_type",
        [
            "application/json",
            "application/hal+json",
            "application/vnd.resource.v2+json",
            "application/json;charset=utf-8",
            "application/hal+json;charset=utf-8",
            "application/vnd.resource.v2+json; charset=utf-8",
        ],
    )
    def test_matches_json_types(self, content_type: str) -> None:
        assert JsonStrategy().match(content_type) is True

    @pytest.mark.parametrize(
        "content_type",
        [
            "application/json+xml",
            "text/javascript",
            "form/multipart",
            "application/x-www-form-urlencoded",
        ],
    )
    def test_rejects_other_types(self, content_type: str) -> None:
        assert JsonStrategy().match(content_type) is False


class TestJsonStrategyParse:
    async def test_parses_body(self) -> None:
        req = make_request(body=b'{"foo":"bar"}', content_type="application/json")
        parsed = await JsonStrategy().parse(req)

        assert parsed.parsed_body == {"foo": "bar"}
        assert parsed.get_attribute("raw_body") == '{"foo":"bar"}'

    async def test_non_object_json(self) -> None:
        req = make_request(body=b"[1, 2, 3]", content_type="application/json")
        assert (await JsonStrategy().parse(req)).parsed_body == [1, 2, 3]

    async def test_empty_body_yields_none(self) -> None:
        req = make_request(body=b"", content_type="application/json")
        parsed = await JsonStrategy().parse(req)

        assert parsed.parsed_body is None
        assert parsed.get_attribute("raw_body") == ""

    async def test_malformed_body(self) -> None:
        req = make_request(body=b"{foobar}", content_type="application/json")
        with pytest.raises(MalformedRequestBody) as exc_info:
            await JsonStrategy().parse(req)

        assert exc_info.value.status == 400
        assert exc_info.value.detail.startswith("Error when parsing JSON request body: ")

    async def test_invalid_utf8_is_malformed(self) -> None:
        req = make_request(body=b"\xff\xfe", content_type="application/json")
        with pytest.raises(MalformedRequestBody):
            await JsonStrategy().parse(req)


# ---------------------------------------------------------------------------
# FormUrlEncodedStrategy
# ---------------------------------------------------------------------------


class TestFormStrategyMatch:
    @pytest.mark.parametrize(
        "content_type",
        [
            "application/x-www-form-urlencoded",
            "application/x-www-form-urlencoded; charset=utf-8",
            "application/x-www-form-urlencoded;charset=utf-8",
            'application/x-www-form-urlencoded;Charset="utf-8"',
        ],
    )
    def test_matches_form_types(self, content_type: str) -> None:
        assert FormUrlEncodedStrategy().match(content_type) is True

    @pytest.mark.parametrize(
        "content_type",
        [
            "application/x-www-form-urlencoded2",
            "application/x-www-form-urlencoded-too",
            "form/multipart",
            "application/json",
        ],
    )
    def test_rejects_other_types(self, content_type: str) -> None:
        assert FormUrlEncodedStrategy().match(content_type) is False


class TestFormStrategyParse:
    async def test_parses_body(self) -> None:
        req = make_request(
            body=b"foo=bar&bar=foo", content_type="application/x-www-form-urlencoded"
        )
        parsed = await FormUrlEncodedStrategy().parse(req)
        assert parsed.parsed_body == {"foo": "bar", "bar": "foo"}

    async def test_repeated_keys_and_blanks(self) -> None:
        req = make_request(body=b"tag=a&tag=b&note=&q=x+y%21")
        parsed = await FormUrlEncodedStrategy().parse(req)
        assert parsed.parsed_body == {"tag": ["a", "b"], "note": "", "q": "x y!"}

    async def test_already_parsed_returned_as_is(self) -> None:
        req = make_request(body=b"foo=bar").with_parsed_body({"test": "value"})
        assert await FormUrlEncodedStrategy().parse(req) is req

    async def test_empty_body_returned_as_is(self) -> None:
        req = make_request(body=b"")
        assert await FormUrlEncodedStrategy().parse(req) is req

    async def test_invalid_utf8_is_malformed(self) -> None:
        req = make_request(
            body=b"name=\xe9t\xe9", content_type="application/x-www-form-urlencoded"
        )
        with pytest.raises(MalformedRequestBody, match="URL-encoded") as exc_info:
            await FormUrlEncodedStrategy().parse(req)
        assert exc_info.value.status == 400


# ---------------------------------------------------------------------------
# MultipartStrategy
# ---------------------------------------------------------------------------

BOUNDARY = "----perchboundary"


def _multipart_body() -> bytes:
    return (
        f"--{BOUNDARY}\r\n"
        'Content-Disposition: form-data; name="title"\r\n'
        "\r\n"
        "Hello\r\n"
        f"--{BOUNDARY}\r\n"
        'Content-Disposition: form-data; name="tag"\r\n'
        "\r\n"
        "a\r\n"
        f"--{BOUNDARY}\r\n"
        'Content-Disposition: form-data; name="tag"\r\n'
        "\r\n"
        "b\r\n"
        f"--{BOUNDARY}\r\n"
        'Content-Disposition: form-data; name="avatar"; filename="me.txt"\r\n'
        "Content-Type: text/plain\r\n"
        "\r\n"
        "file content\r\n"
        f"--{BOUNDARY}--\r\n"
    ).encode()


class TestMultipartStrategy:
    @pytest.mark.parametrize(
        ("content_type", "expected"),
        [
            (f"multipart/form-data; boundary={BOUNDARY}", True),
            ("Multipart/Form-Data", False),
            ("multipart/mixed", False),
            ("application/json", False),
        ],
    )
    def test_match(self, content_type: str, expected: bool) -> None:
        assert MultipartStrategy().match(content_type) is expected

    async def test_parses_fields_and_files(self) -> None:
        req = make_request(
            body=_multipart_body(),
            content_type=f"multipart/form-data; boundary={BOUNDARY}",
        )
        parsed = await MultipartStrategy().parse(req)

        assert parsed.parsed_body == {"title": "Hello", "tag": ["a", "b"]}
        uploads = parsed.get_attribute("uploads")
        avatar = uploads["avatar"]
        assert isinstance(avatar, UploadFile)
        assert avatar.filename == "me.txt"
        assert avatar.content_type == "text/plain"
        assert avatar.size == len(b"file content")
        assert await avatar.read() == b"file content"

    async def test_missing_boundary(self) -> None:
        req = make_request(body=_multipart_body(), content_type="multipart/form-data")
        with pytest.raises(MalformedRequestBody, match="boundary"):
            await MultipartStrategy().parse(req)

    async def test_empty_body_returned_as_is(self) -> None:
        req = make_request(content_type=f"multipart/form-data; boundary={BOUNDARY}")
        assert await MultipartStrategy().parse(req) is req

    async def test_repeated_file_field_keeps_last_upload(self) -> None:
        part = (
            f"--{BOUNDARY}\r\n"
            'Content-Disposition: form-data; name="doc"; filename="{name}"\r\n'
            "Content-Type: text/plain\r\n"
            "\r\n"
            "{body}\r\n"
        )
        body = (
            part.format(name="one.txt", body="first")
            + part.format(name="two.txt", body="second")
            + f"--{BOUNDARY}--\r\n"
        ).encode()
        req = make_request(body=body, content_type=f"multipart/form-data; boundary={BOUNDARY}")
        parsed = await MultipartStrategy().parse(req)

        doc = parsed.get_attribute("uploads")["doc"]
        assert doc.filename == "two.txt"
        assert await doc.read() == b"second"
        assert parsed.parsed_body == {}
