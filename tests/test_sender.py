"""Tests for turnstile.server.sender response emission rules."""

import io

import pytest

from turnstile.http.response import Response, json_response
from turnstile.server.sender import send_response


class _Recorder:
    def __init__(self) -> None:
        self.messages: list[dict] = []

    async def __call__(self, message: dict) -> None:
        self.messages.append(message)

    @property
    def headers(self) -> dict[bytes, bytes]:
        return dict(self.messages[0]["headers"])


class _Stream(io.BytesIO):
    def read(self, size: int | None = -1) -> bytes:
        if size == 3 and self.tell() == 3:
            raise OSError("disk went away")
        return super().read(size)


class TestSendResponseNoBodyStatuses:
    @pytest.mark.asyncio
    async def test_204_drops_body_and_sets_zero_content_length(self) -> None:
        send = _Recorder()

        # Even if a handler accidentally attaches body content, sender must
        # enforce RFC no-body semantics for 204.
        await send_response(Response("unexpected-body").with_status(204), send)

        assert send.messages[0]["type"] == "http.response.start"
        assert send.headers[b"content-length"] == b"0"
        assert send.messages[1]["type"] == "http.response.body"
        assert send.messages[1]["body"] == b""

    @pytest.mark.asyncio
    async def test_304_closes_stream_body(self) -> None:
        send = _Recorder()
        stream = io.BytesIO(b"unused")

        await send_response(Response(body=stream, status=304), send)

        assert stream.closed
        assert send.headers[b"content-length"] == b"0"
        assert send.messages[1]["body"] == b""

    @pytest.mark.asyncio
    async def test_200_preserves_body(self) -> None:
        send = _Recorder()

        await send_response(Response("ok"), send)

        assert send.headers[b"content-length"] == b"2"
        assert send.messages[1]["body"] == b"ok"


class TestSendResponseHeaders:
    @pytest.mark.asyncio
    async def test_content_type_and_extra_headers(self) -> None:
        send = _Recorder()

        await send_response(json_response({"a": 1}), send)

        assert send.messages[0]["status"] == 200
        assert send.headers[b"content-type"] == b"application/json"
        assert send.headers[b"access-control-allow-origin"] == b"*"


class TestSendStreamingResponse:
    @pytest.mark.asyncio
    async def test_chunks_and_closes(self) -> None:
        send = _Recorder()
        stream = io.BytesIO(b"abcdefgh")

        await send_response(Response(body=stream, content_type="text/css"), send, chunk_size=3)

        assert b"content-length" not in send.headers
        assert send.headers[b"content-type"] == b"text/css"
        bodies = [m["body"] for m in send.messages[1:]]
        assert bodies == [b"abc", b"def", b"gh", b""]
        assert [m["more_body"] for m in send.messages[1:]] == [True, True, True, False]
        assert stream.closed

    @pytest.mark.asyncio
    async def test_read_error_ends_body(self, caplog) -> None:
        send = _Recorder()
        stream = _Stream(b"abcdefgh")

        await send_response(Response(body=stream), send, chunk_size=3)

        assert [m["body"] for m in send.messages[1:]] == [b"abc", b""]
        assert send.messages[-1]["more_body"] is False
        assert stream.closed
        assert "Error while streaming" in caplog.text
