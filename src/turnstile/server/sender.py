"""ASGI response sending — translates turnstile Responses to ASGI messages.

In-memory bodies go out in a single message with a content-length.
Stream bodies are copied in chunks, read off the event loop, and closed.
"""

import logging

import anyio.to_thread

from turnstile._asgi import Send
from turnstile.http.response import Response

logger = logging.getLogger("turnstile.server")


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _raw_headers(response: Response) -> list[tuple[bytes, bytes]]:
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    for name, value in response.headers:
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))
    return raw_headers


async def send_response(response: Response, send: Send, *, chunk_size: int = 64 * 1024) -> None:
    """Translate a turnstile Response into ASGI send() calls."""
    if response.is_streaming:
        if _body_allowed(response.status):
            await send_streaming_response(response, send, chunk_size=chunk_size)
            return
        response.body.close()  # type: ignore[union-attr]

    raw_headers = _raw_headers(response)
    body = response.body_bytes if _body_allowed(response.status) else b""
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )


async def send_streaming_response(
    response: Response,
    send: Send,
    *,
    chunk_size: int = 64 * 1024,
) -> None:
    """Send a stream body as a sequence of ``more_body`` messages.

    No content-length is set; the server frames the body. The stream is
    closed when done, even if reading it fails halfway.
    """
    stream = response.body
    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": _raw_headers(response),
        }
    )

    try:
        while True:
            chunk = await anyio.to_thread.run_sync(stream.read, chunk_size)  # type: ignore[union-attr]
            if not chunk:
                break
            await send(
                {
                    "type": "http.response.body",
                    "body": chunk,
                    "more_body": True,
                }
            )
    except Exception:
        # Headers are already out; all that is left is to end the body early
        logger.exception("Error while streaming %d response body", response.status)
    finally:
        stream.close()  # type: ignore[union-attr]

    await send(
        {
            "type": "http.response.body",
            "body": b"",
            "more_body": False,
        }
    )
