"""ASGI handler — translates one ASGI HTTP exchange into a routed request.

The only component that touches raw ASGI request messages. Reads the
body, builds the session, resolves the caller's permit, runs the router
on a worker thread and sends the response back through ASGI send().
"""

import logging

import anyio.to_thread

from turnstile._asgi import Receive, Scope, Send
from turnstile.auth import Authorizer
from turnstile.config import AppConfig
from turnstile.errors import ResponseError
from turnstile.http.request import HTTPSession, Request
from turnstile.http.response import Response, internal_error, payload_too_large
from turnstile.routing.router import Router
from turnstile.server.sender import send_response

logger = logging.getLogger("turnstile.server")


class _BodyTooLarge(Exception):
    pass


class _ClientDisconnected(Exception):
    pass


async def read_body(receive: Receive, limit: int) -> bytes:
    """Drain the ASGI request body, failing once it exceeds *limit* bytes.

    Raises ``_ClientDisconnected`` if the client goes away before the
    last body chunk arrives.
    """
    chunks: list[bytes] = []
    size = 0
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            raise _ClientDisconnected
        body = message.get("body", b"")
        if body:
            size += len(body)
            if size > limit:
                raise _BodyTooLarge
            chunks.append(body)
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


def serve(session: HTTPSession, router: Router, authorizer: Authorizer) -> Response:
    """Resolve the permit and route one request. Runs on a worker thread.

    Failures in the authorizer get the same treatment the router gives
    handler failures: a ``ResponseError`` is sent as-is, anything else
    becomes a logged 500.
    """
    try:
        permit = authorizer.verify(session.headers.get("authorization", ""))
    except ResponseError as exc:
        logger.debug("%d %s %s (authorizer)", exc.response.status, session.method, session.uri)
        return exc.response
    except Exception as exc:
        logger.exception("500 %s %s (authorizer)", session.method, session.uri)
        return internal_error(exc)

    return router.handle(Request(session, permit))


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    authorizer: Authorizer,
    config: AppConfig,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    try:
        body = await read_body(receive, config.max_content_length)
    except _ClientDisconnected:
        logger.debug("Client disconnected during %s %s upload", scope["method"], scope["path"])
        return
    except _BodyTooLarge:
        logger.debug("413 %s %s", scope["method"], scope["path"])
        response = payload_too_large(config.max_content_length)
    else:
        session = HTTPSession.from_asgi(scope, body)
        response = await anyio.to_thread.run_sync(serve, session, router, authorizer)

    await send_response(response, send, chunk_size=config.stream_chunk_size)
