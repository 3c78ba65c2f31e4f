"""HTTP response with chainable .with_*() transformation API, plus the
standard response builders every route and handler relies on.

Each transformation returns a new Response. The builders are pure
functions; their status, content type and body are part of the wire
contract.
"""

from __future__ import annotations

import dataclasses
import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, BinaryIO


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    ``body`` is either in-memory (``str`` or ``bytes``) or a readable
    binary stream, which the sender copies out in chunks and closes.
    """

    body: str | bytes | BinaryIO = ""
    status: int = 200
    content_type: str = "text/plain"
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    def header(self, name: str) -> str | None:
        """Return the first extra header named *name* (case-insensitive)."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None

    # -- Body helpers --

    @property
    def is_streaming(self) -> bool:
        """True if the body is a stream rather than in-memory content."""
        return not isinstance(self.body, (str, bytes))

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes. Streams are not consumed and yield ``b""``."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        if isinstance(self.body, bytes):
            return self.body
        return b""

    @property
    def text(self) -> str:
        """Body as string. Streams are not consumed and yield ``""``."""
        return self.body_bytes.decode("utf-8")


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (set, frozenset)):
        return list(value)
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def json_response(data: Any) -> Response:
    """200 with *data* serialised as JSON, readable cross-origin."""
    body = json_module.dumps(data, default=_json_default)
    return Response(body=body, content_type="application/json").with_header(
        "Access-Control-Allow-Origin", "*"
    )


def not_found() -> Response:
    """404 — no route matched."""
    return Response(body="Not found\n", status=404)


def bad_request(message: str) -> Response:
    """400 with *message* as the body, verbatim."""
    return Response(body=message, status=400)


def unauthorized(message: str = "Invalid credentials\n") -> Response:
    """401 — credentials were supplied but rejected."""
    return Response(body=message, status=401)


def forbidden(permission: str) -> Response:
    """403 naming the permission the caller lacks."""
    return Response(
        body=f"Permission '{permission}' is required for this action.\n",
        status=403,
    )


def payload_too_large(limit: int) -> Response:
    """413 — request body exceeds the configured limit."""
    return Response(body=f"Request body exceeds {limit} bytes\n", status=413)


def internal_error(exc: BaseException) -> Response:
    """500 carrying a one-line description of *exc*, never a traceback."""
    return Response(body=f"{type(exc).__name__}: {exc}\n", status=500)
