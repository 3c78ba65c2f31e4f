"""Request facade over a raw HTTP session.

The raw session (anything satisfying ``Session``) carries what the
connection server parsed off the wire. ``Request`` adds the caller's
``Permit`` and the fail-fast parameter accessors handlers use.
"""

from __future__ import annotations

import io
from collections.abc import Hashable, Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Protocol, runtime_checkable
from urllib.parse import parse_qsl

from turnstile.auth import Permit
from turnstile.errors import ResponseError
from turnstile.http.headers import Headers
from turnstile.http.response import bad_request


@runtime_checkable
class Session(Protocol):
    """What the connection server hands over for one request.

    ``params`` must be mutable: path parameters are written into it
    during route matching.
    """

    @property
    def method(self) -> str: ...

    @property
    def uri(self) -> str: ...

    @property
    def params(self) -> MutableMapping[str, str]: ...

    @property
    def headers(self) -> Mapping[str, str]: ...

    @property
    def body(self) -> BinaryIO: ...


def parse_query(query_string: bytes) -> dict[str, str]:
    """Parse a query string into a flat dict.

    Blank values are kept. For repeated keys the first value wins.
    """
    params: dict[str, str] = {}
    for key, value in parse_qsl(query_string.decode("latin-1"), keep_blank_values=True):
        params.setdefault(key, value)
    return params


@dataclass(frozen=True, slots=True)
class HTTPSession:
    """Concrete ``Session`` built from an ASGI scope and its full body.

    The dataclass is frozen; ``params`` is a plain dict whose contents
    stay mutable.
    """

    method: str
    uri: str
    headers: Headers = field(default_factory=Headers)
    params: dict[str, str] = field(default_factory=dict)
    body: BinaryIO = field(default_factory=io.BytesIO)

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any], body: bytes = b"") -> HTTPSession:
        """Create a session from an ASGI HTTP scope and the request body."""
        return cls(
            method=scope["method"].upper(),
            uri=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            params=parse_query(scope.get("query_string", b"")),
            body=io.BytesIO(body),
        )


class Request:
    """One incoming HTTP call, as seen by routes and handlers.

    Combines the raw session with the caller's ``Permit``. Created fresh
    per call and never shared between requests.
    """

    __slots__ = ("_permit", "_session")

    def __init__(self, session: Session, permit: Permit) -> None:
        self._session = session
        self._permit = permit

    def __repr__(self) -> str:
        return f"<Request {self.method} {self.path!r} user={self.username!r}>"

    @property
    def method(self) -> str:
        return self._session.method

    @property
    def path(self) -> str:
        """Decoded request path, without the query string."""
        return self._session.uri

    @property
    def params(self) -> MutableMapping[str, str]:
        """Query parameters, overlaid with path parameters once routed."""
        return self._session.params

    def param(self, name: str, default: str | None = None) -> str | None:
        return self._session.params.get(name, default)

    def mandatory_param(self, name: str) -> str:
        """Return parameter *name*, or abort the request with a 400."""
        value = self._session.params.get(name)
        if value is None:
            raise ResponseError(bad_request(f"missing mandatory parameter: {name}"))
        return value

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup; ``None`` when absent."""
        headers = self._session.headers
        value = headers.get(name)
        if value is None and not isinstance(headers, Headers):
            value = headers.get(name.lower())
        return value

    @property
    def body(self) -> BinaryIO:
        """Readable request body stream."""
        return self._session.body

    @property
    def permit(self) -> Permit:
        return self._permit

    @property
    def username(self) -> str:
        return self._permit.username

    def has_permission(self, permission: Hashable) -> bool:
        return self._permit.allows(permission)
