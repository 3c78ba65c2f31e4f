"""Shared helpers for building sessions and requests without a server."""

import pytest

from turnstile.auth import Permit
from turnstile.http.headers import Headers
from turnstile.http.request import HTTPSession, Request


def _make_request(
    method: str = "GET",
    path: str = "/",
    *,
    params: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
    permissions: frozenset = frozenset(),
    username: str = "tester",
) -> Request:
    session = HTTPSession(
        method=method,
        uri=path,
        headers=Headers.from_dict(headers or {}),
        params=dict(params or {}),
    )
    return Request(session, Permit(username, permissions))


@pytest.fixture
def make_request():
    return _make_request
