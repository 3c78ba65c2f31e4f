"""Tests for turnstile.http.headers — case-insensitive lookup over ASGI pairs."""

import pytest

from turnstile.auth import Permission, Permit, StaticAuthorizer
from turnstile.http.headers import Headers
from turnstile.http.request import HTTPSession, Request


def _scope(*pairs: tuple[bytes, bytes]) -> dict:
    return {
        "type": "http",
        "method": "GET",
        "path": "/",
        "query_string": b"",
        "headers": list(pairs),
    }


class TestHeaders:
    def test_lookup_ignores_case(self) -> None:
        h = Headers(((b"Authorization", b"Bearer t"),))
        assert h["authorization"] == "Bearer t"
        assert h["AUTHORIZATION"] == "Bearer t"
        assert "Authorization" in h

    def test_missing(self) -> None:
        h = Headers()
        with pytest.raises(KeyError):
            h["authorization"]
        assert h.get("authorization", "") == ""
        assert 42 not in h  # type: ignore[operator]

    def test_first_occurrence_wins(self) -> None:
        h = Headers(((b"x-index", b"pages"), (b"X-Index", b"news")))
        assert h["x-index"] == "pages"
        assert len(h) == 1
        assert list(h) == ["x-index"]

    def test_from_dict(self) -> None:
        h = Headers.from_dict({"Authorization": "Bearer t", "Accept": "*/*"})
        assert dict(h) == {"authorization": "Bearer t", "accept": "*/*"}

    def test_read_only(self) -> None:
        h = Headers()
        with pytest.raises(TypeError):
            h["accept"] = "*/*"  # type: ignore[index]


class TestRequestHeaders:
    def test_header_from_raw_asgi_pairs(self) -> None:
        session = HTTPSession.from_asgi(_scope((b"x-request-id", b"abc")))
        request = Request(session, Permit.anonymous())
        assert request.header("X-Request-Id") == "abc"
        assert request.header("x-request-id") == "abc"
        assert request.header("x-missing") is None

    def test_authorization_reaches_authorizer(self) -> None:
        session = HTTPSession.from_asgi(_scope((b"Authorization", b"Bearer editor")))
        authorizer = StaticAuthorizer(
            {"editor": Permit("editor", frozenset({Permission.INDEX_EDIT}))}
        )
        permit = authorizer.verify(session.headers.get("authorization", ""))
        assert permit.username == "editor"
        assert permit.allows(Permission.INDEX_EDIT)
