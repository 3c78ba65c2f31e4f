"""Tests for turnstile.errors — exception hierarchy and the short-circuit carrier."""

from turnstile.errors import ConfigurationError, ResponseError, TurnstileError
from turnstile.http.response import bad_request


class TestHierarchy:
    def test_configuration_error_is_turnstile_error(self) -> None:
        assert issubclass(ConfigurationError, TurnstileError)

    def test_response_error_is_turnstile_error(self) -> None:
        assert issubclass(ResponseError, TurnstileError)

    def test_base_is_exception(self) -> None:
        assert issubclass(TurnstileError, Exception)


class TestResponseError:
    def test_carries_response(self) -> None:
        response = bad_request("missing mandatory parameter: url")
        err = ResponseError(response)
        assert err.response is response

    def test_str(self) -> None:
        err = ResponseError(bad_request("missing mandatory parameter: url"))
        assert str(err) == "400: missing mandatory parameter: url"
