"""Turnstile exception hierarchy.

Shared across Router, Route, Request and the ASGI adapter so every module
raises and catches the same types.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from turnstile.http.response import Response


class TurnstileError(Exception):
    """Base for all turnstile-specific errors."""


class ConfigurationError(TurnstileError):
    """Raised when routes or the application are set up incorrectly.

    Always raised at startup (route registration, resource lookup),
    never while serving a request.
    """


class ResponseError(TurnstileError):  # noqa: N818
    """Abort request handling and send ``response`` as-is.

    Raised by handlers (e.g. ``Request.mandatory_param``) and authorizers.
    The router returns the embedded response verbatim instead of treating
    the exception as an internal error.
    """

    def __init__(self, response: Response) -> None:
        super().__init__(response.status)
        self.response = response

    def __str__(self) -> str:
        return f"{self.response.status}: {self.response.text}"
