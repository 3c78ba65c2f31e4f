"""Ordered, permission-gated request router.

Routes are tried in registration order and the first structural match
wins, so specific patterns must be registered before general ones that
overlap them. The router is also the single error boundary: nothing a
route or handler raises escapes ``handle``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable
from typing import TYPE_CHECKING

from turnstile.errors import ConfigurationError, ResponseError
from turnstile.http.response import Response, internal_error, not_found
from turnstile.routing.pattern import compile_pattern
from turnstile.routing.route import Handler, Route

if TYPE_CHECKING:
    from turnstile.http.request import Request

logger = logging.getLogger("turnstile.routing")


class Router:
    """Ordered route table.

    Usage::

        router = Router()
        router.on("GET", "/index/<name>", get_index)
        router.on("POST", "/index/<name>", load_index, Permission.INDEX_EDIT)

        @router.route("DELETE", "/index/<name>", Permission.INDEX_EDIT)
        def delete_index(request: Request) -> Response: ...

        response = router.handle(request)

    A Router is itself a handler (``router(request)``), so one router can
    be mounted as the handler of a route in another.

    Thread safety:
        Registration happens once at startup. After ``freeze()`` the
        route table is a tuple and may be read by any number of request
        threads without locking.
    """

    __slots__ = ("_frozen", "_routes")

    def __init__(self) -> None:
        self._routes: list[Route] | tuple[Route, ...] = []
        self._frozen = False

    def on(
        self,
        method: str | None,
        pattern: str,
        handler: Handler,
        permission: Hashable | None = None,
    ) -> Router:
        """Register *handler* for *method* and *pattern*.

        The pattern is compiled here, so a malformed template fails at
        startup. Returns the router to allow chaining.
        """
        if self._frozen:
            msg = f"Cannot register {method or '*'} {pattern!r}: router is frozen."
            raise ConfigurationError(msg)

        route = Route(
            method=method.upper() if method is not None else None,
            pattern=compile_pattern(pattern),
            handler=handler,
            permission=permission,
        )
        self._routes.append(route)  # type: ignore[union-attr]
        return self

    def route(
        self,
        method: str | None,
        pattern: str,
        permission: Hashable | None = None,
    ) -> Callable[[Handler], Handler]:
        """Decorator form of ``on()``."""

        def decorator(handler: Handler) -> Handler:
            self.on(method, pattern, handler, permission)
            return handler

        return decorator

    def freeze(self) -> None:
        """Make the route table immutable. Idempotent."""
        if not self._frozen:
            self._routes = tuple(self._routes)
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def handle(self, request: Request) -> Response:
        """Dispatch *request* to the first matching route.

        Always returns a response: 404 when nothing matches, the embedded
        response of a ``ResponseError``, or a 500 for anything else.
        """
        try:
            for route in self._routes:
                response = route.handle(request)
                if response is not None:
                    return response
            return not_found()
        except ResponseError as exc:
            logger.debug("%d %s %s (short-circuit)", exc.response.status, request.method, request.path)
            return exc.response
        except Exception as exc:
            logger.exception("500 %s %s", request.method, request.path)
            return internal_error(exc)

    __call__ = handle
