"""Route — one (method, path pattern, permission, handler) binding."""

from __future__ import annotations

from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

from turnstile.auth import permission_name
from turnstile.http.response import Response, forbidden
from turnstile.routing.pattern import PathPattern

if TYPE_CHECKING:
    from turnstile.http.request import Request

Handler: TypeAlias = Callable[["Request"], Response]


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    ``method`` of ``None`` matches any HTTP method. ``permission`` of
    ``None`` lets every caller through.
    """

    method: str | None
    pattern: PathPattern
    handler: Handler
    permission: Hashable | None = None

    def match(self, request: Request) -> dict[str, str] | None:
        """Structural match: method and full path, ignoring permissions."""
        if self.method is not None and self.method != request.method:
            return None
        return self.pattern.match(request.path)

    def handle(self, request: Request) -> Response | None:
        """Run this route for *request*.

        Returns ``None`` if the route does not structurally match, a 403
        if the caller lacks the required permission (the handler is not
        called), and otherwise the handler's response. Path parameters
        are written into ``request.params`` first, replacing query
        parameters of the same name.
        """
        params = self.match(request)
        if params is None:
            return None

        if self.permission is not None and not request.has_permission(self.permission):
            return forbidden(permission_name(self.permission))

        request.params.update(params)
        return self.handler(request)
