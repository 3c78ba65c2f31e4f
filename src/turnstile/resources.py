"""Static resource handlers.

``serve(name)`` builds a handler that streams one file. Resources are
resolved when the handler is created, so a missing file or an unknown
file type stops the application at startup rather than failing on the
first request.
"""

from __future__ import annotations

from importlib.resources import files
from importlib.resources.abc import Traversable
from typing import TYPE_CHECKING

from turnstile.errors import ConfigurationError
from turnstile.http.response import Response
from turnstile.routing.route import Handler

if TYPE_CHECKING:
    from turnstile.http.request import Request

CONTENT_TYPES: dict[str, str] = {
    "css": "text/css",
    "html": "text/html",
    "js": "application/javascript",
    "json": "application/json",
    "svg": "image/svg+xml",
}


def guess_type(name: str) -> str:
    """Content type for *name* by extension.

    Raises ``ValueError`` for extensions outside ``CONTENT_TYPES``.
    """
    extension = name.rsplit(".", 1)[-1]
    try:
        return CONTENT_TYPES[extension]
    except KeyError:
        msg = f"Unknown file type: {name}"
        raise ValueError(msg) from None


def serve(name: str, root: Traversable | None = None) -> Handler:
    """Return a handler that streams resource *name* from *root*.

    *root* is any directory-like ``Traversable`` (``pathlib.Path``
    included) and defaults to the ``turnstile`` package's ``static``
    directory.
    """
    base = root if root is not None else files("turnstile") / "static"
    resource = base.joinpath(*name.lstrip("/").split("/"))
    if not resource.is_file():
        msg = f"No such resource: {name}"
        raise ConfigurationError(msg)
    content_type = guess_type(name)

    def handler(request: Request) -> Response:  # noqa: ARG001
        return Response(body=resource.open("rb"), content_type=content_type)

    return handler
