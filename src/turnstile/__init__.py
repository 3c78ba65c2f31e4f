"""Turnstile — an ordered, permission-gated HTTP request router.

Maps method + path to a handler, binds ``<name>`` path parameters into
the request, and checks the caller's permit before the handler runs.

Basic usage::

    from turnstile import App, Permission, Router, json_response

    router = Router()
    router.on("GET", "/widgets/<id:[0-9]+>", lambda req: json_response({"id": req.param("id")}))
    router.on("DELETE", "/widgets/<id>", delete_widget, Permission.INDEX_EDIT)

    app = App(router)  # any ASGI server
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "Authorizer",
    "ConfigurationError",
    "HTTPSession",
    "NoneAuthorizer",
    "PathPattern",
    "Permission",
    "Permit",
    "Request",
    "Response",
    "ResponseError",
    "Route",
    "Router",
    "StaticAuthorizer",
    "TurnstileError",
    "bad_request",
    "compile_pattern",
    "forbidden",
    "internal_error",
    "json_response",
    "not_found",
    "serve",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import turnstile`` fast while providing a clean top-level API.
    """
    if name == "App":
        from turnstile.app import App

        return App

    if name == "AppConfig":
        from turnstile.config import AppConfig

        return AppConfig

    if name in ("Authorizer", "NoneAuthorizer", "Permission", "Permit", "StaticAuthorizer"):
        from turnstile import auth as _auth

        return getattr(_auth, name)

    if name in ("HTTPSession", "Request"):
        from turnstile.http import request as _req

        return getattr(_req, name)

    if name in (
        "Response",
        "bad_request",
        "forbidden",
        "internal_error",
        "json_response",
        "not_found",
    ):
        from turnstile.http import response as _resp

        return getattr(_resp, name)

    if name in ("PathPattern", "compile_pattern"):
        from turnstile.routing import pattern as _pattern

        return getattr(_pattern, name)

    if name == "Route":
        from turnstile.routing.route import Route

        return Route

    if name == "Router":
        from turnstile.routing.router import Router

        return Router

    if name == "serve":
        from turnstile.resources import serve

        return serve

    if name in ("ConfigurationError", "ResponseError", "TurnstileError"):
        from turnstile import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
