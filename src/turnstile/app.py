"""Turnstile application — the ASGI entry point.

Owns the router, the authorizer and the configuration. The router is
built by the caller and handed in; it is frozen when the app starts
serving, so the route table cannot change while requests are in flight.
"""

import threading

from turnstile._asgi import Receive, Scope, Send
from turnstile.auth import Authorizer, NoneAuthorizer
from turnstile.config import AppConfig
from turnstile.routing.router import Router
from turnstile.server.handler import handle_request


class App:
    """ASGI 3.0 application wrapping a ``Router``.

    Usage::

        router = Router()
        router.on("GET", "/widgets/<id:[0-9]+>", get_widget)

        app = App(router, authorizer=my_authorizer)
        # uvicorn mymodule:app

    Thread safety:
        The freeze transition uses a Lock + double-check so exactly one
        thread freezes the router, even if several workers receive their
        first request at the same time.
    """

    __slots__ = ("_freeze_lock", "authorizer", "config", "router")

    def __init__(
        self,
        router: Router,
        *,
        authorizer: Authorizer | None = None,
        config: AppConfig | None = None,
    ) -> None:
        self.router = router
        self.authorizer: Authorizer = authorizer or NoneAuthorizer()
        self.config: AppConfig = config or AppConfig()
        self._freeze_lock = threading.Lock()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan scopes directly, then delegates HTTP scopes to
        the request handler. Other scope types are ignored.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] != "http":
            return

        self._ensure_frozen()
        await handle_request(
            scope,
            receive,
            send,
            router=self.router,
            authorizer=self.authorizer,
            config=self.config,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol: freeze at startup, then wait for shutdown."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                self._ensure_frozen()
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    def _ensure_frozen(self) -> None:
        if self.router.frozen:
            return
        with self._freeze_lock:
            self.router.freeze()
