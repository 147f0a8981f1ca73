"""The prestatic application — an ASGI entry point for middleware.

Collects middleware and lifecycle hooks during setup, freezes them into
a pipeline on first use, then serves requests.
"""

import inspect
import logging
import threading
from collections.abc import Callable
from typing import Any

from prestatic._internal.asgi import Receive, Scope, Send
from prestatic.config import AppConfig
from prestatic.errors import ConfigurationError
from prestatic.middleware.protocol import Middleware, Next
from prestatic.server.handler import build_pipeline, handle_request

logger = logging.getLogger("prestatic.server")


class App:
    """The prestatic application.

    Mutable during setup (middleware, hooks). Frozen at runtime when
    ``app.run()`` or ``__call__()`` is first invoked. Requests that no
    middleware answers get a plain 404.

    Usage::

        app = App()
        static = PrecompressedStatic("dist", enable_brotli=True)
        app.add_middleware(static)
        app.on_startup(static.startup)
        app.run()
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_middleware_list",
        "_pipeline",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._middleware_list: list[Middleware] = []
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._pipeline: Next | None = None

    # -- Setup --

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware to the pipeline. First added runs outermost."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        before the server begins accepting HTTP requests. A failing hook
        aborts startup.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Freeze the app and serve it with pounce."""
        self._ensure_frozen()

        from prestatic.server.dev import run_server

        run_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
            reload_include=self.config.reload_include,
            reload_dirs=self.config.reload_dirs,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()
        assert self._pipeline is not None

        await handle_request(scope, receive, send, pipeline=self._pipeline)

    async def run_startup_hooks(self) -> None:
        for hook in self._startup_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    async def run_shutdown_hooks(self) -> None:
        for hook in self._shutdown_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    async def _handle_lifespan(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before first HTTP request), then
        runs registered startup/shutdown hooks and signals completion
        back to the server.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.run_startup_hooks()
                except Exception as exc:
                    logger.exception("Startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self.run_shutdown_hooks()
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Freezing --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._pipeline = build_pipeline(tuple(self._middleware_list))
            self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = "Cannot modify the app after it has started serving requests."
            raise ConfigurationError(msg)
