"""Pre-compressed static file middleware.

Serves the best pre-compressed variant of an asset (brotli, gzip,
custom encodings, or the uncompressed original) for the client's
``Accept-Encoding``. The asset tree is indexed once at startup.

Falls through to the next handler for paths outside the prefix,
non-GET/HEAD methods, undecodable paths, unindexed paths, and assets
with no acceptable variant.
"""

import logging
from pathlib import Path
from typing import Any
from urllib.parse import quote

import anyio

from prestatic.config import StaticConfig
from prestatic.errors import RequestError
from prestatic.http.request import Request
from prestatic.http.response import FileResponse
from prestatic.indexer import AssetIndex, FileSystem
from prestatic.middleware.protocol import AnyResponse, Next
from prestatic.resolver import Resolver

logger = logging.getLogger("prestatic.static")


class PrecompressedStatic:
    """Middleware that serves pre-compressed static files.

    Compressed files (``app.js.gz``, ``app.js.br``) live in ``root``;
    originals live in ``uncompressed_root``, which defaults to ``root``.

    Options are ``StaticConfig`` fields, in snake_case or camelCase.

    Usage::

        static = PrecompressedStatic(
            "dist/compressed",
            "dist/plain",
            enable_brotli=True,
            order_preference=("br", "gzip"),
            extensions=("html",),
        )
        app.add_middleware(static)
        app.on_startup(static.startup)

    Raises:
        ConfigurationError: Invalid options.
        RootNotFound: The directory to index does not exist.
    """

    __slots__ = ("_prefix", "resolver")

    def __init__(
        self,
        root: str | Path | StaticConfig,
        uncompressed_root: str | Path | None = None,
        *,
        prefix: str = "/",
        filesystem: FileSystem | None = None,
        **options: Any,
    ) -> None:
        if isinstance(root, StaticConfig):
            config = root
        else:
            config = StaticConfig.from_options(root, uncompressed_root, options)
        self.resolver = Resolver(config, filesystem=filesystem)

        # Normalize prefix: ensure leading slash, strip trailing.
        # Root prefix "/" normalizes to "" (every path is a candidate).
        stripped = "/" + prefix.strip("/")
        self._prefix = stripped if stripped != "/" else ""

    @property
    def config(self) -> StaticConfig:
        return self.resolver.config

    async def startup(self) -> AssetIndex:
        """Index the asset tree. Register with ``app.on_startup``."""
        return await self.resolver.startup()

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        """Serve a pre-compressed file or fall through."""
        if request.method not in ("GET", "HEAD"):
            return await next(request)

        # Work on the still-encoded path; the resolver does the decoding
        path = request.raw_path or quote(request.path, safe="/")
        if self._prefix:
            if not path.startswith(self._prefix + "/") and path != self._prefix:
                return await next(request)
            path = path[len(self._prefix) :]

        try:
            resolved = await self.resolver.resolve(path, request.accept_encoding)
        except RequestError as exc:
            logger.debug("%s %s falls through: %s", request.method, request.path, exc)
            return await next(request)

        if not await anyio.Path(resolved.path).is_file():
            # Indexed at startup but gone (or never mirrored into the uncompressed root)
            logger.warning("Indexed asset missing on disk: %s", resolved.path)
            return await next(request)

        response = FileResponse(
            path=resolved.path,
            headers=resolved.headers,
            head_only=request.method == "HEAD",
        )
        if self.config.cache_control:
            response = response.with_header("Cache-Control", self.config.cache_control)
        return response
