"""Request resolution — logical path + Accept-Encoding -> file on disk.

The resolver owns the registry, the index, and the one-shot signal that
marks the index as built. Every lookup awaits that signal, so requests
that arrive during startup queue behind the build instead of seeing a
half-filled index.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote

import anyio

from prestatic.config import StaticConfig
from prestatic.encodings import CompressionVariant, VariantRegistry
from prestatic.errors import NotIndexed, PathDecodeError, RootNotFound
from prestatic.indexer import AssetIndex, FileSystem, build_index
from prestatic.mime import content_type_header
from prestatic.negotiation import NegotiationOutcome, negotiate

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclass(frozen=True, slots=True)
class ResolvedFile:
    """What to hand the file sender: a physical path and extra headers."""

    path: Path
    headers: tuple[tuple[str, str], ...]
    outcome: NegotiationOutcome

    @property
    def variant(self) -> CompressionVariant:
        return self.outcome.variant


def normalize_path(raw_path: str) -> str:
    """Strip one leading and one trailing slash, then percent-decode *raw_path*.

    ``//index.html`` keeps its extra slash and so never matches an
    indexed path.

    Raises:
        PathDecodeError: Malformed escapes or non-UTF-8 bytes.
    """
    stripped = raw_path.removeprefix("/").removesuffix("/")
    if _BAD_ESCAPE.search(stripped):
        raise PathDecodeError(raw_path)
    try:
        return unquote(stripped, errors="strict")
    except UnicodeDecodeError as exc:
        raise PathDecodeError(raw_path) from exc


class Resolver:
    """Resolves logical request paths against a pre-compressed asset tree.

    Construction validates the root synchronously so a bad root fails
    loudly before the server starts. The index itself is built by
    ``startup()``; ``resolve()`` starts the build if nobody has yet.

    Usage::

        resolver = Resolver(StaticConfig(root="dist", enable_brotli=True))
        await resolver.startup()
        resolved = await resolver.resolve("/app.js", "br, gzip")
        resolved.path     # dist/app.js.br
        resolved.headers  # Content-Type, Content-Encoding, Vary
    """

    __slots__ = ("_failure", "_filesystem", "_index", "_ready", "config", "registry")

    def __init__(self, config: StaticConfig, *, filesystem: FileSystem | None = None) -> None:
        self.config = config
        self.registry = VariantRegistry.from_config(config)
        self._filesystem = filesystem
        self._index: AssetIndex | None = None
        self._ready: anyio.Event | None = None
        self._failure: Exception | None = None

        root = config.compressed_root
        if filesystem is None and not root.is_dir():
            raise RootNotFound(root.absolute())

    @property
    def index(self) -> AssetIndex | None:
        """The finished index, or None while it is still being built."""
        return self._index

    @property
    def is_ready(self) -> bool:
        return self._index is not None

    async def startup(self) -> AssetIndex:
        """Build the index. Safe to call more than once; builds only once."""
        return await self.wait_indexed()

    async def wait_indexed(self) -> AssetIndex:
        """Return the index, building it or waiting for the build in progress."""
        while True:
            if self._index is not None:
                return self._index
            if self._failure is not None:
                raise self._failure

            if self._ready is None:
                return await self._build()

            # Woken either by a finished build or by a cancelled one;
            # the loop re-checks which
            await self._ready.wait()

    async def _build(self) -> AssetIndex:
        """Build the index in the calling task; everyone else waits on the event."""
        ready = self._ready = anyio.Event()
        try:
            self._index = await build_index(
                self.config.compressed_root,
                self.registry,
                extensions=self.config.extensions,
                disable_compression=self.config.disable_compression,
                separate_roots=self.config.separate_roots,
                filesystem=self._filesystem,
            )
        except Exception as exc:
            self._failure = exc
            raise
        finally:
            if self._index is None and self._failure is None:
                # The building task was cancelled; the next caller starts over
                self._ready = None
            ready.set()
        return self._index

    async def resolve(self, raw_path: str, accept_encoding: str | None) -> ResolvedFile:
        """Resolve a request to a physical file and response headers.

        Raises:
            PathDecodeError: The path cannot be percent-decoded.
            NotIndexed: Nothing is indexed under the path.
            NoAcceptableEncoding: No variant satisfies the client.
        """
        logical_path = normalize_path(raw_path) or self.config.index
        index = await self.wait_indexed()

        entry = index.get(logical_path)
        if entry is None:
            raise NotIndexed(logical_path)

        outcome = negotiate(
            accept_encoding,
            entry.compressions,
            disable_compression=self.config.disable_compression,
            order_preference=self.config.order_preference,
        )
        variant = outcome.variant

        if variant.is_identity:
            return ResolvedFile(self.config.serving_root / entry.physical_stem, (), outcome)

        headers = (
            ("Content-Type", content_type_header(entry.physical_stem)),
            ("Content-Encoding", variant.encoding_name),
            ("Vary", "Accept-Encoding"),
        )
        return ResolvedFile(
            self.config.compressed_root / entry.physical_path(variant),
            headers,
            outcome,
        )
