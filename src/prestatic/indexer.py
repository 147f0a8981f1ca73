"""Asset indexing — one walk of the storage root at startup.

Builds an ``AssetIndex``: logical request path -> ``AssetEntry`` (the
compression variants that exist on disk for that path).

Traversal is structured concurrency (anyio task groups):

1. List a directory
2. Probe every entry's status concurrently
3. Recurse into subdirectories the same way
4. Join, then merge results in sorted name order

Merging after the join keeps discovery order independent of which
probe happened to finish first, so indexing an unchanged tree always
yields the same index.

Known limitation: there are no timeouts. A stalled filesystem call
stalls startup.
"""

from __future__ import annotations

import logging
import stat as stat_module
import time
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import anyio

from prestatic.encodings import IDENTITY_KEY, CompressionVariant, VariantRegistry
from prestatic.errors import RootNotFound

logger = logging.getLogger("prestatic.index")


# -- Filesystem reader --


@dataclass(frozen=True, slots=True)
class FileStatus:
    is_dir: bool
    is_file: bool
    size: int = 0


class FileSystem(Protocol):
    """What the indexer needs from the filesystem.

    Errors are ``OSError``. They are fatal for the root and skip the
    entry everywhere else.
    """

    async def stat(self, path: Path) -> FileStatus: ...

    async def list_directory(self, path: Path) -> list[str]: ...


class AnyioFileSystem:
    """Non-blocking filesystem reader backed by ``anyio.Path``."""

    __slots__ = ()

    async def stat(self, path: Path) -> FileStatus:
        result = await anyio.Path(path).stat()
        return FileStatus(
            is_dir=stat_module.S_ISDIR(result.st_mode),
            is_file=stat_module.S_ISREG(result.st_mode),
            size=result.st_size,
        )

    async def list_directory(self, path: Path) -> list[str]:
        return [child.name async for child in anyio.Path(path).iterdir()]


# -- Index types --


@dataclass(frozen=True, slots=True)
class AssetEntry:
    """Every variant known for one logical path.

    ``incomplete_path`` has the compression extension and any alias
    extension stripped. ``missing_extension`` is the stripped alias
    (``".html"``) or empty. ``compressions`` is in discovery order and
    holds at most one variant per encoding name.
    """

    incomplete_path: str
    missing_extension: str
    compressions: tuple[CompressionVariant, ...]

    @property
    def physical_stem(self) -> str:
        """Path relative to a root, before any compression extension."""
        return self.incomplete_path + self.missing_extension

    @property
    def encodings(self) -> tuple[str, ...]:
        return tuple(v.encoding_name for v in self.compressions)

    def physical_path(self, variant: CompressionVariant) -> str:
        return self.physical_stem + variant.file_extension


class AssetIndex(Mapping[str, AssetEntry]):
    """Read-only mapping of logical path -> ``AssetEntry``."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, AssetEntry] | None = None) -> None:
        self._entries: dict[str, AssetEntry] = dict(entries or {})

    def __getitem__(self, path: str) -> AssetEntry:
        return self._entries[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"AssetIndex({len(self._entries)} entries)"

    @property
    def variant_count(self) -> int:
        return sum(len(entry.compressions) for entry in self._entries.values())


@dataclass(slots=True)
class _PendingEntry:
    missing_extension: str
    compressions: list[CompressionVariant] = field(default_factory=list)


class _IndexBuilder:
    """Mutable staging area; only ever touched after a directory join."""

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[str, _PendingEntry] = {}

    def add(self, logical_path: str, variant: CompressionVariant, missing_extension: str) -> None:
        pending = self._entries.get(logical_path)
        if pending is None:
            self._entries[logical_path] = _PendingEntry(missing_extension, [variant])
            return
        if pending.missing_extension != missing_extension:
            # Another stem (about.gz vs about.html.br); its variant would
            # resolve to a file that does not exist under this entry
            logger.debug(
                "Not merging %s%s%s into %s%s",
                logical_path,
                missing_extension,
                variant.file_extension,
                logical_path,
                pending.missing_extension,
            )
            return
        # Separate roots add identity once per compressed file; keep one.
        if any(v.encoding_name == variant.encoding_name for v in pending.compressions):
            return
        pending.compressions.append(variant)

    def freeze(self) -> AssetIndex:
        return AssetIndex(
            {
                path: AssetEntry(path, pending.missing_extension, tuple(pending.compressions))
                for path, pending in self._entries.items()
            }
        )


# -- Traversal --


async def _scan_directory(
    filesystem: FileSystem,
    directory: Path,
    relative: str,
) -> list[tuple[str, str]]:
    """Return ``(file name, relative path)`` for every regular file under *directory*."""
    names = sorted(await filesystem.list_directory(directory))
    slots: list[list[tuple[str, str]]] = [[] for _ in names]

    async def _probe(slot: int, name: str) -> None:
        path = directory / name
        relative_path = relative + name
        try:
            status = await filesystem.stat(path)
            if status.is_dir:
                slots[slot] = await _scan_directory(filesystem, path, relative_path + "/")
            elif status.is_file:
                slots[slot] = [(name, relative_path)]
        except OSError as exc:
            logger.warning("Skipping %s: %s", path, exc)

    async with anyio.create_task_group() as tg:
        for slot, name in enumerate(names):
            tg.start_soon(_probe, slot, name)

    return [found for slot in slots for found in slot]


def _alias_for(name: str, extensions: Sequence[str]) -> str | None:
    """First configured alias extension *name* ends with, as ``".ext"``."""
    for ext in extensions:
        suffix = "." + ext
        if name.endswith(suffix) and len(name) > len(suffix):
            return suffix
    return None


def _classify(
    builder: _IndexBuilder,
    name: str,
    relative_path: str,
    registry: VariantRegistry,
    *,
    extensions: Sequence[str],
    disable_compression: bool,
    separate_roots: bool,
) -> None:
    identity = registry.identity

    if disable_compression:
        # No compression extension to recognise
        builder.add(relative_path, identity, "")
        alias = _alias_for(name, extensions)
        if alias is not None:
            builder.add(relative_path[: -len(alias)], identity, alias)
        return

    base, dot, ext = name.rpartition(".")
    if not dot or not base:
        return
    if ext == IDENTITY_KEY:
        # Tagged as explicitly uncompressed; not a variant
        return
    variant = registry.get(ext)
    if variant is None:
        return

    logical_path = relative_path[: -len(dot + ext)]
    builder.add(logical_path, variant, "")
    if separate_roots:
        # The uncompressed twin lives in the other root and is never walked
        builder.add(logical_path, identity, "")

    alias = _alias_for(base, extensions)
    if alias is not None:
        aliased = logical_path[: -len(alias)]
        builder.add(aliased, variant, alias)
        if separate_roots:
            builder.add(aliased, identity, alias)


async def build_index(
    root: str | Path,
    registry: VariantRegistry,
    *,
    extensions: Sequence[str] = (),
    disable_compression: bool = False,
    separate_roots: bool = False,
    filesystem: FileSystem | None = None,
) -> AssetIndex:
    """Walk *root* once and return the finished index.

    Raises:
        RootNotFound: *root* is missing or not a directory.
    """
    fs = filesystem or AnyioFileSystem()
    root_path = Path(root)
    started = time.perf_counter()

    try:
        status = await fs.stat(root_path)
    except OSError as exc:
        raise RootNotFound(root_path.absolute()) from exc
    if not status.is_dir:
        raise RootNotFound(root_path.absolute())

    found = await _scan_directory(fs, root_path, "")

    builder = _IndexBuilder()
    for name, relative_path in found:
        _classify(
            builder,
            name,
            relative_path,
            registry,
            extensions=extensions,
            disable_compression=disable_compression,
            separate_roots=separate_roots,
        )
    index = builder.freeze()

    logger.info(
        "Indexed %d assets (%d variants) under %s in %.1fms",
        len(index),
        index.variant_count,
        root_path,
        (time.perf_counter() - started) * 1000,
    )
    return index
