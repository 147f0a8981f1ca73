"""Configuration.

StaticConfig and AppConfig are frozen dataclasses — immutable after
creation, IDE-autocompletable, no string-key dict lookups.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from prestatic.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class CustomCompression:
    """An extra pre-compressed encoding, e.g. ``deflate`` files ending in ``.zz``."""

    encoding_name: str
    file_extension: str

    def __post_init__(self) -> None:
        if not isinstance(self.encoding_name, str) or not self.encoding_name:
            raise ConfigurationError("Custom compression needs a non-empty encoding name")
        if not isinstance(self.file_extension, str):
            msg = f"Custom compression {self.encoding_name!r} needs a file extension"
            raise ConfigurationError(msg)
        ext = self.file_extension.lstrip(".")
        if not ext or "." in ext or "/" in ext:
            msg = f"Invalid file extension for {self.encoding_name!r}: {self.file_extension!r}"
            raise ConfigurationError(msg)
        if ext == "none":
            raise ConfigurationError("'none' is reserved for uncompressed files")
        object.__setattr__(self, "file_extension", ext)


@dataclass(frozen=True, slots=True)
class StaticConfig:
    """Pre-compressed static serving options. Immutable after creation.

    Only ``root`` is required::

        config = StaticConfig(
            root="dist/compressed",
            uncompressed_root="dist/plain",
            enable_brotli=True,
            extensions=("html",),
        )

    ``uncompressed_root`` defaults to ``root``. When compression is
    disabled, the uncompressed root is the one that gets indexed.
    """

    root: str | Path
    uncompressed_root: str | Path | None = None

    # Logical path served for an empty request path
    index: str = "index.html"

    disable_compression: bool = False
    enable_brotli: bool = False
    custom_compressions: tuple[CustomCompression, ...] = ()

    # Server preference among equally weighted encodings, e.g. ("br", "gzip")
    order_preference: tuple[str, ...] = ()

    # Alias extensions that may be omitted from the URL, e.g. ("html",)
    extensions: tuple[str, ...] = ()

    cache_control: str | None = None

    def __post_init__(self) -> None:
        root = Path(self.root)
        uncompressed = root if self.uncompressed_root is None else Path(self.uncompressed_root)
        object.__setattr__(self, "root", root)
        object.__setattr__(self, "uncompressed_root", uncompressed)

        customs = tuple(_custom_from_mapping(c) for c in self.custom_compressions)
        object.__setattr__(self, "custom_compressions", customs)

        extensions = tuple(ext.lstrip(".") for ext in self.extensions)
        if any(not ext for ext in extensions):
            raise ConfigurationError("Alias extensions must be non-empty")
        object.__setattr__(self, "extensions", extensions)

        object.__setattr__(
            self, "order_preference", tuple(name.lower() for name in self.order_preference)
        )

        if not self.index or self.index.startswith("/"):
            raise ConfigurationError(f"index must be a relative logical path, got {self.index!r}")

    @property
    def compressed_root(self) -> Path:
        """The directory that gets indexed.

        Compression off means there is nothing compressed to look for,
        so the uncompressed root takes its place.
        """
        if self.disable_compression:
            return self.serving_root
        return Path(self.root)

    @property
    def serving_root(self) -> Path:
        """Directory identity variants are served from."""
        return Path(self.uncompressed_root or self.root)

    @property
    def separate_roots(self) -> bool:
        """True when compressed and uncompressed files live in different directories."""
        return self.compressed_root != self.serving_root

    @classmethod
    def from_options(
        cls,
        root: str | Path,
        uncompressed_root: str | Path | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> StaticConfig:
        """Build a config from a loose options mapping.

        Accepts both camelCase (``enableBrotli``, ``customCompressions``,
        ``orderPreference``) and snake_case keys. Unknown keys raise
        ``ConfigurationError`` rather than being silently ignored.
        """
        known = {f.name for f in fields(cls)} - {"root", "uncompressed_root"}
        kwargs: dict[str, Any] = {}
        for key, value in (options or {}).items():
            name = _snake_case(key)
            if name not in known:
                raise ConfigurationError(f"Unknown option: {key!r}")
            kwargs[name] = value

        for name in ("custom_compressions", "order_preference", "extensions"):
            if name in kwargs:
                kwargs[name] = tuple(kwargs[name] or ())

        return cls(root=root, uncompressed_root=uncompressed_root, **kwargs)


def _snake_case(key: str) -> str:
    return "".join(f"_{c.lower()}" if c.isupper() else c for c in key)


def _custom_from_mapping(item: Any) -> CustomCompression:
    if isinstance(item, CustomCompression):
        return item
    if not isinstance(item, Mapping):
        raise ConfigurationError(f"Custom compression must be a mapping, got {item!r}")
    return CustomCompression(
        encoding_name=item.get("encodingName", item.get("encoding_name")),
        file_extension=item.get("fileExtension", item.get("file_extension")),
    )


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, port=3000)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Reload (development mode — requires debug=True)
    reload_include: tuple[str, ...] = ()  # Extra extensions to watch (e.g. ".html", ".css")
    reload_dirs: tuple[str, ...] = ()  # Extra directories to watch alongside cwd

