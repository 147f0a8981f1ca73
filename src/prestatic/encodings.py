"""Compression variants and the registry that recognises them.

A variant pairs a content-coding name (what goes in ``Content-Encoding``)
with the file extension that marks a pre-compressed file on disk. The
registry is keyed by that extension, or by ``"none"`` for the identity
variant, and keeps insertion order.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prestatic.config import StaticConfig

IDENTITY_KEY = "none"


class VariantKind(Enum):
    IDENTITY = "identity"
    GZIP = "gzip"
    BROTLI = "br"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True)
class CompressionVariant:
    """One physical representation of an asset.

    ``file_extension`` includes its leading dot (``".gz"``) so it can be
    appended to a path as-is; it is empty for identity.
    """

    encoding_name: str
    file_extension: str
    kind: VariantKind = VariantKind.CUSTOM

    @property
    def is_identity(self) -> bool:
        return self.kind is VariantKind.IDENTITY

    @property
    def token(self) -> str:
        """The Accept-Encoding token that names this variant."""
        if self.is_identity:
            return "identity"
        return self.encoding_name.lower()

    @property
    def key(self) -> str:
        return IDENTITY_KEY if self.is_identity else self.file_extension.lstrip(".")


IDENTITY = CompressionVariant("none", "", VariantKind.IDENTITY)

_KNOWN_KINDS = {
    "gzip": VariantKind.GZIP,
    "br": VariantKind.BROTLI,
}


class VariantRegistry:
    """Ordered, deduplicating set of recognised variants.

    Registration order is discovery preference, not client preference.
    Identity is always registered first.
    """

    __slots__ = ("_variants",)

    def __init__(self) -> None:
        self._variants: dict[str, CompressionVariant] = {IDENTITY_KEY: IDENTITY}

    def register(self, encoding_name: str, file_extension: str) -> CompressionVariant:
        """Add a variant unless one with the same key exists; return the registered one."""
        if encoding_name == IDENTITY_KEY:
            return self._variants[IDENTITY_KEY]

        ext = file_extension.lstrip(".")
        existing = self._variants.get(ext)
        if existing is not None:
            return existing

        kind = _KNOWN_KINDS.get(encoding_name.lower(), VariantKind.CUSTOM)
        variant = CompressionVariant(encoding_name, f".{ext}", kind)
        self._variants[ext] = variant
        return variant

    @classmethod
    def from_config(cls, config: StaticConfig) -> VariantRegistry:
        """Build the registry for *config*.

        Order: identity, gzip, custom compressions (config order),
        brotli. Only identity when compression is disabled.
        """
        registry = cls()
        if config.disable_compression:
            return registry

        registry.register("gzip", "gz")
        for custom in config.custom_compressions:
            registry.register(custom.encoding_name, custom.file_extension)
        if config.enable_brotli:
            registry.register("br", "br")
        return registry

    @property
    def identity(self) -> CompressionVariant:
        return self._variants[IDENTITY_KEY]

    def get(self, key: str) -> CompressionVariant | None:
        return self._variants.get(key)

    def __getitem__(self, key: str) -> CompressionVariant:
        return self._variants[key]

    def __contains__(self, key: object) -> bool:
        return key in self._variants

    def __iter__(self) -> Iterator[CompressionVariant]:
        return iter(self._variants.values())

    def __len__(self) -> int:
        return len(self._variants)

    def __repr__(self) -> str:
        keys = ", ".join(self._variants)
        return f"VariantRegistry({keys})"
