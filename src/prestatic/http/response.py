"""HTTP responses with a chainable .with_*() transformation API.

Each transformation returns a new object. Immutable by convention,
built incrementally by design.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Response:
    """An in-memory HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status and headers. Each call returns a new ``Response``.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/plain; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    # -- Header access --

    def header(self, name: str, default: str | None = None) -> str | None:
        """First value of header *name* (case-insensitive)."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return default

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body


@dataclass(frozen=True, slots=True)
class FileResponse:
    """A response whose body is streamed from a file on disk.

    ``content_type`` None means "derive it from the file name", which is
    what the sender does for identity files. Compressed files pass an
    explicit ``Content-Type`` header instead, because their own name
    (``app.js.gz``) says nothing about the payload.
    """

    path: Path
    status: int = 200
    content_type: str | None = None
    headers: tuple[tuple[str, str], ...] = ()
    head_only: bool = False

    def with_status(self, status: int) -> FileResponse:
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> FileResponse:
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> FileResponse:
        return replace(self, headers=(*self.headers, *headers.items()))

    def header(self, name: str, default: str | None = None) -> str | None:
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return default
