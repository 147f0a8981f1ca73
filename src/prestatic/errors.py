"""Prestatic exception hierarchy.

Shared across the indexer, negotiator, resolver, and middleware so every
module raises and catches the same types.

Startup errors (``ConfigurationError``, ``RootNotFound``) are fatal.
Per-request errors (``PathDecodeError``, ``NotIndexed``,
``NoAcceptableEncoding``) are recoverable: the static middleware defers
to the next handler when it sees one.
"""

from dataclasses import dataclass


class PrestaticError(Exception):
    """Base for all prestatic-specific errors."""


class ConfigurationError(PrestaticError):
    """Raised when static-serving options are invalid.

    Raised from ``StaticConfig.__post_init__`` so bad options fail at
    construction, not on the first request.
    """


class RootNotFound(ConfigurationError):  # noqa: N818 — mirrors the HTTP naming style
    """The configured root directory does not exist."""

    def __init__(self, root: object) -> None:
        self.root = root
        super().__init__(f"Root path does not exist. Full path: {root}")


class RequestError(PrestaticError):
    """Base for per-request errors that mean "let the next handler try"."""


class PathDecodeError(RequestError):
    """The request path is not valid percent-encoded UTF-8."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Cannot decode request path: {path!r}")


class NotIndexed(RequestError):  # noqa: N818
    """No asset is indexed under the logical path."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Not indexed: {path!r}")


class NoAcceptableEncoding(RequestError):  # noqa: N818
    """The asset exists but none of its variants is acceptable to the client."""

    def __init__(self, accept_encoding: str | None, available: tuple[str, ...] = ()) -> None:
        self.accept_encoding = accept_encoding
        self.available = available
        super().__init__(
            f"No acceptable encoding for Accept-Encoding={accept_encoding!r} "
            f"(available: {', '.join(available) or 'none'})"
        )


@dataclass(frozen=True, slots=True)
class HTTPError(PrestaticError):
    """An error that maps directly to an HTTP status code.

    Raised at the end of the middleware chain. The ASGI handler catches
    these and turns them into plain-text responses.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — nothing in the pipeline served the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)
