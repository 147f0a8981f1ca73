"""Immutable HTTP request.

Frozen metadata built from the ASGI scope. Static serving never reads
a body, so the request carries none.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from prestatic.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is the decoded path from the ASGI scope; ``raw_path`` keeps
    the percent-encoded form when the server provided one.
    """

    method: str
    path: str
    headers: Headers
    raw_path: str = ""
    query_string: str = ""
    http_version: str = "1.1"
    client: tuple[str, int] | None = None

    @property
    def accept_encoding(self) -> str | None:
        """The ``Accept-Encoding`` header, repeated values folded together."""
        return self.headers.get_joined("accept-encoding")

    @property
    def url(self) -> str:
        """Full request URL (path + query string)."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path

    @classmethod
    def from_asgi(cls, scope: dict[str, Any]) -> Request:
        """Create a Request from an ASGI scope."""
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            raw_path=scope.get("raw_path", b"").decode("latin-1"),
            query_string=scope.get("query_string", b"").decode("latin-1"),
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
        )
