"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware:
    PrecompressedStatic -- Serve pre-compressed static files with encoding negotiation
"""

from prestatic.middleware.protocol import AnyResponse, Middleware, Next
from prestatic.middleware.static import PrecompressedStatic

__all__ = [
    "AnyResponse",
    "Middleware",
    "Next",
    "PrecompressedStatic",
]
