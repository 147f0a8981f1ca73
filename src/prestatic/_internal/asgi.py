"""Typed ASGI definitions.

Raw ASGI callables as seen by the app, the handler, and the file sender.
Users never see these; they work with Request and Response.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, TypeAlias

# Raw ASGI 3.0 callables
Scope: TypeAlias = MutableMapping[str, Any]
Message: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[Message]]
Send: TypeAlias = Callable[[Message], Awaitable[None]]
ASGIApp: TypeAlias = Callable[[Scope, Receive, Send], Awaitable[None]]
