"""ASGI handler — translates ASGI scope/messages to prestatic types.

The only component that touches raw ASGI directly. Converts scope dicts
to typed Request objects, dispatches through middleware, and sends the
response back through ASGI send().
"""

import logging
from collections.abc import Callable
from typing import Any

from prestatic._internal.asgi import Receive, Scope, Send
from prestatic.errors import HTTPError, NotFound
from prestatic.http.request import Request
from prestatic.http.response import FileResponse, Response
from prestatic.middleware.protocol import AnyResponse, Next
from prestatic.server.sender import send_file, send_response

logger = logging.getLogger("prestatic.server")


async def _end_of_chain(request: Request) -> AnyResponse:
    """Innermost handler: nothing in the pipeline served the request."""
    raise NotFound(f"No asset for {request.path}")


def build_pipeline(middleware: tuple[Callable[..., Any], ...]) -> Next:
    """Wrap *middleware* (outermost first) around the end of the chain."""
    handler: Next = _end_of_chain
    for mw in reversed(middleware):
        outer = handler
        mw_ref = mw

        async def make_next(req: Request, _mw: Any = mw_ref, _next: Next = outer) -> AnyResponse:
            return await _mw(req, _next)

        handler = make_next
    return handler


def _error_response(exc: HTTPError) -> Response:
    response = Response(body=exc.detail or str(exc.status), status=exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    pipeline: Next,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope)

    try:
        response = await pipeline(request)
    except HTTPError as exc:
        logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)
        response = _error_response(exc)
    except Exception:
        logger.exception("Unhandled error for %s %s", request.method, request.path)
        response = Response(body="Internal Server Error", status=500)

    if isinstance(response, FileResponse):
        try:
            await send_file(response, send)
        except FileNotFoundError:
            # Removed between resolution and open; nothing was sent yet
            logger.warning("File vanished before sending: %s", response.path)
            await send_response(_error_response(NotFound()), send)
    else:
        await send_response(response, send)
