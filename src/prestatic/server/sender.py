"""ASGI response sending — translates prestatic responses to ASGI messages.

Handles in-memory responses and files streamed from disk. The file
sender is the only place that reads asset bytes.
"""

import logging

import anyio

from prestatic._internal.asgi import Send
from prestatic.http.response import FileResponse, Response
from prestatic.mime import content_type_header

logger = logging.getLogger("prestatic.server")

CHUNK_SIZE = 64 * 1024


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _encode_headers(headers: tuple[tuple[str, str], ...]) -> list[tuple[bytes, bytes]]:
    return [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in headers]


async def send_response(response: Response, send: Send) -> None:
    """Translate an in-memory Response into ASGI send() calls."""
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    raw_headers.extend(_encode_headers(response.headers))

    body = response.body_bytes if _body_allowed(response.status) else b""

    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )


async def send_file(response: FileResponse, send: Send) -> None:
    """Stream a file from disk as the response body.

    The file is opened before ``http.response.start`` goes out, so a
    missing file raises ``OSError`` while the response can still become
    an error page.

    Content-Type comes from an explicit header when one is set, then
    ``response.content_type``, then the file name.
    """
    explicit_type = response.header("content-type")
    content_type = explicit_type or response.content_type or content_type_header(response.path.name)
    extra = tuple((name, value) for name, value in response.headers if name.lower() != "content-type")

    path = anyio.Path(response.path)
    size = (await path.stat()).st_size
    send_body = _body_allowed(response.status)

    async with await anyio.open_file(response.path, "rb") as f:
        raw_headers: list[tuple[bytes, bytes]] = [
            (b"content-type", content_type.encode("latin-1")),
            *_encode_headers(extra),
            (b"content-length", str(size if send_body else 0).encode("latin-1")),
        ]
        await send(
            {
                "type": "http.response.start",
                "status": response.status,
                "headers": raw_headers,
            }
        )

        if response.head_only or not send_body:
            await send({"type": "http.response.body", "body": b""})
            return

        while True:
            chunk = await f.read(CHUNK_SIZE)
            if not chunk:
                break
            await send({"type": "http.response.body", "body": chunk, "more_body": True})
        await send({"type": "http.response.body", "body": b""})

    logger.debug("Sent %s (%d bytes)", response.path, size)
