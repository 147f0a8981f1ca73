"""Tests for prestatic.server.sender response emission rules."""

from pathlib import Path

import pytest

from prestatic.http.response import FileResponse, Response
from prestatic.server import sender
from prestatic.server.sender import send_file, send_response


def _collector() -> tuple[list[dict], object]:
    messages: list[dict] = []

    async def send(message: dict) -> None:
        messages.append(message)

    return messages, send


class TestSendResponseNoBodyStatuses:
    async def test_204_drops_body_and_sets_zero_content_length(self) -> None:
        messages, send = _collector()

        # Even if a handler attaches body content, 204 never carries a body
        response = Response("unexpected-body").with_status(204)
        await send_response(response, send)

        assert messages[0]["type"] == "http.response.start"
        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"0"

        assert messages[1]["type"] == "http.response.body"
        assert messages[1]["body"] == b""

    async def test_304_drops_body_and_sets_zero_content_length(self) -> None:
        messages, send = _collector()

        response = Response("unexpected-body").with_status(304)
        await send_response(response, send)

        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"0"
        assert messages[1]["body"] == b""

    async def test_200_preserves_body(self) -> None:
        messages, send = _collector()

        response = Response("ok").with_header("X-Extra", "1")
        await send_response(response, send)

        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"2"
        assert headers[b"x-extra"] == b"1"
        assert headers[b"content-type"] == b"text/plain; charset=utf-8"
        assert messages[1]["body"] == b"ok"


@pytest.fixture
def asset(tmp_path) -> Path:
    path = tmp_path / "app.js.gz"
    path.write_bytes(b"compressed-bytes")
    return path


class TestSendFile:
    async def test_streams_body(self, asset) -> None:
        messages, send = _collector()

        await send_file(FileResponse(path=asset), send)

        assert messages[0]["status"] == 200
        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"16"
        body = b"".join(m["body"] for m in messages[1:])
        assert body == b"compressed-bytes"
        assert messages[-1].get("more_body", False) is False

    async def test_chunked(self, asset, monkeypatch) -> None:
        monkeypatch.setattr(sender, "CHUNK_SIZE", 4)
        messages, send = _collector()

        await send_file(FileResponse(path=asset), send)

        chunks = [m["body"] for m in messages[1:-1]]
        assert chunks == [b"comp", b"ress", b"ed-b", b"ytes"]
        assert all(m["more_body"] for m in messages[1:-1])
        assert messages[-1] == {"type": "http.response.body", "body": b""}

    async def test_explicit_content_type_header_wins(self, asset) -> None:
        messages, send = _collector()

        response = FileResponse(
            path=asset,
            headers=(
                ("Content-Type", "text/javascript; charset=utf-8"),
                ("Content-Encoding", "gzip"),
            ),
        )
        await send_file(response, send)

        raw = messages[0]["headers"]
        content_types = [value for name, value in raw if name == b"content-type"]
        assert content_types == [b"text/javascript; charset=utf-8"]
        assert (b"content-encoding", b"gzip") in raw

    async def test_content_type_from_file_name(self, tmp_path) -> None:
        path = tmp_path / "site.css"
        path.write_text("body {}")
        messages, send = _collector()

        await send_file(FileResponse(path=path), send)

        headers = dict(messages[0]["headers"])
        assert headers[b"content-type"] == b"text/css; charset=utf-8"

    async def test_unknown_type_is_octet_stream(self, tmp_path) -> None:
        path = tmp_path / "blob.unknownext"
        path.write_bytes(b"\x00")
        messages, send = _collector()

        await send_file(FileResponse(path=path), send)

        headers = dict(messages[0]["headers"])
        assert headers[b"content-type"] == b"application/octet-stream"

    async def test_head_only_sends_length_without_body(self, asset) -> None:
        messages, send = _collector()

        await send_file(FileResponse(path=asset, head_only=True), send)

        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"16"
        assert len(messages) == 2
        assert messages[1]["body"] == b""

    async def test_missing_file_raises_before_start(self, tmp_path) -> None:
        messages, send = _collector()

        with pytest.raises(FileNotFoundError):
            await send_file(FileResponse(path=tmp_path / "gone.js"), send)
        assert messages == []
