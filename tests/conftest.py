"""Shared fixtures: small pre-compressed asset trees on disk."""

from pathlib import Path

import pytest


def write_tree(base: Path, files: dict[str, bytes]) -> Path:
    """Create *files* (relative path -> content) under *base*."""
    base.mkdir(parents=True, exist_ok=True)
    for relative, content in files.items():
        path = base / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
    return base


@pytest.fixture
def compressed_root(tmp_path: Path) -> Path:
    """Compressed variants only; originals live in ``plain_root``."""
    return write_tree(
        tmp_path / "compressed",
        {
            "index.html.gz": b"gz:index",
            "index.html.br": b"br:index",
            "page.html.gz": b"gz:page",
            "about.html.gz": b"gz:about",
            "about.html.br": b"br:about",
            "css/site.css.gz": b"gz:site",
            "css/site.css.br": b"br:site",
            "js/app.js.zz": b"zz:app",
            "js/app.js.gz": b"gz:app",
            "notes.txt": b"not a variant",
            "draft.html.none": b"placeholder",
        },
    )


@pytest.fixture
def plain_root(tmp_path: Path) -> Path:
    return write_tree(
        tmp_path / "plain",
        {
            "index.html": b"<h1>Home</h1>",
            "page.html": b"<h1>Page</h1>",
            "about.html": b"<h1>About</h1>",
            "css/site.css": b"body { color: red; }",
            "js/app.js": b"console.log('hello');",
            "only-plain.html": b"<h1>Plain</h1>",
        },
    )


@pytest.fixture
def shared_root(tmp_path: Path) -> Path:
    """Compressed variants next to their originals in one directory."""
    return write_tree(
        tmp_path / "public",
        {
            "index.html": b"<h1>Home</h1>",
            "index.html.gz": b"gz:index",
            "app.js": b"console.log('hello');",
            "app.js.gz": b"gz:app",
            "app.js.br": b"br:app",
        },
    )
