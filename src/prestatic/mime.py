"""MIME type lookup for served assets.

Wraps a private ``mimetypes.MimeTypes`` instance so registering web
types here does not touch the process-wide table.
"""

import mimetypes

DEFAULT_CONTENT_TYPE = "application/octet-stream"

_types = mimetypes.MimeTypes()
for _type, _ext in (
    ("text/javascript", ".mjs"),
    ("application/wasm", ".wasm"),
    ("application/manifest+json", ".webmanifest"),
    ("font/woff2", ".woff2"),
    ("image/avif", ".avif"),
):
    _types.add_type(_type, _ext)

# Non-text types that are textual and conventionally UTF-8
_UTF8_TYPES = frozenset(
    {
        "application/javascript",
        "application/json",
        "application/manifest+json",
        "application/xml",
        "application/xhtml+xml",
        "application/ld+json",
    }
)


def lookup(filename: str) -> str | None:
    """Content type for *filename*, or None when the extension is unknown."""
    content_type, _ = _types.guess_type(filename, strict=False)
    return content_type


def charset_for(content_type: str) -> str | None:
    """Default charset for *content_type*, or None for binary types."""
    base = content_type.split(";", 1)[0].strip().lower()
    if base.startswith("text/") or base in _UTF8_TYPES:
        return "utf-8"
    return None


def content_type_header(filename: str) -> str:
    """Full ``Content-Type`` value for *filename*, charset included when known."""
    content_type = lookup(filename) or DEFAULT_CONTENT_TYPE
    charset = charset_for(content_type)
    if charset:
        return f"{content_type}; charset={charset}"
    return content_type
