"""Content type resolution by file extension."""
import mimetypes
import os
from typing import Optional


# Types some platform tables lack or map inconsistently
_FALLBACK_MIMES = {
    ".avif": "image/avif",
    ".gz": "application/gzip",
    ".md": "text/markdown",
    ".mjs": "text/javascript",
    ".wasm": "application/wasm",
    ".webmanifest": "application/manifest+json",
    ".webp": "image/webp",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
}


def resolve_content_type(filename: str) -> Optional[str]:
    """
    Map a file name's extension to a MIME type.

    Returns None for unknown extensions; the store supplies its own default.
    """
    ext = os.path.splitext(filename)[1].lower()
    if not ext:
        return None
    if ext in _FALLBACK_MIMES:
        return _FALLBACK_MIMES[ext]
    mimetype, _ = mimetypes.guess_type(f"file{ext}", strict=False)
    return mimetype
