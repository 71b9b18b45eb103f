"""Extension → Content-Type lookup for served files."""
from pathlib import PurePath
from typing import Union

DEFAULT_CONTENT_TYPE = "application/octet-stream"

MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
}


def resolve(extension: str) -> str:
    """Return the content type for *extension* (``"png"`` or ``".PNG"``).

    Unknown or empty extensions fall back to ``application/octet-stream``.
    """
    ext = extension.lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return MIME_TYPES.get(ext, DEFAULT_CONTENT_TYPE)


def resolve_for_path(path: Union[str, PurePath]) -> str:
    return resolve(PurePath(path).suffix)
