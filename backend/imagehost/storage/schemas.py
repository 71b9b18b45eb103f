"""Image store data model.

A stored image has no metadata beyond its filesystem entry:
- the filename (restricted to ``[a-zA-Z0-9._-]``) is its identity
- the extension decides whether it belongs to the store at all

Upload rejections carry a short message meant for display on the gallery.
"""
import re
from pathlib import PurePath
from urllib.parse import quote

from pydantic import BaseModel, Field

from . import mime

# Allow-listed image extensions (compared lower-cased)
ALLOWED_EXTENSIONS = frozenset(mime.MIME_TYPES)

# Every character outside this set is replaced with "_" on upload
_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9._-]")

MSG_NO_FILE = "No file selected"
MSG_TYPE_NOT_ALLOWED = "File type not allowed"
MSG_TOO_LARGE = "File too large"


class UploadRejected(ValueError):
    """An upload failed validation; ``str(exc)`` is safe to show the user."""


class StoredImage(BaseModel):
    """A file in the storage root, as shown on the gallery page."""
    filename: str = Field(..., description="Name on disk")

    @property
    def url(self) -> str:
        return "/" + quote(self.filename)


def is_allowed(filename: str) -> bool:
    """True if *filename* ends in an allow-listed extension (any case)."""
    return PurePath(filename).suffix.lower() in ALLOWED_EXTENSIONS


def safe_filename(original: str) -> str:
    """Map an uploaded filename onto the restricted character set.

    Separators are replaced like any other character, so the result is
    always a single path component.

    Examples:
        >>> safe_filename("my photo (1).PNG")
        'my_photo__1_.PNG'
        >>> safe_filename("../../cat.jpg")
        '.._.._cat.jpg'
    """
    return _UNSAFE_CHARS.sub("_", original)
