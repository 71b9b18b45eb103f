"""Image store backed by a single flat directory.

The directory listing is the only index: there is no metadata database, no
locking and no rename. Concurrent uploads under the same sanitized name race
at the filesystem level and the last writer wins.
"""
import logging
from pathlib import Path
from typing import List, Union

from .paths import PathTraversalError, resolve_within_root
from .schemas import (
    MSG_NO_FILE,
    MSG_TOO_LARGE,
    MSG_TYPE_NOT_ALLOWED,
    UploadRejected,
    is_allowed,
    safe_filename,
)

logger = logging.getLogger(__name__)


class ImageStore:
    """List, write and delete images under one storage root."""

    def __init__(self, root: Union[str, Path], max_upload_bytes: int) -> None:
        self._root = Path(root)
        self._max_upload_bytes = max_upload_bytes
        self._ensure_root()

    def _ensure_root(self) -> None:
        """Create the storage root if it does not exist yet."""
        self._root.mkdir(parents=True, exist_ok=True)

    def list(self) -> List[str]:
        """Return allow-listed image filenames in directory listing order.

        Read failures (missing directory, permissions) yield an empty list.
        """
        try:
            return [
                entry.name
                for entry in self._root.iterdir()
                if is_allowed(entry.name) and entry.is_file()
            ]
        except OSError as e:
            logger.warning(f"Cannot list {self._root}: {e}")
            return []

    def write(self, original_filename: str, content: bytes) -> str:
        """Store an uploaded image.

        Args:
            original_filename: Filename as sent by the client.
            content: Full file content.

        Returns:
            The sanitized filename the image was stored under.

        Raises:
            UploadRejected: Empty filename, disallowed extension or oversize
                content.
            OSError: If the file cannot be written.
        """
        if not original_filename:
            raise UploadRejected(MSG_NO_FILE)

        filename = safe_filename(original_filename)
        if not is_allowed(filename):
            raise UploadRejected(MSG_TYPE_NOT_ALLOWED)

        if len(content) > self._max_upload_bytes:
            raise UploadRejected(MSG_TOO_LARGE)

        try:
            target = resolve_within_root(self._root, filename)
        except PathTraversalError:
            raise UploadRejected(MSG_TYPE_NOT_ALLOWED)

        # Existing files with the same name are replaced
        target.write_bytes(content)
        logger.info(f"Saved image: {target.name} ({len(content)} bytes)")
        return target.name

    def delete(self, filename: str) -> bool:
        """Best-effort removal of a single image.

        Names with separators, names outside the allow-list and anything
        resolving outside the root are ignored. Filesystem errors are
        logged and swallowed.

        Returns:
            True if a file was removed.
        """
        name = (filename or "").strip()
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            logger.warning(f"Ignoring delete of invalid filename {filename!r}")
            return False
        if not is_allowed(name):
            logger.warning(f"Ignoring delete of non-image {filename!r}")
            return False

        try:
            target = resolve_within_root(self._root, name)
            if target.parent != self._root.resolve():
                raise PathTraversalError(f"{name!r} is not a top-level entry")
            target.unlink()
        except (OSError, ValueError) as e:
            logger.info(f"Delete of {name!r} skipped: {e}")
            return False

        logger.info(f"Deleted image: {name}")
        return True

    def resolve(self, raw_path: str) -> Path:
        """Absolute path of a requested file, checked against the root.

        Raises:
            PathTraversalError: If the path escapes the storage root.
        """
        return resolve_within_root(self._root, raw_path)
