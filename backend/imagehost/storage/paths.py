"""Path sanitizing and root containment for user-supplied paths.

Every filesystem operation that takes a path from a request goes through
``resolve_within_root``. ``sanitize`` only tidies the string; the
containment check on the resolved absolute path is what keeps reads, writes
and deletes inside the storage root.
"""
from __future__ import annotations

import posixpath
import re
from pathlib import Path
from typing import Union

_LEADING_PARENTS = re.compile(r"^(?:\.\./)+")


class PathTraversalError(ValueError):
    """Raised when a path resolves outside the storage root."""


def sanitize(raw_path: str) -> str:
    """Normalize a decoded URL path into a root-relative path.

    Backslashes count as separators. Leading slashes and any leading run of
    ``../`` segments are stripped, then the path is lexically normalized.
    The two steps repeat until nothing changes, so a ``..`` produced by
    normalization (``a/../../b``) is stripped too.

    Returns:
        A relative POSIX path, or ``""`` for the root itself.
    """
    path = raw_path.replace("\\", "/")
    while True:
        stripped = _LEADING_PARENTS.sub("", path.lstrip("/"))
        normalized = posixpath.normpath(stripped) if stripped else ""
        if normalized in (".", ".."):
            normalized = ""
        if normalized == path:
            return normalized
        path = normalized


def resolve_within_root(root: Union[str, Path], raw_path: str) -> Path:
    """Resolve *raw_path* under *root* and verify it stays inside.

    Symlinks are followed, so a link pointing out of the root is rejected
    as well.

    Raises:
        PathTraversalError: If the resolved path is not *root* or below it.
    """
    base = Path(root).resolve()
    try:
        target = (base / sanitize(raw_path)).resolve()
    except RuntimeError as exc:
        # Symlink loop on older interpreters
        raise OSError(f"Cannot resolve {raw_path!r}: {exc}") from exc

    if target != base and base not in target.parents:
        raise PathTraversalError(
            f"Path traversal blocked: {raw_path!r} resolves outside {base}"
        )
    return target
