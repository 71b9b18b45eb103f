"""Static file serving for the storage root.

Endpoints:
    GET /{file_path}  - Stream a stored file with a long-lived cache header

This router has a catch-all path and must be included after every other
router.
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, PlainTextResponse, Response

from imagehost.dependencies import get_store
from . import mime
from .service import ImageStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["storage"])

CACHE_CONTROL = "public, max-age=31536000"


@router.get("/{file_path:path}")
async def serve_file(file_path: str, store: ImageStore = Depends(get_store)) -> Response:
    """Stream a file from the storage root.

    The path arrives percent-decoded. Anything that resolves outside the
    root, or is not a regular file, is a plain 404.

    Returns:
        FileResponse with Content-Type and Cache-Control, 404 ``Not Found``
        or 500 ``Server Error``.
    """
    try:
        target = store.resolve(file_path)
        if not target.is_file():
            return PlainTextResponse("Not Found", status_code=404)
        stat_result = target.stat()
    except ValueError as e:
        logger.warning(f"Rejected file request {file_path!r}: {e}")
        return PlainTextResponse("Not Found", status_code=404)
    except OSError as e:
        logger.error(f"Failed to serve {file_path!r}: {e}")
        return PlainTextResponse("Server Error", status_code=500)

    return FileResponse(
        path=target,
        media_type=mime.resolve_for_path(target.name),
        headers={"Cache-Control": CACHE_CONTROL},
        stat_result=stat_result,
    )
