"""Gallery endpoints.

Endpoints:
    GET  /        - Gallery when logged in, login form otherwise
    POST /upload  - Store one image (multipart field ``file``)
    POST /delete  - Remove one image (form field ``filename``)

Mutating endpoints redirect anonymous callers to ``/`` without touching the
store; the auth check runs before the request body is parsed.
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from starlette.datastructures import UploadFile

from imagehost.auth.service import AuthGate
from imagehost.dependencies import get_auth_gate, get_store
from imagehost.storage.schemas import MSG_NO_FILE, UploadRejected
from imagehost.storage.service import ImageStore
from .renderer import render_gallery, render_login

logger = logging.getLogger(__name__)

router = APIRouter(tags=["gallery"])

MSG_UPLOAD_FAILED = "Upload failed"


def _to_gallery() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=302)


@router.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    gate: AuthGate = Depends(get_auth_gate),
    store: ImageStore = Depends(get_store),
) -> HTMLResponse:
    """Render the gallery for authenticated users, else the login form."""
    if not gate.is_authenticated(request):
        return HTMLResponse(render_login())
    return HTMLResponse(render_gallery(store.list()))


@router.post("/upload")
async def upload(
    request: Request,
    gate: AuthGate = Depends(get_auth_gate),
    store: ImageStore = Depends(get_store),
) -> Response:
    """Store an uploaded image.

    Returns:
        302 to ``/`` once stored (or when not logged in). A rejected upload
        re-renders the gallery with the reason inline (200).
    """
    if not gate.is_authenticated(request):
        return _to_gallery()

    form = await request.form()
    upload_file = form.get("file")

    try:
        if not isinstance(upload_file, UploadFile):
            raise UploadRejected(MSG_NO_FILE)
        content = await upload_file.read()
        stored = store.write(upload_file.filename or "", content)
    except UploadRejected as e:
        logger.info(f"Upload rejected: {e}")
        return HTMLResponse(render_gallery(store.list(), error=str(e)))
    except OSError as e:
        logger.error(f"Upload failed: {e}")
        return HTMLResponse(render_gallery(store.list(), error=MSG_UPLOAD_FAILED))
    finally:
        await form.close()

    logger.info(f"Upload stored as {stored}")
    return _to_gallery()


@router.post("/delete")
async def delete(
    request: Request,
    gate: AuthGate = Depends(get_auth_gate),
    store: ImageStore = Depends(get_store),
) -> RedirectResponse:
    """Delete an image by name. Always redirects to ``/``."""
    if not gate.is_authenticated(request):
        return _to_gallery()

    form = await request.form()
    filename = form.get("filename")
    store.delete(filename if isinstance(filename, str) else "")
    return _to_gallery()
