"""Login endpoint.

Endpoints:
    POST /login - Validate the shared password and issue the session cookie
"""
import logging

from fastapi import APIRouter, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from imagehost.dependencies import get_auth_gate
from imagehost.gallery.renderer import render_login
from .service import AuthGate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

MSG_INVALID_PASSWORD = "Invalid password"


@router.post("/login")
async def login(
    password: str = Form(""),
    gate: AuthGate = Depends(get_auth_gate),
) -> Response:
    """Log in with the shared password.

    Returns:
        302 to ``/`` with the session cookie on success, otherwise the login
        page with an error message (200, no cookie).
    """
    if not gate.check_password(password):
        logger.warning("Failed login attempt")
        return HTMLResponse(render_login(error=MSG_INVALID_PASSWORD))

    response = RedirectResponse(url="/", status_code=302)
    response.headers["Set-Cookie"] = gate.session_cookie()
    logger.info("Login succeeded; session cookie issued")
    return response
