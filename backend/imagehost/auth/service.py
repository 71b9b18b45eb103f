"""Shared-password authentication.

The session cookie carries the configured password itself; there is no
token issuance and no server-side session registry. Every request is
checked on its own. Swapping in a signed, expiring token only needs a new
``AuthGate`` implementation; the routers use nothing else.
"""
import logging
import secrets
from typing import Optional

from fastapi import Request

logger = logging.getLogger(__name__)

COOKIE_NAME = "token"


class AuthGate:
    """Validates the session cookie and login password against one secret."""

    def __init__(self, secret: str, cookie_max_age: int = 86400) -> None:
        self._secret = secret
        self._cookie_max_age = cookie_max_age

    def _matches(self, candidate: Optional[str]) -> bool:
        if candidate is None:
            return False
        return secrets.compare_digest(
            candidate.encode("utf-8"), self._secret.encode("utf-8")
        )

    def is_authenticated(self, request: Request) -> bool:
        """True iff the request's ``token`` cookie equals the secret."""
        return self._matches(request.cookies.get(COOKIE_NAME))

    def check_password(self, password: Optional[str]) -> bool:
        return self._matches(password)

    def session_cookie(self) -> str:
        """The ``Set-Cookie`` value issued after a successful login."""
        return (
            f"{COOKIE_NAME}={self._secret}; Path=/; HttpOnly; "
            f"SameSite=Strict; Max-Age={self._cookie_max_age}"
        )
