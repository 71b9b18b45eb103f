"""FastAPI dependencies exposing the per-application components.

``create_app`` builds the components from the frozen config and stores them
on ``app.state``; routers reach them only through these functions.
"""
from fastapi import Request

from imagehost.auth.service import AuthGate
from imagehost.storage.service import ImageStore


def get_store(request: Request) -> ImageStore:
    return request.app.state.store


def get_auth_gate(request: Request) -> AuthGate:
    return request.app.state.auth_gate
