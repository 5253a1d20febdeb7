"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

The session token is read from, in priority order:
  1. The session cookie (Settings.session_cookie_name) -- set by POST /auth/login.
  2. Authorization: Bearer <token> header -- non-browser clients.

try_get_session() is the soft variant (returns None on failure).
get_current_session() wraps it and raises HTTP 401 if unauthenticated.
require_privileged() / require_fully_privileged() wrap get_current_session()
and raise HTTP 403 when the role gate says no.

Both 401 variants (session_missing, session_expired) mean "please log in
again" to the client; the code is kept so the UI can word it differently.

Layer rule: may import from fastapi because this module is part of the
FastAPI dependency injection system. No imports from api/.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from auth.errors import MissingSession, SessionError
from auth.gateway import AuthGateway
from auth.models import SessionSnapshot
from core.config import get_settings


def get_token(request: Request) -> str | None:
    """Return the raw session token carried by the request, if any."""
    token = request.cookies.get(get_settings().session_cookie_name)
    if not token:
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            token = auth_header[7:].strip()
    return token or None


def _resolve(request: Request) -> SessionSnapshot:
    gateway: AuthGateway = request.app.state.gateway
    token = get_token(request)
    if token is None:
        raise MissingSession()
    return gateway.authenticate(token)


def try_get_session(request: Request) -> SessionSnapshot | None:
    """Return the caller's session snapshot, or None. Never raises."""
    try:
        return _resolve(request)
    except SessionError:
        return None


def get_current_session(request: Request) -> SessionSnapshot:
    """Require a live session. Raises HTTP 401 otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        async def route(session: SessionSnapshot = Depends(get_current_session)): ...
    """
    try:
        return _resolve(request)
    except SessionError as exc:
        raise HTTPException(
            status_code=401,
            detail={"code": exc.code, "message": str(exc)},
        ) from exc


def require_privileged(request: Request) -> SessionSnapshot:
    """Require role admin or administrator. 401 if unauthenticated, 403 otherwise."""
    session = get_current_session(request)
    if not AuthGateway.is_privileged(session):
        raise HTTPException(
            status_code=403,
            detail={"code": "forbidden", "message": "Admin access required."},
        )
    return session


def require_fully_privileged(request: Request) -> SessionSnapshot:
    """Require role administrator. 401 if unauthenticated, 403 otherwise."""
    session = get_current_session(request)
    if not AuthGateway.is_fully_privileged(session):
        raise HTTPException(
            status_code=403,
            detail={"code": "forbidden", "message": "Administrator access required."},
        )
    return session
