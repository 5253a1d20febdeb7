"""
api/routes/v1/auth.py -- Registration, login and session endpoints.

Routes:
  POST /api/v1/auth/register  -- create an account (role=user, status=active)
  POST /api/v1/auth/login     -- password login; sets the session cookie
  POST /api/v1/auth/logout    -- destroys the session; clears the cookie
  GET  /api/v1/auth/me        -- current session snapshot (requires auth)

Security:
  register and login are sync `def` handlers on purpose. FastAPI runs them in
  its worker thread pool, so bcrypt's deliberate cost never blocks the event
  loop for unrelated requests.

  Failures are raised as auth.errors exceptions and turned into responses by
  the AuthGatewayError handler in api/main.py. Wrong password and unknown
  username both surface as 401 invalid_credentials with the same body.

  Cache-Control: no-store on login responses.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import CredentialsRequest, LoginResponse, MeResponse, MessageResponse, RegisterResponse
from auth.dependencies import get_current_session, get_token
from auth.gateway import AuthGateway
from auth.models import SessionSnapshot
from core.config import get_settings

# Auth policy:
# - POST /api/v1/auth/register: public
# - POST /api/v1/auth/login:    public
# - POST /api/v1/auth/logout:   public -- destroying an unknown session is a no-op
# - GET  /api/v1/auth/me:       requires auth (get_current_session)
router = APIRouter()


@router.post("/auth/register", response_model=RegisterResponse, status_code=201)
def register(request: Request, body: CredentialsRequest) -> RegisterResponse:
    """Create a new account. The stored username is trimmed and lowercased."""
    gateway: AuthGateway = request.app.state.gateway
    account_id = gateway.register(body.username, body.password)
    account = gateway.store.get_by_id(account_id)
    return RegisterResponse(account_id=account_id, username=account.identity)


@router.post("/auth/login", response_model=LoginResponse)
def login(request: Request, body: CredentialsRequest) -> JSONResponse:
    """Authenticate with username and password; set the session cookie."""
    settings = get_settings()
    gateway: AuthGateway = request.app.state.gateway
    token = gateway.login(body.username, body.password)
    snapshot = gateway.authenticate(token)

    resp = JSONResponse(
        status_code=200,
        content=LoginResponse(
            username=snapshot.identity,
            role=snapshot.role.value,
            status=snapshot.status.value,
            expires_in=settings.session_ttl_seconds,
        ).model_dump(mode="json"),
    )
    resp.set_cookie(
        settings.session_cookie_name,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.secure_cookies,
        max_age=settings.session_ttl_seconds,
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/auth/logout", response_model=MessageResponse)
async def logout(request: Request) -> JSONResponse:
    """Destroy the caller's session (if any) and clear the cookie. Always 200."""
    gateway: AuthGateway = request.app.state.gateway
    token = get_token(request)
    if token:
        gateway.logout(token)
    resp = JSONResponse(content={"message": "Logged out."})
    resp.delete_cookie(get_settings().session_cookie_name)
    return resp


@router.get("/auth/me", response_model=MeResponse)
async def me(session: SessionSnapshot = Depends(get_current_session)) -> MeResponse:
    """Return the snapshot taken at login, with both gate results."""
    return MeResponse(
        account_id=session.account_id,
        username=session.identity,
        role=session.role.value,
        status=session.status.value,
        privileged=AuthGateway.is_privileged(session),
        fully_privileged=AuthGateway.is_fully_privileged(session),
    )
