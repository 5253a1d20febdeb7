"""
API request and response models for AuthGate REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Validation here is transport-level only (types, rough size caps). The
authoritative password and identity rules live in auth/service.py so the
CLI and any other caller get the same checks.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class RoleEnum(str, Enum):
    user = "user"
    admin = "admin"
    administrator = "administrator"


class StatusEnum(str, Enum):
    active = "active"
    blocked = "blocked"


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class CredentialsRequest(BaseModel):
    """Request body for POST /api/v1/auth/register and /auth/login.

    max_length caps keep oversized bodies out of bcrypt; the service applies
    the precise limits.
    """

    username: str = Field(max_length=1024)
    password: str = Field(max_length=1024)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class RegisterResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    account_id: int
    username: str


class LoginResponse(BaseModel):
    """Response for POST /api/v1/auth/login. The token itself travels in the cookie."""

    model_config = ConfigDict(frozen=True)

    username: str
    role: RoleEnum
    status: StatusEnum
    expires_in: int


class MeResponse(BaseModel):
    """Current session snapshot plus the outcome of both role gates."""

    model_config = ConfigDict(frozen=True)

    account_id: int
    username: str
    role: RoleEnum
    status: StatusEnum
    privileged: bool
    fully_privileged: bool


class AdminPanelResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str
    role: RoleEnum
    system_access: bool


class AccountSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    account_id: int
    username: str
    role: RoleEnum
    status: StatusEnum
    last_login: Optional[str] = None


class SystemResponse(BaseModel):
    """Response for GET /api/v1/admin/system (administrator only)."""

    model_config = ConfigDict(frozen=True)

    active_sessions: int
    accounts: list[AccountSummary]


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
