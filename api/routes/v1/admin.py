"""
api/routes/v1/admin.py -- Role-gated endpoints.

  GET /api/v1/admin         -- admin panel; role admin or administrator
  GET /api/v1/admin/system  -- account overview; role administrator only

Gates read the session snapshot taken at login, not the live account row.
A role change made from the CLI applies from the user's next login.

Read-only. Account status and role changes are done from the CLI (main.py).
"""

from fastapi import APIRouter, Depends, Request

from api.models import AccountSummary, AdminPanelResponse, SystemResponse
from auth.dependencies import require_fully_privileged, require_privileged
from auth.gateway import AuthGateway
from auth.models import SessionSnapshot

router = APIRouter()


@router.get("/admin", response_model=AdminPanelResponse)
async def admin_panel(session: SessionSnapshot = Depends(require_privileged)) -> AdminPanelResponse:
    return AdminPanelResponse(
        username=session.identity,
        role=session.role.value,
        system_access=AuthGateway.is_fully_privileged(session),
    )


@router.get("/admin/system", response_model=SystemResponse)
def system_overview(
    request: Request,
    session: SessionSnapshot = Depends(require_fully_privileged),
) -> SystemResponse:
    """List every account and the number of live sessions."""
    gateway: AuthGateway = request.app.state.gateway
    accounts = gateway.store.list_accounts()
    return SystemResponse(
        active_sessions=len(gateway.sessions),
        accounts=[
            AccountSummary(
                account_id=a.id,
                username=a.identity,
                role=a.role.value,
                status=a.status.value,
                last_login=a.last_login.isoformat() if a.last_login else None,
            )
            for a in accounts
        ],
    )
