"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from color_profile.api.models import OwnerReassignment  # noqa: TC001
from color_profile.domain.landmarks import serialize_landmarks

if TYPE_CHECKING:
    from color_profile.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/sessions/{session_id}", dependencies=[Depends(require_admin)])
async def session_detail(session_id: UUID, request: Request) -> dict[str, object]:
    """Return the full stored state of a session."""
    container: AppContainer = request.app.state.container
    session = container.session_service.get_session(session_id)
    detail = asdict(session)
    detail["landmarks"] = (
        serialize_landmarks(session.landmarks) if session.landmarks else None
    )
    return {"session": detail}


@router.post(
    "/sessions/{session_id}/reset-analysis", dependencies=[Depends(require_admin)]
)
async def reset_analysis(session_id: UUID, request: Request) -> dict[str, object]:
    """Return a failed analysis to questionnaire_complete so it can be retried."""
    container: AppContainer = request.app.state.container
    session = container.session_service.reset_failed_analysis(session_id)
    return {"success": True, "status": session.status.value}


@router.post("/analyses/reassign", dependencies=[Depends(require_admin)])
async def reassign_analyses(
    body: OwnerReassignment, request: Request
) -> dict[str, object]:
    """Move analyses from one owner to another."""
    container: AppContainer = request.app.state.container
    moved = container.analysis_service.reassign_owner(
        body.from_user_id, body.to_user_id
    )
    return {"success": True, "moved": moved}
