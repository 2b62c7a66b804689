"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from uuid import UUID

from fastapi import FastAPI, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse

from color_profile.api.admin import router as admin_router
from color_profile.api.models import PaymentNotification, SelfieSubmission
from color_profile.app_logging import configure_logging
from color_profile.containers import AppContainer
from color_profile.domain.analysis import AnalysisRecord, Requester
from color_profile.domain.errors import ColorProfileError
from color_profile.domain.hair_colors import grouped_hair_colors
from color_profile.domain.questionnaire import QuestionnaireAnswers
from color_profile.domain.selfies import SelfieOutcome
from color_profile.domain.sessions import SessionRecord


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(ColorProfileError)
    async def color_profile_error(
        request: Request, exc: ColorProfileError
    ) -> JSONResponse:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.code, "message": exc.message},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/v1/sessions", status_code=status.HTTP_201_CREATED)
    async def start_session(request: Request) -> dict[str, object]:
        """Create a session awaiting payment."""
        state_container: AppContainer = request.app.state.container
        session = state_container.session_service.start_session()
        return {"success": True, "session": session_payload(session)}

    @app.post("/api/v1/sessions/{session_id}/payment")
    async def record_payment(
        session_id: UUID,
        notification: PaymentNotification,
        request: Request,
        x_webhook_token: str | None = Header(default=None),
    ) -> dict[str, object]:
        """Apply a relayed payment outcome."""
        state_container: AppContainer = request.app.state.container
        if x_webhook_token != state_container.settings.payment_webhook_token:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
        try:
            session = state_container.session_service.record_payment(
                session_id, notification.outcome, notification.reference
            )
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        return {"success": True, "session": session_payload(session)}

    @app.post("/api/v1/analysis/{session_id}/selfie", response_model=None)
    async def submit_selfie(
        session_id: UUID, submission: SelfieSubmission, request: Request
    ) -> dict[str, object] | JSONResponse:
        """Validate an uploaded selfie for a paid session."""
        state_container: AppContainer = request.app.state.container
        validation = await state_container.session_service.submit_selfie(
            session_id, submission.image_location
        )
        if not validation.accepted:
            status_code = (
                status.HTTP_502_BAD_GATEWAY
                if validation.outcome is SelfieOutcome.API_ERROR
                else status.HTTP_400_BAD_REQUEST
            )
            return JSONResponse(
                status_code=status_code,
                content={
                    "success": False,
                    "error": validation.outcome.value,
                    "message": validation.message,
                },
            )
        return {"success": True, "message": validation.message}

    @app.post("/api/v1/analysis/{session_id}/questionnaire")
    async def submit_questionnaire(
        session_id: UUID, answers: QuestionnaireAnswers, request: Request
    ) -> dict[str, object]:
        """Store questionnaire answers."""
        state_container: AppContainer = request.app.state.container
        session = state_container.session_service.submit_questionnaire(
            session_id, answers
        )
        return {"success": True, "status": session.status.value}

    @app.post("/api/v1/analysis/{session_id}/start")
    async def start_analysis(
        session_id: UUID,
        request: Request,
        x_user_id: UUID | None = Header(default=None),
        x_user_anonymous: bool = Header(default=False),
    ) -> dict[str, object]:
        """Run the analysis pipeline, or report the analysis already started."""
        state_container: AppContainer = request.app.state.container
        requester = (
            Requester(user_id=x_user_id, is_anonymous=x_user_anonymous)
            if x_user_id is not None
            else None
        )
        started = await state_container.orchestrator.start_analysis(
            session_id, requester
        )
        return {
            "success": True,
            "analysis_id": str(started.analysis_id) if started.analysis_id else None,
            "started": started.started,
        }

    @app.get("/api/v1/analysis/{session_id}/status")
    async def session_status(session_id: UUID, request: Request) -> dict[str, object]:
        """Return the polling view of a session."""
        state_container: AppContainer = request.app.state.container
        view = state_container.session_service.get_status(session_id)
        return {
            "status": view.status.value,
            "analysis_id": str(view.analysis_id) if view.analysis_id else None,
            "expires_at": view.expires_at.isoformat(),
            "expired": view.expired,
        }

    @app.get("/api/v1/results/{analysis_id}")
    async def get_result(analysis_id: UUID, request: Request) -> dict[str, object]:
        """Return a stored analysis."""
        state_container: AppContainer = request.app.state.container
        analysis = state_container.analysis_service.get_analysis(analysis_id)
        return analysis_payload(analysis)

    @app.get("/api/v1/users/{user_id}/analyses")
    async def list_user_analyses(
        user_id: UUID, request: Request
    ) -> dict[str, object]:
        """Return a user's analyses, newest first."""
        state_container: AppContainer = request.app.state.container
        analyses = state_container.analysis_service.list_for_owner(user_id)
        return {"analyses": [analysis_payload(analysis) for analysis in analyses]}

    @app.get("/api/v1/hair-colors")
    async def hair_colors() -> dict[str, object]:
        """Return the natural hair color catalog grouped by category."""
        return {
            "categories": {
                category: [asdict(color) for color in colors]
                for category, colors in grouped_hair_colors().items()
            }
        }

    return app


def session_payload(session: SessionRecord) -> dict[str, object]:
    """Serialize the client-visible part of a session."""
    return {
        "id": str(session.id),
        "status": session.status.value,
        "expires_at": session.expires_at.isoformat(),
        "analysis_id": str(session.analysis_id) if session.analysis_id else None,
    }


def analysis_payload(analysis: AnalysisRecord) -> dict[str, object]:
    return {
        "id": str(analysis.id),
        "result": analysis.result,
        "owner_id": str(analysis.owner_id) if analysis.owner_id else None,
        "created_at": analysis.created_at.isoformat() if analysis.created_at else None,
    }
