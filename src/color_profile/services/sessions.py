"""Session state machine for the paid analysis flow."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from color_profile.domain.errors import (
    InvalidSessionStateError,
    SessionDataIncompleteError,
    SessionExpiredError,
    SessionNotFoundError,
)
from color_profile.domain.questionnaire import QuestionnaireAnswers
from color_profile.domain.selfies import SelfieOutcome, SelfieValidation
from color_profile.domain.sessions import (
    AnalysisClaim,
    PaymentOutcome,
    SessionRecord,
    SessionStatus,
    SessionStatusView,
)
from color_profile.services.selfies import SelfieValidator

logger = logging.getLogger(__name__)

S = SessionStatus

# Every write goes through one of these edges; nothing moves backwards except
# the operator reset out of analysis_failed.
ALLOWED_TRANSITIONS: frozenset[tuple[SessionStatus, SessionStatus]] = frozenset(
    {
        (S.PENDING_PAYMENT, S.PAYMENT_COMPLETE),
        (S.PENDING_PAYMENT, S.PAYMENT_FAILED),
        (S.PAYMENT_COMPLETE, S.AWAITING_QUESTIONNAIRE),
        (S.PAYMENT_COMPLETE, S.SELFIE_VALIDATION_FAILED),
        (S.SELFIE_VALIDATION_FAILED, S.AWAITING_QUESTIONNAIRE),
        (S.SELFIE_VALIDATION_FAILED, S.SELFIE_VALIDATION_FAILED),
        (S.AWAITING_QUESTIONNAIRE, S.QUESTIONNAIRE_COMPLETE),
        (S.QUESTIONNAIRE_COMPLETE, S.ANALYSIS_PENDING),
        (S.QUESTIONNAIRE_COMPLETE, S.ANALYSIS_FAILED),
        (S.ANALYSIS_PENDING, S.ANALYSIS_COMPLETE),
        (S.ANALYSIS_PENDING, S.ANALYSIS_FAILED),
        (S.ANALYSIS_FAILED, S.QUESTIONNAIRE_COMPLETE),
    }
)

SELFIE_STATUSES = frozenset({S.PAYMENT_COMPLETE, S.SELFIE_VALIDATION_FAILED})
IN_ANALYSIS_STATUSES = frozenset({S.ANALYSIS_PENDING, S.ANALYSIS_COMPLETE})


class BlobStore(Protocol):
    """Interface for reading and deleting stored selfie blobs."""

    async def get(self, location: str) -> bytes:
        """Return the blob bytes stored at a location."""

    async def delete(self, location: str) -> None:
        """Delete the blob stored at a location."""


class SessionRepository(Protocol):
    """Persistence interface for analysis sessions."""

    def create_session(
        self, status: SessionStatus, expires_at: datetime
    ) -> SessionRecord:
        """Create a new session and return it."""

    def get_session(self, session_id: UUID) -> SessionRecord | None:
        """Return a session by id, if present."""

    def update_status(
        self,
        session_id: UUID,
        expected_status: SessionStatus,
        status: SessionStatus,
        fields: dict[str, object] | None = None,
    ) -> SessionRecord | None:
        """Write status and fields only if the row still has expected_status.

        Returns the updated session, or None when the row's status differed.
        """


@dataclass
class SessionService:
    """Guarded transitions over the session lifecycle."""

    session_repository: SessionRepository
    blob_store: BlobStore
    selfie_validator: SelfieValidator
    session_ttl: timedelta = field(default_factory=lambda: timedelta(minutes=60))

    def start_session(self) -> SessionRecord:
        """Create a session awaiting payment."""
        expires_at = _now() + self.session_ttl
        session = self.session_repository.create_session(
            status=S.PENDING_PAYMENT, expires_at=expires_at
        )
        logger.info("Created session %s expiring at %s", session.id, expires_at)
        return session

    def record_payment(
        self, session_id: UUID, outcome: PaymentOutcome, reference: str | None
    ) -> SessionRecord:
        """Apply a payment notification; repeated notifications are no-ops."""
        if outcome == PaymentOutcome.SUCCEEDED and not reference:
            raise ValueError("A successful payment requires a payment reference")
        session = self._get_live_session(session_id)

        if outcome == PaymentOutcome.SUCCEEDED:
            if session.status is S.PENDING_PAYMENT:
                return self._transition(
                    session, S.PAYMENT_COMPLETE, payment_reference=reference
                )
            if session.payment_reference == reference:
                logger.info("Duplicate payment notification for %s", session_id)
                return session
        else:
            if session.status is S.PENDING_PAYMENT:
                return self._transition(session, S.PAYMENT_FAILED)
            if session.status is S.PAYMENT_FAILED:
                return session
        raise InvalidSessionStateError(session_id, session.status)

    async def submit_selfie(
        self, session_id: UUID, image_location: str
    ) -> SelfieValidation:
        """Validate an uploaded selfie and advance or reject the session."""
        session = self._get_live_session(session_id)
        if session.status not in SELFIE_STATUSES:
            raise InvalidSessionStateError(session_id, session.status)

        try:
            image_bytes = await self.blob_store.get(image_location)
        except Exception:
            logger.exception("Could not fetch selfie %s", image_location)
            await self._discard_blob(image_location)
            return SelfieValidation(
                outcome=SelfieOutcome.API_ERROR,
                message="The uploaded image could not be read.",
            )

        validation = await self.selfie_validator.validate(image_bytes)
        if validation.outcome is SelfieOutcome.API_ERROR:
            await self._discard_blob(image_location)
            return validation
        if not validation.accepted:
            logger.info("Selfie rejected for %s: %s", session_id, validation.outcome)
            await self._discard_blob(image_location)
            self._transition(session, S.SELFIE_VALIDATION_FAILED)
            return validation

        # Detection is awaited, so expiry and status are re-checked at write time.
        try:
            self._get_live_session(session_id)
            self._transition(
                session,
                S.AWAITING_QUESTIONNAIRE,
                image_location=image_location,
                landmarks=validation.landmarks or [],
            )
        except (SessionExpiredError, InvalidSessionStateError):
            await self._discard_blob(image_location)
            raise
        return validation

    def submit_questionnaire(
        self, session_id: UUID, answers: QuestionnaireAnswers
    ) -> SessionRecord:
        """Store questionnaire answers for a session awaiting them."""
        session = self._get_live_session(session_id)
        if session.status is not S.AWAITING_QUESTIONNAIRE:
            raise InvalidSessionStateError(session_id, session.status)
        return self._transition(
            session, S.QUESTIONNAIRE_COMPLETE, questionnaire=answers.model_dump()
        )

    def claim_analysis(self, session_id: UUID) -> AnalysisClaim:
        """Move a session into analysis_pending, at most once.

        A session already pending or complete is returned unclaimed. A lost
        compare-and-set is resolved by re-reading, so concurrent callers see
        exactly one claim.
        """
        session = self._get_live_session(session_id)
        if session.status in IN_ANALYSIS_STATUSES:
            return AnalysisClaim(session=session, claimed=False)
        if session.status is not S.QUESTIONNAIRE_COMPLETE:
            raise InvalidSessionStateError(session_id, session.status)

        missing = _missing_pipeline_inputs(session)
        if missing:
            logger.error("Session %s cannot be analyzed, missing %s", session_id, missing)
            self.session_repository.update_status(
                session_id, S.QUESTIONNAIRE_COMPLETE, S.ANALYSIS_FAILED
            )
            raise SessionDataIncompleteError(session_id, missing)

        claimed = self.session_repository.update_status(
            session_id, S.QUESTIONNAIRE_COMPLETE, S.ANALYSIS_PENDING
        )
        if claimed is None:
            current = self._get_session(session_id)
            if current.status in IN_ANALYSIS_STATUSES:
                return AnalysisClaim(session=current, claimed=False)
            raise InvalidSessionStateError(session_id, current.status)
        logger.info("Session %s entered analysis_pending", session_id)
        return AnalysisClaim(session=claimed, claimed=True)

    def complete_analysis(self, session_id: UUID, analysis_id: UUID) -> SessionRecord:
        """Finish an in-flight analysis with the stored analysis id."""
        session = self._get_session(session_id)
        return self._transition(session, S.ANALYSIS_COMPLETE, analysis_id=analysis_id)

    def fail_analysis(self, session_id: UUID) -> SessionRecord:
        """Mark an in-flight analysis as failed."""
        session = self._get_session(session_id)
        return self._transition(session, S.ANALYSIS_FAILED)

    def reset_failed_analysis(self, session_id: UUID) -> SessionRecord:
        """Operator action: return a failed analysis to questionnaire_complete."""
        session = self._get_live_session(session_id)
        if session.status is not S.ANALYSIS_FAILED:
            raise InvalidSessionStateError(session_id, session.status)
        return self._transition(session, S.QUESTIONNAIRE_COMPLETE)

    def get_status(self, session_id: UUID) -> SessionStatusView:
        """Return the polling view of a session."""
        session = self._get_session(session_id)
        return SessionStatusView(
            status=session.status,
            analysis_id=(
                session.analysis_id if session.status is S.ANALYSIS_COMPLETE else None
            ),
            expires_at=session.expires_at,
            expired=session.is_expired(_now()),
        )

    def get_session(self, session_id: UUID) -> SessionRecord:
        return self._get_session(session_id)

    def _get_session(self, session_id: UUID) -> SessionRecord:
        session = self.session_repository.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def _get_live_session(self, session_id: UUID) -> SessionRecord:
        session = self._get_session(session_id)
        if session.is_expired(_now()):
            raise SessionExpiredError(session_id)
        return session

    def _transition(
        self, session: SessionRecord, status: SessionStatus, **fields: object
    ) -> SessionRecord:
        if (session.status, status) not in ALLOWED_TRANSITIONS:
            raise InvalidSessionStateError(session.id, session.status)
        updated = self.session_repository.update_status(
            session.id, session.status, status, fields or None
        )
        if updated is None:
            current = self.session_repository.get_session(session.id)
            current_status = current.status if current else session.status
            raise InvalidSessionStateError(session.id, current_status)
        logger.info("Session %s: %s -> %s", session.id, session.status, status)
        return updated

    async def _discard_blob(self, image_location: str) -> None:
        try:
            await self.blob_store.delete(image_location)
        except Exception:
            logger.exception("Failed to delete rejected selfie %s", image_location)


def _missing_pipeline_inputs(session: SessionRecord) -> list[str]:
    missing = []
    if not session.image_location:
        missing.append("image_location")
    if not session.landmarks:
        missing.append("landmarks")
    if not session.questionnaire:
        missing.append("questionnaire")
    return missing


def _now() -> datetime:
    return datetime.now(tz=UTC)
