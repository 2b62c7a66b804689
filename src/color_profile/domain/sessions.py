"""Domain models for analysis sessions."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from color_profile.domain.landmarks import Landmark


class SessionStatus(StrEnum):
    """Persisted lifecycle states of an analysis session."""

    PENDING_PAYMENT = "pending_payment"
    PAYMENT_COMPLETE = "payment_complete"
    PAYMENT_FAILED = "payment_failed"
    SELFIE_VALIDATION_FAILED = "selfie_validation_failed"
    AWAITING_QUESTIONNAIRE = "awaiting_questionnaire"
    QUESTIONNAIRE_COMPLETE = "questionnaire_complete"
    ANALYSIS_PENDING = "analysis_pending"
    ANALYSIS_FAILED = "analysis_failed"
    ANALYSIS_COMPLETE = "analysis_complete"


class PaymentOutcome(StrEnum):
    """Outcome relayed by the payment provider glue."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class SessionRecord:
    """Represents a persisted analysis session."""

    id: UUID
    status: SessionStatus
    expires_at: datetime
    payment_reference: str | None = None
    image_location: str | None = None
    landmarks: list[Landmark] | None = None
    questionnaire: dict[str, object] | None = None
    analysis_id: UUID | None = None

    def is_expired(self, now: datetime) -> bool:
        """Return True once the session is past its expiry instant."""
        return now >= self.expires_at


@dataclass(frozen=True)
class SessionStatusView:
    """Status snapshot returned to polling clients."""

    status: SessionStatus
    analysis_id: UUID | None
    expires_at: datetime
    expired: bool


@dataclass(frozen=True)
class AnalysisClaim:
    """Result of trying to move a session into analysis."""

    session: SessionRecord
    claimed: bool
