"""Models for selfie validation results."""

from dataclasses import dataclass, field
from enum import StrEnum

from color_profile.domain.landmarks import Landmark


class SelfieOutcome(StrEnum):
    """Result of validating an uploaded selfie."""

    ACCEPTED = "ACCEPTED"
    NO_FACE = "NO_FACE_DETECTED"
    MULTIPLE_FACES = "MULTIPLE_FACES_DETECTED"
    LOW_CONFIDENCE = "LOW_DETECTION_CONFIDENCE"
    BLURRY = "IMAGE_TOO_BLURRY"
    UNDEREXPOSED = "IMAGE_UNDEREXPOSED"
    API_ERROR = "VALIDATION_API_ERROR"


@dataclass(frozen=True)
class DetectedFace:
    """A single face returned by the detection service."""

    landmarks: list[Landmark] = field(default_factory=list)
    detection_confidence: float | None = None
    blurred_likelihood: int | None = None
    under_exposed_likelihood: int | None = None


@dataclass(frozen=True)
class SelfieValidation:
    """Outcome of a selfie validation attempt."""

    outcome: SelfieOutcome
    message: str
    landmarks: list[Landmark] | None = None

    @property
    def accepted(self) -> bool:
        return self.outcome is SelfieOutcome.ACCEPTED
