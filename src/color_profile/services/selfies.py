"""Selfie validation against face-detection results."""

import logging
from dataclasses import dataclass
from typing import Protocol

from color_profile.domain.selfies import DetectedFace, SelfieOutcome, SelfieValidation

logger = logging.getLogger(__name__)

# Vision likelihood values treated as a failed quality check (LIKELY, VERY_LIKELY).
REJECTED_LIKELIHOODS = frozenset({4, 5})

_MESSAGES = {
    SelfieOutcome.ACCEPTED: "Image validated successfully.",
    SelfieOutcome.NO_FACE: "No face was detected in the image.",
    SelfieOutcome.MULTIPLE_FACES: (
        "More than one face was detected. Please upload a photo with only your face."
    ),
    SelfieOutcome.LOW_CONFIDENCE: (
        "Could not confidently detect a face. Try a clearer photo."
    ),
    SelfieOutcome.BLURRY: "The image appears to be too blurry.",
    SelfieOutcome.UNDEREXPOSED: "The image appears to be too dark.",
    SelfieOutcome.API_ERROR: "Face detection is unavailable. Please try again.",
}


class FaceDetector(Protocol):
    """Interface for the face-detection service."""

    async def detect(self, image_bytes: bytes) -> list[DetectedFace]:
        """Return every face detected in the image."""


def evaluate_faces(faces: list[DetectedFace], min_confidence: float) -> SelfieValidation:
    """Apply the selfie quality rules to detection results, in order."""
    if not faces:
        return _result(SelfieOutcome.NO_FACE)
    if len(faces) > 1:
        return _result(SelfieOutcome.MULTIPLE_FACES)

    face = faces[0]
    if (
        face.detection_confidence is not None
        and face.detection_confidence < min_confidence
    ):
        return _result(SelfieOutcome.LOW_CONFIDENCE)
    if face.blurred_likelihood in REJECTED_LIKELIHOODS:
        return _result(SelfieOutcome.BLURRY)
    if face.under_exposed_likelihood in REJECTED_LIKELIHOODS:
        return _result(SelfieOutcome.UNDEREXPOSED)
    return SelfieValidation(
        outcome=SelfieOutcome.ACCEPTED,
        message=_MESSAGES[SelfieOutcome.ACCEPTED],
        landmarks=list(face.landmarks),
    )


@dataclass
class SelfieValidator:
    """Runs face detection and turns it into a validation outcome."""

    detector: FaceDetector
    min_confidence: float = 0.75

    async def validate(self, image_bytes: bytes) -> SelfieValidation:
        """Validate a selfie; detector failures become API_ERROR."""
        try:
            faces = await self.detector.detect(image_bytes)
        except Exception:
            logger.exception("Face detection failed")
            return _result(SelfieOutcome.API_ERROR)
        return evaluate_faces(faces, self.min_confidence)


def _result(outcome: SelfieOutcome) -> SelfieValidation:
    return SelfieValidation(outcome=outcome, message=_MESSAGES[outcome])
