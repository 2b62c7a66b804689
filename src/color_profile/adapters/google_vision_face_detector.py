"""Google Cloud Vision face detection."""

import asyncio
from dataclasses import dataclass, field

from google.cloud import vision

from color_profile.domain.landmarks import Landmark
from color_profile.domain.selfies import DetectedFace
from color_profile.services.selfies import FaceDetector


@dataclass
class GoogleVisionFaceDetector(FaceDetector):
    """Face detector backed by the Cloud Vision face_detection feature."""

    credentials_file: str | None = None
    client: vision.ImageAnnotatorClient | None = field(default=None, repr=False)

    def _get_client(self) -> vision.ImageAnnotatorClient:
        # Created on first use so wiring does not need credentials.
        if self.client is None:
            if self.credentials_file:
                self.client = vision.ImageAnnotatorClient.from_service_account_file(
                    self.credentials_file
                )
            else:
                self.client = vision.ImageAnnotatorClient()
        return self.client

    async def detect(self, image_bytes: bytes) -> list[DetectedFace]:
        """Run face detection and convert every annotation."""
        client = self._get_client()
        response = await asyncio.to_thread(
            client.face_detection, image=vision.Image(content=image_bytes)
        )
        if response.error.message:
            raise RuntimeError(f"Vision API error: {response.error.message}")
        return [_to_face(annotation) for annotation in response.face_annotations]


def _to_face(annotation: vision.FaceAnnotation) -> DetectedFace:
    return DetectedFace(
        landmarks=[
            Landmark(
                type=landmark.type_.name,
                x=landmark.position.x,
                y=landmark.position.y,
                z=landmark.position.z,
            )
            for landmark in annotation.landmarks
        ],
        detection_confidence=annotation.detection_confidence,
        blurred_likelihood=int(annotation.blurred_likelihood),
        under_exposed_likelihood=int(annotation.under_exposed_likelihood),
    )
