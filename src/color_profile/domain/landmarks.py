"""Facial landmark models."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

LEFT_CHEEK_CENTER = "LEFT_CHEEK_CENTER"
RIGHT_CHEEK_CENTER = "RIGHT_CHEEK_CENTER"
FOREHEAD_GLABELLA = "FOREHEAD_GLABELLA"
LEFT_EYE_LEFT_CORNER = "LEFT_EYE_LEFT_CORNER"
LEFT_EYE_RIGHT_CORNER = "LEFT_EYE_RIGHT_CORNER"
LEFT_EYE_TOP_BOUNDARY = "LEFT_EYE_TOP_BOUNDARY"
LEFT_EYE_BOTTOM_BOUNDARY = "LEFT_EYE_BOTTOM_BOUNDARY"
RIGHT_EYE_LEFT_CORNER = "RIGHT_EYE_LEFT_CORNER"
RIGHT_EYE_RIGHT_CORNER = "RIGHT_EYE_RIGHT_CORNER"
RIGHT_EYE_TOP_BOUNDARY = "RIGHT_EYE_TOP_BOUNDARY"
RIGHT_EYE_BOTTOM_BOUNDARY = "RIGHT_EYE_BOTTOM_BOUNDARY"
LEFT_EYEBROW_UPPER_MIDPOINT = "LEFT_EYEBROW_UPPER_MIDPOINT"
RIGHT_EYEBROW_UPPER_MIDPOINT = "RIGHT_EYEBROW_UPPER_MIDPOINT"

# Older stored sessions carry integer tags instead of names.
NUMERIC_LANDMARK_TYPES: dict[int, str] = {
    1: LEFT_CHEEK_CENTER,
    2: RIGHT_CHEEK_CENTER,
    7: FOREHEAD_GLABELLA,
    17: LEFT_EYE_LEFT_CORNER,
    18: LEFT_EYE_RIGHT_CORNER,
    19: LEFT_EYE_TOP_BOUNDARY,
    20: LEFT_EYE_BOTTOM_BOUNDARY,
    21: RIGHT_EYE_LEFT_CORNER,
    22: RIGHT_EYE_RIGHT_CORNER,
    23: RIGHT_EYE_TOP_BOUNDARY,
    24: RIGHT_EYE_BOTTOM_BOUNDARY,
}


@dataclass(frozen=True)
class Landmark:
    """A detected facial reference point; any field may be missing."""

    type: str | None
    x: float | None = None
    y: float | None = None
    z: float | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, object]) -> "Landmark":
        """Build a landmark from the face-detection wire shape."""
        position = raw.get("position")
        if not isinstance(position, Mapping):
            position = {}
        return cls(
            type=_landmark_type(raw.get("type")),
            x=_as_float(position.get("x")),
            y=_as_float(position.get("y")),
            z=_as_float(position.get("z")),
        )

    def to_dict(self) -> dict[str, object]:
        """Serialize to the face-detection wire shape."""
        return {
            "type": self.type,
            "position": {"x": self.x, "y": self.y, "z": self.z},
        }


def parse_landmarks(raw: object) -> list[Landmark] | None:
    """Parse a stored landmark list, skipping malformed entries."""
    if not isinstance(raw, list):
        return None
    return [Landmark.from_dict(item) for item in raw if isinstance(item, Mapping)]


def serialize_landmarks(landmarks: Iterable[Landmark]) -> list[dict[str, object]]:
    return [landmark.to_dict() for landmark in landmarks]


def find_landmark(landmarks: Iterable[Landmark], landmark_type: str) -> Landmark | None:
    """Return the first landmark whose type matches, ignoring case."""
    wanted = landmark_type.upper()
    for landmark in landmarks:
        if landmark.type is not None and landmark.type.upper() == wanted:
            return landmark
    return None


def _landmark_type(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return NUMERIC_LANDMARK_TYPES.get(value, str(value))
    return str(value)


def _as_float(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    return None
