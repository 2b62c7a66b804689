"""Sampling region geometry derived from facial landmarks."""

from collections.abc import Sequence

from color_profile.domain import landmarks as lm
from color_profile.domain.colors import FaceRegions, Region, round_half_up
from color_profile.domain.landmarks import Landmark, find_landmark

BASE_REGION_RATIO = 0.05
MIN_BASE_REGION_SIZE = 10
EYE_REGION_RATIO = 0.3
MIN_EYE_REGION_SIZE = 4
EYEBROW_WIDTH_RATIO = 0.6
EYEBROW_HEIGHT_RATIO = 0.2
MIN_EYEBROW_WIDTH = 6
MIN_EYEBROW_HEIGHT = 3


def base_region_size(image_width: int, image_height: int) -> int:
    """Return the cheek/forehead sampling size for an image."""
    return max(
        MIN_BASE_REGION_SIZE,
        round_half_up(min(image_width, image_height) * BASE_REGION_RATIO),
    )


def calculate_face_regions(
    landmarks: Sequence[Landmark] | None, image_width: int, image_height: int
) -> FaceRegions:
    """Derive cheek, forehead, eye and eyebrow regions for an image."""
    if not landmarks or image_width <= 0 or image_height <= 0:
        return FaceRegions()

    base = base_region_size(image_width, image_height)
    bounds = (image_width, image_height)

    def centered(
        landmark_type: str,
        width: float,
        height: float,
        dx: float = 0,
        dy: float = 0,
    ) -> Region | None:
        point = find_landmark(landmarks, landmark_type)
        if point is None or point.x is None or point.y is None:
            return None
        return centered_region(point.x + dx, point.y + dy, width, height, *bounds)

    eye_size = max(MIN_EYE_REGION_SIZE, round_half_up(base * EYE_REGION_RATIO))
    eye_shift = round_half_up(eye_size * 0.5)
    brow_width = max(MIN_EYEBROW_WIDTH, round_half_up(base * EYEBROW_WIDTH_RATIO))
    brow_height = max(MIN_EYEBROW_HEIGHT, round_half_up(base * EYEBROW_HEIGHT_RATIO))

    return FaceRegions(
        left_cheek=centered(lm.LEFT_CHEEK_CENTER, base, base),
        right_cheek=centered(lm.RIGHT_CHEEK_CENTER, base, base),
        # Shifted up so the sample sits above the brows.
        forehead=centered(lm.FOREHEAD_GLABELLA, base, base, dy=-2 * base),
        left_eye=_eye_region(
            landmarks,
            (
                lm.LEFT_EYE_LEFT_CORNER,
                lm.LEFT_EYE_RIGHT_CORNER,
                lm.LEFT_EYE_TOP_BOUNDARY,
                lm.LEFT_EYE_BOTTOM_BOUNDARY,
            ),
            eye_size,
            -eye_shift,
            bounds,
        ),
        right_eye=_eye_region(
            landmarks,
            (
                lm.RIGHT_EYE_LEFT_CORNER,
                lm.RIGHT_EYE_RIGHT_CORNER,
                lm.RIGHT_EYE_TOP_BOUNDARY,
                lm.RIGHT_EYE_BOTTOM_BOUNDARY,
            ),
            eye_size,
            eye_shift,
            bounds,
        ),
        left_eyebrow=centered(
            lm.LEFT_EYEBROW_UPPER_MIDPOINT, brow_width, brow_height, dy=brow_height
        ),
        right_eyebrow=centered(
            lm.RIGHT_EYEBROW_UPPER_MIDPOINT, brow_width, brow_height, dy=brow_height
        ),
    )


def centered_region(  # noqa: PLR0913
    center_x: float | None,
    center_y: float | None,
    width: float,
    height: float,
    image_width: int,
    image_height: int,
) -> Region | None:
    """Return a rectangle centred on a point, or None if it leaves the image."""
    if center_x is None or center_y is None or width <= 0 or height <= 0:
        return None

    region_width = max(1, round_half_up(width))
    region_height = max(1, round_half_up(height))
    left = round_half_up(center_x - region_width / 2)
    top = round_half_up(center_y - region_height / 2)

    if (
        left < 0
        or top < 0
        or left + region_width > image_width
        or top + region_height > image_height
    ):
        return None
    return Region(left=left, top=top, width=region_width, height=region_height)


def _eye_region(
    landmarks: Sequence[Landmark],
    corner_types: tuple[str, str, str, str],
    size: int,
    shift: int,
    bounds: tuple[int, int],
) -> Region | None:
    left_type, right_type, top_type, bottom_type = corner_types
    left_corner = find_landmark(landmarks, left_type)
    right_corner = find_landmark(landmarks, right_type)
    top = find_landmark(landmarks, top_type)
    bottom = find_landmark(landmarks, bottom_type)
    if (
        left_corner is None
        or right_corner is None
        or top is None
        or bottom is None
        or left_corner.x is None
        or right_corner.x is None
        or top.y is None
        or bottom.y is None
    ):
        return None
    # Offset toward the temple, away from the iris/sclera edge.
    center_x = (left_corner.x + right_corner.x) / 2 + shift
    center_y = (top.y + bottom.y) / 2
    return centered_region(center_x, center_y, size, size, *bounds)
