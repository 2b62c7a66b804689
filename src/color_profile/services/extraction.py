"""Facial color extraction: landmarks plus image to calibrated colors."""

import asyncio
import logging
from collections.abc import Sequence

from PIL import Image

from color_profile.domain.colors import ExtractedColors, FaceRegions, Rgb
from color_profile.domain.landmarks import Landmark
from color_profile.services.regions import calculate_face_regions
from color_profile.services.sampling import (
    average_rgb,
    decode_image,
    mean_rgb,
    rgb_to_hex,
)
from color_profile.services.undertone import classify_lab, rgb_to_lab

logger = logging.getLogger(__name__)

_REGION_FIELDS = (
    "left_cheek",
    "right_cheek",
    "forehead",
    "left_eye",
    "right_eye",
    "left_eyebrow",
    "right_eyebrow",
)


async def extract_facial_colors(
    image_bytes: bytes, landmarks: Sequence[Landmark] | None
) -> ExtractedColors:
    """Sample skin, eye and eyebrow colors and classify the skin undertone.

    Raises ImageDecodeError when the image cannot be read. Regions that fail
    to resolve or sample are skipped; the corresponding fields are None.
    """
    image = decode_image(image_bytes)
    regions = calculate_face_regions(landmarks, image.width, image.height)
    logger.info("Calculated regions: %s", regions)

    samples = await _sample_regions(image, regions)
    skin = mean_rgb(
        [samples["left_cheek"], samples["right_cheek"], samples["forehead"]]
    )
    eyes = mean_rgb([samples["left_eye"], samples["right_eye"]])
    eyebrows = mean_rgb([samples["left_eyebrow"], samples["right_eyebrow"]])

    skin_lab = rgb_to_lab(skin) if skin is not None else None
    colors = ExtractedColors(
        skin_color_hex=rgb_to_hex(skin),
        skin_color_lab=skin_lab,
        average_eye_color_hex=rgb_to_hex(eyes),
        average_eyebrow_color_hex=rgb_to_hex(eyebrows),
        skin_undertone=classify_lab(skin_lab) if skin_lab is not None else None,
    )
    logger.info("Extracted colors: %s", colors)
    return colors


async def _sample_regions(
    image: Image.Image, regions: FaceRegions
) -> dict[str, Rgb | None]:
    # Regions only read the decoded image, so they can be sampled in parallel.
    image.load()
    results = await asyncio.gather(
        *(
            asyncio.to_thread(average_rgb, image, getattr(regions, name))
            for name in _REGION_FIELDS
        )
    )
    return dict(zip(_REGION_FIELDS, results, strict=True))
