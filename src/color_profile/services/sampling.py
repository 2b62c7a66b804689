"""Average-color sampling over image regions."""

import io
import logging
from collections.abc import Iterable

import numpy as np
from PIL import Image, UnidentifiedImageError

from color_profile.domain.colors import Region, Rgb, round_half_up

logger = logging.getLogger(__name__)


class ImageDecodeError(RuntimeError):
    """Raised when image bytes cannot be decoded into a raster."""


def decode_image(image_bytes: bytes) -> Image.Image:
    """Decode image bytes into a fully loaded RGB image."""
    try:
        with Image.open(io.BytesIO(image_bytes)) as raw:
            image = raw.convert("RGB")
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ImageDecodeError("Could not read image data.") from exc
    if image.width <= 0 or image.height <= 0:
        raise ImageDecodeError("Could not determine image dimensions.")
    return image


def average_rgb(image: Image.Image, region: Region | None) -> Rgb | None:
    """Return the mean color inside a region, or None if it cannot be sampled."""
    if region is None:
        return None
    try:
        left = round_half_up(region.left)
        top = round_half_up(region.top)
        width = max(1, round_half_up(region.width))
        height = max(1, round_half_up(region.height))
        if (
            left < 0
            or top < 0
            or left + width > image.width
            or top + height > image.height
        ):
            raise ValueError(f"Region {region} lies outside {image.size}")
        patch = image.crop((left, top, left + width, top + height))
        if patch.mode != "RGB":
            patch = patch.convert("RGB")
        pixels = np.asarray(patch, dtype=np.float64).reshape(-1, 3)
        if pixels.size == 0:
            return None
        r, g, b = pixels.mean(axis=0)
    except Exception:
        logger.exception("Failed to sample color for region %s", region)
        return None
    return Rgb(r=float(r), g=float(g), b=float(b))


def mean_rgb(colors: Iterable[Rgb | None]) -> Rgb | None:
    """Average the resolved colors; None when nothing resolved."""
    resolved = [color for color in colors if color is not None]
    if not resolved:
        return None
    count = len(resolved)
    return Rgb(
        r=sum(color.r for color in resolved) / count,
        g=sum(color.g for color in resolved) / count,
        b=sum(color.b for color in resolved) / count,
    )


def rgb_to_hex(rgb: Rgb | None) -> str | None:
    """Format a color as uppercase #RRGGBB."""
    if rgb is None:
        return None
    channels = [_clamp_channel(value) for value in (rgb.r, rgb.g, rgb.b)]
    return "#" + "".join(f"{value:02X}" for value in channels)


def _clamp_channel(value: float) -> int:
    return max(0, min(255, round_half_up(value)))
