"""Color and region models used by the extraction pipeline."""

import math
from dataclasses import dataclass
from enum import StrEnum


class Undertone(StrEnum):
    """Skin undertone taxonomy."""

    WARM = "Warm"
    COOL = "Cool"
    NEUTRAL = "Neutral"
    OLIVE = "Olive"
    UNDETERMINED = "Undetermined"


class ContrastLevel(StrEnum):
    """Three-level contrast bucket."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


@dataclass(frozen=True)
class Region:
    """Pixel rectangle inside an image."""

    left: int
    top: int
    width: int
    height: int


@dataclass(frozen=True)
class Rgb:
    """RGB color with 0-255 channels; channels may be fractional averages."""

    r: float
    g: float
    b: float


@dataclass(frozen=True)
class Lab:
    """CIE L*a*b* color."""

    l: float  # noqa: E741
    a: float
    b: float


@dataclass(frozen=True)
class FaceRegions:
    """Sampling regions derived from facial landmarks."""

    left_cheek: Region | None = None
    right_cheek: Region | None = None
    forehead: Region | None = None
    left_eye: Region | None = None
    right_eye: Region | None = None
    left_eyebrow: Region | None = None
    right_eyebrow: Region | None = None


@dataclass(frozen=True)
class ExtractedColors:
    """Colors sampled from a selfie; every field resolves independently."""

    skin_color_hex: str | None = None
    skin_color_lab: Lab | None = None
    average_eye_color_hex: str | None = None
    average_eyebrow_color_hex: str | None = None
    skin_undertone: Undertone | None = None


@dataclass(frozen=True)
class ContrastSummary:
    """Pairwise contrast ratios between skin, eyes and hair."""

    skin_eye_ratio: float
    skin_hair_ratio: float
    eye_hair_ratio: float
    overall: ContrastLevel


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return math.floor(value + 0.5)
