"""WCAG-style contrast ratios between facial feature colors."""

from color_profile.domain.colors import ContrastLevel, ContrastSummary, Rgb

HIGH_CONTRAST_RATIO = 7.0
MEDIUM_CONTRAST_RATIO = 4.5

_LEVEL_ORDER = (ContrastLevel.LOW, ContrastLevel.MEDIUM, ContrastLevel.HIGH)


def hex_to_rgb(hex_color: str) -> Rgb:
    """Parse #RGB or #RRGGBB into an Rgb color."""
    clean = hex_color.strip().removeprefix("#")
    if len(clean) == 3:
        clean = "".join(char * 2 for char in clean)
    if len(clean) != 6:
        raise ValueError(f"Invalid hex color: {hex_color}")
    try:
        r, g, b = (int(clean[index : index + 2], 16) for index in (0, 2, 4))
    except ValueError as exc:
        raise ValueError(f"Invalid hex color: {hex_color}") from exc
    return Rgb(r=r, g=g, b=b)


def relative_luminance(rgb: Rgb) -> float:
    """Return the relative luminance of an sRGB color."""
    return (
        0.2126 * _linearize(rgb.r)
        + 0.7152 * _linearize(rgb.g)
        + 0.0722 * _linearize(rgb.b)
    )


def contrast_ratio(hex_a: str, hex_b: str) -> float:
    """Return the contrast ratio between two hex colors, rounded to 2 places."""
    luminance_a = relative_luminance(hex_to_rgb(hex_a))
    luminance_b = relative_luminance(hex_to_rgb(hex_b))
    lighter = max(luminance_a, luminance_b)
    darker = min(luminance_a, luminance_b)
    return round((lighter + 0.05) / (darker + 0.05), 2)


def categorize_contrast(ratio: float) -> ContrastLevel:
    if ratio >= HIGH_CONTRAST_RATIO:
        return ContrastLevel.HIGH
    if ratio >= MEDIUM_CONTRAST_RATIO:
        return ContrastLevel.MEDIUM
    return ContrastLevel.LOW


def evaluate_contrast(skin_hex: str, eye_hex: str, hair_hex: str) -> ContrastSummary:
    """Compute pairwise ratios; overall is the highest bucket any pair reaches."""
    skin_eye = contrast_ratio(skin_hex, eye_hex)
    skin_hair = contrast_ratio(skin_hex, hair_hex)
    eye_hair = contrast_ratio(eye_hex, hair_hex)
    overall = max(
        (categorize_contrast(ratio) for ratio in (skin_eye, skin_hair, eye_hair)),
        key=_LEVEL_ORDER.index,
    )
    return ContrastSummary(
        skin_eye_ratio=skin_eye,
        skin_hair_ratio=skin_hair,
        eye_hair_ratio=eye_hair,
        overall=overall,
    )


def _linearize(channel: float) -> float:
    value = channel / 255
    if value <= 0.03928:
        return value / 12.92
    return ((value + 0.055) / 1.055) ** 2.4
