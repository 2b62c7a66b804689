"""Lab conversion and skin undertone classification."""

import numpy as np
from skimage import color as skcolor

from color_profile.domain.colors import Lab, Rgb, Undertone

NEUTRAL_LIMIT = 8.0
WARM_MIN_B = 15.0
COOL_MAX_B = 9.0
COOL_MAX_A = 12.0
OLIVE_A_LIMIT = 6.0
OLIVE_MIN_B = 8.0
OLIVE_MAX_B = 24.0


def rgb_to_lab(rgb: Rgb) -> Lab:
    """Convert an sRGB color (0-255 channels) to CIE Lab under D65."""
    channels = np.clip([rgb.r, rgb.g, rgb.b], 0.0, 255.0) / 255.0
    l_star, a_star, b_star = skcolor.rgb2lab(channels.reshape(1, 1, 3))[0, 0]
    return Lab(l=float(l_star), a=float(a_star), b=float(b_star))


def classify_lab(lab: Lab) -> Undertone:
    """Classify a Lab color; rules are evaluated in order, first match wins."""
    a, b = lab.a, lab.b
    is_warm = b >= WARM_MIN_B and a >= 0
    in_olive_band = -OLIVE_A_LIMIT <= a <= OLIVE_A_LIMIT and b >= OLIVE_MIN_B

    if abs(a) <= NEUTRAL_LIMIT and abs(b) <= NEUTRAL_LIMIT:
        return Undertone.NEUTRAL
    if is_warm:
        return Undertone.WARM
    if b <= COOL_MAX_B and a <= COOL_MAX_A and not in_olive_band:
        return Undertone.COOL
    if in_olive_band and b <= OLIVE_MAX_B:
        return Undertone.OLIVE
    return Undertone.UNDETERMINED


def classify_undertone(rgb: Rgb | None) -> Undertone | None:
    if rgb is None:
        return None
    return classify_lab(rgb_to_lab(rgb))
