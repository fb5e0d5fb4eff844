import math
import string
from typing import Iterable, List, Optional, Tuple

DEFAULT_SIMILARITY_THRESHOLD = 85.0

# distance between black and white in RGB space, ~441.67
MAX_RGB_DISTANCE = math.sqrt(255 ** 2 * 3)


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    """Decode ``#rrggbb`` (or ``rrggbb`` / ``#rgb``) into an (r, g, b) triplet."""
    if not isinstance(value, str):
        raise ValueError(f"invalid hex color: {value!r}")
    digits = value.strip().lstrip("#")
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    if len(digits) != 6 or any(c not in string.hexdigits for c in digits):
        raise ValueError(f"invalid hex color: {value!r}")
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def color_similarity(color_a: str, color_b: str) -> float:
    """Percent similarity in [0, 100] from the Euclidean RGB distance."""
    r1, g1, b1 = hex_to_rgb(color_a)
    r2, g2, b2 = hex_to_rgb(color_b)
    distance = math.sqrt((r1 - r2) ** 2 + (g1 - g2) ** 2 + (b1 - b2) ** 2)
    return max(0.0, 100 - distance / MAX_RGB_DISTANCE * 100)


def _bands(filament) -> List[str]:
    colors = (
        getattr(filament, "color", None),
        getattr(filament, "color2", None),
        getattr(filament, "color3", None),
    )
    return [c for c in colors if c]


def filament_matches_color(filament, color: str, threshold: Optional[float] = None) -> bool:
    if threshold is None:
        threshold = DEFAULT_SIMILARITY_THRESHOLD
    return any(color_similarity(band, color) >= threshold for band in _bands(filament))


def filter_by_color(filaments: Iterable, color: str, threshold: Optional[float] = None) -> list:
    # fail fast on a bad search color even when the list is empty
    hex_to_rgb(color)
    return [f for f in filaments if filament_matches_color(f, color, threshold)]
