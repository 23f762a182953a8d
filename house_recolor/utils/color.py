"""Color conversion helpers.

Hue is expressed in degrees [0, 360), saturation and lightness in percent
[0, 100]. HSL values stay floating point; only RGB output is rounded.
"""

from __future__ import annotations

import logging
import math
import re
from typing import List, Tuple

import numpy as np

logger = logging.getLogger(__name__)

_HEX_PATTERN = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)

POPULAR_HOUSE_COLORS: Tuple[str, ...] = (
    "#F5F5DC",  # beige
    "#FFFFFF",  # white
    "#D2B48C",  # tan
    "#8B7355",  # dark khaki
    "#696969",  # dim gray
    "#2F4F4F",  # dark slate gray
    "#8B4513",  # saddle brown
    "#CD853F",  # peru
    "#A0522D",  # sienna
    "#228B22",  # forest green
    "#4682B4",  # steel blue
    "#B22222",  # fire brick
    "#800080",  # purple
    "#FF6347",  # tomato
    "#FFD700",  # gold
    "#FF4500",  # orange red
)

_RECOMMENDED_STAPLES: Tuple[str, ...] = ("#F5F5DC", "#D2B48C", "#8B7355")


def is_valid_hex(value: str) -> bool:
    return isinstance(value, str) and _HEX_PATTERN.match(value.strip()) is not None


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    """Parse ``#RRGGBB`` (leading ``#`` optional).

    Malformed strings map to black instead of raising; use ``is_valid_hex``
    to reject them up front.
    """

    match = _HEX_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        logger.warning("Malformed hex color %r, falling back to black.", value)
        return 0, 0, 0
    return tuple(int(group, 16) for group in match.groups())  # type: ignore[return-value]


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return "#{:02X}{:02X}{:02X}".format(*(int(np.clip(c, 0, 255)) for c in (r, g, b)))


def _round_half_up(values: np.ndarray) -> np.ndarray:
    return np.floor(values + 0.5)


def rgb_to_hsl_array(rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Vectorized RGB (0-255, last axis) to HSL conversion.

    Returns:
        Tuple of float64 arrays (hue degrees, saturation %, lightness %).
    """

    rgb = np.asarray(rgb, dtype=np.float64) / 255.0
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    max_c = rgb.max(axis=-1)
    min_c = rgb.min(axis=-1)
    delta = max_c - min_c
    total = max_c + min_c
    lightness = total / 2.0

    chromatic = delta > 0
    safe_delta = np.where(chromatic, delta, 1.0)
    denom = np.where(lightness > 0.5, 2.0 - total, total)
    saturation = np.where(chromatic, delta / np.where(chromatic, denom, 1.0), 0.0)

    hue = np.select(
        [~chromatic, max_c == r, max_c == g],
        [
            np.zeros_like(delta),
            (g - b) / safe_delta + np.where(g < b, 6.0, 0.0),
            (b - r) / safe_delta + 2.0,
        ],
        default=(r - g) / safe_delta + 4.0,
    )
    return hue / 6.0 * 360.0, saturation * 100.0, lightness * 100.0


def _hue_to_channel(p: np.ndarray, q: np.ndarray, t: np.ndarray) -> np.ndarray:
    t = np.mod(t, 1.0)
    return np.select(
        [t < 1.0 / 6.0, t < 0.5, t < 2.0 / 3.0],
        [p + (q - p) * 6.0 * t, q, p + (q - p) * (2.0 / 3.0 - t) * 6.0],
        default=p,
    )


def hsl_to_rgb_array(hue: np.ndarray, saturation: np.ndarray, lightness: np.ndarray) -> np.ndarray:
    """Vectorized HSL to RGB conversion.

    Returns:
        Float64 array with a trailing RGB axis, unrounded, in [0, 255].
    """

    h = np.mod(np.asarray(hue, dtype=np.float64), 360.0) / 360.0
    s = np.clip(np.asarray(saturation, dtype=np.float64), 0.0, 100.0) / 100.0
    lum = np.clip(np.asarray(lightness, dtype=np.float64), 0.0, 100.0) / 100.0
    h, s, lum = np.broadcast_arrays(h, s, lum)

    q = np.where(lum < 0.5, lum * (1.0 + s), lum + s - lum * s)
    p = 2.0 * lum - q
    red = _hue_to_channel(p, q, h + 1.0 / 3.0)
    green = _hue_to_channel(p, q, h)
    blue = _hue_to_channel(p, q, h - 1.0 / 3.0)
    rgb = np.stack([red, green, blue], axis=-1)
    achromatic = (s == 0)[..., None]
    rgb = np.where(achromatic, lum[..., None], rgb)
    return np.clip(rgb * 255.0, 0.0, 255.0)


def rgb_to_hsl(r: int, g: int, b: int) -> Tuple[float, float, float]:
    hue, saturation, lightness = rgb_to_hsl_array(np.array([r, g, b]))
    return float(hue), float(saturation), float(lightness)


def hsl_to_rgb(h: float, s: float, l: float) -> Tuple[int, int, int]:  # noqa: E741
    rgb = _round_half_up(hsl_to_rgb_array(h, s, l))
    return int(rgb[0]), int(rgb[1]), int(rgb[2])


def hex_to_hsl(value: str) -> Tuple[float, float, float]:
    return rgb_to_hsl(*hex_to_rgb(value))


def hsl_to_hex(h: float, s: float, l: float) -> str:  # noqa: E741
    return rgb_to_hex(*hsl_to_rgb(h, s, l))


def color_recommendations(original: str) -> List[str]:
    """Suggest colors related to an existing facade color.

    The complement and the two 30 degree analogues come first, followed by
    a few popular neutral house colors.
    """

    hue, saturation, lightness = hex_to_hsl(original)
    suggestions = [
        hsl_to_hex(math.fmod(hue + 180.0, 360.0), saturation, lightness),
        hsl_to_hex(math.fmod(hue + 30.0, 360.0), saturation, lightness),
        hsl_to_hex(math.fmod(hue + 330.0, 360.0), saturation, lightness),
    ]
    suggestions.extend(_RECOMMENDED_STAPLES)
    return suggestions
