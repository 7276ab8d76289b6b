"""Color resolution and conversion utilities.

Every drawing primitive accepts a "color-like" value:

- an ``(r, g, b)`` tuple (or list) of 0-255 channels
- a packed 24-bit integer ``0xRRGGBB``
- a string: a known color name (case-insensitive) or a hex string
  (``#RGB`` / ``#RRGGBB``, ``#`` optional)

``resolve_color`` maps any of these onto a canonical ``RGB`` tuple.
"""

import logging
import math
from typing import Sequence, Union

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]
"""RGB color as a 3-tuple, each channel 0-255."""

HSL = tuple[float, float, float]
"""HSL color as a 3-tuple: hue 0-360, saturation and lightness 0-1."""

ColorLike = Union[RGB, Sequence[int], int, str]
"""Anything that can be resolved to an RGB color."""

WHITE: RGB = (255, 255, 255)
BLACK: RGB = (0, 0, 0)

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return math.floor(value + 0.5)


def _clamp_channel(value: float) -> int:
    return max(0, min(255, round_half_up(value)))


# =============================================================================
# Conversion
# =============================================================================


def hsl_to_rgb(hsl: HSL) -> RGB:
    """Convert an HSL triple to RGB.

    Args:
        hsl: (hue in degrees, saturation 0-1, lightness 0-1)

    Returns:
        RGB tuple
    """
    h, s, l = hsl
    c = (1 - abs(2 * l - 1)) * s
    x = c * (1 - abs(math.fmod(h / 60, 2) - 1))
    m = l - c / 2

    if h < 60:
        r, g, b = c, x, 0.0
    elif h < 120:
        r, g, b = x, c, 0.0
    elif h < 180:
        r, g, b = 0.0, c, x
    elif h < 240:
        r, g, b = 0.0, x, c
    elif h < 300:
        r, g, b = x, 0.0, c
    else:
        r, g, b = c, 0.0, x

    return (
        round_half_up((r + m) * 255),
        round_half_up((g + m) * 255),
        round_half_up((b + m) * 255),
    )


def rgb_to_hsl(rgb: RGB) -> HSL:
    """Convert an RGB tuple to HSL.

    Achromatic colors (all channels equal) return hue and saturation 0.
    """
    rn, gn, bn = rgb[0] / 255, rgb[1] / 255, rgb[2] / 255
    hi = max(rn, gn, bn)
    lo = min(rn, gn, bn)
    l = (hi + lo) / 2
    if hi == lo:
        return (0.0, 0.0, l)

    d = hi - lo
    s = d / (2 - hi - lo) if l > 0.5 else d / (hi + lo)
    if hi == rn:
        h = ((gn - bn) / d + (6 if gn < bn else 0)) * 60
    elif hi == gn:
        h = ((bn - rn) / d + 2) * 60
    else:
        h = ((rn - gn) / d + 4) * 60
    return (h, s, l)


def rgb_to_hex(rgb: RGB) -> int:
    """Pack RGB into a single 24-bit integer (0xRRGGBB)."""
    r, g, b = rgb
    return (r << 16) | (g << 8) | b


def hex_to_rgb(value: int) -> RGB:
    """Unpack a 24-bit integer (0xRRGGBB) into RGB."""
    return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


def parse_hex_string(s: str) -> RGB | None:
    """Parse a CSS-style hex string (``#RGB`` or ``#RRGGBB``).

    Returns:
        RGB tuple, or None when the string is not valid hex. ``None`` is
        distinct from a successfully parsed black.
    """
    clean = s[1:] if s.startswith("#") else s
    if len(clean) not in (3, 6) or not all(ch in _HEX_DIGITS for ch in clean):
        return None
    if len(clean) == 3:
        clean = "".join(ch * 2 for ch in clean)
    return (int(clean[0:2], 16), int(clean[2:4], 16), int(clean[4:6], 16))


def to_hex_string(rgb: RGB) -> str:
    """Format an RGB tuple as ``#RRGGBB``."""
    r, g, b = rgb
    return f"#{r:02X}{g:02X}{b:02X}"


def resolve_color(color: ColorLike) -> RGB:
    """Resolve any color-like value to an RGB tuple.

    Tuples pass through (missing channels default to 0), integers are
    unpacked, strings are looked up by name and then parsed as hex.
    Anything unresolvable falls back to white.
    """
    if isinstance(color, str):
        named = NAMED_COLORS.get(color.lower())
        if named is not None:
            return named
        parsed = parse_hex_string(color)
        if parsed is not None:
            return parsed
        logger.debug("Unresolvable color %r, using white", color)
        return WHITE
    if isinstance(color, bool):
        logger.debug("Unresolvable color %r, using white", color)
        return WHITE
    if isinstance(color, int):
        return hex_to_rgb(color)
    if isinstance(color, (tuple, list)):
        channels = list(color[:3]) + [0] * (3 - len(color[:3]))
        return (
            _clamp_channel(channels[0]),
            _clamp_channel(channels[1]),
            _clamp_channel(channels[2]),
        )
    logger.debug("Unresolvable color %r, using white", color)
    return WHITE


def lerp_color(a: RGB, b: RGB, t: float) -> RGB:
    """Linearly interpolate between two colors.

    Args:
        a: Start color (t = 0)
        b: End color (t = 1)
        t: Blend factor, clamped to [0, 1]
    """
    u = max(0.0, min(1.0, t))
    return (
        round_half_up(a[0] + (b[0] - a[0]) * u),
        round_half_up(a[1] + (b[1] - a[1]) * u),
        round_half_up(a[2] + (b[2] - a[2]) * u),
    )


def dim_color(color: RGB, factor: float) -> RGB:
    """Scale a color by a factor (0 = black, 1 = unchanged).

    Factors above 1 brighten; every channel is clamped to 0-255.
    """
    return (
        _clamp_channel(color[0] * factor),
        _clamp_channel(color[1] * factor),
        _clamp_channel(color[2] * factor),
    )


# =============================================================================
# Named colors
# =============================================================================

NAMED_COLORS: dict[str, RGB] = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "red": (255, 0, 0),
    "green": (0, 255, 0),
    "blue": (0, 0, 255),
    "yellow": (255, 255, 0),
    "cyan": (0, 255, 255),
    "magenta": (255, 0, 255),
    "orange": (255, 165, 0),
    "purple": (128, 0, 128),
    "pink": (255, 105, 180),
    "gray": (128, 128, 128),
    "grey": (128, 128, 128),
    "darkgray": (64, 64, 64),
    "darkgrey": (64, 64, 64),
    "lightgray": (192, 192, 192),
    "lightgrey": (192, 192, 192),
    "brown": (139, 69, 19),
    "lime": (0, 255, 0),
    "teal": (0, 128, 128),
    "navy": (0, 0, 128),
    "maroon": (128, 0, 0),
    "olive": (128, 128, 0),
    "coral": (255, 127, 80),
    "salmon": (250, 128, 114),
    "gold": (255, 215, 0),
    "indigo": (75, 0, 130),
    "violet": (238, 130, 238),
    "turquoise": (64, 224, 208),
    # Brand
    "claude": (230, 150, 70),
    "claude-orange": (230, 150, 70),
    "claude-tan": (210, 180, 140),
}


class Colors:
    """Predefined color palette."""

    BLACK: RGB = (0, 0, 0)
    WHITE: RGB = (255, 255, 255)
    RED: RGB = (255, 0, 0)
    GREEN: RGB = (0, 255, 0)
    BLUE: RGB = (0, 0, 255)
    YELLOW: RGB = (255, 255, 0)
    CYAN: RGB = (0, 255, 255)
    MAGENTA: RGB = (255, 0, 255)
    ORANGE: RGB = (255, 165, 0)
    PURPLE: RGB = (128, 0, 128)
    PINK: RGB = (255, 105, 180)
    GRAY: RGB = (128, 128, 128)

    # No alpha channel on the panel; black is the default blit key
    TRANSPARENT: RGB = (0, 0, 0)
