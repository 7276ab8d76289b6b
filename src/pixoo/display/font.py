"""Bitmap font text layout and rendering.

Two built-in fonts:

- ``FONT_5X7``: 5 wide x 7 tall, full printable ASCII (32-126)
- ``FONT_3X5``: 3 wide x 5 tall, compact for cramped layouts; lowercase
  letters render with their uppercase glyphs

Glyphs are drawn one lit bit at a time as ``scale x scale`` blocks. Each
glyph advances the cursor by its visible width (trailing empty columns are
trimmed) plus the letter spacing.
"""

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .canvas import Canvas
from .color import ColorLike, resolve_color
from .glyphs import GLYPHS_3X5, GLYPHS_5X7

FALLBACK_CHAR = "?"


@dataclass(frozen=True)
class BitmapFont:
    """Immutable fixed-size bitmap font.

    Attributes:
        name: Short identifier (e.g. "5x7")
        width: Nominal glyph width in pixels
        height: Rows per glyph
        glyphs: Character to row-bitmask mapping
    """

    name: str
    width: int
    height: int
    glyphs: Mapping[str, tuple[int, ...]]

    def __post_init__(self) -> None:
        object.__setattr__(self, "glyphs", MappingProxyType(dict(self.glyphs)))
        for ch, rows in self.glyphs.items():
            if len(rows) != self.height:
                raise ValueError(
                    f"Glyph {ch!r} in font {self.name} has {len(rows)} rows, "
                    f"expected {self.height}"
                )

    def __contains__(self, ch: object) -> bool:
        return ch in self.glyphs


FONT_5X7 = BitmapFont("5x7", 5, 7, GLYPHS_5X7)
FONT_3X5 = BitmapFont("3x5", 3, 5, GLYPHS_3X5)

FONTS: Mapping[str, BitmapFont] = MappingProxyType(
    {FONT_5X7.name: FONT_5X7, FONT_3X5.name: FONT_3X5}
)


@dataclass(frozen=True)
class TextOptions:
    """Text layout options.

    Attributes:
        font: Bitmap font to use
        letter_spacing: Extra pixels between characters (before scaling)
        scale: Integer pixel multiplier for chunky text
    """

    font: BitmapFont = field(default=FONT_5X7)
    letter_spacing: int = 1
    scale: int = 1


DEFAULT_TEXT_OPTIONS = TextOptions()


def get_font(name: str) -> BitmapFont:
    """Look up a built-in font by name ("5x7" or "3x5").

    Raises:
        KeyError: If no font has that name
    """
    return FONTS[name]


def resolve_glyph(font: BitmapFont, ch: str) -> tuple[str, tuple[int, ...] | None]:
    """Resolve a character to a glyph.

    Lowercase letters fall back to uppercase when the font lacks them;
    anything else missing falls back to ``?``.

    Returns:
        (character actually used, glyph rows or None if even ``?`` is missing)
    """
    glyph = font.glyphs.get(ch)
    if glyph is None and "a" <= ch <= "z":
        upper = ch.upper()
        glyph = font.glyphs.get(upper)
        if glyph is not None:
            return upper, glyph
    if glyph is None:
        return ch, font.glyphs.get(FALLBACK_CHAR)
    return ch, glyph


def glyph_width(font: BitmapFont, ch: str, glyph: tuple[int, ...]) -> int:
    """Visible width of a glyph: its highest lit column, at least 1.

    The space character always measures the font's full width.
    """
    max_bit = max((row.bit_length() for row in glyph), default=0)
    return max(max_bit, font.width if ch == " " else 1)


def _advance(font: BitmapFont, ch: str, glyph: tuple[int, ...] | None) -> int:
    if glyph is None:
        return font.width
    return glyph_width(font, ch, glyph)


def measure_text(text: str, options: TextOptions | None = None) -> int:
    """Measure the pixel width of a string without drawing it.

    Trailing letter spacing is not included; an empty string measures 0.
    """
    opts = options or DEFAULT_TEXT_OPTIONS
    width = 0
    for original in text:
        ch, glyph = resolve_glyph(opts.font, original)
        width += (_advance(opts.font, ch, glyph) + opts.letter_spacing) * opts.scale
    if text:
        width -= opts.letter_spacing * opts.scale
    return width


def draw_text(
    canvas: Canvas,
    text: str,
    x: float,
    y: float,
    color: ColorLike,
    options: TextOptions | None = None,
) -> int:
    """Draw a string onto a canvas with its top-left corner at (x, y).

    Returns:
        The total cursor advance, including trailing letter spacing, so
        further text can be chained directly after it.
    """
    opts = options or DEFAULT_TEXT_OPTIONS
    font = opts.font
    scale = opts.scale
    rgb = resolve_color(color)
    cursor = x

    for original in text:
        ch, glyph = resolve_glyph(font, original)
        if glyph is not None:
            for gy, row in enumerate(glyph):
                if not row:
                    continue
                for gx in range(font.width):
                    if (row >> (font.width - 1 - gx)) & 1:
                        canvas.fill_rect(
                            cursor + gx * scale, y + gy * scale, scale, scale, rgb
                        )
        cursor += (_advance(font, ch, glyph) + opts.letter_spacing) * scale

    return cursor - x


def draw_text_centered(
    canvas: Canvas,
    text: str,
    y: float,
    color: ColorLike,
    options: TextOptions | None = None,
    region_x: int = 0,
    region_width: int | None = None,
) -> int:
    """Draw text horizontally centered within a region of the canvas.

    Args:
        canvas: Target canvas
        text: Text to draw
        y: Top row of the text
        color: Text color
        options: Layout options
        region_x: Left edge of the centering region
        region_width: Width of the region (default: full canvas width)

    Returns:
        The cursor advance reported by ``draw_text``
    """
    if region_width is None:
        region_width = canvas.width
    text_width = measure_text(text, options)
    x = region_x + math.floor((region_width - text_width) / 2)
    return draw_text(canvas, text, x, y, color, options)
