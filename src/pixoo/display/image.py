"""Image loading and sprite downsampling.

Decodes image files with Pillow and maps them onto canvases, either
directly (``load_image``) or as a coarse two-colour sprite grid
(``downsample_sprite`` + ``render_sprite``) for pixel-art characters.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Sequence

from PIL import Image, ImageOps

from ..core.errors import ImageLoadError
from .canvas import Canvas
from .color import RGB, round_half_up

logger = logging.getLogger(__name__)

FitMode = Literal["contain", "cover", "fill"]
Kernel = Literal["nearest", "lanczos", "bicubic"]

SpriteGrid = list[list[RGB | None]]

_KERNELS = {
    "nearest": Image.Resampling.NEAREST,
    "lanczos": Image.Resampling.LANCZOS,
    "bicubic": Image.Resampling.BICUBIC,
}

DEFAULT_BODY_COLOR: RGB = (200, 120, 90)
DEFAULT_DARK_COLOR: RGB = (20, 12, 12)


def _open_rgba(path: str | Path) -> Image.Image:
    try:
        with Image.open(path) as img:
            return img.convert("RGBA")
    except OSError as e:
        raise ImageLoadError(
            "Failed to load image", details={"path": str(path)}, cause=e
        ) from e


def _fit_image(
    image: Image.Image, width: int, height: int, fit: FitMode, resample: Image.Resampling
) -> Image.Image:
    if fit == "fill":
        return image.resize((width, height), resample)
    if fit == "cover":
        return ImageOps.fit(image, (width, height), resample, centering=(0.5, 0.5))
    if fit == "contain":
        scaled = ImageOps.contain(image, (width, height), resample)
        boxed = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        boxed.paste(scaled, ((width - scaled.width) // 2, (height - scaled.height) // 2))
        return boxed
    raise ValueError(f"Unknown fit mode: {fit}")


def load_image(
    path: str | Path,
    width: int | None = None,
    height: int | None = None,
    x: int = 0,
    y: int = 0,
    fit: FitMode = "contain",
    kernel: Kernel = "nearest",
    canvas: Canvas | None = None,
) -> Canvas:
    """Load an image file and draw it onto a canvas.

    The image is resized into a ``width x height`` box and drawn with its
    top-left corner at (x, y). Pixels with alpha of 128 or less are
    skipped, leaving whatever the canvas already holds.

    Args:
        path: Image file path
        width: Box width (default: canvas size)
        height: Box height (default: canvas size)
        x: Horizontal offset on the canvas
        y: Vertical offset on the canvas
        fit: "contain" letterboxes, "cover" crops, "fill" stretches
        kernel: Resampling kernel ("nearest" keeps pixel art crisp)
        canvas: Canvas to draw onto (default: a new 64x64 canvas)

    Returns:
        The canvas drawn onto

    Raises:
        ImageLoadError: If the file cannot be read or decoded
        ValueError: If fit or kernel is unknown
    """
    if kernel not in _KERNELS:
        raise ValueError(f"Unknown resampling kernel: {kernel}")
    if canvas is None:
        canvas = Canvas()
    target_w = width if width is not None else canvas.width
    target_h = height if height is not None else canvas.height

    image = _fit_image(_open_rgba(path), target_w, target_h, fit, _KERNELS[kernel])
    data = image.tobytes()
    for py in range(image.height):
        row = py * image.width * 4
        for px in range(image.width):
            i = row + px * 4
            if data[i + 3] > 128:
                canvas.set_pixel(x + px, y + py, (data[i], data[i + 1], data[i + 2]))

    logger.debug("Loaded %s into %dx%d at (%d, %d)", path, target_w, target_h, x, y)
    return canvas


@dataclass
class SpriteSheet:
    """Result of downsampling an image into a sprite grid.

    Attributes:
        grid: ``rows`` lists of ``cols`` cells; None is transparent
        body_color: Dominant non-dark color
        dark_color: Mean color of dark features (eyes, outlines)
        width: Grid columns
        height: Grid rows
    """

    grid: SpriteGrid
    body_color: RGB
    dark_color: RGB
    width: int
    height: int


def _quantize(value: int) -> int:
    return min(255, round_half_up(value / 10) * 10)


def downsample_sprite(
    path: str | Path,
    cols: int,
    rows: int,
    alpha_threshold: int = 128,
    white_threshold: int = 220,
    dark_threshold: int = 50,
) -> SpriteSheet:
    """Downsample an image into a ``cols x rows`` grid of sprite cells.

    Finds the bounding box of visible content (opaque and not near-white),
    divides it into the grid and samples each cell centre as transparent,
    dark or body colored.

    Raises:
        ImageLoadError: If the file cannot be read or decoded
    """
    image = _open_rgba(path)
    width, height = image.size
    data = image.tobytes()

    def pixel(px: int, py: int) -> tuple[int, int, int, int]:
        i = (py * width + px) * 4
        return data[i], data[i + 1], data[i + 2], data[i + 3]

    def visible(p: tuple[int, int, int, int]) -> bool:
        r, g, b, a = p
        return a > alpha_threshold and not (
            r > white_threshold and g > white_threshold and b > white_threshold
        )

    def dark(p: tuple[int, int, int, int]) -> bool:
        return p[0] < dark_threshold and p[1] < dark_threshold and p[2] < dark_threshold

    min_x, min_y, max_x, max_y = width, height, -1, -1
    counts: Counter[RGB] = Counter()
    dark_sum = [0, 0, 0]
    dark_count = 0

    for py in range(height):
        for px in range(width):
            p = pixel(px, py)
            if not visible(p):
                continue
            min_x, max_x = min(min_x, px), max(max_x, px)
            min_y, max_y = min(min_y, py), max(max_y, py)
            if dark(p):
                dark_sum[0] += p[0]
                dark_sum[1] += p[1]
                dark_sum[2] += p[2]
                dark_count += 1
            else:
                counts[(_quantize(p[0]), _quantize(p[1]), _quantize(p[2]))] += 1

    if max_x < 0:
        logger.debug("No visible pixels in %s", path)
        grid: SpriteGrid = [[None] * cols for _ in range(rows)]
        return SpriteSheet(grid, DEFAULT_BODY_COLOR, DEFAULT_DARK_COLOR, cols, rows)

    # most_common keeps first-seen order among ties
    body_color = counts.most_common(1)[0][0] if counts else DEFAULT_BODY_COLOR
    if dark_count:
        dark_color: RGB = (
            round_half_up(dark_sum[0] / dark_count),
            round_half_up(dark_sum[1] / dark_count),
            round_half_up(dark_sum[2] / dark_count),
        )
    else:
        dark_color = DEFAULT_DARK_COLOR

    cell_w = (max_x - min_x + 1) / cols
    cell_h = (max_y - min_y + 1) / rows
    grid = []
    for gy in range(rows):
        row: list[RGB | None] = []
        for gx in range(cols):
            p = pixel(
                math.floor(min_x + (gx + 0.5) * cell_w),
                math.floor(min_y + (gy + 0.5) * cell_h),
            )
            if not visible(p):
                row.append(None)
            else:
                row.append(dark_color if dark(p) else body_color)
        grid.append(row)

    return SpriteSheet(grid, body_color, dark_color, cols, rows)


def render_sprite(
    canvas: Canvas,
    grid: Sequence[Sequence[RGB | None]],
    scale: int | None = None,
    x: int | None = None,
    y: int = 0,
    body_color: RGB | None = None,
    dark_color: RGB | None = None,
    original_body_color: RGB | None = None,
    original_dark_color: RGB | None = None,
) -> Canvas:
    """Draw a sprite grid as ``scale x scale`` blocks.

    Args:
        canvas: Target canvas
        grid: Rows of cells; None cells are left untouched
        scale: Block size (default: largest that fits the canvas)
        x: Left edge (default: horizontally centred)
        y: Top edge
        body_color: Replacement for cells equal to original_body_color
        dark_color: Replacement for cells equal to original_dark_color
        original_body_color: Body color the grid was built with
        original_dark_color: Dark color the grid was built with
    """
    rows = len(grid)
    cols = len(grid[0]) if rows else 0
    if not rows or not cols:
        return canvas
    if scale is None:
        scale = canvas.size // max(cols, rows)
    if x is None:
        x = (canvas.size - cols * scale) // 2

    for gy, cells in enumerate(grid):
        for gx, cell in enumerate(cells):
            if cell is None:
                continue
            color = tuple(cell)
            if body_color and original_body_color and color == tuple(original_body_color):
                color = body_color
            if dark_color and original_dark_color and color == tuple(original_dark_color):
                color = dark_color
            canvas.fill_rect(x + gx * scale, y + gy * scale, scale, scale, color)

    return canvas
