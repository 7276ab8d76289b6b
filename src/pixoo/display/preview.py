"""PNG previews of canvases.

Renders canvases to PNG with Pillow, nearest-neighbour upscaled so that
each panel pixel becomes a crisp ``scale x scale`` block.
"""

import io
import logging
from pathlib import Path
from typing import Sequence

from PIL import Image

from ..core.errors import CanvasError
from .canvas import Canvas

logger = logging.getLogger(__name__)


def canvas_to_image(canvas: Canvas, scale: int = 1) -> Image.Image:
    """Convert a canvas to an RGB Pillow image.

    Args:
        canvas: Source canvas
        scale: Integer nearest-neighbour upscale factor (>= 1)

    Raises:
        ValueError: If scale is less than 1
    """
    if scale < 1:
        raise ValueError(f"scale must be >= 1, got {scale}")
    image = Image.frombytes("RGB", (canvas.width, canvas.height), bytes(canvas.buffer))
    if scale == 1:
        return image
    return image.resize(
        (canvas.width * scale, canvas.height * scale), Image.Resampling.NEAREST
    )


def image_to_canvas(image: Image.Image) -> Canvas:
    """Convert a square Pillow image of a supported panel size to a canvas.

    Raises:
        CanvasError: If the image dimensions are not a supported canvas size
    """
    rgb = image.convert("RGB")
    if rgb.width != rgb.height:
        raise CanvasError(
            "Image must be square to convert to a canvas",
            details={"width": rgb.width, "height": rgb.height},
        )
    return Canvas(rgb.width, rgb.tobytes())


def canvas_to_png(canvas: Canvas, scale: int = 1) -> bytes:
    """Encode a canvas as an 8-bit RGB PNG."""
    out = io.BytesIO()
    canvas_to_image(canvas, scale).save(out, format="PNG")
    return out.getvalue()


def save_png(canvas: Canvas, path: str | Path, scale: int = 8) -> Path:
    """Write a canvas to a PNG file (default scale 8: 64x64 becomes 512x512).

    Returns:
        The path written
    """
    path = Path(path)
    path.write_bytes(canvas_to_png(canvas, scale))
    logger.debug("Saved preview %s (scale %d)", path, scale)
    return path


def save_animation_pngs(
    frames: Sequence[Canvas], base_path: str | Path, scale: int = 8
) -> list[Path]:
    """Write each frame to ``{base_path}_000.png``, ``{base_path}_001.png``, ...

    Returns:
        Paths written, in frame order
    """
    paths = []
    for i, frame in enumerate(frames):
        paths.append(save_png(frame, f"{base_path}_{i:03d}.png", scale))
    return paths
