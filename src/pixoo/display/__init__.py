"""Rendering engine for Pixoo panels.

Provides:
- Canvas pixel surface with drawing primitives
- Color resolution and conversion
- Bitmap font text rendering
- SVG path filling
- Animations, PNG previews and image loading
"""

from .animation import MAX_STABLE_FRAMES, Animation, build_animation
from .canvas import DEFAULT_SIZE, SUPPORTED_SIZES, Canvas
from .color import (
    NAMED_COLORS,
    RGB,
    ColorLike,
    Colors,
    dim_color,
    hex_to_rgb,
    hsl_to_rgb,
    lerp_color,
    parse_hex_string,
    resolve_color,
    rgb_to_hex,
    rgb_to_hsl,
)
from .font import (
    FONT_3X5,
    FONT_5X7,
    BitmapFont,
    TextOptions,
    draw_text,
    draw_text_centered,
    get_font,
    measure_text,
)
from .image import SpriteSheet, downsample_sprite, load_image, render_sprite
from .preview import (
    canvas_to_image,
    canvas_to_png,
    image_to_canvas,
    save_animation_pngs,
    save_png,
)
from .svg_path import Point, fill_polygon, parse_svg_path, render_svg_path

__all__ = [
    # Canvas
    "Canvas",
    "SUPPORTED_SIZES",
    "DEFAULT_SIZE",
    # Color
    "RGB",
    "ColorLike",
    "Colors",
    "NAMED_COLORS",
    "resolve_color",
    "parse_hex_string",
    "lerp_color",
    "dim_color",
    "hsl_to_rgb",
    "rgb_to_hsl",
    "rgb_to_hex",
    "hex_to_rgb",
    # Font
    "BitmapFont",
    "TextOptions",
    "FONT_5X7",
    "FONT_3X5",
    "get_font",
    "measure_text",
    "draw_text",
    "draw_text_centered",
    # Paths
    "Point",
    "parse_svg_path",
    "fill_polygon",
    "render_svg_path",
    # Animation
    "Animation",
    "build_animation",
    "MAX_STABLE_FRAMES",
    # Preview
    "canvas_to_image",
    "image_to_canvas",
    "canvas_to_png",
    "save_png",
    "save_animation_pngs",
    # Images
    "SpriteSheet",
    "load_image",
    "downsample_sprite",
    "render_sprite",
]
