"""Minimal SVG path parser and scanline polygon rasterizer.

Parses the SVG path ``d`` mini-language into a flat list of points and
fills the resulting polygon with an even-odd scanline fill. Curves and
arcs are not sampled: each segment contributes only its end point.
"""

import logging
import math
import re
from typing import NamedTuple, Sequence

from .canvas import Canvas
from .color import ColorLike, resolve_color

logger = logging.getLogger(__name__)

_COMMAND_RE = re.compile(r"([MmLlHhVvZzCcSsQqTtAa])([^MmLlHhVvZzCcSsQqTtAa]*)")
# A minus sign starts a new number unless it belongs to an exponent
_MINUS_RE = re.compile(r"(?<![eE])-")

# Arguments consumed per segment; the last two are the segment's end point
_SEGMENT_ARITY = {"L": 2, "T": 2, "Q": 4, "S": 4, "C": 6, "A": 7}


class Point(NamedTuple):
    x: float
    y: float


def _to_number(token: str) -> float:
    try:
        return float(token)
    except ValueError:
        logger.debug("Unparseable path number %r", token)
        return math.nan


def tokenize(d: str) -> list[tuple[str, list[float]]]:
    """Split a path string into (command letter, numeric arguments) pairs."""
    tokens = []
    for match in _COMMAND_RE.finditer(d):
        arg_str = _MINUS_RE.sub(" -", match.group(2).replace(",", " "))
        tokens.append((match.group(1), [_to_number(t) for t in arg_str.split()]))
    return tokens


def parse_svg_path(d: str) -> list[Point]:
    """Parse an SVG path into a polyline.

    Uppercase commands are absolute, lowercase relative to the current
    point. ``Z`` returns to the start of the current subpath. A move
    without a full coordinate pair is skipped.

    Args:
        d: Path data, e.g. ``"M0 0 L10 0 L10 10 Z"``

    Returns:
        Points in drawing order; subpaths are concatenated
    """
    points: list[Point] = []
    cx = cy = 0.0
    start_x = start_y = 0.0

    for cmd, args in tokenize(d):
        kind = cmd.upper()
        relative = cmd != kind

        if kind == "M":
            if len(args) < 2:
                continue
            for i in range(0, len(args) - 1, 2):
                if relative:
                    cx, cy = cx + args[i], cy + args[i + 1]
                else:
                    cx, cy = args[i], args[i + 1]
                if i == 0:
                    start_x, start_y = cx, cy
                points.append(Point(cx, cy))

        elif kind == "Z":
            if points:
                cx, cy = start_x, start_y
                points.append(Point(cx, cy))

        elif kind == "H":
            for a in args:
                cx = cx + a if relative else a
                points.append(Point(cx, cy))

        elif kind == "V":
            for a in args:
                cy = cy + a if relative else a
                points.append(Point(cx, cy))

        else:
            n = _SEGMENT_ARITY[kind]
            for i in range(0, len(args) - n + 1, n):
                ex, ey = args[i + n - 2], args[i + n - 1]
                if relative:
                    cx, cy = cx + ex, cy + ey
                else:
                    cx, cy = ex, ey
                points.append(Point(cx, cy))

    return points


def fill_polygon(canvas: Canvas, points: Sequence[Point], color: ColorLike) -> Canvas:
    """Scanline-fill a polygon (even-odd rule).

    Each row is sampled at ``row + 0.5``; spans run from the ceiling of
    one crossing to the floor of the next. Edges join consecutive points
    only, so callers must close the polygon themselves.
    """
    if len(points) < 3:
        return canvas
    rgb = resolve_color(color)

    ys = [p.y for p in points if math.isfinite(p.y)]
    if not ys:
        return canvas
    y_start = max(0, math.floor(min(ys)))
    y_end = min(canvas.height - 1, math.ceil(max(ys)))
    # Edges touching a NaN or infinite point never cross a scanline
    edges = [
        (a, b)
        for a, b in zip(points, points[1:])
        if all(math.isfinite(v) for v in (a.x, a.y, b.x, b.y))
    ]

    for y in range(y_start, y_end + 1):
        scan_y = y + 0.5
        crossings = []
        for a, b in edges:
            if (a.y <= scan_y < b.y) or (b.y <= scan_y < a.y):
                t = (scan_y - a.y) / (b.y - a.y)
                crossings.append(a.x + t * (b.x - a.x))
        crossings.sort()

        for left, right in zip(crossings[::2], crossings[1::2]):
            x_start = max(0, math.ceil(left))
            x_end = min(canvas.width - 1, math.floor(right))
            if x_end >= x_start:
                canvas.draw_line_h(x_start, y, x_end - x_start + 1, rgb)

    return canvas


def render_svg_path(
    canvas: Canvas,
    d: str,
    color: ColorLike,
    view_box: tuple[float, float] = (16, 16),
    target_rect: tuple[float, float, float, float] | None = None,
) -> Canvas:
    """Render an SVG path onto a canvas, scaled into a target rectangle.

    Args:
        canvas: Target canvas
        d: SVG path data
        color: Fill color
        view_box: Source (width, height) the path coordinates refer to
        target_rect: (x, y, width, height) on the canvas (default: whole canvas)
    """
    tx, ty, tw, th = target_rect or (0, 0, canvas.width, canvas.height)
    vw, vh = view_box
    if vw == 0 or vh == 0:
        return canvas

    scaled = [Point(tx + p.x / vw * tw, ty + p.y / vh * th) for p in parse_svg_path(d)]
    return fill_polygon(canvas, scaled, color)
