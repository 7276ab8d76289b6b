"""Square RGB pixel buffer with drawing primitives.

Coordinates: (0, 0) is top-left, (size-1, size-1) is bottom-right.
All coordinate arguments are floored to integers. Drawing outside the
canvas is silently clipped; reading outside returns black. Every drawing
method mutates in place and returns the canvas for chaining:

    canvas = Canvas()
    canvas.clear("navy").fill_circle(32, 32, 10, "gold").draw_rect(0, 0, 64, 64, "white")
"""

import base64
import math
from typing import Callable

from ..core.errors import CanvasError
from .color import BLACK, RGB, ColorLike, lerp_color, resolve_color


SUPPORTED_SIZES = (16, 32, 64)
DEFAULT_SIZE = 64


class Canvas:
    """Fixed-size square RGB canvas.

    The pixel data lives in ``buffer``: a flat row-major ``bytearray`` of
    exactly ``size * size * 3`` bytes (R, G, B per pixel).
    """

    def __init__(
        self,
        size: int = DEFAULT_SIZE,
        source: bytes | bytearray | memoryview | None = None,
    ) -> None:
        """Create a canvas.

        Args:
            size: Edge length in pixels (16, 32 or 64)
            source: Optional pixel data to copy; must be size * size * 3 bytes

        Raises:
            CanvasError: If size is unsupported or source has the wrong length
        """
        if size not in SUPPORTED_SIZES:
            raise CanvasError(
                f"Canvas size must be one of {SUPPORTED_SIZES}",
                details={"size": size},
            )
        expected = size * size * 3
        if source is not None and len(source) != expected:
            raise CanvasError(
                f"Canvas buffer must be exactly {expected} bytes, got {len(source)}",
                details={"size": size, "length": len(source)},
            )
        self.size = size
        self.buffer = bytearray(source) if source is not None else bytearray(expected)

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> "Canvas":
        """Create a canvas from raw RGB data, inferring the size from its length.

        Raises:
            CanvasError: If the length does not match any supported size
        """
        for size in SUPPORTED_SIZES:
            if len(data) == size * size * 3:
                return cls(size, data)
        raise CanvasError(
            "Buffer length does not match any supported canvas size",
            details={"length": len(data)},
        )

    @property
    def width(self) -> int:
        return self.size

    @property
    def height(self) -> int:
        return self.size

    def clone(self) -> "Canvas":
        """Return an independent deep copy of this canvas."""
        return Canvas(self.size, self.buffer)

    def to_bytes(self) -> bytes:
        """Return an immutable copy of the raw RGB buffer."""
        return bytes(self.buffer)

    def to_base64(self) -> str:
        """Base64-encode the raw pixel buffer (device frame payload)."""
        return base64.b64encode(self.buffer).decode("ascii")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Canvas):
            return NotImplemented
        return self.size == other.size and self.buffer == other.buffer

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Canvas(size={self.size})"

    # -------------------------------------------------------------------------
    # Pixel access
    # -------------------------------------------------------------------------

    def _index(self, x: int, y: int) -> int:
        return (y * self.size + x) * 3

    def in_bounds(self, x: int, y: int) -> bool:
        """Check whether integer coordinates lie on the canvas."""
        return 0 <= x < self.size and 0 <= y < self.size

    def _put(self, x: int, y: int, rgb: RGB) -> None:
        i = self._index(x, y)
        self.buffer[i : i + 3] = bytes(rgb)

    def set_pixel(self, x: float, y: float, color: ColorLike) -> "Canvas":
        """Set a single pixel. Out-of-bounds calls are ignored."""
        ix = math.floor(x)
        iy = math.floor(y)
        if not self.in_bounds(ix, iy):
            return self
        self._put(ix, iy, resolve_color(color))
        return self

    def get_pixel(self, x: float, y: float) -> RGB:
        """Get a pixel's color. Returns black for out-of-bounds."""
        ix = math.floor(x)
        iy = math.floor(y)
        if not self.in_bounds(ix, iy):
            return BLACK
        i = self._index(ix, iy)
        return (self.buffer[i], self.buffer[i + 1], self.buffer[i + 2])

    # -------------------------------------------------------------------------
    # Fill operations
    # -------------------------------------------------------------------------

    def clear(self, color: ColorLike = BLACK) -> "Canvas":
        """Fill the entire canvas with a color."""
        rgb = resolve_color(color)
        if rgb == BLACK:
            self.buffer[:] = bytes(len(self.buffer))
        else:
            self.buffer[:] = bytes(rgb) * (self.size * self.size)
        return self

    def fill_rect(self, x: float, y: float, w: float, h: float, color: ColorLike) -> "Canvas":
        """Fill a rectangular region, clipped to the canvas."""
        row = bytes(resolve_color(color))
        x0 = max(0, math.floor(x))
        y0 = max(0, math.floor(y))
        x1 = min(self.size, math.floor(x + w))
        y1 = min(self.size, math.floor(y + h))
        if x1 <= x0:
            return self
        span = row * (x1 - x0)
        for py in range(y0, y1):
            i = self._index(x0, py)
            self.buffer[i : i + len(span)] = span
        return self

    def fill_circle(self, cx: float, cy: float, radius: float, color: ColorLike) -> "Canvas":
        """Fill a solid circle.

        A pixel is inside when ``dx*dx + dy*dy <= radius*radius`` (closed disk).
        """
        rgb = resolve_color(color)
        r2 = radius * radius
        x0 = max(0, math.floor(cx - radius))
        y0 = max(0, math.floor(cy - radius))
        x1 = min(self.size - 1, math.ceil(cx + radius))
        y1 = min(self.size - 1, math.ceil(cy + radius))
        for py in range(y0, y1 + 1):
            dy = py - cy
            for px in range(x0, x1 + 1):
                dx = px - cx
                if dx * dx + dy * dy <= r2:
                    self._put(px, py, rgb)
        return self

    # -------------------------------------------------------------------------
    # Stroke shapes
    # -------------------------------------------------------------------------

    def draw_rect(self, x: float, y: float, w: float, h: float, color: ColorLike) -> "Canvas":
        """Draw a 1px rectangle outline covering columns x..x+w-1, rows y..y+h-1."""
        rgb = resolve_color(color)
        self.draw_line_h(x, y, w, rgb)
        self.draw_line_h(x, y + h - 1, w, rgb)
        self.draw_line_v(x, y, h, rgb)
        self.draw_line_v(x + w - 1, y, h, rgb)
        return self

    def draw_circle(self, cx: float, cy: float, radius: float, color: ColorLike) -> "Canvas":
        """Draw a circle outline (midpoint algorithm, 8-way symmetry)."""
        rgb = resolve_color(color)
        x = radius
        y = 0
        d = 1 - radius
        while x >= y:
            self.set_pixel(cx + x, cy + y, rgb)
            self.set_pixel(cx - x, cy + y, rgb)
            self.set_pixel(cx + x, cy - y, rgb)
            self.set_pixel(cx - x, cy - y, rgb)
            self.set_pixel(cx + y, cy + x, rgb)
            self.set_pixel(cx - y, cy + x, rgb)
            self.set_pixel(cx + y, cy - x, rgb)
            self.set_pixel(cx - y, cy - x, rgb)
            y += 1
            if d <= 0:
                d += 2 * y + 1
            else:
                x -= 1
                d += 2 * (y - x) + 1
        return self

    def draw_line(
        self, x0: float, y0: float, x1: float, y1: float, color: ColorLike
    ) -> "Canvas":
        """Draw an arbitrary 1px line (Bresenham)."""
        x0 = math.floor(x0)
        y0 = math.floor(y0)
        x1 = math.floor(x1)
        y1 = math.floor(y1)
        rgb = resolve_color(color)
        dx = abs(x1 - x0)
        dy = -abs(y1 - y0)
        sx = 1 if x0 < x1 else -1
        sy = 1 if y0 < y1 else -1
        err = dx + dy
        x, y = x0, y0
        while True:
            if self.in_bounds(x, y):
                self._put(x, y, rgb)
            if x == x1 and y == y1:
                break
            e2 = 2 * err
            if e2 >= dy:
                err += dy
                x += sx
            if e2 <= dx:
                err += dx
                y += sy
        return self

    def draw_line_h(self, x: float, y: float, length: float, color: ColorLike) -> "Canvas":
        """Draw a horizontal line of ``length`` pixels starting at (x, y)."""
        iy = math.floor(y)
        if iy < 0 or iy >= self.size:
            return self
        x0 = max(0, math.floor(x))
        x1 = min(self.size, math.floor(x + length))
        if x1 <= x0:
            return self
        i = self._index(x0, iy)
        self.buffer[i : i + (x1 - x0) * 3] = bytes(resolve_color(color)) * (x1 - x0)
        return self

    def draw_line_v(self, x: float, y: float, length: float, color: ColorLike) -> "Canvas":
        """Draw a vertical line of ``length`` pixels starting at (x, y)."""
        ix = math.floor(x)
        if ix < 0 or ix >= self.size:
            return self
        rgb = resolve_color(color)
        y0 = max(0, math.floor(y))
        y1 = min(self.size, math.floor(y + length))
        for py in range(y0, y1):
            self._put(ix, py, rgb)
        return self

    def draw_triangle(
        self,
        x0: float,
        y0: float,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        color: ColorLike,
    ) -> "Canvas":
        """Draw a triangle outline."""
        rgb = resolve_color(color)
        self.draw_line(x0, y0, x1, y1, rgb)
        self.draw_line(x1, y1, x2, y2, rgb)
        self.draw_line(x2, y2, x0, y0, rgb)
        return self

    def fill_triangle(
        self,
        x0: float,
        y0: float,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        color: ColorLike,
    ) -> "Canvas":
        """Fill a solid triangle (scanline rasterization).

        Vertices are sorted by y into a (top, middle, bottom) order. The
        upper half spans rows top..middle-1 and the lower half middle..bottom;
        each row fills from ceil(left edge) to floor(right edge).
        """
        rgb = resolve_color(color)
        (ax, ay), (bx, by), (cx, cy) = sorted(
            ((x0, y0), (x1, y1), (x2, y2)), key=lambda p: p[1]
        )

        def edge_x(y: float, ya: float, xa: float, yb: float, xb: float) -> float:
            if ya == yb:
                return xa
            return xa + (y - ya) / (yb - ya) * (xb - xa)

        def scanline(
            y_top: float,
            y_bottom: float,
            edge: Callable[[float], float],
        ) -> None:
            y_start = max(0, math.ceil(y_top))
            y_end = min(self.size - 1, math.floor(y_bottom))
            for y in range(y_start, y_end + 1):
                e1 = edge(y)
                e2 = edge_x(y, ay, ax, cy, cx)
                xl = max(0, math.ceil(min(e1, e2)))
                xr = min(self.size - 1, math.floor(max(e1, e2)))
                if xr >= xl:
                    i = self._index(xl, y)
                    self.buffer[i : i + (xr - xl + 1) * 3] = bytes(rgb) * (xr - xl + 1)

        if by > ay:
            scanline(ay, by - 1, lambda y: edge_x(y, ay, ax, by, bx))
        if cy > by:
            scanline(by, cy, lambda y: edge_x(y, by, bx, cy, cx))
        return self

    # -------------------------------------------------------------------------
    # Compositing
    # -------------------------------------------------------------------------

    def blend_pixel(self, x: float, y: float, color: ColorLike, alpha: float) -> "Canvas":
        """Alpha-blend a color onto a pixel.

        Args:
            x: X coordinate
            y: Y coordinate
            color: Foreground color
            alpha: Opacity; <= 0 is a no-op, >= 1 overwrites
        """
        if alpha <= 0:
            return self
        if alpha >= 1:
            return self.set_pixel(x, y, color)
        bg = self.get_pixel(x, y)
        return self.set_pixel(x, y, lerp_color(bg, resolve_color(color), alpha))

    def blit(
        self,
        source: "Canvas",
        dx: float = 0,
        dy: float = 0,
        transparent_color: ColorLike | None = BLACK,
    ) -> "Canvas":
        """Composite another canvas on top of this one at an offset.

        Pixels are copied by value. Source pixels equal to
        ``transparent_color`` are skipped (black by default); pass ``None``
        to copy every pixel.

        Args:
            source: Canvas to copy from (any supported size)
            dx: Destination x of the source's top-left corner
            dy: Destination y of the source's top-left corner
            transparent_color: Color key to skip, or None
        """
        dx = math.floor(dx)
        dy = math.floor(dy)
        key = None if transparent_color is None else bytes(resolve_color(transparent_color))
        src = source.buffer
        dst = self.buffer

        sy_start = max(0, -dy)
        sy_end = min(source.size, self.size - dy)
        sx_start = max(0, -dx)
        sx_end = min(source.size, self.size - dx)
        if sx_end <= sx_start:
            return self

        for sy in range(sy_start, sy_end):
            si = source._index(sx_start, sy)
            di = self._index(dx + sx_start, dy + sy)
            if key is None:
                n = (sx_end - sx_start) * 3
                dst[di : di + n] = src[si : si + n]
                continue
            for _ in range(sx_start, sx_end):
                pixel = src[si : si + 3]
                if pixel != key:
                    dst[di : di + 3] = pixel
                si += 3
                di += 3
        return self

    # -------------------------------------------------------------------------
    # Gradients
    # -------------------------------------------------------------------------

    def gradient_v(self, top_color: ColorLike, bottom_color: ColorLike) -> "Canvas":
        """Fill the canvas with a vertical gradient."""
        top = resolve_color(top_color)
        bottom = resolve_color(bottom_color)
        for y in range(self.size):
            t = y / (self.size - 1)
            self.draw_line_h(0, y, self.size, lerp_color(top, bottom, t))
        return self

    def gradient_h(self, left_color: ColorLike, right_color: ColorLike) -> "Canvas":
        """Fill the canvas with a horizontal gradient."""
        left = resolve_color(left_color)
        right = resolve_color(right_color)
        for x in range(self.size):
            t = x / (self.size - 1)
            self.draw_line_v(x, 0, self.size, lerp_color(left, right, t))
        return self

    def gradient_radial(
        self,
        cx: float,
        cy: float,
        radius: float,
        inner_color: ColorLike,
        outer_color: ColorLike,
    ) -> "Canvas":
        """Fill the canvas with a radial gradient around (cx, cy).

        Pixels at ``radius`` or further get ``outer_color``. A zero radius
        paints every pixel except the exact center with the outer color; a
        negative radius paints everything with the inner color.
        """
        inner = resolve_color(inner_color)
        outer = resolve_color(outer_color)
        for y in range(self.size):
            for x in range(self.size):
                dist = math.hypot(x - cx, y - cy)
                if radius == 0:
                    t = 1.0 if dist > 0 else 0.0
                else:
                    t = min(1.0, dist / radius)
                self._put(x, y, lerp_color(inner, outer, t))
        return self

    # -------------------------------------------------------------------------
    # Transform
    # -------------------------------------------------------------------------

    def scroll(self, dx: int, dy: int) -> "Canvas":
        """Shift all pixels by (dx, dy).

        Pixels shifted off the canvas are dropped and vacated pixels become
        black. This does not wrap around.
        """
        dx = math.floor(dx)
        dy = math.floor(dy)
        snapshot = bytes(self.buffer)
        self.clear()
        sx_start = max(0, -dx)
        sx_end = min(self.size, self.size - dx)
        if sx_end <= sx_start:
            return self
        n = (sx_end - sx_start) * 3
        for y in range(self.size):
            ny = y + dy
            if ny < 0 or ny >= self.size:
                continue
            si = self._index(sx_start, y)
            di = self._index(sx_start + dx, ny)
            self.buffer[di : di + n] = snapshot[si : si + n]
        return self
