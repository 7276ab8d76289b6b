"""Property-based tests using Hypothesis."""

from hypothesis import given, settings, strategies as st

from pixoo.display.canvas import SUPPORTED_SIZES, Canvas
from pixoo.display.color import dim_color, hsl_to_rgb, lerp_color, resolve_color, rgb_to_hsl
from pixoo.display.font import FONT_3X5, FONT_5X7, TextOptions, draw_text, measure_text
from pixoo.display.svg_path import parse_svg_path

channels = st.integers(min_value=0, max_value=255)
rgbs = st.tuples(channels, channels, channels)
sizes = st.sampled_from(SUPPORTED_SIZES)
coords = st.floats(min_value=-200, max_value=200, allow_nan=False)
text = st.text(alphabet=st.characters(min_codepoint=0, max_codepoint=127), max_size=12)
fonts = st.sampled_from([FONT_5X7, FONT_3X5])


def is_rgb(value):
    return len(value) == 3 and all(isinstance(c, int) and 0 <= c <= 255 for c in value)


class TestPixelProperties:
    @given(size=sizes, data=st.data(), color=rgbs)
    def test_set_then_get_in_bounds(self, size, data, color):
        """Any in-bounds write reads back as the resolved color."""
        x = data.draw(st.integers(min_value=0, max_value=size - 1))
        y = data.draw(st.integers(min_value=0, max_value=size - 1))
        canvas = Canvas(size)
        canvas.set_pixel(x, y, color)
        assert canvas.get_pixel(x, y) == resolve_color(color)

    @given(
        x=st.integers(min_value=-500, max_value=500),
        y=st.integers(min_value=-500, max_value=500),
    )
    def test_out_of_bounds_is_noop(self, x, y):
        canvas = Canvas(16)
        if 0 <= x < 16 and 0 <= y < 16:
            return
        canvas.set_pixel(x, y, "red")
        assert canvas == Canvas(16)
        assert canvas.get_pixel(x, y) == (0, 0, 0)

    @given(x=coords, y=coords, color=rgbs)
    def test_clone_is_independent(self, x, y, color):
        original = Canvas(16).clear((7, 7, 7))
        copy = original.clone()
        copy.set_pixel(x, y, color).fill_rect(x, y, 3, 3, color)
        assert original == Canvas(16).clear((7, 7, 7))


class TestPrimitiveProperties:
    @settings(max_examples=50)
    @given(x0=coords, y0=coords, x1=coords, y1=coords, r=st.floats(min_value=-5, max_value=80))
    def test_primitives_never_raise_or_resize(self, x0, y0, x1, y1, r):
        """Arbitrary geometry is clipped, never rejected."""
        canvas = Canvas(32)
        canvas.draw_line(x0, y0, x1, y1, "red")
        canvas.fill_rect(x0, y0, x1 - x0, y1 - y0, "green")
        canvas.draw_rect(x0, y0, x1 - x0, y1 - y0, "blue")
        canvas.fill_circle(x0, y0, r, "white")
        canvas.draw_circle(x1, y1, r, "white")
        canvas.fill_triangle(x0, y0, x1, y1, x0, y1, "yellow")
        canvas.blend_pixel(x1, y0, "cyan", 0.5)
        canvas.scroll(int(x0) % 64 - 32, int(y0) % 64 - 32)
        assert len(canvas.buffer) == 32 * 32 * 3

    @given(dx=st.integers(min_value=-80, max_value=80), dy=st.integers(min_value=-80, max_value=80))
    def test_blit_without_key_matches_pixels(self, dx, dy):
        source = Canvas(16).gradient_h("red", "blue")
        target = Canvas(32)
        target.blit(source, dx, dy, transparent_color=None)
        for y in range(32):
            for x in range(32):
                expected = source.get_pixel(x - dx, y - dy) if 0 <= x - dx < 16 and 0 <= y - dy < 16 else (0, 0, 0)
                assert target.get_pixel(x, y) == expected


class TestColorProperties:
    @given(rgb=rgbs)
    def test_hsl_round_trip_within_one(self, rgb):
        result = hsl_to_rgb(rgb_to_hsl(rgb))
        assert all(abs(a - b) <= 1 for a, b in zip(rgb, result))

    @given(rgb=rgbs, factor=st.floats(min_value=0, max_value=100, allow_nan=False))
    def test_dim_stays_in_byte_range(self, rgb, factor):
        assert is_rgb(dim_color(rgb, factor))

    @given(a=rgbs, b=rgbs, t=st.floats(allow_nan=False, allow_infinity=False))
    def test_lerp_stays_between_endpoints(self, a, b, t):
        result = lerp_color(a, b, t)
        for lo_hi, c in zip(zip(a, b), result):
            assert min(lo_hi) <= c <= max(lo_hi)

    @given(value=st.one_of(st.text(max_size=10), st.integers(min_value=0, max_value=0xFFFFFF), rgbs, st.none()))
    def test_resolve_always_valid(self, value):
        assert is_rgb(resolve_color(value))


class TestFontProperties:
    @given(s=text, font=fonts, spacing=st.integers(min_value=0, max_value=4))
    def test_measure_scales_linearly(self, s, font, spacing):
        one = measure_text(s, TextOptions(font=font, letter_spacing=spacing))
        two = measure_text(s, TextOptions(font=font, letter_spacing=spacing, scale=2))
        assert two == 2 * one

    @given(s=text, font=fonts)
    def test_draw_advance_is_measure_plus_spacing(self, s, font):
        options = TextOptions(font=font)
        advance = draw_text(Canvas(16), s, 0, 0, "white", options)
        expected = measure_text(s, options) + (options.letter_spacing if s else 0)
        assert advance == expected


class TestPathProperties:
    @given(
        points=st.lists(
            st.tuples(st.integers(-50, 50), st.integers(-50, 50)), min_size=1, max_size=8
        )
    )
    def test_absolute_polyline_round_trip(self, points):
        d = "M" + " L".join(f"{x} {y}" for x, y in points)
        assert [(p.x, p.y) for p in parse_svg_path(d)] == [(float(x), float(y)) for x, y in points]

    @given(
        points=st.lists(
            st.tuples(st.integers(-50, 50), st.integers(-50, 50)), min_size=2, max_size=8
        )
    )
    def test_close_returns_to_start(self, points):
        d = "M" + " L".join(f"{x} {y}" for x, y in points) + " Z"
        parsed = parse_svg_path(d)
        assert parsed[-1] == parsed[0]
