"""Tests for SVG path parsing and polygon filling."""

import math

import pytest

from pixoo.display.canvas import Canvas
from pixoo.display.svg_path import (
    Point,
    fill_polygon,
    parse_svg_path,
    render_svg_path,
    tokenize,
)

RED = (255, 0, 0)
BLACK = (0, 0, 0)

SQUARE_16 = "M0 0 L16 0 L16 16 L0 16 Z"


class TestTokenize:
    def test_commands_and_args(self):
        assert tokenize("M0,0L1,1") == [("M", [0.0, 0.0]), ("L", [1.0, 1.0])]

    def test_minus_separates_numbers(self):
        assert tokenize("M1-2") == [("M", [1.0, -2.0])]

    def test_exponent_minus_kept(self):
        assert tokenize("M1e-1 2") == [("M", [0.1, 2.0])]

    def test_close_has_no_args(self):
        assert tokenize("Z") == [("Z", [])]

    def test_garbage_becomes_nan(self):
        (cmd, args), = tokenize("M1.2.3 4")
        assert cmd == "M"
        assert math.isnan(args[0])


class TestParseSvgPath:
    def test_closed_triangle(self):
        assert parse_svg_path("M0 0 L10 0 L10 10 Z") == [
            Point(0, 0),
            Point(10, 0),
            Point(10, 10),
            Point(0, 0),
        ]

    def test_close_returns_to_subpath_start(self):
        points = parse_svg_path("M0 0 L5 0 L5 5 Z M10 10 L15 10 L15 15 Z")
        assert points[-1] == Point(10, 10)
        assert points[3] == Point(0, 0)

    def test_relative_commands(self):
        assert parse_svg_path("m1 1 l2 0 l0 2 z") == [
            Point(1, 1),
            Point(3, 1),
            Point(3, 3),
            Point(1, 1),
        ]

    def test_horizontal_and_vertical(self):
        assert parse_svg_path("M0 0 H5 V5 h-2 v-1") == [
            Point(0, 0),
            Point(5, 0),
            Point(5, 5),
            Point(3, 5),
            Point(3, 4),
        ]

    def test_implicit_lineto_after_move(self):
        assert parse_svg_path("M0 0 10 0 10 10") == [Point(0, 0), Point(10, 0), Point(10, 10)]

    def test_relative_implicit_lineto(self):
        assert parse_svg_path("m1 1 2 0") == [Point(1, 1), Point(3, 1)]

    def test_curves_use_end_points(self):
        assert parse_svg_path("M0 0 C1 1 2 2 3 3") == [Point(0, 0), Point(3, 3)]
        assert parse_svg_path("M0 0 Q1 1 4 4 T6 6") == [Point(0, 0), Point(4, 4), Point(6, 6)]
        assert parse_svg_path("M0 0 S1 1 2 5") == [Point(0, 0), Point(2, 5)]

    def test_arc_uses_end_point(self):
        assert parse_svg_path("M0 0 A5 5 0 0 1 10 0") == [Point(0, 0), Point(10, 0)]

    def test_relative_curve(self):
        assert parse_svg_path("M1 1 c1 1 2 2 3 3") == [Point(1, 1), Point(4, 4)]

    def test_repeated_segments(self):
        assert parse_svg_path("M0 0 L1 1 2 2") == [Point(0, 0), Point(1, 1), Point(2, 2)]

    def test_incomplete_segment_ignored(self):
        assert parse_svg_path("M0 0 L5") == [Point(0, 0)]

    def test_close_without_points(self):
        assert parse_svg_path("Z") == []

    def test_unknown_letter_does_not_raise(self):
        points = parse_svg_path("M0 0 L10 0 B 5 5 L0 10")
        assert points[:2] == [Point(0.0, 0.0), Point(10.0, 0.0)]
        assert math.isnan(points[2].x)
        assert points[-1] == Point(0.0, 10.0)

    def test_empty(self):
        assert parse_svg_path("") == []


class TestFillPolygon:
    @pytest.fixture
    def square(self):
        return [Point(2, 2), Point(6, 2), Point(6, 6), Point(2, 6), Point(2, 2)]

    def test_fills_square(self, canvas, square):
        fill_polygon(canvas, square, "red")
        assert canvas.get_pixel(2, 2) == RED
        assert canvas.get_pixel(6, 5) == RED
        assert canvas.get_pixel(4, 4) == RED
        assert canvas.get_pixel(6, 6) == BLACK
        assert canvas.get_pixel(1, 3) == BLACK
        assert canvas.get_pixel(7, 3) == BLACK

    def test_fewer_than_three_points(self, canvas):
        fill_polygon(canvas, [Point(0, 0), Point(10, 10)], "red")
        assert canvas == Canvas()

    def test_even_odd_hole(self, canvas):
        outer = [Point(0, 0), Point(20, 0), Point(20, 20), Point(0, 20), Point(0, 0)]
        inner = [Point(5, 5), Point(15, 5), Point(15, 15), Point(5, 15), Point(5, 5)]
        fill_polygon(canvas, outer + inner, "red")
        assert canvas.get_pixel(2, 10) == RED
        assert canvas.get_pixel(10, 10) == BLACK

    def test_clipped(self, canvas):
        fill_polygon(canvas, [Point(-10, -10), Point(100, -10), Point(100, 100), Point(-10, 100), Point(-10, -10)], "red")
        assert canvas == Canvas().clear("red")


class TestRenderSvgPath:
    def test_full_canvas(self, canvas):
        render_svg_path(canvas, SQUARE_16, "red")
        assert canvas == Canvas().clear("red")

    def test_target_rect(self, canvas):
        render_svg_path(canvas, SQUARE_16, "red", target_rect=(10, 10, 8, 8))
        assert canvas.get_pixel(10, 10) == RED
        assert canvas.get_pixel(17, 17) == RED
        assert canvas.get_pixel(9, 9) == BLACK
        assert canvas.get_pixel(18, 18) == BLACK

    def test_custom_view_box(self, canvas):
        render_svg_path(canvas, "M0 0 L32 0 L32 32 L0 32 Z", "red", view_box=(64, 64))
        assert canvas.get_pixel(0, 0) == RED
        assert canvas.get_pixel(31, 31) == RED
        assert canvas.get_pixel(32, 32) == BLACK

    def test_zero_view_box_is_noop(self, canvas):
        render_svg_path(canvas, SQUARE_16, "red", view_box=(0, 16))
        assert canvas == Canvas()

    def test_unknown_letter_skipped(self, canvas):
        render_svg_path(canvas, "M0 0 L10 0 L10 10 B 5 5 L0 10 Z", "red", view_box=(16, 16))
        assert canvas.get_pixel(0, 0) == RED
        assert canvas.get_pixel(40, 39) == RED
        assert canvas.get_pixel(41, 10) == BLACK
        assert canvas.get_pixel(20, 40) == BLACK

    def test_overflowing_number_does_not_raise(self, canvas):
        render_svg_path(canvas, "M0 0 L1e999 0 L16 16 L0 16 Z", "red")
        assert canvas == Canvas()
