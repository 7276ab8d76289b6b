"""Tests for image loading and sprite downsampling."""

import pytest
from PIL import Image

from pixoo.core.errors import ImageLoadError
from pixoo.display.canvas import Canvas
from pixoo.display.image import (
    DEFAULT_BODY_COLOR,
    DEFAULT_DARK_COLOR,
    downsample_sprite,
    load_image,
    render_sprite,
)

RED = (255, 0, 0)
BLACK = (0, 0, 0)
BODY = (200, 120, 90)
DARK = (10, 10, 10)


@pytest.fixture
def half_red_png(tmp_path):
    """8x8 image: opaque red left half, transparent right half."""
    image = Image.new("RGBA", (8, 8), (0, 0, 0, 0))
    for y in range(8):
        for x in range(4):
            image.putpixel((x, y), (255, 0, 0, 255))
    path = tmp_path / "half.png"
    image.save(path)
    return path


@pytest.fixture
def wide_red_png(tmp_path):
    """8x4 image: opaque red left half, transparent right half."""
    image = Image.new("RGBA", (8, 4), (0, 0, 0, 0))
    for y in range(4):
        for x in range(4):
            image.putpixel((x, y), (255, 0, 0, 255))
    path = tmp_path / "wide.png"
    image.save(path)
    return path


@pytest.fixture
def sprite_png(tmp_path):
    """20x20 sprite: 10x10 body block at (5, 5) with a dark top-right quadrant."""
    image = Image.new("RGBA", (20, 20), (0, 0, 0, 0))
    for y in range(5, 15):
        for x in range(5, 15):
            color = DARK if (x >= 10 and y < 10) else BODY
            image.putpixel((x, y), color + (255,))
    path = tmp_path / "sprite.png"
    image.save(path)
    return path


class TestLoadImage:
    def test_draws_opaque_pixels(self, half_red_png):
        canvas = load_image(half_red_png, width=8, height=8)
        assert canvas.size == 64
        assert canvas.get_pixel(0, 0) == RED
        assert canvas.get_pixel(3, 7) == RED
        assert canvas.get_pixel(7, 0) == BLACK

    def test_transparent_pixels_keep_canvas(self, half_red_png):
        canvas = Canvas().clear("blue")
        load_image(half_red_png, width=8, height=8, canvas=canvas)
        assert canvas.get_pixel(7, 0) == (0, 0, 255)
        assert canvas.get_pixel(0, 0) == RED

    def test_offset(self, half_red_png):
        canvas = load_image(half_red_png, width=8, height=8, x=10, y=20)
        assert canvas.get_pixel(10, 20) == RED
        assert canvas.get_pixel(0, 0) == BLACK

    def test_default_box_is_canvas_size(self, half_red_png):
        canvas = load_image(half_red_png, fit="fill")
        assert canvas.get_pixel(0, 63) == RED
        assert canvas.get_pixel(31, 0) == RED
        assert canvas.get_pixel(32, 0) == BLACK

    def test_fill_stretches(self, wide_red_png):
        canvas = load_image(wide_red_png, width=16, height=16, fit="fill")
        assert canvas.get_pixel(0, 15) == RED
        assert canvas.get_pixel(15, 15) == BLACK

    def test_contain_letterboxes(self, wide_red_png):
        canvas = load_image(wide_red_png, width=16, height=16, fit="contain")
        assert canvas.get_pixel(0, 0) == BLACK
        assert canvas.get_pixel(0, 4) == RED
        assert canvas.get_pixel(0, 11) == RED
        assert canvas.get_pixel(0, 12) == BLACK

    def test_cover_crops(self, wide_red_png):
        canvas = load_image(wide_red_png, width=8, height=8, fit="cover")
        assert canvas.get_pixel(0, 0) == RED
        assert canvas.get_pixel(0, 7) == RED
        assert canvas.get_pixel(7, 0) == BLACK

    def test_onto_small_canvas(self, half_red_png):
        canvas = load_image(half_red_png, canvas=Canvas(16), fit="fill")
        assert canvas.get_pixel(7, 15) == RED
        assert canvas.get_pixel(8, 0) == BLACK

    def test_missing_file(self, tmp_path):
        with pytest.raises(ImageLoadError):
            load_image(tmp_path / "missing.png")

    def test_not_an_image(self, tmp_path):
        path = tmp_path / "notes.png"
        path.write_text("definitely not a png")
        with pytest.raises(ImageLoadError):
            load_image(path)

    def test_unknown_kernel(self, half_red_png):
        with pytest.raises(ValueError):
            load_image(half_red_png, kernel="box")

    def test_unknown_fit(self, half_red_png):
        with pytest.raises(ValueError):
            load_image(half_red_png, fit="stretch")


class TestDownsampleSprite:
    def test_grid_classification(self, sprite_png):
        sheet = downsample_sprite(sprite_png, 2, 2)
        assert sheet.width == 2
        assert sheet.height == 2
        assert sheet.body_color == BODY
        assert sheet.dark_color == DARK
        assert sheet.grid == [[BODY, DARK], [BODY, BODY]]

    def test_transparent_cells(self, tmp_path):
        image = Image.new("RGBA", (10, 10), (0, 0, 0, 0))
        for y in range(10):
            for x in (0, 1, 2, 7, 8, 9):
                image.putpixel((x, y), BODY + (255,))
        path = tmp_path / "bars.png"
        image.save(path)
        sheet = downsample_sprite(path, 3, 1)
        assert sheet.grid == [[BODY, None, BODY]]

    def test_empty_image(self, tmp_path):
        path = tmp_path / "empty.png"
        Image.new("RGBA", (10, 10), (0, 0, 0, 0)).save(path)
        sheet = downsample_sprite(path, 3, 2)
        assert sheet.grid == [[None, None, None], [None, None, None]]
        assert sheet.body_color == DEFAULT_BODY_COLOR
        assert sheet.dark_color == DEFAULT_DARK_COLOR

    def test_white_is_ignored(self, tmp_path):
        path = tmp_path / "white.png"
        Image.new("RGBA", (10, 10), (255, 255, 255, 255)).save(path)
        sheet = downsample_sprite(path, 2, 2)
        assert sheet.grid == [[None, None], [None, None]]

    def test_body_color_quantized(self, tmp_path):
        path = tmp_path / "red.png"
        Image.new("RGBA", (4, 4), (254, 3, 16, 255)).save(path)
        sheet = downsample_sprite(path, 1, 1)
        assert sheet.body_color == (250, 0, 20)
        assert sheet.grid == [[(250, 0, 20)]]

    def test_quantized_channel_stays_in_range(self, tmp_path):
        path = tmp_path / "red.png"
        Image.new("RGBA", (4, 4), (255, 0, 0, 255)).save(path)
        assert downsample_sprite(path, 1, 1).body_color == (255, 0, 0)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ImageLoadError):
            downsample_sprite(tmp_path / "missing.png", 2, 2)


class TestRenderSprite:
    def test_explicit_scale_and_position(self, canvas):
        render_sprite(canvas, [[(1, 2, 3), None]], scale=4, x=0, y=0)
        assert canvas.get_pixel(0, 0) == (1, 2, 3)
        assert canvas.get_pixel(3, 3) == (1, 2, 3)
        assert canvas.get_pixel(4, 0) == BLACK

    def test_default_scale_fills_canvas(self, canvas):
        render_sprite(canvas, [[BODY, BODY], [BODY, BODY]])
        assert canvas == Canvas().clear(BODY)

    def test_default_x_centres(self, canvas):
        render_sprite(canvas, [[BODY], [BODY]])
        # scale 32, one column wide: x = (64 - 32) // 2
        assert canvas.get_pixel(15, 0) == BLACK
        assert canvas.get_pixel(16, 0) == BODY
        assert canvas.get_pixel(47, 63) == BODY
        assert canvas.get_pixel(48, 0) == BLACK

    def test_color_substitution(self, canvas):
        render_sprite(
            canvas,
            [[BODY, DARK]],
            scale=1,
            x=0,
            body_color=RED,
            original_body_color=BODY,
            dark_color=(0, 0, 255),
            original_dark_color=DARK,
        )
        assert canvas.get_pixel(0, 0) == RED
        assert canvas.get_pixel(1, 0) == (0, 0, 255)

    def test_substitution_needs_original(self, canvas):
        render_sprite(canvas, [[BODY]], scale=1, x=0, body_color=RED)
        assert canvas.get_pixel(0, 0) == BODY

    def test_empty_grid(self, canvas):
        render_sprite(canvas, [])
        assert canvas == Canvas()
