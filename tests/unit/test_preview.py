"""Tests for PNG previews."""

import io

import pytest
from PIL import Image

from pixoo.core.errors import CanvasError
from pixoo.display.canvas import Canvas
from pixoo.display.preview import (
    canvas_to_image,
    canvas_to_png,
    image_to_canvas,
    save_animation_pngs,
    save_png,
)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def decode(data):
    return Image.open(io.BytesIO(data))


class TestCanvasToPng:
    def test_png_signature(self, canvas):
        assert canvas_to_png(canvas).startswith(PNG_SIGNATURE)

    def test_unscaled_dimensions(self):
        image = decode(canvas_to_png(Canvas(16)))
        assert image.size == (16, 16)
        assert image.mode == "RGB"

    def test_nearest_neighbour_upscale(self, canvas):
        canvas.set_pixel(1, 0, "red")
        image = decode(canvas_to_png(canvas, scale=4))
        assert image.size == (256, 256)
        assert image.getpixel((4, 0)) == (255, 0, 0)
        assert image.getpixel((7, 3)) == (255, 0, 0)
        assert image.getpixel((8, 0)) == (0, 0, 0)
        assert image.getpixel((3, 0)) == (0, 0, 0)

    def test_invalid_scale(self, canvas):
        with pytest.raises(ValueError):
            canvas_to_png(canvas, scale=0)


class TestImageConversion:
    def test_round_trip(self, canvas):
        canvas.gradient_h("red", "blue").set_pixel(5, 5, "lime")
        assert image_to_canvas(canvas_to_image(canvas)) == canvas

    def test_rgba_converted(self):
        image = Image.new("RGBA", (32, 32), (10, 20, 30, 255))
        assert image_to_canvas(image).get_pixel(0, 0) == (10, 20, 30)

    @pytest.mark.parametrize("size", [(10, 10), (16, 32), (64, 16)])
    def test_unsupported_dimensions(self, size):
        with pytest.raises(CanvasError):
            image_to_canvas(Image.new("RGB", size))


class TestSavePng:
    def test_save_png_default_scale(self, tmp_path, canvas):
        path = save_png(canvas, tmp_path / "frame.png")
        assert path.exists()
        with Image.open(path) as image:
            assert image.size == (512, 512)

    def test_save_animation_pngs(self, tmp_path):
        frames = [Canvas(16).clear(c) for c in ("red", "green", "blue")]
        paths = save_animation_pngs(frames, tmp_path / "anim", scale=1)
        assert [p.name for p in paths] == ["anim_000.png", "anim_001.png", "anim_002.png"]
        with Image.open(paths[2]) as image:
            assert image.getpixel((0, 0)) == (0, 0, 255)
