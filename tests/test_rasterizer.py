from __future__ import annotations

import unittest

import numpy as np
from PIL import ImageColor

from favicon_forge.core.errors import SurfaceUnavailableError
from favicon_forge.core.rasterizer import clamp_text, rasterize
from favicon_forge.raster import CanvasSurface


INDIGO = (79, 70, 229, 255)


class _NoContextBackend:
    def get_context(self, width: int, height: int) -> CanvasSurface | None:
        return None


class RasterizeTests(unittest.TestCase):
    def test_buffer_is_fixed_square(self) -> None:
        buffer = rasterize("F", "#4F46E5", "#FFFFFF")
        self.assertEqual((buffer.width, buffer.height), (32, 32))

    def test_corners_keep_background(self) -> None:
        for text in ("F", "AB", "WW", "gy"):
            with self.subTest(text=text):
                buffer = rasterize(text, "#4F46E5", "#FFFFFF")
                self.assertEqual(buffer.corners(), (INDIGO, INDIGO, INDIGO, INDIGO))

    def test_glyph_is_drawn_near_center(self) -> None:
        buffer = rasterize("F", "#4F46E5", "#FFFFFF")
        center = buffer.pixels[8:24, 8:24, 0]
        self.assertGreater(int(center.max()), 200)

    def test_empty_text_draws_blank_square(self) -> None:
        buffer = rasterize("", "#123456", "#FFFFFF")
        self.assertTrue(np.all(buffer.pixels == np.array([0x12, 0x34, 0x56, 255], dtype=np.uint8)))

    def test_text_is_clamped_to_two_characters(self) -> None:
        self.assertEqual(clamp_text("ABC"), "AB")
        self.assertEqual(clamp_text(""), "")
        long = rasterize("ABC", "#4F46E5", "#FFFFFF")
        short = rasterize("AB", "#4F46E5", "#FFFFFF")
        self.assertTrue(np.array_equal(long.pixels, short.pixels))

    def test_output_is_deterministic(self) -> None:
        a = rasterize("Fx", "teal", "white")
        b = rasterize("Fx", "teal", "white")
        self.assertTrue(np.array_equal(a.pixels, b.pixels))

    def test_invalid_background_falls_back_to_black(self) -> None:
        buffer = rasterize("", "definitely-not-a-color", "#FFFFFF")
        self.assertEqual(buffer.pixel(0, 0), (0, 0, 0, 255))

    def test_invalid_foreground_reuses_previous_fill_style(self) -> None:
        buffer = rasterize("F", "#4F46E5", "bogus")
        self.assertTrue(np.all(buffer.pixels == np.array(INDIGO, dtype=np.uint8)))

    def test_transparent_background(self) -> None:
        buffer = rasterize("", "transparent", "#FFFFFF")
        self.assertEqual(buffer.pixel(0, 0), (0, 0, 0, 0))

    def test_translucent_and_modern_color_syntax_backgrounds(self) -> None:
        hsl_rgb = ImageColor.getrgb("hsl(243, 75%, 59%)")
        cases = {
            "rgba(79, 70, 229, 0.5)": (79, 70, 229, 128),
            "rgba(79, 70, 229, 25%)": (79, 70, 229, 64),
            "rgb(79 70 229)": INDIGO,
            "rgb(79 70 229 / 0.5)": (79, 70, 229, 128),
            "hsla(243, 75%, 59%, 1)": (*hsl_rgb, 255),
            "hsl(243 75% 59% / 50%)": (*hsl_rgb, 128),
        }
        for color, expected in cases.items():
            with self.subTest(color=color):
                buffer = rasterize("", color, "#FFFFFF")
                self.assertEqual(buffer.corners(), (expected, expected, expected, expected))

    def test_modern_color_syntax_foreground_is_applied(self) -> None:
        buffer = rasterize("F", "#4F46E5", "rgb(255 255 255 / 1)")
        self.assertGreater(int(buffer.pixels[8:24, 8:24, 0].max()), 200)

    def test_missing_surface_raises(self) -> None:
        with self.assertRaises(SurfaceUnavailableError) as ctx:
            rasterize("F", "#4F46E5", "#FFFFFF", backend=_NoContextBackend())
        self.assertEqual(str(ctx.exception), "surface unavailable")


if __name__ == "__main__":
    unittest.main()
