from __future__ import annotations

import unittest

import numpy as np
from PIL import ImageColor

from favicon_forge.raster import CanvasSurface, PixelBuffer, fill_rect, new_canvas, parse_css_color, resolve_fill_style


class CanvasPrimitiveTests(unittest.TestCase):
    def test_new_canvas_defaults_to_transparent(self) -> None:
        canvas = new_canvas(4, 3)
        self.assertEqual(canvas.shape, (3, 4, 4))
        self.assertEqual(int(canvas.sum()), 0)

    def test_opaque_fill_replaces_pixels(self) -> None:
        canvas = new_canvas(4, 4, (10, 20, 30, 255))
        fill_rect(canvas, 1, 1, 2, 2, (200, 100, 50, 255))
        self.assertEqual(tuple(int(v) for v in canvas[1, 1]), (200, 100, 50, 255))
        self.assertEqual(tuple(int(v) for v in canvas[0, 0]), (10, 20, 30, 255))

    def test_fill_over_transparent_keeps_source_alpha(self) -> None:
        canvas = new_canvas(2, 2)
        fill_rect(canvas, 0, 0, 2, 2, (255, 0, 0, 128))
        self.assertEqual(tuple(int(v) for v in canvas[0, 0]), (255, 0, 0, 128))

    def test_fill_rect_clips_to_canvas(self) -> None:
        canvas = new_canvas(3, 3)
        fill_rect(canvas, -5, -5, 6, 6, (1, 2, 3, 255))
        self.assertEqual(int(canvas[0, 0, 3]), 255)
        self.assertEqual(int(canvas[2, 2, 3]), 0)


class PixelBufferTests(unittest.TestCase):
    def test_pixels_are_read_only_copies(self) -> None:
        source = new_canvas(2, 2, (1, 2, 3, 255))
        buffer = PixelBuffer(source)
        source[0, 0] = (9, 9, 9, 9)
        self.assertEqual(buffer.pixel(0, 0), (1, 2, 3, 255))
        with self.assertRaises(ValueError):
            buffer.pixels[0, 0, 0] = 7

    def test_rejects_non_rgba_shape(self) -> None:
        with self.assertRaises(ValueError):
            PixelBuffer(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_image_round_trip(self) -> None:
        buffer = PixelBuffer(new_canvas(3, 2, (5, 6, 7, 200)))
        again = PixelBuffer.from_image(buffer.to_image())
        self.assertTrue(np.array_equal(buffer.pixels, again.pixels))
        self.assertEqual((again.width, again.height), (3, 2))


class ColorResolutionTests(unittest.TestCase):
    def test_parses_common_css_forms(self) -> None:
        self.assertEqual(parse_css_color("#4F46E5"), (79, 70, 229, 255))
        self.assertEqual(parse_css_color("#fff"), (255, 255, 255, 255))
        self.assertEqual(parse_css_color("rgb(1, 2, 3)"), (1, 2, 3, 255))
        self.assertEqual(parse_css_color("red"), (255, 0, 0, 255))
        self.assertEqual(parse_css_color("transparent"), (0, 0, 0, 0))

    def test_parses_fractional_and_percentage_alpha(self) -> None:
        self.assertEqual(parse_css_color("rgba(79, 70, 229, 0.5)"), (79, 70, 229, 128))
        self.assertEqual(parse_css_color("rgba(79, 70, 229, 50%)"), (79, 70, 229, 128))
        self.assertEqual(parse_css_color("rgba(79, 70, 229, 0)"), (79, 70, 229, 0))
        self.assertEqual(parse_css_color("RGBA(79,70,229,1)"), (79, 70, 229, 255))

    def test_parses_space_separated_syntax(self) -> None:
        self.assertEqual(parse_css_color("rgb(79 70 229)"), (79, 70, 229, 255))
        self.assertEqual(parse_css_color("rgb(79 70 229 / 0.25)"), (79, 70, 229, 64))
        self.assertEqual(parse_css_color("rgb(100% 0% 50%)"), (255, 0, 128, 255))

    def test_parses_hsl_forms(self) -> None:
        r, g, b = ImageColor.getrgb("hsl(243, 75%, 59%)")
        self.assertEqual(parse_css_color("hsla(243, 75%, 59%, 1)"), (r, g, b, 255))
        self.assertEqual(parse_css_color("hsl(243deg 75% 59% / 0.5)"), (r, g, b, 128))
        self.assertEqual(parse_css_color("hsl(0, 100%, 50%)"), (255, 0, 0, 255))
        self.assertEqual(parse_css_color("hsl(0.5turn 100% 50%)"), (0, 255, 255, 255))

    def test_out_of_range_channels_are_clamped(self) -> None:
        self.assertEqual(parse_css_color("rgb(300, -4, 12)"), (255, 0, 12, 255))
        self.assertEqual(parse_css_color("rgba(1, 2, 3, 1.7)"), (1, 2, 3, 255))

    def test_malformed_functional_colors_are_none(self) -> None:
        for value in ("rgb(1, 2)", "rgb(1 2 3 /)", "rgba(1, 2, 3 / 0.5)", "rgb(a, b, c)", "hsl(10, 20%)", "rgb(1, 2, 3, 4, 5)"):
            with self.subTest(value=value):
                self.assertIsNone(parse_css_color(value))

    def test_unparseable_color_is_none(self) -> None:
        self.assertIsNone(parse_css_color("not-a-color"))
        self.assertIsNone(parse_css_color(""))

    def test_invalid_assignment_keeps_previous_style(self) -> None:
        self.assertEqual(resolve_fill_style("bogus", (1, 2, 3, 255)), (1, 2, 3, 255))
        self.assertEqual(resolve_fill_style("#000", (1, 2, 3, 255)), (0, 0, 0, 255))


class CanvasSurfaceTests(unittest.TestCase):
    def test_fill_style_starts_black_and_ignores_invalid_values(self) -> None:
        surface = CanvasSurface(4, 4)
        self.assertEqual(surface.fill_style, (0, 0, 0, 255))
        surface.fill_style = "#00ff00"
        surface.fill_style = "nope"
        self.assertEqual(surface.fill_style, (0, 255, 0, 255))

    def test_empty_text_draws_nothing(self) -> None:
        surface = CanvasSurface(4, 4)
        surface.fill_text("", 2, 2)
        self.assertEqual(int(surface.snapshot().pixels.sum()), 0)

    def test_draw_image_copies_opaque_pixels(self) -> None:
        src = PixelBuffer(new_canvas(4, 4, (12, 34, 56, 255)))
        surface = CanvasSurface(4, 4)
        surface.draw_image(src)
        self.assertTrue(np.array_equal(surface.snapshot().pixels, src.pixels))

    def test_rejects_empty_dimensions(self) -> None:
        with self.assertRaises(ValueError):
            CanvasSurface(0, 4)


if __name__ == "__main__":
    unittest.main()
