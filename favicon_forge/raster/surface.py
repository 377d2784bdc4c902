from __future__ import annotations

import numpy as np

from favicon_forge.raster.canvas import RGBA, PixelBuffer, blend_mask, blit, fill_rect, new_canvas
from favicon_forge.raster.colors import DEFAULT_FILL_STYLE, resolve_fill_style
from favicon_forge.raster.draw_text import FontSpec, pillow_anchor, render_text_mask


class CanvasSurface:
    """Minimal 2D drawing context over an RGBA8 pixel array.

    Starts fully transparent. `fill_style` follows canvas assignment rules:
    a value that does not parse as a color is ignored and the previous
    style stays in effect.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("surface dimensions must be > 0")
        self.width = width
        self.height = height
        self._pixels = new_canvas(width, height)
        self._fill_style: RGBA = DEFAULT_FILL_STYLE
        self.font = FontSpec()
        self.text_align = "start"
        self.text_baseline = "alphabetic"

    @property
    def fill_style(self) -> RGBA:
        return self._fill_style

    @fill_style.setter
    def fill_style(self, value: str) -> None:
        self._fill_style = resolve_fill_style(value, self._fill_style)

    def fill_rect(self, x: int, y: int, w: int, h: int) -> None:
        fill_rect(self._pixels, x, y, w, h, self._fill_style)

    def fill_text(self, text: str, x: float, y: float) -> None:
        if not text:
            return
        mask = render_text_mask(
            text,
            self.font,
            width=self.width,
            height=self.height,
            x=x,
            y=y,
            anchor=pillow_anchor(self.text_align, self.text_baseline),
        )
        blend_mask(self._pixels, mask, self._fill_style)

    def draw_image(self, image: PixelBuffer, x: int = 0, y: int = 0) -> None:
        blit(self._pixels, image.pixels, x, y)

    def snapshot(self) -> PixelBuffer:
        return PixelBuffer(np.array(self._pixels, copy=True))
