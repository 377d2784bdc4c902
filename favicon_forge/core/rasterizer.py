from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from favicon_forge.config import CANVAS_SIZE, MAX_TEXT_LENGTH
from favicon_forge.raster.canvas import PixelBuffer
from favicon_forge.raster.draw_text import FontSpec
from favicon_forge.raster.surface import CanvasSurface

from .errors import SurfaceUnavailableError


LOGGER = logging.getLogger(__name__)


class SurfaceBackend(Protocol):
    def get_context(self, width: int, height: int) -> CanvasSurface | None:
        ...


class PillowSurfaceBackend:
    def get_context(self, width: int, height: int) -> CanvasSurface | None:
        return CanvasSurface(width, height)


DEFAULT_BACKEND: SurfaceBackend = PillowSurfaceBackend()


def clamp_text(text: str) -> str:
    return text[:MAX_TEXT_LENGTH]


def rasterize(
    text: str,
    background_color: str,
    foreground_color: str,
    *,
    backend: SurfaceBackend | None = None,
    font_size: float = 20.0,
    font_path: Path | None = None,
) -> PixelBuffer:
    surface = (backend or DEFAULT_BACKEND).get_context(CANVAS_SIZE, CANVAS_SIZE)
    if surface is None:
        raise SurfaceUnavailableError("surface unavailable")

    text = clamp_text(text)
    surface.fill_style = background_color
    surface.fill_rect(0, 0, surface.width, surface.height)

    surface.font = FontSpec(family="sans-serif", size_px=font_size, weight="bold", path=font_path)
    surface.fill_style = foreground_color
    surface.text_align = "center"
    surface.text_baseline = "middle"
    LOGGER.debug("drawing %r in %s", text, surface.font.css())
    surface.fill_text(text, surface.width / 2, surface.height / 2)

    return surface.snapshot()
