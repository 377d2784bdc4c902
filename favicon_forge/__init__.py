"""Text glyph favicons exported as PNG, SVG and ICO."""

from .config import CANVAS_SIZE, PRESET_SWATCHES, FaviconConfig, load_config

__all__ = ["CANVAS_SIZE", "PRESET_SWATCHES", "FaviconConfig", "load_config"]
