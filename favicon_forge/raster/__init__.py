from .canvas import RGBA, PixelBuffer, blend_mask, blit, fill_rect, new_canvas
from .colors import parse_css_color, resolve_fill_style
from .draw_text import FontSpec, load_font, render_text_mask
from .surface import CanvasSurface

__all__ = [
    "RGBA",
    "CanvasSurface",
    "FontSpec",
    "PixelBuffer",
    "blend_mask",
    "blit",
    "fill_rect",
    "load_font",
    "new_canvas",
    "parse_css_color",
    "render_text_mask",
    "resolve_fill_style",
]
