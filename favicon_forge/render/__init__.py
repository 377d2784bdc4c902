from .svg import SVG_MIME_TYPE, SvgDocument, SvgRect, SvgText, build_favicon_svg

__all__ = [
    "SVG_MIME_TYPE",
    "SvgDocument",
    "SvgRect",
    "SvgText",
    "build_favicon_svg",
]
