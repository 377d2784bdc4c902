from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Optional
import xml.etree.ElementTree as ET
from xml.sax.saxutils import escape, quoteattr

from favicon_forge.config import CANVAS_SIZE
from favicon_forge.raster.canvas import RGBA
from favicon_forge.raster.colors import parse_css_color


SVG_NAMESPACE = "http://www.w3.org/2000/svg"
SVG_MIME_TYPE = "image/svg+xml"

_STYLE_RULE = re.compile(r"\.([A-Za-z_][\w-]*)\s*\{([^}]*)\}")


def build_favicon_svg(
    text: str,
    background_color: str,
    foreground_color: str,
    *,
    size: int = CANVAS_SIZE,
    font_size: float = 20.0,
) -> str:
    """Vector twin of the rasterized favicon.

    Colors go into both the class rules and the element fill attributes.
    """
    center = size / 2
    bg_css = _css_value(background_color)
    fg_css = _css_value(foreground_color)
    return (
        f'<svg xmlns="{SVG_NAMESPACE}" viewBox="0 0 {size} {size}">\n'
        "    <style>\n"
        f"        .bg {{ fill: {bg_css}; }}\n"
        "        .text {\n"
        f"            fill: {fg_css};\n"
        "            font-family: sans-serif;\n"
        f"            font-size: {font_size:g}px;\n"
        "            font-weight: bold;\n"
        "            text-anchor: middle;\n"
        "            dominant-baseline: middle;\n"
        "        }\n"
        "    </style>\n"
        f'    <rect class="bg" width="{size}" height="{size}" rx="0" fill={quoteattr(_xml_chars(background_color))}/>\n'
        f'    <text class="text" x="{center:g}" y="{center:g}" fill={quoteattr(_xml_chars(foreground_color))}>{escape(_xml_chars(text))}</text>\n'
        "</svg>\n"
    )


def _xml_chars(value: str) -> str:
    return "".join(ch for ch in value if ch in "\t\n\r" or ord(ch) >= 0x20)


def _css_value(value: str) -> str:
    # Keep the declaration inside its rule and the markup well-formed.
    return escape(_xml_chars(value).replace("}", "").replace(";", ""))


@dataclass(frozen=True)
class SvgRect:
    x: float
    y: float
    width: float
    height: float
    fill: Optional[str]
    css_class: Optional[str]


@dataclass(frozen=True)
class SvgText:
    x: float
    y: float
    content: str
    fill: Optional[str]
    css_class: Optional[str]


@dataclass
class SvgDocument:
    width: float
    height: float
    viewbox: tuple[float, float, float, float]
    rects: list[SvgRect]
    texts: list[SvgText]
    class_styles: dict[str, dict[str, str]] = field(default_factory=dict)

    @classmethod
    def from_markup(cls, svg_markup: str | bytes) -> "SvgDocument":
        root = ET.fromstring(svg_markup)
        return cls._from_root(root)

    @classmethod
    def _from_root(cls, root: ET.Element) -> "SvgDocument":
        if _strip_namespace(root.tag) != "svg":
            raise ValueError(f"root element must be <svg>, got <{_strip_namespace(root.tag)}>")
        width = _parse_length(root.attrib.get("width"))
        height = _parse_length(root.attrib.get("height"))
        viewbox = _parse_viewbox(root.attrib.get("viewBox"))
        if viewbox is None:
            vb = (0.0, 0.0, width or 100.0, height or 100.0)
        else:
            vb = viewbox
        if width is None:
            width = vb[2]
        if height is None:
            height = vb[3]
        rects: list[SvgRect] = []
        texts: list[SvgText] = []
        class_styles: dict[str, dict[str, str]] = {}
        for elem in root.iter():
            tag = _strip_namespace(elem.tag)
            if tag == "style":
                class_styles.update(_parse_style_rules(elem.text or ""))
            elif tag == "rect":
                rects.append(_parse_rect(elem))
            elif tag == "text":
                texts.append(_parse_text(elem))
        return cls(
            width=width,
            height=height,
            viewbox=vb,
            rects=rects,
            texts=texts,
            class_styles=class_styles,
        )

    def resolved_fill(self, element: SvgRect | SvgText) -> Optional[RGBA]:
        """Fill color an element paints with, attribute first then class rule."""
        value = element.fill
        if value is None and element.css_class:
            value = self.class_styles.get(element.css_class, {}).get("fill")
        if value is None:
            return None
        return parse_css_color(value)


def _strip_namespace(tag: str) -> str:
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def _parse_length(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    value = value.strip()
    if value.endswith("px"):
        value = value[:-2]
    try:
        return float(value)
    except ValueError:
        return None


def _parse_viewbox(value: Optional[str]) -> Optional[tuple[float, float, float, float]]:
    if not value:
        return None
    parts = value.replace(",", " ").split()
    if len(parts) != 4:
        return None
    try:
        return tuple(float(p) for p in parts)  # type: ignore[return-value]
    except ValueError:
        return None


def _parse_style_rules(css: str) -> dict[str, dict[str, str]]:
    css = re.sub(r"/\*.*?\*/", "", css, flags=re.DOTALL)
    rules: dict[str, dict[str, str]] = {}
    for name, body in _STYLE_RULE.findall(css):
        props: dict[str, str] = {}
        for decl in body.split(";"):
            if ":" not in decl:
                continue
            key, value = decl.split(":", 1)
            props[key.strip()] = value.strip()
        rules[name] = props
    return rules


def _parse_rect(elem: ET.Element) -> SvgRect:
    x = _parse_length(elem.attrib.get("x")) or 0.0
    y = _parse_length(elem.attrib.get("y")) or 0.0
    w = _parse_length(elem.attrib.get("width")) or 0.0
    h = _parse_length(elem.attrib.get("height")) or 0.0
    return SvgRect(x=x, y=y, width=w, height=h, fill=elem.attrib.get("fill"), css_class=elem.attrib.get("class"))


def _parse_text(elem: ET.Element) -> SvgText:
    x = _parse_length(elem.attrib.get("x")) or 0.0
    y = _parse_length(elem.attrib.get("y")) or 0.0
    content = "".join(elem.itertext())
    return SvgText(x=x, y=y, content=content, fill=elem.attrib.get("fill"), css_class=elem.attrib.get("class"))
