from __future__ import annotations

import colorsys
import math
import re

from PIL import ImageColor

from favicon_forge.raster.canvas import RGBA


DEFAULT_FILL_STYLE: RGBA = (0, 0, 0, 255)

_FUNCTIONAL = re.compile(r"^(rgba?|hsla?)\(\s*(.*?)\s*\)$", re.IGNORECASE)
_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def parse_css_color(value: str) -> RGBA | None:
    """Resolve a CSS color string, or None when the string is not a color."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value:
        return None
    if value.lower() == "transparent":
        return (0, 0, 0, 0)
    match = _FUNCTIONAL.match(value)
    if match:
        return _parse_functional(match.group(1).lower(), match.group(2))
    try:
        parsed = ImageColor.getrgb(value)
    except ValueError:
        return None
    if len(parsed) == 3:
        r, g, b = parsed
        return (r, g, b, 255)
    r, g, b, a = parsed
    return (r, g, b, a)


def resolve_fill_style(value: str, current: RGBA) -> RGBA:
    # Unparseable assignments keep the previous fill style, as a 2D context does.
    parsed = parse_css_color(value)
    if parsed is None:
        return current
    return parsed


def _parse_functional(name: str, body: str) -> RGBA | None:
    """rgb()/rgba()/hsl()/hsla() in legacy comma or space-and-slash syntax."""
    if "," in body:
        if "/" in body:
            return None
        parts = [p.strip() for p in body.split(",")]
        alpha_part = parts[3] if len(parts) == 4 else None
        channels = parts[:3]
        if len(parts) not in (3, 4):
            return None
    else:
        main, slash, alpha_text = body.partition("/")
        channels = main.split()
        alpha_part = alpha_text.strip() if slash else None
        if slash and not alpha_part:
            return None
    if len(channels) != 3:
        return None

    alpha = 1.0 if alpha_part is None else _parse_alpha(alpha_part)
    if alpha is None:
        return None

    if name.startswith("rgb"):
        rgb = [_parse_rgb_channel(c) for c in channels]
        if any(c is None for c in rgb):
            return None
        r, g, b = (int(c) for c in rgb)  # type: ignore[arg-type]
    else:
        hue = _parse_hue(channels[0])
        sat = _parse_percentage(channels[1])
        light = _parse_percentage(channels[2])
        if hue is None or sat is None or light is None:
            return None
        fr, fg, fb = colorsys.hls_to_rgb(hue / 360.0, light, sat)
        r, g, b = (int(c * 255 + 0.5) for c in (fr, fg, fb))
    return (r, g, b, int(alpha * 255 + 0.5))


def _parse_number(text: str) -> float | None:
    if not _NUMBER.match(text):
        return None
    number = float(text)
    if not math.isfinite(number):
        return None
    return number


def _parse_rgb_channel(text: str) -> int | None:
    if text.endswith("%"):
        number = _parse_number(text[:-1])
        if number is None:
            return None
        number = number * 255.0 / 100.0
    else:
        number = _parse_number(text)
        if number is None:
            return None
    return int(round(min(255.0, max(0.0, number))))


def _parse_alpha(text: str) -> float | None:
    if text.endswith("%"):
        number = _parse_number(text[:-1])
        if number is None:
            return None
        number /= 100.0
    else:
        number = _parse_number(text)
        if number is None:
            return None
    return min(1.0, max(0.0, number))


def _parse_hue(text: str) -> float | None:
    lowered = text.lower()
    scale = 1.0
    for unit, factor in (("deg", 1.0), ("grad", 0.9), ("rad", 180.0 / math.pi), ("turn", 360.0)):
        if lowered.endswith(unit):
            lowered = lowered[: -len(unit)]
            scale = factor
            break
    number = _parse_number(lowered)
    if number is None:
        return None
    return (number * scale) % 360.0


def _parse_percentage(text: str) -> float | None:
    number = _parse_number(text[:-1] if text.endswith("%") else text)
    if number is None:
        return None
    return min(1.0, max(0.0, number / 100.0))
