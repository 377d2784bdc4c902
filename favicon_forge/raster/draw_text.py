from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import logging
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont


LOGGER = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = "sans-serif"
DEFAULT_FONT_SIZE_PX = 20.0
BOLD_SANS_FONT_PATTERNS = (
    "dejavusans-bold",
    "liberationsans-bold",
    "notosans-bold",
    "freesansbold",
    "arialbd",
    "arial bold",
    "helveticaneue-bold",
    "verdanab",
)

# Canvas textAlign/textBaseline pairs mapped onto Pillow anchors.
_HORIZONTAL_ANCHORS = {"left": "l", "start": "l", "center": "m", "right": "r", "end": "r"}
_VERTICAL_ANCHORS = {"top": "a", "middle": "m", "alphabetic": "s", "bottom": "d"}


@dataclass(frozen=True)
class FontSpec:
    family: str = DEFAULT_FONT_FAMILY
    size_px: float = DEFAULT_FONT_SIZE_PX
    weight: str = "bold"
    path: Path | None = None

    def css(self) -> str:
        return f"{self.weight} {self.size_px:g}px {self.family}"


@dataclass(frozen=True)
class LoadedFont:
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont
    synthetic_bold: bool


def pillow_anchor(text_align: str, text_baseline: str) -> str:
    try:
        return _HORIZONTAL_ANCHORS[text_align] + _VERTICAL_ANCHORS[text_baseline]
    except KeyError as exc:
        raise ValueError(f"unsupported text alignment: {exc.args[0]}") from exc


def render_text_mask(
    text: str,
    spec: FontSpec,
    *,
    width: int,
    height: int,
    x: float,
    y: float,
    anchor: str = "mm",
) -> np.ndarray:
    """Coverage mask of `text` on a width x height grid, anchored at (x, y)."""
    if not text:
        return np.zeros((height, width), dtype=np.uint8)
    loaded = load_font(spec)
    image = Image.new("L", (width, height), 0)
    draw = ImageDraw.Draw(image)
    if isinstance(loaded.font, ImageFont.FreeTypeFont):
        draw.text((x, y), text, fill=255, font=loaded.font, anchor=anchor)
    else:
        # Bitmap fonts reject anchors; center on the ink box instead.
        left, top, right, bottom = draw.textbbox((0, 0), text, font=loaded.font)
        draw.text((x - (left + right) / 2.0, y - (top + bottom) / 2.0), text, fill=255, font=loaded.font)
    mask = np.asarray(image, dtype=np.uint8)
    if loaded.synthetic_bold:
        mask = _embolden(mask, 2)
    return mask


def load_font(spec: FontSpec) -> LoadedFont:
    return _load_font(spec.path, spec.family, spec.size_px)


def _embolden(mask: np.ndarray, embolden_px: int) -> np.ndarray:
    if embolden_px <= 1:
        return mask
    out = mask.copy()
    for shift in range(1, embolden_px):
        src = mask[:, : max(0, mask.shape[1] - shift)]
        dst = out[:, shift:]
        if src.size == 0 or dst.size == 0:
            break
        np.maximum(dst, src, out=dst)
    return out


@lru_cache(maxsize=16)
def _load_font(font_path: Path | None, font_family: str, font_size_px: float) -> LoadedFont:
    size = max(1, int(round(font_size_px)))
    path = font_path if font_path is not None else _resolve_font_path(font_family)
    if path is not None:
        try:
            font = ImageFont.truetype(str(path), size=size)
        except OSError:
            LOGGER.warning("unable to load font %s, using built-in font", path)
        else:
            LOGGER.debug("using font %s at %dpx", path, size)
            return LoadedFont(font=font, synthetic_bold=False)
    LOGGER.debug("no bold sans-serif font found, using built-in font at %dpx", size)
    return LoadedFont(font=ImageFont.load_default(size=size), synthetic_bold=True)


def _resolve_font_path(font_family: str) -> Path | None:
    wanted = font_family.strip().lower()
    patterns: tuple[str, ...] = BOLD_SANS_FONT_PATTERNS
    if wanted and wanted != DEFAULT_FONT_FAMILY:
        patterns = (f"{wanted}-bold", f"{wanted} bold") + patterns

    font_dirs = [
        Path.home() / "Library" / "Fonts",
        Path("/Library/Fonts"),
        Path("/System/Library/Fonts"),
        Path("/System/Library/Fonts/Supplemental"),
        Path("/usr/share/fonts"),
        Path("/usr/local/share/fonts"),
        Path("C:/Windows/Fonts"),
    ]

    candidates: list[Path] = []
    for base in font_dirs:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf"):
            candidates.extend(base.rglob(ext))
    candidates.sort(key=lambda p: (len(p.stem), str(p)))

    for pattern in patterns:
        p = pattern.replace(" ", "")
        for path in candidates:
            stem = path.stem.lower().replace(" ", "")
            if stem == p:
                return path
        for path in candidates:
            stem = path.stem.lower().replace(" ", "")
            if p in stem and "oblique" not in stem and "italic" not in stem:
                return path
    return None
