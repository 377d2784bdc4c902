from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from PIL import Image


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 0)) -> np.ndarray:
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :, 0] = color[0]
    canvas[:, :, 1] = color[1]
    canvas[:, :, 2] = color[2]
    canvas[:, :, 3] = color[3]
    return canvas


def composite_over(patch: np.ndarray, src_rgb: np.ndarray, src_alpha: np.ndarray) -> None:
    """Source-over blend into `patch` in place.

    `src_rgb` broadcasts against (h, w, 3); `src_alpha` is (h, w) in [0, 1].
    """
    if not np.any(src_alpha > 0):
        return
    dst_rgb = patch[:, :, :3].astype(np.float32)
    dst_alpha = patch[:, :, 3].astype(np.float32) / 255.0

    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    out_rgb_num = src_rgb * src_alpha[:, :, None] + dst_rgb * dst_alpha[:, :, None] * (1.0 - src_alpha[:, :, None])
    safe_alpha = np.where(out_alpha > 1e-6, out_alpha, 1.0)
    out_rgb = out_rgb_num / safe_alpha[:, :, None]

    patch[:, :, :3] = np.clip(np.rint(out_rgb), 0, 255).astype(np.uint8)
    patch[:, :, 3] = np.clip(np.rint(out_alpha * 255.0), 0, 255).astype(np.uint8)


def fill_rect(dst: np.ndarray, x: int, y: int, w: int, h: int, color: RGBA) -> None:
    if w <= 0 or h <= 0:
        return
    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(dst.shape[1], x + w)
    y1 = min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return
    patch = dst[y0:y1, x0:x1]
    src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    src_alpha = np.full((y1 - y0, x1 - x0), color[3] / 255.0, dtype=np.float32)
    composite_over(patch, src_rgb, src_alpha)


def blend_mask(dst: np.ndarray, mask: np.ndarray, color: RGBA) -> None:
    """Paint `color` through a coverage mask the same size as `dst`."""
    if mask.shape != dst.shape[:2]:
        raise ValueError("mask must match the canvas dimensions")
    cov = mask.astype(np.float32) / 255.0
    src_alpha = (color[3] / 255.0) * cov
    src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    composite_over(dst, src_rgb, src_alpha)


def blit(dst: np.ndarray, src: np.ndarray, x0: int = 0, y0: int = 0) -> None:
    h, w, _ = src.shape
    y1 = min(dst.shape[0], y0 + h)
    x1 = min(dst.shape[1], x0 + w)
    if y0 >= y1 or x0 >= x1:
        return

    view = dst[y0:y1, x0:x1]
    patch = src[: y1 - y0, : x1 - x0]
    src_rgb = patch[:, :, :3].astype(np.float32)
    src_alpha = patch[:, :, 3].astype(np.float32) / 255.0
    composite_over(view, src_rgb, src_alpha)


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Read-only RGBA8 snapshot of a drawing surface."""

    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError("pixels must have shape (height, width, 4)")
        frozen = np.array(self.pixels, dtype=np.uint8, copy=True)
        frozen.setflags(write=False)
        object.__setattr__(self, "pixels", frozen)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def pixel(self, x: int, y: int) -> RGBA:
        r, g, b, a = (int(v) for v in self.pixels[y, x])
        return (r, g, b, a)

    def corners(self) -> tuple[RGBA, RGBA, RGBA, RGBA]:
        right = self.width - 1
        bottom = self.height - 1
        return (
            self.pixel(0, 0),
            self.pixel(right, 0),
            self.pixel(0, bottom),
            self.pixel(right, bottom),
        )

    def to_image(self) -> Image.Image:
        return Image.fromarray(np.array(self.pixels))

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        return cls(np.asarray(image.convert("RGBA"), dtype=np.uint8))
