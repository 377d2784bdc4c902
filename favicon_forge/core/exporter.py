from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from typing import Literal
import xml.etree.ElementTree as ET

from favicon_forge.config import CANVAS_SIZE, FaviconConfig
from favicon_forge.raster.canvas import PixelBuffer
from favicon_forge.render.svg import SVG_MIME_TYPE, SvgDocument, build_favicon_svg

from .encoders import (
    ICO_MIME_TYPE,
    PNG_MIME_TYPE,
    data_url_to_bytes,
    decode_png,
    encode_ico,
    encode_png,
    to_data_url,
)
from .errors import DecodeFailureError, EncodingFailureError, SurfaceUnavailableError
from .handles import HandleRegistry, ResourceHandle
from .rasterizer import DEFAULT_BACKEND, SurfaceBackend, clamp_text, rasterize


LOGGER = logging.getLogger(__name__)

ArtifactKind = Literal["ico", "png", "svg"]

NO_CONTEXT_ERROR = "Failed to create image data URL."
GENERIC_ERROR = "An error occurred"


@dataclass(frozen=True)
class EncodedArtifact:
    kind: ArtifactKind
    data: bytes
    mime_type: str


@dataclass(frozen=True)
class GenerationResult:
    ico_handle: ResourceHandle | None = None
    png_handle: ResourceHandle | None = None
    svg_handle: ResourceHandle | None = None
    error: str | None = None

    @classmethod
    def failure(cls, message: str) -> "GenerationResult":
        return cls(error=message)

    @property
    def ico_url(self) -> str | None:
        return self.ico_handle.url if self.ico_handle else None

    @property
    def png_url(self) -> str | None:
        return self.png_handle.url if self.png_handle else None

    @property
    def svg_url(self) -> str | None:
        return self.svg_handle.url if self.svg_handle else None

    def handle(self, kind: ArtifactKind) -> ResourceHandle | None:
        return {"ico": self.ico_handle, "png": self.png_handle, "svg": self.svg_handle}[kind]

    def handles(self) -> list[ResourceHandle]:
        return [h for h in (self.ico_handle, self.png_handle, self.svg_handle) if h is not None]


async def load_image(data_url: str, *, timeout_s: float | None = None) -> PixelBuffer:
    """Decode a PNG data URL off the event loop."""
    _, payload = data_url_to_bytes(data_url)
    decode = asyncio.to_thread(decode_png, payload)
    if timeout_s is None:
        return await decode
    try:
        return await asyncio.wait_for(decode, timeout_s)
    except TimeoutError as exc:
        raise DecodeFailureError(f"image decode timed out after {timeout_s:g}s") from exc


def encode_vector(text: str, background_color: str, foreground_color: str, *, font_size: float = 20.0) -> EncodedArtifact:
    markup = build_favicon_svg(clamp_text(text), background_color, foreground_color, font_size=font_size)
    try:
        data = markup.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise EncodingFailureError(f"SVG encoding failed: {exc}") from exc
    check_vector(data)
    return EncodedArtifact(kind="svg", data=data, mime_type=SVG_MIME_TYPE)


def check_vector(data: bytes) -> SvgDocument:
    """Parse the vector artifact back and confirm it is one square and one label."""
    try:
        doc = SvgDocument.from_markup(data)
    except (ET.ParseError, ValueError) as exc:
        raise EncodingFailureError(f"SVG markup is malformed: {exc}") from exc
    if (doc.width, doc.height) != (CANVAS_SIZE, CANVAS_SIZE):
        raise EncodingFailureError(f"SVG is {doc.width:g}x{doc.height:g}, expected {CANVAS_SIZE}x{CANVAS_SIZE}")
    if len(doc.rects) != 1 or len(doc.texts) != 1:
        raise EncodingFailureError(
            f"SVG must hold one rect and one text, got {len(doc.rects)} and {len(doc.texts)}"
        )
    return doc


async def export(
    buffer: PixelBuffer,
    text: str,
    background_color: str,
    foreground_color: str,
    *,
    registry: HandleRegistry,
    backend: SurfaceBackend | None = None,
    config: FaviconConfig | None = None,
) -> GenerationResult:
    """Encode PNG, SVG and ICO artifacts and wrap each in a handle.

    All or nothing: on any failure the handles created so far are released
    and only the error message is returned.
    """
    cfg = config or FaviconConfig()
    created: list[ResourceHandle] = []
    try:
        image = await load_image(to_data_url(encode_png(buffer), PNG_MIME_TYPE), timeout_s=cfg.decode_timeout_s)
        surface = (backend or DEFAULT_BACKEND).get_context(buffer.width, buffer.height)
        if surface is None:
            raise SurfaceUnavailableError("Could not get canvas context")
        surface.draw_image(image)
        reloaded = surface.snapshot()

        png = EncodedArtifact(kind="png", data=encode_png(reloaded), mime_type=PNG_MIME_TYPE)
        png_handle = registry.create(png.data, png.mime_type)
        created.append(png_handle)

        svg = encode_vector(text, background_color, foreground_color, font_size=cfg.font_size)
        svg_handle = registry.create(svg.data, svg.mime_type)
        created.append(svg_handle)

        _, ico_png = data_url_to_bytes(to_data_url(encode_png(reloaded), PNG_MIME_TYPE))
        ico = EncodedArtifact(
            kind="ico",
            data=encode_ico(ico_png, width=reloaded.width, height=reloaded.height, mode=cfg.ico_mode),
            mime_type=ICO_MIME_TYPE,
        )
        ico_handle = registry.create(ico.data, ico.mime_type)
        created.append(ico_handle)
    except Exception as exc:  # noqa: BLE001
        for handle in created:
            registry.release(handle)
        LOGGER.warning("favicon export failed: %s", exc)
        return GenerationResult.failure(str(exc) or GENERIC_ERROR)

    return GenerationResult(ico_handle=ico_handle, png_handle=png_handle, svg_handle=svg_handle)


async def generate_favicons(
    text: str,
    background_color: str,
    foreground_color: str,
    *,
    registry: HandleRegistry,
    backend: SurfaceBackend | None = None,
    config: FaviconConfig | None = None,
) -> GenerationResult:
    cfg = config or FaviconConfig()
    text = clamp_text(text)
    try:
        buffer = rasterize(
            text,
            background_color,
            foreground_color,
            backend=backend,
            font_size=cfg.font_size,
            font_path=cfg.font_path,
        )
    except SurfaceUnavailableError:
        LOGGER.warning("rasterizer could not get a drawing surface")
        return GenerationResult.failure(NO_CONTEXT_ERROR)
    except Exception as exc:  # noqa: BLE001
        LOGGER.warning("rasterization failed: %s", exc)
        return GenerationResult.failure(str(exc) or GENERIC_ERROR)
    return await export(
        buffer,
        text,
        background_color,
        foreground_color,
        registry=registry,
        backend=backend,
        config=cfg,
    )
