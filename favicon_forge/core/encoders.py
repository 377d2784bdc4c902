from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from io import BytesIO
import struct

from PIL import Image, UnidentifiedImageError

from favicon_forge.config import IcoMode
from favicon_forge.raster.canvas import PixelBuffer

from .errors import DecodeFailureError, EncodingFailureError


PNG_MIME_TYPE = "image/png"
ICO_MIME_TYPE = "image/x-icon"

_ICONDIR = struct.Struct("<HHH")
_ICONDIRENTRY = struct.Struct("<BBBBHHII")


@dataclass(frozen=True)
class IcoEntry:
    width: int
    height: int
    bit_count: int
    payload: bytes


def encode_png(buffer: PixelBuffer) -> bytes:
    out = BytesIO()
    try:
        buffer.to_image().save(out, format="PNG")
    except (OSError, ValueError) as exc:
        raise EncodingFailureError(f"PNG encoding failed: {exc}") from exc
    return out.getvalue()


def decode_png(data: bytes) -> PixelBuffer:
    try:
        with Image.open(BytesIO(data)) as image:
            image.load()
            return PixelBuffer.from_image(image)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise DecodeFailureError(f"image decode failed: {exc}") from exc


def to_data_url(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def data_url_to_bytes(data_url: str) -> tuple[str, bytes]:
    """Split a base64 data URL into (mime type, payload)."""
    if not data_url.startswith("data:") or ";base64," not in data_url:
        raise DecodeFailureError("not a base64 data URL")
    header, encoded = data_url[len("data:") :].split(";base64,", 1)
    try:
        payload = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeFailureError(f"invalid base64 payload: {exc}") from exc
    return header, payload


def encode_ico(png_bytes: bytes, *, width: int, height: int, mode: IcoMode = "png-alias") -> bytes:
    """Icon artifact for a single PNG frame.

    `png-alias` returns the PNG bytes unchanged. `container` wraps them in
    an ICONDIR with one 32bpp PNG-compressed entry.
    """
    if mode == "png-alias":
        return png_bytes
    if mode != "container":
        raise EncodingFailureError(f"unknown ico mode: {mode}")
    if not (0 < width <= 256 and 0 < height <= 256):
        raise EncodingFailureError("icon frames must be between 1 and 256 pixels")
    header = _ICONDIR.pack(0, 1, 1)
    offset = _ICONDIR.size + _ICONDIRENTRY.size
    entry = _ICONDIRENTRY.pack(width % 256, height % 256, 0, 0, 1, 32, len(png_bytes), offset)
    return header + entry + png_bytes


def read_ico_entries(data: bytes) -> list[IcoEntry]:
    try:
        reserved, kind, count = _ICONDIR.unpack_from(data, 0)
    except struct.error as exc:
        raise DecodeFailureError("truncated icon header") from exc
    if reserved != 0 or kind != 1:
        raise DecodeFailureError("not an icon container")
    entries: list[IcoEntry] = []
    for index in range(count):
        try:
            w, h, _, _, _, bit_count, size, offset = _ICONDIRENTRY.unpack_from(data, _ICONDIR.size + index * _ICONDIRENTRY.size)
        except struct.error as exc:
            raise DecodeFailureError("truncated icon directory") from exc
        payload = data[offset : offset + size]
        if len(payload) != size:
            raise DecodeFailureError("icon entry points past end of data")
        entries.append(IcoEntry(width=w or 256, height=h or 256, bit_count=bit_count, payload=payload))
    return entries
