from .audit import JsonlAuditSink
from .encoders import (
    ICO_MIME_TYPE,
    PNG_MIME_TYPE,
    IcoEntry,
    data_url_to_bytes,
    decode_png,
    encode_ico,
    encode_png,
    read_ico_entries,
    to_data_url,
)
from .errors import (
    DecodeFailureError,
    EncodingFailureError,
    FaviconGenerationError,
    HandleReleasedError,
    SurfaceUnavailableError,
)
from .exporter import (
    GENERIC_ERROR,
    NO_CONTEXT_ERROR,
    EncodedArtifact,
    GenerationResult,
    check_vector,
    encode_vector,
    export,
    generate_favicons,
    load_image,
)
from .handles import HandleRegistry, ResourceHandle, download
from .rasterizer import PillowSurfaceBackend, SurfaceBackend, clamp_text, rasterize
from .session import DOWNLOAD_FILENAMES, FaviconSession

__all__ = [
    "DOWNLOAD_FILENAMES",
    "GENERIC_ERROR",
    "ICO_MIME_TYPE",
    "NO_CONTEXT_ERROR",
    "PNG_MIME_TYPE",
    "DecodeFailureError",
    "EncodedArtifact",
    "EncodingFailureError",
    "FaviconGenerationError",
    "FaviconSession",
    "GenerationResult",
    "HandleRegistry",
    "HandleReleasedError",
    "IcoEntry",
    "JsonlAuditSink",
    "PillowSurfaceBackend",
    "ResourceHandle",
    "SurfaceBackend",
    "SurfaceUnavailableError",
    "check_vector",
    "clamp_text",
    "data_url_to_bytes",
    "decode_png",
    "download",
    "encode_ico",
    "encode_png",
    "encode_vector",
    "export",
    "generate_favicons",
    "load_image",
    "rasterize",
    "read_ico_entries",
    "to_data_url",
]
