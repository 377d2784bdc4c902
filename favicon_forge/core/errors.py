from __future__ import annotations


class FaviconGenerationError(RuntimeError):
    pass


class SurfaceUnavailableError(FaviconGenerationError):
    pass


class DecodeFailureError(FaviconGenerationError):
    pass


class EncodingFailureError(FaviconGenerationError):
    pass


class HandleReleasedError(LookupError):
    pass
