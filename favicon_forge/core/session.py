from __future__ import annotations

from dataclasses import replace
import logging
from pathlib import Path
from typing import Literal

from favicon_forge.config import PRESET_SWATCHES, FaviconConfig

from .exporter import ArtifactKind, GenerationResult, generate_favicons
from .handles import HandleRegistry, download
from .rasterizer import SurfaceBackend, clamp_text


LOGGER = logging.getLogger(__name__)

SwatchTarget = Literal["background", "foreground"]

DOWNLOAD_FILENAMES: dict[ArtifactKind, str] = {
    "ico": "favicon.ico",
    "png": "favicon.png",
    "svg": "favicon.svg",
}


class FaviconSession:
    """Request context for one user: current inputs plus the live result.

    Generating again releases the handles of the result it replaces, so a
    session holds at most one set of live handles.
    """

    def __init__(
        self,
        *,
        config: FaviconConfig | None = None,
        registry: HandleRegistry | None = None,
        backend: SurfaceBackend | None = None,
    ) -> None:
        self.config = config or FaviconConfig()
        self.registry = registry or HandleRegistry()
        self._backend = backend
        self._text = clamp_text(self.config.default_text)
        self.background_color = self.config.default_background
        self.foreground_color = self.config.default_foreground
        self._result = GenerationResult()
        self._pending = 0

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value: str) -> None:
        self._text = clamp_text(value)

    @property
    def result(self) -> GenerationResult:
        return self._result

    @property
    def loading(self) -> bool:
        return self._pending > 0

    @property
    def palette(self) -> tuple[str, ...]:
        return PRESET_SWATCHES

    def select_swatch(self, target: SwatchTarget, color: str) -> None:
        if target == "background":
            self.background_color = color
        elif target == "foreground":
            self.foreground_color = color
        else:
            raise ValueError(f"unknown swatch target: {target}")

    async def generate(self) -> GenerationResult:
        self._release(self._result)
        self._result = GenerationResult()
        self._pending += 1
        try:
            result = await generate_favicons(
                self._text,
                self.background_color,
                self.foreground_color,
                registry=self.registry,
                backend=self._backend,
                config=self.config,
            )
        finally:
            self._pending -= 1
        # Overlapping calls race; the last one to finish wins.
        previous, self._result = self._result, result
        self._release(previous)
        if result.error:
            LOGGER.info("generation failed: %s", result.error)
        return result

    def download(self, kind: ArtifactKind, out_dir: str | Path, filename: str | None = None) -> Path | None:
        handle = self._result.handle(kind)
        if handle is None:
            return None
        path = download(self.registry, handle, Path(out_dir) / (filename or DOWNLOAD_FILENAMES[kind]))
        self._result = replace(self._result, **{f"{kind}_handle": None})
        return path

    def download_all(self, out_dir: str | Path) -> dict[ArtifactKind, Path]:
        saved: dict[ArtifactKind, Path] = {}
        for kind in DOWNLOAD_FILENAMES:
            path = self.download(kind, out_dir)
            if path is not None:
                saved[kind] = path
        return saved

    def close(self) -> None:
        self._release(self._result)
        self._result = GenerationResult()

    def _release(self, result: GenerationResult) -> None:
        for handle in result.handles():
            self.registry.release(handle)
