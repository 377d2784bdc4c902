from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import threading
import time
from typing import Callable
import uuid

from .errors import HandleReleasedError


LOGGER = logging.getLogger(__name__)

AuditLogger = Callable[[dict[str, object]], None]
HANDLE_URL_PREFIX = "blob:favicon-forge/"


@dataclass(frozen=True)
class ResourceHandle:
    url: str
    mime_type: str
    size: int


class HandleRegistry:
    """Process-local store behind temporary `blob:` style URLs.

    Bytes stay alive until `release` is called; nothing is released
    automatically.
    """

    def __init__(self, audit_logger: AuditLogger | None = None) -> None:
        self._audit_logger = audit_logger or (lambda entry: None)
        self._lock = threading.Lock()
        self._entries: dict[str, tuple[bytes, str]] = {}

    def create(self, data: bytes, mime_type: str) -> ResourceHandle:
        url = f"{HANDLE_URL_PREFIX}{uuid.uuid4()}"
        payload = bytes(data)
        with self._lock:
            self._entries[url] = (payload, mime_type)
        handle = ResourceHandle(url=url, mime_type=mime_type, size=len(payload))
        LOGGER.debug("created handle %s (%s, %d bytes)", url, mime_type, len(payload))
        self._audit("created", handle)
        return handle

    def fetch(self, handle: ResourceHandle | str) -> bytes:
        url = _url_of(handle)
        with self._lock:
            entry = self._entries.get(url)
        if entry is None:
            raise HandleReleasedError(f"resource handle is no longer valid: {url}")
        data, mime_type = entry
        self._audit("fetched", ResourceHandle(url=url, mime_type=mime_type, size=len(data)))
        return data

    def release(self, handle: ResourceHandle | str) -> bool:
        url = _url_of(handle)
        with self._lock:
            entry = self._entries.pop(url, None)
        if entry is None:
            LOGGER.debug("release of unknown or already released handle %s", url)
            return False
        data, mime_type = entry
        LOGGER.debug("released handle %s", url)
        self._audit("released", ResourceHandle(url=url, mime_type=mime_type, size=len(data)))
        return True

    def is_live(self, handle: ResourceHandle | str) -> bool:
        with self._lock:
            return _url_of(handle) in self._entries

    def live_count(self) -> int:
        with self._lock:
            return len(self._entries)

    def _audit(self, action: str, handle: ResourceHandle) -> None:
        self._audit_logger(
            {
                "ts_ns": time.time_ns(),
                "action": action,
                "url": handle.url,
                "mime_type": handle.mime_type,
                "size": handle.size,
            }
        )


def download(registry: HandleRegistry, handle: ResourceHandle | None, path: str | Path) -> Path | None:
    """Save a handle's bytes to `path`, then release the handle."""
    if handle is None:
        return None
    target = Path(path)
    data = registry.fetch(handle)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)
    registry.release(handle)
    LOGGER.info("saved %s (%d bytes)", target, len(data))
    return target


def _url_of(handle: ResourceHandle | str) -> str:
    if isinstance(handle, ResourceHandle):
        return handle.url
    return handle
