from __future__ import annotations

import json
from pathlib import Path
import threading
from typing import Any


class JsonlAuditSink:
    """Append-only JSONL log of resource handle lifecycle entries."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def log(self, entry: dict[str, Any]) -> None:
        with self._lock:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(entry, separators=(",", ":"), sort_keys=True))
                f.write("\n")

    def summarize(self) -> dict[str, Any]:
        action_counts: dict[str, int] = {}
        mime_counts: dict[str, int] = {}
        total = 0
        if not self.path.exists():
            return {"total": 0, "by_action": action_counts, "by_mime_type": mime_counts, "leaked": 0}
        created: set[str] = set()
        released: set[str] = set()
        with self.path.open("r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    row = json.loads(line)
                except json.JSONDecodeError:
                    continue
                total += 1
                action = str(row.get("action", ""))
                mime_type = str(row.get("mime_type", ""))
                url = str(row.get("url", ""))
                action_counts[action] = action_counts.get(action, 0) + 1
                mime_counts[mime_type] = mime_counts.get(mime_type, 0) + 1
                if action == "created":
                    created.add(url)
                elif action == "released":
                    released.add(url)
        return {
            "total": total,
            "by_action": action_counts,
            "by_mime_type": mime_counts,
            "leaked": len(created - released),
        }
