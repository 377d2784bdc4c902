from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
import tomllib
from typing import Literal


CANVAS_SIZE = 32
MAX_TEXT_LENGTH = 2

IcoMode = Literal["png-alias", "container"]
ICO_MODES = ("png-alias", "container")

PRESET_SWATCHES = (
    "#FFFFFF",
    "#000000",
    "#1F2937",
    "#374151",
    "#4B5563",
    "#6B7280",
    "#9CA3AF",
    "#D1D5DB",
    "#E5E7EB",
    "#F3F4F6",
    "#EF4444",
    "#F97316",
    "#F59E0B",
    "#EAB308",
    "#84CC16",
    "#22C55E",
    "#10B981",
    "#06B68A",
    "#0891B2",
    "#0E7490",
    "#3B82F6",
    "#6366F1",
    "#8B5CF6",
    "#A855F7",
    "#D946EF",
    "#EC4899",
    "#F43F5E",
    "#FB7185",
)


@dataclass(frozen=True)
class FaviconConfig:
    font_size: float = 20.0
    font_path: Path | None = None
    ico_mode: IcoMode = "png-alias"
    decode_timeout_s: float | None = None
    default_text: str = "F"
    default_background: str = "#4F46E5"
    default_foreground: str = "#FFFFFF"

    def __post_init__(self) -> None:
        if self.font_size <= 0:
            raise ValueError("font_size must be > 0")
        if self.ico_mode not in ICO_MODES:
            raise ValueError(f"ico_mode must be one of: {', '.join(ICO_MODES)}")
        if self.decode_timeout_s is not None and self.decode_timeout_s <= 0:
            raise ValueError("decode_timeout_s must be > 0 when set")


def load_config(path: str | Path) -> FaviconConfig:
    """Read a `[favicon]` table from a TOML file."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"config file not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    table = raw.get("favicon", {})
    if not isinstance(table, dict):
        raise ValueError("[favicon] must be a table")
    return config_from_mapping(table)


def config_from_mapping(table: dict[str, object]) -> FaviconConfig:
    known = {f.name for f in fields(FaviconConfig)}
    unknown = sorted(set(table) - known)
    if unknown:
        raise ValueError(f"unknown config keys: {', '.join(unknown)}")
    kwargs: dict[str, object] = {}
    if "font_size" in table:
        kwargs["font_size"] = _coerce_number(table["font_size"], "font_size")
    if "font_path" in table:
        kwargs["font_path"] = Path(_coerce_str(table["font_path"], "font_path"))
    if "ico_mode" in table:
        kwargs["ico_mode"] = _coerce_str(table["ico_mode"], "ico_mode")
    if "decode_timeout_s" in table:
        kwargs["decode_timeout_s"] = _coerce_number(table["decode_timeout_s"], "decode_timeout_s")
    for name in ("default_text", "default_background", "default_foreground"):
        if name in table:
            kwargs[name] = _coerce_str(table[name], name)
    return FaviconConfig(**kwargs)  # type: ignore[arg-type]


def _coerce_number(value: object, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field_name} must be a number")
    return float(value)


def _coerce_str(value: object, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string")
    return value
