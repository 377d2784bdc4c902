from __future__ import annotations

import argparse
import asyncio
from dataclasses import replace
import json
import logging
from pathlib import Path

from favicon_forge.config import FaviconConfig, ICO_MODES, PRESET_SWATCHES, load_config
from favicon_forge.core import FaviconSession, HandleRegistry, JsonlAuditSink


def main() -> None:
    parser = argparse.ArgumentParser(prog="favicon-forge")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Render a text favicon and save favicon.ico/png/svg.")
    gen.add_argument("--text", default=None, help="1-2 characters; longer input is truncated.")
    gen.add_argument("--background", default=None, help="CSS background color. Default: #4F46E5.")
    gen.add_argument("--foreground", default=None, help="CSS text color. Default: #FFFFFF.")
    gen.add_argument("--out-dir", type=Path, default=Path("."))
    gen.add_argument("--config", type=Path, default=None, help="TOML file with a [favicon] table.")
    gen.add_argument("--ico-mode", choices=list(ICO_MODES), default=None)
    gen.add_argument("--font-path", type=Path, default=None)
    gen.add_argument("--audit-jsonl", type=Path, default=None)

    sub.add_parser("palette", help="List the preset swatch colors.")

    report = sub.add_parser("audit-report", help="Print handle lifecycle summary from a JSONL audit log.")
    report.add_argument("--audit-jsonl", type=Path, required=True)
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "generate":
        try:
            config = load_config(args.config) if args.config else FaviconConfig()
        except (OSError, ValueError) as exc:
            gen.error(f"cannot load config {args.config}: {exc}")
        if args.ico_mode:
            config = replace(config, ico_mode=args.ico_mode)
        if args.font_path:
            config = replace(config, font_path=args.font_path)
        audit_sink = JsonlAuditSink(args.audit_jsonl) if args.audit_jsonl else None
        registry = HandleRegistry(audit_logger=audit_sink.log if audit_sink else None)
        session = FaviconSession(config=config, registry=registry)
        if args.text is not None:
            session.text = args.text
        if args.background is not None:
            session.select_swatch("background", args.background)
        if args.foreground is not None:
            session.select_swatch("foreground", args.foreground)
        raise SystemExit(_run_generate(session, args.out_dir))

    if args.command == "palette":
        for color in PRESET_SWATCHES:
            print(color)
        return

    if args.command == "audit-report":
        print(json.dumps(JsonlAuditSink(args.audit_jsonl).summarize(), indent=2, sort_keys=True))
        return


def _run_generate(session: FaviconSession, out_dir: Path) -> int:
    result = asyncio.run(session.generate())
    if result.error:
        print(f"error: {result.error}")
        return 1
    try:
        saved = session.download_all(out_dir)
    finally:
        session.close()
    for kind, path in saved.items():
        print(f"{kind}: {path}")
    return 0


if __name__ == "__main__":
    main()
