from __future__ import annotations

import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import main


def _run(argv: list[str], err: io.StringIO | None = None) -> tuple[int, str]:
    out = io.StringIO()
    code = 0
    with (
        mock.patch("sys.argv", ["favicon-forge", *argv]),
        contextlib.redirect_stdout(out),
        contextlib.redirect_stderr(err or io.StringIO()),
    ):
        try:
            main.main()
        except SystemExit as exc:
            code = int(exc.code or 0)
    return code, out.getvalue()


class CliTests(unittest.TestCase):
    def test_generate_writes_three_files_and_audits(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            audit = Path(tmp) / "audit.jsonl"
            code, output = _run(
                ["generate", "--text", "Hi!", "--out-dir", tmp, "--ico-mode", "container", "--audit-jsonl", str(audit)]
            )
            self.assertEqual(code, 0)
            for name in ("favicon.ico", "favicon.png", "favicon.svg"):
                self.assertTrue((Path(tmp) / name).exists(), name)
            self.assertIn(">Hi</text>", (Path(tmp) / "favicon.svg").read_text(encoding="utf-8"))
            self.assertIn("png:", output)

            code, output = _run(["audit-report", "--audit-jsonl", str(audit)])
            self.assertEqual(code, 0)
            summary = json.loads(output)
            self.assertEqual(summary["by_action"]["created"], 3)
            self.assertEqual(summary["leaked"], 0)

    def test_bad_config_exits_with_usage_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            broken = Path(tmp) / "broken.toml"
            broken.write_text("[favicon\nfont_size = ", encoding="utf-8")
            unknown = Path(tmp) / "unknown.toml"
            unknown.write_text("[favicon]\nborder = 3\n", encoding="utf-8")
            missing = Path(tmp) / "missing.toml"
            for path in (broken, unknown, missing):
                with self.subTest(config=path.name):
                    err = io.StringIO()
                    code, output = _run(["generate", "--out-dir", tmp, "--config", str(path)], err)
                    self.assertEqual(code, 2)
                    self.assertEqual(output, "")
                    self.assertIn("cannot load config", err.getvalue())
                    self.assertNotIn("Traceback", err.getvalue())
            self.assertFalse((Path(tmp) / "favicon.png").exists())

    def test_palette_lists_swatches(self) -> None:
        code, output = _run(["palette"])
        self.assertEqual(code, 0)
        lines = output.split()
        self.assertEqual(len(lines), 28)
        self.assertEqual(lines[0], "#FFFFFF")


if __name__ == "__main__":
    unittest.main()
