"""Unit tests for the replay CLI and the JSON-lines event loader."""

from __future__ import annotations

import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from cuetrack.cli import build_parser, main
from cuetrack.errors import FailureKind
from cuetrack.models import TranscriptEventKind
from cuetrack.sources import iter_steps, load_steps


def _write_events(path: Path, records) -> Path:
    path.write_text("\n".join(json.dumps(r) for r in records) + "\n", encoding="utf-8")
    return path


class TestReplayLoader(unittest.TestCase):
    """Tests for iter_steps / load_steps."""

    def test_parses_kinds_and_levels(self) -> None:
        lines = [
            '{"t": 0.5, "kind": "partial", "text": "good"}',
            "",
            "# comment",
            '{"level": 0.3}',
            '{"t": 1.0, "kind": "failure", "failure": "TRANSIENT_AUDIO_FORMAT", "message": "48k -> 0"}',
            '{"t": 1.5, "kind": "configuration_changed"}',
            '{"t": 2.0, "kind": "final", "text": "good evening"}',
        ]
        steps = list(iter_steps(lines))
        self.assertEqual(len(steps), 5)
        self.assertEqual(steps[0].event.kind, TranscriptEventKind.PARTIAL)
        self.assertEqual(steps[1].at, 0.5)
        self.assertIsNone(steps[1].event)
        self.assertEqual(steps[1].level, 0.3)
        self.assertEqual(steps[2].event.failure, FailureKind.TRANSIENT_AUDIO_FORMAT)
        self.assertEqual(steps[2].event.message, "48k -> 0")
        self.assertEqual(steps[3].event.kind, TranscriptEventKind.CONFIGURATION_CHANGED)
        self.assertTrue(steps[4].event.is_final)

    def test_invalid_json_reports_line(self) -> None:
        with self.assertRaisesRegex(ValueError, "line 2"):
            list(iter_steps(['{"kind": "partial"}', "{nope"]))

    def test_unknown_kind(self) -> None:
        with self.assertRaises(ValueError):
            list(iter_steps(['{"kind": "whisper"}']))


class TestCli(unittest.TestCase):
    """End-to-end replay through main()."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_no_command_prints_help(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(main([]), 1)
        self.assertIn("usage", out.getvalue())

    def test_track(self) -> None:
        reference = self.root / "script.txt"
        reference.write_text("The quick brown fox.\n", encoding="utf-8")
        events = _write_events(
            self.root / "events.jsonl",
            [
                {"t": 0.4, "kind": "partial", "text": "the quick"},
                {"t": 0.9, "kind": "partial", "text": "the quick brown fox"},
            ],
        )
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(main(["track", str(reference), str(events)]), 0)
        lines = out.getvalue().splitlines()
        self.assertEqual(len(lines), 2)
        self.assertIn("10/20", lines[0])
        self.assertIn("20/20", lines[1])

    def test_track_retries_exhausted(self) -> None:
        reference = self.root / "script.txt"
        reference.write_text("hello world", encoding="utf-8")
        records = [{"t": 2.0 * i, "kind": "failure"} for i in range(12)]
        events = _write_events(self.root / "events.jsonl", records)
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(main(["track", str(reference), str(events)]), 2)

    def test_caption_writes_output(self) -> None:
        events = _write_events(
            self.root / "events.jsonl",
            [
                {"t": 0.2, "kind": "partial", "text": "good evening"},
                {"t": 0.6, "kind": "final", "text": "good evening everyone."},
                {"t": 1.0, "kind": "partial", "text": "welcome to the show"},
            ],
        )
        output = self.root / "captions.txt"
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(["caption", str(events), "--output", str(output), "--lines", "3"])
        self.assertEqual(code, 0)
        printed = out.getvalue()
        self.assertIn("good evening everyone.", printed)
        self.assertIn("welcome to the show", printed)
        self.assertEqual(output.read_text(encoding="utf-8"), "good evening everyone.\nwelcome to the show")

    def test_parser_defaults(self) -> None:
        args = build_parser().parse_args(["levels"])
        self.assertIsNone(args.device)
        self.assertEqual(args.duration, 10.0)
        self.assertEqual(args.log_level, "WARNING")


if __name__ == "__main__":
    unittest.main()
