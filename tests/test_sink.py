"""Unit tests for the best-effort plain-text caption sink."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from cuetrack.sink import PlainTextSink


class TestPlainTextSink(unittest.TestCase):
    """Tests for PlainTextSink."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_publish_joins_lines(self) -> None:
        sink = PlainTextSink(self.root / "out" / "captions.txt")
        self.assertTrue(sink.publish(["Hello.", "Good evening."]).result(timeout=5))
        self.assertEqual(sink.path.read_text(encoding="utf-8"), "Hello.\nGood evening.")
        sink.close()

    def test_clear_writes_empty_file(self) -> None:
        sink = PlainTextSink(self.root / "captions.txt")
        sink.publish(["something"]).result(timeout=5)
        self.assertTrue(sink.clear().result(timeout=5))
        self.assertEqual(sink.path.read_text(encoding="utf-8"), "")
        sink.close()

    def test_write_failure_is_swallowed(self) -> None:
        """An unwritable target is logged and reported as False, never raised."""
        blocker = self.root / "not-a-dir"
        blocker.write_text("x", encoding="utf-8")
        sink = PlainTextSink(blocker / "captions.txt")
        with self.assertLogs("cuetrack.sink", level="WARNING"):
            self.assertFalse(sink.publish(["hello"]).result(timeout=5))
        sink.close()

    def test_no_temp_files_left(self) -> None:
        sink = PlainTextSink(self.root / "captions.txt")
        for i in range(5):
            sink.publish([f"line {i}"])
        sink.close()
        self.assertEqual(sorted(p.name for p in self.root.iterdir()), ["captions.txt"])
        self.assertEqual((self.root / "captions.txt").read_text(encoding="utf-8"), "line 4")


if __name__ == "__main__":
    unittest.main()
