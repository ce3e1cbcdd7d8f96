"""Unit tests and toy example for the live-caption stream segmenter (commit logic)."""

from __future__ import annotations

import unittest

from cuetrack.stabilizer import StreamSegmenter, unstable_tail_size


class TestUnstableTail(unittest.TestCase):
    def test_sizes(self) -> None:
        self.assertEqual(unstable_tail_size(2, False), 0)
        self.assertEqual(unstable_tail_size(3, False), 1)
        self.assertEqual(unstable_tail_size(5, False), 1)
        self.assertEqual(unstable_tail_size(6, False), 2)
        self.assertEqual(unstable_tail_size(12, False), 2)
        self.assertEqual(unstable_tail_size(12, True), 0)


class TestStreamSegmenter(unittest.TestCase):
    """Tests for StreamSegmenter."""

    def setUp(self) -> None:
        self.seg = StreamSegmenter(target_word_count=6)
        self.seg.reset(0.0)

    def test_target_invalid(self) -> None:
        """target_word_count must be >= 1."""
        with self.assertRaises(ValueError):
            StreamSegmenter(target_word_count=0)

    def test_empty_transcript(self) -> None:
        update = self.seg.on_transcript("   ", is_final=False, now=0.1)
        self.assertEqual(update.commits, [])
        self.assertIsNone(update.silence_transcript)

    def test_unstable_tail_held_back(self) -> None:
        update = self.seg.on_transcript("one two three four five six", is_final=False, now=0.1)
        self.assertEqual(update.commits, [])
        self.assertEqual(self.seg.pending_words, ["one", "two", "three", "four"])
        self.assertEqual(update.silence_transcript, "one two three four five six")

    def test_backtracking_discards_pending(self) -> None:
        """A rewrite of the stable prefix drops the stale buffer."""
        self.seg.on_transcript("he went to the", is_final=False, now=0.1)
        self.assertEqual(self.seg.pending_words, ["he", "went", "to"])
        update = self.seg.on_transcript("he went home", is_final=False, now=0.2)
        self.assertTrue(update.backtracked)
        self.assertNotIn("to", self.seg.pending_words)
        self.assertEqual(self.seg.pending_words, ["he", "went"])

    def test_growing_partial_not_backtracking(self) -> None:
        self.seg.on_transcript("he went to the", is_final=False, now=0.1)
        update = self.seg.on_transcript("he went to the store", is_final=False, now=0.2)
        self.assertFalse(update.backtracked)
        self.assertEqual(self.seg.pending_words, ["he", "went", "to", "the"])

    def test_commit_on_target_size(self) -> None:
        seg = StreamSegmenter(target_word_count=4)
        seg.reset(0.0)
        update = seg.on_transcript("one two three four five six seven", is_final=False, now=0.1)
        self.assertEqual([s.source_text for s in update.commits], ["one two three four five"])
        update = seg.on_transcript("one two three four five six seven", is_final=True, now=0.2)
        self.assertEqual([s.source_text for s in update.commits], ["six seven"])
        self.assertEqual([s.sequence for s in update.commits], [1])

    def test_commit_on_terminal_punctuation(self) -> None:
        update = self.seg.on_transcript("Good evening. Welcome", is_final=False, now=0.1)
        self.assertEqual([s.source_text for s in update.commits], ["Good evening."])

    def test_commit_pair_after_elapsed(self) -> None:
        update = self.seg.on_transcript("alpha beta gamma", is_final=False, now=1.0)
        self.assertEqual(update.commits, [])
        update = self.seg.on_transcript("alpha beta gamma", is_final=False, now=1.6)
        self.assertEqual([s.source_text for s in update.commits], ["alpha beta"])

    def test_commit_single_after_elapsed(self) -> None:
        self.assertEqual(self.seg.on_transcript("alpha", is_final=False, now=1.0).commits, [])
        update = self.seg.on_transcript("alpha", is_final=False, now=3.1)
        self.assertEqual([s.source_text for s in update.commits], ["alpha"])

    def test_final_commits_whole_transcript(self) -> None:
        self.seg.on_transcript("hello there", is_final=False, now=0.1)
        update = self.seg.on_transcript("hello there friend", is_final=True, now=0.2)
        self.assertEqual([s.source_text for s in update.commits], ["hello there friend"])
        self.assertIsNone(update.silence_transcript)
        self.assertEqual(self.seg.pending_words, [])
        self.assertEqual(self.seg.transcript, "")

    def test_finalize_on_silence(self) -> None:
        """An unchanged partial commits exactly once when the silence timer fires."""
        update = self.seg.on_transcript("hello there", is_final=False, now=0.5)
        self.assertEqual(update.commits, [])
        segment = self.seg.on_silence(update.silence_transcript, now=1.6)
        self.assertIsNotNone(segment)
        self.assertEqual(segment.source_text, "hello there")
        self.assertIsNone(self.seg.on_silence(update.silence_transcript, now=2.7))
        # the recognizer's late final for the same text is suppressed
        self.assertEqual(self.seg.on_transcript("hello there", is_final=True, now=3.0).commits, [])

    def test_silence_ignored_when_transcript_changed(self) -> None:
        first = self.seg.on_transcript("hello there", is_final=False, now=0.5)
        self.seg.on_transcript("hello there again", is_final=False, now=0.9)
        self.assertIsNone(self.seg.on_silence(first.silence_transcript, now=1.6))

    def test_duplicate_final_suppressed(self) -> None:
        first = self.seg.on_transcript("ok thanks", is_final=True, now=0.1)
        second = self.seg.on_transcript("ok thanks", is_final=True, now=0.2)
        self.assertEqual(len(first.commits), 1)
        self.assertEqual(second.commits, [])

    def test_flush_commits_remainder(self) -> None:
        self.seg.on_transcript("one two three four", is_final=False, now=0.1)
        segment = self.seg.flush(now=0.2)
        self.assertEqual(segment.source_text, "one two three four")
        self.assertIsNone(self.seg.flush(now=0.3))

    def test_flush_after_chunk_commit(self) -> None:
        """Only the part not yet committed is flushed."""
        update = self.seg.on_transcript("Good evening. Welcome", is_final=False, now=0.1)
        self.assertEqual(len(update.commits), 1)
        self.assertEqual(self.seg.flush(now=0.2).source_text, "Welcome")

    def test_interrupt_commits_and_starts_fresh(self) -> None:
        """A restarted recognizer begins a new transcript; the old words are kept."""
        self.seg.on_transcript("we are going to the park", is_final=False, now=0.2)
        segment = self.seg.interrupt(now=0.3)
        self.assertEqual(segment.source_text, "we are going to the park")
        self.assertEqual(self.seg.transcript, "")
        self.assertEqual(self.seg.stable_count, 0)
        update = self.seg.on_transcript("and then we ate", is_final=False, now=0.9)
        self.assertFalse(update.backtracked)
        self.assertEqual(self.seg.pending_words, ["and", "then", "we"])

    def test_interrupt_after_chunk_commit(self) -> None:
        self.seg.on_transcript("Good evening. Welcome", is_final=False, now=0.1)
        self.assertEqual(self.seg.interrupt(now=0.2).source_text, "Welcome")
        self.assertIsNone(self.seg.interrupt(now=0.3))

    def test_sequences_increase(self) -> None:
        a = self.seg.on_transcript("first", is_final=True, now=0.1).commits[0]
        b = self.seg.on_transcript("second", is_final=True, now=0.2).commits[0]
        self.assertEqual((a.sequence, b.sequence), (0, 1))
        self.seg.restart_sequence()
        c = self.seg.on_transcript("third", is_final=True, now=0.3).commits[0]
        self.assertEqual(c.sequence, 0)

    def test_reset_clears_buffer_not_sequence(self) -> None:
        self.seg.on_transcript("first", is_final=True, now=0.1)
        self.seg.on_transcript("pending words here", is_final=False, now=0.2)
        self.seg.reset(1.0)
        self.assertEqual(self.seg.pending_words, [])
        self.assertEqual(self.seg.stable_count, 0)
        self.assertEqual(self.seg.next_sequence, 1)


def run_toy_example() -> None:
    """Simulate recognizer partials and show what gets committed."""
    print("=== Toy example: stream segmenter (target 6 words) ===\n")
    seg = StreamSegmenter(target_word_count=6)
    seg.reset(0.0)
    stream = [
        (0.2, "good", False),
        (0.5, "good evening", False),
        (0.9, "good evening and welcome", False),
        (1.3, "good evening and welcome to the", False),
        (1.8, "good evening and welcome to the evening news", False),
        (2.4, "good evening and welcome to the evening news.", True),
    ]
    for now, partial, is_final in stream:
        update = seg.on_transcript(partial, is_final, now)
        committed = [s.source_text for s in update.commits]
        print(f"  {now:4.1f}s {partial!r:52} pending={seg.pending_words} commits={committed}")
    print("\nDone.")


if __name__ == "__main__":
    run_toy_example()
    print("\n--- Running unit tests ---")
    unittest.main(argv=[""], exit=False, verbosity=2)
