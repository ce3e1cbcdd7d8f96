"""CLI: replay transcripts through a session, or watch live input levels."""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from cuetrack.config import CaptionConfig, TeleprompterConfig
from cuetrack.models import CaptionSegment
from cuetrack.pipeline import CaptionSession, TeleprompterSession
from cuetrack.sources import ManualClock, ReplayTranscriptSource, load_steps
from cuetrack.translation import GlossaryTranslator


def _print_devices() -> int:
    from cuetrack.audio.collector import list_devices

    try:
        print(list_devices())
    except ImportError:
        print("sounddevice not installed: pip install sounddevice", file=sys.stderr)
        return 1
    return 0


def run_track(reference_path: Path, events_path: Path, locale: str) -> int:
    reference = reference_path.read_text(encoding="utf-8")
    steps = load_steps(events_path)
    clock = ManualClock()
    source = ReplayTranscriptSource(steps)
    session = TeleprompterSession(source, TeleprompterConfig(speech_locale=locale), clock=clock)
    session.start(reference)
    total = len(session.reference_text)
    for step in steps:
        clock.advance_to(step.at)
        session.pump()
        source.play(step)
        session.pump()
        if step.event is not None:
            offset = session.confirmed_offset
            print(f"{step.at:7.2f}s  {offset:5d}/{total}  {session.reference_text[:offset][-40:]!r}")
    session.stop()
    if session.error:
        print(f"error: {session.error}", file=sys.stderr)
        return 2
    return 0


def run_caption(events_path: Path, config: CaptionConfig) -> int:
    steps = load_steps(events_path)
    clock = ManualClock()
    source = ReplayTranscriptSource(steps)
    printed = set()

    def on_segments(segments: List[CaptionSegment]) -> None:
        for segment in segments:
            if segment.translated_text and segment.sequence not in printed:
                printed.add(segment.sequence)
                print(f"#{segment.sequence:<3d} [{segment.source_language}] {segment.source_text}")
                if segment.translated_text != segment.source_text:
                    print(f"      -> {segment.translated_text}")

    session = CaptionSession(
        source, config, translator=GlossaryTranslator(), clock=clock, on_segments=on_segments
    )
    session.start_listening()
    for step in steps:
        clock.advance_to(step.at)
        session.pump()
        source.play(step)
        session.pump()
    clock.advance(config.silence_finalize_sec)
    session.pump()
    session.stop_listening()
    # translations finish on worker threads and come back through the queue
    session.dispatcher.shutdown(wait=True)
    session.pump()
    session.close()
    if session.error:
        print(f"error: {session.error}", file=sys.stderr)
        return 2
    return 0


def run_levels(device: Optional[int], duration: float) -> int:
    from cuetrack.audio import AudioLevelMeter, MicrophoneLevelSampler

    meter = AudioLevelMeter()
    sampler = MicrophoneLevelSampler(meter)
    try:
        sampler.start(device)
    except ImportError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    deadline = time.monotonic() + duration
    try:
        while time.monotonic() < deadline:
            level = float(meter.levels()[-1])
            bar = "#" * int(level * 40)
            flag = "speaking" if meter.is_speaking else ""
            print(f"\r{bar:<40s} {level:0.2f} {flag:<8s}", end="", flush=True)
            time.sleep(0.1)
    except KeyboardInterrupt:
        pass
    finally:
        sampler.stop()
        print()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cuetrack", description="Teleprompter tracking and live captions")
    parser.add_argument(
        "--list-devices",
        action="store_true",
        help="List available audio input devices and exit",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command")

    track = sub.add_parser("track", help="Replay transcript events against a reference script")
    track.add_argument("reference", type=Path, help="Reference script (text file)")
    track.add_argument("events", type=Path, help="Transcript events (JSON lines)")
    track.add_argument("--locale", default=TeleprompterConfig.speech_locale, help="Speech locale (default: en-US)")

    caption = sub.add_parser("caption", help="Replay transcript events through the caption segmenter")
    caption.add_argument("events", type=Path, help="Transcript events (JSON lines)")
    caption.add_argument("--locale", default=None, help="Speech locale (default: en-US)")
    caption.add_argument("--source", default=None, help="Source language code or 'auto'")
    caption.add_argument("--target", default=None, help="Target language code (default: en)")
    caption.add_argument("--buffer-words", type=int, default=None, help="Words per committed chunk (min 3)")
    caption.add_argument("--lines", type=int, default=None, help="Visible caption lines (2..8)")
    caption.add_argument("--output", "-o", type=Path, default=None, help="Plain-text caption file")

    levels = sub.add_parser("levels", help="Show live microphone input levels")
    levels.add_argument("--device", type=int, default=None, help="Input device index (list with --list-devices)")
    levels.add_argument("--duration", type=float, default=10.0, help="Seconds to run (default: 10)")
    return parser


def _caption_config(args: argparse.Namespace) -> CaptionConfig:
    base = CaptionConfig.from_env()
    return CaptionConfig(
        speech_locale=args.locale or base.speech_locale,
        source_language=args.source or base.source_language,
        target_language=args.target or base.target_language,
        buffer_word_count=args.buffer_words or base.buffer_word_count,
        max_visible_lines=args.lines or base.max_visible_lines,
        silence_finalize_sec=base.silence_finalize_sec,
        translation_timeout_sec=base.translation_timeout_sec,
        output_path=str(args.output) if args.output else base.output_path,
        recovery=base.recovery,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.list_devices:
        return _print_devices()
    if args.command == "track":
        return run_track(args.reference, args.events, args.locale)
    if args.command == "caption":
        return run_caption(args.events, _caption_config(args))
    if args.command == "levels":
        return run_levels(args.device, args.duration)
    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
