"""Thin CLI entry point — runs the worker or a one-off analyze/apply."""

import argparse
import json
import logging
import sys
from pathlib import Path

from silencecut.analyzers.intervals import load_interval_list
from silencecut.config import SENSITIVITY_PRESETS, SilenceDetectConfig, WorkerConfig, load_config
from silencecut.errors import SilenceCutError
from silencecut.ffutil import FFmpegNotFoundError, check_ffmpeg
from silencecut.pipeline import SilencePipeline


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="silencecut",
        description="silencecut — detect and remove silence from video/audio with ffmpeg.",
    )
    parser.add_argument("--config", "-c", type=Path, help="Path to a JSON worker config")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the HTTP worker")
    serve.add_argument("--port", type=int, default=None, help="Port to listen on (default: $PORT or 3000)")
    serve.add_argument("--host", type=str, default="0.0.0.0", help="Host to bind to")

    analyze = sub.add_parser("analyze", help="Print detected silences as JSON")
    analyze.add_argument("video", type=Path, help="Input media file")
    analyze.add_argument("--sensitivity", choices=list(SENSITIVITY_PRESETS), default=None,
                         help="Noise floor preset (low=-40dB, medium=-35dB, high=-30dB)")
    analyze.add_argument("--threshold-db", type=float, default=None, help="Explicit noise floor in dB")
    analyze.add_argument("--min-duration", type=float, default=None, help="Minimum silence duration (seconds)")

    apply = sub.add_parser("apply", help="Cut a silence list out of a video")
    apply.add_argument("video", type=Path, help="Input media file")
    apply.add_argument("--silences", "-s", type=Path, required=True, help="JSON file of {start, end} objects")
    apply.add_argument("--output", "-o", type=Path, help="Output file path")

    return parser


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config) if args.config else WorkerConfig.from_env()

    try:
        check_ffmpeg((config.ffmpeg_binary, config.ffprobe_binary))
    except FFmpegNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.command == "serve":
        from silencecut.web import create_app
        app = create_app(config)
        port = args.port or config.port
        print(f"silencecut worker: http://{args.host}:{port}")
        app.run(host=args.host, port=port, debug=False, threaded=True)
        return

    pipeline = SilencePipeline.from_config(config)

    try:
        if args.command == "analyze":
            try:
                detect = SilenceDetectConfig.from_options(
                    sensitivity=args.sensitivity,
                    threshold_db=args.threshold_db,
                    min_duration=args.min_duration,
                )
            except ValueError as e:
                parser.error(str(e))
            report = pipeline.analyze(args.video, detect)
            print(json.dumps(report.to_dict(), indent=2))
            return

        raw = load_interval_list(args.silences.read_bytes())
        output = args.output or args.video.with_stem(args.video.stem + "_cut")
        result = pipeline.apply(args.video, raw, output)
    except SilenceCutError as e:
        print(f"Error ({e.reason}): {e.message}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print()
    print(f"Done! Output: {result.output_path}")
    print(f"  Removed: {len(result.intervals)} silences ({result.removed_duration:.2f}s)")
    print(f"  Duration: {result.output_duration:.2f}s")
