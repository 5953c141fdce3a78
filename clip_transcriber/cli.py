"""Command-line interface for the clip transcriber.

WHY: Operators need to start the HTTP service, and to transcribe a single
window from the terminal when debugging a caption or checking that yt-dlp
and the API key work on a host, without crafting HTTP requests.

HOW: argparse with two subcommands. ``serve`` hands off to uvicorn via
server.app.run_api(). ``transcribe`` validates arguments exactly like the
HTTP handler, runs the default pipeline once via asyncio.run(), and
prints the result to stdout in one of three formats. Status and errors go
to stderr.

RULES:
- Exit code 0 on success, 2 on invalid input, 1 on pipeline failure
- --format json (default): the same {"words": [...]} body the API returns
- --format text: one "start end word" line per word
- --format sentences: words grouped for captions, one line per sentence
- Status output goes to stderr (not stdout)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from clip_transcriber import __version__
from clip_transcriber.config import HOST, LOG_LEVEL, PORT
from clip_transcriber.core.models import WordTiming
from clip_transcriber.core.pipeline import TranscriptionPipeline
from clip_transcriber.core.sentences import group_words_into_sentences
from clip_transcriber.errors import ClipTranscriberError, InvalidRequest
from clip_transcriber.server.handler import validate_request
from clip_transcriber.server.models import TranscribeRequest

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID = 2

OUTPUT_FORMATS = ("json", "text", "sentences")


def _status(msg: str) -> None:
    """Print a status message to stderr."""
    print(msg, file=sys.stderr, flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clip-transcriber",
        description="Word-level transcription of a time window of a remote video.",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--log-level",
        default=LOG_LEVEL,
        help="Logging level (default: %(default)s).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default=HOST, help="Listen address (default: %(default)s).")
    serve.add_argument("--port", type=int, default=PORT, help="Listen port (default: %(default)s).")

    transcribe = sub.add_parser("transcribe", help="Transcribe one window and print it.")
    transcribe.add_argument("video_id", help="Source video identifier.")
    transcribe.add_argument("start", type=float, help="Window start in seconds.")
    transcribe.add_argument("end", type=float, help="Window end in seconds.")
    transcribe.add_argument(
        "--format",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        default="json",
        help="Output format (default: %(default)s).",
    )
    return parser


def format_words(words: List[WordTiming], output_format: str) -> str:
    """Render pipeline output for stdout."""
    if output_format == "text":
        return "\n".join(
            "{:.2f} {:.2f} {}".format(w.start, w.end, w.word) for w in words
        )
    if output_format == "sentences":
        return "\n".join(
            "{:.2f} {:.2f} {}".format(s.start, s.end, s.text)
            for s in group_words_into_sentences(words)
        )
    return json.dumps({"words": [w.to_dict() for w in words]}, indent=2)


def run_transcribe(
    args: argparse.Namespace,
    pipeline: Optional[TranscriptionPipeline] = None,
) -> int:
    """Validate, run one pipeline invocation, and print the result."""
    request = TranscribeRequest(video_id=args.video_id, start=args.start, end=args.end)
    try:
        window = validate_request(request)
    except InvalidRequest as exc:
        _status("Error: {}".format(exc.message))
        return EXIT_INVALID

    if pipeline is None:
        from clip_transcriber.server.app import build_default_pipeline

        pipeline = build_default_pipeline()

    _status("Transcribing {} ({:.2f} - {:.2f})...".format(args.video_id, window.start, window.end))
    try:
        words = asyncio.run(pipeline.run(args.video_id, window))
    except ClipTranscriberError as exc:
        _status("Error: {}".format(exc))
        return EXIT_FAILURE

    _status("Transcribed {} words.".format(len(words)))
    print(format_words(words, args.output_format))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        from clip_transcriber.server.app import run_api

        run_api(host=args.host, port=args.port, log_level=args.log_level.upper())
        return EXIT_OK

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    return run_transcribe(args)


if __name__ == "__main__":
    sys.exit(main())
