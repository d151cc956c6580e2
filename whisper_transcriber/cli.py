"""Command-line interface for Whisper Transcription.

WHY: Users need a simple way to transcribe audio/video files from the
terminal. The CLI wires together the full pipeline (file validation,
option decoding, Whisper upload, caption engine formatting, and file
saving) behind a single command.

HOW: Uses argparse to accept an input file, language, output format,
caption mode and thresholds, normalization flags, and output directory.
Runs the async pipeline via asyncio.run(). Status messages go to stderr;
the output file is saved next to the source (or to --output-dir).

RULES:
- Positional argument: input audio/video file path
- Validates file extension and size before any API call
- Validates formatting options before any API call
- --lowercase and --uppercase are mutually exclusive
- Output naming: {stem}{suffix}, numeric suffix for conflicts (interview-2.srt)
- Status output goes to stderr (not stdout)
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from caption_engine import validate_config
from caption_engine.errors import CaptionEngineError
from caption_engine.models import CaptionMode, OutputFormat
from whisper_transcriber.api.base import RecognizerError
from whisper_transcriber.api.client import WhisperClient
from whisper_transcriber.config import (
    DEFAULT_CAPTION_MODE,
    DEFAULT_LANGUAGE,
    DEFAULT_OUTPUT_FORMAT,
    SUPPORTED_LANGUAGES,
)
from whisper_transcriber.core.options import parse_options
from whisper_transcriber.core.pipeline import (
    MediaValidationError,
    check_media_file,
    transcribe_and_format,
)
from whisper_transcriber.formatters import FormatterOutput


def _status(msg: str) -> None:
    """Print a status message to stderr, flushed, so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Resolve the output file path, adding a numeric suffix on conflict.

    WHY: Users may run the tool several times on the same file.
    Overwriting previous output would lose work.

    RULES:
    - First attempt: {stem}{suffix} (e.g. interview.srt)
    - Conflict: {stem}-2{suffix}, {stem}-3{suffix}, ...
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    counter = 2
    while True:
        candidate = output_dir / "{}-{}{}".format(stem, counter, suffix)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


async def _run_pipeline(args: argparse.Namespace) -> Path:
    """Execute the full transcription pipeline.

    RULES:
    - Validate file and options before any API call
    - Status messages to stderr at each step
    - Returns the path of the saved output file
    """
    input_path = Path(args.input_file).resolve()

    if not input_path.is_file():
        raise MediaValidationError("File not found: {}".format(input_path))
    check_media_file(input_path.name, input_path.stat().st_size)

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not output_dir.is_dir():
        raise MediaValidationError("Output directory does not exist: {}".format(output_dir))

    config = validate_config(parse_options(
        output_format=args.output_format,
        caption_mode=args.mode,
        max_words=args.max_words,
        max_chars=args.max_chars,
        lowercase=args.lowercase,
        uppercase=args.uppercase,
        strip_punctuation=args.strip_punctuation,
    ))

    async with WhisperClient() as client:
        output = await transcribe_and_format(input_path, config, client, args.language)

    if output.result.captions:
        _status("  {} captions, language: {}".format(
            len(output.result.captions), output.result.language,
        ))

    saved_path = _save_output(output, input_path.stem, output_dir)
    _status("Done! Saved {}".format(saved_path))
    return saved_path


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Kept separate from main() so tests can inspect the parser without
    running the pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="whisper_transcriber",
        description="Transcribe audio/video files with OpenAI Whisper and "
                    "save SRT subtitles or plain text.",
    )

    parser.add_argument(
        "input_file",
        help="Path to the audio or video file to transcribe.",
    )

    parser.add_argument(
        "--language",
        default=DEFAULT_LANGUAGE,
        help="ISO 639-1 code or 'auto' (default: %(default)s). "
             "Offered: {}.".format(", ".join(SUPPORTED_LANGUAGES)),
    )

    parser.add_argument(
        "--format",
        dest="output_format",
        choices=[f.value for f in OutputFormat],
        default=DEFAULT_OUTPUT_FORMAT,
        help="Output format (default: %(default)s).",
    )

    parser.add_argument(
        "--mode",
        choices=[m.value for m in CaptionMode],
        default=DEFAULT_CAPTION_MODE,
        help="Caption segmentation mode for SRT output (default: %(default)s).",
    )

    parser.add_argument(
        "--max-words",
        type=int,
        default=None,
        help="Words per caption in word_level mode.",
    )

    parser.add_argument(
        "--max-chars",
        type=int,
        default=None,
        help="Characters per caption in char_limit mode.",
    )

    case_group = parser.add_mutually_exclusive_group()
    case_group.add_argument("--lowercase", action="store_true", help="Lowercase all text.")
    case_group.add_argument("--uppercase", action="store_true", help="Uppercase all text.")

    parser.add_argument(
        "--strip-punctuation",
        action="store_true",
        help="Remove all punctuation.",
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save the output file (default: same as input file).",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Exit code 1 on validation, option, recognizer or formatting errors
    - Exit code 130 on Ctrl-C
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        asyncio.run(_run_pipeline(args))
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except (MediaValidationError, CaptionEngineError, RecognizerError, ValueError) as e:
        # ValueError also covers a missing API key
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
