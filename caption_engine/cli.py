"""CLI wrapper for the caption engine.

WHY: Word-timestamp JSON dumps from any recognizer can be turned into SRT
or plain text offline, without calling the transcription service. It also
supports `python -m caption_engine`.

HOW: Parses arguments with argparse, reads the JSON (with the fallback for
incomplete files in core.try_parse_json()), builds a FormattingConfig from
a preset plus flag overrides, and runs format_transcript().

RULES:
- Usage:
    python -m caption_engine words.json output.srt
    python -m caption_engine words.json --mode char_limit --max-chars 42
    cat words.json | python -m caption_engine - --format txt --lowercase
- --lowercase and --uppercase are mutually exclusive.
- Exit codes: 0 = success, 1 = error.
- Progress messages go to stderr; output goes to stdout if no output file.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from . import format_transcript
from .core import parse_input, try_parse_json
from .errors import CaptionEngineError
from .models import CaseTransform, OutputFormat
from .presets import PRESETS, config_from_preset


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="caption_engine",
        description="Format word-timestamp JSON as SRT captions or plain text.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Word-timestamp JSON file, or '-' for stdin (default).",
    )
    parser.add_argument(
        "output",
        nargs="?",
        default=None,
        help="Output file (default: stdout).",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.SUBTITLE.value,
        help="Output format (default: %(default)s).",
    )
    parser.add_argument(
        "--mode",
        choices=sorted(PRESETS),
        default="word_level",
        help="Caption segmentation mode (default: %(default)s).",
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
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Run the caption engine CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).
    """
    args = build_parser().parse_args(argv)

    case_transform = CaseTransform.NONE
    if args.lowercase:
        case_transform = CaseTransform.LOWERCASE
    elif args.uppercase:
        case_transform = CaseTransform.UPPERCASE

    if args.input == "-":
        raw = sys.stdin.read()
    else:
        with open(args.input, "r", encoding="utf-8") as f:
            raw = f.read()

    try:
        transcript = parse_input(try_parse_json(raw))
        config = config_from_preset(
            args.mode,
            output_format=OutputFormat(args.output_format),
            max_words_per_caption=args.max_words,
            max_chars_per_caption=args.max_chars,
            case_transform=case_transform,
            strip_punctuation=args.strip_punctuation,
        )
        result = format_transcript(transcript, config)
    except (CaptionEngineError, ValueError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(result.content)
        if result.output_format is OutputFormat.SUBTITLE:
            summary = "{} captions".format(len(result.captions))
        else:
            summary = "{} words of text".format(len(transcript.words))
        print("Wrote {} to {}".format(summary, args.output), file=sys.stderr)
    else:
        sys.stdout.write(result.content)


if __name__ == "__main__":
    main()
