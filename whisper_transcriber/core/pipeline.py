"""Recognize-then-format pipeline shared by the server and the CLI.

WHY: Both entry points do the same thing: check the media file, check the
options, ask the recognizer for a transcript, and run the matching
formatter. Doing it in one function keeps the order of checks identical,
in particular that bad options are rejected before any upstream call.

HOW: check_media_file() validates extension and size.
transcribe_and_format() validates the config, awaits the recognizer, and
hands the transcript to the formatter registered for the output format.

RULES:
- Options are validated before the recognizer is called
- Recognizer errors propagate unchanged (RecognizerError)
- Engine errors propagate unchanged (InvalidConfigError,
  MalformedTranscriptError)
"""

from __future__ import annotations

import logging
from pathlib import Path

from caption_engine import validate_config
from caption_engine.models import AUTO_LANGUAGE, FormattingConfig
from whisper_transcriber.api.base import Recognizer
from whisper_transcriber.config import MAX_UPLOAD_BYTES, SUPPORTED_MEDIA_FORMATS
from whisper_transcriber.formatters import FormatterOutput, get_formatter

logger = logging.getLogger(__name__)


class MediaValidationError(ValueError):
    """Raised when an input file has an unsupported type or is too large."""


def check_media_file(filename: str, size: int | None = None) -> None:
    """Validate a media filename (and optionally its size in bytes).

    Raises:
        MediaValidationError: On unsupported extension or oversize file.
    """
    ext = Path(filename).suffix.lower()
    if ext not in SUPPORTED_MEDIA_FORMATS:
        raise MediaValidationError(
            "Unsupported file type '{}'. Supported formats: {}".format(
                ext, ", ".join(sorted(SUPPORTED_MEDIA_FORMATS))
            )
        )
    if size is not None and size > MAX_UPLOAD_BYTES:
        raise MediaValidationError(
            "File too large ({:,} bytes, max {:,})".format(size, MAX_UPLOAD_BYTES)
        )


async def transcribe_and_format(
    file_path: Path,
    config: FormattingConfig,
    recognizer: Recognizer,
    language: str = AUTO_LANGUAGE,
) -> FormatterOutput:
    """Transcribe a media file and format the result.

    Args:
        file_path: Media file on disk.
        config: Formatting options (validated here, before recognition).
        recognizer: Speech-to-text backend.
        language: ISO 639-1 code or "auto".

    Returns:
        FormatterOutput with content, suffix, MIME type, and engine result.
    """
    config = validate_config(config)
    formatter = get_formatter(config.output_format)

    transcript = await recognizer.transcribe(Path(file_path), language)
    logger.info(
        "Formatting %d words as %s (%s)",
        len(transcript.words), formatter.name, config.caption_mode.value,
    )
    return formatter.format(transcript, config)
