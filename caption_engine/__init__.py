"""Caption engine: segmentation and text normalization for word transcripts.

WHY: A speech recognizer hands back words with start/end timestamps. Callers
want either one normalized block of text or a subtitle file whose captions
respect a word-count or character-count limit. This package is that
transformation, with no I/O and no global state, so it can run inside any
request handler in parallel.

HOW: The single public entry point is format_transcript(transcript, config).
It validates the config and the transcript, then either assembles plain
text or segments the words into captions and renders them as SRT.

RULES:
- format_transcript() is a pure function of (Transcript, FormattingConfig).
- Invalid options raise InvalidConfigError before the transcript is looked at.
- Broken timing raises MalformedTranscriptError; nothing is repaired.
- An empty transcript gives empty output, never an error.
"""

from __future__ import annotations

from .core import (
    assemble_plain_text,
    generate_srt,
    parse_input,
    parse_srt,
    segment_words,
    try_parse_json,
    validate_config,
    validate_transcript,
)
from .errors import (
    CaptionEngineError,
    InvalidConfigError,
    MalformedTranscriptError,
    SubtitleParseError,
)
from .models import (
    AUTO_LANGUAGE,
    Caption,
    CaptionMode,
    CaseTransform,
    FormattingConfig,
    FormattingResult,
    OutputFormat,
    Transcript,
    Word,
)
from .normalize import normalize_text
from .presets import PRESETS, config_from_preset

__version__ = "0.1.0"

__all__ = [
    "format_transcript",
    "normalize_text",
    "generate_srt",
    "parse_srt",
    "parse_input",
    "try_parse_json",
    "config_from_preset",
    "PRESETS",
    "AUTO_LANGUAGE",
    "Caption",
    "CaptionMode",
    "CaseTransform",
    "FormattingConfig",
    "FormattingResult",
    "OutputFormat",
    "Transcript",
    "Word",
    "CaptionEngineError",
    "InvalidConfigError",
    "MalformedTranscriptError",
    "SubtitleParseError",
]


def format_transcript(transcript: Transcript, config: FormattingConfig) -> FormattingResult:
    """Format a transcript as plain text or as an SRT subtitle body.

    WHY: This is the one call the application layer makes after the
    recognizer returns. Everything option-dependent happens here.

    HOW: validate_config() -> validate_transcript() -> either
    assemble_plain_text() or segment_words() + generate_srt().

    RULES:
    - Config errors win over transcript errors (checked first).
    - Plain-text mode returns no captions.
    - Subtitle mode with no words returns an empty body and no captions.

    Args:
        transcript: Words with timing plus the language tag.
        config: Caller-chosen formatting options.

    Returns:
        FormattingResult tagged with the transcript language and format.

    Raises:
        InvalidConfigError: If the options are unusable.
        MalformedTranscriptError: If word timing is out of order or inverted.
    """
    config = validate_config(config)
    validate_transcript(transcript)

    if config.output_format is OutputFormat.PLAIN_TEXT:
        return FormattingResult(
            content=assemble_plain_text(transcript.words, config),
            output_format=config.output_format,
            language=transcript.language,
        )

    captions = segment_words(transcript.words, config)
    return FormattingResult(
        content=generate_srt(captions),
        output_format=config.output_format,
        language=transcript.language,
        captions=tuple(captions),
    )
