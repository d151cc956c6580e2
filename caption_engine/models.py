"""Data models for the caption engine.

WHY: The engine turns a recognizer's word-timestamp sequence into plain text
or timed captions. Every stage (validation, normalization, segmentation,
SRT generation) consumes or produces the types defined here, so they are the
stable contract between the recognizer side and the formatting side.

HOW: Frozen dataclasses for the values (Word, Transcript, Caption,
FormattingConfig, FormattingResult) and str-valued enums for the closed
option sets. Enum values are the wire names used by the upload form, so
decoding a request option is a plain ``Enum(value)`` call.

RULES:
- Word.text is never modified by segmentation; only caption text is normalized.
- Word timestamps are float seconds. Caption timestamps are integer
  milliseconds, quantized once when the caption is built.
- Case transform is ONE three-state enum, never two booleans.
- Everything is immutable; the engine never mutates caller data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

AUTO_LANGUAGE = "auto"
"""Language sentinel meaning "let the recognizer decide"."""


class OutputFormat(str, Enum):
    """Shape of the formatted result. Values match the form's ``outputFormat``."""

    PLAIN_TEXT = "txt"
    SUBTITLE = "srt"

    @property
    def extension(self) -> str:
        """Filename extension the downstream layer serves, e.g. ``".srt"``."""
        return "." + self.value


class CaptionMode(str, Enum):
    """Segmentation policy. Values match the form's ``srtMode``."""

    WORD_COUNT = "word_level"
    CHAR_COUNT = "char_limit"


class CaseTransform(str, Enum):
    """Case transform applied after punctuation stripping."""

    NONE = "none"
    LOWERCASE = "lowercase"
    UPPERCASE = "uppercase"


@dataclass(frozen=True)
class Word:
    """A single recognized token with timing.

    Attributes:
        text: Token text as produced by the recognizer.
        start: Start time in seconds.
        end: End time in seconds.
    """

    text: str
    start: float
    end: float


@dataclass(frozen=True)
class Transcript:
    """Ordered words of one input plus the detected or forced language.

    RULES:
    - words are ordered by start time (validated, never repaired)
    - language is an ISO 639-1 code or AUTO_LANGUAGE
    - an empty word sequence is valid and formats to empty output
    """

    words: Tuple[Word, ...] = ()
    language: str = AUTO_LANGUAGE

    def __post_init__(self) -> None:
        # Accept any sequence from callers but store a tuple.
        object.__setattr__(self, "words", tuple(self.words))

    @property
    def duration(self) -> float:
        """End of the last word in seconds (0.0 for an empty transcript)."""
        if not self.words:
            return 0.0
        return self.words[-1].end


@dataclass(frozen=True)
class FormattingConfig:
    """Caller-chosen formatting options.

    Only the threshold of the active caption mode is validated and used;
    the other one is ignored entirely, matching the upload form where both
    fields are always sent.
    """

    output_format: OutputFormat = OutputFormat.SUBTITLE
    caption_mode: CaptionMode = CaptionMode.WORD_COUNT
    max_words_per_caption: int = 1
    max_chars_per_caption: int = 50
    case_transform: CaseTransform = CaseTransform.NONE
    strip_punctuation: bool = False

    @property
    def active_threshold(self) -> int:
        """The threshold the active caption mode uses."""
        if self.caption_mode is CaptionMode.CHAR_COUNT:
            return self.max_chars_per_caption
        return self.max_words_per_caption


@dataclass(frozen=True)
class Caption:
    """One subtitle entry.

    Attributes:
        index: 1-based sequence number, contiguous across the file.
        start_ms: Start time in milliseconds.
        end_ms: End time in milliseconds (strictly after start_ms).
        text: Normalized display text.
        words: Source words of this caption. Not part of equality, so a
            caption parsed back from SRT compares equal to the original.
    """

    index: int
    start_ms: int
    end_ms: int
    text: str
    words: Tuple[Word, ...] = field(default=(), compare=False, repr=False)

    @property
    def start(self) -> float:
        return self.start_ms / 1000.0

    @property
    def end(self) -> float:
        return self.end_ms / 1000.0


@dataclass(frozen=True)
class FormattingResult:
    """Output of one engine run.

    Attributes:
        content: Plain text, or the full SRT body in subtitle mode.
        output_format: Format the content is in.
        language: Effective language of the transcript.
        captions: The caption sequence (empty in plain-text mode).
    """

    content: str
    output_format: OutputFormat
    language: str
    captions: Tuple[Caption, ...] = ()
