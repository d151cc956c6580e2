"""Abstract base formatter and output container.

WHY: The server and CLI need to turn an engine result into something they
can serve or save: a file suffix, the body, and a MIME type. This base class
enforces a consistent interface so both can work with any output format
generically.

HOW: BaseFormatter is an ABC with a ``name`` property, an ``output_format``
property, and a concrete ``format()`` that runs the caption engine with the
formatter's output format and wraps the result. FormatterOutput is a plain
dataclass bundling the suffix, content, MIME type, and the engine result.

RULES:
- Subclasses MUST implement ``name``, ``output_format`` and ``media_type``
- ``suffix`` is the output format's extension, e.g. ``".srt"``
- The caller is responsible for prepending the source filename stem
- The formatter's output format overrides whatever the config carries
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from dataclasses import dataclass

from caption_engine import format_transcript
from caption_engine.models import FormattingConfig, FormattingResult, OutputFormat, Transcript


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``".srt"`` → ``"interview.srt"``.
        content: The file content as a string (SRT or plain text).
        media_type: MIME type for the content, e.g. ``"application/x-subrip"``.
        result: The engine result the content came from (language, captions).
    """

    suffix: str
    content: str
    media_type: str
    result: FormattingResult


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Add the value to caption_engine.models.OutputFormat
    2. Create a new file in formatters/ and subclass BaseFormatter
    3. Register it in the FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'SRT Subtitles'."""

    @property
    @abstractmethod
    def output_format(self) -> OutputFormat:
        """Engine output format this formatter produces."""

    @property
    @abstractmethod
    def media_type(self) -> str:
        """MIME type of the produced content."""

    @property
    def suffix(self) -> str:
        return self.output_format.extension

    def format(self, transcript: Transcript, config: FormattingConfig) -> FormatterOutput:
        """Run the caption engine and wrap the result.

        Args:
            transcript: Words with timing plus the language tag.
            config: Caller-chosen options; output_format is replaced by
                    this formatter's own.

        Returns:
            FormatterOutput with suffix, content, MIME type, and result.

        Raises:
            InvalidConfigError, MalformedTranscriptError: From the engine.
        """
        config = dataclasses.replace(config, output_format=self.output_format)
        result = format_transcript(transcript, config)
        return FormatterOutput(
            suffix=self.suffix,
            content=result.content,
            media_type=self.media_type,
            result=result,
        )
