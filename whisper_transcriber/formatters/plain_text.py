"""Plain text transcript formatter.

WHY: Callers who only want the words (for review, search, or pasting into
a document) get a single normalized line of text with no timecodes.

RULES:
- Words joined by single spaces, normalized once as a whole
- Output suffix: ".txt"
- Media type: "text/plain"
"""

from __future__ import annotations

from caption_engine.models import OutputFormat
from whisper_transcriber.formatters.base import BaseFormatter


class PlainTextFormatter(BaseFormatter):
    """Formatter that produces the transcript as plain text."""

    @property
    def name(self) -> str:
        return "Plain Text"

    @property
    def output_format(self) -> OutputFormat:
        return OutputFormat.PLAIN_TEXT

    @property
    def media_type(self) -> str:
        return "text/plain"
