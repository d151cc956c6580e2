"""SRT caption formatter: word-count or character-limited subtitles.

WHY: Editors and video players need a subtitle file. All SRT output goes
through the caption engine so segmentation and normalization rules are the
same everywhere.

HOW: Runs format_transcript() in subtitle mode. The config's caption mode
picks the policy: ``word_level`` (fixed words per caption, 1 = word for
word) or ``char_limit`` (greedy fill up to a character count).

RULES:
- Registered as "srt" in the FORMATTERS dict.
- Media type: "application/x-subrip".
- If the transcript has no words, the output is an empty SRT string.
- Never modifies the Transcript.
"""

from __future__ import annotations

from caption_engine.models import OutputFormat
from whisper_transcriber.formatters.base import BaseFormatter


class SRTCaptionFormatter(BaseFormatter):
    """Formatter that produces an SRT subtitle file."""

    @property
    def name(self) -> str:
        return "SRT Subtitles"

    @property
    def output_format(self) -> OutputFormat:
        return OutputFormat.SUBTITLE

    @property
    def media_type(self) -> str:
        return "application/x-subrip"
