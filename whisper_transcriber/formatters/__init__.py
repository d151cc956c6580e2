"""Output formatter registry: one formatter per output format.

WHY: The CLI and API layers need a single lookup to find the right
formatter for the caller's ``outputFormat`` option. A central dict makes it
trivial to add new formats: create the formatter class, import it here,
add one line.

HOW: FORMATTERS maps output-format values ("srt", "txt") to formatter
*classes* (not instances). Callers instantiate as needed:
``formatter = FORMATTERS["srt"]()``. get_formatter() does the lookup from
an OutputFormat.

RULES:
- Keys are OutputFormat values (used in form fields and CLI flags)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from caption_engine.models import OutputFormat
from whisper_transcriber.formatters.base import BaseFormatter, FormatterOutput
from whisper_transcriber.formatters.plain_text import PlainTextFormatter
from whisper_transcriber.formatters.srt_captions import SRTCaptionFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    OutputFormat.SUBTITLE.value: SRTCaptionFormatter,
    OutputFormat.PLAIN_TEXT.value: PlainTextFormatter,
}


def get_formatter(output_format: OutputFormat) -> BaseFormatter:
    """Instantiate the formatter registered for an output format."""
    return FORMATTERS[OutputFormat(output_format).value]()


__all__ = ["FORMATTERS", "BaseFormatter", "FormatterOutput", "get_formatter"]
