"""Error kinds raised by the caption engine.

WHY: Callers must be able to tell "your options were invalid" apart from
"the transcript handed to us was broken" and from recognizer or transport
failures, which live in the application layer and never reuse these types.

RULES:
- Every engine failure derives from CaptionEngineError.
- Errors are raised before any partial result exists.
- The engine never retries; the same inputs always fail the same way.
"""

from __future__ import annotations


class CaptionEngineError(Exception):
    """Base class for all caption engine failures."""


class InvalidConfigError(CaptionEngineError, ValueError):
    """Raised when formatting options are unusable.

    Covers a non-positive or non-integer threshold for the active caption
    mode, an unrecognized enum value, and contradictory case options.
    """


class MalformedTranscriptError(CaptionEngineError):
    """Raised when the word sequence violates its timing invariants.

    Attributes:
        index: Position of the offending word in the transcript.
        reason: Short human-readable explanation.
    """

    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        self.reason = reason
        super().__init__("Malformed transcript at word {}: {}".format(index, reason))


class SubtitleParseError(CaptionEngineError, ValueError):
    """Raised when SRT text cannot be read back into captions.

    Attributes:
        line_number: 1-based line where parsing failed.
    """

    def __init__(self, line_number: int, message: str) -> None:
        self.line_number = line_number
        super().__init__("SRT line {}: {}".format(line_number, message))
