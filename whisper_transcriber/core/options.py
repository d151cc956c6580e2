"""Decoding of caller-chosen formatting options into a FormattingConfig.

WHY: The upload form sends every option as a string ("true", "50",
"char_limit") and always sends both the word and the character threshold,
plus two separate lowercase/uppercase checkboxes. The engine wants one
typed, immutable FormattingConfig with a single three-state case enum.

HOW: parse_options() decodes each raw value with small helpers that raise
InvalidConfigError on garbage. The two case checkboxes collapse into one
CaseTransform; asking for both is rejected.

RULES:
- Accepts typed values (CLI, tests) and form strings alike
- Booleans: true/false, 1/0, yes/no, on/off (case-insensitive); empty = False
- Only the active caption mode's threshold is decoded strictly; the
  inactive one is ignored and replaced by its default if unparseable
- lowercase and uppercase together raise InvalidConfigError
"""

from __future__ import annotations

from typing import Any

from caption_engine.errors import InvalidConfigError
from caption_engine.models import CaptionMode, CaseTransform, FormattingConfig, OutputFormat
from whisper_transcriber.config import (
    DEFAULT_CAPTION_MODE,
    DEFAULT_MAX_CHARS,
    DEFAULT_MAX_WORDS,
    DEFAULT_OUTPUT_FORMAT,
)

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
_FALSE_VALUES = frozenset({"false", "0", "no", "off", ""})


def parse_bool(value: Any, field_name: str) -> bool:
    """Decode a checkbox value."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise InvalidConfigError("{} must be a boolean, got {!r}".format(field_name, value))


def parse_int(value: Any, field_name: str) -> int:
    """Decode a threshold value. Range checks are left to the engine."""
    if isinstance(value, bool):
        raise InvalidConfigError("{} must be an integer, got {!r}".format(field_name, value))
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise InvalidConfigError(
            "{} must be an integer, got {!r}".format(field_name, value)
        ) from None


def _parse_enum(enum_cls, value: Any, default: Any, field_name: str):
    if value is None or value == "":
        value = default
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidConfigError(
            "Unrecognized {} '{}'. Allowed: {}".format(field_name, value, allowed)
        ) from None


def _parse_inactive_int(value: Any, default: int) -> int:
    try:
        return parse_int(value, "inactive threshold")
    except InvalidConfigError:
        return default


def parse_options(
    output_format: Any = None,
    caption_mode: Any = None,
    max_words: Any = None,
    max_chars: Any = None,
    lowercase: Any = False,
    uppercase: Any = False,
    strip_punctuation: Any = False,
) -> FormattingConfig:
    """Build a FormattingConfig from raw option values.

    Args:
        output_format: "srt" or "txt" (default from config).
        caption_mode: "word_level" or "char_limit" (default from config).
        max_words: Words per caption for word_level mode.
        max_chars: Characters per caption for char_limit mode.
        lowercase: Lowercase checkbox.
        uppercase: Uppercase checkbox.
        strip_punctuation: Remove-punctuation checkbox.

    Returns:
        An unvalidated-range FormattingConfig; the engine checks that the
        active threshold is positive.

    Raises:
        InvalidConfigError: On undecodable values or both case boxes ticked.
    """
    fmt = _parse_enum(OutputFormat, output_format, DEFAULT_OUTPUT_FORMAT, "output format")
    mode = _parse_enum(CaptionMode, caption_mode, DEFAULT_CAPTION_MODE, "caption mode")

    if mode is CaptionMode.CHAR_COUNT:
        chars = DEFAULT_MAX_CHARS if max_chars is None else parse_int(max_chars, "maxChars")
        words = _parse_inactive_int(max_words, DEFAULT_MAX_WORDS)
    else:
        words = DEFAULT_MAX_WORDS if max_words is None else parse_int(max_words, "maxWords")
        chars = _parse_inactive_int(max_chars, DEFAULT_MAX_CHARS)

    want_lower = parse_bool(lowercase, "allLowercase")
    want_upper = parse_bool(uppercase, "allUppercase")
    if want_lower and want_upper:
        raise InvalidConfigError("allLowercase and allUppercase cannot both be set")

    case_transform = CaseTransform.NONE
    if want_lower:
        case_transform = CaseTransform.LOWERCASE
    elif want_upper:
        case_transform = CaseTransform.UPPERCASE

    return FormattingConfig(
        output_format=fmt,
        caption_mode=mode,
        max_words_per_caption=words,
        max_chars_per_caption=chars,
        case_transform=case_transform,
        strip_punctuation=parse_bool(strip_punctuation, "removeAllPunctuation"),
    )
