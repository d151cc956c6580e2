"""Core caption engine logic: validation, segmentation, timing, and SRT I/O.

WHY: This module contains the whole path from a validated word sequence to
a finished plain-text string or SRT body. Keeping it in one place keeps the
boundary rules (split tie-breaks, millisecond rounding, overlap handling)
next to each other where they can be checked together.

HOW: The pipeline has four stages:
  1. validate_config() / validate_transcript(): reject bad input before
     any work is done, never repair it.
  2. segment_words(): group words by the active policy (word count or
     character count) and build Caption objects with resolved timing.
  3. assemble_plain_text(): the plain-text alternative to segmentation.
  4. generate_srt() / parse_srt(): SRT serialization and its reader.

RULES:
- ALL functions take the config explicitly; there is no module state.
- Word text is never modified; only the caption/plain text is normalized.
- Normalization runs once per caption, never across caption boundaries.
- Caption timing is integer milliseconds; rounding happens exactly once,
  when a caption is built, so generate_srt -> parse_srt is lossless.
- Caption text built from words is a single line; line breaks inside
  recognizer tokens become spaces.
"""

from __future__ import annotations

import dataclasses
import json
import math
import re
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple, Type, TypeVar

from .errors import InvalidConfigError, MalformedTranscriptError, SubtitleParseError
from .models import (
    AUTO_LANGUAGE,
    Caption,
    CaptionMode,
    CaseTransform,
    FormattingConfig,
    OutputFormat,
    Transcript,
    Word,
)
from .normalize import normalize_text

_E = TypeVar("_E", bound=Enum)

# Shortest caption the timing resolver will emit.
MIN_CAPTION_MS = 1

_LINE_BREAK_RUN_RE = re.compile(r"[ \t]*[\r\n]\s*")

# =============================================================================
# Validation
# =============================================================================


def _coerce_enum(enum_cls: Type[_E], value: Any, field_name: str) -> _E:
    """Return value as a member of enum_cls, accepting the raw wire value too."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidConfigError(
            "Unrecognized {} '{}'. Allowed: {}".format(field_name, value, allowed)
        ) from None


def _check_threshold(value: Any, field_name: str) -> None:
    # bool is an int subclass; True must not pass as 1.
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfigError(
            "{} must be an integer, got {!r}".format(field_name, value)
        )
    if value <= 0:
        raise InvalidConfigError(
            "{} must be at least 1, got {}".format(field_name, value)
        )


def validate_config(config: FormattingConfig) -> FormattingConfig:
    """Check a FormattingConfig and return it with enums coerced.

    WHY: Options arrive from forms and JSON as loose values. They must be
    rejected up front so that no partial result is ever produced.

    HOW: Each enum field is coerced from its wire value (so
    ``caption_mode="char_limit"`` is accepted) and the threshold of the
    active caption mode must be a positive int.

    RULES:
    - The inactive threshold is not inspected at all.
    - strip_punctuation must be a real bool.
    - Returns a (possibly new) config; the argument is never mutated.

    Raises:
        InvalidConfigError: On any unusable value.
    """
    output_format = _coerce_enum(OutputFormat, config.output_format, "output format")
    caption_mode = _coerce_enum(CaptionMode, config.caption_mode, "caption mode")
    case_transform = _coerce_enum(CaseTransform, config.case_transform, "case transform")

    if caption_mode is CaptionMode.CHAR_COUNT:
        _check_threshold(config.max_chars_per_caption, "max_chars_per_caption")
    else:
        _check_threshold(config.max_words_per_caption, "max_words_per_caption")

    if not isinstance(config.strip_punctuation, bool):
        raise InvalidConfigError(
            "strip_punctuation must be a boolean, got {!r}".format(config.strip_punctuation)
        )

    return dataclasses.replace(
        config,
        output_format=output_format,
        caption_mode=caption_mode,
        case_transform=case_transform,
    )


def validate_transcript(transcript: Transcript) -> None:
    """Check word timing invariants.

    RULES:
    - Timestamps must be finite and non-negative.
    - start <= end for every word.
    - Starts never decrease across the sequence (equal starts are fine).
    - The first violation is reported with its index; nothing is repaired.

    Raises:
        MalformedTranscriptError: On the first offending word.
    """
    prev_start = None
    for i, word in enumerate(transcript.words):
        if not (math.isfinite(word.start) and math.isfinite(word.end)):
            raise MalformedTranscriptError(i, "timestamps must be finite numbers")
        if word.start < 0 or word.end < 0:
            raise MalformedTranscriptError(
                i, "negative timestamp ({} -> {})".format(word.start, word.end)
            )
        if word.start > word.end:
            raise MalformedTranscriptError(
                i, "start {} is after end {}".format(word.start, word.end)
            )
        if prev_start is not None and word.start < prev_start:
            raise MalformedTranscriptError(
                i, "start {} is before previous start {}".format(word.start, prev_start)
            )
        prev_start = word.start


# =============================================================================
# Plain Text
# =============================================================================


def join_words(words: Sequence[Word]) -> str:
    """Join word texts with single spaces."""
    return " ".join(w.text for w in words)


def assemble_plain_text(words: Sequence[Word], config: FormattingConfig) -> str:
    """Join all words and normalize the result once, as a whole.

    Normalizing the full string (not word by word) lets punctuation and case
    handling see complete sentences.
    """
    if not words:
        return ""
    return normalize_text(join_words(words), config)


# =============================================================================
# Segmentation
# =============================================================================


def group_by_word_count(words: Sequence[Word], max_words: int) -> List[List[Word]]:
    """Split words into consecutive chunks of exactly max_words.

    The last chunk holds the remainder (1..max_words words). max_words=1
    gives one caption per word.
    """
    return [list(words[i:i + max_words]) for i in range(0, len(words), max_words)]


def group_by_char_count(words: Sequence[Word], max_chars: int) -> List[List[Word]]:
    """Greedily fill captions up to max_chars of space-joined text.

    WHY: Character-limited captions keep line length readable without
    fixing the number of words.

    HOW: Walk words left to right, tracking the joined length of the open
    group. A word joins the group when the length with it (plus one space)
    is still within max_chars; otherwise the group is closed and the word
    opens the next one.

    RULES:
    - A word that lands exactly on max_chars stays in the current group.
    - Words are never split. A word longer than max_chars forms a group
      on its own.
    - Lengths are measured before normalization.
    """
    groups: List[List[Word]] = []
    current: List[Word] = []
    current_len = 0

    for word in words:
        if not current:
            current = [word]
            current_len = len(word.text)
            continue

        candidate_len = current_len + 1 + len(word.text)
        if candidate_len <= max_chars:
            current.append(word)
            current_len = candidate_len
        else:
            groups.append(current)
            current = [word]
            current_len = len(word.text)

    if current:
        groups.append(current)

    return groups


def seconds_to_ms(seconds: float) -> int:
    """Round float seconds to integer milliseconds."""
    return int(round(seconds * 1000))


def resolve_timings(spans: Sequence[Tuple[int, int]]) -> List[Tuple[int, int]]:
    """Turn raw (start_ms, end_ms) spans into strictly ordered, non-overlapping ones.

    WHY: Recognizer word timings are valid when starts are merely
    non-decreasing, but a caption's last word can end after the next
    caption's first word starts, and zero-length words produce zero-length
    captions. Captions must have start < end and must not overlap.

    HOW: One left-to-right pass:
      - start is moved up to the previous caption's end if it is earlier;
      - end is extended to start + MIN_CAPTION_MS if it is not after start;
      - end is clamped to the next raw start if it overlaps it, but never
        below start + MIN_CAPTION_MS.

    RULES:
    - Spans that already satisfy the invariants come back unchanged.
    - Output length equals input length.
    """
    resolved: List[Tuple[int, int]] = []
    prev_end = 0

    for i, (start, end) in enumerate(spans):
        start = max(start, prev_end)
        end = max(end, start + MIN_CAPTION_MS)

        if i + 1 < len(spans):
            next_start = spans[i + 1][0]
            if end > next_start:
                end = max(next_start, start + MIN_CAPTION_MS)

        resolved.append((start, end))
        prev_end = end

    return resolved


def fold_line_breaks(text: str) -> str:
    """Replace each run of line breaks (and the spaces around it) with one space.

    A blank line ends an SRT block, so caption text must stay on one line
    no matter what the recognizer put inside a token.
    """
    return _LINE_BREAK_RUN_RE.sub(" ", text)


def build_captions(groups: Sequence[Sequence[Word]], config: FormattingConfig) -> List[Caption]:
    """Build numbered Captions from word groups.

    Each caption spans its first word's start to its last word's end, and
    its text is the group's joined words normalized as one unit, with any
    line breaks folded into spaces.
    """
    raw_spans = [
        (seconds_to_ms(group[0].start), seconds_to_ms(group[-1].end))
        for group in groups
    ]
    spans = resolve_timings(raw_spans)

    return [
        Caption(
            index=index,
            start_ms=start_ms,
            end_ms=end_ms,
            text=fold_line_breaks(normalize_text(join_words(group), config)),
            words=tuple(group),
        )
        for index, (group, (start_ms, end_ms)) in enumerate(zip(groups, spans), 1)
    ]


def segment_words(words: Sequence[Word], config: FormattingConfig) -> List[Caption]:
    """Partition words into captions using the config's caption mode.

    Args:
        words: Time-ordered words (already validated).
        config: Validated formatting options.

    Returns:
        Ordered captions; empty when there are no words.
    """
    if not words:
        return []

    if config.caption_mode is CaptionMode.CHAR_COUNT:
        groups = group_by_char_count(words, config.max_chars_per_caption)
    else:
        groups = group_by_word_count(words, config.max_words_per_caption)

    return build_captions(groups, config)


# =============================================================================
# SRT Output
# =============================================================================

_TIMING_RE = re.compile(
    r"^(\d+):(\d{2}):(\d{2})[,.](\d{3})\s*-->\s*(\d+):(\d{2}):(\d{2})[,.](\d{3})"
)


def ms_to_srt_time(ms: int) -> str:
    """Format milliseconds as an SRT timestamp: HH:MM:SS,mmm.

    Hours are not wrapped at 24 and grow past two digits when needed.
    """
    hours, rest = divmod(ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    secs, millis = divmod(rest, 1000)
    return "{:02d}:{:02d}:{:02d},{:03d}".format(hours, minutes, secs, millis)


def srt_time_to_ms(hours: str, minutes: str, seconds: str, millis: str) -> int:
    return ((int(hours) * 60 + int(minutes)) * 60 + int(seconds)) * 1000 + int(millis)


def generate_srt(captions: Sequence[Caption]) -> str:
    """Render captions as an SRT document.

    RULES:
    - One block per caption: index, "start --> end", text, blank line.
    - Indices are written as stored on the captions (1-based from the
      segmenter).
    - No captions gives an empty string.
    - The document ends with the final block's blank separator line and
      nothing after it.
    """
    blocks = []
    for caption in captions:
        blocks.append("{}\n{} --> {}\n{}\n\n".format(
            caption.index,
            ms_to_srt_time(caption.start_ms),
            ms_to_srt_time(caption.end_ms),
            caption.text,
        ))
    return "".join(blocks)


def parse_srt(content: str) -> List[Caption]:
    """Read an SRT document back into captions.

    WHY: The round-trip law (generate then parse gives equal captions) needs
    a reader, and offline tools need to load existing subtitle files.

    HOW: Line-based scan. Blank lines between blocks are skipped; each block
    is an index line, a timing line, then text lines up to the next blank
    line. A block whose text is empty is followed directly by its separator.

    RULES:
    - Accepts \\r\\n and \\r line endings and a leading BOM.
    - Accepts "." as the millisecond separator as well as ",".
    - Multi-line caption text is joined with "\\n".

    Raises:
        SubtitleParseError: On a missing/invalid index or timing line.
    """
    text = content.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    lines = text.split("\n")
    captions: List[Caption] = []
    i = 0

    while i < len(lines):
        if not lines[i].strip():
            i += 1
            continue

        index_line = lines[i].strip()
        if not index_line.isdigit():
            raise SubtitleParseError(i + 1, "expected caption index, got {!r}".format(index_line))
        i += 1

        if i >= len(lines):
            raise SubtitleParseError(i, "caption {} has no timing line".format(index_line))
        match = _TIMING_RE.match(lines[i].strip())
        if not match:
            raise SubtitleParseError(i + 1, "invalid timing line {!r}".format(lines[i]))
        groups = match.groups()
        start_ms = srt_time_to_ms(*groups[:4])
        end_ms = srt_time_to_ms(*groups[4:])
        i += 1

        text_lines = []
        while i < len(lines) and lines[i] != "":
            text_lines.append(lines[i])
            i += 1
        i += 1  # separator

        captions.append(Caption(
            index=int(index_line),
            start_ms=start_ms,
            end_ms=end_ms,
            text="\n".join(text_lines),
        ))

    return captions


# =============================================================================
# Input Parsing
# =============================================================================


def _word_from_dict(item: dict) -> Optional[Word]:
    text = item.get("word", item.get("text", item.get("t", "")))
    if not isinstance(text, str) or not text.strip():
        return None
    start = float(item.get("start", item.get("s", 0)))
    end = float(item.get("end", item.get("e", start)))
    return Word(text=text.strip(), start=start, end=end)


def parse_input(data: Any) -> Transcript:
    """Parse word-timestamp JSON into a Transcript.

    WHY: Word timestamps come from different recognizers with different
    schemas. The offline CLI accepts the common shapes.

    HOW: Accepts three input shapes:
      1. A flat list of word objects.
      2. A list of segments with nested 'words' arrays.
      3. An object with 'words' and/or 'segments' keys (Whisper's
         verbose_json), optionally with a 'language'.
    Field names are flexible: word/text/t for text, start/s for start,
    end/e for end.

    RULES:
    - Word text is stripped; empty words are dropped.
    - Language defaults to AUTO_LANGUAGE.
    - Timing is not validated here; the engine does that.
    """
    language = AUTO_LANGUAGE
    items: List[Any] = []

    if isinstance(data, dict):
        language = data.get("language") or AUTO_LANGUAGE
        if isinstance(data.get("words"), list):
            items = data["words"]
        elif isinstance(data.get("segments"), list):
            items = data["segments"]
    elif isinstance(data, list):
        items = data

    words: List[Word] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        if isinstance(item.get("words"), list):
            for nested in item["words"]:
                if isinstance(nested, dict):
                    word = _word_from_dict(nested)
                    if word is not None:
                        words.append(word)
        else:
            word = _word_from_dict(item)
            if word is not None:
                words.append(word)

    return Transcript(words=tuple(words), language=language)


def try_parse_json(raw: str) -> Any:
    """Try to parse JSON, attempting to fix incomplete input.

    WHY: Input files may be snippets cut from larger recognizer dumps with
    missing closing brackets.

    HOW: Try json.loads() directly; on failure strip a trailing comma and
    retry with a few closing-bracket suffixes.

    Raises:
        ValueError: If JSON cannot be parsed even with attempted fixes.
    """
    raw = raw.replace("\r\n", "\n").replace("\r", "\n").strip()

    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        pass

    raw_clean = re.sub(r",\s*$", "", raw)
    for suffix in ("", "]", "}]", "}]}", "]}", "]}}", "]}]"):
        try:
            return json.loads(raw_clean + suffix)
        except json.JSONDecodeError:
            continue

    raise ValueError("Could not parse JSON input (even with attempted fixes)")
