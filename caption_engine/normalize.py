"""Text normalization: punctuation stripping and case transforms.

WHY: The same caller-chosen transforms must apply identically to a whole
plain-text transcript and to each caption's text. Keeping them in one
function guarantees that.

HOW: Two steps in fixed order. Punctuation stripping keeps only letters,
combining marks, digits and whitespace (by Unicode category, so accented
and non-Latin scripts survive), then collapses whitespace runs and trims.
The case transform uses str.lower()/str.upper(), which do not depend on
the process locale.

RULES:
- Idempotent: normalize_text(normalize_text(x, c), c) == normalize_text(x, c).
- Never raises; empty input gives empty output.
- Whitespace is only collapsed when punctuation stripping is on.
"""

from __future__ import annotations

import re
import unicodedata

from .models import CaseTransform, FormattingConfig

_WHITESPACE_RUN_RE = re.compile(r"\s+")

# Unicode major categories that survive punctuation stripping:
# L = letters, M = combining marks (Indic vowel signs, decomposed accents),
# N = digits and other numerals.
_KEPT_CATEGORIES = frozenset({"L", "M", "N"})


def _is_kept(ch: str) -> bool:
    return ch.isspace() or unicodedata.category(ch)[0] in _KEPT_CATEGORIES


def strip_punctuation(text: str) -> str:
    """Remove every non-letter, non-digit, non-whitespace character.

    Symbols (``$``, ``+``, emoji) count as punctuation here. The removal
    can leave double spaces where a standalone dash was, so whitespace runs
    are collapsed to one space and the result is trimmed.
    """
    kept = "".join(ch for ch in text if _is_kept(ch))
    return _WHITESPACE_RUN_RE.sub(" ", kept).strip()


def apply_case(text: str, case_transform: CaseTransform) -> str:
    """Apply a case transform; CaseTransform.NONE returns text unchanged."""
    if case_transform is CaseTransform.LOWERCASE:
        return text.lower()
    if case_transform is CaseTransform.UPPERCASE:
        return text.upper()
    return text


def normalize_text(text: str, config: FormattingConfig) -> str:
    """Run the normalization pipeline on one string.

    Args:
        text: Raw text, possibly mixed case with punctuation.
        config: Formatting options; only strip_punctuation and
            case_transform are read.

    Returns:
        The transformed string.
    """
    if not text:
        return ""
    if config.strip_punctuation:
        text = strip_punctuation(text)
    return apply_case(text, config.case_transform)
