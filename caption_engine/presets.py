"""Named option presets for the caption engine.

WHY: The upload form ships two caption styles, word-for-word captions
and character-limited captions, each with its own default threshold.
Naming them lets the CLI and the HTTP layer start from the same defaults
without repeating the numbers.

HOW: Each preset is a plain dict of FormattingConfig field values.
config_from_preset() copies the preset, applies overrides, and builds a
FormattingConfig from it.

RULES:
- Presets are constants; never mutate them at runtime.
- Preset keys match CaptionMode values ("word_level", "char_limit").
- Only the active mode's threshold matters; the other one is carried
  along untouched.
"""

from __future__ import annotations

import copy
from typing import Any, Dict

from .errors import InvalidConfigError
from .models import CaptionMode, CaseTransform, FormattingConfig, OutputFormat

# One word per caption, the form's default SRT mode.
PRESET_WORD_LEVEL: Dict[str, Any] = {
    "output_format": OutputFormat.SUBTITLE,
    "caption_mode": CaptionMode.WORD_COUNT,
    "max_words_per_caption": 1,
    "max_chars_per_caption": 50,
    "case_transform": CaseTransform.NONE,
    "strip_punctuation": False,
}

# Greedy line filling up to 50 characters.
PRESET_CHAR_LIMIT: Dict[str, Any] = {
    "output_format": OutputFormat.SUBTITLE,
    "caption_mode": CaptionMode.CHAR_COUNT,
    "max_words_per_caption": 1,
    "max_chars_per_caption": 50,
    "case_transform": CaseTransform.NONE,
    "strip_punctuation": False,
}

PRESETS: Dict[str, Dict[str, Any]] = {
    CaptionMode.WORD_COUNT.value: PRESET_WORD_LEVEL,
    CaptionMode.CHAR_COUNT.value: PRESET_CHAR_LIMIT,
}


def config_from_preset(name: str, **overrides: Any) -> FormattingConfig:
    """Build a FormattingConfig from a named preset.

    Args:
        name: Preset name ("word_level" or "char_limit").
        **overrides: FormattingConfig field values replacing the preset's.
            None values are ignored so callers can pass optional CLI flags
            straight through.

    Returns:
        A new FormattingConfig. It is not validated here; the engine
        validates every config it is given.

    Raises:
        InvalidConfigError: If the preset name or an override key is unknown.
    """
    if name not in PRESETS:
        raise InvalidConfigError(
            "Unknown preset '{}'. Available: {}".format(name, ", ".join(PRESETS))
        )
    values = copy.deepcopy(PRESETS[name])
    for key, value in overrides.items():
        if key not in values:
            raise InvalidConfigError("Unknown formatting option '{}'".format(key))
        if value is not None:
            values[key] = value
    return FormattingConfig(**values)
