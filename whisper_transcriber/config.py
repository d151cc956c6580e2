"""Configuration constants, language options, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. Language options, supported media formats, upload
limits, and API defaults are plain data structures, not buried in logic.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level dicts, sets, and strings. The load_api_key() function
provides a clear error when the key is missing.

RULES:
- SUPPORTED_LANGUAGES lists the languages offered to callers ("auto" first)
- WHISPER_LANGUAGE_NAMES maps Whisper's reported language names to ISO 639-1
- SUPPORTED_MEDIA_FORMATS lists accepted audio/video file extensions
- API key is loaded from .env via python-dotenv, never hardcoded
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

from caption_engine.models import AUTO_LANGUAGE

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Languages
# ---------------------------------------------------------------------------

SUPPORTED_LANGUAGES: dict[str, str] = {
    AUTO_LANGUAGE: "Automatic detection",
    "de": "German",
    "en": "English",
    "fr": "French",
    "es": "Spanish",
    "it": "Italian",
}
"""Language codes selectable for transcription, with display names."""

# Whisper's verbose_json reports the detected language as a lowercase
# English name rather than a code.
WHISPER_LANGUAGE_NAMES: dict[str, str] = {
    "german": "de",
    "english": "en",
    "french": "fr",
    "spanish": "es",
    "italian": "it",
    "dutch": "nl",
    "portuguese": "pt",
    "polish": "pl",
    "swedish": "sv",
    "danish": "da",
    "norwegian": "no",
    "finnish": "fi",
    "russian": "ru",
    "turkish": "tr",
    "japanese": "ja",
    "korean": "ko",
    "chinese": "zh",
    "arabic": "ar",
    "hindi": "hi",
}


def normalize_language(reported: str | None) -> str:
    """Map a recognizer-reported language to an ISO 639-1 code.

    WHY: Whisper answers with "german", callers and the result tag use "de".

    RULES:
    - Known names map through WHISPER_LANGUAGE_NAMES
    - Values that already look like a code are lowercased and kept
    - Empty/None returns AUTO_LANGUAGE
    - Unknown names are returned lowercased, unchanged
    """
    if not reported:
        return AUTO_LANGUAGE
    value = reported.strip().lower()
    return WHISPER_LANGUAGE_NAMES.get(value, value)


# ---------------------------------------------------------------------------
# Supported audio/video file extensions
# ---------------------------------------------------------------------------

AUDIO_FORMATS: set[str] = {".mp3", ".wav", ".m4a", ".flac", ".ogg", ".aac"}
VIDEO_FORMATS: set[str] = {".mp4", ".avi", ".mov", ".mkv", ".wmv", ".flv", ".webm"}

SUPPORTED_MEDIA_FORMATS: set[str] = AUDIO_FORMATS | VIDEO_FORMATS
"""Audio/video file extensions accepted for upload (lowercase, with dot)."""

MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(25 * 1024 * 1024)))
"""Upload size limit; Whisper's API rejects files above 25 MB."""

# ---------------------------------------------------------------------------
# Formatting defaults (mirror the upload form's initial values)
# ---------------------------------------------------------------------------

DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", AUTO_LANGUAGE)
DEFAULT_OUTPUT_FORMAT = os.getenv("DEFAULT_OUTPUT_FORMAT", "srt")
DEFAULT_CAPTION_MODE = os.getenv("DEFAULT_CAPTION_MODE", "word_level")
DEFAULT_MAX_WORDS = int(os.getenv("DEFAULT_MAX_WORDS", "1"))
DEFAULT_MAX_CHARS = int(os.getenv("DEFAULT_MAX_CHARS", "50"))

# ---------------------------------------------------------------------------
# API configuration defaults
# ---------------------------------------------------------------------------

OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
WHISPER_MODEL = os.getenv("WHISPER_MODEL", "whisper-1")
WHISPER_TIMEOUT_S = float(os.getenv("WHISPER_TIMEOUT_S", "600"))


def load_api_key() -> str:
    """Load the OpenAI API key from the environment.

    WHY: The API key is required for every Whisper call. Loading it
    from the environment (via .env) keeps it out of source code.

    RULES:
    - Raises ValueError if the key is missing or empty
    - Never returns a default/placeholder value
    """
    key = os.getenv("OPENAI_API_KEY", "").strip()
    if not key:
        raise ValueError(
            "OpenAI API key not configured. "
            "Add OPENAI_API_KEY to the .env file in the app folder."
        )
    return key
