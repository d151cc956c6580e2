"""Recognizer API package: async HTTP interface to OpenAI Whisper.

WHY: The service needs a word-timestamp transcript for every uploaded
file. This package encapsulates all recognizer communication behind an
async client class implementing the Recognizer interface.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. WhisperClient sends the
upload and parses the verbose_json response into typed dataclasses defined
in models.py, then into the caption engine's Transcript.

RULES:
- All HTTP calls go through WhisperClient (no direct httpx usage elsewhere)
- Authentication is via Bearer token from config
- Upstream failures raise RecognizerError, never caption engine errors
"""

from whisper_transcriber.api.base import Recognizer, RecognizerError
from whisper_transcriber.api.client import (
    RecognizerResponseError,
    WhisperAPIError,
    WhisperClient,
)
from whisper_transcriber.api.models import WhisperTranscription, WhisperWord

__all__ = [
    "Recognizer",
    "RecognizerError",
    "RecognizerResponseError",
    "WhisperAPIError",
    "WhisperClient",
    "WhisperTranscription",
    "WhisperWord",
]
