"""Abstract recognizer interface and upstream error kinds.

WHY: The formatting engine only needs a Transcript; it does not care which
speech-to-text service produced it. The server and CLI depend on this
interface so the Whisper client can be swapped or faked in tests.

HOW: Recognizer is an ABC with one async method. RecognizerError is the
root of every upstream failure, kept separate from the caption engine's
error kinds so callers can tell "the recognizer failed" from "your options
were invalid".

RULES:
- Implementations return a Transcript whose words are ordered by start
- language="auto" lets the recognizer detect the language
- All upstream failures raise RecognizerError or a subclass
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from caption_engine.models import AUTO_LANGUAGE, Transcript


class RecognizerError(Exception):
    """Raised when the speech recognizer cannot produce a transcript."""


class Recognizer(ABC):
    """Abstract base for speech-to-text backends.

    To add a new backend:
    1. Subclass Recognizer
    2. Implement transcribe()
    3. Return it from whisper_transcriber.server.app.get_recognizer
       (or pass it to the pipeline directly)
    """

    @abstractmethod
    async def transcribe(self, file_path: Path, language: str = AUTO_LANGUAGE) -> Transcript:
        """Transcribe a media file into timed words.

        Args:
            file_path: Path to the audio/video file.
            language: ISO 639-1 code, or "auto" to let the backend detect it.

        Returns:
            Transcript with word timestamps and the effective language.

        Raises:
            RecognizerError: On any upstream failure.
        """
