"""Whisper API response dataclasses.

WHY: The OpenAI transcription endpoint returns verbose_json objects with a
detected language and a flat word array. Typed dataclasses make these
structures explicit and keep the conversion to the engine's Transcript in
one place.

HOW: Each dataclass maps 1:1 to a JSON object. Factory methods (from_dict)
parse raw API responses; to_transcript() converts to the engine's types.

RULES:
- WhisperWord fields match the verbose_json "words" entries exactly
- start/end are float seconds
- language is Whisper's lowercase English name ("german"), not a code
- Words with empty text after stripping are dropped during conversion
"""

from __future__ import annotations

from dataclasses import dataclass, field

from caption_engine.models import AUTO_LANGUAGE, Transcript, Word
from whisper_transcriber.config import normalize_language


@dataclass
class WhisperWord:
    """A single word from a verbose_json response with word granularity."""

    word: str
    start: float
    end: float

    @classmethod
    def from_dict(cls, data: dict) -> WhisperWord:
        if not isinstance(data, dict):
            raise TypeError(f"word entry must be an object, got {type(data).__name__}")
        if not isinstance(data["word"], str):
            raise TypeError(f"word text must be a string, got {type(data['word']).__name__}")
        return cls(
            word=data["word"],
            start=float(data["start"]),
            end=float(data["end"]),
        )


@dataclass
class WhisperTranscription:
    """Full verbose_json response from POST /audio/transcriptions.

    RULES:
    - text is the recognizer's own plaintext (not used for formatting)
    - words is empty when the audio has no speech
    - duration is the audio length in seconds, when reported
    """

    text: str
    language: str | None = None
    duration: float | None = None
    words: list[WhisperWord] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> WhisperTranscription:
        """Parse a WhisperTranscription from a raw API response dict.

        RULES:
        - text is required
        - words defaults to [] when absent
        - each word dict is parsed via WhisperWord.from_dict
        - A non-object body or a wrongly typed word, words or language raises TypeError
        """
        if not isinstance(data, dict):
            raise TypeError(f"response must be an object, got {type(data).__name__}")
        language = data.get("language")
        if language is not None and not isinstance(language, str):
            raise TypeError(f"language must be a string, got {type(language).__name__}")
        words = data.get("words") or []
        if not isinstance(words, list):
            raise TypeError(f"words must be a list, got {type(words).__name__}")
        duration = data.get("duration")
        return cls(
            text=data["text"],
            language=language,
            duration=float(duration) if duration is not None else None,
            words=[WhisperWord.from_dict(w) for w in words],
        )

    def to_transcript(self, requested_language: str = AUTO_LANGUAGE) -> Transcript:
        """Convert to the engine's Transcript.

        RULES:
        - A forced language (anything but "auto") wins over the detected one
        - Otherwise the detected language is mapped to an ISO 639-1 code
        - Word text is stripped of Whisper's leading spaces
        """
        if requested_language and requested_language != AUTO_LANGUAGE:
            language = requested_language
        else:
            language = normalize_language(self.language)

        words = tuple(
            Word(text=w.word.strip(), start=w.start, end=w.end)
            for w in self.words
            if w.word.strip()
        )
        return Transcript(words=words, language=language)
