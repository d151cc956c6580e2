"""Async HTTP client for the OpenAI Whisper transcription API.

WHY: The service needs word-level timestamps for an uploaded media file.
This module encapsulates the HTTP workflow behind a single client class so
callers (server, CLI, tests) don't need to know request details.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. WhisperClient is an
async context manager. Enter it to get an authenticated client, exit to
close the connection pool. transcribe() uploads the file as multipart form
data with response_format=verbose_json and word timestamp granularity, then
converts the response into the caption engine's Transcript.

RULES:
- Always use the async context manager (async with WhisperClient() as client:)
- Default model is whisper-1 (WHISPER_MODEL in config)
- language "auto" omits the language field so Whisper detects it
- Non-2xx responses raise WhisperAPIError; network failures and
  unparseable bodies raise RecognizerError subclasses too
- Status callback (on_status) is optional; when provided, called with status strings
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import httpx

from caption_engine.models import AUTO_LANGUAGE, Transcript
from whisper_transcriber.api.base import Recognizer, RecognizerError
from whisper_transcriber.api.models import WhisperTranscription
from whisper_transcriber.config import (
    OPENAI_BASE_URL,
    WHISPER_MODEL,
    WHISPER_TIMEOUT_S,
    load_api_key,
)

logger = logging.getLogger(__name__)


class WhisperAPIError(RecognizerError):
    """Raised when the Whisper API returns an error response.

    RULES:
    - Always include status_code and message
    - message is the API's error message when present, else the body text
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Whisper API error {status_code}: {message}")


class RecognizerResponseError(RecognizerError):
    """Raised when a 2xx response body is not a usable transcription."""


def _error_message(resp: httpx.Response) -> str:
    """Extract OpenAI's {"error": {"message": ...}} text, falling back to the body."""
    try:
        data = resp.json()
    except ValueError:
        return resp.text
    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        return str(data["error"].get("message") or resp.text)
    return resp.text


class WhisperClient(Recognizer):
    """Async client for the OpenAI audio transcription endpoint.

    RULES:
    - Use as: async with WhisperClient() as client: ...
    - api_key defaults to load_api_key() from .env
    - base_url defaults to OPENAI_BASE_URL from config
    - model defaults to WHISPER_MODEL from config
    - transport is for tests (httpx.MockTransport)
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key or load_api_key()
        self._base_url = (base_url or OPENAI_BASE_URL).rstrip("/")
        self._model = model or WHISPER_MODEL
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> WhisperClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": f"Bearer {self._api_key}"},
            timeout=httpx.Timeout(WHISPER_TIMEOUT_S, connect=30.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "WhisperClient must be used as an async context manager: "
                "async with WhisperClient() as client: ..."
            )
        return self._client

    async def transcribe(
        self,
        file_path: Path,
        language: str = AUTO_LANGUAGE,
        on_status: Callable[[str], None] | None = None,
    ) -> Transcript:
        """Upload a media file and return its word-timestamped Transcript.

        WHY: Whisper's transcription endpoint is synchronous: one POST
        returns the finished transcript, so there is no polling step.

        HOW: Sends a multipart/form-data POST with the file and the
        verbose_json + word-granularity options, parses the response via
        WhisperTranscription, and converts it to a Transcript.

        RULES:
        - file_path must point to an existing file
        - language is sent only when it is not "auto"
        - Raises WhisperAPIError on non-2xx responses
        - Raises RecognizerError on network errors or malformed JSON

        Args:
            file_path: Path to the audio/video file to transcribe.
            language: ISO 639-1 code or "auto".
            on_status: Optional callback for status updates.

        Returns:
            The Transcript with word timings and the effective language.
        """
        client = self._ensure_client()
        file_path = Path(file_path)
        if on_status:
            on_status("Uploading {} to Whisper...".format(file_path.name))

        data: dict = {
            "model": self._model,
            "response_format": "verbose_json",
            "timestamp_granularities[]": "word",
        }
        if language and language != AUTO_LANGUAGE:
            data["language"] = language

        try:
            with open(file_path, "rb") as f:
                resp = await client.post(
                    "/audio/transcriptions",
                    data=data,
                    files={"file": (file_path.name, f)},
                )
        except httpx.HTTPError as exc:
            raise RecognizerError(f"Whisper request failed: {exc}") from exc

        if resp.status_code != 200:
            raise WhisperAPIError(resp.status_code, _error_message(resp))

        try:
            transcription = WhisperTranscription.from_dict(resp.json())
            transcript = transcription.to_transcript(language)
        except (ValueError, KeyError, TypeError) as exc:
            raise RecognizerResponseError(
                f"Unexpected Whisper response: {exc}"
            ) from exc

        logger.info(
            "Whisper returned %d words (language: %s) for %s",
            len(transcript.words), transcript.language, file_path.name,
        )
        if on_status:
            on_status("Transcription complete: {} words.".format(len(transcript.words)))
        return transcript
