"""Tests for the FastAPI transcription API.

WHY: The upload page depends on the exact form field names and on the
{success, result, language, format} response. Error mapping (400 for bad
options or files, 413 for oversize uploads, 502 for recognizer failures)
decides what the page shows the user.

HOW: FastAPI TestClient drives the app in-process. The get_recognizer
dependency is overridden with a fake Recognizer that returns a canned
Transcript (or raises), so Whisper is never called.

RULES:
- All tests use the FastAPI TestClient (synchronous)
- Whisper is never called
- Dependency overrides are cleared after every test
"""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from caption_engine.models import Transcript, Word
from whisper_transcriber.api.base import Recognizer, RecognizerError
from whisper_transcriber.server import app as app_module
from whisper_transcriber.server.app import app, get_recognizer

from conftest import HELLO_WORLD_WORDS


class FakeRecognizer(Recognizer):
    """Recognizer that records its calls and returns a fixed transcript."""

    def __init__(self, transcript=None, error=None):
        self.transcript = transcript or Transcript(words=HELLO_WORLD_WORDS, language="en")
        self.error = error
        self.calls = []

    async def transcribe(self, file_path: Path, language: str = "auto") -> Transcript:
        self.calls.append((file_path.name, language, file_path.read_bytes()))
        if self.error is not None:
            raise self.error
        return self.transcript


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def recognizer():
    return FakeRecognizer()


@pytest.fixture
def client(recognizer):
    app.dependency_overrides[get_recognizer] = lambda: recognizer
    yield TestClient(app)
    app.dependency_overrides.clear()


def _make_upload(name: str = "clip.mp3", content: bytes = b"fake audio data"):
    return [("file", (name, io.BytesIO(content), "audio/mpeg"))]


# ---------------------------------------------------------------------------
# POST /api/transcribe
# ---------------------------------------------------------------------------


class TestTranscribe:

    def test_default_options_give_word_level_srt(self, client, recognizer):
        resp = client.post("/api/transcribe", files=_make_upload())
        assert resp.status_code == 200
        body = resp.json()
        assert body == {
            "success": True,
            "result": (
                "1\n00:00:00,000 --> 00:00:00,500\nHello,\n\n"
                "2\n00:00:00,500 --> 00:00:01,200\nworld.\n\n"
            ),
            "language": "en",
            "format": "srt",
        }
        assert recognizer.calls == [("clip.mp3", "auto", b"fake audio data")]

    def test_form_options(self, client):
        resp = client.post(
            "/api/transcribe",
            files=_make_upload(),
            data={
                "language": "en",
                "outputFormat": "srt",
                "srtMode": "word_level",
                "maxWords": "1",
                "maxChars": "50",
                "allLowercase": "true",
                "allUppercase": "false",
                "removeAllPunctuation": "true",
            },
        )
        assert resp.status_code == 200
        assert resp.json()["result"] == (
            "1\n00:00:00,000 --> 00:00:00,500\nhello\n\n"
            "2\n00:00:00,500 --> 00:00:01,200\nworld\n\n"
        )

    def test_plain_text(self, client):
        resp = client.post("/api/transcribe", files=_make_upload(),
                           data={"outputFormat": "txt"})
        assert resp.status_code == 200
        assert resp.json()["result"] == "Hello, world."
        assert resp.json()["format"] == "txt"

    def test_char_limit_mode(self, client):
        resp = client.post("/api/transcribe", files=_make_upload(),
                           data={"srtMode": "char_limit", "maxChars": "50", "maxWords": ""})
        assert resp.status_code == 200
        assert resp.json()["result"] == "1\n00:00:00,000 --> 00:00:01,200\nHello, world.\n\n"

    def test_language_forwarded(self, client, recognizer):
        client.post("/api/transcribe", files=_make_upload(), data={"language": "DE"})
        assert recognizer.calls[0][1] == "de"

    def test_empty_transcript(self, client, recognizer):
        recognizer.transcript = Transcript(words=(), language="fr")
        resp = client.post("/api/transcribe", files=_make_upload())
        assert resp.status_code == 200
        assert resp.json()["result"] == ""
        assert resp.json()["language"] == "fr"

    def test_video_upload_accepted(self, client):
        resp = client.post("/api/transcribe", files=_make_upload("talk.MKV"))
        assert resp.status_code == 200


class TestTranscribeErrors:

    def test_unsupported_file_type(self, client, recognizer):
        resp = client.post("/api/transcribe", files=_make_upload("notes.txt"))
        assert resp.status_code == 400
        assert "Unsupported file type" in resp.json()["detail"]
        assert recognizer.calls == []

    def test_zero_max_words(self, client, recognizer):
        resp = client.post("/api/transcribe", files=_make_upload(), data={"maxWords": "0"})
        assert resp.status_code == 400
        assert "max_words_per_caption" in resp.json()["detail"]
        assert recognizer.calls == []

    def test_non_numeric_max_chars(self, client, recognizer):
        resp = client.post("/api/transcribe", files=_make_upload(),
                           data={"srtMode": "char_limit", "maxChars": "wide"})
        assert resp.status_code == 400
        assert recognizer.calls == []

    def test_both_case_flags(self, client, recognizer):
        resp = client.post("/api/transcribe", files=_make_upload(),
                           data={"allLowercase": "true", "allUppercase": "true"})
        assert resp.status_code == 400
        assert recognizer.calls == []

    def test_unknown_output_format(self, client):
        resp = client.post("/api/transcribe", files=_make_upload(),
                           data={"outputFormat": "vtt"})
        assert resp.status_code == 400

    def test_invalid_language(self, client, recognizer):
        resp = client.post("/api/transcribe", files=_make_upload(),
                           data={"language": "english please"})
        assert resp.status_code == 400
        assert recognizer.calls == []

    def test_file_too_large(self, client, recognizer, monkeypatch):
        monkeypatch.setattr(app_module, "MAX_UPLOAD_BYTES", 10)
        resp = client.post("/api/transcribe", files=_make_upload(content=b"x" * 11))
        assert resp.status_code == 413
        assert recognizer.calls == []

    def test_recognizer_failure(self, client, recognizer):
        recognizer.error = RecognizerError("Whisper API error 500: overloaded")
        resp = client.post("/api/transcribe", files=_make_upload())
        assert resp.status_code == 502
        assert resp.json()["detail"] == "Transcription failed: Whisper API error 500: overloaded"

    def test_malformed_transcript(self, client, recognizer):
        recognizer.transcript = Transcript(words=[Word("a", 1.0, 0.5)], language="en")
        resp = client.post("/api/transcribe", files=_make_upload())
        assert resp.status_code == 502
        assert "word 0" in resp.json()["detail"]

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        app.dependency_overrides.clear()
        resp = TestClient(app).post("/api/transcribe", files=_make_upload())
        assert resp.status_code == 500
        assert "OPENAI_API_KEY" in resp.json()["detail"]

    @pytest.mark.parametrize("name,data", [
        ("clip.mp3", {"maxWords": "0"}),
        ("clip.mp3", {"language": "english please"}),
        ("notes.txt", {}),
    ])
    def test_bad_request_reported_before_api_key(self, monkeypatch, name, data):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        app.dependency_overrides.clear()
        resp = TestClient(app).post("/api/transcribe", files=_make_upload(name), data=data)
        assert resp.status_code == 400
        assert "OPENAI_API_KEY" not in resp.json()["detail"]


# ---------------------------------------------------------------------------
# POST /api/transcribe/file
# ---------------------------------------------------------------------------


class TestTranscribeFile:

    def test_srt_download(self, client):
        resp = client.post("/api/transcribe/file", files=_make_upload("interview.wav"))
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("application/x-subrip")
        assert resp.headers["content-disposition"] == (
            "attachment; filename=\"interview.srt\"; filename*=UTF-8''interview.srt"
        )
        assert resp.headers["content-language"] == "en"
        assert resp.text.startswith("1\n00:00:00,000 --> 00:00:00,500\nHello,\n")

    def test_txt_download(self, client):
        resp = client.post("/api/transcribe/file", files=_make_upload("interview.wav"),
                           data={"outputFormat": "txt", "allUppercase": "on"})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert resp.headers["content-disposition"] == (
            "attachment; filename=\"interview.txt\"; filename*=UTF-8''interview.txt"
        )
        assert resp.text == "HELLO, WORLD."

    def test_non_ascii_filename(self, client):
        resp = client.post("/api/transcribe/file", files=_make_upload("日本語.mp3"))
        assert resp.status_code == 200
        assert resp.headers["content-disposition"] == (
            "attachment; filename=\"transcription.srt\"; "
            "filename*=UTF-8''%E6%97%A5%E6%9C%AC%E8%AA%9E.srt"
        )

    def test_quotes_dropped_from_ascii_filename(self):
        assert app_module._content_disposition('say "hi" café', ".txt") == (
            "attachment; filename=\"say hi caf.txt\"; "
            "filename*=UTF-8''say%20%22hi%22%20caf%C3%A9.txt"
        )

    def test_errors_shared_with_json_endpoint(self, client):
        resp = client.post("/api/transcribe/file", files=_make_upload("a.doc"))
        assert resp.status_code == 400


# ---------------------------------------------------------------------------
# Metadata endpoints
# ---------------------------------------------------------------------------


class TestMetadata:

    def test_list_formats(self, client):
        resp = client.get("/api/formats")
        assert resp.status_code == 200
        assert resp.json() == [
            {"key": "srt", "name": "SRT Subtitles", "suffix": ".srt",
             "media_type": "application/x-subrip"},
            {"key": "txt", "name": "Plain Text", "suffix": ".txt",
             "media_type": "text/plain"},
        ]

    def test_list_languages(self, client):
        resp = client.get("/api/languages")
        codes = [lang["code"] for lang in resp.json()["languages"]]
        assert codes == ["auto", "de", "en", "fr", "es", "it"]

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "version": "0.1.0 (engine 0.1.0)"}


class TestOpenAPISchema:

    def test_schema_generates(self, client):
        resp = client.get("/openapi.json")
        assert resp.status_code == 200
        schema = resp.json()
        assert schema["info"]["title"] == "Whisper Transcription API"
        for path in ("/api/transcribe", "/api/transcribe/file", "/api/formats",
                     "/api/languages", "/health"):
            assert path in schema["paths"]

    def test_endpoints_have_summary_and_tags(self, client):
        paths = client.get("/openapi.json").json()["paths"]
        for path, methods in paths.items():
            for method, spec in methods.items():
                assert "summary" in spec, "Missing summary for {} {}".format(method.upper(), path)
                assert "tags" in spec, "Missing tags for {} {}".format(method.upper(), path)
