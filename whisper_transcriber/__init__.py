"""Whisper Transcription: media upload to subtitles or plain text.

WHY: A recognizer returns words with timestamps, but people want a
subtitle file they can load into a player or an editor, or a clean block of
text. This package wires the OpenAI Whisper API to the caption engine and
exposes the result through an HTTP API and a command-line tool.

HOW: Three-stage pipeline: recognize (api client), format (caption_engine
via pluggable formatters), deliver (FastAPI server or CLI). Each stage is
independently testable.

RULES:
- All formatters go through caption_engine.format_transcript
- Recognizer failures and formatting failures are distinct error kinds
- Adding a new output format = one new formatter module plus one registry line
"""

__version__ = "0.1.0"
