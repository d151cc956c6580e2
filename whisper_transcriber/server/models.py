"""Pydantic response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for response serialization
and automatic OpenAPI documentation. Pydantic models enforce field types
at runtime and generate JSON Schema that appears in the /docs UI.

HOW: Each endpoint has its own response model. All models include Field
descriptions for rich OpenAPI docs.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- TranscriptionResponse matches what the upload page reads:
  success, result, language, format
- Response models never expose internal implementation details
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class TranscriptionResponse(BaseModel):
    """Result of a completed transcription request.

    RULES:
    - result is the full body (SRT or plain text), unmodified
    - format is the served file extension without dot ("srt" or "txt")
    - language is the ISO 639-1 code used or detected
    """

    success: bool = Field(default=True, description="Always true on a 200 response.")
    result: str = Field(description="Formatted transcript: SRT body or plain text.")
    language: str = Field(description="Language used or detected (ISO 639-1 code).")
    format: str = Field(description="Output format / file extension: 'srt' or 'txt'.")

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "success": True,
                "result": "1\n00:00:00,000 --> 00:00:00,500\nHello,\n\n",
                "language": "en",
                "format": "srt",
            }
        ]
    }}


class FormatInfo(BaseModel):
    """Description of an available output format."""

    key: str = Field(description="Format identifier used in the outputFormat field.")
    name: str = Field(description="Human-readable format name.")
    suffix: str = Field(description="File suffix produced (e.g. '.srt').")
    media_type: str = Field(description="MIME type of the produced content.")


class LanguageInfo(BaseModel):
    """A language selectable for transcription."""

    code: str = Field(description="ISO 639-1 code, or 'auto' for detection.")
    name: str = Field(description="Display name.")


class LanguageListResponse(BaseModel):
    languages: List[LanguageInfo] = Field(description="Selectable languages.")


class ErrorResponse(BaseModel):
    """Standard error response body.

    RULES:
    - detail is always a human-readable error message
    """

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
