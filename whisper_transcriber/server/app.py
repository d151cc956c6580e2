"""FastAPI application with the transcription upload API and OpenAPI docs.

WHY: The browser upload page posts a media file plus formatting options
and expects the formatted transcript back in the same response. FastAPI
provides multipart form parsing, request validation, dependency injection
for the recognizer, and automatic OpenAPI documentation.

HOW: POST /api/transcribe accepts the multipart upload with the form's
option fields. The file type, formatting options and language are checked
by dependencies that FastAPI resolves before get_recognizer, so a bad
request never touches the recognizer or its API key. The upload is then
size-checked, written to a temporary directory, and run through the
recognize-then-format pipeline. POST /api/transcribe/file does the same
but returns the body as a downloadable .srt/.txt attachment. Helper
endpoints list formats, languages, and report health.

RULES:
- Form field names match the upload page: language, outputFormat, srtMode,
  maxWords, maxChars, allLowercase, allUppercase, removeAllPunctuation
- Unsupported file type, invalid options or language → 400 before the
  recognizer dependency is resolved
- Oversize file → 413
- Recognizer failure or malformed recognizer output → 502
- Missing API key → 500 with an explicit message
- Error responses use a consistent ErrorResponse schema
- The recognizer comes from the get_recognizer dependency (overridable in tests)
- Download filenames are sent as an ASCII fallback plus RFC 5987 filename*
"""

from __future__ import annotations

import logging
import re
import tempfile
from pathlib import Path
from typing import Annotated, AsyncIterator, List, Optional
from urllib.parse import quote

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from caption_engine import __version__ as engine_version
from caption_engine import validate_config
from caption_engine.errors import InvalidConfigError, MalformedTranscriptError
from caption_engine.models import AUTO_LANGUAGE, FormattingConfig
from whisper_transcriber import __version__
from whisper_transcriber.api.base import Recognizer, RecognizerError
from whisper_transcriber.api.client import WhisperClient
from whisper_transcriber.config import (
    DEFAULT_LANGUAGE,
    MAX_UPLOAD_BYTES,
    SUPPORTED_LANGUAGES,
)
from whisper_transcriber.core.options import parse_options
from whisper_transcriber.core.pipeline import (
    MediaValidationError,
    check_media_file,
    transcribe_and_format,
)
from whisper_transcriber.formatters import FORMATTERS, FormatterOutput
from whisper_transcriber.server.models import (
    ErrorResponse,
    FormatInfo,
    HealthResponse,
    LanguageInfo,
    LanguageListResponse,
    TranscriptionResponse,
)

logger = logging.getLogger(__name__)

_LANGUAGE_CODE_RE = re.compile(r"^[a-z]{2,3}$")
_UNSAFE_HEADER_CHARS_RE = re.compile(r'["\\\x00-\x1f\x7f]')

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Whisper Transcription API",
    description=(
        "Upload an audio or video file and receive its transcript as SRT "
        "subtitles (word-for-word or character-limited captions) or plain "
        "text, with optional case and punctuation normalization."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# Dependencies
#
# Endpoints declare these in the order they should run: FastAPI resolves
# dependencies in parameter order and stops at the first HTTPException.
# ---------------------------------------------------------------------------


async def get_media_upload(
    file: Annotated[UploadFile, File(description="Audio or video file to transcribe")],
) -> UploadFile:
    """Reject uploads whose extension is not a supported media type."""
    try:
        check_media_file(Path(file.filename or "upload").name)
    except MediaValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return file


async def get_formatting_config(
    output_format: Annotated[
        Optional[str],
        Form(alias="outputFormat", description="'srt' (subtitles) or 'txt' (plain text)."),
    ] = None,
    srt_mode: Annotated[
        Optional[str],
        Form(alias="srtMode", description="'word_level' (max words) or 'char_limit' (max chars)."),
    ] = None,
    max_words: Annotated[
        Optional[str],
        Form(alias="maxWords", description="Words per caption in word_level mode."),
    ] = None,
    max_chars: Annotated[
        Optional[str],
        Form(alias="maxChars", description="Characters per caption in char_limit mode."),
    ] = None,
    all_lowercase: Annotated[
        Optional[str],
        Form(alias="allLowercase", description="Lowercase all text."),
    ] = None,
    all_uppercase: Annotated[
        Optional[str],
        Form(alias="allUppercase", description="Uppercase all text."),
    ] = None,
    remove_all_punctuation: Annotated[
        Optional[str],
        Form(alias="removeAllPunctuation", description="Strip all punctuation."),
    ] = None,
) -> FormattingConfig:
    """Decode and validate the form's formatting options (400 on failure)."""
    try:
        return validate_config(parse_options(
            output_format=output_format,
            caption_mode=srt_mode,
            max_words=max_words,
            max_chars=max_chars,
            lowercase=all_lowercase,
            uppercase=all_uppercase,
            strip_punctuation=remove_all_punctuation,
        ))
    except InvalidConfigError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


async def get_language(
    language: Annotated[
        Optional[str],
        Form(description="ISO 639-1 code, or 'auto' to detect."),
    ] = None,
) -> str:
    """Return the requested language code, raising 400 if it is not one."""
    value = (language or DEFAULT_LANGUAGE).strip().lower()
    if value != AUTO_LANGUAGE and not _LANGUAGE_CODE_RE.match(value):
        raise HTTPException(
            status_code=400,
            detail="Invalid language '{}'. Use 'auto' or an ISO 639-1 code.".format(language),
        )
    return value


async def get_recognizer() -> AsyncIterator[Recognizer]:
    """Yield an open WhisperClient for the duration of one request."""
    try:
        client = WhisperClient()
    except ValueError as exc:
        logger.error("Recognizer not configured: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))
    async with client:
        yield client


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _content_disposition(stem: str, suffix: str) -> str:
    """Build an attachment header that survives any upload filename.

    Starlette encodes header values as Latin-1, so the plain filename
    parameter carries an ASCII-only copy and filename* the UTF-8 original.
    """
    ascii_stem = stem.encode("ascii", "ignore").decode("ascii")
    ascii_stem = _UNSAFE_HEADER_CHARS_RE.sub("", ascii_stem).strip() or "transcription"
    return "attachment; filename=\"{}{}\"; filename*=UTF-8''{}".format(
        ascii_stem, suffix, quote(stem + suffix, safe=""),
    )


async def _process_upload(
    file: UploadFile,
    config: FormattingConfig,
    language: str,
    recognizer: Recognizer,
) -> FormatterOutput:
    """Size-check one validated upload and run it through the pipeline.

    WHY: Both transcription endpoints share every step except how the
    result is returned.

    HOW: File type, options and language were already checked by the
    dependencies. The body is read once for the size limit, written to a
    temporary directory, and handed to the recognizer.
    """
    # Sanitize filename to prevent path traversal
    filename = Path(file.filename or "upload").name

    content = await file.read()
    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail="File too large ({:,} bytes, max {:,})".format(len(content), MAX_UPLOAD_BYTES),
        )

    with tempfile.TemporaryDirectory(prefix="whisper-upload-") as tmp_dir:
        input_path = Path(tmp_dir) / filename
        input_path.write_bytes(content)
        try:
            output = await transcribe_and_format(input_path, config, recognizer, language)
        except RecognizerError as exc:
            logger.warning("Recognizer failed for %s: %s", filename, exc)
            raise HTTPException(status_code=502, detail="Transcription failed: {}".format(exc))
        except MalformedTranscriptError as exc:
            logger.error("Recognizer returned a malformed transcript for %s: %s", filename, exc)
            raise HTTPException(
                status_code=502,
                detail="Recognizer returned an unusable transcript: {}".format(exc),
            )
        except Exception:
            logger.exception("Unexpected failure while transcribing %s", filename)
            raise

    logger.info(
        "Transcribed %s (%d bytes) → %s, language %s",
        filename, len(content), output.suffix, output.result.language,
    )
    return output


# ---------------------------------------------------------------------------
# Endpoints: Transcription
# ---------------------------------------------------------------------------

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid file type or options"},
    413: {"model": ErrorResponse, "description": "File too large"},
    502: {"model": ErrorResponse, "description": "Recognizer failure"},
}


@app.post(
    "/api/transcribe",
    response_model=TranscriptionResponse,
    tags=["transcription"],
    summary="Transcribe a media file",
    description=(
        "Upload an audio or video file with formatting options. Returns the "
        "SRT body or plain text together with the effective language."
    ),
    responses=_ERROR_RESPONSES,
)
async def transcribe(
    file: Annotated[UploadFile, Depends(get_media_upload)],
    config: Annotated[FormattingConfig, Depends(get_formatting_config)],
    language: Annotated[str, Depends(get_language)],
    recognizer: Annotated[Recognizer, Depends(get_recognizer)],
) -> TranscriptionResponse:
    output = await _process_upload(file, config, language, recognizer)
    return TranscriptionResponse(
        success=True,
        result=output.content,
        language=output.result.language,
        format=output.result.output_format.value,
    )


@app.post(
    "/api/transcribe/file",
    tags=["transcription"],
    summary="Transcribe a media file and download the result",
    description=(
        "Same as POST /api/transcribe, but the formatted transcript is "
        "returned as a file attachment named after the upload."
    ),
    responses={
        200: {"description": "SRT or plain text file",
              "content": {"application/x-subrip": {}, "text/plain": {}}},
        **_ERROR_RESPONSES,
    },
)
async def transcribe_file(
    file: Annotated[UploadFile, Depends(get_media_upload)],
    config: Annotated[FormattingConfig, Depends(get_formatting_config)],
    language: Annotated[str, Depends(get_language)],
    recognizer: Annotated[Recognizer, Depends(get_recognizer)],
) -> Response:
    output = await _process_upload(file, config, language, recognizer)
    stem = Path(Path(file.filename or "transcription").name).stem or "transcription"
    return Response(
        content=output.content.encode("utf-8"),
        media_type="{}; charset=utf-8".format(output.media_type),
        headers={
            "Content-Disposition": _content_disposition(stem, output.suffix),
            "Content-Language": output.result.language,
        },
    )


# ---------------------------------------------------------------------------
# Endpoints: Metadata
# ---------------------------------------------------------------------------


@app.get(
    "/api/formats",
    response_model=List[FormatInfo],
    tags=["metadata"],
    summary="List available output formats",
)
async def list_formats() -> List[FormatInfo]:
    result = []
    for key, formatter_cls in sorted(FORMATTERS.items()):
        formatter = formatter_cls()
        result.append(FormatInfo(
            key=key,
            name=formatter.name,
            suffix=formatter.suffix,
            media_type=formatter.media_type,
        ))
    return result


@app.get(
    "/api/languages",
    response_model=LanguageListResponse,
    tags=["metadata"],
    summary="List selectable languages",
)
async def list_languages() -> LanguageListResponse:
    return LanguageListResponse(languages=[
        LanguageInfo(code=code, name=name) for code, name in SUPPORTED_LANGUAGES.items()
    ])


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness and readiness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version="{} (engine {})".format(__version__, engine_version))


def run_api():
    """Entry point for the whisper-transcriber-api console script."""
    import uvicorn
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=8000)
