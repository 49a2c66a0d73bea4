"""
api.py — FastAPI REST API for yt-transcript-fetcher.

Endpoints:
    GET /transcript/{video_id}    — Fetch a transcript (text, JSON or markdown doc).
    GET /availability/{video_id}  — List caption languages without downloading.
    GET /health                   — Simple health-check for load balancers / monitoring.

Run with:
    uv run uvicorn yt_transcript_fetcher.api:app

Fetched transcripts are kept in a process-wide InMemoryCache, so repeated
requests for the same video and language don't hit YouTube again.  The
global exception handler converts any TranscriptError into an HTTP response
using the status code stored on the exception.
"""

from __future__ import annotations

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from yt_transcript_fetcher.cache import InMemoryCache
from yt_transcript_fetcher.errors import TranscriptError
from yt_transcript_fetcher.extractor import check_transcript_availability, extract
from yt_transcript_fetcher.models import TranscriptConfig

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(
    title="YouTube Transcript Fetcher API",
    description="Fetch YouTube video transcripts as plain text, structured JSON, "
                "or a markdown document, and check which caption languages a video offers.",
    version="0.1.0",
)

# Shared by every request handled by this process.
_cache = InMemoryCache()


# ---------------------------------------------------------------------------
# Global error handler
# ---------------------------------------------------------------------------

@app.exception_handler(TranscriptError)
async def transcript_error_handler(request: Request, exc: TranscriptError) -> JSONResponse:
    """
    Translate any TranscriptError (or subclass) into an HTTP error response.

    The http_status on the exception drives the response code.  A
    LanguageNotAvailableError also lists the languages the video does offer.
    """
    content: dict = {"error": exc.message}
    available = getattr(exc, "available_languages", None)
    if available is not None:
        content["available_languages"] = available
    return JSONResponse(status_code=exc.http_status, content=content)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

# response_model=None is required because we return different Response subclasses
# (PlainTextResponse or JSONResponse) depending on the format param.
@app.get("/transcript/{video_id}", response_model=None)
def get_transcript(
    video_id: str,
    format: str = Query(
        default="text",
        description="Output format: 'text' for plain transcript, 'json' for structured data with timestamps, 'doc' for readable markdown document.",
        pattern="^(text|json|doc)$",
    ),
    lang: str = Query(
        default="",
        description="Exact caption language code (e.g. 'en'). Empty selects the video's default track.",
    ),
) -> PlainTextResponse | JSONResponse:
    """
    Fetch the transcript for a single YouTube video.

    **video_id** is the 11-character YouTube video identifier
    (e.g. `dQw4w9WgXcQ`).
    """
    result = extract(video_id, lang=lang or None, fmt=format, cache=_cache)

    if isinstance(result, dict):
        return JSONResponse(content=result)
    return PlainTextResponse(content=result)


@app.get("/availability/{video_id}")
def get_availability(
    video_id: str,
    lang: str = Query(
        default="",
        description="Exact caption language code to check for. Empty selects the video's default track.",
    ),
) -> JSONResponse:
    """
    Check whether a transcript exists without downloading it.

    Returns the selected language, every available language, and the URL
    the transcript would be fetched from.
    """
    availability = check_transcript_availability(video_id, TranscriptConfig(lang=lang or None))
    return JSONResponse(content=availability.to_dict())


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------

@app.get("/health")
async def health() -> dict:
    """Minimal health-check endpoint.  Returns HTTP 200 with {"status": "ok"}."""
    return {"status": "ok"}
