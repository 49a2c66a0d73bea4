"""
errors.py — Exception taxonomy for yt-transcript-fetcher.

Every failure observed while resolving, discovering, or retrieving a
transcript is mapped to exactly one of these classes.  Each exception also
carries an `http_status` attribute so the FastAPI error handler can turn a
library error into the right HTTP response without a separate mapping table.

Hierarchy:
    TranscriptError (base, 500)
    ├── InvalidVideoIdentifierError (400)
    ├── VideoUnavailableError (404)
    ├── TooManyRequestsError (429)
    ├── TranscriptsDisabledError (404)
    ├── TranscriptNotAvailableError (404)
    └── LanguageNotAvailableError (400)
"""

from __future__ import annotations

from collections.abc import Sequence


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class TranscriptError(Exception):
    """
    Root exception for all transcript-related errors.

    Attributes:
        message:     Human-readable description of what went wrong.
        http_status: Suggested HTTP status code for the API layer.
    """

    def __init__(self, message: str, http_status: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.http_status = http_status


# ---------------------------------------------------------------------------
# Specific error cases
# ---------------------------------------------------------------------------

class InvalidVideoIdentifierError(TranscriptError):
    """
    Raised when the input is neither an 11-character ID nor a recognised
    YouTube URL.  No network request has been made at this point.
    """

    def __init__(self, value: str) -> None:
        super().__init__(
            message=f"Invalid YouTube video ID or URL: {value!r}",
            http_status=400,
        )
        self.value = value


class VideoUnavailableError(TranscriptError):
    """
    Raised when the watch page or the player endpoint answers with a
    non-success HTTP status (deleted, private, or mistyped video).
    """

    def __init__(self, video_id: str) -> None:
        super().__init__(
            message=f"The video is no longer available: {video_id}",
            http_status=404,
        )
        self.video_id = video_id


class TooManyRequestsError(TranscriptError):
    """
    Raised when YouTube serves a human-verification page instead of the
    watch page, or answers the transcript request with HTTP 429.
    """

    def __init__(self, video_id: str | None = None) -> None:
        suffix = f" (video: {video_id})" if video_id else ""
        super().__init__(
            message=(
                "YouTube is receiving too many requests from this IP address"
                f"{suffix}. Try again later or reduce the request rate."
            ),
            http_status=429,
        )
        self.video_id = video_id


class TranscriptsDisabledError(TranscriptError):
    """
    Raised when the video is confirmed playable but offers no caption
    tracks at all, i.e. the owner disabled captions.
    """

    def __init__(self, video_id: str) -> None:
        super().__init__(
            message=f"Transcripts are disabled for video: {video_id}",
            http_status=404,
        )
        self.video_id = video_id


class TranscriptNotAvailableError(TranscriptError):
    """
    Catch-all for "no transcript could be produced": the API key was not
    found on the page, the captions structure is missing for a video whose
    playability could not be confirmed, the transcript request failed, or
    the payload contained no cues.
    """

    def __init__(self, video_id: str) -> None:
        super().__init__(
            message=f"No transcript available for video: {video_id}",
            http_status=404,
        )
        self.video_id = video_id


class LanguageNotAvailableError(TranscriptError):
    """
    Raised when a specific language was requested but the video has no
    caption track with exactly that language code.

    Carries the full list of languages the video does offer so callers can
    present alternatives.  Maps to HTTP 400 because the resource exists,
    just not in the requested language.
    """

    def __init__(
        self,
        lang: str,
        available_languages: Sequence[str],
        video_id: str,
    ) -> None:
        available = ", ".join(available_languages) or "none"
        super().__init__(
            message=(
                f"No transcript available in {lang!r} for video: {video_id}. "
                f"Available languages: {available}"
            ),
            http_status=400,
        )
        self.lang = lang
        self.available_languages = list(available_languages)
        self.video_id = video_id
