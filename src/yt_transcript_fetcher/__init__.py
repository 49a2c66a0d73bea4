"""
yt_transcript_fetcher — Fetch YouTube caption transcripts without an API key.

Public API:
    fetch_transcript()              Fetch transcript segments for a video ID or URL.
    check_transcript_availability() Report available caption languages without downloading.
    YouTubeTranscript               Client bound to a fixed TranscriptConfig.
    TranscriptConfig                Immutable client configuration.
    extract()                       High-level one-call interface (URL → formatted output).
    parse_video_id()                Parse a YouTube URL or accept a bare video ID.
    InMemoryCache, FsCache          Ready-made transcript caches.

Exception hierarchy (all importable from this package):
    TranscriptError                     Base exception for all transcript errors.
    ├── InvalidVideoIdentifierError     Input is not a video ID or YouTube URL.
    ├── VideoUnavailableError           Watch page or player request failed.
    ├── TooManyRequestsError            Captcha page or HTTP 429.
    ├── TranscriptsDisabledError        Video plays but has no caption tracks.
    ├── TranscriptNotAvailableError     No transcript could be retrieved.
    └── LanguageNotAvailableError       Requested language not offered.

Usage:
    from yt_transcript_fetcher import fetch_transcript
    segments = fetch_transcript("https://www.youtube.com/watch?v=dQw4w9WgXcQ")

    # Pick a language and cache results on disk:
    from yt_transcript_fetcher import FsCache, TranscriptConfig
    config = TranscriptConfig(lang="es", cache=FsCache("./cache"))
    segments = fetch_transcript("dQw4w9WgXcQ", config)
"""

from yt_transcript_fetcher.cache import CacheStrategy, FsCache, InMemoryCache
from yt_transcript_fetcher.errors import (
    InvalidVideoIdentifierError,
    LanguageNotAvailableError,
    TooManyRequestsError,
    TranscriptError,
    TranscriptNotAvailableError,
    TranscriptsDisabledError,
    VideoUnavailableError,
)
from yt_transcript_fetcher.extractor import (
    YouTubeTranscript,
    check_transcript_availability,
    extract,
    fetch_transcript,
    parse_video_id,
)
from yt_transcript_fetcher.models import (
    FetchRequest,
    TranscriptAvailability,
    TranscriptConfig,
    TranscriptSegment,
)

__all__ = [
    "fetch_transcript",
    "check_transcript_availability",
    "YouTubeTranscript",
    "TranscriptConfig",
    "extract",
    "parse_video_id",
    "FetchRequest",
    "TranscriptAvailability",
    "TranscriptSegment",
    "CacheStrategy",
    "InMemoryCache",
    "FsCache",
    "TranscriptError",
    "InvalidVideoIdentifierError",
    "VideoUnavailableError",
    "TooManyRequestsError",
    "TranscriptsDisabledError",
    "TranscriptNotAvailableError",
    "LanguageNotAvailableError",
]
