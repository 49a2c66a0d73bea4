"""
models.py — Data structures shared across the retrieval pipeline.

All of these are frozen dataclasses: values are built once by the stage that
owns them and never mutated afterwards, so they can be passed between stages
(and between threads) without copying.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from yt_transcript_fetcher.cache import CacheStrategy
    from yt_transcript_fetcher.transport import Fetcher


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

# A realistic desktop browser string.  YouTube serves reduced markup (without
# the Innertube config) to clients it doesn't recognise as browsers.
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/85.0.4183.83 Safari/537.36,gzip(gfe)"
)

# Default lifetime of a cached transcript, in seconds.
DEFAULT_CACHE_TTL = 3600.0


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FetchRequest:
    """
    One outbound HTTP request, as handed to a transport function.

    Attributes:
        url:        Absolute URL to request.
        method:     "GET" or "POST".
        body:       Request body; only sent for non-GET methods.
        headers:    Extra headers.  These win over the transport's defaults.
        lang:       Optional language hint, sent as Accept-Language.
        user_agent: User-Agent header value.
    """
    url: str
    method: str = "GET"
    body: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    lang: str | None = None
    user_agent: str = DEFAULT_USER_AGENT


# ---------------------------------------------------------------------------
# Discovery results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CaptionTrack:
    """A single caption option advertised by the player endpoint."""
    language_code: str
    base_url: str


@dataclass(frozen=True)
class CaptionTrackMetadata:
    """
    Outcome of the shared discovery stage, consumed by both the availability
    check and the full fetch.
    """
    identifier: str
    transcript_url: str
    selected_language: str
    available_languages: tuple[str, ...]


@dataclass(frozen=True)
class TranscriptAvailability:
    """
    Public result of check_transcript_availability().

    Only ever built on success, so `available` is always True; a missing
    transcript is reported by raising one of the errors in errors.py.
    """
    video_id: str
    available: bool
    transcript_url: str | None
    selected_language: str | None
    available_languages: list[str]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Transcript content
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TranscriptSegment:
    """
    One caption cue.

    Attributes:
        text:     Caption text exactly as it appeared in the payload.
        offset:   Start time in seconds.
        duration: Length of the cue in seconds.
        lang:     Language code the segment was fetched for.
    """
    text: str
    offset: float
    duration: float
    lang: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TranscriptSegment:
        return cls(
            text=data["text"],
            offset=float(data["offset"]),
            duration=float(data["duration"]),
            lang=data["lang"],
        )


# ---------------------------------------------------------------------------
# Client configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TranscriptConfig:
    """
    Immutable configuration for a YouTubeTranscript client.

    Attributes:
        lang:             Exact language code to select.  None picks the
                          video's first (default) caption track.
        user_agent:       User-Agent sent with every request.
        disable_https:    Use plain HTTP for the watch page and the
                          transcript payload.
        video_fetch:      Transport override for the watch-page request.
        player_fetch:     Transport override for the player-endpoint request.
        transcript_fetch: Transport override for the transcript payload.
        cache:            Optional cache consulted by fetch_transcript().
        cache_ttl:        Lifetime of stored entries in seconds; None lets
                          the cache apply its own default.
    """
    lang: str | None = None
    user_agent: str = DEFAULT_USER_AGENT
    disable_https: bool = False
    video_fetch: Fetcher | None = None
    player_fetch: Fetcher | None = None
    transcript_fetch: Fetcher | None = None
    cache: CacheStrategy | None = None
    cache_ttl: float | None = None
