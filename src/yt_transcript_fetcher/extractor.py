"""
extractor.py — Core transcript extraction logic.

This is the heart of yt-transcript-fetcher.  It ties the discovery,
retrieval and parsing stages together behind a small public interface:

    1. Parsing YouTube URLs / IDs       → parse_video_id()
    2. Checking transcript availability → YouTubeTranscript.check_transcript_availability()
    3. Fetching transcript segments     → YouTubeTranscript.fetch_transcript()
    4. Formatting output                → format_text(), format_json(), format_doc()
    5. One-call convenience             → extract()

A full fetch makes at most three sequential requests (watch page, player
endpoint, transcript payload) and never retries; every failure surfaces
immediately as one of the exceptions in errors.py.
"""

from __future__ import annotations

import json
import logging
import re

from yt_transcript_fetcher.cache import CacheStrategy, transcript_cache_key
from yt_transcript_fetcher.discovery import (
    available_languages,
    fetch_api_key,
    fetch_caption_tracks,
    select_track,
)
from yt_transcript_fetcher.errors import InvalidVideoIdentifierError
from yt_transcript_fetcher.models import (
    DEFAULT_USER_AGENT,
    CaptionTrackMetadata,
    TranscriptAvailability,
    TranscriptConfig,
    TranscriptSegment,
)
from yt_transcript_fetcher.parser import (
    build_transcript_url,
    fetch_transcript_payload,
    parse_transcript,
)
from yt_transcript_fetcher.transport import Fetcher, default_fetch

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_VIDEO_ID_LENGTH = 11

# URL shapes that carry a video ID.  The host must start the string or follow
# "//" so look-alike hosts do not match.  Each pattern captures the
# 11-character ID in group "id":
#   - https://www.youtube.com/watch?v=VIDEO_ID  (also m. and no-www hosts)
#   - https://youtu.be/VIDEO_ID
#   - https://www.youtube.com/embed/VIDEO_ID, /shorts/, /v/, /live/
_URL_PATTERNS: list[re.Pattern[str]] = [
    re.compile(
        r"(?:^|//)(?:www\.|m\.)?youtube\.com/watch\?(?:.*&)?v=(?P<id>[A-Za-z0-9_-]{11})",
        re.IGNORECASE,
    ),
    re.compile(r"(?:^|//)youtu\.be/(?P<id>[A-Za-z0-9_-]{11})", re.IGNORECASE),
    re.compile(
        r"(?:^|//)(?:www\.|m\.)?youtube\.com/(?:embed|shorts|v|live)/(?P<id>[A-Za-z0-9_-]{11})",
        re.IGNORECASE,
    ),
]


# ---------------------------------------------------------------------------
# URL / ID parsing
# ---------------------------------------------------------------------------

def parse_video_id(url_or_id: str) -> str:
    """
    Resolve a YouTube URL or raw ID to an 11-character video ID.

    Any input that is exactly 11 characters long is taken to be an ID and
    returned as-is; its existence is only checked once the watch page is
    fetched.  Anything else must be one of the URL shapes in _URL_PATTERNS.

    Args:
        url_or_id: A YouTube URL or a raw video ID.

    Returns:
        The 11-character video ID.

    Raises:
        InvalidVideoIdentifierError: If the string matches no known shape.
    """
    if len(url_or_id) == _VIDEO_ID_LENGTH:
        return url_or_id

    candidate = url_or_id.strip()
    for pattern in _URL_PATTERNS:
        match = pattern.search(candidate)
        if match:
            return match.group("id")

    raise InvalidVideoIdentifierError(url_or_id)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class YouTubeTranscript:
    """
    Transcript client bound to one immutable TranscriptConfig.

    Instances hold no per-call state, so one client can serve many videos,
    including from several threads at once (as long as the configured
    transports and cache can).

    Example:
        client = YouTubeTranscript(TranscriptConfig(lang="en"))
        segments = client.fetch_transcript("https://youtu.be/dQw4w9WgXcQ")
    """

    def __init__(self, config: TranscriptConfig | None = None) -> None:
        self.config = config or TranscriptConfig()

    @property
    def _user_agent(self) -> str:
        return self.config.user_agent or DEFAULT_USER_AGENT

    def _transport(self, override: Fetcher | None) -> Fetcher:
        return override or default_fetch

    def _get_caption_track_metadata(self, video_id: str) -> CaptionTrackMetadata:
        """
        Run the discovery stages shared by both public operations: resolve
        the ID, fetch the API key, list caption tracks, pick one, and build
        its transcript URL.
        """
        identifier = parse_video_id(video_id)
        cfg = self.config

        api_key = fetch_api_key(
            identifier,
            lang=cfg.lang,
            user_agent=self._user_agent,
            disable_https=cfg.disable_https,
            fetch=self._transport(cfg.video_fetch),
        )
        tracks = fetch_caption_tracks(
            identifier,
            api_key,
            lang=cfg.lang,
            user_agent=self._user_agent,
            fetch=self._transport(cfg.player_fetch),
        )
        track = select_track(tracks, cfg.lang, identifier)

        return CaptionTrackMetadata(
            identifier=identifier,
            transcript_url=build_transcript_url(track.base_url, disable_https=cfg.disable_https),
            selected_language=track.language_code,
            available_languages=available_languages(tracks),
        )

    def check_transcript_availability(self, video_id: str) -> TranscriptAvailability:
        """
        Report whether a transcript can be fetched, without downloading it.

        Args:
            video_id: YouTube video ID or URL.

        Returns:
            A TranscriptAvailability with the selected language, every
            language on offer, and the URL the transcript would come from.

        Raises:
            The same exceptions as fetch_transcript(), except those raised
            while downloading or parsing the payload.
        """
        metadata = self._get_caption_track_metadata(video_id)
        return TranscriptAvailability(
            video_id=metadata.identifier,
            available=True,
            transcript_url=metadata.transcript_url,
            selected_language=metadata.selected_language,
            available_languages=list(metadata.available_languages),
        )

    def fetch_transcript(self, video_id: str) -> list[TranscriptSegment]:
        """
        Fetch the transcript of a video as an ordered list of segments.

        When a cache is configured, it is checked first under a key made of
        the video ID and the requested language; a hit skips every network
        request.  Cache failures never reach the caller.

        Args:
            video_id: YouTube video ID or URL.

        Returns:
            A non-empty list of TranscriptSegment in playback order.

        Raises:
            InvalidVideoIdentifierError, VideoUnavailableError,
            TooManyRequestsError, TranscriptsDisabledError,
            TranscriptNotAvailableError, LanguageNotAvailableError.
        """
        cfg = self.config
        identifier = parse_video_id(video_id)
        cache_key = transcript_cache_key(identifier, cfg.lang)

        if cfg.cache is not None:
            cached = _read_cache(cfg.cache, cache_key)
            if cached is not None:
                logger.debug("Cache hit for %s", cache_key)
                return cached

        metadata = self._get_caption_track_metadata(identifier)
        payload = fetch_transcript_payload(
            metadata.transcript_url,
            identifier,
            lang=cfg.lang,
            user_agent=self._user_agent,
            fetch=self._transport(cfg.transcript_fetch),
        )
        segments = parse_transcript(payload, cfg.lang or metadata.selected_language, identifier)
        logger.debug("Parsed %d segment(s) for %s", len(segments), identifier)

        if cfg.cache is not None:
            _write_cache(cfg.cache, cache_key, segments, cfg.cache_ttl)

        return segments


def _read_cache(cache: CacheStrategy, key: str) -> list[TranscriptSegment] | None:
    """Load cached segments; any failure counts as a miss."""
    try:
        raw = cache.get(key)
        if not raw:
            return None
        segments = [TranscriptSegment.from_dict(item) for item in json.loads(raw)]
    except Exception as exc:  # noqa: BLE001
        logger.debug("Ignoring unusable cache entry %s: %s", key, exc)
        return None
    return segments or None


def _write_cache(
    cache: CacheStrategy,
    key: str,
    segments: list[TranscriptSegment],
    ttl: float | None,
) -> None:
    try:
        cache.set(key, json.dumps([s.to_dict() for s in segments]), ttl)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Failed to store %s in cache: %s", key, exc)


# ---------------------------------------------------------------------------
# Module-level convenience functions
# ---------------------------------------------------------------------------

def fetch_transcript(
    video_id: str,
    config: TranscriptConfig | None = None,
) -> list[TranscriptSegment]:
    """Fetch a transcript with a one-off client.  See YouTubeTranscript."""
    return YouTubeTranscript(config).fetch_transcript(video_id)


def check_transcript_availability(
    video_id: str,
    config: TranscriptConfig | None = None,
) -> TranscriptAvailability:
    """Check availability with a one-off client.  See YouTubeTranscript."""
    return YouTubeTranscript(config).check_transcript_availability(video_id)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def format_text(segments: list[TranscriptSegment]) -> str:
    """Plain text, one line per segment, no timestamps."""
    return "\n".join(segment.text for segment in segments)


def format_json(segments: list[TranscriptSegment], video_id: str) -> dict:
    """
    Build a JSON-serialisable dict from transcript segments.

    Returns:
        A dict with keys: video_id, segment_count, segments.
        Each segment has: text, offset, duration, lang.
    """
    return {
        "video_id": video_id,
        "segment_count": len(segments),
        "segments": [segment.to_dict() for segment in segments],
    }


# Segments are grouped into paragraphs; a new paragraph starts once a
# segment's offset is this many seconds past the paragraph's first segment.
_DOC_PARAGRAPH_INTERVAL_SECS = 30


def _seconds_to_mmss(seconds: float) -> str:
    """
    Convert a float timestamp (in seconds) to a MM:SS string.

    Values above 59:59 keep counting minutes (e.g. 3661.0 → "61:01").
    """
    total = int(seconds)
    mins, secs = divmod(total, 60)
    return f"{mins:02d}:{secs:02d}"


def format_doc(segments: list[TranscriptSegment]) -> str:
    """
    Render segments as a readable markdown document.

    Segments are joined with spaces into flowing paragraphs, with a new
    paragraph roughly every 30 seconds.  Each paragraph is prefixed with a
    bold **[MM:SS]** marker for the start of its time window, and paragraphs
    are separated by blank lines.

    Returns:
        The markdown text, or an empty string if there are no segments.
    """
    paragraphs: list[str] = []
    current_texts: list[str] = []
    paragraph_start: float | None = None

    for segment in segments:
        if paragraph_start is None:
            paragraph_start = segment.offset
            current_texts.append(segment.text)
        elif segment.offset - paragraph_start >= _DOC_PARAGRAPH_INTERVAL_SECS:
            timestamp = _seconds_to_mmss(paragraph_start)
            paragraphs.append(f"**[{timestamp}]** {' '.join(current_texts)}")
            paragraph_start = segment.offset
            current_texts = [segment.text]
        else:
            current_texts.append(segment.text)

    if current_texts and paragraph_start is not None:
        timestamp = _seconds_to_mmss(paragraph_start)
        paragraphs.append(f"**[{timestamp}]** {' '.join(current_texts)}")

    return "\n\n".join(paragraphs)


# ---------------------------------------------------------------------------
# High-level convenience function (main public API)
# ---------------------------------------------------------------------------

def extract(
    url_or_id: str,
    lang: str | None = None,
    fmt: str = "text",
    *,
    cache: CacheStrategy | None = None,
    disable_https: bool = False,
    user_agent: str | None = None,
) -> str | dict:
    """
    One-call interface: parse URL → fetch transcript → format output.

    Args:
        url_or_id:     A YouTube URL or raw video ID.
        lang:          Exact language code to fetch; None for the default track.
        fmt:           "text" for plain text, "json" for a dict with
                       timestamps, "doc" for a markdown document with
                       timestamped paragraphs.
        cache:         Optional cache for fetched segments.
        disable_https: Fetch the watch page and payload over plain HTTP.
        user_agent:    Override the default browser User-Agent.

    Returns:
        A plain-text string (fmt="text"), a dict (fmt="json"), or a markdown
        string (fmt="doc").

    Raises:
        ValueError:      If fmt is not "text", "json", or "doc".
        TranscriptError: (or subclass) on any extraction failure.
    """
    if fmt not in ("text", "json", "doc"):
        raise ValueError(f"Unknown format {fmt!r}; expected 'text', 'json', or 'doc'")

    video_id = parse_video_id(url_or_id)
    config = TranscriptConfig(
        lang=lang,
        user_agent=user_agent or DEFAULT_USER_AGENT,
        disable_https=disable_https,
        cache=cache,
    )
    segments = fetch_transcript(video_id, config)

    if fmt == "json":
        return format_json(segments, video_id)

    if fmt == "doc":
        return format_doc(segments)

    return format_text(segments)
