"""
discovery.py — Locate the caption tracks YouTube offers for a video.

Discovery is a two-request sequence followed by a local selection step:

    1. Fetch the watch page and pull the Innertube API key out of its
       inline script config              → fetch_api_key()
    2. Ask the Innertube "player" endpoint for the video's caption
       tracks, using that key            → fetch_caption_tracks()
    3. Pick one track by language        → select_track()

None of this is a documented API.  Each step classifies its failures into
the exceptions from errors.py so callers can tell "captions disabled" apart
from "video missing" apart from "we are being rate limited".
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any

from yt_transcript_fetcher.errors import (
    LanguageNotAvailableError,
    TooManyRequestsError,
    TranscriptNotAvailableError,
    TranscriptsDisabledError,
    VideoUnavailableError,
)
from yt_transcript_fetcher.models import CaptionTrack, FetchRequest
from yt_transcript_fetcher.transport import Fetcher

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_WATCH_URL = "{scheme}://www.youtube.com/watch?v={video_id}"
_PLAYER_URL = "https://www.youtube.com/youtubei/v1/player?key={api_key}"

# Present on the "unusual traffic" interstitial instead of the real page.
_RECAPTCHA_MARKER = 'class="g-recaptcha"'

# The key shows up either in a plain JSON blob or inside a JSON string that
# was itself JSON-escaped, so both spellings are tried in order.
_API_KEY_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r'"INNERTUBE_API_KEY":"([^"]+)"'),
    re.compile(r'INNERTUBE_API_KEY\\":\\"([^\\"]+)\\"'),
]

# The player only returns a captions block for some client identities; the
# Android client is the one that reliably includes it.
_PLAYER_CLIENT = {
    "clientName": "ANDROID",
    "clientVersion": "20.10.38",
}

# Where the tracklist renderer may live in a player response.  Tried in
# order; a new response shape only needs a new entry here.
_TRACKLIST_PATHS: list[tuple[str, ...]] = [
    ("captions", "playerCaptionsTracklistRenderer"),
    ("playerCaptionsTracklistRenderer",),
]


# ---------------------------------------------------------------------------
# Step 1: watch page → API key
# ---------------------------------------------------------------------------

def watch_url(video_id: str, *, disable_https: bool = False) -> str:
    """Canonical watch-page URL for a video."""
    scheme = "http" if disable_https else "https"
    return _WATCH_URL.format(scheme=scheme, video_id=video_id)


def extract_api_key(html: str) -> str | None:
    """Return the first Innertube API key found in `html`, or None."""
    for pattern in _API_KEY_PATTERNS:
        match = pattern.search(html)
        if match:
            return match.group(1)
    return None


def fetch_api_key(
    video_id: str,
    *,
    lang: str | None,
    user_agent: str,
    disable_https: bool,
    fetch: Fetcher,
) -> str:
    """
    Fetch the watch page for `video_id` and return its Innertube API key.

    Raises:
        VideoUnavailableError:       The page request failed.
        TooManyRequestsError:        YouTube returned a captcha page.
        TranscriptNotAvailableError: No API key could be found in the page.
    """
    url = watch_url(video_id, disable_https=disable_https)
    response = fetch(FetchRequest(url=url, lang=lang, user_agent=user_agent))

    if not response.ok:
        logger.debug("Watch page for %s returned HTTP %s", video_id, response.status_code)
        raise VideoUnavailableError(video_id)

    body = response.text
    if _RECAPTCHA_MARKER in body:
        raise TooManyRequestsError(video_id)

    api_key = extract_api_key(body)
    if api_key is None:
        # Usually a page layout change rather than a video without captions,
        # but callers only get the fixed error set.
        logger.warning(
            "No INNERTUBE_API_KEY found in watch page for %s (%d bytes)",
            video_id,
            len(body),
        )
        raise TranscriptNotAvailableError(video_id)

    return api_key


# ---------------------------------------------------------------------------
# Step 2: player endpoint → caption tracks
# ---------------------------------------------------------------------------

def _dig(data: Any, path: Sequence[str]) -> Any:
    """Follow `path` through nested mappings; None if any hop is missing."""
    for key in path:
        if not isinstance(data, Mapping):
            return None
        data = data.get(key)
    return data


def find_tracklist(player: Any) -> Mapping[str, Any] | None:
    """Return the first tracklist renderer found along _TRACKLIST_PATHS."""
    for path in _TRACKLIST_PATHS:
        tracklist = _dig(player, path)
        if isinstance(tracklist, Mapping):
            return tracklist
    return None


def is_playable(player: Any) -> bool:
    """True if the player response reports the video as playable."""
    return _dig(player, ("playabilityStatus", "status")) == "OK"


def _str_field(raw: Mapping, name: str) -> str:
    """`raw[name]` if it is a string, else "" (missing or drifted field)."""
    value = raw.get(name)
    return value if isinstance(value, str) else ""


def parse_caption_tracks(player: Any, video_id: str) -> list[CaptionTrack]:
    """
    Turn a decoded player response into an ordered list of CaptionTracks.

    Raises:
        TranscriptsDisabledError:    Playable video without captions, or a
                                     captions block with no usable tracks.
        TranscriptNotAvailableError: No captions block and playability
                                     could not be confirmed.
    """
    tracklist = find_tracklist(player)
    if tracklist is None:
        if is_playable(player):
            raise TranscriptsDisabledError(video_id)
        raise TranscriptNotAvailableError(video_id)

    raw_tracks = tracklist.get("captionTracks")
    if not isinstance(raw_tracks, list):
        raise TranscriptsDisabledError(video_id)

    tracks = [
        CaptionTrack(
            language_code=_str_field(raw, "languageCode"),
            base_url=_str_field(raw, "baseUrl") or _str_field(raw, "url"),
        )
        for raw in raw_tracks
        if isinstance(raw, Mapping)
    ]
    if not tracks:
        raise TranscriptsDisabledError(video_id)

    return tracks


def fetch_caption_tracks(
    video_id: str,
    api_key: str,
    *,
    lang: str | None,
    user_agent: str,
    fetch: Fetcher,
) -> list[CaptionTrack]:
    """
    Call the Innertube player endpoint and return the video's caption tracks.

    Raises:
        VideoUnavailableError:       The player request failed.
        TranscriptsDisabledError:    See parse_caption_tracks().
        TranscriptNotAvailableError: See parse_caption_tracks(), or the
                                     response body was not JSON.
    """
    body = {
        "context": {"client": dict(_PLAYER_CLIENT)},
        "videoId": video_id,
    }
    request = FetchRequest(
        url=_PLAYER_URL.format(api_key=api_key),
        method="POST",
        body=json.dumps(body),
        headers={"Content-Type": "application/json"},
        lang=lang,
        user_agent=user_agent,
    )
    response = fetch(request)

    if not response.ok:
        logger.debug("Player endpoint for %s returned HTTP %s", video_id, response.status_code)
        raise VideoUnavailableError(video_id)

    try:
        player = response.json()
    except ValueError as exc:
        raise TranscriptNotAvailableError(video_id) from exc

    tracks = parse_caption_tracks(player, video_id)
    logger.debug("Player reported %d caption track(s) for %s", len(tracks), video_id)
    return tracks


# ---------------------------------------------------------------------------
# Step 3: language selection
# ---------------------------------------------------------------------------

def available_languages(tracks: Sequence[CaptionTrack]) -> tuple[str, ...]:
    """Language codes of `tracks` in platform order, skipping blank codes."""
    return tuple(t.language_code for t in tracks if t.language_code)


def select_track(
    tracks: Sequence[CaptionTrack],
    lang: str | None,
    video_id: str,
) -> CaptionTrack:
    """
    Pick the caption track to download.

    With a requested language, the first track whose code matches exactly
    (no locale fallback, "en" does not match "en-GB").  Without one, the
    first track that has a language code, which is YouTube's default for
    the video.  The selected code is therefore always in
    available_languages(tracks).

    Raises:
        LanguageNotAvailableError:   No track has the requested language.
        TranscriptNotAvailableError: The chosen track has no URL, or no
                                     track has a language code.
    """
    if lang:
        selected = next((t for t in tracks if t.language_code == lang), None)
        if selected is None:
            raise LanguageNotAvailableError(lang, available_languages(tracks), video_id)
    else:
        selected = next((t for t in tracks if t.language_code), None)
        if selected is None:
            raise TranscriptNotAvailableError(video_id)

    if not selected.base_url:
        raise TranscriptNotAvailableError(video_id)

    return selected
