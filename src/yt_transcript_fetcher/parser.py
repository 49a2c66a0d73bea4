"""
parser.py — Download and decode the timed-text payload of a caption track.
"""

from __future__ import annotations

import logging
import re

from yt_transcript_fetcher.errors import (
    TooManyRequestsError,
    TranscriptNotAvailableError,
)
from yt_transcript_fetcher.models import FetchRequest, TranscriptSegment
from yt_transcript_fetcher.transport import Fetcher

logger = logging.getLogger(__name__)

# A trailing format override (e.g. "&fmt=srv3" or "&fmt=json3").  Removing
# it makes YouTube return its default timed-text XML.
_FMT_PARAM = re.compile(r"&fmt=[^&]+$")

# One cue: start offset, duration and text, captured in that order.
_CUE_PATTERN = re.compile(r'<text start="([^"]*)" dur="([^"]*)">([^<]*)</text>')


def build_transcript_url(base_url: str, *, disable_https: bool = False) -> str:
    """Derive the payload URL from a caption track's base URL."""
    url = _FMT_PARAM.sub("", base_url)
    if disable_https and url.startswith("https://"):
        url = "http://" + url[len("https://"):]
    return url


def fetch_transcript_payload(
    url: str,
    video_id: str,
    *,
    lang: str | None,
    user_agent: str,
    fetch: Fetcher,
) -> str:
    """
    Download the raw timed-text XML.

    Raises:
        TooManyRequestsError:        HTTP 429.
        TranscriptNotAvailableError: Any other non-success status.
    """
    response = fetch(FetchRequest(url=url, lang=lang, user_agent=user_agent))

    if not response.ok:
        if response.status_code == 429:
            raise TooManyRequestsError(video_id)
        logger.debug("Transcript request for %s returned HTTP %s", video_id, response.status_code)
        raise TranscriptNotAvailableError(video_id)

    return response.text


def parse_transcript(payload: str, lang: str, video_id: str) -> list[TranscriptSegment]:
    """
    Parse timed-text XML into segments, in the order the cues appear.

    Raises:
        TranscriptNotAvailableError: The payload contained no cues, or a
                                     cue had a non-numeric timestamp.
    """
    try:
        segments = [
            TranscriptSegment(
                text=text,
                offset=float(start),
                duration=float(dur),
                lang=lang,
            )
            for start, dur, text in _CUE_PATTERN.findall(payload)
        ]
    except ValueError as exc:
        raise TranscriptNotAvailableError(video_id) from exc

    if not segments:
        raise TranscriptNotAvailableError(video_id)

    return segments
