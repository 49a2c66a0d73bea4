"""
helpers.py — Shared fakes for exercising the pipeline without network access.

FakeResponse mimics the parts of `requests.Response` the pipeline reads.
RecordingFetcher is a transport double that returns a canned response and
remembers every FetchRequest it was given, so tests can count calls per stage.
"""

from __future__ import annotations

import json
from typing import Any

from yt_transcript_fetcher.models import FetchRequest

VIDEO_ID = "dQw4w9WgXcQ"
API_KEY = "AIzaSyTestKey_123"

WATCH_PAGE = (
    "<html><head><script>ytcfg.set({"
    f'"INNERTUBE_API_KEY":"{API_KEY}","INNERTUBE_CLIENT_NAME":"WEB"'
    "});</script></head><body></body></html>"
)

TRANSCRIPT_XML = (
    '<?xml version="1.0" encoding="utf-8" ?><transcript>'
    '<text start="0.5" dur="2.25">Never gonna give you up</text>'
    '<text start="2.75" dur="1.8">Never gonna let you down</text>'
    '<text start="4.55" dur="3">Never gonna run around</text>'
    "</transcript>"
)


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, text: str = "", status_code: int = 200) -> None:
        self.text = text
        self.status_code = status_code
        self.ok = 200 <= status_code < 400

    def json(self) -> Any:
        return json.loads(self.text)


class RecordingFetcher:
    """Transport double: returns `response` and records each request."""

    def __init__(self, response: FakeResponse) -> None:
        self.response = response
        self.requests: list[FetchRequest] = []

    def __call__(self, request: FetchRequest) -> FakeResponse:
        self.requests.append(request)
        return self.response

    @property
    def call_count(self) -> int:
        return len(self.requests)


def player_response(
    tracks: list[dict] | None = None,
    *,
    playable: bool = True,
    captions: bool = True,
) -> FakeResponse:
    """Build a player-endpoint response with the given caption tracks."""
    data: dict[str, Any] = {
        "playabilityStatus": {"status": "OK" if playable else "LOGIN_REQUIRED"},
    }
    if captions:
        data["captions"] = {
            "playerCaptionsTracklistRenderer": {"captionTracks": tracks or []},
        }
    return FakeResponse(json.dumps(data))


def track(lang: str, url: str | None = None) -> dict:
    """One raw captionTracks entry as YouTube returns it."""
    return {
        "languageCode": lang,
        "baseUrl": url or f"https://www.youtube.com/api/timedtext?v={VIDEO_ID}&lang={lang}&fmt=srv3",
        "name": {"simpleText": lang},
    }
