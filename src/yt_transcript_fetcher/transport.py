"""
transport.py — The injectable HTTP transport.

Every network call the pipeline makes goes through a `Fetcher`: a plain
callable that takes a FetchRequest and returns something shaped like a
`requests.Response` (`ok`, `status_code`, `text`, `json()`).  Callers can
swap in their own function per stage (proxies, recorded fixtures, a shared
session) through TranscriptConfig.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol

import requests

from yt_transcript_fetcher.models import DEFAULT_USER_AGENT, FetchRequest

logger = logging.getLogger(__name__)

# Socket timeout for the default transport, in seconds.  Custom transports
# decide their own.
_DEFAULT_TIMEOUT_SECS = 30


class FetchResponse(Protocol):
    """The subset of `requests.Response` the pipeline relies on."""

    ok: bool
    status_code: int
    text: str

    def json(self) -> Any: ...


Fetcher = Callable[[FetchRequest], FetchResponse]


def build_headers(request: FetchRequest) -> dict[str, str]:
    """
    Merge the default headers for a request.

    User-Agent always comes first, Accept-Language is added when the request
    carries a language hint, and explicit request headers override both.
    """
    headers = {"User-Agent": request.user_agent or DEFAULT_USER_AGENT}
    if request.lang:
        headers["Accept-Language"] = request.lang
    headers.update(request.headers)
    return headers


def default_fetch(request: FetchRequest) -> requests.Response:
    """Issue `request` with the `requests` library."""
    method = request.method.upper()
    # Only non-GET requests carry a body.
    data = request.body if method != "GET" else None

    logger.debug("%s %s", method, request.url)
    return requests.request(
        method,
        request.url,
        headers=build_headers(request),
        data=data.encode("utf-8") if data is not None else None,
        timeout=_DEFAULT_TIMEOUT_SECS,
    )
