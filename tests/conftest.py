"""
conftest.py — Fixtures wiring the fakes in tests/helpers.py to each stage.
"""

from __future__ import annotations

import pytest

from tests.helpers import (
    TRANSCRIPT_XML,
    WATCH_PAGE,
    FakeResponse,
    RecordingFetcher,
    player_response,
    track,
)


@pytest.fixture()
def video_fetch() -> RecordingFetcher:
    return RecordingFetcher(FakeResponse(WATCH_PAGE))


@pytest.fixture()
def player_fetch() -> RecordingFetcher:
    return RecordingFetcher(player_response([track("en"), track("es")]))


@pytest.fixture()
def transcript_fetch() -> RecordingFetcher:
    return RecordingFetcher(FakeResponse(TRANSCRIPT_XML))
