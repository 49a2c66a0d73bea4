"""
test_cache.py — Tests for InMemoryCache and FsCache.

FsCache tests use pytest's tmp_path so every test gets a fresh, isolated
directory.  Expiry is tested by patching time.time in the cache module.
"""

from __future__ import annotations

import json
import os
from unittest.mock import patch

from yt_transcript_fetcher.cache import FsCache, InMemoryCache, transcript_cache_key


def test_transcript_cache_key() -> None:
    """The key combines video ID and requested language (empty when unset)."""
    assert transcript_cache_key("dQw4w9WgXcQ", "en") == "yt:transcript:dQw4w9WgXcQ:en"
    assert transcript_cache_key("dQw4w9WgXcQ", None) == "yt:transcript:dQw4w9WgXcQ:"


class TestInMemoryCache:
    """Tests for the expiring in-process cache."""

    def test_set_then_get(self) -> None:
        """A stored value is returned before it expires."""
        cache = InMemoryCache()
        cache.set("k", "v")
        assert cache.get("k") == "v"

    def test_missing_key(self) -> None:
        """Unknown keys are a miss."""
        assert InMemoryCache().get("nope") is None

    def test_expired_entry_is_dropped(self) -> None:
        """Reading an expired entry returns None and removes it."""
        cache = InMemoryCache(default_ttl=10)
        with patch("yt_transcript_fetcher.cache.time.time", return_value=1000.0):
            cache.set("k", "v")
        with patch("yt_transcript_fetcher.cache.time.time", return_value=1011.0):
            assert cache.get("k") is None
        assert len(cache) == 0

    def test_write_sweeps_expired_entries(self) -> None:
        """Storing a value removes entries that expired but were never read."""
        cache = InMemoryCache(default_ttl=10)
        with patch("yt_transcript_fetcher.cache.time.time", return_value=1000.0):
            cache.set("old-a", "v")
            cache.set("old-b", "v", ttl=100)
        with patch("yt_transcript_fetcher.cache.time.time", return_value=1020.0):
            cache.set("new", "v")
            assert len(cache) == 2
            assert cache.get("old-b") == "v"
            assert cache.get("new") == "v"

    def test_explicit_ttl_overrides_default(self) -> None:
        """A per-call ttl wins over the cache default."""
        cache = InMemoryCache(default_ttl=10)
        with patch("yt_transcript_fetcher.cache.time.time", return_value=1000.0):
            cache.set("k", "v", ttl=100)
        with patch("yt_transcript_fetcher.cache.time.time", return_value=1050.0):
            assert cache.get("k") == "v"


class TestFsCache:
    """Tests for the file-per-key cache."""

    def test_creates_directory(self, tmp_path) -> None:
        """The cache directory is created on construction."""
        cache_dir = tmp_path / "nested" / "cache"
        FsCache(str(cache_dir))
        assert cache_dir.is_dir()

    def test_round_trip(self, tmp_path) -> None:
        """A stored value can be read back, even by a new instance."""
        FsCache(str(tmp_path)).set("yt:transcript:abc:en", '[{"text": "hi"}]')
        assert FsCache(str(tmp_path)).get("yt:transcript:abc:en") == '[{"text": "hi"}]'

    def test_file_layout(self, tmp_path) -> None:
        """Each key is one JSON file holding value and expiry; unsafe characters are replaced."""
        with patch("yt_transcript_fetcher.cache.time.time", return_value=1000.0):
            FsCache(str(tmp_path), default_ttl=60).set("yt:transcript:abc:", "payload")

        path = tmp_path / "yt_transcript_abc_"
        assert path.is_file()
        assert json.loads(path.read_text(encoding="utf-8")) == {"value": "payload", "expires": 1060.0}

    def test_missing_key(self, tmp_path) -> None:
        """Unknown keys are a miss."""
        assert FsCache(str(tmp_path)).get("nope") is None

    def test_expired_file_removed(self, tmp_path) -> None:
        """An expired entry is a miss and its file is deleted."""
        cache = FsCache(str(tmp_path), default_ttl=5)
        with patch("yt_transcript_fetcher.cache.time.time", return_value=1000.0):
            cache.set("k", "v")
        with patch("yt_transcript_fetcher.cache.time.time", return_value=2000.0):
            assert cache.get("k") is None
        assert not os.path.exists(tmp_path / "k")

    def test_corrupt_file_is_miss(self, tmp_path) -> None:
        """A file that isn't valid JSON counts as a miss."""
        (tmp_path / "k").write_text("{not json", encoding="utf-8")
        assert FsCache(str(tmp_path)).get("k") is None
