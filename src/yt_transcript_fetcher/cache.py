"""
cache.py — Optional key/value caches for fetched transcripts.

The client only needs two methods, `get(key)` and `set(key, value, ttl)`,
with string values (the JSON-serialised segment list).  Anything that
provides them (a Redis wrapper, a dict, ...) can be passed as
TranscriptConfig.cache.  Two ready-made stores are included:

    InMemoryCache   Expiring dict, per process.
    FsCache         One JSON file per key under a directory.
"""

from __future__ import annotations

import json
import logging
import os
import re
import threading
import time
from typing import Protocol

from yt_transcript_fetcher.models import DEFAULT_CACHE_TTL

logger = logging.getLogger(__name__)


class CacheStrategy(Protocol):
    """Interface expected from TranscriptConfig.cache."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str, ttl: float | None = None) -> None: ...


def transcript_cache_key(video_id: str, lang: str | None) -> str:
    """Cache key for a transcript of `video_id` requested in `lang`."""
    return f"yt:transcript:{video_id}:{lang or ''}"


# ---------------------------------------------------------------------------
# In-process cache
# ---------------------------------------------------------------------------

class InMemoryCache:
    """
    Expiring in-memory cache.

    Entries live in a dict of key → (value, expires_at).  Expired entries are
    dropped when read and swept out on every write, so a long-lived instance
    only holds what is still fresh.  A lock makes a single instance safe to share
    between threads, e.g. across API requests.
    """

    def __init__(self, default_ttl: float = DEFAULT_CACHE_TTL) -> None:
        self.default_ttl = default_ttl
        self._entries: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at > time.time():
                return value
            del self._entries[key]
            return None

    def set(self, key: str, value: str, ttl: float | None = None) -> None:
        now = time.time()
        expires_at = now + (ttl if ttl is not None else self.default_ttl)
        with self._lock:
            expired = [k for k, (_, exp) in self._entries.items() if exp <= now]
            for k in expired:
                del self._entries[k]
            self._entries[key] = (value, expires_at)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# ---------------------------------------------------------------------------
# Filesystem cache
# ---------------------------------------------------------------------------

# Characters that are unsafe in filenames on Windows and/or POSIX systems.
_UNSAFE_FILENAME_CHARS = re.compile(r'[:/\\?*<>|"]')


class FsCache:
    """
    Filesystem-backed cache: one file per key in `cache_dir`.

    Each file holds {"value": <str>, "expires": <epoch seconds>}.  Files that
    are expired, unreadable, or not valid JSON are treated as misses; expired
    files are deleted when they are read.
    """

    def __init__(self, cache_dir: str = "./cache", default_ttl: float = DEFAULT_CACHE_TTL) -> None:
        self.cache_dir = cache_dir
        self.default_ttl = default_ttl
        os.makedirs(cache_dir, exist_ok=True)

    def _path(self, key: str) -> str:
        return os.path.join(self.cache_dir, _UNSAFE_FILENAME_CHARS.sub("_", key))

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            with open(path, encoding="utf-8") as fh:
                entry = json.load(fh)
            value = entry["value"]
            expires = float(entry["expires"])
        except FileNotFoundError:
            return None
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.debug("Ignoring unreadable cache file %s: %s", path, exc)
            return None

        if expires > time.time():
            return value

        try:
            os.remove(path)
        except OSError:
            pass
        return None

    def set(self, key: str, value: str, ttl: float | None = None) -> None:
        expires = time.time() + (ttl if ttl is not None else self.default_ttl)
        with open(self._path(key), "w", encoding="utf-8") as fh:
            json.dump({"value": value, "expires": expires}, fh)
