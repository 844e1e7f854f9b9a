from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

"""
Single-file JSON response cache.

All entries live in one JSON object on disk, keyed by request key:

    {"<key>": {"version": "v1", "expire": 1735689600, "content": ...}}

- `expire` is an absolute unix timestamp set at write time (now + TTL).
- Entries written under another `version` are ignored on read.
- Reads never raise: a missing/corrupt file, missing key, stale version or expired
  entry all read as a miss.

Upstream services here are slow and rate limited, and suburb/line data changes
rarely, so the default TTL is long (32 days).
"""

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class CacheEntry:
    """Serialized cache envelope stored on disk."""

    version: str
    expire: int
    content: Any


class FileCache:
    """A filesystem-backed cache stored in a single JSON file."""

    def __init__(
        self,
        path: Path,
        enabled: bool = True,
        ttl_seconds: int = 32 * SECONDS_PER_DAY,
        version: str = "v1",
    ):
        self._path = Path(path)
        self._enabled = enabled
        self._ttl_seconds = int(ttl_seconds)
        self._version = version

    @property
    def path(self) -> Path:
        return self._path

    @property
    def enabled(self) -> bool:
        return self._enabled

    def _read_entries(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        text = self._path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        raw = json.loads(text)
        if not isinstance(raw, dict):
            raise ValueError(f"cache file {self._path} must contain a JSON object")
        return raw

    def get_entry(self, key: str) -> CacheEntry | None:
        """Return the raw envelope for `key` regardless of version/expiry."""
        if not self._enabled:
            return None
        try:
            raw = self._read_entries().get(key)
            if raw is None:
                return None
            return CacheEntry(
                version=str(raw["version"]),
                expire=int(raw["expire"]),
                content=raw["content"],
            )
        except Exception as exc:
            logger.debug("Ignoring unreadable cache entry %r in %s: %s", key, self._path, exc)
            return None

    def get(self, key: str) -> Any | None:
        """Read a cached value if present, current-version and not expired."""
        entry = self.get_entry(key)
        if entry is None:
            return None
        if entry.version != self._version:
            logger.debug("Cache entry %r has version %r, expected %r", key, entry.version, self._version)
            return None
        if int(time.time()) > entry.expire:
            logger.debug("Cache entry %r expired", key)
            return None
        return entry.content

    def set(self, key: str, value: Any) -> None:
        """Write a JSON-serializable value, preserving other entries.

        Writes via a temporary file + atomic replace to avoid partial cache files.
        """
        if not self._enabled:
            return None

        try:
            entries = self._read_entries()
        except Exception:
            entries = {}
        entries[key] = {
            "version": self._version,
            "expire": int(time.time()) + self._ttl_seconds,
            "content": value,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(entries, ensure_ascii=False), encoding="utf-8")
        tmp.replace(self._path)

    def get_or_set(self, key: str, builder: Callable[[], Any]) -> Any:
        """Return cached value, or compute/store it via `builder`."""
        cached = self.get(key)
        if cached is not None:
            return cached
        value = builder()
        self.set(key, value)
        return value
