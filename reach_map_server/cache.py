"""In-memory geocoding cache for one session.

One GeocodeCache is created per server process and handed to the resolver and
orchestrator explicitly. Entries are written once per key and never evicted,
so a second lookup of the same text never goes back to the network. Failed
lookups are remembered with the NOT_FOUND marker.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from .helpers import normalize_location

if TYPE_CHECKING:
    from .models import CoordinatePair

logger = logging.getLogger(__name__)


class _NotFound:
    """Marker for keys the provider had no match for."""

    _instance: _NotFound | None = None

    def __new__(cls) -> _NotFound:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __bool__(self) -> bool:
        return False


NOT_FOUND = _NotFound()


class GeocodeCache:
    """Write-once key -> coordinates store with not-found markers."""

    def __init__(self):
        self._entries: dict[str, CoordinatePair | _NotFound] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def key(text: str) -> str:
        return normalize_location(text)

    def get(self, text: str) -> CoordinatePair | _NotFound | None:
        """Return the cached coordinates, NOT_FOUND, or None when the key is absent."""
        key = self.key(text)
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return None
        self.hits += 1
        logger.debug(f"Geocode cache hit for '{key}': {entry!r}")
        return entry

    def put(self, text: str, value: CoordinatePair | _NotFound) -> bool:
        """Store a value unless the key is already present. Returns True if written."""
        key = self.key(text)
        if not key:
            return False
        with self._lock:
            if key in self._entries:
                return False
            self._entries[key] = value
        return True

    def __contains__(self, text: str) -> bool:
        return self.key(text) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        """Start a new session."""
        with self._lock:
            self._entries.clear()
        self.hits = 0
        self.misses = 0

    def stats(self) -> dict:
        not_found = sum(1 for v in self._entries.values() if v is NOT_FOUND)
        return {
            "entries": len(self._entries),
            "resolved": len(self._entries) - not_found,
            "not_found": not_found,
            "hits": self.hits,
            "misses": self.misses,
        }
