# data/caching.py
"""
In-memory resolver caches.

Each engine instance owns two of these (ETF constituents and sector data).
Keys move from unresolved to resolved and stay there until clear() is
called; there is no TTL inside the engine.
"""

import threading
from typing import Dict, Generic, Iterable, List, Optional, TypeVar

from lookthrough.utils.logging_config import get_logger

logger = get_logger(__name__)

V = TypeVar("V")


def get_cache_key(identifier: str) -> str:
    """Generates a standardized cache key."""
    return str(identifier).upper().strip()


def unique_cache_keys(identifiers: Iterable[str]) -> List[str]:
    """Cache keys for identifiers, de-duplicated in first-seen order. Blanks are dropped."""
    seen = set()
    ordered = []
    for identifier in identifiers:
        key = get_cache_key(identifier)
        if key and key not in seen:
            seen.add(key)
            ordered.append(key)
    return ordered


class ResolverCache(Generic[V]):
    """
    Thread-safe symbol -> value map.

    Concurrent writers of the same key are idempotent: values for one
    symbol come from the same catalog or lookup, so last write wins.
    """

    def __init__(self, name: str):
        self.name = name
        self._data: Dict[str, V] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, symbol: str) -> Optional[V]:
        key = get_cache_key(symbol)
        with self._lock:
            value = self._data.get(key)
            if value is None:
                self._misses += 1
            else:
                self._hits += 1
            return value

    def get_many(self, symbols: Iterable[str]) -> Dict[str, V]:
        """Return cached values for the given symbols, skipping misses."""
        found = {}
        for symbol in symbols:
            value = self.get(symbol)
            if value is not None:
                found[get_cache_key(symbol)] = value
        return found

    def set(self, symbol: str, value: V) -> None:
        key = get_cache_key(symbol)
        with self._lock:
            self._data[key] = value

    def __contains__(self, symbol: str) -> bool:
        with self._lock:
            return get_cache_key(symbol) in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def keys(self) -> List[str]:
        with self._lock:
            return sorted(self._data)

    def clear(self) -> int:
        """Drop every entry. Returns the number of entries removed."""
        with self._lock:
            removed = len(self._data)
            self._data.clear()
            self._hits = 0
            self._misses = 0
        logger.info(f"Cleared {removed} entries from {self.name} cache")
        return removed

    def stats(self) -> dict:
        with self._lock:
            return {
                "name": self.name,
                "entries": len(self._data),
                "hits": self._hits,
                "misses": self._misses,
            }
