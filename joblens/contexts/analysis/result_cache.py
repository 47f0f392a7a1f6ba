"""
Per-URL cache of analysis results.

Entries live under "cache_<hash>" as {"result", "timestamp" (epoch ms), "url"}.
Expiry is lazy: an entry whose age has reached the TTL is deleted when it is read.

The key hash is a 32-bit string hash, not a cryptographic one. Two URLs that
collide share a slot and the later write wins.
"""

from typing import Any, Callable, Dict, Optional

from joblens.contexts.analysis.logger import _log_debug
from joblens.utils.kv_store import KeyValueStore
from joblens.utils.timestamp import epoch_ms

CACHE_PREFIX = "cache_"
CACHE_TTL_MS = 24 * 60 * 60 * 1000

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def hash_url(url: str) -> str:
    """
    hash = hash * 31 + code_unit over UTF-16 code units, wrapped to a signed
    32-bit int; the absolute value rendered in base 36.
    """
    h = 0
    encoded = url.encode("utf-16-le")
    for i in range(0, len(encoded), 2):
        code_unit = encoded[i] | (encoded[i + 1] << 8)
        h = ((h << 5) - h + code_unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return _to_base36(abs(h))


def cache_key(url: str) -> str:
    return f"{CACHE_PREFIX}{hash_url(url)}"


class ResultCache:
    """
    TTL cache of backend results keyed by page URL.

    Args:
        store: Shared key-value store
        ttl_ms: Entry lifetime in milliseconds
        clock: Returns the current epoch milliseconds (injectable for tests)
    """

    def __init__(
        self,
        store: KeyValueStore,
        ttl_ms: int = CACHE_TTL_MS,
        clock: Callable[[], int] = epoch_ms,
    ):
        self.store = store
        self.ttl_ms = ttl_ms
        self.clock = clock

    def get(self, url: str) -> Optional[Dict[str, Any]]:
        """Cached result for url, or None if absent, expired or unreadable (those are deleted)."""
        if not url:
            return None
        key = cache_key(url)
        entry = self.store.get([key]).get(key)
        if entry is None:
            return None
        if not isinstance(entry, dict):
            self.store.remove([key])
            _log_debug(f"Dropped unreadable cache entry for {url}")
            return None

        if self.clock() - entry.get("timestamp", 0) >= self.ttl_ms:
            self.store.remove([key])
            _log_debug(f"Cache entry expired for {url}")
            return None
        return entry.get("result")

    def put(self, url: str, result: Dict[str, Any]) -> None:
        """Store result for url, overwriting any previous entry. Empty url is a no-op."""
        if not url:
            return
        self.store.set({cache_key(url): {"result": result, "timestamp": self.clock(), "url": url}})

    def clear(self) -> int:
        """Delete every cache entry. Returns how many were removed."""
        keys = [key for key in self.store.get_all() if key.startswith(CACHE_PREFIX)]
        if keys:
            self.store.remove(keys)
        _log_debug(f"Cleared {len(keys)} cache entries")
        return len(keys)
