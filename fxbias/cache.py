"""In-memory cache with TTL, used to memoize indicator analyses and market data."""
import hashlib
import json
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from fxbias.utils.errors import CacheError
from fxbias.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 30 * 60


@dataclass
class CacheEntry(Generic[T]):
    data: T
    timestamp: float  # epoch seconds


class TTLCache:
    """Key/value store with lazy expiry on read.

    Entries are only evicted when read after their TTL or by
    `cleanup_expired`; growth is otherwise unbounded for the lifetime of
    the instance.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache: Dict[str, CacheEntry[Any]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: str) -> bool:
        return key in self._cache

    def _is_fresh(self, entry: CacheEntry[Any], now: float) -> bool:
        return now - entry.timestamp < self.ttl_seconds

    def set(self, key: str, value: Any) -> None:
        """Store value stamped with the current time."""
        with self._lock:
            self._cache[key] = CacheEntry(data=value, timestamp=self._clock())
        logger.debug(f"Cache SET for key: {key}")

    def get(self, key: str) -> Optional[Any]:
        """Retrieve value if not expired; stale entries are evicted."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            if self._is_fresh(entry, self._clock()):
                logger.debug(f"Cache HIT for key: {key}")
                return entry.data
            del self._cache[key]
        logger.debug(f"Cache STALE for key: {key}")
        return None

    def delete(self, key: str) -> None:
        with self._lock:
            self._cache.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def cleanup_expired(self) -> int:
        """Remove expired entries. Returns count removed."""
        with self._lock:
            now = self._clock()
            expired = [k for k, v in self._cache.items() if not self._is_fresh(v, now)]
            for key in expired:
                del self._cache[key]
            return len(expired)

    def stats(self) -> Dict[str, int]:
        with self._lock:
            now = self._clock()
            active = sum(1 for v in self._cache.values() if self._is_fresh(v, now))
            return {
                "total_entries": len(self._cache),
                "active_entries": active,
                "expired_entries": len(self._cache) - active,
            }

    @staticmethod
    def create_key(prefix: str, payload: Any) -> str:
        """
        Build a deterministic key from a prefix and a JSON-serializable payload.

        The payload is serialized canonically (sorted keys, compact separators)
        so logically equal payloads map to the same key regardless of dict
        ordering.

        Returns:
            "{prefix}:{hash}" where hash is a non-negative integer

        Raises:
            CacheError: If the payload cannot be serialized
        """
        try:
            canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), allow_nan=False)
        except (TypeError, ValueError) as e:
            raise CacheError(f"Cannot build cache key for {prefix!r}: {e}") from e
        digest = hashlib.md5(canonical.encode("utf-8")).hexdigest()[:12]
        return f"{prefix}:{int(digest, 16)}"
