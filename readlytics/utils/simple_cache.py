import hashlib
import json
import threading
import time
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Tuple, Dict

DEFAULT_TTL_SECONDS = 60
MAX_ENTRIES = 1024


class TTLCache:
    """In-process TTL cache for derived snapshots, bounded to max_entries.

    Keys are content hashes, so every changed snapshot adds an entry; expired
    entries are purged whenever the bound is reached.
    """
    def __init__(self, default_ttl: int = DEFAULT_TTL_SECONDS, max_entries: int = MAX_ENTRIES):
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self._store: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            item = self._store.get(key)
            if item is None:
                return None
            value, expires_at = item
            if expires_at < time.time():
                del self._store[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        ttl = self.default_ttl if ttl_seconds is None else ttl_seconds
        expires_at = time.time() + max(1, int(ttl))
        with self._lock:
            if key not in self._store and len(self._store) >= self.max_entries:
                self._purge_locked()
            self._store[key] = (value, expires_at)

    def _purge_locked(self) -> None:
        now = time.time()
        for stale in [k for k, (_, exp) in self._store.items() if exp < now]:
            del self._store[stale]
        # Still full: drop the entry closest to expiry
        if len(self._store) >= self.max_entries:
            oldest = min(self._store, key=lambda k: self._store[k][1])
            del self._store[oldest]

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


_cache = TTLCache()


def cache_get(key: str) -> Optional[Any]:
    return _cache.get(key)


def cache_set(key: str, value: Any, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> None:
    _cache.set(key, value, ttl_seconds)


def cache_delete(key: str) -> None:
    _cache.delete(key)


def cache_clear() -> None:
    _cache.clear()


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    raise TypeError(f"Cannot hash value of type {type(value).__name__}")


def snapshot_key(namespace: str, payload: Any) -> str:
    """
    Content hash of an input snapshot.

    Identical snapshots map to the same key regardless of dict ordering, so a
    recomputation is only skipped when the inputs really are unchanged.
    """
    blob = json.dumps(payload, sort_keys=True, default=_json_default, separators=(',', ':'))
    digest = hashlib.md5(blob.encode()).hexdigest()
    return f"{namespace}:{digest}"
