# src/repodigest/cache.py
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple


class TTLCache:
    """In-memory key/value store whose entries expire after a TTL."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._store: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            item = self._store.get(key)
            if item is None:
                return None
            value, expiry = item
            if self._clock() > expiry:
                del self._store[key]
                return None
            return value

    def set_with_ttl(self, key: str, value: Any, ttl_seconds: float) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        with self._lock:
            self._store[key] = (value, self._clock() + ttl_seconds)

    def __len__(self) -> int:
        return len(self._store)
