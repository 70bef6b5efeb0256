import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from src.app.services.counter_store import ICounterStore


@dataclass
class _Entry:
    value: int
    expires_at: float


class InMemoryCounterStore(ICounterStore):
    """
    In-process counter store.

    Every operation runs under a single lock without awaiting, so increments
    are atomic for both event-loop and thread-pool callers.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.time
        self._entries: Dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def _live(self, key: str, now: float) -> Optional[_Entry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= now:
            del self._entries[key]
            return None
        return entry

    async def increment(self, key: str, window_seconds: int) -> int:
        with self._lock:
            now = self._clock()
            entry = self._live(key, now)
            if entry is None:
                entry = _Entry(value=0, expires_at=now + window_seconds)
                self._entries[key] = entry
            entry.value += 1
            return entry.value

    async def get(self, key: str) -> int:
        with self._lock:
            entry = self._live(key, self._clock())
            return entry.value if entry else 0

    async def set_flag(self, key: str, ttl_seconds: int) -> None:
        with self._lock:
            self._entries[key] = _Entry(value=1, expires_at=self._clock() + ttl_seconds)

    async def has_flag(self, key: str) -> bool:
        with self._lock:
            return self._live(key, self._clock()) is not None

    async def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def purge_expired(self) -> int:
        """Evict every expired entry, returns how many were removed"""
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if e.expires_at <= now]
            for key in expired:
                del self._entries[key]
            return len(expired)

    def __len__(self) -> int:
        return len(self._entries)
