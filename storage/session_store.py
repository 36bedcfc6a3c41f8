"""In-memory session store with TTL expiry."""

import threading
import time
from typing import Any, Callable, Mapping, Optional

from storage.base import SessionStore

DEFAULT_TTL = 24 * 60 * 60
DEFAULT_SWEEP_INTERVAL = 60 * 60


class MemorySessionStore(SessionStore):
    """Keeps ``sid -> (expires_at, data)`` in a dict.

    Expired entries are dropped lazily on lookup, and a full sweep runs at most
    once per ``sweep_interval`` seconds whenever the store is touched.
    """

    def __init__(
        self,
        ttl: int = DEFAULT_TTL,
        sweep_interval: int = DEFAULT_SWEEP_INTERVAL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl = ttl
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, tuple[float, dict]] = {}
        self._last_sweep = clock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _maybe_sweep(self, now: float) -> None:
        if now - self._last_sweep >= self.sweep_interval:
            self._sweep_locked(now)

    def _sweep_locked(self, now: float) -> int:
        expired = [sid for sid, (expires_at, _) in self._entries.items() if expires_at <= now]
        for sid in expired:
            del self._entries[sid]
        self._last_sweep = now
        return len(expired)

    def get(self, sid: str) -> Optional[dict]:
        now = self._clock()
        with self._lock:
            self._maybe_sweep(now)
            entry = self._entries.get(sid)
            if entry is None:
                return None
            expires_at, data = entry
            if expires_at <= now:
                del self._entries[sid]
                return None
            return dict(data)

    def set(self, sid: str, data: Mapping[str, Any]) -> None:
        now = self._clock()
        with self._lock:
            self._maybe_sweep(now)
            self._entries[sid] = (now + self.ttl, dict(data))

    def destroy(self, sid: str) -> bool:
        with self._lock:
            return self._entries.pop(sid, None) is not None

    def sweep(self) -> int:
        now = self._clock()
        with self._lock:
            return self._sweep_locked(now)
