"""
In-memory throttle for persistent alert conditions.

Entries are keyed by (service, network, reason) and hold the time the
condition was first seen, or last alerted on. The store belongs to one
monitor instance and is rebuilt empty on every process start.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from datetime import datetime, timedelta
from typing import NamedTuple


class ThrottleKey(NamedTuple):
    service_name: str
    network: str
    reason: str


class AlertThrottle:
    """Detect-then-throttle gate; every read-modify-write happens under one lock."""

    def __init__(self, *, window: timedelta) -> None:
        self.window = window
        self._entries: dict[ThrottleKey, datetime] = {}
        self._lock = threading.Lock()

    def should_alert(self, key: ThrottleKey, now: datetime) -> bool:
        """Record the condition and report whether an alert is due.

        The first sighting only arms the gate. Once `window` has elapsed since the
        recorded time the caller should alert, and the gate re-arms from `now`.
        """

        with self._lock:
            first_seen = self._entries.get(key)
            if first_seen is None:
                self._entries[key] = now
                return False
            if now - first_seen >= self.window:
                self._entries[key] = now
                return True
            return False

    def clear(self, key: ThrottleKey) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def retain(self, keys: Iterable[ThrottleKey]) -> int:
        """Drop every entry whose key is not in `keys`; return how many were dropped."""

        keep = set(keys)
        with self._lock:
            stale = [key for key in self._entries if key not in keep]
            for key in stale:
                del self._entries[key]
        return len(stale)

    def reset(self) -> None:
        with self._lock:
            self._entries.clear()

    def get(self, key: ThrottleKey) -> datetime | None:
        with self._lock:
            return self._entries.get(key)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[ThrottleKey]:
        with self._lock:
            return iter(list(self._entries))
