"""In-memory stores for per-session trips and per-listing open calendars."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, Generic, Optional, TypeVar

from ..core.config import settings
from .availability import CalendarState
from .trip import TripState

T = TypeVar("T")


@dataclass
class _Entry(Generic[T]):
    value: T
    last_seen: float


class SessionStore(Generic[T]):
    """Very small in-memory registry with TTL eviction."""

    def __init__(self, ttl_seconds: int = 900) -> None:
        self._ttl = ttl_seconds
        self._entries: Dict[str, _Entry[T]] = {}

    def get(self, key: str) -> Optional[T]:
        self._evict_expired()
        entry = self._entries.get(key)
        if not entry:
            return None
        entry.last_seen = time.time()
        return entry.value

    def save(self, key: str, value: T) -> None:
        self._evict_expired()
        self._entries[key] = _Entry(value=value, last_seen=time.time())

    def clear(self, key: str) -> None:
        self._entries.pop(key, None)

    def _evict_expired(self) -> None:
        now = time.time()
        expired = [key for key, entry in self._entries.items() if now - entry.last_seen > self._ttl]
        for key in expired:
            self._entries.pop(key, None)


trip_store: SessionStore[TripState] = SessionStore(ttl_seconds=settings.session_ttl_seconds)
calendar_store: SessionStore[CalendarState] = SessionStore(ttl_seconds=settings.session_ttl_seconds)
