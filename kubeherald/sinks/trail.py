"""In-memory trail buffer.

Keeps the most recent trail entries, oldest dropped first, so that the
alert sink can attach recent cluster context to whatever fires next.
"""

from __future__ import annotations

import threading
from collections import deque

from kubeherald.models.alerts import TrailEntry
from kubeherald.sinks.base import TrailSink

DEFAULT_MAX_ENTRIES = 100


class TrailBuffer(TrailSink):
    """Bounded, thread-safe ring buffer of trail entries."""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._max_entries = max_entries
        self._entries: deque[TrailEntry] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def append_trail_entry(self, entry: TrailEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def snapshot(self) -> list[TrailEntry]:
        """Return the buffered entries, oldest first."""
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
