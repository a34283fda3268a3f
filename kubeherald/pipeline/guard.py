"""Arrival-order guard: a global high-watermark over event creation times.

Events whose creation time is strictly older than the newest one already
admitted are replays from the watch stream and are rejected. Equal
timestamps pass. The watermark is shared by every namespace and object, so
a late event for one object is rejected once a newer event for any other
object has been admitted.
"""

from __future__ import annotations

import threading
from datetime import datetime

from kubeherald.models.events import CanonicalEvent


class PipelineState:
    """Process-wide watermark guarded by a lock.

    The lock makes the read-compare-update in ``admit`` atomic across
    concurrently processed events, whether they run as tasks or threads.
    """

    def __init__(self, last_accepted_creation_time: datetime | None = None) -> None:
        self._lock = threading.Lock()
        self._last_accepted = last_accepted_creation_time

    @property
    def last_accepted_creation_time(self) -> datetime | None:
        with self._lock:
            return self._last_accepted

    def advance(self, timestamp: datetime) -> bool:
        """Move the watermark to *timestamp* unless it is strictly older.

        Returns False, leaving the watermark untouched, for older timestamps.
        """
        with self._lock:
            if self._last_accepted is not None and self._last_accepted > timestamp:
                return False
            self._last_accepted = timestamp
            return True


def admit(event: CanonicalEvent, state: PipelineState) -> bool:
    """Return True if *event* is not older than the current watermark."""
    if event.creation_timestamp is None:
        return True
    return state.advance(event.creation_timestamp)
