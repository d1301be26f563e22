from __future__ import annotations

import logging
from collections import deque
from threading import Lock
from typing import Deque, List, Optional

logger = logging.getLogger(__name__)


class ErrorLog:
    """Ordered record of raw submissions that failed validation.

    Every operation holds the same lock, so concurrent appends are never lost
    and a snapshot never observes a half-applied clear. With ``capacity`` set
    the log keeps only the newest ``capacity`` entries.
    """

    def __init__(self, capacity: Optional[int] = None) -> None:
        if capacity is not None and capacity <= 0:
            raise ValueError("Error log capacity must be positive.")
        self._entries: Deque[str] = deque(maxlen=capacity)
        self._lock = Lock()

    @property
    def capacity(self) -> Optional[int]:
        return self._entries.maxlen

    def append(self, raw: str) -> None:
        with self._lock:
            evicting = self._entries.maxlen is not None and len(self._entries) == self._entries.maxlen
            self._entries.append(raw)
        if evicting:
            logger.debug("Error log full, evicted oldest entry", extra={"capacity": self.capacity})

    def snapshot(self) -> List[str]:
        """Return a copy of the current entries in append order."""

        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
