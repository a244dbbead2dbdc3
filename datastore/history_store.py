from __future__ import annotations

import logging
from collections import deque
from functools import lru_cache
from itertools import islice
from threading import Lock
from typing import Deque, Optional

from models.readings import ProcessedReading, RawReading
from services.reading_processor import ReadingProcessor
from settings import get_settings

logger = logging.getLogger(__name__)


class HistoryStore:
    """Bounded, most-recent-first history of processed readings."""

    def __init__(self, processor: ReadingProcessor, capacity: int = 100) -> None:
        if capacity < 1:
            raise ValueError("History capacity must be at least 1.")
        self.processor = processor
        self.capacity = capacity
        # appendleft on a bounded deque drops the oldest item from the right
        self._readings: Deque[ProcessedReading] = deque(maxlen=capacity)
        self._lock = Lock()

    def append(self, raw: RawReading) -> ProcessedReading:
        """Process ``raw`` against the current latest reading and store the result."""
        with self._lock:
            previous = self._readings[0] if self._readings else None
            processed = self.processor.process(raw, previous)
            evicting = len(self._readings) == self.capacity
            self._readings.appendleft(processed)
            size = len(self._readings)

        logger.debug(
            "Stored processed reading",
            extra={
                "timestamp": processed.timestamp,
                "pressure_trend": processed.pressure_trend,
                "day_night_state": processed.day_night_state,
                "history_size": size,
                "reason": "capacity eviction" if evicting else None,
            },
        )
        return processed

    def latest(self) -> Optional[ProcessedReading]:
        with self._lock:
            return self._readings[0] if self._readings else None

    def window(self, k: int) -> list[ProcessedReading]:
        """Return up to ``k`` of the most recent readings, newest first."""
        if k <= 0:
            return []
        with self._lock:
            return list(islice(self._readings, k))

    def __len__(self) -> int:
        with self._lock:
            return len(self._readings)


@lru_cache
def build_default_store(capacity: Optional[int] = None) -> HistoryStore:
    """Factory that wires the store with the default processor."""
    settings = get_settings()
    history_capacity = settings.history_capacity if capacity is None else capacity
    return HistoryStore(processor=ReadingProcessor(), capacity=history_capacity)
