"""Process-monotonic wall clock."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from threading import Lock

from parley.core.settings import settings
from parley.models.timestamp import Timestamp

logger = logging.getLogger(__name__)


class MonotonicClock:
    """Whole-second wall clock that never runs backwards within a process.

    If the underlying source steps back, ``now`` keeps returning the last
    value until the source catches up.
    """

    def __init__(
        self,
        source: Callable[[], float] = time.time,
        *,
        max_backward_seconds: int | None = None,
    ) -> None:
        self._source = source
        self._last = 0
        self._lock = Lock()
        if max_backward_seconds is None:
            max_backward_seconds = settings.clock_max_backward_seconds
        self._max_backward_seconds = max_backward_seconds

    def now(self) -> Timestamp:
        """Return a timestamp no earlier than any previously returned."""
        with self._lock:
            current = int(self._source())
            if current < self._last:
                step = self._last - current
                level = logging.WARNING if step > self._max_backward_seconds else logging.DEBUG
                logger.log(level, "Wall clock stepped back %d s; holding at %d", step, self._last)
                current = self._last
            self._last = current
            return Timestamp(current)


_CLOCK = MonotonicClock()


def get_clock() -> MonotonicClock:
    """Return the process-wide clock."""
    return _CLOCK


def now() -> Timestamp:
    """Return the current time from the process-wide clock."""
    return _CLOCK.now()
