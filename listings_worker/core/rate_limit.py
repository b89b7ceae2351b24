"""Pacing helpers placed between calls to rate-limited vendors."""

import logging
import time
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class RateLimiter(Protocol):
    def wait(self) -> None:
        ...


class FixedDelayLimiter:
    """Sleeps the same delay on every call."""

    def __init__(self, delay: float) -> None:
        if delay < 0:
            raise ValueError("delay must be non-negative")
        self.delay = delay

    def wait(self) -> None:
        if self.delay:
            time.sleep(self.delay)


class MinIntervalLimiter:
    """Guarantees at least ``interval`` seconds between consecutive releases.

    Time already spent since the previous release counts towards the interval,
    so slow work between calls is not padded with an extra full delay.
    """

    def __init__(self, interval: float) -> None:
        if interval < 0:
            raise ValueError("interval must be non-negative")
        self.interval = interval
        self._last_release: Optional[float] = None

    def wait(self) -> None:
        now = time.monotonic()
        if self._last_release is not None:
            remaining = self.interval - (now - self._last_release)
            if remaining > 0:
                logger.debug("Rate limiter sleeping %.3fs", remaining)
                time.sleep(remaining)
                now = time.monotonic()
        self._last_release = now
