"""
Rate keeping for the synthetic pose feed.
Provides a monotonic wall-clock rate keeper for fixed-rate producer loops.
"""

from __future__ import annotations

import time

from common.logger import get_logger

logger = get_logger("realtime")


def monotonic_time() -> float:
    """Return monotonic time in seconds."""
    return time.monotonic()


class RateKeeper:
    """
    Maintain a fixed loop rate:
    - monitor_time(): update timing statistics, return remaining time (negative if late)
    - keep_time(): call monitor_time() then sleep for remaining time, if positive
    """

    def __init__(self, rate_hz: float, clock=monotonic_time, lag_warn_threshold: float | None = 0.05):
        if rate_hz <= 0.0:
            raise ValueError("rate_hz must be positive")
        self.period = 1.0 / rate_hz
        self.clock = clock
        self.lag_warn_threshold = lag_warn_threshold
        self.frame = 0
        self._next = self.clock() + self.period

    def monitor_time(self) -> float:
        now = self.clock()
        remaining = self._next - now
        if self.lag_warn_threshold is not None and remaining < -self.lag_warn_threshold:
            logger.debug(f"Lagging by {-remaining * 1000:.2f} ms (frame {self.frame})")
        self._next += self.period
        self.frame += 1
        return remaining

    def keep_time(self, sleep=time.sleep) -> None:
        remaining = self.monitor_time()
        if remaining > 0.0:
            sleep(remaining)
