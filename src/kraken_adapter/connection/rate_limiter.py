# src/kraken_adapter/connection/rate_limiter.py

import threading
import time
from typing import Callable, Optional


class RateLimiter:
    """
    Spaces outgoing calls at least ``1 / calls_per_second`` seconds apart.

    One limiter can be shared by several transports so that their combined
    request rate stays under Kraken's public call allowance.
    """

    def __init__(
        self,
        calls_per_second: float,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        if calls_per_second <= 0:
            raise ValueError("Rate must be positive")
        self.rate = calls_per_second
        self.interval = 1.0 / self.rate
        self._clock = clock or time.monotonic
        self._sleep = sleep or time.sleep
        self._next_allowed: Optional[float] = None
        self.lock = threading.Lock()

    def wait(self) -> float:
        """
        Blocks until the next call is allowed. Returns the time spent sleeping.
        """
        with self.lock:
            now = self._clock()
            delay = 0.0
            if self._next_allowed is not None and now < self._next_allowed:
                delay = self._next_allowed - now
                self._sleep(delay)
            # Schedule from the ideal slot, not from when sleep returned.
            start = max(now, self._next_allowed or now)
            self._next_allowed = start + self.interval
            return delay
