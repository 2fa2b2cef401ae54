# src/kraken_adapter/connection/nonce.py

import threading
import time
from typing import Callable, Optional


def _epoch_milliseconds() -> int:
    return time.time_ns() // 1_000_000


class NonceGenerator:
    """
    Generates strictly increasing nonces for one set of Kraken API credentials.

    Nonces are epoch milliseconds. Calls landing in the same millisecond, or a
    clock that steps backwards, get the previous nonce plus one. Allocation is
    serialized by a lock so concurrent private calls never share a nonce.
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        self._clock = clock or _epoch_milliseconds
        self._lock = threading.Lock()
        self._last_nonce = 0

    @property
    def last_nonce(self) -> int:
        return self._last_nonce

    def generate(self) -> int:
        with self._lock:
            nonce = int(self._clock())
            if nonce <= self._last_nonce:
                nonce = self._last_nonce + 1
            self._last_nonce = nonce
            return nonce
