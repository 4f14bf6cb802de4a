"""Thread-safe request spacing shared by concurrent fetch workers."""

import threading
import time
from typing import Optional

NCBI_RATE = 3.0
NCBI_RATE_WITH_KEY = 10.0


class RateLimiter:
    """Hands out request slots at most ``requests_per_second`` apart.

    Each caller reserves the next free slot under the lock and then sleeps
    outside it, so waiting threads do not serialize on the lock itself.
    A rate of ``None`` or ``0`` disables limiting.
    """

    def __init__(self, requests_per_second: Optional[float]):
        self.rate = requests_per_second or 0.0
        self._interval = 1.0 / self.rate if self.rate > 0 else 0.0
        self._next_slot = 0.0
        self._lock = threading.Lock()

    @classmethod
    def for_ncbi(cls, api_key: Optional[str]) -> "RateLimiter":
        return cls(NCBI_RATE_WITH_KEY if api_key else NCBI_RATE)

    def acquire(self) -> None:
        """Block until this caller's slot comes up."""
        if not self._interval:
            return
        with self._lock:
            now = time.monotonic()
            slot = max(now, self._next_slot)
            self._next_slot = slot + self._interval
        delay = slot - now
        if delay > 0:
            time.sleep(delay)
