from __future__ import annotations

from threading import Lock
from typing import Callable, Dict, Tuple

from utils.misc import epoch_minute, time_s


class FixedWindowRateLimiter:
    """Per-IP request counter over wall-clock minutes.

    Windows are fixed, not sliding: a burst straddling a minute boundary can
    be admitted up to twice the limit. Counters from earlier minutes are
    purged the first time a call lands in a new minute.
    """

    def __init__(self, limit: int, clock: Callable[[], float] = time_s) -> None:
        if limit < 1:
            raise ValueError(f"rate limit must be >= 1, got {limit}")
        self.limit = limit
        self._clock = clock
        self._lock = Lock()
        self._counts: Dict[Tuple[str, int], int] = {}
        self._last_clean = None

    def allow(self, client_ip: str) -> bool:
        window = epoch_minute(self._clock())
        key = (client_ip, window)
        with self._lock:
            if window != self._last_clean:
                self._counts = {k: v for k, v in self._counts.items() if k[1] == window}
                self._last_clean = window
            count = self._counts.get(key, 0) + 1
            self._counts[key] = count
            return count <= self.limit

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)
