"""Time helpers used by the logger and the rate limiter."""

from __future__ import annotations

import datetime
import time


def time_s() -> float:
    """Return the current wall-clock time in seconds as a float."""

    return time.time()


def epoch_minute(now: float | None = None) -> int:
    """Return the index of the wall-clock minute containing ``now``.

    :param now: Unix timestamp in seconds; defaults to the current time.
    :return: ``floor(now / 60)`` as an integer.
    """

    if now is None:
        now = time_s()
    return int(now) // 60


def time_iso8601() -> str:
    """Return the current UTC time formatted as ``YYYY-MM-DDTHH:MM:SS.fffZ``."""

    dt = datetime.datetime.now(datetime.timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"
