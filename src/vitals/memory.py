"""Memory utilisation from ``psutil.virtual_memory``."""

from __future__ import annotations

from typing import Any

import psutil

SAMPLE_FAILED = -1


def used_percent(available: int, total: int) -> int:
    """Return ``100 - floor(available * 100 / total)``; callers guard ``total``."""
    return 100 - (available * 100) // total


class MemorySampler:
    """Percent of memory in use, based on available memory.

    ``available`` (``MemAvailable`` on Linux) already excludes reclaimable
    page cache, so subtracting it from the total approximates the working set
    better than free memory does.
    """

    def __init__(self, logger: Any) -> None:
        self.logger = logger

    def sample(self) -> int:
        """Return memory used as an integer percent, or ``-1`` on failure."""
        try:
            memory = psutil.virtual_memory()
        except OSError as exc:
            self.logger.error(f"Error reading virtual memory statistics: {exc}")
            return SAMPLE_FAILED

        if memory.total <= 0:
            self.logger.warning(f"Total memory unexpectedly {memory.total}")
            return SAMPLE_FAILED

        return used_percent(memory.available, memory.total)
