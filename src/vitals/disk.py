"""Root filesystem utilisation via ``statvfs``."""

from __future__ import annotations

from typing import Any

import psutil

from vitals.memory import SAMPLE_FAILED, used_percent


class DiskSampler:
    """Percent of a mount point's blocks in use.

    ``psutil.disk_usage`` reports ``total`` as ``f_blocks * f_frsize`` and
    ``free`` as ``f_bavail * f_frsize`` (space available to unprivileged
    users), so the ratio equals the block-count ratio.
    """

    def __init__(self, logger: Any, mount_point: str = "/") -> None:
        self.logger = logger
        self.mount_point = mount_point

    def sample(self) -> int:
        """Return disk used as an integer percent, or ``-1`` on failure."""
        try:
            usage = psutil.disk_usage(self.mount_point)
        except OSError as exc:
            self.logger.error(f"Error fetching statfs for {self.mount_point!r}: {exc}")
            return SAMPLE_FAILED

        if usage.total <= 0:
            self.logger.warning(f"Total space of {self.mount_point!r} unexpectedly zero")
            return SAMPLE_FAILED

        return used_percent(usage.free, usage.total)
