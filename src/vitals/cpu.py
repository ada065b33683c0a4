"""CPU utilisation over a short observation window.

Utilisation is a rate, so every sample reads a cumulative counter twice
roughly one second apart. Two counters are supported:

* aggregate CPU times from ``psutil.cpu_times`` (host view), and
* cgroup v2 ``cpu.stat`` ``usage_usec`` (container view), normalised
  against the number of visible cores.
"""

from __future__ import annotations

import time
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, Tuple

import psutil

from vitals.procfs import read_key_value, read_text

IDLE_FIELDS = ("idle", "iowait")
BUSY_FIELDS = ("user", "nice", "system", "irq", "softirq", "steal")
USEC_PER_SEC = 1_000_000


class CpuStrategy(str, Enum):
    HOST = "host"
    CGROUP = "cgroup"


def select_strategy(containerized: bool, cgroup_cpu_stat: Path) -> CpuStrategy:
    """Use cgroup accounting only inside a container that exposes ``cpu.stat``."""
    if containerized and read_text(cgroup_cpu_stat) is not None:
        return CpuStrategy.CGROUP
    return CpuStrategy.HOST


def split_cpu_times(times: Any) -> Tuple[float, float]:
    """Return ``(idle, total)`` from a ``psutil.cpu_times()`` result.

    ``idle`` includes iowait; ``total`` is the sum of the eight accounting
    fields. Fields the platform does not report count as zero.
    """
    idle = sum(getattr(times, name, 0.0) for name in IDLE_FIELDS)
    busy = sum(getattr(times, name, 0.0) for name in BUSY_FIELDS)
    return idle, idle + busy


def read_cgroup_usage(path: Path) -> Optional[int]:
    """Return cumulative ``usage_usec`` from a cgroup ``cpu.stat`` file."""
    stats = read_key_value(path)
    if stats is None:
        return None
    return stats.get("usage_usec")


def _clamp_percent(value: float) -> int:
    return int(max(0, min(100, value)))


class CpuSampler:
    """Blocking CPU-used percentage sampler.

    The strategy is fixed when the sampler is built, from the one-shot
    container classification and the presence of the cgroup counter.
    """

    def __init__(
        self,
        logger: Any,
        containerized: bool,
        cgroup_cpu_stat_path: Path = Path("/sys/fs/cgroup/cpu.stat"),
        interval: float = 1.0,
        core_count: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.logger = logger
        self.cgroup_cpu_stat_path = Path(cgroup_cpu_stat_path)
        self.interval = interval
        self.core_count = core_count or psutil.cpu_count(logical=True) or 1
        self._sleep = sleep
        self.strategy = select_strategy(containerized, self.cgroup_cpu_stat_path)

    def sample(self) -> int:
        """Return CPU used as an integer percent in ``[0, 100]``.

        Blocks the calling thread for one ``interval``. In cgroup mode the
        host counters are read alongside, so losing the cgroup counter
        mid-window still yields a host reading from the same window.
        """
        if self.strategy is CpuStrategy.CGROUP:
            usage_start = read_cgroup_usage(self.cgroup_cpu_stat_path)
            if usage_start is not None:
                host_start = self._cpu_times()
                self._sleep(self.interval)
                usage_end = read_cgroup_usage(self.cgroup_cpu_stat_path)
                if usage_end is not None:
                    return self._cgroup_percent(usage_end - usage_start)
                self._warn_fallback()
                return self._host_percent(host_start, self._cpu_times())
            self._warn_fallback()

        host_start = self._cpu_times()
        self._sleep(self.interval)
        return self._host_percent(host_start, self._cpu_times())

    def _warn_fallback(self) -> None:
        self.logger.warning(f"cgroup counter {self.cgroup_cpu_stat_path} unreadable, using host CPU times")

    def _cpu_times(self) -> Optional[Tuple[float, float]]:
        try:
            return split_cpu_times(psutil.cpu_times())
        except OSError as exc:
            self.logger.error(f"Error reading CPU times: {exc}")
            return None

    def _host_percent(self, start: Optional[Tuple[float, float]], end: Optional[Tuple[float, float]]) -> int:
        if start is None or end is None:
            return 0
        idle_delta = end[0] - start[0]
        total_delta = end[1] - start[1]
        if total_delta <= 0:
            return 0
        return _clamp_percent((100 * (total_delta - idle_delta)) // total_delta)

    def _cgroup_percent(self, usage_delta: int) -> int:
        capacity = USEC_PER_SEC * self.core_count
        return _clamp_percent((100 * usage_delta) // capacity)
