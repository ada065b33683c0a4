"""Vitals service: runs the three samplers and judges them against thresholds."""

from __future__ import annotations

from typing import Any, Optional

from configs.settings import ThresholdConfig
from model.vitals import MetricReading, VitalsSnapshot
from vitals.container import ContainerDetector
from vitals.cpu import CpuSampler
from vitals.disk import DiskSampler
from vitals.memory import MemorySampler


class VitalsService:
    """Produce a new :class:`VitalsSnapshot` on every call to :meth:`respond`.

    Nothing is cached between calls; concurrent callers each take their own
    one-second CPU sample.
    """

    def __init__(
        self,
        thresholds: ThresholdConfig,
        memory: MemorySampler,
        disk: DiskSampler,
        cpu: CpuSampler,
    ) -> None:
        """Wire the samplers to the shared thresholds.

        :param thresholds: Immutable per-process thresholds.
        :param memory: Memory sampler.
        :param disk: Disk sampler.
        :param cpu: CPU sampler; dominates latency.
        """
        self.thresholds = thresholds
        self.memory = memory
        self.disk = disk
        self.cpu = cpu

    @classmethod
    def build(
        cls,
        thresholds: ThresholdConfig,
        logger: Any,
        detector: Optional[ContainerDetector] = None,
    ) -> "VitalsService":
        """Classify the environment once and construct the default samplers.

        :param thresholds: Immutable per-process thresholds.
        :param logger: Logger shared by the samplers.
        :param detector: Container detector; defaults to the real host paths.
        :return: Ready-to-use service.
        """
        detector = detector or ContainerDetector()
        containerized = detector.detect()
        cpu = CpuSampler(logger, containerized=containerized)
        logger.info(
            f"Runtime environment: {'container' if containerized else 'host'}; "
            f"CPU strategy: {cpu.strategy.value} ({cpu.core_count} cores)"
        )
        return cls(thresholds, MemorySampler(logger), DiskSampler(logger), cpu)

    def respond(self) -> VitalsSnapshot:
        mem = self.memory.sample()
        disk = self.disk.sample()
        cpu = self.cpu.sample()
        return VitalsSnapshot(
            mem=MetricReading(mem, self.thresholds.mem_threshold),
            disk=MetricReading(disk, self.thresholds.disk_threshold),
            cpu=MetricReading(cpu, self.thresholds.cpu_threshold),
        )
