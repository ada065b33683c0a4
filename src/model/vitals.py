from dataclasses import dataclass


@dataclass(frozen=True)
class MetricReading:
    """One sampled percentage and the threshold it is judged against."""

    percent: int
    threshold: int

    @property
    def okay(self) -> bool:
        # A value equal to the threshold already fails.
        return self.percent < self.threshold

    def status(self, name: str) -> str:
        return f"{name}_okay" if self.okay else f"{name}_fail"


@dataclass(frozen=True)
class VitalsSnapshot:
    """Fresh per-request reading of memory, disk and CPU utilisation.

    A sampler failure shows up as a negative ``percent``, left as-is.
    """

    mem: MetricReading
    disk: MetricReading
    cpu: MetricReading
