"""One-shot detection of whether this process runs inside a container."""

from __future__ import annotations

import os
from pathlib import Path

from vitals.procfs import read_text

CONTAINER_RUNTIMES = frozenset({"lxc", "docker", "oci"})
CGROUP_V1_MARKERS = ("/lxc/", "/docker/")
UNLIMITED_CPU_MAX = "max 100000"


class ContainerDetector:
    """Classify the runtime environment as container or host.

    Checks run in order and stop at the first positive signal. Missing or
    unreadable files are treated as "no signal", never as an error.
    """

    def __init__(
        self,
        systemd_marker: Path = Path("/run/systemd/container"),
        docker_marker: Path = Path("/.dockerenv"),
        cgroup_cpu_max: Path = Path("/sys/fs/cgroup/cpu.max"),
        cgroup_membership: Path = Path("/proc/1/cgroup"),
    ) -> None:
        self.systemd_marker = Path(systemd_marker)
        self.docker_marker = Path(docker_marker)
        self.cgroup_cpu_max = Path(cgroup_cpu_max)
        self.cgroup_membership = Path(cgroup_membership)

    def _systemd_says_container(self) -> bool:
        return read_text(self.systemd_marker) in CONTAINER_RUNTIMES

    def _docker_marker_present(self) -> bool:
        return os.path.exists(self.docker_marker)

    def _cpu_quota_enforced(self) -> bool:
        line = read_text(self.cgroup_cpu_max)
        if line is None:
            return False
        return line != UNLIMITED_CPU_MAX and not line.startswith("max ")

    def _cgroup_v1_container(self) -> bool:
        content = read_text(self.cgroup_membership)
        if content is None:
            return False
        return any(marker in content for marker in CGROUP_V1_MARKERS)

    def detect(self) -> bool:
        """Return ``True`` when any container signal is found."""
        return (
            self._systemd_says_container()
            or self._docker_marker_present()
            or self._cpu_quota_enforced()
            or self._cgroup_v1_container()
        )
