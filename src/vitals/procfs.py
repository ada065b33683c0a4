"""Tolerant readers for kernel pseudo-files under ``/proc`` and ``/sys``."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional


def read_text(path: Path) -> Optional[str]:
    """Safely read a text file, returning ``None`` on access errors.

    :param path: File path to read.
    :return: File contents without surrounding whitespace, or ``None``.
    """
    try:
        return Path(path).read_text().strip()
    except (OSError, UnicodeDecodeError):
        return None


def read_key_value(path: Path) -> Optional[Dict[str, int]]:
    """Parse ``key value [unit]`` lines into a mapping of integers.

    Works for both ``/proc/meminfo`` (``MemTotal:  16303428 kB``) and cgroup
    ``cpu.stat`` (``usage_usec 123``); a trailing colon on the key is dropped.
    Lines whose value is not an integer are skipped.

    :param path: File path to parse.
    :return: Mapping of keys to integer values, or ``None`` if unreadable.
    """
    text = read_text(path)
    if text is None:
        return None

    data: Dict[str, int] = {}
    for line in text.splitlines():
        parts = line.split()
        if len(parts) < 2:
            continue
        try:
            data[parts[0].rstrip(":")] = int(parts[1])
        except ValueError:
            continue
    return data
