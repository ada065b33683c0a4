"""Log handler that appends every record to a time-rotated file."""

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Literal

from utils.logger.config import LogEvent
from utils.logger.handlers.base import BaseLogHandler

ROTATION_PATTERNS = {
    "daily": "%Y-%m-%d",
    "hourly": "%Y-%m-%d_%H",
}


class RotatingFileHandler(BaseLogHandler):
    """Write buffered log events to one file per rotation window."""

    suffix = ".log"

    def __init__(
        self,
        base_dir: str,
        filename_prefix: str = "",
        create: bool = True,
        rotation: Literal["daily", "hourly"] = "daily",
    ) -> None:
        """Initialise the handler with target directory and rotation scheme.

        :param base_dir: Base directory where log files are written.
        :param filename_prefix: Optional subdirectory grouping this logger's files.
        :param create: Whether to create the directory if missing.
        :param rotation: Granularity of the rotating filenames.
        :raises ValueError: If ``rotation`` is not a known scheme.
        """
        super().__init__()
        if rotation not in ROTATION_PATTERNS:
            raise ValueError(f"Unknown rotation {rotation!r}")

        self.base_dir = Path(base_dir)
        self.filename_prefix = filename_prefix
        self._pattern = ROTATION_PATTERNS[rotation]

        if create:
            self.base_dir.mkdir(parents=True, exist_ok=True)

    def _get_current_filepath(self) -> str:
        """Generate a log file path for the current rotation window."""
        stamp = datetime.now(timezone.utc).strftime(self._pattern)
        filename = f"{stamp}{self.suffix}"
        if self.filename_prefix:
            return str(self.base_dir / self.filename_prefix / filename)
        return str(self.base_dir / filename)

    def _select(self, records: List[LogEvent]) -> List[str]:
        return [ev.text for ev in records]

    async def push(self, records: List[LogEvent]) -> None:
        """Append log records to the current rotation file.

        :param records: Buffered log events awaiting persistence.
        """
        lines = self._select(records)
        if not lines:
            return
        filepath = self._get_current_filepath()
        os.makedirs(os.path.dirname(filepath), exist_ok=True)

        with open(filepath, "a", encoding="utf-8") as file:
            file.write("\n".join(lines) + "\n")
            file.flush()
