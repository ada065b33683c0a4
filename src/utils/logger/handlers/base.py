"""Base class shared by every log handler."""

from typing import List

from utils.logger.config import LogEvent


class BaseLogHandler:
    """Receives flushed batches of :class:`LogEvent` from a logger."""

    async def push(self, records: List[LogEvent]) -> None:
        """Persist or forward a batch of events.

        :param records: Buffered log events awaiting dispatch.
        """
        raise NotImplementedError
