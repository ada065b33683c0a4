"""Asynchronous buffered logger that feeds custom handlers."""

import asyncio
import sys
import threading
import traceback
from typing import Optional

from colorama import Fore, Style, init as colorama_init

from utils.logger.config import LogEvent, LogLevel, LoggerConfig
from utils.logger.handlers.base import BaseLogHandler
from utils.misc import time_iso8601, time_s

colorama_init(autoreset=True)


LOG_COLORS = {
    LogLevel.TRACE: Fore.LIGHTBLACK_EX,
    LogLevel.DEBUG: Fore.LIGHTBLACK_EX,
    LogLevel.INFO: Fore.GREEN,
    LogLevel.WARNING: Fore.YELLOW,
    LogLevel.ERROR: Fore.RED + Style.BRIGHT,
    LogLevel.CRITICAL: Fore.RED + Style.BRIGHT,
}

# Lifecycle lines are flushed straight away so they reach disk before a crash.
FLUSH_KEYWORDS = ("listening on", "shutdown", "Shutting down", "Critical")


class Logger:
    """Asynchronous logger that buffers messages before dispatching them.

    Log calls may come from the event loop or from worker threads (sync
    FastAPI routes run in a thread pool). Off-loop records are handed to the
    loop thread, so the underlying :class:`asyncio.Queue` is only ever touched
    from the thread that owns it.
    """

    def __init__(
        self,
        config: LoggerConfig = None,
        name: str = "",
        handlers: Optional[list[BaseLogHandler]] = None,
    ):
        """Initialise the logger with optional configuration and handlers.

        :param config: Configuration settings controlling buffering and output.
        :param name: Name prefix used in emitted log records.
        :param handlers: Sequence of handlers derived from :class:`BaseLogHandler`.
        :raises TypeError: If a provided handler does not extend :class:`BaseLogHandler`.
        """
        self._config = config
        if self._config is None:
            self._config = LoggerConfig()

        self._name = name

        self._handlers = handlers
        if self._handlers is None:
            self._handlers = []

        for handler in self._handlers:
            if not isinstance(handler, BaseLogHandler):
                raise TypeError(f"Invalid handler type; expected BaseLogHandler but got {type(handler)}")

        self._buffer: list[LogEvent] = []
        self._buffer_start_time = time_s()

        self._msg_queue: asyncio.Queue = asyncio.Queue()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._loop_thread: Optional[int] = None
        self._is_running = True

        self._log_ingestor_task = None

    async def _flush_buffer(self) -> None:
        """Flush the buffered log events to all registered handlers."""
        batch = list(self._buffer)
        for handler in self._handlers:
            await handler.push(batch)
        self._buffer.clear()
        self._buffer_start_time = time_s()

    async def _log_ingestor(self) -> None:
        """Consume queued log events and dispatch them to handlers."""
        try:
            while self._is_running or not self._msg_queue.empty():
                try:
                    event: LogEvent = await self._msg_queue.get()
                except asyncio.CancelledError:
                    break
                except Exception:
                    traceback.print_exc(file=sys.stderr)
                    break

                try:
                    self._buffer.append(event)

                    if self._config.do_stdout:
                        color = LOG_COLORS.get(event.level, "")
                        print(color + event.text + Style.RESET_ALL)

                    should_flush_immediately = (
                        event.level.value >= LogLevel.WARNING.value
                        or any(keyword in event.text for keyword in FLUSH_KEYWORDS)
                    )

                    if should_flush_immediately:
                        await self._flush_buffer()
                    else:
                        is_buffer_full = len(self._buffer) >= self._config.buffer_capacity
                        is_buffer_expired = (time_s() - self._buffer_start_time) >= self._config.buffer_timeout

                        if is_buffer_full or is_buffer_expired:
                            await self._flush_buffer()

                except Exception:
                    traceback.print_exc(file=sys.stderr)
                finally:
                    self._msg_queue.task_done()

        except asyncio.CancelledError:
            print("[Logger] Log ingestor cancelled")

    def _enqueue(self, event: LogEvent) -> None:
        """Put ``event`` on the queue from whichever thread is calling."""
        loop = self._loop
        if loop is None or threading.get_ident() == self._loop_thread:
            self._msg_queue.put_nowait(event)
            return
        try:
            loop.call_soon_threadsafe(self._msg_queue.put_nowait, event)
        except RuntimeError:
            # Loop already closed; nothing will drain the queue any more.
            print(event.text, file=sys.stderr)

    def _process_log(self, level: LogLevel, msg: str) -> None:
        """Submit a log message to the queue if it meets the base level.

        :param level: Severity level associated with the message.
        :param msg: Log message text.
        """
        try:
            log_msg = self._config.str_format % {
                "asctime": time_iso8601(),
                "name": self._name,
                "levelname": level.name,
                "message": msg,
            }
            self._enqueue(LogEvent(text=log_msg, level=level))
        except Exception:
            traceback.print_exc(file=sys.stderr)

    async def _drain(self, timeout: float | None = None) -> None:
        """Wait for the queue to empty, respecting an optional timeout.

        :param timeout: Maximum seconds to wait for the queue to drain.
        :raises asyncio.TimeoutError: If the drain does not complete in time.
        """
        async def _join():
            await self._msg_queue.join()
        if timeout is None:
            await _join()
        else:
            await asyncio.wait_for(_join(), timeout=timeout)

    def debug(self, msg: str) -> None:
        """Emit a debug-level log message."""
        if self._is_running and self._config.base_level <= LogLevel.DEBUG:
            self._process_log(LogLevel.DEBUG, msg)

    def info(self, msg: str) -> None:
        """Emit an info-level log message."""
        if self._is_running and self._config.base_level <= LogLevel.INFO:
            self._process_log(LogLevel.INFO, msg)

    def warning(self, msg: str) -> None:
        """Emit a warning-level log message."""
        if self._is_running and self._config.base_level <= LogLevel.WARNING:
            self._process_log(LogLevel.WARNING, msg)

    def error(self, msg: str) -> None:
        """Emit an error-level log message."""
        if self._is_running and self._config.base_level <= LogLevel.ERROR:
            self._process_log(LogLevel.ERROR, msg)

    async def start(self) -> None:
        """Start the logger ingest task.

        Records logged before ``start`` are kept and dispatched once the
        ingest task runs.
        """
        self._is_running = True
        self._loop = asyncio.get_running_loop()
        self._loop_thread = threading.get_ident()
        self._log_ingestor_task = asyncio.create_task(self._log_ingestor())

    async def shutdown(self) -> None:
        """Flush remaining events and stop the ingest task."""
        self._is_running = False

        await asyncio.sleep(0)

        try:
            await self._drain(timeout=2.0)
        except asyncio.TimeoutError:
            print("[Logger] drain timeout; forcing shutdown", file=sys.stderr)

        if self._buffer:
            await self._flush_buffer()

        if self._log_ingestor_task is not None:
            self._log_ingestor_task.cancel()
            try:
                await self._log_ingestor_task
            except asyncio.CancelledError:
                pass
            self._log_ingestor_task = None

        self._buffer.clear()
        self._loop = None
        self._loop_thread = None

