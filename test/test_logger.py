import asyncio
import threading

import pytest

from utils.logger.config import LogLevel, LoggerConfig
from utils.logger.handlers.base import BaseLogHandler
from utils.logger.handlers.error_file import ErrorFileHandler
from utils.logger.handlers.rotating_file import RotatingFileHandler
from utils.logger.logger import Logger
from utils.logger_factory import EnhancedLoggerFactory, log_exception


class MemoryHandler(BaseLogHandler):
    def __init__(self):
        super().__init__()
        self.batches = []

    async def push(self, records):
        self.batches.append([ev.text for ev in records])

    @property
    def lines(self):
        return [line for batch in self.batches for line in batch]


def make_logger(handler, level=LogLevel.INFO):
    config = LoggerConfig(base_level=level, do_stdout=False, str_format="[%(levelname)s] %(name)s - %(message)s")
    return Logger(config=config, name="vitals", handlers=[handler])


@pytest.mark.asyncio
async def test_buffered_records_flush_on_shutdown():
    handler = MemoryHandler()
    logger = make_logger(handler)
    await logger.start()

    logger.info("first")
    logger.debug("hidden")
    logger.info("second")
    await logger.shutdown()

    assert handler.lines == ["[INFO] vitals - first", "[INFO] vitals - second"]


@pytest.mark.asyncio
async def test_warnings_flush_immediately():
    handler = MemoryHandler()
    logger = make_logger(handler)
    await logger.start()

    logger.warning("disk statfs failed")
    await asyncio.sleep(0.05)

    assert handler.lines == ["[WARNING] vitals - disk statfs failed"]
    await logger.shutdown()


@pytest.mark.asyncio
async def test_records_from_worker_threads_are_delivered():
    handler = MemoryHandler()
    logger = make_logger(handler)
    await logger.start()

    def work(n):
        for i in range(20):
            logger.info(f"thread {n} line {i}")

    threads = [threading.Thread(target=work, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    await asyncio.sleep(0.05)
    await logger.shutdown()

    assert len(handler.lines) == 80


def test_rejects_foreign_handler():
    with pytest.raises(TypeError):
        Logger(handlers=[object()])


def test_log_level_parse():
    assert LogLevel.parse(" Warning ") is LogLevel.WARNING
    with pytest.raises(ValueError):
        LogLevel.parse("verbose")


@pytest.mark.asyncio
async def test_file_handlers_split_errors(tmp_path):
    logger = EnhancedLoggerFactory.create_application_logger(
        name="vitals", enable_stdout=False, base_dir=str(tmp_path)
    )
    await logger.start()

    logger.info("sampled")
    try:
        raise OSError("statfs failed")
    except OSError as exc:
        log_exception(logger, exc, context="disk")
    await logger.shutdown()

    folder = tmp_path / "vitals"
    errors = list(folder.glob("*.error.log"))
    everything = [p for p in folder.glob("*.log") if not p.name.endswith(".error.log")]
    assert len(errors) == 1 and len(everything) == 1
    assert "EXCEPTION in disk: OSError: statfs failed" in errors[0].read_text()
    assert "sampled" not in errors[0].read_text()
    assert "sampled" in everything[0].read_text()


def test_factory_without_log_dir_has_no_file_handlers():
    logger = EnhancedLoggerFactory.create_application_logger(base_dir=None)

    assert logger._name == "vitals"
    assert logger._handlers == []


def test_unknown_rotation_rejected(tmp_path):
    with pytest.raises(ValueError):
        RotatingFileHandler(base_dir=str(tmp_path), rotation="weekly")
    assert isinstance(ErrorFileHandler(base_dir=str(tmp_path)), RotatingFileHandler)
