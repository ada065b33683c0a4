from pathlib import Path
from typing import Any, List, Tuple

import pytest


class DummyLogger:
    def __init__(self) -> None:
        self.records: List[Tuple[str, str]] = []

    def _record(self, level: str, msg: Any) -> None:
        self.records.append((level, str(msg)))

    def debug(self, msg: Any) -> None:
        self._record("debug", msg)

    def info(self, msg: Any) -> None:
        self._record("info", msg)

    def warning(self, msg: Any) -> None:
        self._record("warning", msg)

    def error(self, msg: Any) -> None:
        self._record("error", msg)

    def messages(self, level: str) -> List[str]:
        return [msg for lvl, msg in self.records if lvl == level]


@pytest.fixture
def dummy_logger() -> DummyLogger:
    return DummyLogger()


@pytest.fixture
def write_file(tmp_path):
    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def no_sleep():
    calls: List[float] = []

    def _sleep(seconds: float) -> None:
        calls.append(seconds)

    _sleep.calls = calls
    return _sleep
