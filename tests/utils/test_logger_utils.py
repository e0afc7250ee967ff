from __future__ import annotations

import logging
import warnings
from logging import NullHandler, StreamHandler
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING

import pytest

from utils.logger_utils import LoggerUtils, LogLevel

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture
def fresh_logger_utils(monkeypatch: pytest.MonkeyPatch) -> Iterator[logging.Logger]:
    """Reset the singleton and restore the namespace logger afterwards."""
    monkeypatch.setattr(LoggerUtils, "_instance", None)
    monkeypatch.setattr(LoggerUtils, "_configured", False)
    monkeypatch.setattr(warnings, "showwarning", warnings.showwarning)
    root: logging.Logger = logging.getLogger("PolyTrans")
    saved_handlers = list(root.handlers)
    saved_level: int = root.level
    root.handlers.clear()
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def test_get_logger_is_namespaced() -> None:
    assert LoggerUtils.get_logger("core.trans").name == "PolyTrans.core.trans"
    assert LoggerUtils.get_logger().name == "PolyTrans"


def test_is_singleton(fresh_logger_utils: logging.Logger) -> None:
    _ = fresh_logger_utils
    assert LoggerUtils(use_null_console=True) is LoggerUtils()


def test_console_handler_is_attached_once(fresh_logger_utils: logging.Logger) -> None:
    LoggerUtils()
    LoggerUtils()

    stream_handlers = [h for h in fresh_logger_utils.handlers if type(h) is StreamHandler]
    assert len(stream_handlers) == 1
    assert stream_handlers[0].level == logging.WARNING
    assert LoggerUtils.is_configured() is True


def test_null_console(fresh_logger_utils: logging.Logger) -> None:
    LoggerUtils(use_null_console=True)

    assert [type(h) for h in fresh_logger_utils.handlers] == [NullHandler]


def test_file_handler_records_debug(fresh_logger_utils: logging.Logger, tmp_path: Path) -> None:
    log_file: Path = tmp_path / "translator.log"
    logger_utils = LoggerUtils(log_file, use_null_console=True)
    logger_utils.set_level("DEBUG")

    LoggerUtils.get_logger("tests").debug("worker started")
    for handler in fresh_logger_utils.handlers:
        handler.flush()

    file_handlers = [h for h in fresh_logger_utils.handlers if isinstance(h, RotatingFileHandler)]
    assert len(file_handlers) == 1
    assert "worker started" in log_file.read_text(encoding="utf-8")


def test_invalid_log_file_is_reported(fresh_logger_utils: logging.Logger, tmp_path: Path) -> None:
    LoggerUtils(tmp_path / "missing" / "translator.log", use_null_console=True)

    assert not any(isinstance(h, RotatingFileHandler) for h in fresh_logger_utils.handlers)


def test_set_and_get_level(fresh_logger_utils: logging.Logger) -> None:
    _ = fresh_logger_utils
    logger_utils = LoggerUtils(use_null_console=True)

    logger_utils.set_level("warning")

    assert logger_utils.get_level() == LogLevel(name="WARNING", value=logging.WARNING)


def test_unknown_level_falls_back_to_info(fresh_logger_utils: logging.Logger, caplog: pytest.LogCaptureFixture) -> None:
    _ = fresh_logger_utils
    logger_utils = LoggerUtils(use_null_console=True)

    logger_utils.set_level("LOUD")

    assert logger_utils.get_level().value == logging.INFO
    assert any("Unknown logging level" in rec.message for rec in caplog.records)


def test_warnings_are_routed_to_log(fresh_logger_utils: logging.Logger, caplog: pytest.LogCaptureFixture) -> None:
    _ = fresh_logger_utils
    logger_utils = LoggerUtils(use_null_console=True)

    assert warnings.showwarning == logger_utils.warning_to_log
    logger_utils.warning_to_log("deprecated option", UserWarning, "translator.ini", 3)

    assert any("translator.ini:3: UserWarning: deprecated option" in rec.message for rec in caplog.records)
