"""Logging utilities shared by every module of the translation client.

Modules obtain namespaced loggers with ``LoggerUtils.get_logger(__name__)``.
Handlers are only attached once ``LoggerUtils(...)`` has been constructed by an
application entry point, so library users keep full control over logging.
"""

from __future__ import annotations

import logging
import sys
import warnings
from logging import Formatter, Handler, NullHandler, StreamHandler
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, ClassVar, Final, Literal, NamedTuple, Self, TextIO, TypeAlias

if TYPE_CHECKING:
    from pathlib import Path

__all__: list[str] = ["LogLevel", "LoggerUtils"]

LevelType: TypeAlias = Literal[
    "NOTSET",
    "DEBUG",
    "INFO",
    "WARNING",
    "ERROR",
    "CRITICAL",
]

DEFAULT_LOG_LEVEL: Final[int] = logging.INFO
DEFAULT_NAMESPACE: Final[str] = "PolyTrans"

_ROTATE_BYTES: Final[int] = 1024 * 1024
_ROTATE_KEEP: Final[int] = 3
_CONSOLE_FORMAT: Final[str] = "%(levelname)s: %(message)s"
# the thread name tells caller-side and worker-side records apart
_FILE_FORMAT: Final[str] = "%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s.%(funcName)s: %(message)s"


class LogLevel(NamedTuple):
    """A logging level as both name and numeric value."""

    name: str
    value: int


class LoggerUtils:
    """Singleton that configures the namespace root logger.

    Console output is limited to WARNING and above. When a file name is given, a rotating
    UTF-8 file handler records everything at DEBUG.

    Attributes:
        _LOGGER_NAMESPACE (str): Prefix for every logger returned by get_logger().
        _configured (bool): Whether handlers have been attached.
        _instance (LoggerUtils | None): The singleton instance.
    """

    _LOGGER_NAMESPACE: ClassVar[str] = DEFAULT_NAMESPACE
    _configured: ClassVar[bool] = False
    _instance: ClassVar[Self | None] = None

    def __new__(cls, *args, **kwargs) -> Self:
        _ = args, kwargs
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, filename: str | Path = "", *, use_null_console: bool = False) -> None:
        """Attach the console handler and, optionally, the file handler.

        Later constructions return the same instance and leave the handlers untouched.

        Args:
            filename (str | Path): Path of the log file. Empty disables file logging.
            use_null_console (bool): Discard console output, e.g. when running without a terminal.
        """
        if LoggerUtils.is_configured():
            return

        # handlers filter on their own level
        self.root_logger.setLevel(DEFAULT_LOG_LEVEL)

        if use_null_console or sys.stderr is None:
            self._attach(NullHandler())
        else:
            self._attach(self._make_console_handler())

        log_path: str = str(filename).strip()
        if log_path:
            file_handler: RotatingFileHandler | None = self._make_file_handler(log_path)
            if file_handler is not None:
                self._attach(file_handler)

        warnings.showwarning = self.warning_to_log
        LoggerUtils._configured = True

    @classmethod
    def is_configured(cls) -> bool:
        return cls._configured

    @property
    def root_logger(self) -> logging.Logger:
        """The namespace root logger that handlers are attached to."""
        return logging.getLogger(self._LOGGER_NAMESPACE)

    def warning_to_log(
        self,
        message: Warning | str,
        category: type[Warning],
        filename: str,
        lineno: int,
        file: TextIO | None = None,
        line: str | None = None,
    ) -> None:
        """Replacement for ``warnings.showwarning`` that writes to the log."""
        _ = file, line
        self.root_logger.warning("%s:%d: %s: %s", filename, lineno, category.__name__, message)

    def _attach(self, handler: Handler) -> None:
        # RotatingFileHandler subclasses StreamHandler, so match the exact type
        if any(type(existing) is type(handler) for existing in self.root_logger.handlers):
            self.root_logger.warning("%s is already attached to '%s'", type(handler).__name__, self.root_logger.name)
            handler.close()
            return
        self.root_logger.addHandler(handler)

    @staticmethod
    def _make_console_handler() -> StreamHandler[TextIO]:
        handler: StreamHandler[TextIO] = StreamHandler(sys.stderr)
        handler.setLevel(logging.WARNING)
        handler.setFormatter(Formatter(_CONSOLE_FORMAT))
        return handler

    def _make_file_handler(self, log_path: str) -> RotatingFileHandler | None:
        try:
            handler = RotatingFileHandler(log_path, maxBytes=_ROTATE_BYTES, backupCount=_ROTATE_KEEP, encoding="utf-8")
        except OSError as err:
            self.root_logger.error("Cannot open log file '%s', file logging disabled: %s", log_path, err)
            return None
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(Formatter(_FILE_FORMAT))
        return handler

    def set_level(self, level: LevelType | str) -> None:
        """Set the namespace logging level; unknown names fall back to INFO with a warning."""
        level_value: int | None = logging.getLevelNamesMapping().get(level.upper())
        if level_value is None:
            self.root_logger.setLevel(DEFAULT_LOG_LEVEL)
            self.root_logger.warning("Unknown logging level '%s'; using INFO.", level)
            return
        self.root_logger.setLevel(level_value)

    def get_level(self) -> LogLevel:
        effective: int = self.root_logger.getEffectiveLevel()
        return LogLevel(name=logging.getLevelName(effective), value=effective)

    @staticmethod
    def get_logger(name: str | None = None) -> logging.Logger:
        """Return ``<namespace>.<name>``, or the namespace root logger when name is None."""
        namespace: str = LoggerUtils._LOGGER_NAMESPACE
        return logging.getLogger(f"{namespace}.{name}" if name else namespace)
