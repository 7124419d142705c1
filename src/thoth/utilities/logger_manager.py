"""Console and file logging for the thoth command line.

Library modules only call ``logging.getLogger(__name__)``; this module wires
handlers onto the ``thoth`` logger when the CLI (or a caller) asks for it.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
import datetime
import json
import logging
from logging import Handler, Logger, LogRecord, getLevelName
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys
from typing import Any, ClassVar

import colorlog

from thoth.config.settings import LoggingSettings

ROOT_LOGGER_NAME = "thoth"


@dataclass
class LoggerConfig:
    """Handler settings for :class:`LoggerManager`."""

    log_dir: Path | None = None
    log_level: str = "INFO"
    log_file_name: str = "thoth.log"
    max_file_size_mb: int = 10
    backup_count: int = 3
    structured_logging: bool = False
    log_filters: dict[str, Callable[[LogRecord], bool]] | None = None
    log_colors: dict[str, str] | None = None

    DEFAULT_LOG_COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "cyan",
        "INFO": "green",
        "WARNING": "yellow",
        "ERROR": "red",
        "CRITICAL": "red,bg_white",
    }

    def __post_init__(self) -> None:
        self.log_level = self.log_level.upper()
        if self.log_dir is not None:
            self.log_dir = Path(self.log_dir).resolve()
            self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_colors = self.log_colors or self.DEFAULT_LOG_COLORS

    @classmethod
    def from_settings(cls, settings: LoggingSettings) -> LoggerConfig:
        return cls(
            log_dir=settings.log_dir,
            log_level=settings.log_level,
            log_file_name=settings.log_file_name,
            structured_logging=settings.structured_logging,
        )


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, carrying the ``context`` extra when present."""

    def format(self, record: LogRecord) -> str:
        log_data = {
            "timestamp": datetime.datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
            "context": getattr(record, "context", {}),
        }
        return json.dumps(log_data, ensure_ascii=False, default=str)


class ContextFilter(logging.Filter):
    """Merges fields from :meth:`LoggerManager.context` into each record."""

    def __init__(self) -> None:
        super().__init__()
        self.fields: dict[str, Any] = {}

    def filter(self, record: LogRecord) -> bool:
        if self.fields:
            merged = dict(self.fields)
            merged.update(getattr(record, "context", {}) or {})
            record.context = merged
        return True


class LoggerManager:
    """Attaches colorized console and rotating file handlers to a logger."""

    def __init__(
        self,
        name: str | LoggerConfig = ROOT_LOGGER_NAME,
        config: LoggerConfig | None = None,
    ) -> None:
        if isinstance(name, LoggerConfig):
            config = name
            name = ROOT_LOGGER_NAME
        self.name = name
        self.config = config or LoggerConfig()
        self._context = ContextFilter()
        self._handlers: list[Handler] = []
        self._logger = self._configure_logger()

    def get_logger(self) -> Logger:
        return self._logger

    def _configure_logger(self) -> Logger:
        logger = logging.getLogger(self.name)
        # Reconfiguring replaces the handlers a previous manager installed.
        for handler in list(logger.handlers):
            if getattr(handler, "_thoth_managed", False):
                logger.removeHandler(handler)
                handler.close()
        logger.setLevel(getLevelName(self.config.log_level))
        handlers: list[Handler | None] = [
            self._console_handler(),
            self._file_handler(),
        ]
        for handler in handlers:
            if handler is None:
                continue
            handler._thoth_managed = True  # type: ignore[attr-defined]
            handler.addFilter(self._context)
            for filter_fn in (self.config.log_filters or {}).values():
                handler.addFilter(filter_fn)
            logger.addHandler(handler)
            self._handlers.append(handler)
        logger.propagate = False
        return logger

    def _console_handler(self) -> Handler:
        handler = colorlog.StreamHandler(sys.stderr)
        formatter: logging.Formatter = (
            StructuredFormatter()
            if self.config.structured_logging
            else colorlog.ColoredFormatter(
                "%(log_color)s[%(levelname)s] %(name)s: %(message)s",
                log_colors=self.config.log_colors,
            )
        )
        handler.setFormatter(formatter)
        return handler

    def _file_handler(self) -> RotatingFileHandler | None:
        if self.config.log_dir is None:
            return None
        file_path = self.config.log_dir / self.config.log_file_name
        try:
            handler = RotatingFileHandler(
                file_path,
                maxBytes=self.config.max_file_size_mb * 1024 * 1024,
                backupCount=self.config.backup_count,
                encoding="utf-8",
            )
        except OSError as e:
            print(f"Failed to create RotatingFileHandler: {e}", file=sys.stderr)
            return None
        handler.setFormatter(
            StructuredFormatter()
            if self.config.structured_logging
            else logging.Formatter(
                "%(asctime)s - [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        return handler

    @contextmanager
    def context(self, **context_kwargs: Any) -> Iterator[Logger]:
        """Add fields to the ``context`` of every record logged inside the block."""
        previous = self._context.fields
        self._context.fields = {**previous, **context_kwargs}
        try:
            yield self._logger
        finally:
            self._context.fields = previous

    def add_filter(self, name: str, filter_fn: Callable[[LogRecord], bool]) -> None:
        if self.config.log_filters is None:
            self.config.log_filters = {}
        self.config.log_filters[name] = filter_fn
        for handler in self._handlers:
            handler.addFilter(filter_fn)

    def flush(self) -> None:
        for handler in self._handlers:
            handler.flush()

    def close(self) -> None:
        """Detach and close the handlers this manager installed."""
        for handler in self._handlers:
            self._logger.removeHandler(handler)
            handler.close()
        self._handlers.clear()


def configure_logging(settings: LoggingSettings, level: str | None = None) -> LoggerManager:
    config = LoggerConfig.from_settings(settings)
    if level:
        config.log_level = level.upper()
    return LoggerManager(ROOT_LOGGER_NAME, config)


__all__ = [
    "ROOT_LOGGER_NAME",
    "LoggerConfig",
    "LoggerManager",
    "StructuredFormatter",
    "configure_logging",
]
