"""Logging utilities for Chatbridge."""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional


LOG_LEVEL_ENV = "CHATBRIDGE_LOG_LEVEL"
LOG_DIR_ENV = "CHATBRIDGE_LOG_DIR"

_LOG_RECORD_FIELDS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "message",
    "asctime",
    "stacklevel",
    "taskName",
}


class StructuredFormatter(logging.Formatter):
    """Formatter with ISO timestamps and context."""

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return timestamp.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _LOG_RECORD_FIELDS and not key.startswith("_")
        }
        if extras:
            try:
                serialized = json.dumps(extras, sort_keys=True, ensure_ascii=True, default=str)
            except (TypeError, ValueError):
                serialized = str(extras)
            return f"{message} | {serialized}"
        return message


class ChatbridgeLogger:
    """Logger for Chatbridge.

    The console handler follows ``CHATBRIDGE_LOG_LEVEL``; an optional daily
    file under ``CHATBRIDGE_LOG_DIR`` always records debug output with
    structured extras.
    """

    def __init__(
        self,
        name: str = "chatbridge",
        log_dir: Optional[Path] = None,
        level_name: Optional[str] = None,
    ):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False
        self.log_file: Optional[Path] = None

        level = _console_level(level_name or os.getenv(LOG_LEVEL_ENV))
        self._reset_handlers(level)
        if log_dir:
            self.log_file = self._add_file_handler(log_dir)

    def _reset_handlers(self, console_level: int) -> None:
        # One console handler survives re-initialization; file handlers do not.
        console_handler: Optional[logging.Handler] = None
        for handler in list(self.logger.handlers):
            if isinstance(handler, logging.FileHandler) or console_handler is not None:
                self.logger.removeHandler(handler)
                handler.close()
            else:
                console_handler = handler
        if console_handler is None:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
            self.logger.addHandler(console_handler)
        console_handler.setLevel(console_level)

    def _add_file_handler(self, log_dir: Path) -> Path:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"chatbridge_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(StructuredFormatter("%(asctime)s [%(levelname)s] %(message)s"))
        self.logger.addHandler(file_handler)
        return log_file

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.warning(message, *args, **kwargs)


def _console_level(level_name: Optional[str]) -> int:
    level = logging.getLevelName((level_name or "WARNING").strip().upper())
    return level if isinstance(level, int) else logging.WARNING


# Global logger instance
_logger: Optional[ChatbridgeLogger] = None


def get_logger() -> ChatbridgeLogger:
    """Get the global logger instance."""
    global _logger
    if _logger is None:
        _logger = ChatbridgeLogger()
    return _logger


def init_logger(env: Optional[Mapping[str, str]] = None) -> ChatbridgeLogger:
    """(Re)initialize the global logger from ``CHATBRIDGE_LOG_LEVEL``/``CHATBRIDGE_LOG_DIR``."""
    global _logger
    env = os.environ if env is None else env
    log_dir = env.get(LOG_DIR_ENV) or None
    _logger = ChatbridgeLogger(
        log_dir=Path(log_dir) if log_dir else None,
        level_name=env.get(LOG_LEVEL_ENV),
    )
    return _logger
