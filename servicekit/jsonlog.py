"""A leveled logger that writes one JSON object per line."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import IO, Any, Mapping


class Level(str, Enum):
    """Log levels, from least to most severe."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    FATAL = "FATAL"

    @property
    def rank(self) -> int:
        return list(Level).index(self)


_LEVEL_NAMES = {
    "TRACE": Level.TRACE,
    "trace": Level.TRACE,
    "DEBUG": Level.DEBUG,
    "debug": Level.DEBUG,
    "INFO": Level.INFO,
    "info": Level.INFO,
    "WARN": Level.WARN,
    "warn": Level.WARN,
    "WARNING": Level.WARN,
    "warning": Level.WARN,
    "ERROR": Level.ERROR,
    "error": Level.ERROR,
    "FATAL": Level.FATAL,
    "fatal": Level.FATAL,
}


def _timestamp() -> str:
    text = datetime.now().astimezone().isoformat(timespec="seconds")
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def _level_name(level: Level | str) -> str:
    return level.value if isinstance(level, Level) else str(level)


@dataclass
class JsonLogger:
    """Writes JSON log lines to ``out`` (standard output when unset)."""

    level: Level | str = Level.INFO
    out: IO[str] | None = None
    fields: dict[str, Any] = field(default_factory=dict)
    initialized: bool = False

    def should_log(self, level: Level | str) -> bool:
        """Whether a message at ``level`` passes the configured level."""
        try:
            configured = Level(self.level)
            message = Level(level)
        except ValueError:
            return True
        return message.rank >= configured.rank

    def log(self, level: Level | str, msg: str, fields: Mapping[str, Any] | None = None) -> None:
        """Write one entry; a FATAL entry then exits with status 1."""
        if not self.should_log(level):
            return

        merged = {**self.fields, **(fields or {})}
        name = _level_name(level)
        entry: dict[str, Any] = {"timestamp": _timestamp(), "level": name, "message": msg}
        if merged:
            entry["fields"] = merged

        try:
            line = json.dumps(entry, separators=(",", ":"), ensure_ascii=False, default=str)
        except (TypeError, ValueError) as exc:
            print(f"Error marshaling log entry: {exc}", file=sys.stderr)
            return

        try:
            print(line, file=self.out if self.out is not None else sys.stdout)
        except (OSError, ValueError) as exc:
            print(f"Error writing log entry: {exc}", file=sys.stderr)
            return

        if name == Level.FATAL.value:
            raise SystemExit(1)


@dataclass
class _DefaultHolder:
    logger: JsonLogger


_holder = _DefaultHolder(JsonLogger(Level.INFO))


def get_default_logger() -> JsonLogger:
    """Return the logger used by the module-level functions."""
    return _holder.logger


def set_default_logger(logger: JsonLogger) -> None:
    """Replace the logger used by the module-level functions."""
    if not isinstance(logger, JsonLogger):
        raise TypeError(f"expected a JsonLogger, got {type(logger).__name__}")
    _holder.logger = logger


def init(msg: str) -> None:
    """Mark the default logger initialised and log ``msg`` at INFO."""
    logger = _holder.logger
    logger.initialized = True
    logger.log(Level.INFO, msg, None)


def trace(msg: str, fields: Mapping[str, Any] | None = None) -> None:
    _holder.logger.log(Level.TRACE, msg, fields)


def debug(msg: str, fields: Mapping[str, Any] | None = None) -> None:
    _holder.logger.log(Level.DEBUG, msg, fields)


def info(msg: str, fields: Mapping[str, Any] | None = None) -> None:
    _holder.logger.log(Level.INFO, msg, fields)


def warn(msg: str, fields: Mapping[str, Any] | None = None) -> None:
    _holder.logger.log(Level.WARN, msg, fields)


def error(msg: str, fields: Mapping[str, Any] | None = None) -> None:
    _holder.logger.log(Level.ERROR, msg, fields)


def fatal(msg: str, fields: Mapping[str, Any] | None = None) -> None:
    """Log at FATAL and exit with status 1."""
    _holder.logger.log(Level.FATAL, msg, fields)


def set_fields(fields: Mapping[str, Any]) -> None:
    """Add fields included in every entry of the default logger."""
    _holder.logger.fields.update(fields)


def set_output(out: IO[str]) -> None:
    """Send the default logger's output to ``out``."""
    _holder.logger.out = out


def set_level(level: str) -> None:
    """Set the default logger's level; unknown names fall back to INFO."""
    lvl = _LEVEL_NAMES.get(level)
    if lvl is None:
        print(f"Warning: Unknown log level '{level}', defaulting to INFO", file=sys.stderr)
        lvl = Level.INFO
    _holder.logger.level = lvl