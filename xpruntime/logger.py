"""A small structured logging interface with Info and Debug levels."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

__all__ = ["Logger", "NopLogger", "StdLogger", "new_nop_logger", "new_std_logger"]


class Logger(ABC):
    """Logs messages, optionally with alternating key and value arguments."""

    @abstractmethod
    def info(self, msg: str, *args: Any) -> None:
        """Log a message operators are likely to care about."""

    @abstractmethod
    def debug(self, msg: str, *args: Any) -> None:
        """Log a message useful when debugging."""

    @abstractmethod
    def with_values(self, *args: Any) -> Logger:
        """Return a logger that adds the given key/value pairs to every message."""


class NopLogger(Logger):
    """A logger that discards everything."""

    def info(self, msg: str, *args: Any) -> None:
        pass

    def debug(self, msg: str, *args: Any) -> None:
        pass

    def with_values(self, *args: Any) -> Logger:
        return NopLogger()


def _render(msg: str, pairs: tuple[Any, ...]) -> str:
    parts = [msg]
    keys = pairs[0::2]
    values = pairs[1::2]
    for key, value in zip(keys, values):
        parts.append(f"{key}={value}")
    if len(keys) > len(values):
        parts.append(f"{keys[-1]}=<missing>")
    return " ".join(parts)


class StdLogger(Logger):
    """A logger backed by a standard library logger. Debug maps to DEBUG."""

    def __init__(self, logger: logging.Logger, values: tuple[Any, ...] = ()) -> None:
        self._logger = logger
        self._values = tuple(values)

    def _log(self, level: int, msg: str, args: tuple[Any, ...]) -> None:
        pairs = self._values + tuple(args)
        if self._logger.isEnabledFor(level):
            self._logger.log(level, "%s", _render(msg, pairs), extra={"key_values": pairs})

    def info(self, msg: str, *args: Any) -> None:
        self._log(logging.INFO, msg, args)

    def debug(self, msg: str, *args: Any) -> None:
        self._log(logging.DEBUG, msg, args)

    def with_values(self, *args: Any) -> Logger:
        return StdLogger(self._logger, self._values + tuple(args))


def new_nop_logger() -> Logger:
    """Return a logger that does nothing."""
    return NopLogger()


def new_std_logger(logger: logging.Logger) -> Logger:
    """Return a logger that writes to the given standard library logger."""
    return StdLogger(logger)