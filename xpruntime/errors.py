"""Error values that carry context and can be unwrapped to their cause."""

from __future__ import annotations

import json
import re
from typing import Any

__all__ = [
    "Error",
    "new",
    "errorf",
    "with_message",
    "with_messagef",
    "wrap",
    "wrapf",
    "unwrap",
    "cause",
]

_VERB = re.compile(r"%([-#0 +]*\d*(?:\.\d+)?)([a-zA-Z%])")


class Error(Exception):
    """An error with a message that may wrap another exception."""

    def __init__(self, message: str, wrapped: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        if wrapped is not None:
            self.__cause__ = wrapped

    @property
    def wrapped(self) -> BaseException | None:
        """The exception this one wraps, if any."""
        return self.__cause__

    def unwrap(self) -> BaseException | None:
        """Return the wrapped exception, or None."""
        return self.__cause__

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


def _render(verb: str, flags: str, arg: Any) -> str:
    if verb in ("s", "v", "w"):
        return ("%" + flags + "s") % (arg,)
    if verb == "q":
        if isinstance(arg, str):
            return json.dumps(arg, ensure_ascii=False)
        return repr(arg)
    if verb == "t":
        return "true" if arg else "false"
    if verb in "dxXofeEgG":
        return ("%" + flags + verb) % (arg,)
    return ("%" + flags + "s") % (arg,)


def _format(fmt: str, args: tuple[Any, ...]) -> tuple[str, BaseException | None]:
    remaining = iter(args)
    wrapped: BaseException | None = None

    def replace(match: re.Match[str]) -> str:
        nonlocal wrapped
        flags, verb = match.groups()
        if verb == "%":
            return "%"
        try:
            arg = next(remaining)
        except StopIteration:
            return f"%!{verb}(MISSING)"
        if verb == "w" and isinstance(arg, BaseException) and wrapped is None:
            wrapped = arg
        return _render(verb, flags, arg)

    return _VERB.sub(replace, fmt), wrapped


def new(text: str) -> Error:
    """Return a new error with the given text. Every call gives a distinct error."""
    return Error(text)


def errorf(format: str, *args: Any) -> Error:
    """Format an error message. A %w verb with an exception operand wraps it."""
    text, wrapped = _format(format, args)
    return Error(text, wrapped)


def with_message(err: BaseException | None, message: str) -> Error | None:
    """Annotate err with a message, or return None if err is None."""
    if err is None:
        return None
    return Error(f"{message}: {err}", err)


def with_messagef(err: BaseException | None, format: str, *args: Any) -> Error | None:
    """Annotate err with a formatted message, or return None if err is None."""
    if err is None:
        return None
    text, _ = _format(format, args)
    return Error(f"{text}: {err}", err)


def wrap(err: BaseException | None, message: str) -> Error | None:
    """Alias for with_message."""
    return with_message(err, message)


def wrapf(err: BaseException | None, format: str, *args: Any) -> Error | None:
    """Alias for with_messagef."""
    return with_messagef(err, format, *args)


def unwrap(err: BaseException | None) -> BaseException | None:
    """Return the exception err wraps, or None."""
    if err is None:
        return None
    return err.__cause__


def cause(err: BaseException | None) -> BaseException | None:
    """Return the innermost exception of a chain of wrapped exceptions."""
    while err is not None:
        inner = unwrap(err)
        if inner is None:
            return err
        err = inner
    return err