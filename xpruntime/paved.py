"""Get and set values within a JSON-like object by field path."""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Callable
from typing import Any, TypeVar

from xpruntime import errors
from xpruntime.errors import Error
from xpruntime.fieldpath import Segment, Segments, SegmentType, parse
from xpruntime.mergeopts import MergeFlag, MergeOptions, merge_flags_for

__all__ = ["NotFoundError", "Paved", "is_not_found", "pave"]

T = TypeVar("T")


class NotFoundError(Error):
    """A field path did not exist within an object."""


def is_not_found(err: BaseException | None) -> bool:
    """Return True if err, or an error it wraps, is a NotFoundError."""
    while err is not None:
        if isinstance(err, NotFoundError):
            return True
        err = errors.unwrap(err)
    return False


def _json_default(obj: Any) -> Any:
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    raise TypeError(f"object of type {type(obj).__name__} is not JSON serializable")


def _normalise(value: Any) -> Any:
    try:
        text = json.dumps(value, default=_json_default, allow_nan=False)
    except (TypeError, ValueError) as err:
        raise Error(f"cannot marshal value to JSON: {err}", err) from err
    return json.loads(text)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (str, list, dict)):
        return len(value) == 0
    return False


def _deep_equal(a: Any, b: Any) -> bool:
    if type(a) is not type(b):
        return False
    if isinstance(a, dict):
        return a.keys() == b.keys() and all(_deep_equal(a[k], b[k]) for k in a)
    if isinstance(a, list):
        return len(a) == len(b) and all(_deep_equal(x, y) for x, y in zip(a, b))
    return a == b


def _remove_source_duplicates(dst: Any, src: Any) -> Any:
    if not isinstance(dst, list) or not isinstance(src, list):
        return src
    return [item for item in src if not any(_deep_equal(item, d) for d in dst)]


def _merge_maps(dst: dict, src: dict, override: bool, append: bool) -> None:
    for key, s in src.items():
        present = key in dst
        d = dst.get(key)
        if s is None:
            if override:
                dst[key] = None
            continue
        if isinstance(s, dict):
            if isinstance(d, dict):
                _merge_maps(d, s, override, append)
        elif isinstance(s, list):
            current = [] if d is None else d
            if (override or not dst) and not append:
                current = s
            elif append:
                if not isinstance(current, list):
                    raise Error(
                        "cannot append two slices with different type "
                        f"({type(current).__name__}, {type(s).__name__})"
                    )
                current = current + s
            dst[key] = current
        if present and not _is_empty(d) and isinstance(s, (dict, list)):
            continue
        if override or not present or _is_empty(d):
            dst[key] = s


def _merge(dst: Any, src: Any, options: MergeOptions | None) -> Any:
    if dst is None or src is None:
        return src
    if options is not None and options.is_append_slice():
        src = _remove_source_duplicates(dst, src)
    flags = merge_flags_for(options)
    wrapped = {"arg": dst}
    try:
        _merge_maps(
            wrapped,
            {"arg": src},
            MergeFlag.OVERRIDE in flags,
            MergeFlag.APPEND_SLICE in flags,
        )
    except Error as err:
        raise Error(f"failed to merge values: {err}", err) from err
    return wrapped["arg"]


def _prepare(container: Any, key: Any, missing: bool, nxt: Segment) -> None:
    if missing:
        if nxt.type is SegmentType.INDEX:
            container[key] = [None] * (nxt.index + 1)
        else:
            container[key] = {}
        return
    if nxt.type is not SegmentType.INDEX:
        return
    existing = container[key]
    if isinstance(existing, list) and nxt.index >= len(existing):
        existing.extend([None] * (nxt.index - len(existing) + 1))


class Paved:
    """A JSON-like object whose values can be read and written by field path."""

    def __init__(self, obj: dict[str, Any] | None = None) -> None:
        self._object = obj

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Paved):
            return NotImplemented
        return self.unstructured_content() == other.unstructured_content()

    def __repr__(self) -> str:
        return f"Paved({self._object!r})"

    def to_json(self) -> str:
        """Serialise the underlying object to JSON."""
        return json.dumps(self._object)

    @classmethod
    def from_json(cls, data: str | bytes) -> Paved:
        """Build from a JSON document, which must be an object or null."""
        try:
            obj = json.loads(data)
        except ValueError as err:
            raise Error(f"cannot unmarshal value from JSON: {err}", err) from err
        if obj is not None and not isinstance(obj, dict):
            raise Error(f"cannot unmarshal {type(obj).__name__} into an object")
        return cls(obj)

    def unstructured_content(self) -> dict[str, Any]:
        """Return the underlying object, or an empty one if there is none."""
        if self._object is None:
            return {}
        return self._object

    def set_unstructured_content(self, content: dict[str, Any]) -> None:
        """Replace the underlying object."""
        self._object = content

    def _segments(self, path: str) -> Segments:
        try:
            return parse(path)
        except Error as err:
            raise errors.wrapf(err, "cannot parse path %q", path) from err

    def _get(self, segments: Segments) -> Any:
        it: Any = self._object
        for i, current in enumerate(segments):
            if current.type is SegmentType.INDEX:
                if not isinstance(it, list):
                    raise Error(f"{segments[:i]}: not an array")
                if current.index >= len(it):
                    raise NotFoundError(f"{segments[:i + 1]}: no such element")
                it = it[current.index]
            else:
                if not isinstance(it, dict):
                    raise Error(f"{segments[:i]}: not an object")
                if current.field not in it:
                    raise NotFoundError(f"{segments[:i + 1]}: no such field")
                it = it[current.field]
        return it if segments else None

    def get_value(self, path: str) -> Any:
        """Return the value at path."""
        return self._get(self._segments(path))

    def get_value_into(self, path: str, convert: Callable[[Any], T]) -> T:
        """Return convert applied to a JSON copy of the value at path."""
        value = _normalise(self.get_value(path))
        try:
            return convert(value)
        except (TypeError, ValueError, KeyError) as err:
            raise Error(f"cannot unmarshal value from JSON: {err}", err) from err

    def get_string(self, path: str) -> str:
        """Return the string at path."""
        value = self.get_value(path)
        if not isinstance(value, str):
            raise Error(f"{path}: not a string")
        return value

    def get_string_array(self, path: str) -> list[str]:
        """Return the array of strings at path."""
        value = self.get_value(path)
        if not isinstance(value, list):
            raise Error(f"{path}: not an array")
        if not all(isinstance(v, str) for v in value):
            raise Error(f"{path}: not an array of strings")
        return list(value)

    def get_string_object(self, path: str) -> dict[str, str]:
        """Return the object with string values at path."""
        value = self.get_value(path)
        if not isinstance(value, dict):
            raise Error(f"{path}: not an object")
        if not all(isinstance(v, str) for v in value.values()):
            raise Error(f"{path}: not an object with string field values")
        return dict(value)

    def get_bool(self, path: str) -> bool:
        """Return the boolean at path."""
        value = self.get_value(path)
        if not isinstance(value, bool):
            raise Error(f"{path}: not a bool")
        return value

    def get_number(self, path: str) -> float:
        """Return the floating point number at path. Prefer get_integer."""
        value = self.get_value(path)
        if not isinstance(value, float):
            raise Error(f"{path}: not a (float64) number")
        return value

    def get_integer(self, path: str) -> int:
        """Return the integer at path."""
        value = self.get_value(path)
        if not isinstance(value, int) or isinstance(value, bool):
            raise Error(f"{path}: not a (int64) number")
        return value

    def _set(self, segments: Segments, value: Any) -> None:
        v = _normalise(value)
        it: Any = self._object
        last = len(segments) - 1
        for i, current in enumerate(segments):
            if current.type is SegmentType.INDEX:
                if not isinstance(it, list):
                    raise Error(f"{segments[:i]} is not an array")
                if i == last:
                    it[current.index] = v
                    return
                _prepare(it, current.index, it[current.index] is None, segments[i + 1])
                it = it[current.index]
            else:
                if not isinstance(it, dict):
                    raise Error(f"{segments[:i]} is not an object")
                if i == last:
                    it[current.field] = v
                    return
                _prepare(it, current.field, current.field not in it, segments[i + 1])
                it = it[current.field]

    def set_value(self, path: str, value: Any) -> None:
        """Set the value at path, creating intermediate objects and arrays."""
        self._set(self._segments(path), value)

    def set_string(self, path: str, value: str) -> None:
        """Set a string at path."""
        self.set_value(path, value)

    def set_bool(self, path: str, value: bool) -> None:
        """Set a boolean at path."""
        self.set_value(path, value)

    def set_number(self, path: str, value: float) -> None:
        """Set a number at path."""
        self.set_value(path, value)

    def merge_value(self, path: str, value: Any, options: MergeOptions | None) -> None:
        """Merge value into the value at path according to options.

        Without options the existing value is replaced.
        """
        try:
            dst = self.get_value(path)
        except Error as err:
            if not (is_not_found(err) or options is None):
                raise
            dst = None
        if options is None:
            dst = None
        self.set_value(path, _merge(dst, value, options))


def pave(obj: dict[str, Any] | None) -> Paved:
    """Wrap obj so values can be read and written by field path."""
    return Paved(obj)