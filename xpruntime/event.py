"""Events that describe what happened to a resource, and recorders for them."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, MutableMapping, Protocol

__all__ = [
    "EventType",
    "Event",
    "EventSink",
    "Recorder",
    "APIRecorder",
    "NopRecorder",
    "normal",
    "warning",
    "slice_map",
]


class EventType(str, enum.Enum):
    """The type of an event."""

    NORMAL = "Normal"
    WARNING = "Warning"


@dataclass
class Event:
    """An event relating to a resource."""

    type: EventType
    reason: str
    message: str
    annotations: dict[str, str] = field(default_factory=dict)


def slice_map(source: Sequence[str], target: MutableMapping[str, str]) -> None:
    """Add alternating keys and values from source to target; a trailing key is ignored."""
    for key, value in zip(source[0::2], source[1::2]):
        target[key] = value


def normal(reason: str, message: str, *args: str) -> Event:
    """Return an informational event."""
    e = Event(EventType.NORMAL, reason, message, {})
    slice_map(args, e.annotations)
    return e


def warning(reason: str, err: BaseException, *args: str) -> Event:
    """Return a warning event, typically caused by an error."""
    e = Event(EventType.WARNING, reason, str(err), {})
    slice_map(args, e.annotations)
    return e


class EventSink(Protocol):
    """Something that accepts annotated events for an object."""

    def annotated_event(
        self,
        obj: Any,
        annotations: dict[str, str],
        event_type: str,
        reason: str,
        message: str,
    ) -> None: ...


class Recorder(ABC):
    """Records events."""

    @abstractmethod
    def event(self, obj: Any, event: Event) -> None:
        """Record the event for obj."""

    @abstractmethod
    def with_annotations(self, *args: str) -> Recorder:
        """Return a recorder that adds the given annotations to every event."""


class APIRecorder(Recorder):
    """Records events to an event sink, adding its annotations."""

    def __init__(self, sink: EventSink, annotations: dict[str, str] | None = None) -> None:
        self._sink = sink
        self.annotations: dict[str, str] = dict(annotations or {})

    def event(self, obj: Any, event: Event) -> None:
        self._sink.annotated_event(
            obj, dict(self.annotations), event.type.value, event.reason, event.message
        )

    def with_annotations(self, *args: str) -> Recorder:
        recorder = APIRecorder(self._sink, self.annotations)
        slice_map(args, recorder.annotations)
        return recorder


class NopRecorder(Recorder):
    """A recorder that does nothing."""

    def event(self, obj: Any, event: Event) -> None:
        pass

    def with_annotations(self, *args: str) -> Recorder:
        return self