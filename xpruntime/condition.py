"""Conditions that describe the observed state of a resource."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone

__all__ = [
    "ConditionType",
    "ConditionReason",
    "ConditionStatus",
    "Condition",
    "ConditionedStatus",
    "new_conditioned_status",
    "creating",
    "deleting",
    "available",
    "unavailable",
    "reconcile_success",
    "reconcile_error",
]


class ConditionType(str, enum.Enum):
    """A condition a resource could be in."""

    READY = "Ready"
    SYNCED = "Synced"


class ConditionReason(str, enum.Enum):
    """The reason a resource is in a condition."""

    AVAILABLE = "Available"
    UNAVAILABLE = "Unavailable"
    CREATING = "Creating"
    DELETING = "Deleting"
    RECONCILE_SUCCESS = "ReconcileSuccess"
    RECONCILE_ERROR = "ReconcileError"


class ConditionStatus(str, enum.Enum):
    """Whether a condition currently holds."""

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


@dataclass
class Condition:
    """A condition that may apply to a resource."""

    type: str = ""
    status: str = ""
    last_transition_time: datetime | None = None
    reason: str = ""
    message: str = ""

    def equal(self, other: Condition) -> bool:
        """Return True if identical to other, ignoring the transition time."""
        return (
            self.type == other.type
            and self.status == other.status
            and self.reason == other.reason
            and self.message == other.message
        )

    def with_message(self, msg: str) -> Condition:
        """Return a copy of this condition with the given message."""
        return dataclasses.replace(self, message=msg)


@dataclass
class ConditionedStatus:
    """The observed status of a resource. Holds at most one condition per type."""

    conditions: list[Condition] = field(default_factory=list)

    def get_condition(self, condition_type: str) -> Condition:
        """Return the condition of the given type, or an Unknown one if absent."""
        for c in self.conditions:
            if c.type == condition_type:
                return c
        return Condition(type=condition_type, status=ConditionStatus.UNKNOWN)

    def set_conditions(self, *args: Condition) -> None:
        """Set conditions, replacing any existing ones of the same type.

        A condition identical (ignoring transition time) to one already set
        leaves it untouched.
        """
        for new in args:
            exists = False
            for i, existing in enumerate(self.conditions):
                if existing.type != new.type:
                    continue
                exists = True
                if not existing.equal(new):
                    self.conditions[i] = new
            if not exists:
                self.conditions.append(new)

    def equal(self, other: ConditionedStatus | None) -> bool:
        """Return True if both hold equal conditions, ignoring order and times."""
        if other is None:
            return False
        if len(self.conditions) != len(other.conditions):
            return False
        mine = sorted(self.conditions, key=lambda c: str(c.type))
        theirs = sorted(other.conditions, key=lambda c: str(c.type))
        return all(a.equal(b) for a, b in zip(mine, theirs))


def new_conditioned_status(*args: Condition) -> ConditionedStatus:
    """Return a status with the supplied conditions set."""
    status = ConditionedStatus()
    status.set_conditions(*args)
    return status


def creating() -> Condition:
    """The resource is currently being created."""
    return Condition(
        ConditionType.READY, ConditionStatus.FALSE, _now(), ConditionReason.CREATING
    )


def deleting() -> Condition:
    """The resource is currently being deleted."""
    return Condition(
        ConditionType.READY, ConditionStatus.FALSE, _now(), ConditionReason.DELETING
    )


def available() -> Condition:
    """The resource is observed to be available for use."""
    return Condition(
        ConditionType.READY, ConditionStatus.TRUE, _now(), ConditionReason.AVAILABLE
    )


def unavailable() -> Condition:
    """The resource is expected to be available but is not."""
    return Condition(
        ConditionType.READY, ConditionStatus.FALSE, _now(), ConditionReason.UNAVAILABLE
    )


def reconcile_success() -> Condition:
    """The most recent reconciliation of the resource succeeded."""
    return Condition(
        ConditionType.SYNCED,
        ConditionStatus.TRUE,
        _now(),
        ConditionReason.RECONCILE_SUCCESS,
    )


def reconcile_error(err: BaseException) -> Condition:
    """An error was encountered while reconciling the resource."""
    return Condition(
        ConditionType.SYNCED,
        ConditionStatus.FALSE,
        _now(),
        ConditionReason.RECONCILE_ERROR,
        str(err),
    )