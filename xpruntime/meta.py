"""Helpers for reading and changing the metadata of resource objects."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any

from xpruntime.errors import Error, errorf
from xpruntime.resource import GroupVersionKind, ObjectReference, TypedReference

__all__ = [
    "ANNOTATION_KEY_EXTERNAL_NAME",
    "ANNOTATION_KEY_EXTERNAL_CREATE_PENDING",
    "ANNOTATION_KEY_EXTERNAL_CREATE_SUCCEEDED",
    "ANNOTATION_KEY_EXTERNAL_CREATE_FAILED",
    "ANNOTATION_KEY_PROPAGATE_TO_PREFIX",
    "ANNOTATION_KEY_PROPAGATE_FROM_NAMESPACE",
    "ANNOTATION_KEY_PROPAGATE_FROM_NAME",
    "OwnerReference",
    "ObjectMeta",
    "NamespacedName",
    "reference_to",
    "typed_reference_to",
    "as_owner",
    "as_controller",
    "get_controller_of",
    "have_same_controller",
    "namespaced_name_of",
    "add_owner_reference",
    "add_controller_reference",
    "add_finalizer",
    "remove_finalizer",
    "finalizer_exists",
    "add_labels",
    "remove_labels",
    "add_annotations",
    "remove_annotations",
    "was_deleted",
    "was_created",
    "get_external_name",
    "set_external_name",
    "get_external_create_pending",
    "set_external_create_pending",
    "get_external_create_succeeded",
    "set_external_create_succeeded",
    "get_external_create_failed",
    "set_external_create_failed",
    "external_create_incomplete",
    "external_create_succeeded_during",
    "allow_propagation",
    "annotation_key_propagate_to",
    "allows_propagation_from",
    "allows_propagation_to",
]

ANNOTATION_KEY_EXTERNAL_NAME = "crossplane.io/external-name"
ANNOTATION_KEY_EXTERNAL_CREATE_PENDING = "crossplane.io/external-create-pending"
ANNOTATION_KEY_EXTERNAL_CREATE_SUCCEEDED = "crossplane.io/external-create-succeeded"
ANNOTATION_KEY_EXTERNAL_CREATE_FAILED = "crossplane.io/external-create-failed"

ANNOTATION_KEY_PROPAGATE_TO_PREFIX = "to.propagate.crossplane.io/"
ANNOTATION_KEY_PROPAGATE_FROM_NAMESPACE = "from.propagate.crossplane.io/namespace"
ANNOTATION_KEY_PROPAGATE_FROM_NAME = "from.propagate.crossplane.io/name"

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(\.\d+)?([Zz]|[+-]\d{2}:\d{2})"
)

_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193


@dataclass
class OwnerReference:
    """A reference to an object that owns another object."""

    api_version: str = ""
    kind: str = ""
    name: str = ""
    uid: str = ""
    controller: bool | None = None
    block_owner_deletion: bool | None = None


@dataclass
class ObjectMeta:
    """The metadata of an object. Unset collections are None."""

    name: str = ""
    namespace: str = ""
    uid: str = ""
    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None
    finalizers: list[str] | None = None
    owner_references: list[OwnerReference] = field(default_factory=list)
    creation_timestamp: datetime | None = None
    deletion_timestamp: datetime | None = None


@dataclass(frozen=True)
class NamespacedName:
    """The namespace and name of an object."""

    namespace: str = ""
    name: str = ""

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


def reference_to(obj: ObjectMeta, of: GroupVersionKind) -> ObjectReference:
    """Return an object reference to obj, presumed to be of the given kind."""
    api_version, kind = of.to_api_version_and_kind()
    return ObjectReference(
        api_version=api_version,
        kind=kind,
        namespace=obj.namespace,
        name=obj.name,
        uid=obj.uid,
    )


def typed_reference_to(obj: ObjectMeta, of: GroupVersionKind) -> TypedReference:
    """Return a typed reference to obj, presumed to be of the given kind."""
    api_version, kind = of.to_api_version_and_kind()
    return TypedReference(api_version=api_version, kind=kind, name=obj.name, uid=obj.uid)


def as_owner(ref: TypedReference) -> OwnerReference:
    """Convert a typed reference to an owner reference."""
    return OwnerReference(
        api_version=ref.api_version, kind=ref.kind, name=ref.name, uid=ref.uid
    )


def as_controller(ref: TypedReference) -> OwnerReference:
    """Convert a typed reference to a controller reference."""
    return replace(as_owner(ref), controller=True)


def get_controller_of(obj: ObjectMeta) -> OwnerReference | None:
    """Return the owner reference that controls obj, if any."""
    for ref in obj.owner_references or []:
        if ref.controller:
            return ref
    return None


def have_same_controller(a: ObjectMeta, b: ObjectMeta) -> bool:
    """Return True if both objects are controlled by the same object."""
    ac = get_controller_of(a)
    bc = get_controller_of(b)
    if ac is None or bc is None:
        return False
    return ac.uid == bc.uid


def namespaced_name_of(ref: ObjectReference) -> NamespacedName:
    """Return the namespaced name of the referenced object."""
    return NamespacedName(namespace=ref.namespace, name=ref.name)


def add_owner_reference(obj: ObjectMeta, ref: OwnerReference) -> None:
    """Add ref to obj's owners, replacing any owner with the same UID."""
    refs = list(obj.owner_references or [])
    for i, existing in enumerate(refs):
        if existing.uid == ref.uid:
            refs[i] = ref
            obj.owner_references = refs
            return
    refs.append(ref)
    obj.owner_references = refs


def add_controller_reference(obj: ObjectMeta, ref: OwnerReference) -> None:
    """Add ref to obj's owners. Raises if obj has a different controller."""
    current = get_controller_of(obj)
    if current is not None and current.uid != ref.uid:
        raise errorf(
            "%s is already controlled by %s %s (UID %s)",
            obj.name,
            current.kind,
            current.name,
            current.uid,
        )
    add_owner_reference(obj, ref)


def add_finalizer(obj: ObjectMeta, finalizer: str) -> None:
    """Add a finalizer to obj unless it is already present."""
    existing = obj.finalizers or []
    if finalizer in existing:
        return
    obj.finalizers = [*existing, finalizer]


def remove_finalizer(obj: ObjectMeta, finalizer: str) -> None:
    """Remove a finalizer from obj."""
    if obj.finalizers is None:
        return
    obj.finalizers = [f for f in obj.finalizers if f != finalizer]


def finalizer_exists(obj: ObjectMeta, finalizer: str) -> bool:
    """Return True if obj has the finalizer."""
    return finalizer in (obj.finalizers or [])


def add_labels(obj: ObjectMeta, labels: dict[str, str]) -> None:
    """Add labels to obj."""
    if obj.labels is None:
        obj.labels = dict(labels)
        return
    obj.labels.update(labels)


def remove_labels(obj: ObjectMeta, *args: str) -> None:
    """Remove the labels with the given keys from obj."""
    if obj.labels is None:
        return
    for key in args:
        obj.labels.pop(key, None)


def add_annotations(obj: ObjectMeta, annotations: dict[str, str]) -> None:
    """Add annotations to obj."""
    if obj.annotations is None:
        obj.annotations = dict(annotations)
        return
    obj.annotations.update(annotations)


def remove_annotations(obj: ObjectMeta, *args: str) -> None:
    """Remove the annotations with the given keys from obj."""
    if obj.annotations is None:
        return
    for key in args:
        obj.annotations.pop(key, None)


def was_deleted(obj: ObjectMeta) -> bool:
    """Return True if obj was deleted."""
    return obj.deletion_timestamp is not None


def was_created(obj: ObjectMeta) -> bool:
    """Return True if obj was created."""
    return obj.creation_timestamp is not None


def _annotation(obj: ObjectMeta, key: str) -> str:
    return (obj.annotations or {}).get(key, "")


def get_external_name(obj: ObjectMeta) -> str:
    """Return obj's external name annotation, or an empty string."""
    return _annotation(obj, ANNOTATION_KEY_EXTERNAL_NAME)


def set_external_name(obj: ObjectMeta, name: str) -> None:
    """Set obj's external name annotation."""
    add_annotations(obj, {ANNOTATION_KEY_EXTERNAL_NAME: name})


def _format_time(when: datetime) -> str:
    if when.tzinfo is None:
        when = when.astimezone()
    text = when.replace(microsecond=0).isoformat()
    if text.endswith("+00:00") and when.utcoffset() == timedelta(0):
        text = text[: -len("+00:00")] + "Z"
    return text


def _parse_time(text: str) -> datetime | None:
    match = _RFC3339.fullmatch(text)
    if match is None:
        return None
    year, month, day, hour, minute, second, fraction, offset = match.groups()
    micro = int((fraction[1:] + "000000")[:6]) if fraction else 0
    if offset in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = -1 if offset[0] == "-" else 1
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        if hours > 23 or minutes > 59:
            return None
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    try:
        return datetime(
            int(year), int(month), int(day), int(hour), int(minute), int(second), micro, tz
        )
    except ValueError:
        return None


def get_external_create_pending(obj: ObjectMeta) -> datetime | None:
    """Return when external creation was last pending, or None."""
    return _parse_time(_annotation(obj, ANNOTATION_KEY_EXTERNAL_CREATE_PENDING))


def set_external_create_pending(obj: ObjectMeta, when: datetime) -> None:
    """Record when external creation was last pending."""
    add_annotations(obj, {ANNOTATION_KEY_EXTERNAL_CREATE_PENDING: _format_time(when)})


def get_external_create_succeeded(obj: ObjectMeta) -> datetime | None:
    """Return when the external resource was last created, or None."""
    return _parse_time(_annotation(obj, ANNOTATION_KEY_EXTERNAL_CREATE_SUCCEEDED))


def set_external_create_succeeded(obj: ObjectMeta, when: datetime) -> None:
    """Record when the external resource was last created."""
    add_annotations(obj, {ANNOTATION_KEY_EXTERNAL_CREATE_SUCCEEDED: _format_time(when)})


def get_external_create_failed(obj: ObjectMeta) -> datetime | None:
    """Return when external creation last failed, or None."""
    return _parse_time(_annotation(obj, ANNOTATION_KEY_EXTERNAL_CREATE_FAILED))


def set_external_create_failed(obj: ObjectMeta, when: datetime) -> None:
    """Record when external creation last failed."""
    add_annotations(obj, {ANNOTATION_KEY_EXTERNAL_CREATE_FAILED: _format_time(when)})


def _after(a: datetime | None, b: datetime | None) -> bool:
    if a is None:
        return False
    if b is None:
        return True
    return a > b


def external_create_incomplete(obj: ObjectMeta) -> bool:
    """Return True if the pending annotation is newer than succeeded and failed."""
    pending = get_external_create_pending(obj)
    succeeded = get_external_create_succeeded(obj)
    failed = get_external_create_failed(obj)

    if pending is None:
        return False

    latest = failed if _after(failed, succeeded) else succeeded
    return _after(pending, latest)


def external_create_succeeded_during(obj: ObjectMeta, duration: timedelta) -> bool:
    """Return True if the external resource was created within duration."""
    when = get_external_create_succeeded(obj)
    if when is None:
        return False
    return datetime.now(timezone.utc) - when < duration


def _fnv32a(data: bytes, value: int = _FNV32_OFFSET) -> int:
    for byte in data:
        value ^= byte
        value = (value * _FNV32_PRIME) & 0xFFFFFFFF
    return value


def annotation_key_propagate_to(obj: ObjectMeta) -> str:
    """Return the annotation key consenting to propagation to obj."""
    digest = _fnv32a(obj.name.encode("utf-8"), _fnv32a(obj.namespace.encode("utf-8")))
    return f"{ANNOTATION_KEY_PROPAGATE_TO_PREFIX}{digest:x}"


def allow_propagation(source: ObjectMeta, target: ObjectMeta) -> None:
    """Add consenting annotations to both objects. Deprecated."""
    add_annotations(
        target,
        {
            ANNOTATION_KEY_PROPAGATE_FROM_NAMESPACE: source.namespace,
            ANNOTATION_KEY_PROPAGATE_FROM_NAME: source.name,
        },
    )
    add_annotations(
        source,
        {annotation_key_propagate_to(target): f"{target.namespace}/{target.name}"},
    )


def allows_propagation_from(target: ObjectMeta) -> NamespacedName:
    """Return the name of the object target should be propagated from."""
    return NamespacedName(
        namespace=_annotation(target, ANNOTATION_KEY_PROPAGATE_FROM_NAMESPACE),
        name=_annotation(target, ANNOTATION_KEY_PROPAGATE_FROM_NAME),
    )


def allows_propagation_to(source: ObjectMeta) -> set[NamespacedName]:
    """Return the names of the objects source may be propagated to."""
    targets: set[NamespacedName] = set()
    for key, value in (source.annotations or {}).items():
        if not key.startswith(ANNOTATION_KEY_PROPAGATE_TO_PREFIX):
            continue
        parts = value.split("/")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            continue
        targets.add(NamespacedName(namespace=parts[0], name=parts[1]))
    return targets


def _is_error(value: Any) -> bool:
    return isinstance(value, Error)