# xpruntime

Small, dependency-free building blocks for code that manages declarative
resources: field-path access into JSON-like documents, status conditions,
common resource types, object metadata helpers, events, feature flags,
logging and error wrapping.

## Installation

```
pip install xpruntime
```

## Field paths

`xpruntime.fieldpath.parse` turns a path such as `spec.containers[0].name`,
`data[.config.yml]` or `metadata.labels['app.hash']` into `Segments`. Each
`Segment` is either a field or an index (`SegmentType.FIELD` /
`SegmentType.INDEX`); a bracketed value that is an unsigned 32-bit integer is
an index, anything else a field with surrounding quotes removed. `str()` of
`Segments` renders them back to a path. Malformed paths such as `spec[]`,
`.metadata.name` or `metadata..name` raise `ParseError`, whose message names
the byte position of the problem.

## Reading and writing by path

`xpruntime.paved.Paved` wraps a `dict` and reads and writes nested values:

```python
from xpruntime.paved import pave, is_not_found

p = pave({"spec": {"containers": [{"name": "cool"}]}})
p.get_string("spec.containers[0].name")          # "cool"
p.set_value("spec.containers[1].name", "cooler")  # grows the list
p.set_value("metadata.labels['app.hash']", "abc") # creates intermediate objects

try:
    p.get_value("status.phase")
except Exception as err:
    assert is_not_found(err)
```

Typed getters are `get_string`, `get_string_array`, `get_string_object`,
`get_bool`, `get_number` (floats only), `get_integer` and `get_value_into`,
which passes a JSON copy of the value to a converter you supply. Setters are
`set_value`, `set_string`, `set_bool` and `set_number`; values are passed
through JSON first, so dataclasses become plain dicts. A missing field or
index raises `NotFoundError`; other failures raise `xpruntime.errors.Error`.
`to_json`, `from_json`, `unstructured_content` and `set_unstructured_content`
move the whole document in and out.

`merge_value(path, value, options)` merges into the existing value according
to `xpruntime.mergeopts.MergeOptions`:

- `options=None`: the existing value is replaced.
- `keep_map_values=True`: existing map keys keep their values.
- `append_slice=True`: lists are appended to, skipping items already present.

## Conditions

```python
from xpruntime.condition import (
    ConditionType, new_conditioned_status, available, reconcile_success,
)

status = new_conditioned_status(available(), reconcile_success())
status.get_condition(ConditionType.READY).reason  # ConditionReason.AVAILABLE
```

`set_conditions` keeps at most one condition per type, and `equal` compares
statuses ignoring order and transition times. Other constructors are
`creating`, `deleting`, `unavailable` and `reconcile_error(err)`.

## Resource types

`xpruntime.resource` holds dataclasses and enums shared by resources:
`TypedReference`, `Reference`, `SecretReference`, `SecretKeySelector`,
`Selector`, `ResourceSpec`, `ResourceStatus`, `ProviderConfigStatus`,
`ProviderConfigUsage`, `DeletionPolicy`, `UpdatePolicy`, `CredentialsSource`,
`GroupVersionKind` and others, plus the connection-secret key constants.

## Metadata

`xpruntime.meta` works on `ObjectMeta` objects: finalizers, labels,
annotations, owner and controller references, the external-name annotation,
the external-create pending/succeeded/failed timestamps (RFC 3339), and the
propagation annotations.

```python
from xpruntime.meta import ObjectMeta, add_finalizer, set_external_name, get_external_name

obj = ObjectMeta(name="cool", namespace="coolns")
add_finalizer(obj, "finalizer.example")
set_external_name(obj, "external-cool")
get_external_name(obj)   # "external-cool"
```

`add_controller_reference` raises `xpruntime.errors.Error` if the object is
already controlled by a different owner.

## Other helpers

- `xpruntime.errors`: `new`, `errorf` (with `%w` wrapping), `wrap`, `wrapf`,
  `unwrap` and `cause` for message-prefixed exception chains.
- `xpruntime.feature.Flags`: a thread-safe set of enabled feature flags.
- `xpruntime.logger`: a two-level (`info`/`debug`) structured logger
  interface, with `new_nop_logger()` and `new_std_logger(logging_logger)`.
- `xpruntime.event`: `normal` and `warning` events, an `APIRecorder` that
  passes annotated events to a sink object with an `annotated_event` method,
  and a `NopRecorder`.

## What this package does not do

It does not talk to an API server, watch objects or run controllers. Events go
only to the sink you give an `APIRecorder`, and metadata helpers change only
the `ObjectMeta` objects you pass them.

## Running the tests

```
pip install -e ".[test]"
pytest
```