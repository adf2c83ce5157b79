import json
from dataclasses import dataclass

import pytest

from xpruntime import errors
from xpruntime.errors import Error
from xpruntime.mergeopts import MergeOptions
from xpruntime.paved import NotFoundError, Paved, is_not_found, pave

MALFORMED = "cannot parse path \"spec[]\": unexpected ']' at position 5"


def paved(data):
    return pave(json.loads(data) if data else {})


@pytest.mark.parametrize(
    "err, want",
    [
        (NotFoundError("boom"), True),
        (errors.wrap(NotFoundError("boom"), "because reasons"), True),
        (errors.new("boom"), False),
    ],
)
def test_is_not_found(err, want):
    assert is_not_found(err) is want


@pytest.mark.parametrize(
    "path, data, want",
    [
        ("metadata.name", '{"metadata":{"name":"cool"}}', "cool"),
        ("spec.containers[0].name", '{"spec":{"containers":[{"name":"cool"}]}}', "cool"),
        ("items[0][1]", '{"items":[["a", "b"]]}', "b"),
        ("metadata.ownerRefs[0].controller", '{"metadata":{"ownerRefs":[{"controller": true}]}}', True),
        ("metadata.version", '{"metadata":{"version":2}}', 2),
        ("metadata.version", '{"metadata":{"version":2.0}}', 2.0),
    ],
)
def test_get_value(path, data, want):
    got = paved(data).get_value(path)
    assert got == want
    assert type(got) is type(want)


@pytest.mark.parametrize(
    "path, data, exc_type, message",
    [
        ("metadata.name", '{"metadata":{"nope":"cool"}}', NotFoundError, "metadata.name: no such field"),
        ("spec.containers[1].name", '{"spec":{"containers":[{"name":"cool"}]}}', NotFoundError, "spec.containers[1]: no such element"),
        ("metadata[1]", '{"metadata":{"nope":"cool"}}', Error, "metadata: not an array"),
        ("spec.containers[nope].name", '{"spec":{"containers":[{"name":"cool"}]}}', Error, "spec.containers: not an object"),
        ("spec[]", None, Error, MALFORMED),
    ],
)
def test_get_value_errors(path, data, exc_type, message):
    with pytest.raises(exc_type) as exc:
        paved(data).get_value(path)
    assert str(exc.value) == message


def test_get_value_not_an_array_is_not_not_found():
    with pytest.raises(Error) as exc:
        paved('{"metadata":{}}').get_value("metadata[1]")
    assert not is_not_found(exc.value)


@dataclass
class Struct:
    slice: list
    string: str
    int: int


def test_get_value_into_struct():
    p = paved('{"s":{"slice":["a"],"string":"b","int":1}}')
    assert p.get_value_into("s", lambda d: Struct(**d)) == Struct(["a"], "b", 1)


def test_get_value_into_slice():
    assert paved('{"s": ["a", "b"]}').get_value_into("s", list) == ["a", "b"]


def test_get_value_into_missing_path():
    with pytest.raises(NotFoundError) as exc:
        paved("{}").get_value_into("s", list)
    assert str(exc.value) == "s: no such field"


def test_get_value_into_convert_failure():
    with pytest.raises(Error) as exc:
        paved('{"s": {"x": 1}}').get_value_into("s", lambda d: Struct(**d))
    assert str(exc.value).startswith("cannot unmarshal value from JSON")


def test_get_string():
    assert paved('{"metadata":{"name":"cool"}}').get_string("metadata.name") == "cool"


@pytest.mark.parametrize(
    "method, path, data, message",
    [
        ("get_string", "spec[]", None, MALFORMED),
        ("get_string", "metadata.version", '{"metadata":{"version":2}}', "metadata.version: not a string"),
        ("get_string_array", "spec[]", None, MALFORMED),
        ("get_string_array", "metadata.version", '{"metadata":{"version":2}}', "metadata.version: not an array"),
        ("get_string_array", "metadata.versions", '{"metadata":{"versions":[1,2]}}', "metadata.versions: not an array of strings"),
        ("get_string_object", "spec[]", None, MALFORMED),
        ("get_string_object", "metadata.version", '{"metadata":{"version":2}}', "metadata.version: not an object"),
        ("get_string_object", "metadata.versions", '{"metadata":{"versions":{"a": 2}}}', "metadata.versions: not an object with string field values"),
        ("get_bool", "spec[]", None, MALFORMED),
        ("get_bool", "metadata.name", '{"metadata":{"name":"cool"}}', "metadata.name: not a bool"),
        ("get_number", "spec[]", None, MALFORMED),
        ("get_number", "metadata.name", '{"metadata":{"name":"cool"}}', "metadata.name: not a (float64) number"),
        ("get_integer", "spec[]", None, MALFORMED),
        ("get_integer", "metadata.name", '{"metadata":{"name":"cool"}}', "metadata.name: not a (int64) number"),
    ],
)
def test_typed_getter_errors(method, path, data, message):
    with pytest.raises(Error) as exc:
        getattr(paved(data), method)(path)
    assert str(exc.value) == message


def test_get_string_array():
    p = paved('{"spec": {"containers": [{"command": ["/bin/bash"]}]}}')
    assert p.get_string_array("spec.containers[0].command") == ["/bin/bash"]


def test_get_string_object():
    p = paved('{"metadata":{"labels":{"cool":"true"}}}')
    assert p.get_string_object("metadata.labels") == {"cool": "true"}


def test_get_bool():
    p = paved('{"metadata":{"ownerRefs":[{"controller": true}]}}')
    assert p.get_bool("metadata.ownerRefs[0].controller") is True


def test_get_number():
    assert paved('{"metadata":{"version":2.0}}').get_number("metadata.version") == 2.0


def test_get_integer():
    assert paved('{"metadata":{"version":2}}').get_integer("metadata.version") == 2


def test_get_integer_rejects_bool():
    with pytest.raises(Error):
        paved('{"a": true}').get_integer("a")


@dataclass
class OwnerRef:
    api_version: str
    kind: str
    name: str
    uid: str


@pytest.mark.parametrize(
    "data, path, value, want",
    [
        ('{"metadata":{"name":"lame"}}', "metadata.name", "cool", {"metadata": {"name": "cool"}}),
        ("{}", "metadata.name", "cool", {"metadata": {"name": "cool"}}),
        ('{"spec":{"containers":[{"name":"lame"}]}}', "spec.containers[0].name", "cool",
         {"spec": {"containers": [{"name": "cool"}]}}),
        ("{}", "spec.containers[0].name", "cool", {"spec": {"containers": [{"name": "cool"}]}}),
        ('{"spec":{"containers":[{"name":"cool"}]}}', "spec.containers[1].name", "cooler",
         {"spec": {"containers": [{"name": "cool"}, {"name": "cooler"}]}}),
        ("{}", "data[0][0]", "a", {"data": [["a"]]}),
        ('{"data":[["a"]]}', "data[0][1]", "b", {"data": [["a", "b"]]}),
        ('{"data":["a"]}', "data[2]", "c", {"data": ["a", None, "c"]}),
        ('{"metadata":{}}', "metadata.labels", {"cool": "very"},
         {"metadata": {"labels": {"cool": "very"}}}),
        ('{"metadata":{}}', "metadata.ownerRefs[0]", OwnerRef("v", "k", "n", "u"),
         {"metadata": {"ownerRefs": [{"api_version": "v", "kind": "k", "name": "n", "uid": "u"}]}}),
        ("{}", "items", ("a", "b"), {"items": ["a", "b"]}),
    ],
)
def test_set_value(data, path, value, want):
    p = paved(data)
    p.set_value(path, value)
    assert p.unstructured_content() == want


@pytest.mark.parametrize(
    "data, path, message, want",
    [
        ('{"data":{}}', "data[0]", "data is not an array", {"data": {}}),
        ('{"data":[]}', "data.name", "data is not an object", {"data": []}),
        (None, "spec[]", MALFORMED, {}),
    ],
)
def test_set_value_errors(data, path, message, want):
    p = paved(data)
    with pytest.raises(Error) as exc:
        p.set_value(path, None)
    assert str(exc.value) == message
    assert p.unstructured_content() == want


def test_set_value_unserialisable():
    with pytest.raises(Error) as exc:
        paved("{}").set_value("a", object())
    assert str(exc.value).startswith("cannot marshal value to JSON")


def test_set_value_mutates_underlying_object():
    obj = {}
    pave(obj).set_string("a.b", "c")
    assert obj == {"a": {"b": "c"}}


def test_unstructured_content_of_empty_paved():
    assert Paved().unstructured_content() == {}


def test_set_unstructured_content():
    p = Paved()
    p.set_unstructured_content({"a": 1})
    assert p.get_integer("a") == 1


def test_json_round_trip():
    p = paved('{"a": {"b": [1, "x", null]}}')
    assert Paved.from_json(p.to_json()) == p
    assert Paved.from_json(p.to_json().encode()).get_value("a.b[1]") == "x"


def test_from_json_rejects_non_object():
    with pytest.raises(Error):
        Paved.from_json("[1, 2]")


def _arr(values):
    return {"a": list(values)}


SRC, SRC2, DST = "e1-from-source", "e1-from-source-2", "e1-from-destination"


@pytest.mark.parametrize(
    "obj, value, options, want",
    [
        ({"a": DST}, [SRC], None, _arr([SRC])),
        ({"a": [DST]}, [SRC], MergeOptions(append_slice=False), _arr([SRC])),
        ({"a": [DST]}, [SRC], MergeOptions(append_slice=True), _arr([DST, SRC])),
        ({"a": [DST, SRC]}, [SRC, SRC2], MergeOptions(append_slice=True), _arr([DST, SRC, SRC2])),
        ({"a": {"a": DST}}, {"a": SRC}, None, {"a": {"a": SRC}}),
        ({"a": {"a": DST}}, {"a": SRC}, MergeOptions(keep_map_values=False), {"a": {"a": SRC}}),
        ({"a": {"a": DST}}, {"a": SRC}, MergeOptions(keep_map_values=True), {"a": {"a": DST}}),
    ],
)
def test_merge_value(obj, value, options, want):
    p = pave(obj)
    p.merge_value("a", value, options)
    assert p.unstructured_content() == want


def test_merge_value_missing_path_sets_value():
    p = pave({})
    p.merge_value("a.b", {"c": 1}, MergeOptions(keep_map_values=True))
    assert p.unstructured_content() == {"a": {"b": {"c": 1}}}


def test_merge_value_keeps_other_map_keys():
    p = pave({"a": {"x": 1}})
    p.merge_value("a", {"y": 2}, MergeOptions())
    assert p.unstructured_content() == {"a": {"x": 1, "y": 2}}


def test_merge_value_append_to_non_list_fails():
    p = pave({"a": "scalar"})
    with pytest.raises(Error) as exc:
        p.merge_value("a", ["x"], MergeOptions(append_slice=True))
    assert str(exc.value).startswith("failed to merge values")


def test_merge_value_propagates_non_not_found_errors():
    p = pave({"a": "scalar"})
    with pytest.raises(Error) as exc:
        p.merge_value("a[0]", "x", MergeOptions())
    assert str(exc.value) == "a: not an array"