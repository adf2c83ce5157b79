import pytest

from xpruntime.condition import available, reconcile_success
from xpruntime.resource import (
    RESOURCE_CREDENTIALS_SECRET_ENDPOINT_KEY,
    DeletionPolicy,
    GroupVersionKind,
    ProviderConfigStatus,
    ProviderConfigUsage,
    Reference,
    ResourceSpec,
    ResourceStatus,
    SecretKeySelector,
    TypedReference,
    UpdatePolicy,
)


def test_gvk_to_api_version_and_kind_with_group():
    gvk = GroupVersionKind("coolstuff", "v1", "coolresource")
    assert gvk.to_api_version_and_kind() == ("coolstuff/v1", "coolresource")


def test_gvk_core_group_has_no_slash():
    gvk = GroupVersionKind("", "v1", "Pod")
    api_version, kind = gvk.to_api_version_and_kind()
    assert "/" not in api_version
    assert (api_version, kind) == (gvk.version, gvk.kind)


@pytest.mark.parametrize(
    "gvk",
    [
        GroupVersionKind("coolstuff", "v1", "coolresource"),
        GroupVersionKind("", "v1", "Pod"),
    ],
)
def test_gvk_round_trip(gvk):
    api_version, kind = gvk.to_api_version_and_kind()
    assert GroupVersionKind.from_api_version_and_kind(api_version, kind) == gvk


def test_gvk_from_invalid_api_version_keeps_only_kind():
    got = GroupVersionKind.from_api_version_and_kind("a/b/c", "coolresource")
    assert got == GroupVersionKind(kind="coolresource")


def test_gvk_from_empty_api_version_keeps_only_kind():
    got = GroupVersionKind.from_api_version_and_kind("", "coolresource")
    assert got == GroupVersionKind(kind="coolresource")


def test_typed_reference_set_and_get_gvk():
    ref = TypedReference(api_version="", kind="", name="cool")
    gvk = GroupVersionKind("coolstuff", "v1", "coolresource")
    ref.set_group_version_kind(gvk)
    assert ref.api_version == "coolstuff/v1"
    assert ref.kind == "coolresource"
    assert ref.group_version_kind() == gvk


def test_policy_values_match_api():
    assert DeletionPolicy("Orphan") is DeletionPolicy.ORPHAN
    assert DeletionPolicy.DELETE.value == "Delete"
    assert UpdatePolicy("Manual") is UpdatePolicy.MANUAL


def test_invalid_policy_rejected():
    with pytest.raises(ValueError):
        DeletionPolicy("Destroy")


def test_resource_spec_defaults():
    spec = ResourceSpec()
    assert spec.deletion_policy is DeletionPolicy.DELETE
    assert spec.provider_config_reference is None


def test_resource_status_behaves_as_conditioned_status():
    status = ResourceStatus()
    status.set_conditions(available(), reconcile_success())
    assert len(status.conditions) == 2
    assert status.get_condition("Ready").equal(available())


def test_provider_config_status_tracks_users():
    status = ProviderConfigStatus(users=3)
    status.set_conditions(available())
    assert status.users == 3
    assert status.conditions[0].type == "Ready"


def test_secret_key_selector_extends_secret_reference():
    sel = SecretKeySelector(name="creds", namespace="crossplane-system", key=RESOURCE_CREDENTIALS_SECRET_ENDPOINT_KEY)
    assert (sel.name, sel.namespace, sel.key) == ("creds", "crossplane-system", "endpoint")


def test_provider_config_usage_holds_references():
    usage = ProviderConfigUsage(Reference("default"), TypedReference("v1", "Pod", "cool", "uid-1"))
    assert usage.provider_config_reference.name == "default"
    assert usage.resource_reference.group_version_kind() == GroupVersionKind("", "v1", "Pod")