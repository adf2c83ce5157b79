"""Common types shared by resources: references, selectors, specs and policies."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from xpruntime.condition import ConditionedStatus

__all__ = [
    "RESOURCE_CREDENTIALS_SECRET_ENDPOINT_KEY",
    "RESOURCE_CREDENTIALS_SECRET_PORT_KEY",
    "RESOURCE_CREDENTIALS_SECRET_USER_KEY",
    "RESOURCE_CREDENTIALS_SECRET_PASSWORD_KEY",
    "RESOURCE_CREDENTIALS_SECRET_CA_KEY",
    "RESOURCE_CREDENTIALS_SECRET_CLIENT_CERT_KEY",
    "RESOURCE_CREDENTIALS_SECRET_CLIENT_KEY_KEY",
    "RESOURCE_CREDENTIALS_SECRET_TOKEN_KEY",
    "RESOURCE_CREDENTIALS_SECRET_KUBECONFIG_KEY",
    "LABEL_KEY_PROVIDER_NAME",
    "DeletionPolicy",
    "UpdatePolicy",
    "CredentialsSource",
    "GroupVersionKind",
    "ObjectReference",
    "LocalSecretReference",
    "SecretReference",
    "SecretKeySelector",
    "Reference",
    "TypedReference",
    "Selector",
    "ResourceSpec",
    "ResourceStatus",
    "CommonCredentialSelectors",
    "EnvSelector",
    "FsSelector",
    "ProviderConfigStatus",
    "ProviderConfigUsage",
    "TargetSpec",
    "TargetStatus",
]

# Keys inside a connection secret.
RESOURCE_CREDENTIALS_SECRET_ENDPOINT_KEY = "endpoint"
RESOURCE_CREDENTIALS_SECRET_PORT_KEY = "port"
RESOURCE_CREDENTIALS_SECRET_USER_KEY = "username"
RESOURCE_CREDENTIALS_SECRET_PASSWORD_KEY = "password"
RESOURCE_CREDENTIALS_SECRET_CA_KEY = "clusterCA"
RESOURCE_CREDENTIALS_SECRET_CLIENT_CERT_KEY = "clientCert"
RESOURCE_CREDENTIALS_SECRET_CLIENT_KEY_KEY = "clientKey"
RESOURCE_CREDENTIALS_SECRET_TOKEN_KEY = "token"
RESOURCE_CREDENTIALS_SECRET_KUBECONFIG_KEY = "kubeconfig"

# Label relating a provider config usage to its provider config.
LABEL_KEY_PROVIDER_NAME = "crossplane.io/provider-config"


class DeletionPolicy(str, enum.Enum):
    """What happens to an external resource when its managed resource is deleted."""

    ORPHAN = "Orphan"
    DELETE = "Delete"


class UpdatePolicy(str, enum.Enum):
    """How something should be updated."""

    AUTOMATIC = "Automatic"
    MANUAL = "Manual"


class CredentialsSource(str, enum.Enum):
    """A source from which provider credentials may be acquired."""

    NONE = "None"
    SECRET = "Secret"
    INJECTED_IDENTITY = "InjectedIdentity"
    ENVIRONMENT = "Environment"
    FILESYSTEM = "Filesystem"


@dataclass(frozen=True)
class GroupVersionKind:
    """An API group, version and kind."""

    group: str = ""
    version: str = ""
    kind: str = ""

    def to_api_version_and_kind(self) -> tuple[str, str]:
        """Return the apiVersion string and the kind."""
        if self.group:
            return f"{self.group}/{self.version}", self.kind
        return self.version, self.kind

    @classmethod
    def from_api_version_and_kind(cls, api_version: str, kind: str) -> GroupVersionKind:
        """Build from an apiVersion string; an unparseable one keeps only the kind."""
        if not api_version or api_version == "/":
            return cls(kind=kind)
        parts = api_version.split("/")
        if len(parts) == 1:
            return cls(version=parts[0], kind=kind)
        if len(parts) == 2:
            return cls(group=parts[0], version=parts[1], kind=kind)
        return cls(kind=kind)


@dataclass
class ObjectReference:
    """A full reference to an object."""

    api_version: str = ""
    kind: str = ""
    namespace: str = ""
    name: str = ""
    uid: str = ""
    resource_version: str = ""
    field_path: str = ""


@dataclass
class LocalSecretReference:
    """A reference to a secret in the same namespace as the referencer."""

    name: str


@dataclass
class SecretReference:
    """A reference to a secret in an arbitrary namespace."""

    name: str
    namespace: str


@dataclass
class SecretKeySelector(SecretReference):
    """A reference to a key of a secret in an arbitrary namespace."""

    key: str


@dataclass
class Reference:
    """A reference to a named object."""

    name: str


@dataclass
class TypedReference:
    """Refers to an object by name, kind and API version."""

    api_version: str
    kind: str
    name: str
    uid: str = ""

    def set_group_version_kind(self, gvk: GroupVersionKind) -> None:
        """Set the kind and API version from gvk."""
        self.api_version, self.kind = gvk.to_api_version_and_kind()

    def group_version_kind(self) -> GroupVersionKind:
        """Return the group, version and kind of the reference."""
        return GroupVersionKind.from_api_version_and_kind(self.api_version, self.kind)


@dataclass
class Selector:
    """Selects an object by labels or by shared controller."""

    match_labels: dict[str, str] = field(default_factory=dict)
    match_controller_ref: bool | None = None


@dataclass
class ResourceSpec:
    """The desired state of a managed resource."""

    write_connection_secret_to_reference: SecretReference | None = None
    provider_config_reference: Reference | None = None
    provider_reference: Reference | None = None
    deletion_policy: DeletionPolicy = DeletionPolicy.DELETE


@dataclass
class ResourceStatus(ConditionedStatus):
    """The observed state of a managed resource."""


@dataclass
class EnvSelector:
    """Selects an environment variable."""

    name: str


@dataclass
class FsSelector:
    """Selects a filesystem location."""

    path: str


@dataclass
class CommonCredentialSelectors:
    """Common selectors for extracting credentials."""

    fs: FsSelector | None = None
    env: EnvSelector | None = None
    secret_ref: SecretKeySelector | None = None


@dataclass
class ProviderConfigStatus(ConditionedStatus):
    """The observed status of a provider config."""

    users: int = 0


@dataclass
class ProviderConfigUsage:
    """Records that a managed resource uses a provider config."""

    provider_config_reference: Reference
    resource_reference: TypedReference


@dataclass
class TargetSpec:
    """Common fields of objects that expose infrastructure to workloads. Deprecated."""

    write_connection_secret_to_reference: LocalSecretReference | None = None
    resource_reference: ObjectReference | None = None


@dataclass
class TargetStatus(ConditionedStatus):
    """The observed status of a target. Deprecated."""