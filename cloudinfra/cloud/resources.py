"""Resource identities and handles passed between provisioning steps."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ResourceKind(str, Enum):
    """Kinds of remote resources provisioned by cloudinfra."""

    RESOURCE_GROUP = "resource_group"
    VIRTUAL_NETWORK = "virtual_network"
    SUBNET = "subnet"
    NETWORK_SECURITY_GROUP = "network_security_group"
    PUBLIC_IP = "public_ip"
    NETWORK_INTERFACE = "network_interface"
    VIRTUAL_MACHINE = "virtual_machine"
    STORAGE_ACCOUNT = "storage_account"
    BLOB_CONTAINER = "blob_container"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    ResourceKind.RESOURCE_GROUP: "resource group",
    ResourceKind.VIRTUAL_NETWORK: "virtual network",
    ResourceKind.SUBNET: "subnet",
    ResourceKind.NETWORK_SECURITY_GROUP: "network security group",
    ResourceKind.PUBLIC_IP: "public IP",
    ResourceKind.NETWORK_INTERFACE: "network interface",
    ResourceKind.VIRTUAL_MACHINE: "virtual machine",
    ResourceKind.STORAGE_ACCOUNT: "storage account",
    ResourceKind.BLOB_CONTAINER: "blob container",
}


@dataclass(frozen=True)
class ResourceKey:
    """Identity of a remote resource.

    `parent` is the virtual network name for a subnet and the storage
    account name for a blob container. Resource groups carry their own
    name as `resource_group`.
    """

    kind: ResourceKind
    name: str
    resource_group: str
    parent: str | None = None

    @staticmethod
    def resource_group_key(name: str) -> "ResourceKey":
        return ResourceKey(ResourceKind.RESOURCE_GROUP, name, name)

    def __str__(self) -> str:
        if self.kind == ResourceKind.RESOURCE_GROUP:
            return f"{self.kind.label} '{self.name}'"
        scope = self.resource_group
        if self.parent:
            scope = f"{scope}/{self.parent}"
        return f"{self.kind.label} '{self.name}' in {scope}"


@dataclass
class ResourceHandle:
    """A resource as returned by the provider.

    Attributes:
        key: Identity the resource was looked up or created under
        id: Provider-assigned identifier
        location: Region the resource lives in, if it has one
        properties: Kind-specific attributes (prefixes, rules, size, ...)
    """

    key: ResourceKey
    id: str
    location: str | None = None
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.key.name


@dataclass
class StorageContext:
    """Everything needed to reach a storage account's blob endpoint."""

    account_name: str
    resource_group: str
    account_url: str
    credential: Any = field(default=None, repr=False)


@dataclass(frozen=True)
class AdminCredentials:
    username: str
    password: str = field(repr=False)
