#!/usr/bin/env python3
"""
Base Cloud API abstraction.
Defines the interface the provisioning steps use to reach a provider.

Every `get_*` method returns None when the resource does not exist and
raises ProviderError for any other failure. Every `create_*` method
blocks until the provider reports a terminal state.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

from cloudinfra.cloud.resources import (
    ResourceHandle,
    ResourceKey,
    ResourceKind,
    StorageContext,
)

if TYPE_CHECKING:
    from cloudinfra.config import (
        NetworkConfig,
        NsgConfig,
        PublicIpConfig,
        StorageConfig,
    )
    from cloudinfra.provisioning.vm import VmSpec

logger = logging.getLogger(__name__)


class CloudApi(ABC):
    """Abstract base class for provider APIs."""

    def get_resource(self, key: ResourceKey) -> ResourceHandle | None:
        """Look up any resource by key.

        Returns:
            The resource handle, or None if it does not exist
        """
        kind = key.kind
        if kind == ResourceKind.RESOURCE_GROUP:
            return self.get_resource_group(key.name)
        if kind == ResourceKind.VIRTUAL_NETWORK:
            return self.get_virtual_network(key.resource_group, key.name)
        if kind == ResourceKind.SUBNET:
            return self.get_subnet(key.resource_group, key.parent, key.name)
        if kind == ResourceKind.NETWORK_SECURITY_GROUP:
            return self.get_network_security_group(
                key.resource_group, key.name
            )
        if kind == ResourceKind.PUBLIC_IP:
            return self.get_public_ip(key.resource_group, key.name)
        if kind == ResourceKind.NETWORK_INTERFACE:
            return self.get_network_interface(key.resource_group, key.name)
        if kind == ResourceKind.VIRTUAL_MACHINE:
            return self.get_virtual_machine(key.resource_group, key.name)
        if kind == ResourceKind.STORAGE_ACCOUNT:
            return self.get_storage_account(key.resource_group, key.name)
        if kind == ResourceKind.BLOB_CONTAINER:
            storage = self.get_storage_context(key.resource_group, key.parent)
            return self.get_blob_container(storage, key.name)
        raise ValueError(f"Unknown resource kind: {kind}")

    # Resource groups

    @abstractmethod
    def get_resource_group(self, name: str) -> ResourceHandle | None:
        """Get a resource group if it exists."""
        raise NotImplementedError

    @abstractmethod
    def create_resource_group(
        self, name: str, location: str
    ) -> ResourceHandle:
        """Create a resource group."""
        raise NotImplementedError

    # Networking

    @abstractmethod
    def get_virtual_network(
        self, resource_group: str, name: str
    ) -> ResourceHandle | None:
        """Get a virtual network if it exists."""
        raise NotImplementedError

    @abstractmethod
    def create_virtual_network(
        self, config: "NetworkConfig"
    ) -> ResourceHandle:
        """Create a virtual network with its address space and no subnets."""
        raise NotImplementedError

    @abstractmethod
    def get_subnet(
        self, resource_group: str, network: str, name: str
    ) -> ResourceHandle | None:
        """Get a subnet of a virtual network if it exists."""
        raise NotImplementedError

    @abstractmethod
    def add_subnet(
        self, network: ResourceHandle, name: str, address_prefix: str
    ) -> ResourceHandle:
        """Add a subnet to an existing network and resubmit the network.

        Returns:
            The handle of the new subnet
        """
        raise NotImplementedError

    @abstractmethod
    def get_network_security_group(
        self, resource_group: str, name: str
    ) -> ResourceHandle | None:
        """Get a network security group if it exists."""
        raise NotImplementedError

    @abstractmethod
    def create_network_security_group(
        self, config: "NsgConfig"
    ) -> ResourceHandle:
        """Create a network security group with its embedded rules."""
        raise NotImplementedError

    @abstractmethod
    def get_public_ip(
        self, resource_group: str, name: str
    ) -> ResourceHandle | None:
        """Get a public IP address resource if it exists."""
        raise NotImplementedError

    @abstractmethod
    def create_public_ip(self, config: "PublicIpConfig") -> ResourceHandle:
        """Create a public IP address resource."""
        raise NotImplementedError

    @abstractmethod
    def get_network_interface(
        self, resource_group: str, name: str
    ) -> ResourceHandle | None:
        """Get a network interface if it exists."""
        raise NotImplementedError

    @abstractmethod
    def create_network_interface(
        self,
        key: ResourceKey,
        location: str,
        subnet: ResourceHandle,
        nsg: ResourceHandle,
        public_ip: ResourceHandle,
    ) -> ResourceHandle:
        """Create a network interface bound to a subnet, NSG and public IP."""
        raise NotImplementedError

    # Compute

    @abstractmethod
    def get_virtual_machine(
        self, resource_group: str, name: str
    ) -> ResourceHandle | None:
        """Get a virtual machine if it exists."""
        raise NotImplementedError

    @abstractmethod
    def create_virtual_machine(
        self, spec: "VmSpec", size: str
    ) -> ResourceHandle:
        """Create a virtual machine with the given size.

        Raises:
            CapacityError: If the size is unavailable in the location
            ProviderError: For any other failure
        """
        raise NotImplementedError

    # Storage

    @abstractmethod
    def get_storage_account(
        self, resource_group: str, name: str
    ) -> ResourceHandle | None:
        """Get a storage account if it exists."""
        raise NotImplementedError

    @abstractmethod
    def create_storage_account(
        self, config: "StorageConfig"
    ) -> ResourceHandle:
        """Create a storage account."""
        raise NotImplementedError

    @abstractmethod
    def get_storage_context(
        self, resource_group: str, account_name: str
    ) -> StorageContext:
        """Build the context needed for blob operations on an account."""
        raise NotImplementedError

    @abstractmethod
    def get_blob_container(
        self, storage: StorageContext, name: str
    ) -> ResourceHandle | None:
        """Get a blob container if it exists."""
        raise NotImplementedError

    @abstractmethod
    def create_blob_container(
        self, storage: StorageContext, name: str, public_access: str | None
    ) -> ResourceHandle:
        """Create a blob container.

        Args:
            storage: Storage account context
            name: Container name
            public_access: None for private, "blob" or "container" otherwise
        """
        raise NotImplementedError

    @abstractmethod
    def upload_blob(
        self,
        storage: StorageContext,
        container: str,
        blob_name: str,
        source: Path,
    ) -> None:
        """Upload a local file, overwriting any blob of the same name."""
        raise NotImplementedError

    @abstractmethod
    def download_blob(
        self,
        storage: StorageContext,
        container: str,
        blob_name: str,
        destination: Path,
    ) -> None:
        """Download a blob, overwriting any local file at the destination."""
        raise NotImplementedError
