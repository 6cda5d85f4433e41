#!/usr/bin/env python3
"""
Azure API functionality.
Azure SDK wrapper implementing CloudApi.
"""

import logging
import re
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from azure.core.exceptions import (
    AzureError,
    HttpResponseError,
    ResourceNotFoundError,
)
from azure.identity import DefaultAzureCredential
from azure.mgmt.compute import ComputeManagementClient
from azure.mgmt.network import NetworkManagementClient
from azure.mgmt.network.models import Subnet
from azure.mgmt.resource import ResourceManagementClient
from azure.mgmt.storage import StorageManagementClient
from azure.storage.blob import BlobServiceClient

from cloudinfra.cloud.azure.defaults import CAPACITY_ERROR_CODES
from cloudinfra.cloud.cloud_api import CloudApi
from cloudinfra.cloud.resources import (
    ResourceHandle,
    ResourceKey,
    ResourceKind,
    StorageContext,
)
from cloudinfra.errors import CapacityError, PrerequisiteMissing, ProviderError

if TYPE_CHECKING:
    from cloudinfra.config import (
        NetworkConfig,
        NsgConfig,
        PublicIpConfig,
        StorageConfig,
    )
    from cloudinfra.provisioning.vm import VmSpec

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Windows computer names are limited to 15 characters
MAX_COMPUTER_NAME_LENGTH = 15

_CODE_IN_MESSAGE = re.compile(r"^\((\w+)\)")


def error_code(error: HttpResponseError) -> str | None:
    """Extract the provider error code from an SDK exception.

    Uses the parsed OData error when the SDK produced one, otherwise the
    `(Code) message` prefix Azure puts on error messages.
    """
    odata = getattr(error, "error", None)
    code = getattr(odata, "code", None)
    if code:
        return code
    match = _CODE_IN_MESSAGE.match(str(error.message or error).strip())
    return match.group(1) if match else None


def is_capacity_error(error: HttpResponseError) -> bool:
    """True when Azure says the requested size has no capacity here.

    The capacity code is sometimes only present in the inner details of a
    deployment failure, so the whole message is searched as well.
    """
    if error_code(error) in CAPACITY_ERROR_CODES:
        return True
    text = str(error)
    return any(code in text for code in CAPACITY_ERROR_CODES)


@contextmanager
def provider_errors(action: str) -> Iterator[None]:
    """Translate Azure SDK exceptions raised inside the block.

    Raises:
        CapacityError: For size/SKU capacity errors
        ProviderError: For every other SDK failure
    """
    try:
        yield
    except HttpResponseError as e:
        code = error_code(e)
        message = f"{action} failed: {e.message or e}"
        if is_capacity_error(e):
            raise CapacityError(message, code=code) from e
        raise ProviderError(message, code=code) from e
    except AzureError as e:
        raise ProviderError(f"{action} failed: {e}") from e


def _get_or_none(action: str, fn: Callable[[], T]) -> T | None:
    with provider_errors(action):
        try:
            return fn()
        except ResourceNotFoundError:
            return None


class AzureApi(CloudApi):
    """Azure implementation of CloudApi."""

    def __init__(self, subscription_id: str, credential: Any = None):
        self.subscription_id = subscription_id
        self._credential = credential
        self._resource_client: ResourceManagementClient | None = None
        self._network_client: NetworkManagementClient | None = None
        self._compute_client: ComputeManagementClient | None = None
        self._storage_client: StorageManagementClient | None = None

    @property
    def credential(self) -> Any:
        if self._credential is None:
            self._credential = DefaultAzureCredential()
        return self._credential

    @property
    def resource_client(self) -> ResourceManagementClient:
        if self._resource_client is None:
            self._resource_client = ResourceManagementClient(
                self.credential, self.subscription_id
            )
        return self._resource_client

    @property
    def network_client(self) -> NetworkManagementClient:
        if self._network_client is None:
            self._network_client = NetworkManagementClient(
                self.credential, self.subscription_id
            )
        return self._network_client

    @property
    def compute_client(self) -> ComputeManagementClient:
        if self._compute_client is None:
            self._compute_client = ComputeManagementClient(
                self.credential, self.subscription_id
            )
        return self._compute_client

    @property
    def storage_client(self) -> StorageManagementClient:
        if self._storage_client is None:
            self._storage_client = StorageManagementClient(
                self.credential, self.subscription_id
            )
        return self._storage_client

    # Resource groups

    def get_resource_group(self, name: str) -> ResourceHandle | None:
        group = _get_or_none(
            f"Looking up resource group {name}",
            lambda: self.resource_client.resource_groups.get(name),
        )
        if group is None:
            return None
        return ResourceHandle(
            key=ResourceKey.resource_group_key(name),
            id=group.id,
            location=group.location,
        )

    def create_resource_group(
        self, name: str, location: str
    ) -> ResourceHandle:
        logger.debug(f"Creating resource group: {name} in {location}")
        with provider_errors(f"Creating resource group {name}"):
            group = self.resource_client.resource_groups.create_or_update(
                name, {"location": location}
            )
        return ResourceHandle(
            key=ResourceKey.resource_group_key(name),
            id=group.id,
            location=group.location,
        )

    # Networking

    @staticmethod
    def _network_handle(resource_group: str, vnet) -> ResourceHandle:
        address_space = vnet.address_space
        return ResourceHandle(
            key=ResourceKey(
                ResourceKind.VIRTUAL_NETWORK, vnet.name, resource_group
            ),
            id=vnet.id,
            location=vnet.location,
            properties={
                "address_prefixes": list(
                    (address_space.address_prefixes if address_space else None)
                    or []
                ),
                "subnets": [subnet.name for subnet in vnet.subnets or []],
            },
        )

    @staticmethod
    def _subnet_handle(
        resource_group: str, network: str, subnet
    ) -> ResourceHandle:
        return ResourceHandle(
            key=ResourceKey(
                ResourceKind.SUBNET, subnet.name, resource_group, network
            ),
            id=subnet.id,
            properties={"address_prefix": subnet.address_prefix},
        )

    def get_virtual_network(
        self, resource_group: str, name: str
    ) -> ResourceHandle | None:
        vnet = _get_or_none(
            f"Looking up virtual network {name}",
            lambda: self.network_client.virtual_networks.get(
                resource_group, name
            ),
        )
        if vnet is None:
            return None
        return self._network_handle(resource_group, vnet)

    def create_virtual_network(
        self, config: "NetworkConfig"
    ) -> ResourceHandle:
        logger.debug(
            f"Creating virtual network: {config.name} "
            f"({config.address_prefix})"
        )
        with provider_errors(f"Creating virtual network {config.name}"):
            poller = self.network_client.virtual_networks.begin_create_or_update(
                config.resource_group,
                config.name,
                {
                    "location": config.location,
                    "address_space": {
                        "address_prefixes": [config.address_prefix]
                    },
                },
            )
            vnet = poller.result()
        return self._network_handle(config.resource_group, vnet)

    def get_subnet(
        self, resource_group: str, network: str, name: str
    ) -> ResourceHandle | None:
        subnet = _get_or_none(
            f"Looking up subnet {network}/{name}",
            lambda: self.network_client.subnets.get(
                resource_group, network, name
            ),
        )
        if subnet is None:
            return None
        return self._subnet_handle(resource_group, network, subnet)

    def add_subnet(
        self, network: ResourceHandle, name: str, address_prefix: str
    ) -> ResourceHandle:
        resource_group = network.key.resource_group
        logger.debug(
            f"Adding subnet {name} ({address_prefix}) to {network.name}"
        )
        with provider_errors(f"Adding subnet {name} to {network.name}"):
            vnet = self.network_client.virtual_networks.get(
                resource_group, network.name
            )
            vnet.subnets = list(vnet.subnets or []) + [
                Subnet(name=name, address_prefix=address_prefix)
            ]
            poller = self.network_client.virtual_networks.begin_create_or_update(
                resource_group, network.name, vnet
            )
            updated = poller.result()

        for subnet in updated.subnets or []:
            if subnet.name == name:
                return self._subnet_handle(resource_group, network.name, subnet)
        raise ProviderError(
            f"Subnet {name} missing from {network.name} after update"
        )

    def get_network_security_group(
        self, resource_group: str, name: str
    ) -> ResourceHandle | None:
        nsg = _get_or_none(
            f"Looking up network security group {name}",
            lambda: self.network_client.network_security_groups.get(
                resource_group, name
            ),
        )
        if nsg is None:
            return None
        return self._nsg_handle(resource_group, nsg)

    @staticmethod
    def _nsg_handle(resource_group: str, nsg) -> ResourceHandle:
        rules = [
            {
                "name": rule.name,
                "priority": rule.priority,
                "protocol": rule.protocol,
                "direction": rule.direction,
                "access": rule.access,
                "source_address_prefix": rule.source_address_prefix,
                "destination_port_range": rule.destination_port_range,
            }
            for rule in nsg.security_rules or []
        ]
        return ResourceHandle(
            key=ResourceKey(
                ResourceKind.NETWORK_SECURITY_GROUP, nsg.name, resource_group
            ),
            id=nsg.id,
            location=nsg.location,
            properties={"security_rules": rules},
        )

    def create_network_security_group(
        self, config: "NsgConfig"
    ) -> ResourceHandle:
        logger.debug(f"Creating network security group: {config.name}")
        rules = [
            {
                "name": rule.name,
                "protocol": rule.protocol,
                "priority": rule.priority,
                "direction": rule.direction,
                "access": rule.access,
                "source_address_prefix": rule.source_address_prefix,
                "source_port_range": rule.source_port_range,
                "destination_address_prefix": rule.destination_address_prefix,
                "destination_port_range": rule.destination_port_range,
            }
            for rule in config.rules
        ]
        for rule in config.rules:
            logger.debug(
                f"With rule {rule.name}: {rule.direction} {rule.protocol} "
                f"port {rule.destination_port_range} {rule.access} "
                f"(priority {rule.priority})"
            )
        client = self.network_client.network_security_groups
        with provider_errors(f"Creating network security group {config.name}"):
            poller = client.begin_create_or_update(
                config.resource_group,
                config.name,
                {"location": config.location, "security_rules": rules},
            )
            nsg = poller.result()
        return self._nsg_handle(config.resource_group, nsg)

    @staticmethod
    def _public_ip_handle(resource_group: str, ip) -> ResourceHandle:
        return ResourceHandle(
            key=ResourceKey(ResourceKind.PUBLIC_IP, ip.name, resource_group),
            id=ip.id,
            location=ip.location,
            properties={
                "ip_address": ip.ip_address,
                "allocation_method": ip.public_ip_allocation_method,
                "sku": ip.sku.name if ip.sku else None,
            },
        )

    def get_public_ip(
        self, resource_group: str, name: str
    ) -> ResourceHandle | None:
        ip = _get_or_none(
            f"Looking up public IP {name}",
            lambda: self.network_client.public_ip_addresses.get(
                resource_group, name
            ),
        )
        if ip is None:
            return None
        return self._public_ip_handle(resource_group, ip)

    def create_public_ip(self, config: "PublicIpConfig") -> ResourceHandle:
        logger.debug(
            f"Creating {config.allocation_method.lower()} public IP "
            f"address: {config.name}"
        )
        client = self.network_client.public_ip_addresses
        with provider_errors(f"Creating public IP {config.name}"):
            poller = client.begin_create_or_update(
                config.resource_group,
                config.name,
                {
                    "location": config.location,
                    "sku": {"name": config.sku},
                    "public_ip_allocation_method": config.allocation_method,
                    "public_ip_address_version": "IPv4",
                },
            )
            ip = poller.result()
        return self._public_ip_handle(config.resource_group, ip)

    @staticmethod
    def _nic_handle(resource_group: str, nic) -> ResourceHandle:
        ip_configs = nic.ip_configurations or []
        primary = ip_configs[0] if ip_configs else None
        return ResourceHandle(
            key=ResourceKey(
                ResourceKind.NETWORK_INTERFACE, nic.name, resource_group
            ),
            id=nic.id,
            location=nic.location,
            properties={
                "subnet_id": (
                    primary.subnet.id if primary and primary.subnet else None
                ),
                "public_ip_id": (
                    primary.public_ip_address.id
                    if primary and primary.public_ip_address
                    else None
                ),
                "nsg_id": (
                    nic.network_security_group.id
                    if nic.network_security_group
                    else None
                ),
                "private_ip_address": (
                    primary.private_ip_address if primary else None
                ),
            },
        )

    def get_network_interface(
        self, resource_group: str, name: str
    ) -> ResourceHandle | None:
        nic = _get_or_none(
            f"Looking up network interface {name}",
            lambda: self.network_client.network_interfaces.get(
                resource_group, name
            ),
        )
        if nic is None:
            return None
        return self._nic_handle(resource_group, nic)

    def create_network_interface(
        self,
        key: ResourceKey,
        location: str,
        subnet: ResourceHandle,
        nsg: ResourceHandle,
        public_ip: ResourceHandle,
    ) -> ResourceHandle:
        logger.debug(
            f"Creating network interface: {key.name} "
            f"(subnet {subnet.name}, NSG {nsg.name}, IP {public_ip.name})"
        )
        client = self.network_client.network_interfaces
        with provider_errors(f"Creating network interface {key.name}"):
            poller = client.begin_create_or_update(
                key.resource_group,
                key.name,
                {
                    "location": location,
                    "network_security_group": {"id": nsg.id},
                    "ip_configurations": [
                        {
                            "name": f"{key.name}-ipconfig",
                            "subnet": {"id": subnet.id},
                            "public_ip_address": {"id": public_ip.id},
                        }
                    ],
                },
            )
            nic = poller.result()
        return self._nic_handle(key.resource_group, nic)

    # Compute

    @staticmethod
    def _vm_handle(resource_group: str, vm) -> ResourceHandle:
        hardware = vm.hardware_profile
        return ResourceHandle(
            key=ResourceKey(
                ResourceKind.VIRTUAL_MACHINE, vm.name, resource_group
            ),
            id=vm.id,
            location=vm.location,
            properties={
                "vm_size": hardware.vm_size if hardware else None,
                "provisioning_state": vm.provisioning_state,
            },
        )

    def get_virtual_machine(
        self, resource_group: str, name: str
    ) -> ResourceHandle | None:
        vm = _get_or_none(
            f"Looking up virtual machine {name}",
            lambda: self.compute_client.virtual_machines.get(
                resource_group, name
            ),
        )
        if vm is None:
            return None
        return self._vm_handle(resource_group, vm)

    def create_virtual_machine(
        self, spec: "VmSpec", size: str
    ) -> ResourceHandle:
        params = {
            "location": spec.location,
            "hardware_profile": {"vm_size": size},
            "storage_profile": {
                "image_reference": spec.image.to_dict(),
                "os_disk": {
                    "create_option": "FromImage",
                    "managed_disk": {"storage_account_type": "Standard_LRS"},
                },
            },
            "os_profile": {
                "computer_name": spec.name[:MAX_COMPUTER_NAME_LENGTH],
                "admin_username": spec.credentials.username,
                "admin_password": spec.credentials.password,
            },
            "network_profile": {
                "network_interfaces": [{"id": spec.nic.id, "primary": True}],
            },
        }
        client = self.compute_client.virtual_machines
        with provider_errors(
            f"Creating virtual machine {spec.name} with size {size}"
        ):
            poller = client.begin_create_or_update(
                spec.resource_group, spec.name, params
            )
            vm = poller.result()
        return self._vm_handle(spec.resource_group, vm)

    # Storage

    @staticmethod
    def _storage_handle(resource_group: str, account) -> ResourceHandle:
        endpoints = account.primary_endpoints
        return ResourceHandle(
            key=ResourceKey(
                ResourceKind.STORAGE_ACCOUNT, account.name, resource_group
            ),
            id=account.id,
            location=account.location,
            properties={
                "sku": account.sku.name if account.sku else None,
                "kind": account.kind,
                "allow_blob_public_access": account.allow_blob_public_access,
                "blob_endpoint": endpoints.blob if endpoints else None,
            },
        )

    def get_storage_account(
        self, resource_group: str, name: str
    ) -> ResourceHandle | None:
        account = _get_or_none(
            f"Looking up storage account {name}",
            lambda: self.storage_client.storage_accounts.get_properties(
                resource_group, name
            ),
        )
        if account is None:
            return None
        return self._storage_handle(resource_group, account)

    def create_storage_account(
        self, config: "StorageConfig"
    ) -> ResourceHandle:
        client = self.storage_client.storage_accounts
        with provider_errors(
            f"Checking storage account name {config.account_name}"
        ):
            availability = client.check_name_availability(
                {
                    "name": config.account_name,
                    "type": "Microsoft.Storage/storageAccounts",
                }
            )
        if not availability.name_available:
            raise ProviderError(
                f"Storage account name {config.account_name} is not "
                f"available: {availability.message}",
                code=availability.reason,
            )

        logger.debug(
            f"Creating storage account: {config.account_name} "
            f"({config.sku}, {config.kind})"
        )
        with provider_errors(f"Creating storage account {config.account_name}"):
            poller = client.begin_create(
                config.resource_group,
                config.account_name,
                {
                    "location": config.location,
                    "sku": {"name": config.sku},
                    "kind": config.kind,
                    "allow_blob_public_access": config.allow_blob_public_access,
                    "minimum_tls_version": "TLS1_2",
                },
            )
            account = poller.result()
        return self._storage_handle(config.resource_group, account)

    def get_storage_context(
        self, resource_group: str, account_name: str
    ) -> StorageContext:
        account = self.get_storage_account(resource_group, account_name)
        if account is None:
            raise PrerequisiteMissing(
                ResourceKey(
                    ResourceKind.STORAGE_ACCOUNT, account_name, resource_group
                ),
                hint="run the storage step first",
            )
        with provider_errors(f"Listing keys for {account_name}"):
            keys = self.storage_client.storage_accounts.list_keys(
                resource_group, account_name
            )
        account_url = (
            account.properties.get("blob_endpoint")
            or f"https://{account_name}.blob.core.windows.net/"
        )
        return StorageContext(
            account_name=account_name,
            resource_group=resource_group,
            account_url=account_url,
            credential=keys.keys[0].value,
        )

    @staticmethod
    def _blob_service(storage: StorageContext) -> BlobServiceClient:
        return BlobServiceClient(
            account_url=storage.account_url, credential=storage.credential
        )

    def get_blob_container(
        self, storage: StorageContext, name: str
    ) -> ResourceHandle | None:
        container_client = self._blob_service(storage).get_container_client(
            name
        )
        properties = _get_or_none(
            f"Looking up blob container {name}",
            container_client.get_container_properties,
        )
        if properties is None:
            return None
        return ResourceHandle(
            key=ResourceKey(
                ResourceKind.BLOB_CONTAINER,
                name,
                storage.resource_group,
                parent=storage.account_name,
            ),
            id=container_client.url,
            properties={"public_access": properties.public_access},
        )

    def create_blob_container(
        self, storage: StorageContext, name: str, public_access: str | None
    ) -> ResourceHandle:
        access = public_access or "private"
        logger.debug(f"Creating {access} blob container: {name}")
        container_client = self._blob_service(storage).get_container_client(
            name
        )
        with provider_errors(f"Creating blob container {name}"):
            container_client.create_container(public_access=public_access)
        return ResourceHandle(
            key=ResourceKey(
                ResourceKind.BLOB_CONTAINER,
                name,
                storage.resource_group,
                parent=storage.account_name,
            ),
            id=container_client.url,
            properties={"public_access": public_access},
        )

    def upload_blob(
        self,
        storage: StorageContext,
        container: str,
        blob_name: str,
        source: Path,
    ) -> None:
        blob_client = self._blob_service(storage).get_blob_client(
            container=container, blob=blob_name
        )
        with provider_errors(f"Uploading {blob_name}"):
            with open(source, "rb") as f:
                blob_client.upload_blob(f, overwrite=True)

    def download_blob(
        self,
        storage: StorageContext,
        container: str,
        blob_name: str,
        destination: Path,
    ) -> None:
        blob_client = self._blob_service(storage).get_blob_client(
            container=container, blob=blob_name
        )
        destination.parent.mkdir(parents=True, exist_ok=True)
        try:
            with provider_errors(f"Downloading {blob_name}"):
                stream = blob_client.download_blob()
                with open(destination, "wb") as f:
                    stream.readinto(f)
        except ProviderError:
            # Drop any partial download
            destination.unlink(missing_ok=True)
            raise
