"""Shared fixtures: an in-memory CloudApi and parsed default options."""

import logging
from pathlib import Path

import pytest

from cloudinfra.cloud.base_parser import create_base_parser
from cloudinfra.cloud.cloud_api import CloudApi
from cloudinfra.cloud.resources import (
    ResourceHandle,
    ResourceKey,
    ResourceKind,
    StorageContext,
)
from cloudinfra.config import Configs
from cloudinfra.errors import PrerequisiteMissing, ProviderError


class FakeCloudApi(CloudApi):
    """Keeps resources in a dict and records every create call.

    `vm_errors` maps a VM size to the exception creating it should raise.
    """

    def __init__(self):
        self.resources: dict[ResourceKey, ResourceHandle] = {}
        self.blobs: dict[tuple[str, str, str], bytes] = {}
        self.calls: list[tuple[str, str]] = []
        self.vm_errors: dict[str, Exception] = {}
        self.vm_attempts: list[str] = []
        self.corrupt_downloads = False

    def created(self, kind: ResourceKind) -> list[str]:
        return [name for method, name in self.calls if method == kind.value]

    def _get(self, key: ResourceKey) -> ResourceHandle | None:
        return self.resources.get(key)

    def _put(
        self, key: ResourceKey, location: str | None = None, **properties
    ) -> ResourceHandle:
        self.calls.append((key.kind.value, key.name))
        handle = ResourceHandle(
            key=key,
            id=f"/fake/{key.resource_group}/{key.kind.value}/{key.name}",
            location=location,
            properties=properties,
        )
        self.resources[key] = handle
        return handle

    def get_resource_group(self, name):
        return self._get(ResourceKey.resource_group_key(name))

    def create_resource_group(self, name, location):
        return self._put(ResourceKey.resource_group_key(name), location)

    def get_virtual_network(self, resource_group, name):
        return self._get(
            ResourceKey(ResourceKind.VIRTUAL_NETWORK, name, resource_group)
        )

    def create_virtual_network(self, config):
        return self._put(
            config.key,
            config.location,
            address_prefixes=[config.address_prefix],
            subnets=[],
        )

    def get_subnet(self, resource_group, network, name):
        return self._get(
            ResourceKey(ResourceKind.SUBNET, name, resource_group, network)
        )

    def add_subnet(self, network, name, address_prefix):
        network.properties.setdefault("subnets", []).append(name)
        key = ResourceKey(
            ResourceKind.SUBNET, name, network.key.resource_group, network.name
        )
        return self._put(key, address_prefix=address_prefix)

    def get_network_security_group(self, resource_group, name):
        return self._get(
            ResourceKey(
                ResourceKind.NETWORK_SECURITY_GROUP, name, resource_group
            )
        )

    def create_network_security_group(self, config):
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
            for rule in config.rules
        ]
        return self._put(config.key, config.location, security_rules=rules)

    def get_public_ip(self, resource_group, name):
        return self._get(
            ResourceKey(ResourceKind.PUBLIC_IP, name, resource_group)
        )

    def create_public_ip(self, config):
        return self._put(
            config.key,
            config.location,
            ip_address="203.0.113.10",
            allocation_method=config.allocation_method,
            sku=config.sku,
        )

    def get_network_interface(self, resource_group, name):
        return self._get(
            ResourceKey(ResourceKind.NETWORK_INTERFACE, name, resource_group)
        )

    def create_network_interface(self, key, location, subnet, nsg, public_ip):
        return self._put(
            key,
            location,
            subnet_id=subnet.id,
            nsg_id=nsg.id,
            public_ip_id=public_ip.id,
        )

    def get_virtual_machine(self, resource_group, name):
        return self._get(
            ResourceKey(ResourceKind.VIRTUAL_MACHINE, name, resource_group)
        )

    def create_virtual_machine(self, spec, size):
        self.vm_attempts.append(size)
        if size in self.vm_errors:
            raise self.vm_errors[size]
        key = ResourceKey(
            ResourceKind.VIRTUAL_MACHINE, spec.name, spec.resource_group
        )
        return self._put(
            key,
            spec.location,
            vm_size=size,
            provisioning_state="Succeeded",
            nic_id=spec.nic.id,
            admin_username=spec.credentials.username,
        )

    def get_storage_account(self, resource_group, name):
        return self._get(
            ResourceKey(ResourceKind.STORAGE_ACCOUNT, name, resource_group)
        )

    def create_storage_account(self, config):
        return self._put(
            config.key,
            config.location,
            sku=config.sku,
            kind=config.kind,
            blob_endpoint=f"https://{config.account_name}.blob.example/",
        )

    def get_storage_context(self, resource_group, account_name):
        account = self.get_storage_account(resource_group, account_name)
        if account is None:
            raise PrerequisiteMissing(
                ResourceKey(
                    ResourceKind.STORAGE_ACCOUNT, account_name, resource_group
                )
            )
        return StorageContext(
            account_name=account_name,
            resource_group=resource_group,
            account_url=account.properties["blob_endpoint"],
            credential="fake-key",
        )

    def _container_key(self, storage, name):
        return ResourceKey(
            ResourceKind.BLOB_CONTAINER,
            name,
            storage.resource_group,
            parent=storage.account_name,
        )

    def get_blob_container(self, storage, name):
        return self._get(self._container_key(storage, name))

    def create_blob_container(self, storage, name, public_access):
        return self._put(
            self._container_key(storage, name), public_access=public_access
        )

    def upload_blob(self, storage, container, blob_name, source):
        self.calls.append(("upload", blob_name))
        self.blobs[(storage.account_name, container, blob_name)] = Path(
            source
        ).read_bytes()

    def download_blob(self, storage, container, blob_name, destination):
        self.calls.append(("download", blob_name))
        data = self.blobs.get((storage.account_name, container, blob_name))
        if data is None:
            raise ProviderError(
                f"Blob {blob_name} not found", code="BlobNotFound"
            )
        if self.corrupt_downloads:
            data = data + b"corrupted"
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(data)


def parse(*argv: str):
    return create_base_parser("test").parse_args(
        ["--subscription-id", "00000000-0000-0000-0000-000000000000", *argv]
    )


@pytest.fixture
def api():
    return FakeCloudApi()


@pytest.fixture
def make_configs(tmp_path):
    """Build Configs from command line options, with files under tmp_path."""

    def _make(*argv: str) -> Configs:
        return Configs.from_args(
            parse(
                "--sample-file",
                str(tmp_path / "sample.txt"),
                "--log-file",
                str(tmp_path / "cloudinfra.log"),
                *argv,
            )
        )

    return _make


@pytest.fixture
def configs(make_configs):
    return make_configs()


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() in ("cloudinfra.console", "cloudinfra.file"):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(logging.WARNING)
