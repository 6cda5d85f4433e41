"""Existence-checked resource creation.

Every resource is looked up by key before anything is created. An
existing resource is returned as-is; its settings are never compared
with the requested configuration.
"""

import logging
from collections.abc import Callable

from cloudinfra.cloud.cloud_api import CloudApi
from cloudinfra.cloud.resources import (
    ResourceHandle,
    ResourceKey,
    StorageContext,
)
from cloudinfra.config import (
    NetworkConfig,
    NicConfig,
    NsgConfig,
    PublicIpConfig,
    ResourceGroupConfig,
    StorageConfig,
)
from cloudinfra.errors import PrerequisiteMissing

logger = logging.getLogger(__name__)


def ensure(
    api: CloudApi,
    key: ResourceKey,
    create: Callable[[], ResourceHandle],
    lookup: Callable[[], ResourceHandle | None] | None = None,
) -> ResourceHandle:
    """Return the resource at `key`, creating it first if it is absent.

    Args:
        api: Provider API used for the lookup
        key: Identity of the resource
        create: Called only when the resource does not exist
        lookup: Overrides `api.get_resource(key)` for the existence check

    Returns:
        The existing or newly created resource

    Raises:
        ProviderError: If the lookup or the creation fails
    """
    existing = lookup() if lookup else api.get_resource(key)
    if existing is not None:
        logger.info(f"{_capitalize(str(key))} already exists, skipping")
        return existing

    logger.debug(f"Creating {key}")
    handle = create()
    logger.info(f"Created {key}")
    return handle


def require(
    api: CloudApi, key: ResourceKey, hint: str | None = None
) -> ResourceHandle:
    """Look up a resource the current step depends on.

    Raises:
        PrerequisiteMissing: If the resource does not exist
    """
    handle = api.get_resource(key)
    if handle is None:
        raise PrerequisiteMissing(key, hint)
    return handle


def ensure_resource_group(
    api: CloudApi, config: ResourceGroupConfig
) -> ResourceHandle:
    return ensure(
        api,
        config.key,
        lambda: api.create_resource_group(config.name, config.location),
    )


def _require_resource_group(api: CloudApi, name: str) -> ResourceHandle:
    return require(
        api,
        ResourceKey.resource_group_key(name),
        hint="run the resource-group step first",
    )


def ensure_virtual_network(
    api: CloudApi, config: NetworkConfig
) -> tuple[ResourceHandle, ResourceHandle]:
    """Ensure the virtual network and then its subnet.

    The subnet is added to the network object as a second, separately
    checked step, so a network that exists without the subnet gets the
    subnet added.

    Returns:
        Tuple of (network, subnet)
    """
    _require_resource_group(api, config.resource_group)
    network = ensure(
        api, config.key, lambda: api.create_virtual_network(config)
    )
    subnet = ensure_subnet(api, config, network)
    return network, subnet


def ensure_subnet(
    api: CloudApi, config: NetworkConfig, network: ResourceHandle
) -> ResourceHandle:
    return ensure(
        api,
        config.subnet_key,
        lambda: api.add_subnet(
            network, config.subnet_name, config.subnet_prefix
        ),
    )


def ensure_network_security_group(
    api: CloudApi, config: NsgConfig
) -> ResourceHandle:
    _require_resource_group(api, config.resource_group)
    return ensure(
        api, config.key, lambda: api.create_network_security_group(config)
    )


def ensure_public_ip(api: CloudApi, config: PublicIpConfig) -> ResourceHandle:
    _require_resource_group(api, config.resource_group)
    return ensure(api, config.key, lambda: api.create_public_ip(config))


def ensure_network_interface(
    api: CloudApi,
    config: NicConfig,
    network: NetworkConfig,
    nsg: NsgConfig,
    public_ip: ResourceHandle,
) -> ResourceHandle:
    """Ensure a NIC bound to the subnet, the NSG and the public IP.

    The subnet and NSG must already exist; the public IP handle is passed
    in by the caller, which ensures it first.
    """
    _require_resource_group(api, config.resource_group)
    subnet = require(
        api, network.subnet_key, hint="run the network step first"
    )
    security_group = require(
        api, nsg.key, hint="run the security-group step first"
    )
    return ensure(
        api,
        config.key,
        lambda: api.create_network_interface(
            config.key, config.location, subnet, security_group, public_ip
        ),
    )


def ensure_storage_account(
    api: CloudApi, config: StorageConfig
) -> ResourceHandle:
    _require_resource_group(api, config.resource_group)
    return ensure(api, config.key, lambda: api.create_storage_account(config))


def ensure_blob_container(
    api: CloudApi, config: StorageConfig, storage: StorageContext
) -> ResourceHandle:
    return ensure(
        api,
        config.container_key,
        lambda: api.create_blob_container(
            storage, config.container_name, config.public_access
        ),
        lookup=lambda: api.get_blob_container(storage, config.container_name),
    )


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]
