"""Virtual machine deployment with size fallback.

A VM is created with the primary size first. When the provider reports
that the size has no capacity in the location, the same request is
retried with each fallback size in order. Any other failure ends the
deployment immediately.
"""

import logging
from dataclasses import dataclass

from cloudinfra.cloud.cloud_api import CloudApi
from cloudinfra.cloud.resources import (
    AdminCredentials,
    ResourceHandle,
    ResourceKey,
)
from cloudinfra.config import ImageReference, VmConfig
from cloudinfra.errors import CapacityError, CapacityExhausted
from cloudinfra.provisioning.credentials import CredentialProvider
from cloudinfra.provisioning.ensure import require

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VmSpec:
    """Everything about the VM request except its size."""

    resource_group: str
    name: str
    location: str
    image: ImageReference
    nic: ResourceHandle
    credentials: AdminCredentials

    @staticmethod
    def build(
        config: VmConfig, nic: ResourceHandle, credentials: AdminCredentials
    ) -> "VmSpec":
        return VmSpec(
            resource_group=config.resource_group,
            name=config.name,
            location=config.location,
            image=config.image,
            nic=nic,
            credentials=credentials,
        )


def create_with_fallback(
    api: CloudApi, spec: VmSpec, sizes: list[str]
) -> ResourceHandle:
    """Try each size in order until one is not rejected for capacity.

    Args:
        api: Provider API
        spec: Size-independent VM request
        sizes: Primary size followed by the fallback sizes

    Returns:
        The created VM

    Raises:
        CapacityExhausted: If every size hit a capacity error
        ProviderError: On the first failure that is not a capacity error
    """
    attempted = []
    for size in sizes:
        attempted.append(size)
        logger.info(
            f"Creating virtual machine '{spec.name}' with size {size} "
            f"in {spec.location}"
        )
        try:
            return api.create_virtual_machine(spec, size)
        except CapacityError as e:
            remaining = len(sizes) - len(attempted)
            logger.warning(
                f"Size {size} unavailable in {spec.location}: {e.message}"
                + (f"; {remaining} fallback size(s) left" if remaining else "")
            )

    raise CapacityExhausted(spec.name, spec.location, attempted)


def deploy_vm(
    api: CloudApi,
    config: VmConfig,
    credential_provider: CredentialProvider,
) -> ResourceHandle:
    """Deploy the VM unless it already exists.

    The NIC must exist. Credentials are only requested when the VM is
    actually going to be created.

    Raises:
        PrerequisiteMissing: If the resource group or NIC is missing
        CapacityExhausted: If no candidate size had capacity
        ProviderError: For any other provider failure
    """
    require(
        api,
        ResourceKey.resource_group_key(config.resource_group),
        hint="run the resource-group step first",
    )
    nic = require(
        api, config.nic_key, hint="run the network-interface step first"
    )

    existing = api.get_virtual_machine(config.resource_group, config.name)
    if existing is not None:
        logger.info(f"Virtual machine '{config.name}' already exists, skipping")
        return existing

    credentials = credential_provider.get_credentials(config.admin_username)
    spec = VmSpec.build(config, nic, credentials)
    vm = create_with_fallback(api, spec, config.candidate_sizes())
    logger.info(
        f"Created {config.key} with size {vm.properties.get('vm_size')}"
    )
    return vm
