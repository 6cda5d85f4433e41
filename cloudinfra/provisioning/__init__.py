"""Provisioning operations built on CloudApi."""

from cloudinfra.provisioning.blob import verify_blob_transfer
from cloudinfra.provisioning.credentials import (
    CredentialProvider,
    EnvCredentialProvider,
    PromptCredentialProvider,
    StaticCredentialProvider,
    get_credential_provider,
)
from cloudinfra.provisioning.ensure import (
    ensure,
    ensure_blob_container,
    ensure_network_interface,
    ensure_network_security_group,
    ensure_public_ip,
    ensure_resource_group,
    ensure_storage_account,
    ensure_subnet,
    ensure_virtual_network,
    require,
)
from cloudinfra.provisioning.vm import VmSpec, create_with_fallback, deploy_vm

__all__ = [
    # Existence-checked creation
    "ensure",
    "require",
    "ensure_resource_group",
    "ensure_virtual_network",
    "ensure_subnet",
    "ensure_network_security_group",
    "ensure_public_ip",
    "ensure_network_interface",
    "ensure_storage_account",
    "ensure_blob_container",
    # Virtual machines
    "VmSpec",
    "create_with_fallback",
    "deploy_vm",
    # Credentials
    "CredentialProvider",
    "EnvCredentialProvider",
    "PromptCredentialProvider",
    "StaticCredentialProvider",
    "get_credential_provider",
    # Blob transfer
    "verify_blob_transfer",
]
