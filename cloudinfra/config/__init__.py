"""Configuration dataclasses for cloudinfra steps."""

from cloudinfra.config.configs import Configs
from cloudinfra.config.network_config import (
    NetworkConfig,
    NicConfig,
    NsgConfig,
    PublicIpConfig,
    SecurityRuleConfig,
)
from cloudinfra.config.resource_group_config import ResourceGroupConfig
from cloudinfra.config.storage_config import BlobTransferConfig, StorageConfig
from cloudinfra.config.vm_config import ImageReference, VmConfig

__all__ = [
    "Configs",
    "ResourceGroupConfig",
    "NetworkConfig",
    "SecurityRuleConfig",
    "NsgConfig",
    "PublicIpConfig",
    "NicConfig",
    "ImageReference",
    "VmConfig",
    "StorageConfig",
    "BlobTransferConfig",
]
