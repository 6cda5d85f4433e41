"""Top-level Configs dataclass."""

import argparse
from dataclasses import dataclass
from typing import Any

from cloudinfra.config.network_config import (
    NetworkConfig,
    NicConfig,
    NsgConfig,
    PublicIpConfig,
)
from cloudinfra.config.resource_group_config import ResourceGroupConfig
from cloudinfra.config.storage_config import BlobTransferConfig, StorageConfig
from cloudinfra.config.utils import require_non_empty
from cloudinfra.config.vm_config import VmConfig


@dataclass
class Configs:
    resource_group: ResourceGroupConfig
    network: NetworkConfig
    nsg: NsgConfig
    public_ip: PublicIpConfig
    nic: NicConfig
    vm: VmConfig
    storage: StorageConfig
    blob: BlobTransferConfig
    log_file: str
    show_logs: bool

    @staticmethod
    def from_args(args: argparse.Namespace) -> "Configs":
        """Build and validate every step's configuration.

        Raises:
            ConfigurationError: If any parameter is missing or invalid
        """
        group = ResourceGroupConfig.from_args(args)
        return Configs(
            resource_group=group,
            network=NetworkConfig.from_args(args, group),
            nsg=NsgConfig.from_args(args, group),
            public_ip=PublicIpConfig.from_args(args, group),
            nic=NicConfig.from_args(args, group),
            vm=VmConfig.from_args(args, group),
            storage=StorageConfig.from_args(args, group),
            blob=BlobTransferConfig.from_args(args),
            log_file=require_non_empty(args.log_file, "--log-file"),
            show_logs=args.logs,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "resourceGroup": self.resource_group.to_dict(),
            "network": self.network.to_dict(),
            "nsg": self.nsg.to_dict(),
            "publicIp": self.public_ip.to_dict(),
            "nic": self.nic.to_dict(),
            "vm": self.vm.to_dict(),
            "storage": self.storage.to_dict(),
            "blob": self.blob.to_dict(),
            "logFile": self.log_file,
            "showLogs": self.show_logs,
        }
