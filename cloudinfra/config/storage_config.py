"""Storage account, container and blob transfer configuration."""

import argparse
from dataclasses import dataclass
from pathlib import Path

from cloudinfra.cloud.resources import ResourceKey, ResourceKind
from cloudinfra.config.resource_group_config import ResourceGroupConfig
from cloudinfra.config.utils import (
    require_non_empty,
    validate_choice,
    validate_container_name,
    validate_storage_account_name,
)
from cloudinfra.errors import ConfigurationError

STORAGE_SKUS = [
    "Standard_LRS",
    "Standard_GRS",
    "Standard_RAGRS",
    "Standard_ZRS",
    "Premium_LRS",
]
STORAGE_KINDS = ["StorageV2", "BlobStorage", "BlockBlobStorage"]
# Maps the access level option to the value the blob API expects
CONTAINER_ACCESS_LEVELS = {
    "private": None,
    "blob": "blob",
    "container": "container",
}


@dataclass
class StorageConfig:
    resource_group: str
    location: str
    account_name: str
    sku: str
    kind: str
    allow_blob_public_access: bool
    container_name: str
    container_access: str

    @staticmethod
    def from_args(
        args: argparse.Namespace, group: ResourceGroupConfig
    ) -> "StorageConfig":
        access = validate_choice(
            args.container_access,
            list(CONTAINER_ACCESS_LEVELS),
            "--container-access",
        )
        allow_public = bool(args.allow_blob_public_access)
        if CONTAINER_ACCESS_LEVELS[access] is not None and not allow_public:
            raise ConfigurationError(
                f"Container access '{access}' requires "
                "--allow-blob-public-access on the storage account"
            )
        return StorageConfig(
            resource_group=group.name,
            location=group.location,
            account_name=validate_storage_account_name(args.storage_account),
            sku=validate_choice(args.storage_sku, STORAGE_SKUS, "--storage-sku"),
            kind=validate_choice(
                args.storage_kind, STORAGE_KINDS, "--storage-kind"
            ),
            allow_blob_public_access=allow_public,
            container_name=validate_container_name(args.container_name),
            container_access=access,
        )

    @property
    def key(self) -> ResourceKey:
        return ResourceKey(
            ResourceKind.STORAGE_ACCOUNT, self.account_name, self.resource_group
        )

    @property
    def container_key(self) -> ResourceKey:
        return ResourceKey(
            ResourceKind.BLOB_CONTAINER,
            self.container_name,
            self.resource_group,
            parent=self.account_name,
        )

    @property
    def public_access(self) -> str | None:
        return CONTAINER_ACCESS_LEVELS[self.container_access]

    def to_dict(self):
        return {
            "accountName": self.account_name,
            "sku": self.sku,
            "kind": self.kind,
            "allowBlobPublicAccess": self.allow_blob_public_access,
            "containerName": self.container_name,
            "containerAccess": self.container_access,
        }


@dataclass
class BlobTransferConfig:
    sample_file: Path
    download_prefix: str
    verify_checksum: bool = False

    @staticmethod
    def from_args(args: argparse.Namespace) -> "BlobTransferConfig":
        return BlobTransferConfig(
            sample_file=Path(
                require_non_empty(args.sample_file, "--sample-file")
            ),
            download_prefix=require_non_empty(
                args.download_prefix, "--download-prefix"
            ),
            verify_checksum=bool(args.verify_checksum),
        )

    def to_dict(self):
        return {
            "sampleFile": str(self.sample_file),
            "downloadPrefix": self.download_prefix,
            "verifyChecksum": self.verify_checksum,
        }
