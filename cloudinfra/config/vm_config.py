"""VM configuration dataclass."""

import argparse
from dataclasses import dataclass, field

from cloudinfra.cloud.resources import ResourceKey, ResourceKind
from cloudinfra.config.resource_group_config import ResourceGroupConfig
from cloudinfra.config.utils import parse_size_list, require_non_empty
from cloudinfra.errors import ConfigurationError


@dataclass(frozen=True)
class ImageReference:
    publisher: str
    offer: str
    sku: str
    version: str = "latest"

    @staticmethod
    def parse(value: str) -> "ImageReference":
        """Parse an image URN of the form publisher:offer:sku:version."""
        value = require_non_empty(value, "--image")
        parts = [part.strip() for part in value.split(":")]
        if len(parts) != 4 or not all(parts):
            raise ConfigurationError(
                f"Invalid image reference: {value}. "
                "Expected publisher:offer:sku:version"
            )
        return ImageReference(*parts)

    def __str__(self) -> str:
        return f"{self.publisher}:{self.offer}:{self.sku}:{self.version}"

    def to_dict(self) -> dict[str, str]:
        return {
            "publisher": self.publisher,
            "offer": self.offer,
            "sku": self.sku,
            "version": self.version,
        }


@dataclass
class VmConfig:
    resource_group: str
    location: str
    name: str
    size: str
    image: ImageReference
    nic_name: str
    admin_username: str
    fallback_sizes: list[str] = field(default_factory=list)

    @staticmethod
    def from_args(
        args: argparse.Namespace, group: ResourceGroupConfig
    ) -> "VmConfig":
        return VmConfig(
            resource_group=group.name,
            location=group.location,
            name=require_non_empty(args.vm_name, "--vm-name"),
            size=require_non_empty(args.vm_size, "--vm-size"),
            image=ImageReference.parse(args.image),
            nic_name=require_non_empty(args.nic_name, "--nic-name"),
            admin_username=require_non_empty(
                args.admin_username, "--admin-username"
            ),
            fallback_sizes=parse_size_list(args.fallback_sizes),
        )

    @property
    def key(self) -> ResourceKey:
        return ResourceKey(
            ResourceKind.VIRTUAL_MACHINE, self.name, self.resource_group
        )

    @property
    def nic_key(self) -> ResourceKey:
        return ResourceKey(
            ResourceKind.NETWORK_INTERFACE, self.nic_name, self.resource_group
        )

    def candidate_sizes(self) -> list[str]:
        """Primary size followed by fallbacks, each size at most once."""
        sizes = []
        for size in [self.size, *self.fallback_sizes]:
            if size not in sizes:
                sizes.append(size)
        return sizes

    def to_dict(self):
        return {
            "name": self.name,
            "size": self.size,
            "fallbackSizes": list(self.fallback_sizes),
            "image": self.image.to_dict(),
            "nicName": self.nic_name,
            "adminUsername": self.admin_username,
            "location": self.location,
        }
