"""Resource group configuration dataclass."""

import argparse
from dataclasses import dataclass

from cloudinfra.cloud.azure.defaults import validate_location
from cloudinfra.cloud.resources import ResourceKey
from cloudinfra.config.utils import require_non_empty


@dataclass
class ResourceGroupConfig:
    subscription_id: str
    name: str
    location: str

    @staticmethod
    def from_args(args: argparse.Namespace) -> "ResourceGroupConfig":
        location = require_non_empty(args.location, "--location")
        return ResourceGroupConfig(
            subscription_id=require_non_empty(
                args.subscription_id,
                "--subscription-id (or AZURE_SUBSCRIPTION_ID)",
            ),
            name=require_non_empty(args.resource_group, "--resource-group"),
            location=validate_location(location),
        )

    @property
    def key(self) -> ResourceKey:
        return ResourceKey.resource_group_key(self.name)

    def to_dict(self):
        return {
            "subscriptionId": self.subscription_id,
            "name": self.name,
            "location": self.location,
        }
