"""Network configuration dataclasses.

Covers the virtual network and subnet, the network security group with
its single embedded rule, the public IP, and the network interface that
binds them together.
"""

import argparse
from dataclasses import dataclass

from cloudinfra.cloud.resources import ResourceKey, ResourceKind
from cloudinfra.config.resource_group_config import ResourceGroupConfig
from cloudinfra.config.utils import (
    parse_address_prefix,
    require_non_empty,
    validate_choice,
    validate_port,
)
from cloudinfra.errors import ConfigurationError

PROTOCOLS = ["Tcp", "Udp", "Icmp", "*"]
ACCESS_DECISIONS = ["Allow", "Deny"]
DIRECTIONS = ["Inbound", "Outbound"]
ALLOCATION_METHODS = ["Static", "Dynamic"]
PUBLIC_IP_SKUS = ["Basic", "Standard"]

MIN_RULE_PRIORITY = 100
MAX_RULE_PRIORITY = 4096


@dataclass
class NetworkConfig:
    resource_group: str
    location: str
    name: str
    address_prefix: str
    subnet_name: str
    subnet_prefix: str

    @staticmethod
    def from_args(
        args: argparse.Namespace, group: ResourceGroupConfig
    ) -> "NetworkConfig":
        network = parse_address_prefix(args.vnet_prefix, "--vnet-prefix")
        subnet = parse_address_prefix(args.subnet_prefix, "--subnet-prefix")
        if subnet.version != network.version or not subnet.subnet_of(network):
            raise ConfigurationError(
                f"Subnet prefix {subnet} is not inside "
                f"virtual network prefix {network}"
            )
        return NetworkConfig(
            resource_group=group.name,
            location=group.location,
            name=require_non_empty(args.vnet_name, "--vnet-name"),
            address_prefix=str(network),
            subnet_name=require_non_empty(args.subnet_name, "--subnet-name"),
            subnet_prefix=str(subnet),
        )

    @property
    def key(self) -> ResourceKey:
        return ResourceKey(
            ResourceKind.VIRTUAL_NETWORK, self.name, self.resource_group
        )

    @property
    def subnet_key(self) -> ResourceKey:
        return ResourceKey(
            ResourceKind.SUBNET,
            self.subnet_name,
            self.resource_group,
            parent=self.name,
        )

    def to_dict(self):
        return {
            "name": self.name,
            "addressPrefix": self.address_prefix,
            "subnetName": self.subnet_name,
            "subnetPrefix": self.subnet_prefix,
        }


@dataclass
class SecurityRuleConfig:
    name: str
    priority: int
    protocol: str
    direction: str
    access: str
    source_address_prefix: str
    source_port_range: str
    destination_address_prefix: str
    destination_port_range: str

    @staticmethod
    def from_args(args: argparse.Namespace) -> "SecurityRuleConfig":
        try:
            priority = int(args.rule_priority)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid rule priority: {args.rule_priority}"
            ) from e
        if not MIN_RULE_PRIORITY <= priority <= MAX_RULE_PRIORITY:
            raise ConfigurationError(
                f"Rule priority must be between {MIN_RULE_PRIORITY} and "
                f"{MAX_RULE_PRIORITY}, got {priority}"
            )
        return SecurityRuleConfig(
            name=require_non_empty(args.rule_name, "--rule-name"),
            priority=priority,
            protocol=validate_choice(
                args.rule_protocol, PROTOCOLS, "--rule-protocol"
            ),
            direction=validate_choice(
                args.rule_direction, DIRECTIONS, "--rule-direction"
            ),
            access=validate_choice(
                args.rule_access, ACCESS_DECISIONS, "--rule-access"
            ),
            source_address_prefix=require_non_empty(
                args.rule_source, "--rule-source"
            ),
            source_port_range="*",
            destination_address_prefix="*",
            destination_port_range=validate_port(
                args.rule_port, "--rule-port"
            ),
        )

    def to_dict(self):
        return {
            "name": self.name,
            "priority": self.priority,
            "protocol": self.protocol,
            "direction": self.direction,
            "access": self.access,
            "sourceAddressPrefix": self.source_address_prefix,
            "sourcePortRange": self.source_port_range,
            "destinationAddressPrefix": self.destination_address_prefix,
            "destinationPortRange": self.destination_port_range,
        }


@dataclass
class NsgConfig:
    resource_group: str
    location: str
    name: str
    rules: list[SecurityRuleConfig]

    @staticmethod
    def from_args(
        args: argparse.Namespace, group: ResourceGroupConfig
    ) -> "NsgConfig":
        return NsgConfig(
            resource_group=group.name,
            location=group.location,
            name=require_non_empty(args.nsg_name, "--nsg-name"),
            rules=[SecurityRuleConfig.from_args(args)],
        )

    @property
    def key(self) -> ResourceKey:
        return ResourceKey(
            ResourceKind.NETWORK_SECURITY_GROUP, self.name, self.resource_group
        )

    def to_dict(self):
        return {
            "name": self.name,
            "rules": [rule.to_dict() for rule in self.rules],
        }


@dataclass
class PublicIpConfig:
    resource_group: str
    location: str
    name: str
    allocation_method: str
    sku: str

    @staticmethod
    def from_args(
        args: argparse.Namespace, group: ResourceGroupConfig
    ) -> "PublicIpConfig":
        allocation = validate_choice(
            args.public_ip_allocation,
            ALLOCATION_METHODS,
            "--public-ip-allocation",
        )
        sku = validate_choice(
            args.public_ip_sku, PUBLIC_IP_SKUS, "--public-ip-sku"
        )
        if sku == "Standard" and allocation != "Static":
            raise ConfigurationError(
                "Standard SKU public IPs require Static allocation"
            )
        return PublicIpConfig(
            resource_group=group.name,
            location=group.location,
            name=require_non_empty(args.public_ip_name, "--public-ip-name"),
            allocation_method=allocation,
            sku=sku,
        )

    @property
    def key(self) -> ResourceKey:
        return ResourceKey(
            ResourceKind.PUBLIC_IP, self.name, self.resource_group
        )

    def to_dict(self):
        return {
            "name": self.name,
            "allocationMethod": self.allocation_method,
            "sku": self.sku,
        }


@dataclass
class NicConfig:
    resource_group: str
    location: str
    name: str

    @staticmethod
    def from_args(
        args: argparse.Namespace, group: ResourceGroupConfig
    ) -> "NicConfig":
        return NicConfig(
            resource_group=group.name,
            location=group.location,
            name=require_non_empty(args.nic_name, "--nic-name"),
        )

    @property
    def key(self) -> ResourceKey:
        return ResourceKey(
            ResourceKind.NETWORK_INTERFACE, self.name, self.resource_group
        )

    def to_dict(self):
        return {"name": self.name}
