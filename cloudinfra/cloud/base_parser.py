#!/usr/bin/env python3
"""
Base argument parser shared by every provisioning step.
"""

import argparse
import os

from cloudinfra.cloud.azure.defaults import (
    DEFAULT_ADMIN_USERNAME,
    DEFAULT_CONTAINER_ACCESS,
    DEFAULT_CONTAINER_NAME,
    DEFAULT_DOWNLOAD_PREFIX,
    DEFAULT_FALLBACK_SIZES,
    DEFAULT_IMAGE,
    DEFAULT_LOCATION,
    DEFAULT_LOG_FILE,
    DEFAULT_NIC_NAME,
    DEFAULT_NSG_NAME,
    DEFAULT_PUBLIC_IP_ALLOCATION,
    DEFAULT_PUBLIC_IP_NAME,
    DEFAULT_PUBLIC_IP_SKU,
    DEFAULT_RESOURCE_GROUP,
    DEFAULT_RULE_ACCESS,
    DEFAULT_RULE_DIRECTION,
    DEFAULT_RULE_NAME,
    DEFAULT_RULE_PORT,
    DEFAULT_RULE_PRIORITY,
    DEFAULT_RULE_PROTOCOL,
    DEFAULT_RULE_SOURCE,
    DEFAULT_SAMPLE_FILE,
    DEFAULT_STORAGE_ACCOUNT,
    DEFAULT_STORAGE_KIND,
    DEFAULT_STORAGE_SKU,
    DEFAULT_SUBNET_NAME,
    DEFAULT_SUBNET_PREFIX,
    DEFAULT_VM_NAME,
    DEFAULT_VM_SIZE,
    DEFAULT_VNET_NAME,
    DEFAULT_VNET_PREFIX,
)


def create_base_parser(description: str) -> argparse.ArgumentParser:
    """Create the argument parser shared by all provisioning steps.

    Every step reads the same options so that a single invocation can run
    several steps in sequence. Defaults come from
    cloudinfra.cloud.azure.defaults.

    Args:
        description: Description for the parser

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description=description,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # Subscription and scope
    parser.add_argument(
        "--subscription-id",
        type=str,
        default=os.environ.get("AZURE_SUBSCRIPTION_ID"),
        help="Azure subscription id (default: $AZURE_SUBSCRIPTION_ID)",
    )
    parser.add_argument(
        "-g",
        "--resource-group",
        type=str,
        default=DEFAULT_RESOURCE_GROUP,
        help=f"Resource group (default: {DEFAULT_RESOURCE_GROUP})",
    )
    parser.add_argument(
        "-l",
        "--location",
        "-r",
        "--region",
        type=str,
        default=DEFAULT_LOCATION,
        dest="location",
        help=f"Azure location (default: {DEFAULT_LOCATION})",
    )

    # Virtual network
    network = parser.add_argument_group("network")
    network.add_argument("--vnet-name", default=DEFAULT_VNET_NAME)
    network.add_argument(
        "--vnet-prefix",
        default=DEFAULT_VNET_PREFIX,
        help=f"VNet address prefix (default: {DEFAULT_VNET_PREFIX})",
    )
    network.add_argument("--subnet-name", default=DEFAULT_SUBNET_NAME)
    network.add_argument(
        "--subnet-prefix",
        default=DEFAULT_SUBNET_PREFIX,
        help=f"Subnet address prefix (default: {DEFAULT_SUBNET_PREFIX})",
    )

    # Security group and its single inbound rule
    security = parser.add_argument_group("network security group")
    security.add_argument("--nsg-name", default=DEFAULT_NSG_NAME)
    security.add_argument("--rule-name", default=DEFAULT_RULE_NAME)
    security.add_argument(
        "--rule-priority", type=int, default=DEFAULT_RULE_PRIORITY
    )
    security.add_argument("--rule-protocol", default=DEFAULT_RULE_PROTOCOL)
    security.add_argument(
        "--rule-port",
        default=DEFAULT_RULE_PORT,
        help=f"Destination port or range (default: {DEFAULT_RULE_PORT})",
    )
    security.add_argument(
        "--rule-source",
        default=DEFAULT_RULE_SOURCE,
        help="Source address prefix (default: any)",
    )
    security.add_argument("--rule-access", default=DEFAULT_RULE_ACCESS)
    security.add_argument("--rule-direction", default=DEFAULT_RULE_DIRECTION)

    # Public IP and network interface
    interface = parser.add_argument_group("network interface")
    interface.add_argument("--public-ip-name", default=DEFAULT_PUBLIC_IP_NAME)
    interface.add_argument(
        "--public-ip-allocation", default=DEFAULT_PUBLIC_IP_ALLOCATION
    )
    interface.add_argument("--public-ip-sku", default=DEFAULT_PUBLIC_IP_SKU)
    interface.add_argument("--nic-name", default=DEFAULT_NIC_NAME)

    # Virtual machine
    vm = parser.add_argument_group("virtual machine")
    vm.add_argument("--vm-name", default=DEFAULT_VM_NAME)
    vm.add_argument(
        "--vm-size",
        default=DEFAULT_VM_SIZE,
        help=f"Primary VM size (default: {DEFAULT_VM_SIZE})",
    )
    vm.add_argument(
        "--fallback-sizes",
        default=",".join(DEFAULT_FALLBACK_SIZES),
        help=(
            "Comma-separated sizes tried in order when the primary size "
            "has no capacity. A size repeated here or equal to --vm-size is "
            "tried only once, so a run makes at most one attempt per "
            f"distinct size (default: {','.join(DEFAULT_FALLBACK_SIZES)})"
        ),
    )
    vm.add_argument(
        "--image",
        default=DEFAULT_IMAGE,
        help=f"Image as publisher:offer:sku:version (default: {DEFAULT_IMAGE})",
    )
    vm.add_argument("--admin-username", default=DEFAULT_ADMIN_USERNAME)

    # Storage
    storage = parser.add_argument_group("storage")
    storage.add_argument(
        "--storage-account",
        default=DEFAULT_STORAGE_ACCOUNT,
        help="Storage account name, 3-24 lowercase letters and digits",
    )
    storage.add_argument("--storage-sku", default=DEFAULT_STORAGE_SKU)
    storage.add_argument("--storage-kind", default=DEFAULT_STORAGE_KIND)
    storage.add_argument(
        "--allow-blob-public-access",
        action="store_true",
        default=False,
        help="Allow public access to blobs in the storage account",
    )
    storage.add_argument("--container-name", default=DEFAULT_CONTAINER_NAME)
    storage.add_argument(
        "--container-access",
        default=DEFAULT_CONTAINER_ACCESS,
        help="Container access level: private, blob or container",
    )

    # Blob transfer smoke test
    transfer = parser.add_argument_group("blob transfer")
    transfer.add_argument(
        "--sample-file",
        default=DEFAULT_SAMPLE_FILE,
        help="Local file to upload; created if missing",
    )
    transfer.add_argument(
        "--download-prefix",
        default=DEFAULT_DOWNLOAD_PREFIX,
        help="Prefix for the downloaded copy's file name",
    )
    transfer.add_argument(
        "--verify-checksum",
        action="store_true",
        default=False,
        help="Also compare SHA-256 of the uploaded and downloaded files",
    )

    # Logging
    parser.add_argument(
        "--log-file",
        default=DEFAULT_LOG_FILE,
        help=f"File the log is appended to (default: {DEFAULT_LOG_FILE})",
    )
    parser.add_argument(
        "-v",
        "--logs",
        action="store_true",
        help="If flagged, print debug and Azure SDK logs as they run",
        default=False,
    )

    return parser
