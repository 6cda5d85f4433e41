"""
Default values for Azure provisioning.
"""

from cloudinfra.errors import ConfigurationError

# Resource group
DEFAULT_RESOURCE_GROUP = "CloudInfraRG"
DEFAULT_LOCATION = "eastus"

# Networking
DEFAULT_VNET_NAME = "CloudVNet"
DEFAULT_VNET_PREFIX = "10.0.0.0/16"
DEFAULT_SUBNET_NAME = "CloudSubnet"
DEFAULT_SUBNET_PREFIX = "10.0.0.0/24"

DEFAULT_NSG_NAME = "CloudNSG"
DEFAULT_RULE_NAME = "AllowRDP"
DEFAULT_RULE_PRIORITY = 1000
DEFAULT_RULE_PROTOCOL = "Tcp"
DEFAULT_RULE_PORT = "3389"
DEFAULT_RULE_SOURCE = "*"
DEFAULT_RULE_ACCESS = "Allow"
DEFAULT_RULE_DIRECTION = "Inbound"

DEFAULT_PUBLIC_IP_NAME = "CloudPublicIP"
DEFAULT_PUBLIC_IP_ALLOCATION = "Static"
DEFAULT_PUBLIC_IP_SKU = "Standard"

DEFAULT_NIC_NAME = "CloudNIC"

# VM configuration
DEFAULT_VM_NAME = "CloudVM"
DEFAULT_VM_SIZE = "Standard_B2s"
# Tried in order when the primary size has no capacity in the region
DEFAULT_FALLBACK_SIZES = [
    "Standard_B2ms",
    "Standard_D2s_v3",
    "Standard_DS1_v2",
]
DEFAULT_IMAGE = "MicrosoftWindowsServer:WindowsServer:2019-Datacenter:latest"
DEFAULT_ADMIN_USERNAME = "azureuser"

# Storage
DEFAULT_STORAGE_ACCOUNT = "cloudinfrastorage"
DEFAULT_STORAGE_SKU = "Standard_LRS"
DEFAULT_STORAGE_KIND = "StorageV2"
DEFAULT_CONTAINER_NAME = "cloudcontainer"
DEFAULT_CONTAINER_ACCESS = "private"

# Blob transfer smoke test
DEFAULT_SAMPLE_FILE = "sample.txt"
DEFAULT_DOWNLOAD_PREFIX = "downloaded_"

DEFAULT_LOG_FILE = "cloudinfra.log"

# Provider error codes that mean "this size has no capacity here"
CAPACITY_ERROR_CODES = {
    "SkuNotAvailable",
    "AllocationFailed",
    "ZonalAllocationFailed",
    "OverconstrainedAllocationRequest",
    "OverconstrainedZonalAllocationRequest",
}

# Valid Azure locations
VALID_LOCATIONS = {
    "australiaeast",
    "brazilsouth",
    "canadacentral",
    "centralindia",
    "centralus",
    "eastasia",
    "eastus",
    "eastus2",
    "francecentral",
    "germanywestcentral",
    "japaneast",
    "koreacentral",
    "northcentralus",
    "northeurope",
    "southafricanorth",
    "southcentralus",
    "southeastasia",
    "swedencentral",
    "switzerlandnorth",
    "uaenorth",
    "uksouth",
    "westcentralus",
    "westeurope",
    "westus",
    "westus2",
    "westus3",
}


def normalize_location(location: str) -> str:
    """Normalize a display name like 'East US' or 'EastUS' to 'eastus'."""
    return location.replace(" ", "").lower()


def validate_location(location: str) -> str:
    """Validate that the location is a known Azure location.

    Args:
        location: The Azure location, in any case

    Returns:
        The normalized location name

    Raises:
        ConfigurationError: If the location is not valid
    """
    normalized = normalize_location(location)
    if normalized not in VALID_LOCATIONS:
        valid_locations = ", ".join(sorted(VALID_LOCATIONS))
        msg = (
            f"Invalid Azure location: {location}. "
            f"Valid Azure locations are: {valid_locations}"
        )
        raise ConfigurationError(msg)
    return normalized
