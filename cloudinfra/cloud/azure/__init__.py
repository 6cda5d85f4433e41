"""
Azure provisioning utilities.

This package contains all Azure-specific functionality including:
- defaults: Default constants for Azure provisioning
- api: Azure SDK wrapper implementing CloudApi
"""

from cloudinfra.cloud.azure.defaults import (
    CAPACITY_ERROR_CODES,
    DEFAULT_LOCATION,
    DEFAULT_RESOURCE_GROUP,
    DEFAULT_VM_SIZE,
    VALID_LOCATIONS,
    validate_location,
)

__all__ = [
    # Default constants
    "CAPACITY_ERROR_CODES",
    "DEFAULT_LOCATION",
    "DEFAULT_RESOURCE_GROUP",
    "DEFAULT_VM_SIZE",
    "VALID_LOCATIONS",
    "validate_location",
]
