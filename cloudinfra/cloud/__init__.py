"""Provider abstraction and the Azure implementation."""

from cloudinfra.cloud.base_parser import create_base_parser
from cloudinfra.cloud.cloud_api import CloudApi
from cloudinfra.cloud.resources import (
    AdminCredentials,
    ResourceHandle,
    ResourceKey,
    ResourceKind,
    StorageContext,
)

# Note: get_cloud_api is NOT imported here so that the Azure SDK is only
# imported when a real provider is needed.
# Import it directly from cloudinfra.cloud.cloud_factory.

__all__ = [
    # Cloud API
    "CloudApi",
    # Resources
    "AdminCredentials",
    "ResourceHandle",
    "ResourceKey",
    "ResourceKind",
    "StorageContext",
    # Parser
    "create_base_parser",
]
