#!/usr/bin/env python3
"""
Factory function for the provider API.

This module is separate from cloud_api.py so that importing the base
classes does not pull in the Azure SDK.
"""

from cloudinfra.cloud.azure.api import AzureApi
from cloudinfra.cloud.cloud_api import CloudApi
from cloudinfra.config import ResourceGroupConfig


def get_cloud_api(config: ResourceGroupConfig) -> CloudApi:
    """Build the Azure API for the configured subscription.

    Credentials come from DefaultAzureCredential: environment variables,
    managed identity, or an `az login` session.
    """
    return AzureApi(subscription_id=config.subscription_id)
