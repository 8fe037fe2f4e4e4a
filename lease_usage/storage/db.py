"""
DynamoDB client management.

Provides the boto3 client the storage gateway issues its calls through.
"""

import boto3

from ..config.loader import StorageConfig


def get_client(config: StorageConfig):
    """Create a low-level DynamoDB client for the configured region.

    Credentials and timeouts come from the standard boto3 resolution
    chain (environment, shared config, instance profile).

    Args:
        config: Storage configuration

    Returns:
        A boto3 DynamoDB client
    """
    return boto3.client(
        "dynamodb",
        region_name=config.region,
        endpoint_url=config.endpoint_url,
    )
