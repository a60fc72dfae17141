"""Backend factory for creating backend instances based on configuration."""

import logging

from cachebroker.backends.accounts import AccountLookup, StaticAccountLookup, StsAccountLookup
from cachebroker.backends.base import CacheClusterBackend
from cachebroker.backends.elasticache import ElastiCacheBackend
from cachebroker.backends.memory import InMemoryCacheClusterBackend
from cachebroker.config import Settings

logger = logging.getLogger(__name__)

# Account reported by the in-memory backend, which has no real owner.
LOCAL_ACCOUNT_ID = "000000000000"


def create_backend(settings: Settings) -> CacheClusterBackend:
    """
    Create a cache cluster backend.

    Args:
        settings: Broker settings

    Returns:
        CacheClusterBackend instance

    Raises:
        ValueError: If the backend type is unknown
    """
    backend_type = settings.cluster_backend

    if backend_type == "memory":
        logger.warning(
            "Using the in-memory cluster backend; clusters are lost on exit."
        )
        return InMemoryCacheClusterBackend()

    elif backend_type == "elasticache":
        return ElastiCacheBackend(
            region=settings.aws_region,
            endpoint_url=settings.aws_endpoint_url,
        )

    else:
        raise ValueError(f"Unknown cluster backend: {backend_type}")


def create_account_lookup(settings: Settings) -> AccountLookup:
    """
    Create the account lookup matching the configured backend.

    Args:
        settings: Broker settings

    Returns:
        AccountLookup instance
    """
    if settings.aws_account_id:
        return StaticAccountLookup(settings.aws_account_id)

    if settings.cluster_backend == "memory":
        return StaticAccountLookup(LOCAL_ACCOUNT_ID)

    return StsAccountLookup(
        region=settings.aws_region,
        endpoint_url=settings.aws_endpoint_url,
    )
