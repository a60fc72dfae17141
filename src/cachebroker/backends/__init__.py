"""
Cache cluster backends.

Provides the backend contract plus an AWS ElastiCache implementation and an
in-memory one for development and tests.
"""

from cachebroker.backends.accounts import (
    AccountLookup,
    AccountLookupError,
    StaticAccountLookup,
    StsAccountLookup,
)
from cachebroker.backends.base import (
    CacheClusterBackend,
    CacheClusterBackendError,
    ClusterDetails,
    ClusterNotFoundError,
    ClusterSpec,
)
from cachebroker.backends.elasticache import ElastiCacheBackend
from cachebroker.backends.memory import InMemoryCacheClusterBackend
from cachebroker.backends.factory import create_account_lookup, create_backend

__all__ = [
    "AccountLookup",
    "AccountLookupError",
    "StaticAccountLookup",
    "StsAccountLookup",
    "CacheClusterBackend",
    "CacheClusterBackendError",
    "ClusterDetails",
    "ClusterNotFoundError",
    "ClusterSpec",
    "ElastiCacheBackend",
    "InMemoryCacheClusterBackend",
    "create_account_lookup",
    "create_backend",
]
