"""Pytest configuration and fixtures."""

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from cachebroker.backends.accounts import StaticAccountLookup
from cachebroker.backends.memory import InMemoryCacheClusterBackend
from cachebroker.broker import CacheClusterBroker
from cachebroker.catalog import Catalog

REDIS_SERVICE_ID = "redis-service"
MEMCACHED_SERVICE_ID = "memcached-service"
REDIS_SMALL_PLAN_ID = "redis-small"
REDIS_LARGE_PLAN_ID = "redis-large"
MEMCACHED_PLAN_ID = "memcached-standard"
INSTANCE_ID = "8f4b2c1e-7d3a-4e5f-9b6c-0a1d2e3f4a5b"
ACCOUNT_ID = "123456789012"
REGION = "eu-west-1"


@pytest.fixture
def sample_catalog_data() -> dict:
    """Raw catalog with an updateable Redis service and a fixed Memcached one."""
    return {
        "services": [
            {
                "id": REDIS_SERVICE_ID,
                "name": "elasticache-redis",
                "description": "Redis clusters",
                "bindable": True,
                "plan_updateable": True,
                "plans": [
                    {
                        "id": REDIS_SMALL_PLAN_ID,
                        "name": "small",
                        "elasticache_properties": {
                            "engine": "redis",
                            "engine_version": "7.1",
                            "cache_node_type": "cache.t3.micro",
                            "num_cache_nodes": 1,
                            "cache_subnet_group_name": "cf-subnets",
                            "security_group_ids": ["sg-1"],
                        },
                    },
                    {
                        "id": REDIS_LARGE_PLAN_ID,
                        "name": "large",
                        "elasticache_properties": {
                            "engine": "redis",
                            "cache_node_type": "cache.m6g.large",
                            "num_cache_nodes": 0,
                            "port": 0,
                            "engine_version": "",
                        },
                    },
                ],
            },
            {
                "id": MEMCACHED_SERVICE_ID,
                "name": "elasticache-memcached",
                "description": "Memcached clusters",
                "bindable": False,
                "plan_updateable": False,
                "plans": [
                    {
                        "id": MEMCACHED_PLAN_ID,
                        "name": "standard",
                        "elasticache_properties": {
                            "engine": "memcached",
                            "num_cache_nodes": 2,
                            "port": 11211,
                        },
                    },
                ],
            },
        ]
    }


@pytest.fixture
def catalog(sample_catalog_data: dict) -> Catalog:
    """Parsed sample catalog."""
    return Catalog.model_validate(sample_catalog_data)


@pytest.fixture
def catalog_file(tmp_path: Path, sample_catalog_data: dict) -> Path:
    """Sample catalog written to a temporary JSON file."""
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(sample_catalog_data))
    return path


@pytest.fixture
def fixed_now() -> datetime:
    """A fixed point in time for tag timestamps."""
    return datetime(2024, 3, 5, 14, 7, tzinfo=timezone(timedelta(hours=1)))


@pytest.fixture
def memory_backend() -> InMemoryCacheClusterBackend:
    """Empty in-memory cluster backend."""
    return InMemoryCacheClusterBackend()


@pytest.fixture
def broker(
    catalog: Catalog,
    memory_backend: InMemoryCacheClusterBackend,
    fixed_now: datetime,
) -> CacheClusterBroker:
    """Broker over the in-memory backend with user parameters enabled."""
    return CacheClusterBroker(
        catalog=catalog,
        backend=memory_backend,
        account_lookup=StaticAccountLookup(ACCOUNT_ID),
        cache_prefix="cf",
        region=REGION,
        allow_user_provision_parameters=True,
        allow_user_update_parameters=True,
        clock=lambda: fixed_now,
    )
