"""Tests for cluster spec and tag construction."""

from datetime import datetime

from cachebroker.broker.spec_builder import (
    BROKER_NAME,
    OWNER_TAG_VALUE,
    TagAction,
    build_cluster_spec,
    build_tags,
    cluster_spec_from_plan,
)
from cachebroker.catalog import Catalog

from tests.conftest import MEMCACHED_PLAN_ID, REDIS_LARGE_PLAN_ID, REDIS_SMALL_PLAN_ID


class TestBuildTags:
    """Tests for build_tags."""

    def test_created_tags(self, fixed_now: datetime) -> None:
        """Test all tags are present when every id is supplied."""
        tags = build_tags(
            TagAction.CREATED,
            service_id="svc",
            plan_id="plan",
            organization_id="org",
            space_id="space",
            clock=lambda: fixed_now,
        )

        assert tags == {
            "Owner": OWNER_TAG_VALUE,
            "Created by": BROKER_NAME,
            "Created at": "05 Mar 24 14:07 +0100",
            "Service ID": "svc",
            "Plan ID": "plan",
            "Organization ID": "org",
            "Space ID": "space",
        }

    def test_updated_tags_omit_org_and_space(self, fixed_now: datetime) -> None:
        """Test update tags carry no organization or space."""
        tags = build_tags(
            TagAction.UPDATED,
            service_id="svc",
            plan_id="plan",
            clock=lambda: fixed_now,
        )

        assert tags["Updated by"] == BROKER_NAME
        assert tags["Updated at"] == "05 Mar 24 14:07 +0100"
        assert "Organization ID" not in tags
        assert "Space ID" not in tags
        assert "Created by" not in tags

    def test_owner_always_present(self, fixed_now: datetime) -> None:
        """Test the owner tag is set even with no ids."""
        tags = build_tags(TagAction.CREATED, clock=lambda: fixed_now)
        assert tags["Owner"] == OWNER_TAG_VALUE
        assert set(tags) == {"Owner", "Created by", "Created at"}

    def test_clock_is_called(self) -> None:
        """Test the timestamp comes from the injected clock."""
        moments = iter([datetime(2030, 12, 31, 23, 59).astimezone()])
        tags = build_tags(TagAction.CREATED, clock=lambda: next(moments))
        assert tags["Created at"].startswith("31 Dec 30 23:59")


class TestClusterSpecFromPlan:
    """Tests for the sparse plan overlay."""

    def test_copies_set_fields(self, catalog: Catalog) -> None:
        """Test populated plan fields reach the spec."""
        spec = cluster_spec_from_plan(catalog.find_service_plan(REDIS_SMALL_PLAN_ID))

        assert spec.engine == "redis"
        assert spec.engine_version == "7.1"
        assert spec.cache_node_type == "cache.t3.micro"
        assert spec.num_cache_nodes == 1
        assert spec.cache_subnet_group_name == "cf-subnets"
        assert spec.security_group_ids == ["sg-1"]
        assert spec.port is None

    def test_zero_and_empty_are_unset(self, catalog: Catalog) -> None:
        """Test zero and empty plan values are not sent."""
        spec = cluster_spec_from_plan(catalog.find_service_plan(REDIS_LARGE_PLAN_ID))

        assert spec.engine == "redis"
        assert spec.cache_node_type == "cache.m6g.large"
        assert spec.num_cache_nodes is None
        assert spec.port is None
        assert spec.engine_version is None
        assert spec.cache_subnet_group_name is None
        assert spec.security_group_ids is None

    def test_port_copied_when_positive(self, catalog: Catalog) -> None:
        """Test an explicit port is kept."""
        spec = cluster_spec_from_plan(catalog.find_service_plan(MEMCACHED_PLAN_ID))
        assert spec.port == 11211
        assert spec.num_cache_nodes == 2


class TestBuildClusterSpec:
    """Tests for build_cluster_spec."""

    def test_attaches_tags(self, catalog: Catalog, fixed_now: datetime) -> None:
        """Test the spec carries the action tags."""
        spec = build_cluster_spec(
            catalog.find_service_plan(REDIS_SMALL_PLAN_ID),
            TagAction.CREATED,
            service_id="svc",
            plan_id=REDIS_SMALL_PLAN_ID,
            organization_id="org",
            space_id="",
            clock=lambda: fixed_now,
        )

        assert spec.tags["Owner"] == OWNER_TAG_VALUE
        assert spec.tags["Plan ID"] == REDIS_SMALL_PLAN_ID
        assert spec.tags["Organization ID"] == "org"
        assert "Space ID" not in spec.tags
        assert spec.preferred_maintenance_window is None
