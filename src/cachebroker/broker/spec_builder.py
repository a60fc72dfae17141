"""Translation of catalog plans into backend cluster specs and tags."""

from datetime import datetime
from enum import Enum
from typing import Callable

from cachebroker.backends.base import ClusterSpec
from cachebroker.catalog import ServicePlan

OWNER_TAG_VALUE = "Cloud Foundry"
BROKER_NAME = "AWS ElastiCache Service Broker"

# RFC 822 with a numeric zone, e.g. "02 Jan 06 15:04 -0700".
TAG_TIME_FORMAT = "%d %b %y %H:%M %z"

Clock = Callable[[], datetime]


class TagAction(str, Enum):
    """Lifecycle action recorded in the audit tags."""

    CREATED = "Created"
    UPDATED = "Updated"


def local_now() -> datetime:
    """Current time with the local timezone attached."""
    return datetime.now().astimezone()


def build_tags(
    action: TagAction,
    service_id: str = "",
    plan_id: str = "",
    organization_id: str = "",
    space_id: str = "",
    clock: Clock = local_now,
) -> dict[str, str]:
    """
    Build the ownership and audit tags for a cluster.

    Args:
        action: Lifecycle action being recorded
        service_id: Catalog service id (omitted when empty)
        plan_id: Catalog plan id (omitted when empty)
        organization_id: Platform organization id (omitted when empty)
        space_id: Platform space id (omitted when empty)
        clock: Source of the action timestamp

    Returns:
        Tag mapping
    """
    tags = {
        "Owner": OWNER_TAG_VALUE,
        f"{action.value} by": BROKER_NAME,
        f"{action.value} at": clock().strftime(TAG_TIME_FORMAT),
    }

    if service_id:
        tags["Service ID"] = service_id
    if plan_id:
        tags["Plan ID"] = plan_id
    if organization_id:
        tags["Organization ID"] = organization_id
    if space_id:
        tags["Space ID"] = space_id

    return tags


def cluster_spec_from_plan(plan: ServicePlan) -> ClusterSpec:
    """
    Copy the set plan properties into a cluster spec.

    Zero and empty values are treated as unset and left as None.
    """
    properties = plan.elasticache_properties
    return ClusterSpec(
        engine=properties.engine,
        engine_version=properties.engine_version or None,
        cache_node_type=properties.cache_node_type or None,
        num_cache_nodes=properties.num_cache_nodes if (properties.num_cache_nodes or 0) > 0 else None,
        port=properties.port if (properties.port or 0) > 0 else None,
        cache_subnet_group_name=properties.cache_subnet_group_name or None,
        security_group_ids=list(properties.security_group_ids) or None,
    )


def build_cluster_spec(
    plan: ServicePlan,
    action: TagAction,
    service_id: str = "",
    plan_id: str = "",
    organization_id: str = "",
    space_id: str = "",
    clock: Clock = local_now,
) -> ClusterSpec:
    """
    Build the cluster spec sent to the backend for a plan.

    Args:
        plan: Catalog plan supplying the cluster properties
        action: Lifecycle action for the audit tags
        service_id: Catalog service id
        plan_id: Catalog plan id
        organization_id: Platform organization id (create only)
        space_id: Platform space id (create only)
        clock: Source of the action timestamp

    Returns:
        Sparse cluster spec with tags attached
    """
    spec = cluster_spec_from_plan(plan)
    spec.tags = build_tags(
        action,
        service_id=service_id,
        plan_id=plan_id,
        organization_id=organization_id,
        space_id=space_id,
        clock=clock,
    )
    return spec
