"""In-memory cache cluster backend implementation."""

import logging
import threading
from dataclasses import replace

from cachebroker.backends.base import (
    CacheClusterBackend,
    CacheClusterBackendError,
    ClusterDetails,
    ClusterNotFoundError,
    ClusterSpec,
)

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {
    "redis": 6379,
    "memcached": 11211,
}

# Status reached once a pending operation settles; None removes the cluster.
_SETTLED_STATUS = {
    "creating": "available",
    "modifying": "available",
    "deleting": None,
}


class InMemoryCacheClusterBackend(CacheClusterBackend):
    """
    Cache cluster backend keeping clusters in a dictionary.

    Best for:
    - Local development without AWS credentials
    - Tests

    Mutations leave clusters in a transitional status ("creating",
    "modifying", "deleting") until ``advance`` is called, mimicking the
    real backend's asynchronous behaviour.
    """

    def __init__(self, endpoint_domain: str = "cache.local") -> None:
        """
        Initialize in-memory backend.

        Args:
            endpoint_domain: Domain appended to cluster ids to form endpoints
        """
        self._clusters: dict[str, ClusterDetails] = {}
        self._tags: dict[str, dict[str, str]] = {}
        self._endpoint_domain = endpoint_domain
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "memory"

    def describe(self, cluster_id: str) -> ClusterDetails:
        """Return the stored cluster."""
        with self._lock:
            cluster = self._clusters.get(cluster_id)
        if cluster is None:
            raise ClusterNotFoundError(cluster_id)
        return cluster

    def create(self, cluster_id: str, spec: ClusterSpec) -> None:
        """Store a new cluster in the "creating" status."""
        with self._lock:
            if cluster_id in self._clusters:
                raise CacheClusterBackendError(
                    "CacheClusterAlreadyExists",
                    f"Cache cluster {cluster_id} already exists",
                )
            self._clusters[cluster_id] = ClusterDetails(
                cluster_id=cluster_id,
                status="creating",
                endpoint=f"{cluster_id}.{self._endpoint_domain}",
                port=spec.port or DEFAULT_PORTS.get(spec.engine, 0),
                engine=spec.engine,
                engine_version=spec.engine_version or "",
                num_cache_nodes=spec.num_cache_nodes or 1,
                cache_node_type=spec.cache_node_type or "",
            )
            if spec.tags:
                self._tags[cluster_id] = dict(spec.tags)
        logger.debug(f"Created in-memory cache cluster {cluster_id}")

    def modify(self, cluster_id: str, spec: ClusterSpec, apply_immediately: bool) -> None:
        """
        Apply the non-empty fields of the cluster spec and mark the cluster "modifying".

        Only available clusters can be modified.
        """
        with self._lock:
            cluster = self._clusters.get(cluster_id)
            if cluster is None:
                raise ClusterNotFoundError(cluster_id)
            if cluster.status != "available":
                raise CacheClusterBackendError(
                    "InvalidCacheClusterState",
                    f"Cache cluster {cluster_id} is {cluster.status}, not available",
                )

            changes: dict = {"status": "modifying"}
            if spec.engine_version:
                changes["engine_version"] = spec.engine_version
            if spec.num_cache_nodes:
                changes["num_cache_nodes"] = spec.num_cache_nodes
            if spec.cache_node_type:
                changes["cache_node_type"] = spec.cache_node_type
            self._clusters[cluster_id] = replace(cluster, **changes)
        logger.debug(
            f"Modified in-memory cache cluster {cluster_id} "
            f"(apply_immediately={apply_immediately})"
        )

    def delete(self, cluster_id: str) -> None:
        """Mark the cluster "deleting"."""
        with self._lock:
            cluster = self._clusters.get(cluster_id)
            if cluster is None:
                raise ClusterNotFoundError(cluster_id)
            self._clusters[cluster_id] = replace(cluster, status="deleting")
        logger.debug(f"Deleting in-memory cache cluster {cluster_id}")

    def add_tags_to_resource(self, resource_name: str, tags: dict[str, str]) -> None:
        """Merge tags into the tag set of the cluster named by an ARN."""
        cluster_id = cluster_id_from_arn(resource_name)
        with self._lock:
            if cluster_id not in self._clusters:
                raise ClusterNotFoundError(cluster_id)
            self._tags.setdefault(cluster_id, {}).update(tags)

    def advance(self, cluster_id: str) -> ClusterDetails | None:
        """
        Settle a pending operation on a cluster.

        Args:
            cluster_id: Backend cluster identifier

        Returns:
            The settled cluster, or None if it was removed by a delete

        Raises:
            ClusterNotFoundError: If the cluster does not exist
        """
        with self._lock:
            cluster = self._clusters.get(cluster_id)
            if cluster is None:
                raise ClusterNotFoundError(cluster_id)

            if cluster.status not in _SETTLED_STATUS:
                return cluster

            settled = _SETTLED_STATUS[cluster.status]
            if settled is None:
                del self._clusters[cluster_id]
                self._tags.pop(cluster_id, None)
                return None

            cluster = replace(cluster, status=settled)
            self._clusters[cluster_id] = cluster
            return cluster

    def set_status(self, cluster_id: str, status: str) -> None:
        """Force a cluster into an arbitrary backend status."""
        with self._lock:
            cluster = self._clusters.get(cluster_id)
            if cluster is None:
                raise ClusterNotFoundError(cluster_id)
            self._clusters[cluster_id] = replace(cluster, status=status)

    def tags_for(self, cluster_id: str) -> dict[str, str]:
        """Get a copy of the tags attached to a cluster."""
        with self._lock:
            return dict(self._tags.get(cluster_id, {}))

    def size(self) -> int:
        """Get current number of clusters."""
        return len(self._clusters)


def cluster_id_from_arn(resource_name: str) -> str:
    """Get the cluster id from a cluster ARN; plain ids are returned unchanged."""
    return resource_name.rsplit(":", 1)[-1]
