"""Abstract base class for cache cluster backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class CacheClusterBackendError(Exception):
    """
    A backend call failed.

    Carries the backend's own error code and message so callers can
    report them verbatim.
    """

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")


class ClusterNotFoundError(CacheClusterBackendError):
    """The requested cache cluster does not exist in the backend."""

    def __init__(self, cluster_id: str) -> None:
        self.cluster_id = cluster_id
        super().__init__(
            "CacheClusterNotFound", f"Cache cluster {cluster_id} not found"
        )


@dataclass
class ClusterSpec:
    """
    Desired cluster configuration sent on create and modify.

    A sparse overlay: ``None`` means "leave the backend default" on create
    and "leave unchanged" on modify.
    """

    engine: str
    engine_version: str | None = None
    cache_node_type: str | None = None
    num_cache_nodes: int | None = None
    port: int | None = None
    cache_subnet_group_name: str | None = None
    security_group_ids: list[str] | None = None
    preferred_maintenance_window: str | None = None
    tags: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ClusterDetails:
    """Observed state of a cache cluster, as reported by describe."""

    cluster_id: str
    status: str
    endpoint: str = ""
    port: int = 0
    engine: str = ""
    engine_version: str = ""
    num_cache_nodes: int = 0
    cache_node_type: str = ""


class CacheClusterBackend(ABC):
    """
    Abstract base class for cache cluster backends.

    Every method may raise ``CacheClusterBackendError``; methods that
    address an existing cluster raise ``ClusterNotFoundError`` when it is
    absent.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Unique identifier for this backend.

        Returns:
            Backend name (e.g., 'elasticache', 'memory')
        """
        ...

    @abstractmethod
    def describe(self, cluster_id: str) -> ClusterDetails:
        """
        Fetch the current state of a cluster.

        Args:
            cluster_id: Backend cluster identifier

        Returns:
            Observed cluster details

        Raises:
            ClusterNotFoundError: If the cluster does not exist
        """
        ...

    @abstractmethod
    def create(self, cluster_id: str, spec: ClusterSpec) -> None:
        """
        Start creating a cluster. Returns once the backend accepted the request.

        Args:
            cluster_id: Backend cluster identifier
            spec: Desired configuration, including tags
        """
        ...

    @abstractmethod
    def modify(self, cluster_id: str, spec: ClusterSpec, apply_immediately: bool) -> None:
        """
        Start modifying a cluster.

        Args:
            cluster_id: Backend cluster identifier
            spec: Desired configuration; tags are not applied here
            apply_immediately: Apply now instead of in the maintenance window

        Raises:
            ClusterNotFoundError: If the cluster does not exist
        """
        ...

    @abstractmethod
    def delete(self, cluster_id: str) -> None:
        """
        Start deleting a cluster.

        Args:
            cluster_id: Backend cluster identifier

        Raises:
            ClusterNotFoundError: If the cluster does not exist
        """
        ...

    @abstractmethod
    def add_tags_to_resource(self, resource_name: str, tags: dict[str, str]) -> None:
        """
        Attach tags to a backend resource.

        Args:
            resource_name: Fully qualified resource name (ARN)
            tags: Tags to add or overwrite
        """
        ...
