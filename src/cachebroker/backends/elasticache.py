"""AWS ElastiCache cache cluster backend."""

import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from cachebroker.backends.base import (
    CacheClusterBackend,
    CacheClusterBackendError,
    ClusterDetails,
    ClusterNotFoundError,
    ClusterSpec,
)

logger = logging.getLogger(__name__)

NOT_FOUND_ERROR_CODE = "CacheClusterNotFound"


class ElastiCacheBackend(CacheClusterBackend):
    """
    Cache cluster backend talking to AWS ElastiCache through boto3.

    Errors from the SDK are translated into ``CacheClusterBackendError``
    carrying the AWS error code and message; a missing cluster becomes
    ``ClusterNotFoundError``.
    """

    def __init__(
        self,
        region: str,
        endpoint_url: str | None = None,
        client: Any = None,
    ) -> None:
        """
        Initialize ElastiCache backend.

        Args:
            region: AWS region hosting the clusters
            endpoint_url: Optional endpoint override (e.g., LocalStack)
            client: Pre-built boto3 ElastiCache client (overrides region/endpoint)
        """
        self.region = region
        self.endpoint_url = endpoint_url

        if client is None:
            client_kwargs: dict[str, Any] = {
                "service_name": "elasticache",
                "region_name": region,
            }
            if endpoint_url:
                client_kwargs["endpoint_url"] = endpoint_url
            client = boto3.client(**client_kwargs)

        self.client = client

    @property
    def name(self) -> str:
        return "elasticache"

    def describe(self, cluster_id: str) -> ClusterDetails:
        """Describe a cluster, including its node endpoints."""
        request = {"CacheClusterId": cluster_id, "ShowCacheNodeInfo": True}
        logger.debug(f"describe-cache-clusters input: {request}")

        try:
            response = self.client.describe_cache_clusters(**request)
        except (ClientError, BotoCoreError) as e:
            raise self._translate_error(e, cluster_id) from e

        for cache_cluster in response.get("CacheClusters", []):
            if cache_cluster.get("CacheClusterId") == cluster_id:
                logger.debug(f"describe-cache-clusters cluster: {cache_cluster}")
                return self._build_details(cache_cluster)

        raise ClusterNotFoundError(cluster_id)

    def create(self, cluster_id: str, spec: ClusterSpec) -> None:
        """Request creation of a cluster."""
        request = self._build_create_request(cluster_id, spec)
        logger.debug(f"create-cache-cluster input: {request}")

        try:
            response = self.client.create_cache_cluster(**request)
        except (ClientError, BotoCoreError) as e:
            raise self._translate_error(e) from e

        logger.debug(f"create-cache-cluster output: {response}")

    def modify(self, cluster_id: str, spec: ClusterSpec, apply_immediately: bool) -> None:
        """Request modification of a cluster."""
        request = self._build_modify_request(cluster_id, spec, apply_immediately)
        logger.debug(f"modify-cache-cluster input: {request}")

        try:
            response = self.client.modify_cache_cluster(**request)
        except (ClientError, BotoCoreError) as e:
            raise self._translate_error(e, cluster_id) from e

        logger.debug(f"modify-cache-cluster output: {response}")

    def delete(self, cluster_id: str) -> None:
        """Request deletion of a cluster."""
        request = {"CacheClusterId": cluster_id}
        logger.debug(f"delete-cache-cluster input: {request}")

        try:
            response = self.client.delete_cache_cluster(**request)
        except (ClientError, BotoCoreError) as e:
            raise self._translate_error(e, cluster_id) from e

        logger.debug(f"delete-cache-cluster output: {response}")

    def add_tags_to_resource(self, resource_name: str, tags: dict[str, str]) -> None:
        """Attach tags to the resource identified by its ARN."""
        request = {"ResourceName": resource_name, "Tags": build_elasticache_tags(tags)}
        logger.debug(f"add-tags-to-resource input: {request}")

        try:
            response = self.client.add_tags_to_resource(**request)
        except (ClientError, BotoCoreError) as e:
            raise self._translate_error(e) from e

        logger.debug(f"add-tags-to-resource output: {response}")

    def _translate_error(
        self,
        error: ClientError | BotoCoreError,
        cluster_id: str | None = None,
    ) -> CacheClusterBackendError:
        """
        Map an SDK error onto the backend error taxonomy.

        Args:
            error: Error raised by boto3
            cluster_id: Cluster addressed by the call, when it must already exist

        Returns:
            ClusterNotFoundError for a missing cluster, CacheClusterBackendError otherwise
        """
        logger.error(f"aws-elasticache-error: {error}")

        if isinstance(error, BotoCoreError):
            return CacheClusterBackendError(type(error).__name__, str(error))

        details = error.response.get("Error", {})
        code = details.get("Code", "Unknown")
        message = details.get("Message", str(error))
        status_code = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")

        if cluster_id is not None and (code == NOT_FOUND_ERROR_CODE or status_code == 404):
            return ClusterNotFoundError(cluster_id)

        return CacheClusterBackendError(code, message)

    def _build_create_request(self, cluster_id: str, spec: ClusterSpec) -> dict[str, Any]:
        """Build CreateCacheCluster parameters, omitting unset fields."""
        request: dict[str, Any] = {
            "CacheClusterId": cluster_id,
            "Engine": spec.engine,
        }

        if spec.num_cache_nodes:
            request["NumCacheNodes"] = spec.num_cache_nodes
        if spec.cache_node_type:
            request["CacheNodeType"] = spec.cache_node_type
        if spec.cache_subnet_group_name:
            request["CacheSubnetGroupName"] = spec.cache_subnet_group_name
        if spec.security_group_ids:
            request["SecurityGroupIds"] = list(spec.security_group_ids)
        if spec.engine_version:
            request["EngineVersion"] = spec.engine_version
        if spec.port:
            request["Port"] = spec.port
        if spec.preferred_maintenance_window:
            request["PreferredMaintenanceWindow"] = spec.preferred_maintenance_window
        if spec.tags:
            request["Tags"] = build_elasticache_tags(spec.tags)

        return request

    def _build_modify_request(
        self,
        cluster_id: str,
        spec: ClusterSpec,
        apply_immediately: bool,
    ) -> dict[str, Any]:
        """Build ModifyCacheCluster parameters from the modifiable spec fields."""
        request: dict[str, Any] = {
            "CacheClusterId": cluster_id,
            "ApplyImmediately": apply_immediately,
        }

        # Engine, port and subnet group cannot change on an existing cluster.
        if spec.num_cache_nodes:
            request["NumCacheNodes"] = spec.num_cache_nodes
        if spec.cache_node_type:
            request["CacheNodeType"] = spec.cache_node_type
        if spec.engine_version:
            request["EngineVersion"] = spec.engine_version
        if spec.security_group_ids:
            request["SecurityGroupIds"] = list(spec.security_group_ids)
        if spec.preferred_maintenance_window:
            request["PreferredMaintenanceWindow"] = spec.preferred_maintenance_window

        return request

    def _build_details(self, cache_cluster: dict[str, Any]) -> ClusterDetails:
        """Convert a DescribeCacheClusters entry into ClusterDetails."""
        endpoint: dict[str, Any] = {}
        nodes = cache_cluster.get("CacheNodes") or []
        if nodes:
            endpoint = nodes[0].get("Endpoint") or {}
        elif cache_cluster.get("ConfigurationEndpoint"):
            endpoint = cache_cluster["ConfigurationEndpoint"]

        return ClusterDetails(
            cluster_id=cache_cluster.get("CacheClusterId", ""),
            status=cache_cluster.get("CacheClusterStatus", ""),
            endpoint=endpoint.get("Address", ""),
            port=endpoint.get("Port", 0),
            engine=cache_cluster.get("Engine", ""),
            engine_version=cache_cluster.get("EngineVersion", ""),
            num_cache_nodes=cache_cluster.get("NumCacheNodes", 0),
            cache_node_type=cache_cluster.get("CacheNodeType", ""),
        )


def build_elasticache_tags(tags: dict[str, str]) -> list[dict[str, str]]:
    """Convert a tag mapping into the ElastiCache Key/Value list form."""
    return [{"Key": key, "Value": value} for key, value in tags.items()]
