"""Mapping from broker instance ids to backend cluster identifiers."""

# ElastiCache cluster ids are limited to 20 characters.
MAX_CLUSTER_ID_LENGTH = 20


def derive_cluster_id(prefix: str, instance_id: str) -> str:
    """
    Derive the backend cluster id for a service instance.

    Hyphens are stripped from the instance id (the separator after the
    prefix is kept) and the result is cut to the backend's maximum length.
    Truncation is unconditional: instance ids that agree on their first
    ``20 - len(prefix) - 1`` characters after stripping map to the same
    cluster id. Existing clusters were named this way, so the scheme must
    not change.

    Args:
        prefix: Configured cluster name prefix
        instance_id: Instance id supplied by the platform

    Returns:
        Cluster id of at most MAX_CLUSTER_ID_LENGTH characters
    """
    cluster_id = f"{prefix}-{instance_id.replace('-', '')}"
    return cluster_id[:MAX_CLUSTER_ID_LENGTH]


def cluster_arn(region: str, account_id: str, cluster_id: str) -> str:
    """Build the ARN of an ElastiCache cluster."""
    return f"arn:aws:elasticache:{region}:{account_id}:cluster:{cluster_id}"
