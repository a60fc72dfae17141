"""Classification of backend cluster statuses into operation states."""

from enum import Enum


class OperationState(str, Enum):
    """State of the last asynchronous operation on an instance."""

    IN_PROGRESS = "in progress"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


# ElastiCache reports no explicit failure status, so anything missing from
# this table is treated as failed.
CLUSTER_STATUS_STATES: dict[str, OperationState] = {
    "available": OperationState.SUCCEEDED,
    "backing-up": OperationState.IN_PROGRESS,
    "creating": OperationState.IN_PROGRESS,
    "deleting": OperationState.IN_PROGRESS,
    "deleted": OperationState.IN_PROGRESS,
    "incompatible-network": OperationState.IN_PROGRESS,
    "modifying": OperationState.IN_PROGRESS,
    "rebooting cache cluster nodes": OperationState.IN_PROGRESS,
    "restore-failed": OperationState.IN_PROGRESS,
    "snapshotting": OperationState.IN_PROGRESS,
}


def classify_status(status: str) -> OperationState:
    """
    Map a backend cluster status onto an operation state.

    Args:
        status: Raw status string reported by the backend

    Returns:
        The mapped state, or FAILED for unknown statuses
    """
    return CLUSTER_STATUS_STATES.get(status, OperationState.FAILED)
