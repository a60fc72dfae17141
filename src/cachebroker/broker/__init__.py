"""Broker package: lifecycle orchestration over cache cluster backends."""

from cachebroker.broker.broker import CacheClusterBroker
from cachebroker.broker.errors import (
    AsyncRequiredError,
    BrokerError,
    ConfigurationError,
    InstanceDoesNotExistError,
    InstanceNotBindableError,
    InstanceNotUpdateableError,
    InvalidParametersError,
    PlanNotFoundError,
    ServiceNotFoundError,
)
from cachebroker.broker.identifiers import derive_cluster_id
from cachebroker.broker.models import (
    BindDetails,
    Binding,
    Credentials,
    DeprovisionDetails,
    LastOperation,
    ProvisionDetails,
    UnbindDetails,
    UpdateDetails,
)
from cachebroker.broker.status import OperationState, classify_status

__all__ = [
    "CacheClusterBroker",
    "AsyncRequiredError",
    "BrokerError",
    "ConfigurationError",
    "InstanceDoesNotExistError",
    "InstanceNotBindableError",
    "InstanceNotUpdateableError",
    "InvalidParametersError",
    "PlanNotFoundError",
    "ServiceNotFoundError",
    "derive_cluster_id",
    "BindDetails",
    "Binding",
    "Credentials",
    "DeprovisionDetails",
    "LastOperation",
    "ProvisionDetails",
    "UnbindDetails",
    "UpdateDetails",
    "OperationState",
    "classify_status",
]
