"""Errors surfaced by the broker to its callers."""


class BrokerError(Exception):
    """Base exception for broker operations."""

    error_code = "BrokerError"


class AsyncRequiredError(BrokerError):
    """The caller does not accept asynchronous completion."""

    error_code = "AsyncRequired"

    def __init__(self) -> None:
        super().__init__(
            "This service plan requires client support for asynchronous service operations."
        )


class InstanceDoesNotExistError(BrokerError):
    """The backend has no cluster for the instance."""

    error_code = "InstanceDoesNotExist"

    def __init__(self, instance_id: str) -> None:
        self.instance_id = instance_id
        super().__init__("instance does not exist")


class InstanceNotUpdateableError(BrokerError):
    """The instance's service does not allow plan updates."""

    error_code = "InstanceNotUpdateable"

    def __init__(self, service_id: str) -> None:
        self.service_id = service_id
        super().__init__("instance not updateable")


class InstanceNotBindableError(BrokerError):
    """The instance's service does not allow bindings."""

    error_code = "InstanceNotBindable"

    def __init__(self, service_id: str) -> None:
        self.service_id = service_id
        super().__init__("instance not bindable")


class ConfigurationError(BrokerError):
    """A request refers to configuration that does not exist or cannot be decoded."""

    error_code = "ConfigurationError"


class ServiceNotFoundError(ConfigurationError):
    """The service id is not in the catalog."""

    error_code = "ServiceNotFound"

    def __init__(self, service_id: str) -> None:
        self.service_id = service_id
        super().__init__(f"Service '{service_id}' not found")


class PlanNotFoundError(ConfigurationError):
    """The plan id is not in the catalog."""

    error_code = "PlanNotFound"

    def __init__(self, plan_id: str) -> None:
        self.plan_id = plan_id
        super().__init__(f"Service Plan '{plan_id}' not found")


class InvalidParametersError(ConfigurationError):
    """User-supplied parameters could not be decoded."""

    error_code = "InvalidParameters"
