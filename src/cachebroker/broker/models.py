"""Request and response types of the broker operations."""

from dataclasses import dataclass, field
from typing import Any

from cachebroker.broker.status import OperationState


@dataclass
class ProvisionDetails:
    """Details of a provision request."""

    service_id: str
    plan_id: str
    organization_guid: str = ""
    space_guid: str = ""
    parameters: dict[str, Any] = field(default_factory=dict)


@dataclass
class UpdateDetails:
    """Details of an update request."""

    service_id: str
    plan_id: str
    parameters: dict[str, Any] = field(default_factory=dict)


@dataclass
class DeprovisionDetails:
    """Details of a deprovision request."""

    service_id: str = ""
    plan_id: str = ""


@dataclass
class BindDetails:
    """Details of a bind request."""

    service_id: str
    plan_id: str = ""
    app_guid: str = ""
    parameters: dict[str, Any] = field(default_factory=dict)


@dataclass
class UnbindDetails:
    """Details of an unbind request."""

    service_id: str = ""
    plan_id: str = ""


@dataclass(frozen=True)
class Credentials:
    """Connection details handed to a bound application."""

    host: str
    port: int
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"host": self.host, "port": self.port, "name": self.name}


@dataclass(frozen=True)
class Binding:
    """Result of a bind."""

    credentials: Credentials


@dataclass(frozen=True)
class LastOperation:
    """State of the last asynchronous operation on an instance."""

    state: OperationState
    description: str
