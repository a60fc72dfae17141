"""User-supplied provision and update parameters."""

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from cachebroker.backends.base import ClusterSpec
from cachebroker.broker.errors import InvalidParametersError


class ProvisionParameters(BaseModel):
    """Parameters a user may pass when creating an instance."""

    model_config = ConfigDict(extra="ignore", strict=True)

    preferred_maintenance_window: str | None = None

    def apply_to(self, spec: ClusterSpec) -> None:
        """Overlay the supplied values onto a cluster spec."""
        if self.preferred_maintenance_window:
            spec.preferred_maintenance_window = self.preferred_maintenance_window


class UpdateParameters(ProvisionParameters):
    """Parameters a user may pass when updating an instance."""

    apply_immediately: bool = False


def decode_parameters(
    model: type[ProvisionParameters],
    raw: dict[str, Any] | None,
) -> ProvisionParameters:
    """
    Decode a free-form parameter map into a parameters model.

    Unknown keys are ignored. Known keys must already have the right JSON type.

    Args:
        model: Parameters model to decode into
        raw: Parameter map from the request (None means no parameters)

    Returns:
        Decoded parameters

    Raises:
        InvalidParametersError: If a known key has a value of the wrong type
    """
    try:
        return model.model_validate(raw or {})
    except ValidationError as e:
        raise InvalidParametersError(f"Invalid parameters: {e}") from e
