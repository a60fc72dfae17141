"""Service catalog: the static service and plan definitions offered by the broker."""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Raised when the catalog cannot be loaded or is inconsistent."""

    pass


class ElastiCacheProperties(BaseModel):
    """
    Backend parameters carried by a service plan.

    Every field but ``engine`` is optional. ``None``, empty strings, empty
    lists and zero all mean "leave the backend default".
    """

    model_config = ConfigDict(frozen=True)

    engine: str
    engine_version: str | None = None
    cache_node_type: str | None = None
    num_cache_nodes: int | None = None
    port: int | None = None
    cache_subnet_group_name: str | None = None
    security_group_ids: tuple[str, ...] = ()


class ServicePlan(BaseModel):
    """A named configuration template for cache clusters."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    free: bool = True
    elasticache_properties: ElastiCacheProperties


class Service(BaseModel):
    """A service offering and its plans."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    bindable: bool = True
    plan_updateable: bool = False
    tags: tuple[str, ...] = ()
    plans: tuple[ServicePlan, ...] = Field(default_factory=tuple)


class Catalog(BaseModel):
    """The full set of services exposed by the broker."""

    model_config = ConfigDict(frozen=True)

    services: tuple[Service, ...] = Field(default_factory=tuple)

    def find_service(self, service_id: str) -> Service | None:
        """
        Look up a service by id.

        Args:
            service_id: Catalog service id

        Returns:
            The service, or None if it is not in the catalog
        """
        for service in self.services:
            if service.id == service_id:
                return service
        return None

    def find_service_plan(self, plan_id: str) -> ServicePlan | None:
        """
        Look up a plan by id across all services.

        Args:
            plan_id: Catalog plan id

        Returns:
            The plan, or None if no service offers it
        """
        for service in self.services:
            for plan in service.plans:
                if plan.id == plan_id:
                    return plan
        return None

    def validate_catalog(self) -> None:
        """
        Check the catalog for structural problems.

        Raises:
            CatalogError: On the first problem found
        """
        if not self.services:
            raise CatalogError("Catalog must define at least one service")

        service_ids: set[str] = set()
        plan_ids: set[str] = set()
        for service in self.services:
            if not service.id:
                raise CatalogError("Service must have a non-empty id")
            if not service.name:
                raise CatalogError(f"Service '{service.id}' must have a non-empty name")
            if service.id in service_ids:
                raise CatalogError(f"Duplicate service id '{service.id}'")
            service_ids.add(service.id)

            for plan in service.plans:
                if not plan.id:
                    raise CatalogError(
                        f"Plan of service '{service.id}' must have a non-empty id"
                    )
                if not plan.name:
                    raise CatalogError(f"Plan '{plan.id}' must have a non-empty name")
                if plan.id in plan_ids:
                    raise CatalogError(f"Duplicate plan id '{plan.id}'")
                if not plan.elasticache_properties.engine:
                    raise CatalogError(f"Plan '{plan.id}' must define an engine")
                plan_ids.add(plan.id)


def load_catalog(path: Path) -> Catalog:
    """
    Load and validate a catalog from a JSON file.

    Args:
        path: Path to the catalog JSON file

    Returns:
        Validated catalog

    Raises:
        CatalogError: If the file is missing, malformed or inconsistent
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise CatalogError(f"Cannot read catalog file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog file {path} is not valid JSON: {e}") from e

    try:
        catalog = Catalog.model_validate(raw)
    except ValidationError as e:
        raise CatalogError(f"Invalid catalog in {path}: {e}") from e

    catalog.validate_catalog()
    logger.info(
        f"Loaded catalog from {path} with {len(catalog.services)} service(s)"
    )
    return catalog
