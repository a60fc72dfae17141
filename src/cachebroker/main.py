"""Assembly of the broker from configuration."""

import logging

from cachebroker.backends import CacheClusterBackend, create_account_lookup, create_backend
from cachebroker.broker import CacheClusterBroker
from cachebroker.catalog import load_catalog
from cachebroker.config import Settings, get_settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the broker process."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
    )
    # botocore is very chatty at debug level
    logging.getLogger("botocore").setLevel(logging.WARNING)


def create_broker(
    settings: Settings | None = None,
    backend: CacheClusterBackend | None = None,
) -> CacheClusterBroker:
    """
    Build a broker from settings.

    Args:
        settings: Broker settings (defaults to the cached environment settings)
        backend: Backend to use instead of the configured one

    Returns:
        Ready-to-use broker

    Raises:
        CatalogError: If the catalog cannot be loaded
    """
    settings = settings or get_settings()
    catalog = load_catalog(settings.catalog_path)

    if backend is None:
        backend = create_backend(settings)
    logger.info(f"Using {backend.name} cache cluster backend in {settings.aws_region}")

    return CacheClusterBroker(
        catalog=catalog,
        backend=backend,
        account_lookup=create_account_lookup(settings),
        cache_prefix=settings.cache_prefix,
        region=settings.aws_region,
        allow_user_provision_parameters=settings.allow_user_provision_parameters,
        allow_user_update_parameters=settings.allow_user_update_parameters,
    )
