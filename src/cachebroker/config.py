"""Configuration module using Pydantic Settings."""

import re
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Derived cluster ids are capped at 20 characters; the prefix plus its
# separator must leave room for at least one character of the instance id.
MAX_CACHE_PREFIX_LENGTH = 18

# Cluster ids may not end with a hyphen or contain two in a row.
_CACHE_PREFIX_PATTERN = re.compile(r"^[a-zA-Z](?:[a-zA-Z0-9]|-(?!-))*[a-zA-Z0-9]$|^[a-zA-Z]$")


class Settings(BaseSettings):
    """Broker settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Logging
    log_level: str = "INFO"

    # AWS
    aws_region: str = "us-east-1"
    aws_endpoint_url: str | None = None  # e.g. a LocalStack endpoint
    aws_account_id: str | None = None  # Skips the STS lookup when set

    # Broker
    cache_prefix: str = "cf"
    allow_user_provision_parameters: bool = False
    allow_user_update_parameters: bool = False
    catalog_path: Path = Path("config/catalog.json")
    cluster_backend: str = "elasticache"  # "elasticache" or "memory"

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {value}")
        return value

    @field_validator("aws_region")
    @classmethod
    def _check_region(cls, value: str) -> str:
        if not value:
            raise ValueError("Must provide a non-empty AWS region")
        return value

    @field_validator("cache_prefix")
    @classmethod
    def _check_cache_prefix(cls, value: str) -> str:
        if not value:
            raise ValueError("Must provide a non-empty cache prefix")
        if len(value) > MAX_CACHE_PREFIX_LENGTH:
            raise ValueError(
                f"Cache prefix must be at most {MAX_CACHE_PREFIX_LENGTH} characters"
            )
        if not _CACHE_PREFIX_PATTERN.match(value):
            raise ValueError(
                "Cache prefix must start with a letter and contain only "
                "letters, digits and single hyphens, not ending in a hyphen"
            )
        return value

    @field_validator("cluster_backend")
    @classmethod
    def _check_cluster_backend(cls, value: str) -> str:
        value = value.lower()
        if value not in {"elasticache", "memory"}:
            raise ValueError(f"Unknown cluster backend: {value}")
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
