"""Tests for settings validation."""

import pytest
from pydantic import ValidationError

from cachebroker.config import Settings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Run each test without a .env file or broker variables."""
    monkeypatch.chdir(tmp_path)
    for name in [
        "LOG_LEVEL",
        "AWS_REGION",
        "AWS_ENDPOINT_URL",
        "AWS_ACCOUNT_ID",
        "CACHE_PREFIX",
        "ALLOW_USER_PROVISION_PARAMETERS",
        "ALLOW_USER_UPDATE_PARAMETERS",
        "CATALOG_PATH",
        "CLUSTER_BACKEND",
    ]:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self) -> None:
        """Test default values."""
        settings = Settings()
        assert settings.log_level == "INFO"
        assert settings.aws_region == "us-east-1"
        assert settings.cache_prefix == "cf"
        assert settings.allow_user_provision_parameters is False
        assert settings.allow_user_update_parameters is False
        assert settings.cluster_backend == "elasticache"

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test values are read from environment variables."""
        monkeypatch.setenv("CACHE_PREFIX", "paas")
        monkeypatch.setenv("ALLOW_USER_UPDATE_PARAMETERS", "true")
        monkeypatch.setenv("CLUSTER_BACKEND", "MEMORY")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = Settings()
        assert settings.cache_prefix == "paas"
        assert settings.allow_user_update_parameters is True
        assert settings.cluster_backend == "memory"
        assert settings.log_level == "DEBUG"

    def test_empty_region_rejected(self) -> None:
        """Test the region must be set."""
        with pytest.raises(ValidationError, match="non-empty AWS region"):
            Settings(aws_region="")

    def test_empty_prefix_rejected(self) -> None:
        """Test the prefix must be set."""
        with pytest.raises(ValidationError, match="non-empty cache prefix"):
            Settings(cache_prefix="")

    def test_long_prefix_rejected(self) -> None:
        """Test the prefix must leave room for the instance id."""
        with pytest.raises(ValidationError, match="at most 18"):
            Settings(cache_prefix="a" * 19)

    @pytest.mark.parametrize("prefix", ["1cf", "cf_x", "cf.x", "-cf", "cf-", "cf--x"])
    def test_illegal_prefix_rejected(self, prefix: str) -> None:
        """Test the prefix must be a legal cluster id start."""
        with pytest.raises(ValidationError, match="start with a letter"):
            Settings(cache_prefix=prefix)

    @pytest.mark.parametrize("prefix", ["c", "cf", "a1", "paas-prod", "a-long-prefix-18ch"])
    def test_legal_prefix_accepted(self, prefix: str) -> None:
        """Test letters, digits and single inner hyphens are allowed."""
        assert Settings(cache_prefix=prefix).cache_prefix == prefix

    def test_unknown_backend_rejected(self) -> None:
        """Test only known backends are accepted."""
        with pytest.raises(ValidationError, match="Unknown cluster backend"):
            Settings(cluster_backend="redis")

    def test_unknown_log_level_rejected(self) -> None:
        """Test only logging levels are accepted."""
        with pytest.raises(ValidationError, match="Invalid log level"):
            Settings(log_level="verbose")
