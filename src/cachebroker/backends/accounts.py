"""Account lookup used to build fully qualified resource names."""

import logging
from abc import ABC, abstractmethod
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)


class AccountLookupError(Exception):
    """Raised when the account id cannot be determined."""

    pass


class AccountLookup(ABC):
    """Resolves the account owning the backend resources."""

    @abstractmethod
    def account_id(self) -> str:
        """
        Get the account id.

        Returns:
            Account id (e.g., '123456789012')

        Raises:
            AccountLookupError: If the lookup fails
        """
        ...


class StaticAccountLookup(AccountLookup):
    """Account lookup returning a configured account id."""

    def __init__(self, account_id: str) -> None:
        self._account_id = account_id

    def account_id(self) -> str:
        return self._account_id


class StsAccountLookup(AccountLookup):
    """Account lookup asking STS who the current caller is."""

    def __init__(
        self,
        region: str,
        endpoint_url: str | None = None,
        client: Any = None,
    ) -> None:
        """
        Initialize STS account lookup.

        Args:
            region: AWS region for the STS client
            endpoint_url: Optional endpoint override
            client: Pre-built boto3 STS client
        """
        if client is None:
            client_kwargs: dict[str, Any] = {"service_name": "sts", "region_name": region}
            if endpoint_url:
                client_kwargs["endpoint_url"] = endpoint_url
            client = boto3.client(**client_kwargs)
        self.client = client

    def account_id(self) -> str:
        try:
            identity = self.client.get_caller_identity()
        except (ClientError, BotoCoreError) as e:
            raise AccountLookupError(f"Cannot determine AWS account: {e}") from e

        account = identity.get("Account")
        if not account:
            raise AccountLookupError("STS caller identity has no account")
        logger.debug(f"Resolved AWS account {account}")
        return account
