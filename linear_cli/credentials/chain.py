"""Ordered chain of credential providers."""

from collections.abc import Sequence

import structlog

from .backend import CredentialProvider
from .exceptions import CredentialNotFoundError, CredentialStoreError

log = structlog.get_logger(__name__)


class ChainProvider:
    """Try each provider in order; the first success wins.

    Errors from individual providers, including a missing native tool, are
    logged at debug level and otherwise discarded. Callers only see whether
    the chain as a whole succeeded.

    Example:
        >>> chain = ChainProvider([EnvironmentBackend(), FileBackend()])
        >>> api_key = chain.get_api_key()
    """

    def __init__(self, providers: Sequence[CredentialProvider]) -> None:
        self.providers: tuple[CredentialProvider, ...] = tuple(providers)

    @property
    def name(self) -> str:
        return "chain"

    def get_api_key(self) -> str:
        """Return the key from the first provider that has one.

        Raises:
            CredentialNotFoundError: If no provider returned a key
        """
        for provider in self.providers:
            try:
                return provider.get_api_key()
            except Exception as e:
                log.debug("credential_backend_failed", backend=provider.name, error=type(e).__name__)

        raise CredentialNotFoundError("No API key found")

    def store_api_key(self, api_key: str) -> None:
        """Store the key in the first provider that accepts it.

        Raises:
            CredentialStoreError: If every provider failed
        """
        for provider in self.providers:
            try:
                provider.store_api_key(api_key)
                return
            except Exception as e:
                log.debug("credential_store_failed", backend=provider.name, error=type(e).__name__)

        raise CredentialStoreError("no provider could store the API key")
