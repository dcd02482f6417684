"""Environment variable backend for CI/CD and containerized environments."""

import os
from collections.abc import Mapping

import structlog

from .exceptions import CredentialNotFoundError, CredentialStoreError

log = structlog.get_logger(__name__)

API_KEY_ENV_VAR = "LINEAR_API_KEY"


class EnvironmentBackend:
    """Read the API key from the ``LINEAR_API_KEY`` environment variable.

    This backend is ideal for CI pipelines, containers, and one-off
    invocations (``LINEAR_API_KEY=... linear issue list``).

    A variable that is set but empty is treated exactly like an unset one.
    Storing is not supported: a process cannot set environment variables for
    future shells.

    Example:
        >>> backend = EnvironmentBackend(environ={"LINEAR_API_KEY": "lin_api_abc"})
        >>> backend.get_api_key()
        'lin_api_abc'
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        var_name: str = API_KEY_ENV_VAR,
    ) -> None:
        """Initialize environment backend.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)
            var_name: Variable holding the API key
        """
        self._environ = environ
        self.var_name = var_name

    @property
    def name(self) -> str:
        """Get backend identifier.

        Returns:
            Backend name constant "environment"
        """
        return "environment"

    def get_api_key(self) -> str:
        """Return the API key from the environment.

        Raises:
            CredentialNotFoundError: If the variable is unset or empty
        """
        environ = self._environ if self._environ is not None else os.environ
        value = environ.get(self.var_name, "").strip()

        if not value:
            raise CredentialNotFoundError("No API key found", reference=f"${self.var_name}")

        log.debug("credential_found", backend=self.name, variable=self.var_name)
        return value

    def store_api_key(self, api_key: str) -> None:
        """Environment variables cannot be persisted; always raises."""
        raise CredentialStoreError(
            "Cannot store API key in environment variable",
            reference=f"${self.var_name}",
        )
