"""GNOME keyring / libsecret backend using the ``secret-tool`` CLI."""

import structlog

from .command_backend import ACCOUNT, SERVICE, CommandBackend
from .exceptions import CredentialNotFoundError, CredentialStoreError

log = structlog.get_logger(__name__)

LABEL = "Linear API key (linear-cli)"


class SecretToolBackend(CommandBackend):
    """Store the API key in the Secret Service via ``secret-tool``.

    Lookup:
        secret-tool lookup service linear account default

    Store (key on stdin):
        secret-tool store --label=... service linear account default

    ``secret-tool lookup`` exits with status 1 and prints nothing when no
    matching item exists; that case is reported as not found rather than
    as a tool failure.
    """

    tool = "secret-tool"

    def get_api_key(self) -> str:
        result = self._run(["lookup", "service", SERVICE, "account", ACCOUNT])

        if result.returncode != 0:
            if result.returncode == 1 and not (result.stdout or "").strip() and not (result.stderr or "").strip():
                raise CredentialNotFoundError("No API key found", reference=self.tool)
            raise self._failure("lookup", result)

        key = self._read_output(result)
        log.debug("credential_found", backend=self.name)
        return key

    def store_api_key(self, api_key: str) -> None:
        """Store the key; it is passed on stdin, never as an argument."""
        result = self._run(
            [
                "store",
                f"--label={LABEL}",
                "service",
                SERVICE,
                "account",
                ACCOUNT,
            ],
            stdin=api_key,
        )
        if result.returncode != 0:
            error = self._failure("store", result)
            raise CredentialStoreError(error.message, reference=self.tool)

        log.info("credential_stored", backend=self.name)
