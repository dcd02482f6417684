"""macOS Keychain backend using the ``security`` CLI."""

import structlog

from .command_backend import ACCOUNT, SERVICE, CommandBackend
from .exceptions import CredentialNotFoundError, CredentialStoreError

log = structlog.get_logger(__name__)

# Exit code when an item is not found in Keychain
_ERR_ITEM_NOT_FOUND = 44


def _quote(value: str) -> str:
    """Quote a value for the ``security -i`` command parser."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class KeychainBackend(CommandBackend):
    """Store the API key as a generic password in the login keychain.

    ``security add-generic-password -w <password>`` would put the key in the
    process argument list, where any local user can read it. Instead the
    command is sent to ``security -i`` (interactive mode) on stdin.
    """

    tool = "security"

    def get_api_key(self) -> str:
        result = self._run(["find-generic-password", "-s", SERVICE, "-a", ACCOUNT, "-w"])

        if result.returncode == _ERR_ITEM_NOT_FOUND:
            raise CredentialNotFoundError("No API key found", reference=self.tool)
        if result.returncode != 0:
            raise self._failure("find-generic-password", result)

        key = self._read_output(result)
        log.debug("credential_found", backend=self.name)
        return key

    def store_api_key(self, api_key: str) -> None:
        """Store or update (-U) the keychain item.

        An interactive session may exit 0 after a failed subcommand, so any
        stderr output also counts as a failure.
        """
        command = f"add-generic-password -U -s {SERVICE} -a {ACCOUNT} -w {_quote(api_key)}\n"
        result = self._run(["-i"], stdin=command)

        if result.returncode != 0 or (result.stderr or "").strip():
            error = self._failure("add-generic-password", result)
            raise CredentialStoreError(error.message, reference=self.tool)

        log.info("credential_stored", backend=self.name)
