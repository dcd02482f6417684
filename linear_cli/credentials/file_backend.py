"""Plaintext credential file backend, restricted to the owning user."""

import os
from collections.abc import Callable
from pathlib import Path

import structlog
from platformdirs import user_config_dir

from .exceptions import CredentialError, CredentialNotFoundError, CredentialStoreError

log = structlog.get_logger(__name__)

APP_NAME = "linear"
CREDENTIALS_FILENAME = "credentials"


def default_config_dir() -> Path:
    """Return the per-user configuration directory for linear-cli."""
    return Path(user_config_dir(APP_NAME, appauthor=False))


class FileBackend:
    """Store the API key as a single line in ``<config-dir>/linear/credentials``.

    This is the fallback when no native secure store is usable. The file is
    written with mode 0600 and its directory created with mode 0700.

    Example:
        >>> backend = FileBackend(file_path=Path("/tmp/creds"))
        >>> backend.store_api_key("lin_api_abc")
        >>> backend.get_api_key()
        'lin_api_abc'
    """

    def __init__(
        self,
        file_path: Path | None = None,
        config_dir: Callable[[], Path] | None = None,
    ) -> None:
        """Initialize file backend.

        Args:
            file_path: Explicit credentials file location
            config_dir: Callable returning the linear config directory, used
                when ``file_path`` is not given (defaults to platformdirs)
        """
        self._file_path = file_path
        self._config_dir = config_dir or default_config_dir

    @property
    def name(self) -> str:
        return "file"

    @property
    def file_path(self) -> Path:
        if self._file_path is not None:
            return self._file_path
        return self._config_dir() / CREDENTIALS_FILENAME

    def get_api_key(self) -> str:
        """Read the API key from the credentials file.

        Raises:
            CredentialNotFoundError: If the file is missing or blank
            CredentialError: If the file exists but cannot be read
        """
        path = self.file_path
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise CredentialNotFoundError("No API key found", reference=str(path)) from e
        except OSError as e:
            raise CredentialError(f"Failed to read credentials file: {e}", reference=str(path)) from e

        key = content.strip()
        if not key:
            raise CredentialNotFoundError("No API key found", reference=str(path))

        log.debug("credential_found", backend=self.name, path=str(path))
        return key

    def store_api_key(self, api_key: str) -> None:
        """Write the trimmed key followed by a newline.

        Raises:
            CredentialStoreError: If the directory or file cannot be written
        """
        path = self.file_path
        try:
            path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

            # Create with owner-only permissions so the key is never readable
            # by others, even briefly.
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(api_key.strip() + "\n")

            # O_CREAT mode is ignored for an existing file
            path.chmod(0o600)
        except OSError as e:
            raise CredentialStoreError(f"Failed to write credentials file: {e}", reference=str(path)) from e

        log.info("credential_stored", backend=self.name, path=str(path))
