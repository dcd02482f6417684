"""Protocols shared by credential providers and prompters."""

from typing import Protocol, TextIO


class CredentialProvider(Protocol):
    """Protocol defining the interface for API key storage backends.

    All backends must implement these methods to be usable on their own or
    inside a ChainProvider.
    """

    @property
    def name(self) -> str:
        """Backend identifier (e.g., 'environment', 'secret-tool')."""
        ...

    def get_api_key(self) -> str:
        """Retrieve the stored API key.

        Returns:
            The API key, never empty

        Raises:
            CredentialNotFoundError: If the backend holds no key
            BackendNotAvailableError: If the backing tool is not installed
            CredentialError: On any other failure
        """
        ...

    def store_api_key(self, api_key: str) -> None:
        """Persist an API key.

        Args:
            api_key: Key to store

        Raises:
            BackendNotAvailableError: If the backing tool is not installed
            CredentialStoreError: If the key could not be stored
        """
        ...


class Prompter(Protocol):
    """Interactive source of an API key."""

    def prompt_for_api_key(self, stdin: TextIO, output: TextIO) -> str:
        """Ask the user for an API key.

        Args:
            stdin: Input stream
            output: Stream for instructions and prompts

        Returns:
            The trimmed, non-empty API key

        Raises:
            EmptyCredentialError: If the user entered nothing
            CredentialReadError: If input could not be read
        """
        ...
