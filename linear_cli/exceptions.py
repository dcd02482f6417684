"""Custom exception hierarchy for linear-cli.

Exception Hierarchy:
    LinearCliError (base)
    ├── ConfigurationError
    ├── CredentialError
    │   ├── CredentialNotFoundError
    │   ├── BackendNotAvailableError
    │   ├── EmptyCredentialError
    │   ├── CredentialStoreError
    │   └── CredentialReadError
    ├── ExternalServiceError
    │   └── GraphQLError
    └── NotFoundError

Example Usage:
    >>> from linear_cli.exceptions import NotFoundError
    >>> data = client.execute(queries.GET_ISSUE, {"id": "ENG-1"})
    >>> if not data.get("issue"):
    ...     raise NotFoundError("issue ENG-1 not found")
"""

from typing import Any


class LinearCliError(Exception):
    """Base exception for all linear-cli errors.

    The CLI catches this class at the command boundary and turns it into an
    ``Error: ...`` line on stderr with a non-zero exit code.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(LinearCliError):
    """Configuration-related errors.

    Raised by LinearSettings.from_yaml when the file cannot be loaded or
    its values fail validation.
    """

    pass


class CredentialError(LinearCliError):
    """Credential-related errors.

    This is the base class for credential-specific errors. Subclasses map
    onto the failure kinds the resolver has to tell apart:
    - CredentialNotFoundError: the backend holds no API key
    - BackendNotAvailableError: the native storage tool is not installed
    - EmptyCredentialError: the user entered a blank key
    - CredentialStoreError: a backend could not persist the key
    - CredentialReadError: reading interactive input failed

    Attributes:
        message: Human-readable error description
        reference: The backend or location involved (e.g., "secret-tool")
        suggestion: Optional suggestion for resolution
    """

    def __init__(
        self,
        message: str,
        reference: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            reference: The backend or location that failed
            suggestion: Optional suggestion for resolution
        """
        self.reference = reference
        self.suggestion = suggestion

        full_message = message
        if reference:
            full_message = f"{message} (reference: {reference})"
        if suggestion:
            full_message = f"{full_message}\nSuggestion: {suggestion}"

        super().__init__(full_message)
        # str(e) carries the reference; message stays the bare text
        self.message = message


class CredentialNotFoundError(CredentialError):
    """The backend has no API key stored."""

    pass


class BackendNotAvailableError(CredentialError):
    """The external credential storage tool is not installed."""

    pass


class EmptyCredentialError(CredentialError):
    """The API key entered at the prompt was empty."""

    pass


class CredentialStoreError(CredentialError):
    """The API key could not be persisted."""

    pass


class CredentialReadError(CredentialError):
    """Interactive input could not be read."""

    pass


class ExternalServiceError(LinearCliError):
    """External service communication errors.

    Raised when communication with the Linear API fails (HTTP errors,
    timeouts, network connectivity issues).
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_text: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            status_code: HTTP status code (if applicable)
            response_text: Response body text (if applicable)
        """
        self.status_code = status_code
        self.response_text = response_text

        full_message = message
        if status_code:
            full_message = f"{message} (HTTP {status_code})"

        super().__init__(full_message)
        self.message = message


class GraphQLError(ExternalServiceError):
    """The GraphQL endpoint answered with an ``errors`` payload.

    Attributes:
        errors: Raw error objects from the response
    """

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        self.errors = errors
        messages = [str(e.get("message", e)) for e in errors] or ["unknown error"]
        super().__init__(f"GraphQL error: {'; '.join(messages)}")


class NotFoundError(LinearCliError):
    """A requested issue, user or cycle does not exist."""

    pass


class GitError(LinearCliError):
    """A git (or post-create hook) command failed."""

    pass
