"""API key storage and resolution for linear-cli.

This package provides:
- Storage backends (environment variable, secret-tool, macOS Keychain, file)
- An ordered provider chain with first-success-wins lookup and storage
- A hidden-input prompt for entering a new key
- A resolver that decides where a freshly entered key is saved

Example usage:

    from linear_cli.credentials import (
        ApiKeyResolver, FileBackend, InteractivePrompter, Platform,
        default_chain, native_backend_for,
    )

    native = native_backend_for(Platform.current())
    file_store = FileBackend()
    resolver = ApiKeyResolver(
        default_chain(native, file_store),
        InteractivePrompter(),
        native_store=native,
        file_store=file_store,
    )
    api_key = resolver.resolve().api_key
"""

from .backend import CredentialProvider, Prompter
from .chain import ChainProvider
from .environment_backend import API_KEY_ENV_VAR, EnvironmentBackend
from .exceptions import (
    BackendNotAvailableError,
    CredentialError,
    CredentialNotFoundError,
    CredentialReadError,
    CredentialStoreError,
    EmptyCredentialError,
)
from .file_backend import FileBackend
from .keychain_backend import KeychainBackend
from .prompter import InteractivePrompter
from .resolver import (
    ApiKeyResolver,
    KeySource,
    PersistResult,
    Platform,
    ResolveOutcome,
    default_chain,
    install_hint,
    native_backend_for,
    resolve_api_key,
)
from .secret_tool_backend import SecretToolBackend

__all__ = [
    # Protocols
    "CredentialProvider",
    "Prompter",
    # Backends
    "API_KEY_ENV_VAR",
    "EnvironmentBackend",
    "SecretToolBackend",
    "KeychainBackend",
    "FileBackend",
    "ChainProvider",
    # Prompting and resolution
    "InteractivePrompter",
    "ApiKeyResolver",
    "ResolveOutcome",
    "KeySource",
    "PersistResult",
    "Platform",
    "default_chain",
    "install_hint",
    "native_backend_for",
    "resolve_api_key",
    # Exceptions
    "CredentialError",
    "CredentialNotFoundError",
    "BackendNotAvailableError",
    "EmptyCredentialError",
    "CredentialStoreError",
    "CredentialReadError",
]
