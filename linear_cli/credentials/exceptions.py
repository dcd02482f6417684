"""Credential-related exceptions.

This module re-exports credential exceptions from linear_cli.exceptions so
backends can import them from within the package.
"""

from linear_cli.exceptions import (
    BackendNotAvailableError,
    CredentialError,
    CredentialNotFoundError,
    CredentialReadError,
    CredentialStoreError,
    EmptyCredentialError,
)

__all__ = [
    "CredentialError",
    "CredentialNotFoundError",
    "BackendNotAvailableError",
    "EmptyCredentialError",
    "CredentialStoreError",
    "CredentialReadError",
]
