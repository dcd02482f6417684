"""API key resolution: provider chain, interactive prompt, persistence policy.

Resolution order:
    1. Ask the provider chain (environment, native store, file).
    2. Otherwise prompt the user for a key with echo disabled.
    3. Try to save a prompted key in the native secure store.
    4. If that is not possible, offer to save it in the credentials file.

Only a failed prompt fails resolution. Every persistence problem is reported
as a warning on the message stream and the key is still returned.
"""

import sys
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

import structlog

from .backend import CredentialProvider, Prompter
from .chain import ChainProvider
from .command_backend import CommandRunner
from .environment_backend import EnvironmentBackend
from .exceptions import BackendNotAvailableError, CredentialError
from .keychain_backend import KeychainBackend
from .secret_tool_backend import SecretToolBackend

log = structlog.get_logger(__name__)

AFFIRMATIVE_ANSWERS = frozenset({"y", "Y", "yes"})


class Platform(str, Enum):
    """Host platform families with distinct native secret tools."""

    MACOS = "macos"
    LINUX = "linux"
    OTHER = "other"

    @classmethod
    def current(cls, sys_platform: str | None = None) -> "Platform":
        value = sys_platform if sys_platform is not None else sys.platform
        if value == "darwin":
            return cls.MACOS
        if value.startswith("linux"):
            return cls.LINUX
        return cls.OTHER


class KeySource(str, Enum):
    CHAIN = "chain"
    PROMPT = "prompt"


class PersistResult(str, Enum):
    """What happened to a freshly obtained key."""

    NOT_NEEDED = "not_needed"  # key came from the chain
    NATIVE = "native"
    FILE = "file"
    DECLINED = "declined"
    READ_FAILED = "read_failed"
    FAILED = "failed"
    SKIPPED = "skipped"  # no store configured


@dataclass(frozen=True)
class ResolveOutcome:
    """Result of one resolution.

    Attributes:
        api_key: The resolved API key
        source: Where the key came from
        persistence: Whether and where a prompted key was saved
    """

    api_key: str
    source: KeySource
    persistence: PersistResult

    def __repr__(self) -> str:
        return f"ResolveOutcome(api_key='***', source={self.source.value}, persistence={self.persistence.value})"


def install_hint(platform: Platform) -> str:
    """Return instructions for installing the native secret tool."""
    if platform is Platform.MACOS:
        return (
            "The macOS security CLI should be available by default.\n"
            "If missing, install Xcode Command Line Tools:\n"
            "  xcode-select --install"
        )
    return (
        "Install secret-tool for secure credential storage:\n"
        "  Ubuntu/Debian: sudo apt install libsecret-tools\n"
        "  Fedora:        sudo dnf install libsecret\n"
        "  Arch:          sudo pacman -S libsecret"
    )


def native_backend_for(
    platform: Platform, runner: CommandRunner | None = None
) -> KeychainBackend | SecretToolBackend:
    """Pick the native secure-store backend for a platform."""
    if platform is Platform.MACOS:
        return KeychainBackend(runner=runner)
    return SecretToolBackend(runner=runner)


def default_chain(
    native_store: CredentialProvider, file_store: CredentialProvider
) -> ChainProvider:
    """Build the standard lookup order: environment, native store, file."""
    return ChainProvider([EnvironmentBackend(), native_store, file_store])


def _read_line(stream: TextIO) -> str:
    line = stream.readline()
    if not line:
        raise EOFError("end of input")
    return line


class ApiKeyResolver:
    """Orchestrate lookup, prompting and persistence of the API key.

    Example:
        >>> native = native_backend_for(Platform.current())
        >>> file_store = FileBackend()
        >>> resolver = ApiKeyResolver(
        ...     default_chain(native, file_store),
        ...     InteractivePrompter(),
        ...     native_store=native,
        ...     file_store=file_store,
        ... )
        >>> outcome = resolver.resolve()
    """

    def __init__(
        self,
        provider: CredentialProvider,
        prompter: Prompter,
        native_store: CredentialProvider | None = None,
        file_store: CredentialProvider | None = None,
        stdin: TextIO | None = None,
        messages: TextIO | None = None,
        read_line: Callable[[TextIO], str] | None = None,
        platform: Platform | None = None,
    ) -> None:
        """Initialize resolver.

        Args:
            provider: Lookup provider, usually a ChainProvider
            prompter: Interactive prompter used when lookup fails
            native_store: Secure store tried first for a prompted key
            file_store: Fallback store, used only after confirmation
            stdin: Stream confirmation answers are read from
            messages: Stream for prompts and warnings (stderr by default)
            read_line: Reads one line from ``stdin``; raises on EOF/failure
            platform: Platform used to choose the install hint
        """
        self.provider = provider
        self.prompter = prompter
        self.native_store = native_store
        self.file_store = file_store
        self.stdin = stdin if stdin is not None else sys.stdin
        self.messages = messages if messages is not None else sys.stderr
        self.read_line = read_line or _read_line
        self.platform = platform or Platform.current()

    def resolve(self) -> ResolveOutcome:
        """Resolve the API key.

        Raises:
            CredentialError: If no key was stored and prompting failed
        """
        try:
            api_key = self.provider.get_api_key()
        except CredentialError:
            log.debug("credential_lookup_missed", provider=self.provider.name)
        else:
            return ResolveOutcome(api_key, KeySource.CHAIN, PersistResult.NOT_NEEDED)

        try:
            api_key = self.prompter.prompt_for_api_key(self.stdin, self.messages)
        except CredentialError as e:
            raise CredentialError(f"prompting for API key: {e.message}") from e

        return ResolveOutcome(api_key, KeySource.PROMPT, self._persist(api_key))

    def _persist(self, api_key: str) -> PersistResult:
        if self.native_store is not None:
            try:
                self.native_store.store_api_key(api_key)
            except BackendNotAvailableError:
                log.debug("native_store_unavailable", backend=self.native_store.name)
                self._say(f"\n{install_hint(self.platform)}\n")
            except CredentialError as e:
                log.debug("native_store_failed", backend=self.native_store.name, error=type(e).__name__)
                self._say(f"Warning: could not store API key in system keyring: {e.message}")
            else:
                return PersistResult.NATIVE

        if self.file_store is None:
            return PersistResult.SKIPPED

        return self._confirm_and_store_file(self.file_store, api_key)

    def _confirm_and_store_file(self, file_store: CredentialProvider, api_key: str) -> PersistResult:
        self.messages.write("Store API key in a local config file instead? [y/N]: ")
        self.messages.flush()

        try:
            answer = self.read_line(self.stdin).strip()
        except (OSError, EOFError, ValueError) as e:
            self._say(f"Warning: could not read response: {e}")
            return PersistResult.READ_FAILED

        if answer not in AFFIRMATIVE_ANSWERS:
            self._say("API key was not saved. You will be prompted again next time.")
            return PersistResult.DECLINED

        try:
            file_store.store_api_key(api_key)
        except CredentialError as e:
            self._say(f"Warning: could not store API key in file: {e.message}")
            return PersistResult.FAILED

        return PersistResult.FILE

    def _say(self, line: str) -> None:
        self.messages.write(line + "\n")
        self.messages.flush()


def resolve_api_key(
    provider: CredentialProvider,
    prompter: Prompter,
    native_store: CredentialProvider | None = None,
    file_store: CredentialProvider | None = None,
    stdin: TextIO | None = None,
    messages: TextIO | None = None,
) -> str:
    """Resolve and return only the API key.

    Raises:
        CredentialError: If prompting failed
    """
    resolver = ApiKeyResolver(
        provider,
        prompter,
        native_store=native_store,
        file_store=file_store,
        stdin=stdin,
        messages=messages,
    )
    return resolver.resolve().api_key


__all__ = [
    "AFFIRMATIVE_ANSWERS",
    "ApiKeyResolver",
    "KeySource",
    "PersistResult",
    "Platform",
    "ResolveOutcome",
    "default_chain",
    "install_hint",
    "native_backend_for",
    "resolve_api_key",
]
