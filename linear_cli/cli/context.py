"""Shared state and helpers for CLI commands.

Every command receives a :class:`CliContext` through ``ctx.obj``. It holds the
collaborators a command needs (credential providers, API client factory,
cache, streams, clock, git) so tests can swap any of them out.
"""

import functools
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, TextIO, TypeVar

import click
import structlog

from linear_cli.api.client import LinearClient
from linear_cli.api.models import Issue
from linear_cli.config.settings import LinearSettings
from linear_cli.credentials import (
    CredentialError,
    CredentialProvider,
    FileBackend,
    InteractivePrompter,
    Platform,
    Prompter,
    default_chain,
    native_backend_for,
    resolve_api_key,
)
from linear_cli.exceptions import LinearCliError
from linear_cli.formatting.color import color_enabled
from linear_cli.tui.selector import run_selector
from linear_cli.utils.caching import FileCache
from linear_cli.utils.git import GitWorktreeCreator

log = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _stdin_is_tty() -> bool:
    try:
        return sys.stdin.isatty()
    except ValueError:
        return False


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class CliContext:
    """Dependencies for one CLI invocation.

    Attributes:
        settings: Loaded configuration
        provider: Credential lookup chain
        prompter: Hidden-input API key prompt
        native_store: Secure store for a freshly entered key
        file_store: Fallback store for a freshly entered key
        client_factory: Builds an API client from an API key
        cache: On-disk cache, or None to disable caching
        stdin: Stream confirmation answers are read from
        stderr: Stream for prompts and warnings
        now: Returns the current (timezone-aware) time
        stdin_is_tty: Reports whether the picker can be shown
        selector: Interactive issue picker
        git: Runs the git commands for issue worktrees
    """

    settings: LinearSettings
    provider: CredentialProvider
    prompter: Prompter
    native_store: CredentialProvider | None
    file_store: CredentialProvider | None
    client_factory: Callable[[str], LinearClient]
    cache: FileCache | None
    stdin: TextIO = field(default_factory=lambda: sys.stdin)
    stderr: TextIO = field(default_factory=lambda: sys.stderr)
    now: Callable[[], datetime] = _utcnow
    stdin_is_tty: Callable[[], bool] = _stdin_is_tty
    selector: Callable[[Sequence[Issue]], str | None] = run_selector
    git: GitWorktreeCreator = field(default_factory=GitWorktreeCreator)

    @classmethod
    def from_settings(cls, settings: LinearSettings) -> "CliContext":
        """Wire up the real OS-backed collaborators."""
        native = native_backend_for(Platform.current())
        file_store = FileBackend()

        def client_factory(api_key: str) -> LinearClient:
            return LinearClient(api_key, endpoint=settings.api_url, timeout=settings.request_timeout)

        return cls(
            settings=settings,
            provider=default_chain(native, file_store),
            prompter=InteractivePrompter(),
            native_store=native,
            file_store=file_store,
            client_factory=client_factory,
            cache=FileCache(settings.cache_dir, settings.cache_ttl_seconds),
        )

    def resolve_client(self) -> LinearClient:
        """Resolve the API key (prompting if needed) and build a client.

        Raises:
            CredentialError: If no key could be obtained
        """
        try:
            api_key = resolve_api_key(
                self.provider,
                self.prompter,
                native_store=self.native_store,
                file_store=self.file_store,
                stdin=self.stdin,
                messages=self.stderr,
            )
        except CredentialError as e:
            raise CredentialError(f"resolving API key: {e.message}") from e
        return self.client_factory(api_key)

    @property
    def color(self) -> bool:
        return color_enabled(click.get_text_stream("stdout"))


class AliasedGroup(click.Group):
    """Click group that also accepts short aliases for subcommands."""

    def __init__(self, *args: Any, aliases: dict[str, str] | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.aliases = aliases or {}

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        _, cmd, rest = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, rest


def handle_errors(func: F) -> F:
    """Turn LinearCliError into a red ``Error:`` line and exit status 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except LinearCliError as e:
            click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
            suggestion = getattr(e, "suggestion", None)
            if suggestion:
                click.echo(click.style(f"Suggestion: {suggestion}", fg="yellow"), err=True)
            log.debug("command_failed", error=type(e).__name__, exc_info=True)
            sys.exit(1)
        except KeyboardInterrupt:
            click.echo("\nInterrupted by user", err=True)
            sys.exit(130)
        except Exception as e:
            click.echo(f"Unexpected error: {e}", err=True)
            log.error("command_failed_unexpected", exc_info=True)
            sys.exit(1)

    return wrapper  # type: ignore[return-value]


def validate_limit(limit: int) -> None:
    if limit <= 0:
        raise LinearCliError(f"--limit must be greater than 0, got {limit}")
