"""Shared plumbing for backends that shell out to a platform secret tool.

Subprocess calls are isolated per operation and block until the tool exits.
Secrets are only ever written to the child's stdin; ``subprocess.run`` with
``input=`` writes the whole buffer and closes the pipe before the exit
status is collected.
"""

import subprocess
from collections.abc import Callable, Sequence
from typing import Any

import structlog

from .exceptions import BackendNotAvailableError, CredentialError, CredentialNotFoundError

log = structlog.get_logger(__name__)

CommandRunner = Callable[..., "subprocess.CompletedProcess[str]"]

# Fixed identifiers the API key is filed under in the native stores
SERVICE = "linear"
ACCOUNT = "default"


class CommandBackend:
    """Base class for secret-tool and security CLI backends.

    Subclasses set ``tool`` and implement ``get_api_key``/``store_api_key``
    on top of :meth:`_run`.

    Attributes:
        tool: Executable name
    """

    tool: str = ""

    def __init__(self, runner: CommandRunner | None = None) -> None:
        """Initialize backend.

        Args:
            runner: Callable with the signature of ``subprocess.run``
                (injected by tests). Defaults to ``subprocess.run``.
        """
        self._runner = runner or subprocess.run

    @property
    def name(self) -> str:
        return self.tool

    def _run(self, args: Sequence[str], stdin: str | None = None) -> "subprocess.CompletedProcess[str]":
        """Run the tool and return the completed process.

        Args:
            args: Arguments after the executable name
            stdin: Text to feed on standard input

        Raises:
            BackendNotAvailableError: If the executable does not exist
        """
        kwargs: dict[str, Any] = {
            "capture_output": True,
            "text": True,
            "check": False,
        }
        if stdin is not None:
            kwargs["input"] = stdin

        log.debug("credential_tool_invoked", tool=self.tool, command=args[0] if args else None)
        try:
            return self._runner([self.tool, *args], **kwargs)
        except FileNotFoundError as e:
            raise BackendNotAvailableError(
                "Credential storage tool not found",
                reference=self.tool,
            ) from e
        except OSError as e:
            raise CredentialError(f"{self.tool} could not be started: {e}", reference=self.tool) from e

    def _read_output(self, result: "subprocess.CompletedProcess[str]") -> str:
        """Extract a non-empty key from lookup output."""
        key = (result.stdout or "").strip()
        if not key:
            raise CredentialNotFoundError("No API key found", reference=self.tool)
        return key

    def _failure(self, action: str, result: "subprocess.CompletedProcess[str]") -> CredentialError:
        detail = (result.stderr or "").strip() or f"exit status {result.returncode}"
        return CredentialError(f"{self.tool} {action} failed: {detail}", reference=self.tool)
