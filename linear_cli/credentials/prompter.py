"""Interactive hidden-input prompt for the Linear API key.

Example:
    >>> prompter = InteractivePrompter()
    >>> api_key = prompter.prompt_for_api_key(sys.stdin, sys.stderr)
"""

import os
import sys
from collections.abc import Callable
from typing import TextIO

import click

from .exceptions import CredentialReadError, EmptyCredentialError

API_KEY_SETTINGS_URL = "https://linear.app/settings/api"
API_KEY_PROMPT = "Enter your Linear API key"


def stdin_is_terminal() -> bool:
    try:
        return os.isatty(sys.stdin.fileno())
    except (OSError, ValueError):
        return False


def prompt_hidden(text: str) -> str:
    """Read a line from the terminal without echoing it."""
    return click.prompt(text, hide_input=True, err=True, default="", show_default=False)


class InteractivePrompter:
    """Ask the user to paste an API key without echoing it.

    Attributes:
        read_password: Callable showing a prompt and returning the hidden input
        is_terminal: Reports whether stdin is attached to a terminal
    """

    def __init__(
        self,
        read_password: Callable[[str], str] | None = None,
        is_terminal: Callable[[], bool] | None = None,
    ) -> None:
        """Initialize prompter.

        Args:
            read_password: Hidden input reader (defaults to ``click.prompt``)
            is_terminal: Terminal check (defaults to ``isatty`` on stdin)
        """
        self.read_password = read_password or prompt_hidden
        self.is_terminal = is_terminal or stdin_is_terminal

    def prompt_for_api_key(self, stdin: TextIO, output: TextIO) -> str:
        """Print instructions and read the key with echo disabled.

        ``stdin`` is part of the prompter interface; echo can only be turned
        off on the process's terminal, so the hidden read goes through it.

        Raises:
            CredentialReadError: If stdin is not a terminal or the read failed
            EmptyCredentialError: If the entered key is blank
        """
        output.write("No Linear API key found.\n")
        output.write(f"Create one at: {API_KEY_SETTINGS_URL}\n\n")
        output.flush()

        if not self.is_terminal():
            raise CredentialReadError("reading API key: standard input is not a terminal")

        try:
            raw = self.read_password(API_KEY_PROMPT)
        except click.Abort as e:
            raise CredentialReadError("reading API key: input aborted") from e
        except (OSError, EOFError) as e:
            raise CredentialReadError(f"reading API key: {e}") from e

        api_key = raw.strip()
        if not api_key:
            raise EmptyCredentialError("API key cannot be empty")
        return api_key
