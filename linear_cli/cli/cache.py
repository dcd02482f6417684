"""``linear cache`` commands."""

import click

from linear_cli.cli.context import CliContext, handle_errors
from linear_cli.exceptions import LinearCliError


@click.group(name="cache")
def cache_group() -> None:
    """Manage the local cache."""


@cache_group.command(name="clear")
@click.pass_obj
@handle_errors
def clear_cache(obj: CliContext) -> None:
    """Remove all cached data."""
    if obj.cache is None:
        click.echo("Cache is already empty.")
        return

    try:
        removed = obj.cache.clear()
    except OSError as e:
        raise LinearCliError(f"clearing cache: {e}") from e

    if removed == 0:
        click.echo("Cache is already empty.")
    else:
        click.echo(f"Cleared {removed} cached file(s).")
