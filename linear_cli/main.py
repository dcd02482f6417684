"""CLI entry point for linear-cli."""

import sys

import click
import structlog
from click.shell_completion import get_completion_class

from linear_cli import __version__
from linear_cli.cli import cache_group, issue_group, user_group
from linear_cli.cli.context import CliContext
from linear_cli.config.settings import LinearSettings
from linear_cli.exceptions import ConfigurationError
from linear_cli.utils.logging_config import configure_logging

log = structlog.get_logger(__name__)

COMPLETE_VAR = "_LINEAR_COMPLETE"
COMPLETION_SHELLS = ("bash", "zsh")

# Run without loading configuration
NO_CONFIG_COMMANDS = ("version", "completion")


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    envvar="LINEAR_CONFIG",
    help="Path to YAML configuration file",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Logging level (default: WARNING, or log_level from config)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, log_level: str | None) -> None:
    """CLI for the Linear issue tracker."""
    # Tests inject a prepared context
    if isinstance(ctx.obj, CliContext):
        configure_logging(log_level or ctx.obj.settings.log_level)
        return

    configure_logging(log_level or "WARNING")

    if ctx.invoked_subcommand in NO_CONFIG_COMMANDS:
        return

    try:
        settings = LinearSettings.load(config_path)
    except ConfigurationError as e:
        click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
        log.debug("config_error", exc_info=True)
        sys.exit(1)

    configure_logging(log_level or settings.log_level)
    ctx.obj = CliContext.from_settings(settings)


@cli.command()
def version() -> None:
    """Print the version."""
    click.echo(f"linear {__version__}")


@cli.command()
@click.argument("shell", type=click.Choice(COMPLETION_SHELLS))
def completion(shell: str) -> None:
    """Print the shell completion script for bash or zsh.

    Load it in your shell profile, for example::

        eval "$(linear completion bash)"
    """
    complete_class = get_completion_class(shell)
    if complete_class is None:
        raise click.ClickException(f"unsupported shell: {shell}")
    click.echo(complete_class(cli, {}, "linear", COMPLETE_VAR).source())


cli.add_command(issue_group)
cli.add_command(user_group)
cli.add_command(cache_group)


if __name__ == "__main__":
    cli()
