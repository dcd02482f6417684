"""``linear user`` commands."""

import click

from linear_cli.api.models import User
from linear_cli.cli.context import AliasedGroup, CliContext, handle_errors, validate_limit
from linear_cli.formatting.user import format_user_detail, format_user_list

# Integration and bot accounts use linear.app addresses
BOT_EMAIL_SUFFIX = "linear.app"


def is_integration_user(user: User) -> bool:
    return user.email.endswith(BOT_EMAIL_SUFFIX)


@click.group(name="user", cls=AliasedGroup, aliases={"ls": "list", "show": "get", "view": "get"})
def user_group() -> None:
    """Look up users in your Linear organization."""


@user_group.command(name="list")
@click.option("--limit", "-n", type=int, default=50, show_default=True, help="Maximum number of users")
@click.option("--include-bots", is_flag=True, help="Include integration/bot users")
@click.pass_obj
@handle_errors
def list_users(obj: CliContext, limit: int, include_bots: bool) -> None:
    """List users in the organization."""
    validate_limit(limit)

    with obj.resolve_client() as client:
        users = client.list_users(limit)

    if not include_bots:
        users = [u for u in users if not is_integration_user(u)]
    users.sort(key=lambda u: u.display_name.lower())

    click.echo(format_user_list(users, obj.color), nl=False)


@user_group.command(name="get")
@click.argument("username")
@click.pass_obj
@handle_errors
def get_user(obj: CliContext, username: str) -> None:
    """Show details for a user, looked up by display name."""
    with obj.resolve_client() as client:
        user = client.get_user_by_display_name(username)

    click.echo(format_user_detail(user, obj.color), nl=False)
