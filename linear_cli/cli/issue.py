"""``linear issue`` commands.

Commands:
    - list (ls): issues assigned to you or another user, filtered by status,
      label and cycle
    - get (show, view): details for one issue, or pick one interactively
    - edit (e): move an issue to another cycle
    - worktree (wt): create a git worktree on the issue's branch
"""

from collections.abc import Sequence

import click
import structlog

from linear_cli.api.client import LinearClient
from linear_cli.api.cycles import resolve_cycle
from linear_cli.api.filters import build_issue_filter
from linear_cli.api.models import Cycle, Issue, IssueDetail
from linear_cli.cli.context import AliasedGroup, CliContext, handle_errors, validate_limit
from linear_cli.exceptions import LinearCliError
from linear_cli.formatting.color import BOLD, CYAN, colorize
from linear_cli.formatting.columns import parse_columns
from linear_cli.formatting.issue import (
    format_cycle_header,
    format_issue_detail,
    format_issue_detail_json,
    format_issue_detail_markdown,
    format_issue_detail_yaml,
    format_issue_list,
)
from linear_cli.utils.git import create_issue_worktree

log = structlog.get_logger(__name__)

# Lower rank is shown first
STATE_TYPE_ORDER = {
    "started": 1,
    "unstarted": 2,
    "triage": 3,
    "backlog": 4,
    "completed": 5,
    "canceled": 6,
}

SORT_KEYS = ("status", "priority", "identifier", "title")

OUTPUT_FORMATS = ("plain", "markdown", "json", "yaml")

PICKER_LIMIT = 50


def issue_state_rank(issue: Issue) -> int:
    if issue.state is None:
        return 99
    return STATE_TYPE_ORDER.get(issue.state.type, 99)


def issue_priority_rank(priority: float) -> float:
    """No priority (0) sorts after Low."""
    return 99 if priority == 0 else priority


def sort_issues(issues: Sequence[Issue], sort_by: str) -> list[Issue]:
    """Return issues ordered by one of :data:`SORT_KEYS`."""
    key = sort_by.lower()
    if key == "priority":
        return sorted(issues, key=lambda i: (issue_priority_rank(i.priority), issue_state_rank(i)))
    if key == "identifier":
        return sorted(issues, key=lambda i: i.identifier)
    if key == "title":
        return sorted(issues, key=lambda i: i.title.lower())
    return sorted(issues, key=lambda i: (issue_state_rank(i), issue_priority_rank(i.priority)))


def build_filter_for_flags(
    obj: CliContext,
    client: LinearClient,
    status: str | None,
    label: str | None,
    user: str | None,
    cycle: str | None,
) -> tuple[dict | None, Cycle | None]:
    """Build the issue filter, resolving the cycle through the API.

    Without ``--cycle`` the current cycle is used; if it cannot be resolved
    the filter falls back to ``isActive`` and no header is shown.
    """
    cycle_value = (cycle or "").strip().lower()
    resolved: Cycle | None = None
    active_cycle = False

    if cycle_value == "all":
        pass
    elif cycle_value:
        resolved = resolve_cycle(client, obj.cache, obj.now(), cycle_value)
    else:
        try:
            resolved = resolve_cycle(client, obj.cache, obj.now(), "current")
        except LinearCliError as e:
            log.debug("current_cycle_unresolved", error=e.message)
            active_cycle = True

    issue_filter = build_issue_filter(
        status=status,
        label=label,
        user=user,
        cycle_number=resolved.number if resolved else None,
        active_cycle=active_cycle,
    )
    return issue_filter, resolved


def fetch_issues(client: LinearClient, user: str | None, limit: int, issue_filter: dict | None) -> list[Issue]:
    """Use the workspace query for ``--user``, the viewer query otherwise."""
    if user:
        return client.list_issues(limit, issue_filter)
    return client.list_my_issues(limit, issue_filter)


def refresh_issue_cache(obj: CliContext, client: LinearClient, identifier: str) -> None:
    """Re-fetch an issue and store its rendered preview in the cache."""
    if obj.cache is None:
        return
    try:
        issue = client.get_issue(identifier)
        obj.cache.set(f"issues/{identifier}", format_issue_detail(issue, color=True))
    except (LinearCliError, OSError) as e:
        log.debug("issue_cache_refresh_failed", identifier=identifier, error=str(e))


def pick_issue(obj: CliContext, client: LinearClient, user: str | None = None) -> str | None:
    """Show the picker over open issues; None when cancelled."""
    issue_filter = build_issue_filter(user=user)
    issues = sort_issues(fetch_issues(client, user, PICKER_LIMIT, issue_filter), "status")
    return obj.selector(issues)


@click.group(
    name="issue",
    cls=AliasedGroup,
    aliases={"ls": "list", "show": "get", "view": "get", "e": "edit", "wt": "worktree"},
)
def issue_group() -> None:
    """Work with Linear issues."""


@issue_group.command(name="list")
@click.option("--status", "-S", help="Filter by status type: all, or a comma list (prefix ! to exclude)")
@click.option("--label", "-l", help="Filter by label (comma=OR, plus=AND, e.g. bug,devex or bug+frontend)")
@click.option("--cycle", "-c", help="all, current, next, previous, or a cycle number (default: current)")
@click.option("--user", "-u", help="User whose issues to list (all for everyone)")
@click.option("--limit", "-n", type=int, default=50, show_default=True, help="Maximum number of issues")
@click.option("--sort", "-s", "sort_by", type=click.Choice(SORT_KEYS, case_sensitive=False), default="status")
@click.option("--column", "-C", help="Columns to show (id,status,title) or add (+updated, +cycle:2)")
@click.option("--interactive", "-i", is_flag=True, help="Pick an issue interactively and print its identifier")
@click.pass_obj
@handle_errors
def list_issues(
    obj: CliContext,
    status: str | None,
    label: str | None,
    cycle: str | None,
    user: str | None,
    limit: int,
    sort_by: str,
    column: str | None,
    interactive: bool,
) -> None:
    """List issues assigned to you."""
    validate_limit(limit)
    columns = parse_columns(column) if column else None

    with obj.resolve_client() as client:
        issue_filter, cycle_info = build_filter_for_flags(obj, client, status, label, user, cycle)
        issues = sort_issues(fetch_issues(client, user, limit, issue_filter), sort_by)

    if interactive:
        selected = obj.selector(issues)
        if selected:
            click.echo(selected)
        return

    color = obj.color
    if cycle_info is not None:
        click.echo(format_cycle_header(cycle_info, color))
    click.echo(format_issue_list(issues, columns, color), nl=False)


def render_issue(issue: IssueDetail, output: str, color: bool) -> str:
    output = output.lower()
    if output == "markdown":
        return format_issue_detail_markdown(issue)
    if output == "json":
        return format_issue_detail_json(issue)
    if output == "yaml":
        return format_issue_detail_yaml(issue)
    return format_issue_detail(issue, color)


@issue_group.command(name="get")
@click.argument("identifier", required=False)
@click.option(
    "--output",
    "-o",
    type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    default="plain",
    show_default=True,
    help="Output format",
)
@click.pass_obj
@handle_errors
def get_issue(obj: CliContext, identifier: str | None, output: str) -> None:
    """Show details for an issue.

    Without IDENTIFIER, pick one of your active issues interactively.
    """
    if identifier is None and not obj.stdin_is_tty():
        raise LinearCliError("no issue identifier provided; run interactively or pass an identifier")

    with obj.resolve_client() as client:
        if identifier is None:
            identifier = pick_issue(obj, client)
            if not identifier:
                return

        issue = client.get_issue(identifier)

    click.echo(render_issue(issue, output, obj.color), nl=False)


@issue_group.command(name="edit")
@click.argument("identifier")
@click.option("--cycle", "-c", help="Set cycle: current, next, previous, or a cycle number")
@click.pass_obj
@handle_errors
def edit_issue(obj: CliContext, identifier: str, cycle: str | None) -> None:
    """Edit an issue."""
    if not cycle:
        raise LinearCliError("at least one edit flag is required (e.g. --cycle)")

    with obj.resolve_client() as client:
        issue = client.get_issue(identifier)
        target = resolve_cycle(client, obj.cache, obj.now(), cycle)
        if target.id is None:
            raise LinearCliError(f"cycle {target.number} has no id")

        client.update_issue_cycle(issue.id, target.id)
        refresh_issue_cache(obj, client, identifier)

    color = obj.color
    cycle_label = colorize(color, BOLD + CYAN, f"Cycle {target.number}")
    if target.name:
        cycle_label += f" - {target.name}"
    click.echo(f"Updated {colorize(color, BOLD, identifier)} cycle to {cycle_label}")


@issue_group.command(name="worktree")
@click.argument("identifier", required=False)
@click.option("--user", "-u", help="User whose issues to pick from")
@click.pass_obj
@handle_errors
def worktree_issue(obj: CliContext, identifier: str | None, user: str | None) -> None:
    """Create a git worktree for an issue.

    The worktree is placed next to the repository in a directory named
    after the issue and checks out the issue's branch, creating it from
    origin/main when it does not exist yet. Without IDENTIFIER, pick an
    issue interactively.
    """
    if identifier is None and not obj.stdin_is_tty():
        raise LinearCliError("no issue identifier provided; run interactively or pass an identifier")

    with obj.resolve_client() as client:
        if identifier is None:
            identifier = pick_issue(obj, client, user)
            if not identifier:
                return

        issue = client.get_issue(identifier)

    if not issue.branch_name:
        raise LinearCliError(f"issue {identifier} has no branch name")

    path, reused = create_issue_worktree(obj.git, identifier, issue.branch_name)

    if reused:
        click.echo(f'Reusing existing branch "{issue.branch_name}"')
    else:
        click.echo(f'Created new branch "{issue.branch_name}" from origin/main')
    click.echo(str(path))
