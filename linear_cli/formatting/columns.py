"""Column registry for the issue list table and ``--column`` parsing."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime

from linear_cli.api.models import Issue
from linear_cli.exceptions import LinearCliError
from linear_cli.formatting.color import CYAN, GRAY, PLAIN, Style, priority_color, state_color

PRIORITY_LABELS = {0: "None", 1: "Urgent", 2: "High", 3: "Normal", 4: "Low"}


def priority_label(priority: float) -> str:
    label = PRIORITY_LABELS.get(priority)
    return label or f"Unknown({priority:.0f})"


def issue_labels(issue: Issue) -> str:
    return ", ".join(issue.label_names)


def _date(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d") if value is not None else ""


def _whole(value: float | None) -> str:
    return "" if value is None else f"{value:.0f}"


@dataclass(frozen=True)
class ColumnDef:
    """How one column is rendered.

    Attributes:
        header: Column heading
        value: Extracts the cell text
        style: Chooses the cell style
    """

    header: str
    value: Callable[[Issue], str]
    style: Callable[[Issue], Style] = lambda _issue: PLAIN


COLUMNS: dict[str, ColumnDef] = {
    "id": ColumnDef("IDENTIFIER", lambda i: i.identifier),
    "status": ColumnDef(
        "STATUS",
        lambda i: i.state.name if i.state else "",
        lambda i: state_color(i.state.type) if i.state else PLAIN,
    ),
    "priority": ColumnDef(
        "PRIORITY",
        lambda i: priority_label(i.priority),
        lambda i: priority_color(i.priority),
    ),
    "labels": ColumnDef("LABELS", issue_labels, lambda _i: CYAN),
    "title": ColumnDef("TITLE", lambda i: i.title),
    "updated": ColumnDef("UPDATED", lambda i: _date(i.updated_at), lambda _i: GRAY),
    "created": ColumnDef("CREATED", lambda i: _date(i.created_at), lambda _i: GRAY),
    "cycle": ColumnDef("CYCLE", lambda i: str(i.cycle.number) if i.cycle else ""),
    "assignee": ColumnDef("ASSIGNEE", lambda i: i.assignee.name if i.assignee else ""),
    "project": ColumnDef("PROJECT", lambda i: i.project.name if i.project else ""),
    "estimate": ColumnDef("ESTIMATE", lambda i: _whole(i.estimate)),
    "duedate": ColumnDef("DUE DATE", lambda i: i.due_date or "", lambda _i: GRAY),
}

COLUMN_NAMES = list(COLUMNS)

# Base for additive (+col) mode
DEFAULT_COLUMN_NAMES = ["id", "status", "priority", "labels", "title"]


def default_columns(issues: Sequence[Issue]) -> list[str]:
    """Default columns; LABELS only appears when some issue has labels."""
    if any(issue.labels for issue in issues):
        return list(DEFAULT_COLUMN_NAMES)
    return ["id", "status", "priority", "title"]


def _check_known(name: str) -> None:
    if name not in COLUMNS:
        raise LinearCliError(f'unknown column "{name}" (available: {", ".join(COLUMN_NAMES)})')


def parse_columns(value: str) -> list[str]:
    """Parse a ``--column`` value.

    Syntax:
        ``id,status,title`` shows exactly these columns.
        ``+updated`` appends to the defaults.
        ``+updated:2`` inserts at position 2 (1-based).

    Additive and replacement entries cannot be mixed.

    Raises:
        LinearCliError: On mixed syntax, unknown or duplicate columns, or a
            bad position
    """
    parts = [p.strip() for p in value.split(",") if p.strip()]
    additive = [p for p in parts if p.startswith("+")]

    if not parts:
        raise LinearCliError("--column requires at least one column name")
    if additive and len(additive) != len(parts):
        raise LinearCliError("cannot mix additive (+col) and replacement (col) syntax in --column")

    if not additive:
        columns: list[str] = []
        for part in parts:
            name = part.lower()
            _check_known(name)
            if name in columns:
                raise LinearCliError(f'duplicate column "{name}"')
            columns.append(name)
        return columns

    columns = list(DEFAULT_COLUMN_NAMES)
    for part in additive:
        entry = part[1:]
        name, sep, pos_text = entry.partition(":")
        position = 0
        if sep:
            try:
                position = int(pos_text)
            except ValueError:
                raise LinearCliError(f"invalid position in +{entry}") from None
            if position < 1:
                raise LinearCliError(f"position must be >= 1, got {position}")

        name = name.lower()
        _check_known(name)
        if name in columns:
            continue

        if position == 0:
            columns.append(name)
        else:
            columns.insert(min(position - 1, len(columns)), name)

    return columns
