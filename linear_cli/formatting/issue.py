"""Issue rendering: list table, detail views, and the cycle header."""

import json
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import yaml

from linear_cli.api.models import Cycle, Issue, IssueDetail
from linear_cli.formatting.color import BOLD, CYAN, GRAY, PLAIN, Style, colorize, pad_color, priority_color, state_color
from linear_cli.formatting.columns import COLUMNS, default_columns, priority_label

GAP = "  "


def short_date(value: datetime | None) -> str:
    """Format as ``Jan  5`` (day space-padded for alignment)."""
    if value is None:
        return ""
    return f"{value:%b} {value.day:>2}"


def cycle_title(cycle: Cycle) -> str:
    """``11 - Sprint 11`` style label without dates."""
    label = str(cycle.number)
    if cycle.name:
        label += f" - {cycle.name}"
    return label


def format_cycle_header(cycle: Cycle, color: bool) -> str:
    """Header shown above an issue list, e.g. ``Cycle 11 - Sprint 11 (Jan 14 – Jan 28)``."""
    header = colorize(color, BOLD + CYAN, f"Cycle {cycle.number}")
    if cycle.name:
        header += f" - {cycle.name}"
    start, end = short_date(cycle.starts_at), short_date(cycle.ends_at)
    if start and end:
        header += " " + colorize(color, GRAY, f"({start} – {end})")
    return header


def format_issue_list(issues: Sequence[Issue], columns: Sequence[str] | None = None, color: bool = False) -> str:
    """Render issues as an aligned table.

    Args:
        issues: Issues to show, already sorted
        columns: Column names from the registry (defaults depend on labels)
        color: Emit ANSI styles

    Returns:
        Table text ending in a newline
    """
    names = list(columns) if columns else default_columns(issues)
    defs = [COLUMNS[name] for name in names]

    cells = [[d.value(issue) for d in defs] for issue in issues]
    widths = [max([len(d.header)] + [len(row[i]) for row in cells]) for i, d in enumerate(defs)]

    last = len(defs) - 1
    lines = []

    header = []
    for i, d in enumerate(defs):
        header.append(colorize(color, BOLD, d.header) if i == last else pad_color(color, BOLD, d.header, widths[i]))
    lines.append(GAP.join(header))

    for issue, row in zip(issues, cells, strict=True):
        out = []
        for i, d in enumerate(defs):
            style = d.style(issue)
            if i == last:
                out.append(colorize(color, style, row[i]))
            else:
                out.append(pad_color(color, style, row[i], widths[i]))
        lines.append(GAP.join(out))

    return "\n".join(lines) + "\n"


@dataclass(frozen=True)
class IssueField:
    label: str
    value: str
    style: Style = PLAIN


def issue_fields(issue: IssueDetail) -> list[IssueField]:
    """Metadata rows shared by the plain and markdown views.

    Parent is only included when set; the description is rendered separately.
    """
    cycle = ""
    if issue.cycle is not None:
        cycle = cycle_title(issue.cycle)
        start, end = short_date(issue.cycle.starts_at), short_date(issue.cycle.ends_at)
        if start and end:
            cycle += f" ({start} – {end})"

    fields = [
        IssueField("Identifier", issue.identifier),
        IssueField("Title", issue.title),
        IssueField(
            "State",
            issue.state.name if issue.state else "",
            state_color(issue.state.type) if issue.state else PLAIN,
        ),
        IssueField("Priority", priority_label(issue.priority), priority_color(issue.priority)),
        IssueField("Assignee", issue.assignee.name if issue.assignee else "Unassigned"),
        IssueField("Team", issue.team.name if issue.team else ""),
        IssueField("Cycle", cycle, CYAN),
        IssueField("Project", issue.project.name if issue.project else ""),
        IssueField("Labels", ", ".join(issue.label_names)),
        IssueField("Due Date", issue.due_date or ""),
        IssueField("Estimate", "" if issue.estimate is None else f"{issue.estimate:.0f}"),
        IssueField("Branch Name", issue.branch_name),
        IssueField("URL", issue.url),
    ]
    if issue.parent is not None:
        fields.append(IssueField("Parent", f"{issue.parent.identifier} {issue.parent.title}"))
    return fields


def format_issue_detail(issue: IssueDetail, color: bool = False) -> str:
    """Aligned ``Label  value`` lines followed by the description."""
    fields = issue_fields(issue)
    width = max(len(f.label) for f in fields)

    lines = [f"{colorize(color, BOLD, f.label.ljust(width))}  {colorize(color, f.style, f.value)}" for f in fields]
    out = "\n".join(lines) + "\n"

    if issue.description:
        out += f"\n{issue.description}\n"
    return out


def format_issue_detail_markdown(issue: IssueDetail) -> str:
    """Markdown heading plus a Field/Value table, then the description."""
    rows = [(f.label, f.value.replace("|", "\\|")) for f in issue_fields(issue)]
    label_w = max([len("Field")] + [len(label) for label, _ in rows])
    value_w = max([len("Value")] + [len(value) for _, value in rows])

    lines = [
        f"# {issue.identifier}",
        "",
        f"| {'Field'.ljust(label_w)} | {'Value'.ljust(value_w)} |",
        f"|-{'-' * label_w}-|-{'-' * value_w}-|",
    ]
    lines += [f"| {label.ljust(label_w)} | {value.ljust(value_w)} |" for label, value in rows]
    out = "\n".join(lines) + "\n"

    if issue.description:
        out += f"\n{issue.description}\n"
    return out


def issue_detail_dict(issue: IssueDetail) -> dict[str, Any]:
    """Serializable view used by the JSON and YAML outputs.

    Optional keys (cycle, due_date, estimate, parent, description) are
    omitted when empty.
    """
    data: dict[str, Any] = {
        "identifier": issue.identifier,
        "title": issue.title,
        "state": issue.state.name if issue.state else "",
        "priority": priority_label(issue.priority),
        "assignee": issue.assignee.name if issue.assignee else "Unassigned",
        "team": issue.team.name if issue.team else "",
    }
    if issue.cycle is not None:
        data["cycle"] = cycle_title(issue.cycle)
    data["project"] = issue.project.name if issue.project else ""
    data["labels"] = issue.label_names
    if issue.due_date:
        data["due_date"] = issue.due_date
    if issue.estimate is not None:
        data["estimate"] = int(issue.estimate) if issue.estimate.is_integer() else issue.estimate
    data["branch_name"] = issue.branch_name
    data["url"] = issue.url
    if issue.parent is not None:
        data["parent"] = f"{issue.parent.identifier} {issue.parent.title}"
    if issue.description:
        data["description"] = issue.description
    return data


def format_issue_detail_json(issue: IssueDetail) -> str:
    return json.dumps(issue_detail_dict(issue), indent=2, ensure_ascii=False) + "\n"


def format_issue_detail_yaml(issue: IssueDetail) -> str:
    return yaml.safe_dump(issue_detail_dict(issue), sort_keys=False, allow_unicode=True)
