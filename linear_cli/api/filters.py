"""Build Linear ``IssueFilter`` input objects from command-line values.

Filters are plain dicts ready for JSON encoding. Comparator objects only carry
the keys that are set: the Linear API reads an explicit ``null`` as a
constraint, so unset keys must be omitted entirely.
"""

from typing import Any

# Excluded unless --status is given
EXCLUDED_STATE_TYPES = ("completed", "canceled")

STATUS_ALIASES = {"todo": "unstarted"}

STATE_TYPES = ("started", "unstarted", "triage", "backlog", "completed", "canceled")


def cut_negation_prefix(value: str) -> tuple[str, bool]:
    """Strip a leading ``!`` or ``\\!``.

    zsh with BANG_HIST escapes ``!`` even inside single quotes, hence the
    backslash form.
    """
    if value.startswith("\\!"):
        return value[2:], True
    if value.startswith("!"):
        return value[1:], True
    return value, False


def resolve_status_alias(value: str) -> str:
    return STATUS_ALIASES.get(value, value)


def comparator(**values: Any) -> dict[str, Any]:
    """Build a comparator dict, dropping unset (None or empty) values."""
    return {k: v for k, v in values.items() if v is not None and v != []}


def build_state_filter(status: str | None) -> dict[str, Any] | None:
    """Translate ``--status`` into a workflow state filter.

    ``all`` disables filtering, a comma list selects state types (``!x``
    excludes one), and no value hides completed and canceled issues.
    """
    value = (status or "").strip().lower()
    if value == "all":
        return None
    if not value:
        return {"type": comparator(nin=list(EXCLUDED_STATE_TYPES))}

    included: list[str] = []
    excluded: list[str] = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        bare, negated = cut_negation_prefix(part)
        if negated:
            excluded.append(resolve_status_alias(bare))
        else:
            included.append(resolve_status_alias(part))

    return {"type": comparator(**{"in": included, "nin": excluded})}


def build_label_filter(value: str) -> dict[str, Any] | None:
    """Parse ``--label``: comma separates OR groups, plus joins AND terms.

    Examples:
        ``bug,devex`` is bug OR devex; ``bug+frontend`` is bug AND frontend;
        ``bug+frontend,devex`` is (bug AND frontend) OR devex.
    """
    or_groups: list[dict[str, Any]] = []
    for group in value.strip().lower().split(","):
        terms = [t.strip() for t in group.split("+") if t.strip()]
        and_terms = [{"some": {"name": comparator(eqIgnoreCase=t)}} for t in terms]
        if len(and_terms) == 1:
            or_groups.append(and_terms[0])
        elif and_terms:
            or_groups.append({"and": and_terms})

    if not or_groups:
        return None
    if len(or_groups) == 1:
        return or_groups[0]
    return {"or": or_groups}


def build_issue_filter(
    status: str | None = None,
    label: str | None = None,
    user: str | None = None,
    cycle_number: int | None = None,
    active_cycle: bool = False,
) -> dict[str, Any] | None:
    """Combine flag values into one ``IssueFilter``.

    Args:
        status: ``--status`` value
        label: ``--label`` value
        user: Assignee display name; ``all`` means any assignee
        cycle_number: Restrict to this cycle number
        active_cycle: Restrict to the active cycle (used when the current
            cycle number could not be resolved)

    Returns:
        Filter dict, or None when nothing restricts the query
    """
    issue_filter: dict[str, Any] = {}

    state = build_state_filter(status)
    if state is not None:
        issue_filter["state"] = state

    if user and user.lower() != "all":
        issue_filter["assignee"] = {"displayName": comparator(eqIgnoreCase=user)}

    if label and label.strip():
        labels = build_label_filter(label)
        if labels is not None:
            issue_filter["labels"] = labels

    if cycle_number is not None:
        issue_filter["cycle"] = {"number": comparator(eq=cycle_number)}
    elif active_cycle:
        issue_filter["cycle"] = {"isActive": comparator(eq=True)}

    return issue_filter or None
