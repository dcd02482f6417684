"""User rendering."""

from collections.abc import Sequence

from linear_cli.api.models import User
from linear_cli.formatting.color import BOLD, GREEN, RED, Style, colorize, pad_color

GAP = "  "


def role_label(admin: bool) -> str:
    return "Admin" if admin else "Member"


def status_label(active: bool) -> str:
    return "Active" if active else "Disabled"


def status_color(active: bool) -> Style:
    return GREEN if active else RED


def format_user_list(users: Sequence[User], color: bool = False) -> str:
    """Render users as a NAME / DISPLAY NAME / EMAIL / ROLE / STATUS table."""
    headers = ["NAME", "DISPLAY NAME", "EMAIL", "ROLE"]
    rows = [[u.name, u.display_name, u.email, role_label(u.admin)] for u in users]
    widths = [max([len(h)] + [len(r[i]) for r in rows]) for i, h in enumerate(headers)]

    header = GAP.join(pad_color(color, BOLD, h, widths[i]) for i, h in enumerate(headers))
    lines = [header + GAP + colorize(color, BOLD, "STATUS")]

    for user, row in zip(users, rows, strict=True):
        cells = GAP.join(value.ljust(widths[i]) for i, value in enumerate(row))
        lines.append(cells + GAP + colorize(color, status_color(user.active), status_label(user.active)))

    return "\n".join(lines) + "\n"


def format_user_detail(user: User, color: bool = False) -> str:
    """Render one user as ``Label: value`` lines."""

    def field(label: str, value: str) -> str:
        return f"{colorize(color, BOLD, label + ':')} {value}"

    lines = [
        field("Name", user.name),
        field("Display Name", user.display_name),
        field("Email", user.email),
        field("Role", role_label(user.admin)),
        field("Status", colorize(color, status_color(user.active), status_label(user.active))),
    ]
    if user.is_me:
        lines.append(field("Is Me", "Yes"))

    return "\n".join(lines) + "\n"
