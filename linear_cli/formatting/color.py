"""Terminal color helpers built on ``click.style``."""

import os
from dataclasses import dataclass
from typing import TextIO

import click


@dataclass(frozen=True)
class Style:
    """A click text style; the empty style leaves text untouched."""

    fg: str | None = None
    bold: bool = False

    def __bool__(self) -> bool:
        return self.fg is not None or self.bold

    def __add__(self, other: "Style") -> "Style":
        return Style(fg=other.fg or self.fg, bold=self.bold or other.bold)


PLAIN = Style()
BOLD = Style(bold=True)
RED = Style(fg="red")
GREEN = Style(fg="green")
YELLOW = Style(fg="yellow")
CYAN = Style(fg="cyan")
GRAY = Style(fg="bright_black")


def color_enabled(stream: TextIO) -> bool:
    """Return True if ANSI colors should be written to ``stream``.

    Honours ``NO_COLOR`` (https://no-color.org); otherwise colors only a
    stream attached to a terminal.
    """
    if "NO_COLOR" in os.environ:
        return False
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        # closed stream
        return False


def colorize(enabled: bool, style: Style, text: str) -> str:
    if not enabled or not style:
        return text
    return click.style(text, fg=style.fg, bold=style.bold or None)


def pad_color(enabled: bool, style: Style, text: str, width: int) -> str:
    """Pad ``text`` to ``width`` visible characters, then colorize.

    Padding goes outside the escape codes so columns stay aligned.
    """
    padding = " " * max(width - len(text), 0)
    return colorize(enabled, style, text) + padding


PRIORITY_STYLES = {1: RED, 2: YELLOW, 3: GREEN, 4: GRAY}

STATE_STYLES = {"started": YELLOW, "completed": GREEN, "canceled": RED, "backlog": GRAY}


def priority_color(priority: float) -> Style:
    return PRIORITY_STYLES.get(int(priority), PLAIN) if float(priority).is_integer() else PLAIN


def state_color(state_type: str) -> Style:
    return STATE_STYLES.get(state_type, PLAIN)
