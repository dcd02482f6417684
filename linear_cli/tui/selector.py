"""Interactive issue picker built on prompt_toolkit.

Type to filter by identifier or title, move with the arrow keys (or j/k and
Ctrl-J/Ctrl-K while the filter is empty), Enter selects, Esc or Ctrl-C
cancels.
"""

from collections.abc import Sequence

from prompt_toolkit import Application
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from prompt_toolkit.layout import HSplit, Layout, VSplit, Window
from prompt_toolkit.layout.controls import BufferControl, FormattedTextControl
from prompt_toolkit.styles import Style

from linear_cli.api.models import Issue
from linear_cli.formatting.columns import priority_label

COL_IDENTIFIER = 12
COL_STATE = 14
COL_PRIORITY = 10

STYLE = Style.from_dict(
    {
        "prompt": "bold",
        "header": "bold",
        "selected": "reverse",
        "state.started": "ansiyellow",
        "state.completed": "ansigreen",
        "state.canceled": "ansired",
        "state.backlog": "ansibrightblack",
        "empty": "ansibrightblack italic",
    }
)


def filter_items(items: Sequence[Issue], query: str) -> list[Issue]:
    """Case-insensitive substring match on identifier or title."""
    needle = query.lower()
    if not needle:
        return list(items)
    return [i for i in items if needle in i.identifier.lower() or needle in i.title.lower()]


class SelectorState:
    """Filter text, matching items and cursor position."""

    def __init__(self, items: Sequence[Issue]) -> None:
        self.items = list(items)
        self.query = ""
        self.filtered = list(self.items)
        self.cursor = 0
        self.selected: str | None = None

    def set_query(self, query: str) -> None:
        self.query = query
        self.filtered = filter_items(self.items, query)
        self.cursor = 0

    def move(self, delta: int) -> None:
        if not self.filtered:
            self.cursor = 0
            return
        self.cursor = min(max(self.cursor + delta, 0), len(self.filtered) - 1)

    def choose(self) -> str | None:
        if self.filtered and self.cursor < len(self.filtered):
            self.selected = self.filtered[self.cursor].identifier
        return self.selected


def _row(issue: Issue) -> str:
    state = issue.state.name if issue.state else ""
    return (
        f"{issue.identifier[:COL_IDENTIFIER]:<{COL_IDENTIFIER}}  "
        f"{state[:COL_STATE]:<{COL_STATE}}  "
        f"{priority_label(issue.priority):<{COL_PRIORITY}}  "
        f"{issue.title}"
    )


def _list_fragments(state: SelectorState) -> StyleAndTextTuples:
    header = f"   {'IDENTIFIER':<{COL_IDENTIFIER}}  {'STATUS':<{COL_STATE}}  {'PRIORITY':<{COL_PRIORITY}}  TITLE\n"
    fragments: StyleAndTextTuples = [("class:header", header)]

    if not state.filtered:
        fragments.append(("class:empty", "   No matching issues\n"))
        return fragments

    for index, issue in enumerate(state.filtered):
        if index == state.cursor:
            fragments.append(("class:selected", f" > {_row(issue)}\n"))
        else:
            state_style = f"class:state.{issue.state.type}" if issue.state else ""
            fragments.append((state_style, f"   {_row(issue)}\n"))
    return fragments


def build_application(state: SelectorState) -> Application[str | None]:
    """Assemble the picker application around ``state``."""
    query_buffer = Buffer(multiline=False)
    query_buffer.on_text_changed += lambda buf: state.set_query(buf.text)

    filter_is_empty = Condition(lambda: not query_buffer.text)

    kb = KeyBindings()

    @kb.add("c-c")
    @kb.add("escape", eager=True)
    def _cancel(event: KeyPressEvent) -> None:
        event.app.exit(result=None)

    @kb.add("enter")
    def _select(event: KeyPressEvent) -> None:
        event.app.exit(result=state.choose())

    @kb.add("up")
    @kb.add("c-k")
    def _up(event: KeyPressEvent) -> None:
        state.move(-1)

    @kb.add("down")
    @kb.add("c-j")
    def _down(event: KeyPressEvent) -> None:
        state.move(1)

    @kb.add("k", filter=filter_is_empty)
    def _vi_up(event: KeyPressEvent) -> None:
        state.move(-1)

    @kb.add("j", filter=filter_is_empty)
    def _vi_down(event: KeyPressEvent) -> None:
        state.move(1)

    layout = Layout(
        HSplit(
            [
                VSplit(
                    [
                        Window(FormattedTextControl([("class:prompt", " Filter: ")]), width=9, height=1),
                        Window(BufferControl(buffer=query_buffer), height=1),
                    ]
                ),
                Window(height=1, char=" "),
                Window(FormattedTextControl(lambda: _list_fragments(state))),
            ]
        )
    )

    return Application(layout=layout, key_bindings=kb, style=STYLE, full_screen=False, erase_when_done=True)


def run_selector(items: Sequence[Issue]) -> str | None:
    """Show the picker and return the chosen identifier, or None if cancelled."""
    state = SelectorState(items)
    return build_application(state).run()
