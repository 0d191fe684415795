from textual.widgets import Static
from rich.text import Text
from commandy.models import MenuItem
from commandy.navigation import column_layout

COLUMN_WIDTH = 28
LIVE_MARKER = " ●"


class MenuList(Static):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.entries: list[MenuItem] = []
        self.cursor = 0
        self.two_column = False

    def show(self, entries: list[MenuItem], cursor: int, two_column: bool) -> None:
        self.entries = list(entries)
        self.cursor = cursor
        self.two_column = two_column
        self.refresh()

    def render(self):
        if self.two_column:
            return render_two_columns(self.entries, self.cursor)
        return render_flat(self.entries, self.cursor)


def _entry(index: int, item: MenuItem, selected: bool, number_width: int) -> Text:
    text = Text()
    text.append("> " if selected else "  ", style="bold yellow")
    text.append(f"{index + 1:>{number_width}}) ", style="bright_black")
    text.append(item.label, style="bold green" if selected else "white")
    if item.live:
        text.append(LIVE_MARKER, style="green")
    return text


def render_flat(entries: list[MenuItem], cursor: int) -> Text:
    lines = [_entry(index, item, index == cursor, 1) for index, item in enumerate(entries)]
    return Text("\n").join(lines)


def render_two_columns(entries: list[MenuItem], cursor: int) -> Text:
    lines = []
    for left, right in column_layout(len(entries)):
        line = _entry(left, _truncated(entries[left]), left == cursor, 2)
        if right is not None:
            line.pad_right(max(0, COLUMN_WIDTH - line.cell_len))
            line.append_text(_entry(right, _truncated(entries[right]), right == cursor, 2))
        lines.append(line)
    return Text("\n").join(lines)


def _truncated(item: MenuItem) -> MenuItem:
    limit = COLUMN_WIDTH - 6 - (len(LIVE_MARKER) if item.live else 0)
    if len(item.label) <= limit:
        return item
    return MenuItem(item.label[: limit - 3] + "...", item.action, item.project, item.session, item.live)
