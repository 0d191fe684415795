from __future__ import annotations

from enum import Enum

from commandy.models import NavigationContext, State

TWO_COLUMN_STATES = frozenset({State.BROWSE_PROJECTS, State.SELECT_PROJECT})


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


KEY_DIRECTIONS = {
    "up": Direction.UP,
    "k": Direction.UP,
    "down": Direction.DOWN,
    "j": Direction.DOWN,
    "left": Direction.LEFT,
    "h": Direction.LEFT,
    "right": Direction.RIGHT,
    "l": Direction.RIGHT,
}


def column_rows(item_count: int) -> int:
    return (item_count + 1) // 2


def column_layout(item_count: int) -> list[tuple[int, int | None]]:
    """Index pairs (left, right) for each rendered row of a two-column list."""
    rows = column_rows(item_count)
    layout: list[tuple[int, int | None]] = []
    for row in range(rows):
        right = row + rows
        layout.append((row, right if right < item_count else None))
    return layout


def move_cursor(item_count: int, cursor: int, direction: Direction, two_column: bool = False) -> int:
    if item_count <= 0:
        return 0
    cursor = max(0, min(cursor, item_count - 1))
    if not two_column:
        if direction is Direction.UP:
            return max(0, cursor - 1)
        if direction is Direction.DOWN:
            return min(item_count - 1, cursor + 1)
        return cursor

    rows = column_rows(item_count)
    in_left = cursor < rows
    if direction is Direction.UP:
        top = 0 if in_left else rows
        return cursor - 1 if cursor > top else cursor
    if direction is Direction.DOWN:
        bottom = rows - 1 if in_left else item_count - 1
        return cursor + 1 if cursor < bottom else cursor
    if direction is Direction.LEFT:
        return cursor - rows if not in_left else cursor
    if in_left and cursor + rows < item_count:
        return cursor + rows
    return cursor


def navigate(context: NavigationContext, direction: Direction, two_column: bool = False) -> NavigationContext:
    return NavigationContext(
        cursor=move_cursor(context.item_count, context.cursor, direction, two_column),
        item_count=context.item_count,
    )


def shortcut_index(key: str, item_count: int) -> int | None:
    """Digits 1-9 pick the Nth item of the current list."""
    if len(key) != 1 or key not in "123456789":
        return None
    index = int(key) - 1
    return index if index < item_count else None
