"""Board view: tasks grouped into fixed status columns.

The projection is recomputed on every request and never mutates the task list.
"""

from __future__ import annotations

from collections.abc import Iterable

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from taskflow.models import STATUS_ORDER, Priority, Status, Task

Board = dict[Status, list[Task]]

STATUS_STYLES: dict[Status, str] = {
    Status.TODO: "cyan",
    Status.IN_PROGRESS: "yellow",
    Status.NEEDS_HELP: "red",
    Status.DONE: "green",
}

PRIORITY_MARKS: dict[Priority, str] = {
    Priority.LOW: "*",
    Priority.MEDIUM: "**",
    Priority.HIGH: "***",
}


def build_board(tasks: Iterable[Task]) -> Board:
    """Group tasks by status, keeping their relative order within each column."""

    board: Board = {status: [] for status in STATUS_ORDER}
    for task in tasks:
        board[task.status].append(task)
    return board


def _card(task: Task) -> str:
    line = f"[bold]{task.id}.[/bold] {escape(task.title)} {PRIORITY_MARKS[task.priority]}"
    if task.due_date:
        line += f"\n[dim]due {escape(task.due_date)}[/dim]"
    if task.github_issue_number is not None:
        line += f"\n[dim]#{task.github_issue_number}[/dim]"
    return line


def render_board(board: Board, console: Console, *, title: str | None = None) -> None:
    table = Table(title=title, expand=True, show_lines=False)
    for status in STATUS_ORDER:
        count = len(board[status])
        table.add_column(
            f"{status.label} ({count})",
            header_style=f"bold {STATUS_STYLES[status]}",
            ratio=1,
        )

    rows = max((len(column) for column in board.values()), default=0)
    if rows == 0:
        table.add_row(*["[dim](empty)[/dim]"] * len(STATUS_ORDER))
    for idx in range(rows):
        table.add_row(
            *(
                _card(board[status][idx]) if idx < len(board[status]) else ""
                for status in STATUS_ORDER
            )
        )

    console.print(table)
