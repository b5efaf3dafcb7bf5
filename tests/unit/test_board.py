"""Unit tests for the status board projection."""

from __future__ import annotations

import pytest
from rich.console import Console

from taskflow.board import build_board, render_board
from taskflow.models import STATUS_ORDER, Status, Task


def _tasks(statuses: list[Status]) -> list[Task]:
    return [
        Task(id=idx, title=f"task{idx}", status=status, created_at="October 19, 2026")
        for idx, status in enumerate(statuses)
    ]


def test_board_groups_by_status() -> None:
    tasks = _tasks([Status.TODO, Status.DONE, Status.IN_PROGRESS])

    board = build_board(tasks)

    assert list(board) == list(STATUS_ORDER)
    assert board[Status.TODO] == [tasks[0]]
    assert board[Status.IN_PROGRESS] == [tasks[2]]
    assert board[Status.NEEDS_HELP] == []
    assert board[Status.DONE] == [tasks[1]]


@pytest.mark.parametrize(
    "statuses",
    [
        [],
        [Status.DONE],
        [Status.TODO, Status.TODO, Status.DONE, Status.TODO],
        [Status.NEEDS_HELP, Status.IN_PROGRESS, Status.NEEDS_HELP, Status.DONE, Status.TODO],
        list(STATUS_ORDER) * 3,
    ],
)
def test_board_is_an_order_preserving_partition(statuses: list[Status]) -> None:
    tasks = _tasks(statuses)
    before = [t.model_copy() for t in tasks]

    board = build_board(tasks)

    flattened = [t for status in STATUS_ORDER for t in board[status]]
    assert sorted(t.id for t in flattened) == [t.id for t in tasks]
    for status, column in board.items():
        assert all(t.status == status for t in column)
        ids = [t.id for t in column]
        assert ids == sorted(ids)
    assert tasks == before


def test_render_board_shows_columns_and_cards() -> None:
    console = Console(record=True, width=120)
    tasks = _tasks([Status.TODO, Status.DONE])
    tasks[1].github_issue_number = 7

    render_board(build_board(tasks), console, title="Octo")

    text = console.export_text()
    assert "Todo (1)" in text
    assert "Needs Help (0)" in text
    assert "task0" in text
    assert "#7" in text


def test_render_empty_board() -> None:
    console = Console(record=True, width=120)

    render_board(build_board([]), console)

    assert "(empty)" in console.export_text()
