from datetime import date, datetime, timedelta, timezone

import pytest

from backend.dashboard import completion_rate, summarize
from backend.models import Todo

TODAY = date(2026, 3, 10)


def _todo(id, completed=False, due_date=None, priority="medium", category="General"):
    return Todo(id=id, owner_id=1, text=f"todo {id}", completed=completed, due_date=due_date,
                priority=priority, category=category,
                created_at=datetime(2026, 3, 1, tzinfo=timezone.utc) + timedelta(hours=id))


@pytest.mark.parametrize("completed,total,expected", [
    (0, 0, 0),
    (0, 5, 0),
    (5, 5, 100),
    (1, 3, 33),
    (2, 3, 67),
    (1, 8, 13),  # 12.5 rounds up
    (1, 200, 1),  # 0.5 rounds up
    (3, 7, 43),
])
def test_completion_rate(completed, total, expected):
    assert completion_rate(completed, total) == expected


def test_summarize_empty():
    summary = summarize([], today=TODAY)

    assert summary.total == 0
    assert summary.completion_rate == 0
    assert summary.recent == []


def test_summarize_due_dates():
    todos = [
        _todo(1, due_date=TODAY - timedelta(days=1)),
        _todo(2, due_date=TODAY),
        _todo(3, due_date=TODAY + timedelta(days=1)),
        _todo(4, completed=True, due_date=TODAY - timedelta(days=3)),
        _todo(5, completed=True, due_date=TODAY),
        _todo(6),
    ]

    summary = summarize(todos, today=TODAY)

    assert summary.total == 6
    assert summary.completed == 2
    assert summary.pending == 4
    assert summary.overdue == 1
    assert summary.due_today == 1
    assert summary.completion_rate == 33


def test_summarize_groups_all_todos():
    todos = [
        _todo(1, priority="high", category="Work"),
        _todo(2, completed=True, priority="high", category="Home"),
        _todo(3, priority="low", category="Work"),
    ]

    summary = summarize(todos, today=TODAY)

    assert [(p.priority, p.count) for p in summary.by_priority] == [("high", 2), ("low", 1)]
    assert [(c.category, c.count) for c in summary.by_category] == [("Home", 1), ("Work", 2)]


def test_summarize_recent_is_newest_five():
    todos = [_todo(i, completed=(i % 2 == 0)) for i in range(1, 9)]

    summary = summarize(todos, today=TODAY)

    assert [todo.id for todo in summary.recent] == [8, 7, 6, 5, 4]
    assert all(isinstance(todo.completed, bool) for todo in summary.recent)
