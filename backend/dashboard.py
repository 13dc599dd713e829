"""Read-side rollup of a user's todos for the dashboard.

Nothing here touches the database; the router loads the todos and passes them
in, so the numbers are always derived from current data.
"""
from collections import Counter
from datetime import date
from typing import Optional, Sequence

from .models import Todo, utc_now
from .schemas import CategoryCount, DashboardRead, PriorityCount, TodoRead

RECENT_LIMIT = 5


def completion_rate(completed: int, total: int) -> int:
    """Percentage of completed todos, rounded half up; 0 when there are none."""
    if total == 0:
        return 0
    return (completed * 200 + total) // (2 * total)


def summarize(todos: Sequence[Todo], today: Optional[date] = None) -> DashboardRead:
    if today is None:
        today = utc_now().date()

    total = len(todos)
    completed = sum(1 for todo in todos if todo.completed)
    open_todos = [todo for todo in todos if not todo.completed]
    overdue = sum(1 for todo in open_todos if todo.due_date is not None and todo.due_date < today)
    due_today = sum(1 for todo in open_todos if todo.due_date == today)

    priorities = Counter(todo.priority for todo in todos)
    categories = Counter(todo.category for todo in todos)
    newest = sorted(todos, key=lambda todo: (todo.created_at, todo.id), reverse=True)

    return DashboardRead(
        total=total,
        completed=completed,
        pending=total - completed,
        overdue=overdue,
        due_today=due_today,
        completion_rate=completion_rate(completed, total),
        by_priority=[PriorityCount(priority=key, count=count)
                     for key, count in sorted(priorities.items())],
        by_category=[CategoryCount(category=key, count=count)
                     for key, count in sorted(categories.items())],
        recent=[TodoRead.model_validate(todo) for todo in newest[:RECENT_LIMIT]],
    )
