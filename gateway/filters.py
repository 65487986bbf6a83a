"""Filter pipeline shared by every task-listing surface."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable


@dataclass(frozen=True)
class TaskFilters:
    status: str | None = None
    priority: str | None = None
    context: str | None = None
    scheduled: str | None = None
    overdue: bool = False
    include_archived: bool = False


def today_iso() -> str:
    """Current local calendar date as YYYY-MM-DD."""
    return date.today().isoformat()


def apply_filters(
    tasks: Iterable[dict[str, Any]], filters: TaskFilters, today: str
) -> list[dict[str, Any]]:
    """Return the tasks that pass every requested predicate, input order kept.

    Predicates run in a fixed order: archival, status, priority, context,
    overdue, scheduled. Dates are compared as YYYY-MM-DD strings, so
    ``today`` must use the same format.
    """
    result = list(tasks)

    if not filters.include_archived:
        result = [task for task in result if not task.get("archived")]

    if filters.status:
        result = [task for task in result if task.get("status") == filters.status]

    if filters.priority:
        result = [
            task for task in result if task.get("priority") == filters.priority
        ]

    if filters.context:
        result = [
            task
            for task in result
            if filters.context in (task.get("contexts") or [])
        ]

    if filters.overdue:
        result = [task for task in result if _is_overdue(task, today)]

    if filters.scheduled:
        result = [
            task for task in result if task.get("scheduled") == filters.scheduled
        ]

    return result


def _is_overdue(task: dict[str, Any], today: str) -> bool:
    due = task.get("due")
    return isinstance(due, str) and bool(due) and due < today
