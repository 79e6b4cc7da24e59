"""
FILE: taskpad/core/views.py
PURPOSE: Pure read-only derivations of the task collection
EXPORTS:
  - project_tasks(tasks, status_filter, sort_field, direction) -> List[Task]
  - project_query(tasks, query) -> List[Task]
  - aggregate_metrics(tasks) -> Metrics
DEPENDENCIES:
  - taskpad.core.models (Task, TaskQuery, Metrics)
  - taskpad.core.constants (enums, PRIORITY_RANK)
NOTES:
  - Never mutates inputs; always recomputes from scratch
  - Sorting relies on sorted() being stable, including with reverse=True,
    so equal keys keep collection order in both directions
"""

from datetime import date
from typing import Iterable, List

from .constants import (
    Status,
    StatusFilter,
    SortField,
    SortDirection,
    PRIORITY_RANK,
    DEFAULT_FILTER,
    DEFAULT_SORT_FIELD,
    DEFAULT_SORT_DIRECTION,
)
from .models import Task, TaskQuery, Metrics


def _priority_key(task: Task):
    return PRIORITY_RANK[task.priority]


def _due_date_key(task: Task):
    # Missing due date compares larger than any date
    return (task.due_date is None, task.due_date or date.min)


def _created_at_key(task: Task):
    return task.created_at


_SORT_KEYS = {
    SortField.PRIORITY: _priority_key,
    SortField.DUE_DATE: _due_date_key,
    SortField.CREATED_AT: _created_at_key,
}


def project_tasks(
    tasks: Iterable[Task],
    status_filter: StatusFilter = DEFAULT_FILTER,
    sort_field: SortField = DEFAULT_SORT_FIELD,
    direction: SortDirection = DEFAULT_SORT_DIRECTION,
) -> List[Task]:
    """
    Filter and sort tasks for display.

    Args:
        tasks: Task collection in its underlying order
        status_filter: 'all' or a single status to keep
        sort_field: createdAt, priority or dueDate
        direction: asc or desc

    Returns:
        New list; the input collection is left untouched

    Notes:
        - priority ranks high(0) < medium(1) < low(2)
        - dueDate puts missing dates last (asc) / first (desc)
    """
    status_filter = StatusFilter.parse(status_filter)
    sort_field = SortField.parse(sort_field)
    direction = SortDirection.parse(direction)

    if status_filter == StatusFilter.ALL:
        kept = list(tasks)
    else:
        wanted = Status.parse(status_filter.value)
        kept = [t for t in tasks if t.status == wanted]

    return sorted(
        kept,
        key=_SORT_KEYS[sort_field],
        reverse=direction == SortDirection.DESC,
    )


def project_query(tasks: Iterable[Task], query: TaskQuery) -> List[Task]:
    """Apply a TaskQuery via project_tasks()."""
    return project_tasks(tasks, query.status_filter, query.sort_field, query.direction)


def aggregate_metrics(tasks: Iterable[Task]) -> Metrics:
    """
    Count total/completed/pending tasks.

    In-progress tasks count as pending, so total == completed + pending.
    """
    tasks = list(tasks)
    completed = sum(1 for t in tasks if t.status == Status.COMPLETED)
    return Metrics(
        total=len(tasks),
        completed=completed,
        pending=len(tasks) - completed,
    )
