"""
Tests for view projection (filter + sort) and metrics aggregation.
"""

from datetime import date, datetime, timedelta, timezone

from taskpad.core.constants import Priority, Status
from taskpad.core.models import Task, TaskQuery
from taskpad.core.views import aggregate_metrics, project_query, project_tasks


BASE = datetime(2025, 1, 1, tzinfo=timezone.utc)


def make_task(n, **kwargs):
    return Task(
        id=f"t{n}",
        title=kwargs.pop("title", f"Task {n}"),
        created_at=BASE + timedelta(minutes=n),
        **kwargs,
    )


def ids(tasks):
    return [t.id for t in tasks]


def test_default_projection_is_newest_first():
    """createdAt desc is the default view."""
    tasks = [make_task(1), make_task(2), make_task(3)]

    assert ids(project_tasks(tasks)) == ["t3", "t2", "t1"]
    assert ids(project_query(tasks, TaskQuery())) == ["t3", "t2", "t1"]


def test_projection_does_not_mutate_input():
    tasks = [make_task(1), make_task(2)]
    before = list(tasks)

    project_tasks(tasks, "all", "createdAt", "desc")

    assert tasks == before


def test_status_filter():
    """Filtering keeps only the requested status; 'all' keeps everything."""
    tasks = [
        make_task(1, status=Status.PENDING),
        make_task(2, status=Status.IN_PROGRESS),
        make_task(3, status=Status.COMPLETED),
    ]

    assert ids(project_tasks(tasks, "pending", "createdAt", "asc")) == ["t1"]
    assert ids(project_tasks(tasks, "in-progress", "createdAt", "asc")) == ["t2"]
    assert ids(project_tasks(tasks, "completed", "createdAt", "asc")) == ["t3"]
    assert len(project_tasks(tasks, "all", "createdAt", "asc")) == 3


def test_priority_sort_ranks_high_first():
    """Ascending priority puts high before medium before low."""
    tasks = [
        make_task(1, priority=Priority.LOW),
        make_task(2, priority=Priority.HIGH),
        make_task(3, priority=Priority.MEDIUM),
    ]

    assert ids(project_tasks(tasks, "all", "priority", "asc")) == ["t2", "t3", "t1"]
    assert ids(project_tasks(tasks, "all", "priority", "desc")) == ["t1", "t3", "t2"]


def test_priority_ties_keep_collection_order():
    """Equal priorities keep their relative order in both directions."""
    tasks = [
        make_task(1, priority=Priority.HIGH),
        make_task(2, priority=Priority.HIGH),
        make_task(3, priority=Priority.LOW),
        make_task(4, priority=Priority.HIGH),
    ]

    assert ids(project_tasks(tasks, "all", "priority", "asc")) == ["t1", "t2", "t4", "t3"]
    assert ids(project_tasks(tasks, "all", "priority", "desc")) == ["t3", "t1", "t2", "t4"]


def test_due_date_sort_puts_missing_dates_last_ascending():
    """A dated task sorts before an undated one in ascending order."""
    undated = make_task(1)
    dated = make_task(2, due_date=date(2025, 6, 1))

    assert ids(project_tasks([undated, dated], "all", "dueDate", "asc")) == ["t2", "t1"]
    assert ids(project_tasks([undated, dated], "all", "dueDate", "desc")) == ["t1", "t2"]


def test_due_date_sort_orders_dates():
    tasks = [
        make_task(1, due_date=date(2025, 6, 1)),
        make_task(2),
        make_task(3, due_date=date(2025, 2, 1)),
        make_task(4, due_date=date(2025, 4, 1)),
    ]

    assert ids(project_tasks(tasks, "all", "dueDate", "asc")) == ["t3", "t4", "t1", "t2"]
    assert ids(project_tasks(tasks, "all", "dueDate", "desc")) == ["t2", "t1", "t4", "t3"]


def test_filter_and_sort_combined():
    tasks = [
        make_task(1, priority=Priority.LOW, status=Status.PENDING),
        make_task(2, priority=Priority.HIGH, status=Status.COMPLETED),
        make_task(3, priority=Priority.HIGH, status=Status.PENDING),
    ]

    result = project_tasks(tasks, "pending", "priority", "asc")
    assert ids(result) == ["t3", "t1"]


def test_metrics_counts_in_progress_as_pending():
    """total == completed + pending, in-progress counts as pending."""
    tasks = [
        make_task(1, status=Status.PENDING),
        make_task(2, status=Status.IN_PROGRESS),
        make_task(3, status=Status.COMPLETED),
    ]

    metrics = aggregate_metrics(tasks)

    assert metrics.total == 3
    assert metrics.completed == 1
    assert metrics.pending == 2
    assert metrics.total == metrics.completed + metrics.pending


def test_metrics_empty():
    metrics = aggregate_metrics([])
    assert (metrics.total, metrics.completed, metrics.pending) == (0, 0, 0)
