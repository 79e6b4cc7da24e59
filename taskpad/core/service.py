"""
FILE: taskpad/core/service.py
PURPOSE: Task store - the in-memory task collection and its business rules
EXPORTS:
  - TaskStore(repository, clock, id_factory)
      .load() -> List[Task]
      .add(draft) -> Task
      .update(task) -> Task
      .toggle_status(task_id) -> Task
      .remove(task_id) -> None
      .get(task_id) -> Task
      .resolve_id(prefix) -> str
      .subscribe(listener) -> unsubscribe callable
      .tasks -> Tuple[Task, ...]
  - open_store(settings) -> TaskStore
DEPENDENCIES:
  - taskpad.core.models (Task, TaskDraft)
  - taskpad.core.repository (TaskRepository, create_repository)
  - taskpad.core.exceptions (TaskNotFoundError, ValidationError, ...)
  - uuid, datetime, dataclasses (stdlib)
NOTES:
  - Every mutation writes through to the repository BEFORE the in-memory
    collection changes; on error nothing is applied
  - Listeners get the full updated collection after each mutation
  - remove() of an unknown id is a no-op, not an error
  - toggle_status() is binary: completed -> pending, anything else -> completed
"""

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, Tuple

from .constants import Priority, Status
from .exceptions import (
    NoSavedTasksError,
    RemoteError,
    StorageError,
    TaskNotFoundError,
    ValidationError,
)
from .models import Task, TaskDraft, parse_due_date
from .repository import TaskRepository, create_repository


logger = logging.getLogger(__name__)

Listener = Callable[[Tuple[Task, ...]], None]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _short_id() -> str:
    return uuid.uuid4().hex[:8]


def _clean_title(title: str) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationError("Task title cannot be empty")
    return title


class TaskStore:
    """
    Ordered in-memory task collection backed by a repository.

    Args:
        repository: Persistence strategy (local or remote)
        clock: Returns the current aware datetime (injectable for tests)
        id_factory: Returns a candidate id; retried until unique
    """

    def __init__(
        self,
        repository: TaskRepository,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _short_id,
    ):
        self.repository = repository
        self._clock = clock
        self._id_factory = id_factory
        self._tasks: List[Task] = []
        self._listeners: List[Listener] = []
        self.load_warning: Optional[str] = None

    @property
    def tasks(self) -> Tuple[Task, ...]:
        return tuple(self._tasks)

    def close(self) -> None:
        """Release the repository (closes the remote HTTP client)."""
        self.repository.close()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Loading ---

    def load(self) -> List[Task]:
        """
        Populate the store from the repository.

        Notes:
            - Storage/remote failures leave the store empty and set
              load_warning instead of raising
            - "Nothing saved yet" is the normal first-run case
        """
        self.load_warning = None
        try:
            tasks = self.repository.load_all()
        except NoSavedTasksError:
            logger.info("No saved tasks yet, starting empty")
            tasks = []
        except (StorageError, RemoteError) as e:
            logger.warning("Could not load tasks, starting empty: %s", e)
            self.load_warning = str(e)
            tasks = []

        self._commit(tasks)
        return list(self._tasks)

    # --- Lookups ---

    def _index_of(self, task_id: str) -> int:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        raise TaskNotFoundError(task_id)

    def get(self, task_id: str) -> Task:
        """
        Raises:
            TaskNotFoundError: If no task has this id
        """
        return self._tasks[self._index_of(task_id)]

    def resolve_id(self, prefix: str) -> str:
        """
        Expand a (possibly abbreviated) id to the full task id.

        Raises:
            TaskNotFoundError: If no task, or more than one task, matches
        """
        prefix = (prefix or "").strip()
        if not prefix:
            raise TaskNotFoundError(prefix, "Task ID cannot be empty")

        for task in self._tasks:
            if task.id == prefix:
                return task.id

        matches = [t.id for t in self._tasks if t.id.startswith(prefix)]
        if len(matches) == 1:
            return matches[0]
        if len(matches) > 1:
            raise TaskNotFoundError(
                prefix, f"Task ID '{prefix}' is ambiguous ({len(matches)} matches)"
            )
        raise TaskNotFoundError(prefix)

    # --- Mutations ---

    def add(self, draft: TaskDraft) -> Task:
        """
        Create a task from a draft.

        Raises:
            ValidationError: If the title is empty or whitespace-only, or
                priority/status/due date is not a recognized value
        """
        title = _clean_title(draft.title)

        task = Task(
            id=self._new_id(),
            title=title,
            description=(draft.description or "").strip(),
            priority=Priority.parse(draft.priority),
            status=Status.parse(draft.status),
            due_date=parse_due_date(draft.due_date),
            created_at=self._next_created_at(),
        )

        tasks = self._tasks + [task]
        stored = self.repository.on_add(task, tasks)
        tasks[-1] = stored

        self._commit(tasks)
        logger.debug("Added task %s", stored.id)
        return stored

    def update(self, task: Task) -> Task:
        """
        Replace an existing task in place.

        Notes:
            - id and created_at always keep their stored values

        Raises:
            TaskNotFoundError: If the id doesn't exist
            ValidationError: If the title is empty or a field value is unrecognized
        """
        index = self._index_of(task.id)
        existing = self._tasks[index]

        edited = replace(
            task,
            id=existing.id,
            created_at=existing.created_at,
            title=_clean_title(task.title),
            description=(task.description or "").strip(),
            priority=Priority.parse(task.priority),
            status=Status.parse(task.status),
            due_date=parse_due_date(task.due_date),
        )
        return self._replace_at(index, edited)

    def toggle_status(self, task_id: str) -> Task:
        """
        Flip completion: completed -> pending, pending/in-progress -> completed.

        An in-progress task toggled twice ends up pending, not in-progress.

        Raises:
            TaskNotFoundError: If the id doesn't exist
        """
        index = self._index_of(task_id)
        existing = self._tasks[index]

        if existing.status == Status.COMPLETED:
            new_status = Status.PENDING
        else:
            new_status = Status.COMPLETED

        return self._replace_at(index, replace(existing, status=new_status))

    def remove(self, task_id: str) -> None:
        """Delete a task. Unknown ids are ignored."""
        tasks = [t for t in self._tasks if t.id != task_id]
        if len(tasks) == len(self._tasks):
            logger.debug("Remove of unknown task %s ignored", task_id)
            return

        self.repository.on_remove(task_id, tasks)
        self._commit(tasks)
        logger.debug("Removed task %s", task_id)

    # --- Internals ---

    def _replace_at(self, index: int, task: Task) -> Task:
        tasks = list(self._tasks)
        tasks[index] = task
        stored = self.repository.on_update(task, tasks)
        tasks[index] = stored

        self._commit(tasks)
        logger.debug("Updated task %s", stored.id)
        return stored

    def _commit(self, tasks: Sequence[Task]) -> None:
        self._tasks = list(tasks)
        snapshot = self.tasks
        for listener in list(self._listeners):
            listener(snapshot)

    def _new_id(self) -> str:
        existing = {t.id for t in self._tasks}
        while True:
            candidate = self._id_factory()
            if candidate not in existing:
                return candidate

    def _next_created_at(self) -> datetime:
        now = self._clock()
        if self._tasks:
            latest = max(t.created_at for t in self._tasks)
            if now < latest:
                return latest
        return now


def open_store(settings) -> TaskStore:
    """
    Build the configured repository and a loaded TaskStore on top of it.

    Raises:
        ConfigurationError: If settings select an unusable backend
    """
    store = TaskStore(create_repository(settings))
    store.load()
    return store
