"""
FILE: taskpad/core/repository.py
PURPOSE: Persistence strategies for the task collection
EXPORTS:
  - TaskRepository (abstract contract)
  - LocalTaskRepository(storage, key) - whole collection as one JSON document
  - RemoteTaskRepository(client, table) - per-record CRUD on a remote service
  - create_repository(settings) -> TaskRepository
DEPENDENCIES:
  - json (stdlib)
  - abc (stdlib)
  - taskpad.core.models (Task, TaskQuery)
  - taskpad.core.storage (KeyValueStore, FileKeyValueStore)
  - taskpad.core.remote (AuthSession, RecordClient)
  - taskpad.core.views (project_query)
  - taskpad.core.exceptions (StorageError, RemoteError, RecordError, ...)
NOTES:
  - Exactly one strategy is active; create_repository() picks it once
  - Returns domain objects (Task), never raw dicts
  - Local deletes are physical; remote deletes set IsDeleted (soft delete)
  - Remote reads always exclude soft-deleted records
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from .constants import (
    Priority,
    Status,
    StatusFilter,
    SortField,
    SortDirection,
    STORAGE_KEY,
    STORAGE_FILENAME,
    REMOTE_TABLE,
    BACKEND_LOCAL,
    VALID_BACKENDS,
)
from .exceptions import (
    ConfigurationError,
    NoSavedTasksError,
    RecordError,
    StorageError,
    ValidationError,
)
from .models import Task, TaskQuery, parse_due_date, parse_timestamp
from .remote import AuthSession, RecordClient
from .storage import FileKeyValueStore, KeyValueStore
from .views import project_query


logger = logging.getLogger(__name__)


class TaskRepository(ABC):
    """
    Contract shared by every persistence strategy.

    The store calls on_add/on_update/on_remove after computing the new
    collection but before adopting it, so a raised error leaves the
    in-memory state untouched.
    """

    @abstractmethod
    def load_all(self, query: Optional[TaskQuery] = None) -> List[Task]:
        """Load tasks; with no query, in natural (creation/insertion) order."""

    @abstractmethod
    def on_add(self, task: Task, tasks: Sequence[Task]) -> Task:
        """Persist a new task. Returns the stored form of the task."""

    @abstractmethod
    def on_update(self, task: Task, tasks: Sequence[Task]) -> Task:
        """Persist an edited task. Returns the stored form of the task."""

    @abstractmethod
    def on_remove(self, task_id: str, tasks: Sequence[Task]) -> None:
        """Persist a deletion."""

    def close(self) -> None:
        """Release connections or handles. No-op by default."""


# --- Local Strategy ---


class LocalTaskRepository(TaskRepository):
    """Stores the whole collection as one JSON array under a fixed key."""

    def __init__(self, storage: KeyValueStore, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key

    def load_all(self, query: Optional[TaskQuery] = None) -> List[Task]:
        """
        Load the stored collection.

        Raises:
            StorageError: If nothing is stored yet or the document is malformed
        """
        raw = self.storage.get(self.key)
        if raw is None:
            raise NoSavedTasksError(f"No saved tasks under '{self.key}'")

        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Saved tasks are not valid JSON: {e}")

        if not isinstance(records, list):
            raise StorageError("Saved tasks must be a JSON array")

        try:
            tasks = [Task.from_record(record) for record in records]
        except ValidationError as e:
            raise StorageError(f"Saved tasks are malformed: {e}")

        if query is not None:
            tasks = project_query(tasks, query)
        return tasks

    def save_all(self, tasks: Sequence[Task]) -> None:
        """Serialize the entire collection in a single write."""
        document = json.dumps([task.to_record() for task in tasks])
        self.storage.set(self.key, document)
        logger.debug("Saved %d task(s) to local storage", len(tasks))

    def on_add(self, task: Task, tasks: Sequence[Task]) -> Task:
        self.save_all(tasks)
        return task

    def on_update(self, task: Task, tasks: Sequence[Task]) -> Task:
        self.save_all(tasks)
        return task

    def on_remove(self, task_id: str, tasks: Sequence[Task]) -> None:
        self.save_all(tasks)


# --- Remote Strategy ---


# Fields requested on every fetch
REMOTE_FIELDS = [
    "Id", "title", "description", "priority", "status", "dueDate",
    "CreatedOn", "CreatedBy", "ModifiedOn",
]

# View sort field -> remote column
REMOTE_SORT_COLUMNS = {
    SortField.CREATED_AT: "CreatedOn",
    SortField.PRIORITY: "priority",
    SortField.DUE_DATE: "dueDate",
}


def task_from_remote(record: Dict[str, Any]) -> Task:
    """
    Map a remote record onto a Task.

    Missing fields fall back to defaults; a missing CreatedOn becomes now.

    Raises:
        RecordError: If the record has no Id or carries unknown enum values
    """
    if record.get("Id") is None:
        raise RecordError("Task service returned a record without an Id", record)

    try:
        created_on = record.get("CreatedOn")
        return Task(
            id=str(record["Id"]),
            title=record.get("title") or "",
            description=record.get("description") or "",
            priority=Priority.parse(record.get("priority") or Priority.MEDIUM),
            status=Status.parse(record.get("status") or Status.PENDING),
            due_date=parse_due_date(record.get("dueDate")),
            created_at=parse_timestamp(created_on) if created_on else datetime.now(timezone.utc),
        )
    except ValidationError as e:
        raise RecordError(f"Task service returned an invalid record: {e}", record)


def _record_id(task_id: str):
    # The service keys records by integer Id
    return int(task_id) if str(task_id).isdigit() else task_id


def _updateable_fields(task: Task) -> Dict[str, Any]:
    return {
        "title": task.title,
        "description": task.description,
        "priority": task.priority.value,
        "status": task.status.value,
        "dueDate": task.due_date.isoformat() if task.due_date else "",
    }


class RemoteTaskRepository(TaskRepository):
    """
    Per-record persistence on the remote record service.

    Filtering and sorting are pushed down to the service query. Every call
    goes through the client's AuthSession, so nothing is sent before the
    user is authenticated.
    """

    def __init__(self, client: RecordClient, table: str = REMOTE_TABLE):
        self.client = client
        self.table = table

    def load_all(self, query: Optional[TaskQuery] = None) -> List[Task]:
        where = []
        if query is not None and query.status_filter != StatusFilter.ALL:
            where.append({
                "fieldName": "status",
                "operator": "ExactMatch",
                "values": [query.status_filter.value],
            })
        where.append({
            "fieldName": "IsDeleted",
            "operator": "ExactMatch",
            "values": [False],
        })

        if query is None:
            order_by = [{"field": "CreatedOn", "direction": SortDirection.ASC.value}]
        else:
            order_by = [{
                "field": REMOTE_SORT_COLUMNS[query.sort_field],
                "direction": query.direction.value,
            }]

        response = self.client.fetch_records(
            self.table, fields=REMOTE_FIELDS, where=where, order_by=order_by
        )
        records = response.get("data") or []
        logger.debug("Fetched %d task record(s) from remote service", len(records))
        return [task_from_remote(record) for record in records]

    def create(self, task: Task) -> Task:
        response = self.client.create_records(self.table, [_updateable_fields(task)])
        return task_from_remote(self._first_result(response, "Failed to create task"))

    def update(self, task: Task) -> Task:
        record = {"Id": _record_id(task.id), **_updateable_fields(task)}
        response = self.client.update_records(self.table, [record])
        return task_from_remote(self._first_result(response, "Failed to update task"))

    def delete(self, task_id: str) -> None:
        """Soft delete: the record stays on the service with IsDeleted set."""
        record = {"Id": _record_id(task_id), "IsDeleted": True}
        response = self.client.update_records(self.table, [record])
        self._first_result(response, "Failed to delete task")

    def on_add(self, task: Task, tasks: Sequence[Task]) -> Task:
        return self.create(task)

    def on_update(self, task: Task, tasks: Sequence[Task]) -> Task:
        return self.update(task)

    def on_remove(self, task_id: str, tasks: Sequence[Task]) -> None:
        self.delete(task_id)

    def close(self) -> None:
        self.client.close()

    @staticmethod
    def _first_result(response: Dict[str, Any], fallback: str) -> Dict[str, Any]:
        """
        Unwrap results[0] of a write envelope.

        Raises:
            RecordError: If the service reports the record failed
        """
        results = response.get("results") or []
        if not results:
            raise RecordError(fallback)

        result = results[0]
        if not result.get("success"):
            message = result.get("message") or fallback
            logger.error("Remote record rejected: %s", message)
            raise RecordError(message, result)

        return result.get("data") or {}


# --- Strategy Selection ---


def create_repository(settings, storage: Optional[KeyValueStore] = None) -> TaskRepository:
    """
    Build the repository selected by configuration.

    Args:
        settings: taskpad.core.config.Settings
        storage: Override the local key/value medium (tests)

    Raises:
        ConfigurationError: Unknown backend or incomplete remote settings
    """
    backend = settings.backend
    if backend not in VALID_BACKENDS:
        raise ConfigurationError(
            f"Invalid backend '{backend}'. Must be one of: {', '.join(VALID_BACKENDS)}"
        )

    if backend == BACKEND_LOCAL:
        if storage is None:
            storage = FileKeyValueStore(settings.data_dir / STORAGE_FILENAME)
        logger.debug("Using local task repository")
        return LocalTaskRepository(storage)

    if not settings.remote_url:
        raise ConfigurationError("TASKPAD_REMOTE_URL must be set for the remote backend")

    auth = AuthSession(settings.project_id, settings.public_key)
    client = RecordClient(settings.remote_url, auth, timeout=settings.remote_timeout)
    logger.debug("Using remote task repository at %s", settings.remote_url)
    return RemoteTaskRepository(client)
