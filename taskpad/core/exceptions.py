"""
FILE: taskpad/core/exceptions.py
PURPOSE: Custom exception classes for error handling
EXPORTS:
  - TaskpadError (base exception)
  - ValidationError
  - TaskNotFoundError
  - StorageError
  - NoSavedTasksError
  - RemoteError
  - RecordError
  - ConfigurationError
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - All exceptions inherit from TaskpadError for easy catching
  - Store and repositories raise these, UI layers catch and display
  - RecordError subclasses RemoteError so UIs can treat both alike
"""


class TaskpadError(Exception):
    """Base exception for all Taskpad errors."""
    pass


class ValidationError(TaskpadError):
    """User input failed a precondition (e.g. empty title)."""

    def __init__(self, message: str):
        super().__init__(message)


class TaskNotFoundError(TaskpadError):
    """Task with given ID doesn't exist."""

    def __init__(self, task_id: str, message: str = ""):
        self.task_id = task_id
        super().__init__(message or f"Task {task_id} not found")


class StorageError(TaskpadError):
    """Local storage is missing, unreadable or corrupt."""
    pass


class RemoteError(TaskpadError):
    """Network, auth or transport failure talking to the remote service."""
    pass


class RecordError(RemoteError):
    """The remote service rejected a specific record."""

    def __init__(self, message: str, record: dict | None = None):
        self.record = record
        super().__init__(message)


class ConfigurationError(TaskpadError):
    """Settings are invalid for the requested backend."""
    pass


class NoSavedTasksError(StorageError):
    """Local storage holds no task document yet (first run)."""
    pass
