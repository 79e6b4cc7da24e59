"""
FILE: taskpad/core/constants.py
PURPOSE: Closed value sets and defaults used throughout the application
EXPORTS:
  - Priority, Status: Task field enums
  - StatusFilter, SortField, SortDirection: View setting enums
  - PRIORITY_RANK: Sort rank per priority (high first)
  - STORAGE_KEY: Key the local task document is stored under
  - REMOTE_TABLE: Table name on the remote record service
DEPENDENCIES:
  - enum (stdlib)
NOTES:
  - Enum values are the exact strings used in persisted data and on the wire
  - parse() converts user/storage input and rejects unknown values
"""

from enum import Enum

from .exceptions import ValidationError


class _Choice(str, Enum):
    """String enum with a forgiving, validating parse()."""

    @classmethod
    def parse(cls, value):
        """
        Convert a raw string (or an existing member) into a member.

        Raises:
            ValidationError: If the value is not one of the allowed choices
        """
        if isinstance(value, cls):
            return value
        raw = str(value).strip()
        for member in cls:
            if member.value.lower() == raw.lower():
                return member
        raise ValidationError(
            f"Invalid {cls.label()} '{value}'. Must be one of: {', '.join(cls.values())}"
        )

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]

    @classmethod
    def label(cls) -> str:
        return cls.__name__.lower()


class Priority(_Choice):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Status(_Choice):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class StatusFilter(_Choice):
    ALL = "all"
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def label(cls) -> str:
        return "filter"


class SortField(_Choice):
    CREATED_AT = "createdAt"
    PRIORITY = "priority"
    DUE_DATE = "dueDate"

    @classmethod
    def label(cls) -> str:
        return "sort field"


class SortDirection(_Choice):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def label(cls) -> str:
        return "sort direction"


# Lower rank sorts first in ascending order
PRIORITY_RANK = {
    Priority.HIGH: 0,
    Priority.MEDIUM: 1,
    Priority.LOW: 2,
}

DEFAULT_PRIORITY = Priority.MEDIUM
DEFAULT_STATUS = Status.PENDING
DEFAULT_FILTER = StatusFilter.ALL
DEFAULT_SORT_FIELD = SortField.CREATED_AT
DEFAULT_SORT_DIRECTION = SortDirection.DESC

# Local storage
STORAGE_KEY = "tasks"
STORAGE_FILENAME = "storage.json"

# Remote record service
REMOTE_TABLE = "task"

# Backends
BACKEND_LOCAL = "local"
BACKEND_REMOTE = "remote"
VALID_BACKENDS = (BACKEND_LOCAL, BACKEND_REMOTE)
