"""
FILE: taskpad/core/models.py
PURPOSE: Domain models for tasks, drafts, view settings and metrics
EXPORTS:
  - Task (dataclass)
  - TaskDraft (dataclass)
  - TaskQuery (dataclass)
  - Metrics (dataclass)
  - parse_timestamp(value) -> datetime
  - parse_due_date(value) -> date | None
DEPENDENCIES:
  - dataclasses (stdlib)
  - datetime (stdlib)
  - json (stdlib)
  - taskpad.core.constants (enums)
NOTES:
  - Task.from_record()/to_record() define the local storage format
  - Timestamps are timezone-aware (UTC when the source has no offset)
  - Absent due dates are None in memory and "" in storage
"""

from dataclasses import dataclass, asdict
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional
import json

from .constants import (
    Priority,
    Status,
    StatusFilter,
    SortField,
    SortDirection,
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    DEFAULT_FILTER,
    DEFAULT_SORT_FIELD,
    DEFAULT_SORT_DIRECTION,
)
from .exceptions import ValidationError


def parse_timestamp(value: Any) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware datetime.

    Raises:
        ValidationError: If value is empty or not ISO-8601
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        raw = str(value or "").strip()
        if not raw:
            raise ValidationError("Timestamp cannot be empty")
        # fromisoformat() only accepts a trailing 'Z' from 3.11 on
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            raise ValidationError(f"Invalid timestamp '{value}'")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_due_date(value: Any) -> Optional[date]:
    """
    Parse a due date. Empty/None means "no due date".

    Accepts plain dates ("2025-03-01") and full timestamps; the time part
    of a timestamp is dropped.

    Raises:
        ValidationError: If value is not a recognizable date
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    raw = str(value).strip()
    if not raw:
        return None
    # Only a "T" or space separator may follow the date part
    if len(raw) > 10 and raw[10] in "T ":
        raw = raw[:10]
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"Invalid due date '{value}'. Use YYYY-MM-DD")


@dataclass
class Task:
    """A tracked unit of work."""

    id: str
    title: str
    created_at: datetime
    description: str = ""
    priority: Priority = DEFAULT_PRIORITY
    status: Status = DEFAULT_STATUS
    due_date: Optional[date] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Task":
        """
        Convert a stored record (camelCase keys) to a Task.

        Raises:
            ValidationError: If required keys are missing or values invalid
        """
        if not isinstance(record, dict):
            raise ValidationError(f"Task record must be an object, got {type(record).__name__}")
        if record.get("id") in (None, ""):
            raise ValidationError("Task record is missing 'id'")

        return cls(
            id=str(record["id"]),
            title=record.get("title") or "",
            description=record.get("description") or "",
            priority=Priority.parse(record.get("priority") or DEFAULT_PRIORITY),
            status=Status.parse(record.get("status") or DEFAULT_STATUS),
            created_at=parse_timestamp(record.get("createdAt")),
            due_date=parse_due_date(record.get("dueDate")),
        )

    def to_record(self) -> Dict[str, Any]:
        """Convert to the stored record layout."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
            "dueDate": self.due_date.isoformat() if self.due_date else "",
        }

    def to_json(self) -> str:
        """Serialize task to JSON string."""
        return json.dumps(self.to_record(), indent=2)


@dataclass
class TaskDraft:
    """User-entered fields for a task that doesn't exist yet."""

    title: str
    description: str = ""
    priority: Priority = DEFAULT_PRIORITY
    status: Status = DEFAULT_STATUS
    due_date: Optional[date] = None

    @classmethod
    def from_input(
        cls,
        title: str,
        description: Optional[str] = None,
        priority: Optional[str] = None,
        status: Optional[str] = None,
        due_date: Optional[str] = None,
    ) -> "TaskDraft":
        """
        Build a draft from raw CLI/REPL strings.

        Raises:
            ValidationError: If priority, status or due date is not recognized
        """
        return cls(
            title=title,
            description=description or "",
            priority=Priority.parse(priority) if priority else DEFAULT_PRIORITY,
            status=Status.parse(status) if status else DEFAULT_STATUS,
            due_date=parse_due_date(due_date),
        )


@dataclass(frozen=True)
class TaskQuery:
    """Filter and sort settings for a view of the task collection."""

    status_filter: StatusFilter = DEFAULT_FILTER
    sort_field: SortField = DEFAULT_SORT_FIELD
    direction: SortDirection = DEFAULT_SORT_DIRECTION

    @classmethod
    def from_input(
        cls,
        status_filter: Optional[str] = None,
        sort_field: Optional[str] = None,
        direction: Optional[str] = None,
    ) -> "TaskQuery":
        """Build a query from raw strings, falling back to defaults."""
        return cls(
            status_filter=StatusFilter.parse(status_filter) if status_filter else DEFAULT_FILTER,
            sort_field=SortField.parse(sort_field) if sort_field else DEFAULT_SORT_FIELD,
            direction=SortDirection.parse(direction) if direction else DEFAULT_SORT_DIRECTION,
        )

    def describe(self) -> str:
        """Short label like 'pending, priority asc'."""
        return f"{self.status_filter.value}, {self.sort_field.value} {self.direction.value}"


@dataclass(frozen=True)
class Metrics:
    """Dashboard counts for a task collection."""

    total: int = 0
    completed: int = 0
    pending: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)
