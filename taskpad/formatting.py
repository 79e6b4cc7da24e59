"""
FILE: taskpad/formatting.py
PURPOSE: Shared formatting utilities for CLI and REPL output
EXPORTS:
  - TaskFormatter: Class for formatting tasks
  - format_due_date(due) -> str
  - format_created(created_at) -> str
  - metrics_line(metrics) -> str
DEPENDENCIES:
  - rich (for table and panel formatting)
  - json (for JSON serialization)
  - taskpad.core.models (Task, Metrics)
NOTES:
  - Centralized formatting logic for consistency
  - Used by both CLI and REPL
"""

import json
from datetime import date, datetime
from typing import List, Optional

from rich.panel import Panel
from rich.table import Table

from .core.constants import Priority, Status
from .core.models import Task, Metrics


PRIORITY_STYLES = {
    Priority.HIGH: "red",
    Priority.MEDIUM: "yellow",
    Priority.LOW: "green",
}

STATUS_STYLES = {
    Status.PENDING: "yellow",
    Status.IN_PROGRESS: "blue",
    Status.COMPLETED: "green",
}

STATUS_MARKERS = {
    Status.PENDING: "○",
    Status.IN_PROGRESS: "◐",
    Status.COMPLETED: "✓",
}


def format_due_date(due: Optional[date]) -> str:
    """Format like 'Mar 1, 2025', or 'No due date'."""
    if due is None:
        return "No due date"
    return f"{due:%b} {due.day}, {due.year}"


def format_created(created_at: datetime) -> str:
    """Local-time 'Mar 1, 2025 14:05'."""
    local = created_at.astimezone()
    return f"{local:%b} {local.day}, {local.year} {local:%H:%M}"


def metrics_line(metrics: Metrics) -> str:
    return (
        f"Total: {metrics.total} | "
        f"[green]Completed: {metrics.completed}[/green] | "
        f"[yellow]Pending: {metrics.pending}[/yellow]"
    )


class TaskFormatter:
    """Centralized task display formatting."""

    @staticmethod
    def create_table(tasks: List[Task], title: str = "Tasks") -> Table:
        """
        Create Rich table for tasks.

        Args:
            tasks: Tasks in display order
            title: Table title

        Returns:
            Rich Table object ready for display
        """
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan", width=8, no_wrap=True)
        table.add_column("", width=1)
        table.add_column("Title", style="white")
        table.add_column("Priority", width=8)
        table.add_column("Status", width=11)
        table.add_column("Due", style="dim", no_wrap=True)

        for task in tasks:
            status_style = STATUS_STYLES[task.status]
            priority_style = PRIORITY_STYLES[task.priority]
            title_text = task.title
            if task.status == Status.COMPLETED:
                title_text = f"[strike dim]{task.title}[/strike dim]"

            table.add_row(
                task.id,
                f"[{status_style}]{STATUS_MARKERS[task.status]}[/{status_style}]",
                title_text,
                f"[{priority_style}]{task.priority.value}[/{priority_style}]",
                f"[{status_style}]{task.status.value}[/{status_style}]",
                format_due_date(task.due_date) if task.due_date else "-",
            )

        return table

    @staticmethod
    def create_detail_panel(task: Task) -> Panel:
        """Full details for a single task."""
        status_style = STATUS_STYLES[task.status]
        priority_style = PRIORITY_STYLES[task.priority]
        lines = [
            f"[bold]{task.title}[/bold]",
            "",
            task.description or "[dim]No description[/dim]",
            "",
            f"Priority: [{priority_style}]{task.priority.value}[/{priority_style}]",
            f"Status:   [{status_style}]{task.status.value}[/{status_style}]",
            f"Due:      {format_due_date(task.due_date)}",
            f"Created:  {format_created(task.created_at)}",
        ]
        return Panel("\n".join(lines), title=f"Task {task.id}", border_style="cyan")

    @staticmethod
    def to_json_array(tasks: List[Task]) -> str:
        """Convert task list to JSON array string (storage record layout)."""
        return json.dumps([t.to_record() for t in tasks], indent=2)

    @staticmethod
    def to_raw_lines(tasks: List[Task]) -> List[str]:
        """
        Convert task list to plain text lines.

        Returns:
            One 'id: [x] title (priority)' line per task
        """
        lines = []
        for task in tasks:
            status_marker = "x" if task.status == Status.COMPLETED else " "
            lines.append(f"{task.id}: [{status_marker}] {task.title} ({task.priority.value})")
        return lines
