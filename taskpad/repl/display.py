"""
FILE: taskpad/repl/display.py
PURPOSE: Display functions for tasks and tables in the REPL
EXPORTS:
  - console (shared Rich console)
  - display_task() - Display a single task line
  - display_tasks_table() - Display tasks in a formatted table
DEPENDENCIES:
  - rich (formatted output)
  - taskpad.formatting (TaskFormatter, metrics_line)
NOTES:
  - Lives apart from main.py so command handlers can import it
    without a circular import
"""

from typing import Optional, Sequence

from rich.console import Console

from ..core.models import Task, Metrics
from ..formatting import TaskFormatter, metrics_line

console = Console()


def display_task(task: Task, message: str = "", console_instance: Optional[Console] = None) -> None:
    """
    Display a single task with optional message.

    Args:
        task: Task object to display
        message: Optional message to show before task (e.g., "Task added successfully")
        console_instance: Optional Rich console instance (defaults to module console)
    """
    if console_instance is None:
        console_instance = console

    if message:
        console_instance.print(f"[green]{message}[/green]")

    console_instance.print(
        f"  [cyan]{task.id}[/cyan]: {task.title} "
        f"[dim]({task.priority.value}, {task.status.value})[/dim]"
    )


def display_tasks_table(
    tasks: Sequence[Task],
    title: str = "Tasks",
    metrics: Optional[Metrics] = None,
    console_instance: Optional[Console] = None,
) -> None:
    """
    Display tasks in a formatted table with an optional metrics footer.
    """
    if console_instance is None:
        console_instance = console

    if not tasks:
        console_instance.print("[dim]No tasks found[/dim]")
    else:
        console_instance.print(TaskFormatter.create_table(list(tasks), title=title))

    if metrics is not None:
        console_instance.print(f"[dim]{metrics_line(metrics)}[/dim]")
