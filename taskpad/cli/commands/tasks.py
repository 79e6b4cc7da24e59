"""
FILE: taskpad/cli/commands/tasks.py
PURPOSE: Task management commands (add, ls, done, rm, edit, show, stats)
"""

import json
from dataclasses import replace
from typing import List, Optional

import typer

from ..main import app, console, error_console, open_cli_store
from ...core.constants import Priority, Status
from ...core.exceptions import (
    TaskpadError,
    TaskNotFoundError,
    ValidationError,
)
from ...core.models import TaskDraft, TaskQuery, parse_due_date
from ...core.views import aggregate_metrics, project_query
from ...formatting import TaskFormatter, metrics_line


def _split_ids(task_ids: str) -> List[str]:
    return [part.strip() for part in task_ids.split(",") if part.strip()]


@app.command()
def add(
    title: str = typer.Argument(..., help="Task title"),
    description: Optional[str] = typer.Option(None, "--desc", "-d", help="Task description"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="low, medium or high"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="pending, in-progress or completed"),
    due: Optional[str] = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Create a new task.

    Example:
        taskpad add "Write documentation"
        taskpad add "Fix bug" --priority high --due 2025-03-01
    """
    try:
        draft = TaskDraft.from_input(
            title,
            description=description,
            priority=priority,
            status=status,
            due_date=due,
        )
        store = open_cli_store()
        task = store.add(draft)

        if json_output:
            typer.echo(task.to_json())
        elif raw:
            typer.echo(f"{task.id}: {task.title}")
        else:
            console.print(f"[green]✓ Task added successfully[/green] [bold]{task.id}[/bold]: {task.title}")

    except ValidationError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except TaskpadError as e:
        error_console.print(f"[red]Failed to add task:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def ls(
    status_filter: Optional[str] = typer.Option(
        None, "--filter", "-f", help="all, pending, in-progress or completed"
    ),
    sort_field: Optional[str] = typer.Option(
        None, "--sort", "-s", help="createdAt, priority or dueDate"
    ),
    direction: Optional[str] = typer.Option(None, "--order", "-o", help="asc or desc"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List tasks, filtered and sorted.

    Example:
        taskpad ls
        taskpad ls --filter pending --sort priority --order asc
        taskpad ls --sort dueDate --json
    """
    try:
        query = TaskQuery.from_input(status_filter, sort_field, direction)
        store = open_cli_store()
        tasks = project_query(store.tasks, query)

        if json_output:
            typer.echo(TaskFormatter.to_json_array(tasks))
        elif raw:
            for line in TaskFormatter.to_raw_lines(tasks):
                typer.echo(line)
        else:
            if not tasks:
                console.print("[dim]No tasks found[/dim]")
            else:
                console.print(TaskFormatter.create_table(tasks, title=f"Tasks ({query.describe()})"))
            console.print(f"\n[dim]{metrics_line(aggregate_metrics(store.tasks))}[/dim]")

    except TaskpadError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def done(
    task_ids: str = typer.Argument(..., help="Task ID(s) to toggle (comma-separated)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Toggle tasks between completed and pending.

    Example:
        taskpad done 3f2a
        taskpad done 3f2a,91bc
    """
    store = open_cli_store()
    toggled = []
    errors = []

    for ref in _split_ids(task_ids):
        try:
            task = store.toggle_status(store.resolve_id(ref))
            toggled.append(task)
        except TaskNotFoundError as e:
            errors.append(str(e))
        except TaskpadError as e:
            errors.append(f"Error with task {ref}: {e}")

    if json_output:
        typer.echo(TaskFormatter.to_json_array(toggled))
    elif raw:
        for task in toggled:
            typer.echo(f"{task.id}: {task.status.value}")
    else:
        for task in toggled:
            console.print(f"[blue]ℹ[/blue] Task marked as {task.status.value}: {task.title}")

    if errors:
        for error in errors:
            error_console.print(f"[red]Error:[/red] {error}")
        if not toggled:
            raise typer.Exit(1)


@app.command()
def rm(
    task_ids: str = typer.Argument(..., help="Task ID(s) to delete (comma-separated)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Delete one or more tasks.

    Unknown IDs are skipped; deleting is idempotent.

    Example:
        taskpad rm 3f2a
        taskpad rm 3f2a,91bc
    """
    store = open_cli_store()
    deleted = []
    skipped = []

    for ref in _split_ids(task_ids):
        try:
            task = store.get(store.resolve_id(ref))
        except TaskNotFoundError:
            skipped.append(ref)
            continue

        try:
            store.remove(task.id)
        except TaskpadError as e:
            error_console.print(f"[red]Failed to delete task {task.id}:[/red] {e}")
            raise typer.Exit(1)
        deleted.append({"id": task.id, "title": task.title})

    if json_output:
        typer.echo(json.dumps(deleted, indent=2))
    elif raw:
        for task in deleted:
            typer.echo(f"Deleted task {task['id']}: {task['title']}")
    else:
        for task in deleted:
            console.print(f"[red]✗[/red] Task deleted successfully: {task['title']}")
        for ref in skipped:
            console.print(f"[dim]No task matching '{ref}', nothing to delete[/dim]")


@app.command()
def edit(
    task_id: str = typer.Argument(..., help="Task ID to edit"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title"),
    description: Optional[str] = typer.Option(None, "--desc", "-d", help="New description"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="low, medium or high"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="pending, in-progress or completed"),
    due: Optional[str] = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)"),
    clear_due: bool = typer.Option(False, "--clear-due", help="Remove the due date"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Update a task's fields. Only the given options change.

    Example:
        taskpad edit 3f2a --title "Updated title"
        taskpad edit 3f2a --status in-progress --priority high
        taskpad edit 3f2a --clear-due
    """
    try:
        store = open_cli_store()
        task = store.get(store.resolve_id(task_id))

        changes = {}
        if title is not None:
            changes["title"] = title
        if description is not None:
            changes["description"] = description
        if priority is not None:
            changes["priority"] = Priority.parse(priority)
        if status is not None:
            changes["status"] = Status.parse(status)
        if clear_due:
            changes["due_date"] = None
        elif due is not None:
            changes["due_date"] = parse_due_date(due)

        if not changes:
            error_console.print("[yellow]Nothing to change[/yellow] (see 'taskpad edit --help')")
            raise typer.Exit(1)

        task = store.update(replace(task, **changes))

        if json_output:
            typer.echo(task.to_json())
        elif raw:
            typer.echo(f"Updated task {task.id}: {task.title}")
        else:
            console.print(f"[blue]✎[/blue] Task updated successfully {task.id}: {task.title}")

    except (TaskNotFoundError, ValidationError) as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except TaskpadError as e:
        error_console.print(f"[red]Failed to update task:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def show(
    task_id: str = typer.Argument(..., help="Task ID to show"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    View full task details.

    Example:
        taskpad show 3f2a
    """
    try:
        store = open_cli_store()
        task = store.get(store.resolve_id(task_id))
    except TaskNotFoundError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if json_output:
        typer.echo(task.to_json())
    else:
        console.print(TaskFormatter.create_detail_panel(task))


@app.command()
def stats(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show total, completed and pending counts.

    In-progress tasks count as pending.
    """
    store = open_cli_store()
    metrics = aggregate_metrics(store.tasks)

    if json_output:
        typer.echo(json.dumps(metrics.to_dict(), indent=2))
    else:
        console.print(metrics_line(metrics))
