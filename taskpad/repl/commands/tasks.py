"""
FILE: taskpad/repl/commands/tasks.py
PURPOSE: Task command handlers for REPL
"""

from dataclasses import replace
from typing import Optional

from ..display import console, display_task, display_tasks_table
from ..parser import ParseResult
from ...core.constants import Priority, Status
from ...core.exceptions import (
    TaskpadError,
    TaskNotFoundError,
    ValidationError,
)
from ...core.models import Task, TaskDraft, parse_due_date
from ...formatting import TaskFormatter


def _resolve_task(result: ParseResult, ctx, usage: str) -> Optional[Task]:
    """Look up the task named by the first argument, printing errors."""
    if not result.args:
        console.print("[red]Error:[/red] Task ID required")
        console.print(f"[dim]Usage: {usage}[/dim]")
        return None

    try:
        return ctx.store.get(ctx.store.resolve_id(result.args[0]))
    except TaskNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        return None


def handle_add_command(result: ParseResult, ctx) -> None:
    """
    Handle 'add' command - create new task.

    Usage:
        add Buy groceries
        add "Write spec" --priority high --due 2025-03-01
        add "Review PR" --desc "Check the tests" --status in-progress
    """
    if not result.args:
        console.print("[red]Error:[/red] Task title required")
        console.print("[dim]Usage: add <title> [--desc D] [--priority P] [--status S] [--due YYYY-MM-DD][/dim]")
        return

    # Join all args as the title (in case they didn't use quotes)
    title = " ".join(result.args)

    try:
        draft = TaskDraft.from_input(
            title,
            description=result.flag_value("desc"),
            priority=result.flag_value("priority"),
            status=result.flag_value("status"),
            due_date=result.flag_value("due"),
        )
        task = ctx.store.add(draft)
        display_task(task, "✓ Task added successfully")
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
    except TaskpadError as e:
        console.print(f"[red]Failed to add task:[/red] {e}")


def handle_ls_command(result: ParseResult, ctx) -> None:
    """
    Handle 'ls' command - show the current view.

    Uses the session filter/sort (see 'filter' and 'sort').
    """
    display_tasks_table(
        ctx.view,
        title=f"Tasks ({ctx.query.describe()})",
        metrics=ctx.metrics,
    )


def handle_done_command(result: ParseResult, ctx) -> None:
    """
    Handle 'done'/'toggle' command - flip completed <-> pending.

    Usage:
        done 3f2a
        done 3f2a,91bc
    """
    if not result.args:
        console.print("[red]Error:[/red] Task ID required")
        console.print("[dim]Usage: done <task_id>[,<task_id>][/dim]")
        return

    refs = [r.strip() for r in " ".join(result.args).split(",") if r.strip()]
    for ref in refs:
        try:
            task = ctx.store.toggle_status(ctx.store.resolve_id(ref))
            console.print(f"[blue]ℹ[/blue] Task marked as {task.status.value}: {task.title}")
        except TaskNotFoundError as e:
            console.print(f"[red]Error:[/red] {e}")
        except TaskpadError as e:
            console.print(f"[red]Failed to update task {ref}:[/red] {e}")


def handle_rm_command(result: ParseResult, ctx) -> None:
    """
    Handle 'rm' command - delete tasks. Unknown IDs are skipped.

    Usage:
        rm 3f2a
        rm 3f2a,91bc
    """
    if not result.args:
        console.print("[red]Error:[/red] Task ID required")
        console.print("[dim]Usage: rm <task_id>[,<task_id>][/dim]")
        return

    refs = [r.strip() for r in " ".join(result.args).split(",") if r.strip()]
    for ref in refs:
        try:
            task = ctx.store.get(ctx.store.resolve_id(ref))
        except TaskNotFoundError:
            console.print(f"[dim]No task matching '{ref}', nothing to delete[/dim]")
            continue

        try:
            ctx.store.remove(task.id)
            console.print(f"[red]✗[/red] Task deleted successfully: {task.title}")
        except TaskpadError as e:
            console.print(f"[red]Failed to delete task {task.id}:[/red] {e}")


def handle_edit_command(result: ParseResult, ctx) -> None:
    """
    Handle 'edit' command - change task fields.

    Usage:
        edit 3f2a --title "New title"
        edit 3f2a --priority low --status in-progress
        edit 3f2a --due 2025-04-01
        edit 3f2a --clear-due
    """
    task = _resolve_task(
        result, ctx,
        "edit <task_id> [--title T] [--desc D] [--priority P] [--status S] [--due YYYY-MM-DD] [--clear-due]",
    )
    if task is None:
        return

    try:
        changes = {}
        if result.flag_value("title") is not None:
            changes["title"] = result.flag_value("title")
        if result.flag_value("desc") is not None:
            changes["description"] = result.flag_value("desc")
        if result.flag_value("priority") is not None:
            changes["priority"] = Priority.parse(result.flag_value("priority"))
        if result.flag_value("status") is not None:
            changes["status"] = Status.parse(result.flag_value("status"))
        if result.flags.get("clear-due"):
            changes["due_date"] = None
        elif result.flag_value("due") is not None:
            changes["due_date"] = parse_due_date(result.flag_value("due"))

        if not changes:
            console.print("[yellow]Nothing to change[/yellow]")
            return

        task = ctx.store.update(replace(task, **changes))
        display_task(task, "✎ Task updated successfully")
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
    except TaskpadError as e:
        console.print(f"[red]Failed to update task:[/red] {e}")


def handle_show_command(result: ParseResult, ctx) -> None:
    """
    Handle 'show' command - full details of one task.

    Usage:
        show 3f2a
    """
    task = _resolve_task(result, ctx, "show <task_id>")
    if task is None:
        return
    console.print(TaskFormatter.create_detail_panel(task))
