"""
FILE: taskpad/repl/commands/system.py
PURPOSE: View-setting and system command handlers for REPL
"""

from dataclasses import replace

from rich.panel import Panel

from ..display import console
from ..parser import ParseResult
from ...core.constants import StatusFilter, SortField, SortDirection
from ...core.exceptions import ValidationError
from ...formatting import metrics_line


def handle_filter_command(result: ParseResult, ctx) -> None:
    """
    Handle 'filter' command - set the status filter for 'ls'.

    Usage:
        filter              # Show current filter
        filter pending      # Only pending tasks
        filter in-progress
        filter completed
        filter all          # Clear filter
    """
    if not result.args:
        console.print(f"Current filter: [cyan]{ctx.query.status_filter.value}[/cyan]")
        return

    try:
        status_filter = StatusFilter.parse(result.args[0])
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
        return

    ctx.set_query(replace(ctx.query, status_filter=status_filter))
    console.print(f"✓ Showing [cyan]{status_filter.value}[/cyan] tasks ({len(ctx.view)} in view)")


def handle_sort_command(result: ParseResult, ctx) -> None:
    """
    Handle 'sort' command - set sort field and direction for 'ls'.

    Usage:
        sort                    # Show current sort
        sort priority           # Keep current direction
        sort dueDate asc
        sort createdAt desc
        sort desc               # Only flip direction
    """
    if not result.args:
        console.print(
            f"Current sort: [cyan]{ctx.query.sort_field.value} {ctx.query.direction.value}[/cyan]"
        )
        return

    query = ctx.query
    try:
        first = result.args[0]
        if first.lower() in SortDirection.values():
            query = replace(query, direction=SortDirection.parse(first))
        else:
            query = replace(query, sort_field=SortField.parse(first))
            if len(result.args) > 1:
                query = replace(query, direction=SortDirection.parse(result.args[1]))
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
        return

    ctx.set_query(query)
    console.print(f"✓ Sorting by [cyan]{query.sort_field.value} {query.direction.value}[/cyan]")


def handle_stats_command(result: ParseResult, ctx) -> None:
    """Handle 'stats' command - show total/completed/pending counts."""
    console.print(metrics_line(ctx.metrics))


def handle_help_command(result: ParseResult, ctx) -> None:
    """Handle 'help' command - list REPL commands."""
    lines = [
        "[bold]Tasks[/bold]",
        '  add <title> [--desc D] [--priority P] [--status S] [--due YYYY-MM-DD]',
        "  ls                       Show tasks using current filter/sort",
        "  done <id>[,<id>]         Toggle completed/pending (alias: toggle)",
        "  edit <id> [--title T] [--desc D] [--priority P] [--status S] [--due D] [--clear-due]",
        "  show <id>                Full task details",
        "  rm <id>[,<id>]           Delete tasks",
        "",
        "[bold]View[/bold]",
        "  filter <all|pending|in-progress|completed>",
        "  sort <createdAt|priority|dueDate> [asc|desc]",
        "  stats                    Total / completed / pending counts",
        "",
        "[bold]System[/bold]",
        "  help, clear, exit/quit",
        "",
        "[dim]IDs can be shortened to any unique prefix. Tab completes commands and IDs.[/dim]",
    ]
    console.print(Panel("\n".join(lines), title="Taskpad REPL", border_style="cyan"))


def handle_clear_command(result: ParseResult, ctx) -> None:
    """Handle 'clear' command - clear the screen."""
    console.clear()
