"""
FILE: taskpad/cli/commands/system.py
PURPOSE: System commands (version, help, repl)
"""

import typer

# Import shared objects from main module
# These will be available after main.py imports this module
from ..main import app, console, error_console, __version__


@app.command()
def version():
    """Show Taskpad version."""
    console.print(f"Taskpad v{__version__}")


@app.command()
def help():
    """Show available commands and usage."""
    console.print("\n[bold cyan]Taskpad[/bold cyan] - Terminal task tracker\n")
    console.print(f"[dim]Version {__version__}[/dim]\n")

    console.print("[bold]Usage:[/bold]")
    console.print("  taskpad [command] [options]")
    console.print("  taskpad                    [dim]# Launch interactive REPL (default)[/dim]\n")

    console.print("[bold]Commands:[/bold]")

    commands = [
        ("add", "Create a new task", 'taskpad add "Task title" [--priority high] [--due 2025-03-01]'),
        ("ls", "List tasks", "taskpad ls [--filter pending] [--sort priority] [--order asc]"),
        ("done", "Toggle completed/pending", "taskpad done <task_id>"),
        ("edit", "Update task fields", 'taskpad edit <task_id> --title "New title"'),
        ("show", "View full task details", "taskpad show <task_id>"),
        ("rm", "Delete task(s)", "taskpad rm <task_id>[,<task_id>]"),
        ("stats", "Show task counts", "taskpad stats"),
        ("repl", "Launch interactive REPL", "taskpad repl"),
        ("version", "Show version", "taskpad version"),
        ("help", "Show this help message", "taskpad help"),
    ]

    for cmd, desc, example in commands:
        console.print(f"  [green]{cmd:8}[/green] {desc}")
        console.print(f"           [dim]{example}[/dim]\n")

    console.print("[bold]Global Options:[/bold]")
    console.print("  [yellow]--json[/yellow]    Output as JSON (for scripting)")
    console.print("  [yellow]--raw[/yellow]     Plain text output (no colors)")
    console.print("  [yellow]--help[/yellow]    Show detailed help for a command\n")

    console.print("[bold]Storage:[/bold]")
    console.print("  TASKPAD_BACKEND=local|remote, TASKPAD_DATA_DIR, TASKPAD_REMOTE_URL,")
    console.print("  TASKPAD_PROJECT_ID, TASKPAD_PUBLIC_KEY, TASKPAD_REMOTE_TIMEOUT\n")

    console.print("[bold]Notes:[/bold]")
    console.print("  Task IDs can be shortened to any unique prefix.")
    console.print("  'done' on an in-progress task completes it; toggling again")
    console.print("  makes it pending (not in-progress).\n")


@app.command()
def repl():
    """
    Launch interactive REPL mode.

    The REPL provides:
    - Persistent filter and sort settings
    - Command history (up/down arrows)
    - Autocomplete (Tab key)
    - Exit with Ctrl+D or type 'exit'

    Example:
        taskpad repl
    """
    # Import here to avoid loading REPL dependencies for one-shot commands
    from ...repl import main as repl_main

    try:
        repl_main()
    except Exception as e:
        error_console.print(f"[red]Error starting REPL:[/red] {e}")
        raise typer.Exit(1)
