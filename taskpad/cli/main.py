"""
FILE: taskpad/cli/main.py
PURPOSE: Typer-based CLI for one-shot task management commands
EXPORTS:
  - app (Typer application)
  - main() (entry point)
  - open_cli_store() -> TaskStore
  - version() - Show version
  - help() - Show command list and usage
  - repl() - Launch interactive REPL
  - add() - Create task
  - ls() - List tasks (filter/sort)
  - done() - Toggle task completion
  - rm() - Delete task
  - edit() - Update task fields
  - show() - View full task details
  - stats() - Show task counts
DEPENDENCIES:
  - typer (CLI framework)
  - click (command context teardown)
  - rich (formatted output)
  - taskpad.core.config (settings)
  - taskpad.core.service (TaskStore)
  - taskpad.core.exceptions (error handling)
  - taskpad.logging_setup (logging)
  - taskpad.repl (interactive mode)
NOTES:
  - Listing and mutation commands support --json and --raw flags
  - Error messages go to stderr
  - Exit codes: 0=success, 1=error
  - Each invocation builds its own TaskStore from settings
"""

import sys

# Fix Windows console encoding for Unicode characters
if sys.platform == "win32":
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

import click
import typer
from rich.console import Console

from ..core.config import load_settings
from ..core.exceptions import TaskpadError
from ..core.service import TaskStore, open_store
from ..logging_setup import setup_logging

# Typer app setup
app = typer.Typer(
    name="taskpad",
    help="Terminal task tracker with local or remote storage",
    add_completion=False,
)

# Rich console for formatted output
console = Console()
error_console = Console(stderr=True)

# Version
__version__ = "0.2.0"


def open_cli_store() -> TaskStore:
    """
    Build and load the configured store, exiting with code 1 on bad config.

    A failed load (corrupt file, unreachable service) is not fatal: the
    warning is printed and the command continues with no tasks.
    The store is closed when the command finishes.
    """
    try:
        store = open_store(load_settings())
    except TaskpadError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if store.load_warning:
        error_console.print(
            f"[yellow]Warning:[/yellow] {store.load_warning} (continuing with no tasks)"
        )

    ctx = click.get_current_context(silent=True)
    if ctx is not None:
        ctx.call_on_close(store.close)
    return store


@app.callback(invoke_without_command=True)
def default_command(ctx: typer.Context):
    """
    Default callback - sets up logging, launches REPL when no command is given.
    """
    settings = load_settings()
    setup_logging(settings.log_dir, settings.log_level)

    if ctx.invoked_subcommand is None:
        from ..repl import main as repl_main
        try:
            repl_main()
        except Exception as e:
            error_console.print(f"[red]Error starting REPL:[/red] {e}")
            raise typer.Exit(1)


# Import command modules to register commands with app
# Commands are decorated with @app.command() in their modules
from .commands import (
    # System commands
    version,
    help,
    repl,
    # Task commands
    add,
    ls,
    done,
    rm,
    edit,
    show,
    stats,
)


def main():
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
