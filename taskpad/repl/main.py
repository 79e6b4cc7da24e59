"""
FILE: taskpad/repl/main.py
PURPOSE: Interactive REPL for task management with prompt-toolkit
EXPORTS:
  - REPLContext - Session state (store, query, derived view and metrics)
  - execute_command(result, ctx) -> bool
  - run_repl(ctx) - Main REPL loop
  - main() - Entry point for REPL mode
DEPENDENCIES:
  - prompt_toolkit (REPL interface, history, completion)
  - rich (formatted output)
  - taskpad.core.service (TaskStore)
  - taskpad.core.views (view projection, metrics)
  - taskpad.repl.parser (command parsing)
  - taskpad.repl.completer (autocomplete)
NOTES:
  - The context subscribes to the store; view and metrics are recomputed
    on every change and on every filter/sort change
  - Context is passed explicitly to handlers, there is no module global
  - Bottom toolbar shows total/completed/pending counts
  - Right prompt shows how many tasks are in the current view
  - Ctrl+D or "exit"/"quit" to exit
"""

import sys
import logging
import traceback
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.formatted_text import HTML

from ..core.config import load_settings
from ..core.exceptions import TaskpadError
from ..core.models import Metrics, Task, TaskQuery
from ..core.service import TaskStore, open_store
from ..core.views import aggregate_metrics, project_query
from .parser import parse_command, ParseResult
from .completer import create_completer
from .display import console


logger = logging.getLogger(__name__)


# --- REPL Context (Persistent State) ---


@dataclass
class REPLContext:
    """
    Persistent context for the REPL session.

    Attributes:
        store: The loaded TaskStore
        query: Current filter/sort used by 'ls'
        view: Tasks matching query, in display order
        metrics: Counts over the whole collection
    """
    store: TaskStore
    query: TaskQuery = field(default_factory=TaskQuery)
    view: List[Task] = field(default_factory=list)
    metrics: Metrics = field(default_factory=Metrics)
    _unsubscribe: Optional[Callable[[], None]] = field(default=None, repr=False)

    def __post_init__(self):
        self._unsubscribe = self.store.subscribe(self._on_change)
        self.refresh()

    def _on_change(self, tasks) -> None:
        self.refresh(tasks)

    def refresh(self, tasks=None) -> None:
        """Recompute view and metrics from the store's tasks."""
        if tasks is None:
            tasks = self.store.tasks
        self.view = project_query(tasks, self.query)
        self.metrics = aggregate_metrics(tasks)

    def set_query(self, query: TaskQuery) -> None:
        self.query = query
        self.refresh()

    def get_prompt(self) -> str:
        """
        Generate prompt string based on current query.

        Returns:
            "taskpad> " for the default view, otherwise something like
            "taskpad:[pending | priority asc]> "
        """
        if self.query == TaskQuery():
            return "taskpad> "
        return (
            f"taskpad:[{self.query.status_filter.value} | "
            f"{self.query.sort_field.value} {self.query.direction.value}]> "
        )

    def close(self) -> None:
        """Stop tracking the store and release its repository."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.store.close()


def format_prompt(ctx: REPLContext) -> HTML:
    """Colored version of ctx.get_prompt() for prompt_toolkit."""
    if ctx.query == TaskQuery():
        return HTML("<b>taskpad&gt; </b>")

    return HTML(
        f"<b>taskpad:[<cyan>{ctx.query.status_filter.value}</cyan> | "
        f"<magenta>{ctx.query.sort_field.value} {ctx.query.direction.value}</magenta>]&gt; </b>"
    )


def make_bottom_toolbar(ctx: REPLContext) -> Callable[[], HTML]:
    def get_bottom_toolbar() -> HTML:
        m = ctx.metrics
        text = f"Total: {m.total} | Completed: {m.completed} | Pending: {m.pending} | 'help' for commands"
        return HTML(f"<style bg='#444444' fg='#ffffff'> {text} </style>")
    return get_bottom_toolbar


def make_right_prompt(ctx: REPLContext) -> Callable[[], HTML]:
    def get_right_prompt() -> HTML:
        return HTML(f"<style fg='#888888'>[{len(ctx.view)} in view]</style>")
    return get_right_prompt


# Import command handlers from command modules
from .commands import (
    # Task handlers
    handle_add_command,
    handle_ls_command,
    handle_done_command,
    handle_rm_command,
    handle_edit_command,
    handle_show_command,
    # View/system handlers
    handle_filter_command,
    handle_sort_command,
    handle_stats_command,
    handle_help_command,
    handle_clear_command,
)


HANDLERS = {
    "add": handle_add_command,
    "ls": handle_ls_command,
    "done": handle_done_command,
    "toggle": handle_done_command,
    "rm": handle_rm_command,
    "edit": handle_edit_command,
    "show": handle_show_command,
    "filter": handle_filter_command,
    "sort": handle_sort_command,
    "stats": handle_stats_command,
    "help": handle_help_command,
    "clear": handle_clear_command,
}


def execute_command(result: ParseResult, ctx: REPLContext) -> bool:
    """
    Execute a parsed command.

    Returns:
        True to continue REPL loop, False to exit
    """
    command = result.command.lower()

    # Exit commands
    if command in ("exit", "quit"):
        console.print("[dim]Goodbye![/dim]")
        return False

    # Empty command (just Enter pressed)
    if not command:
        return True

    handler = HANDLERS.get(command)
    if handler:
        handler(result, ctx)
    else:
        console.print(f"[red]Unknown command:[/red] {command}")
        console.print("[dim]Type 'help' for available commands[/dim]")
    console.print()

    return True


def run_repl(ctx: REPLContext) -> None:
    """
    Main REPL loop.

    Exits on:
    - Ctrl+D (EOFError)
    - "exit" or "quit" commands
    """
    # In piped/test environments, skip prompt_toolkit entirely
    has_tty = sys.stdin.isatty() and sys.stdout.isatty()

    session = None
    use_simple_input = not has_tty

    if has_tty:
        try:
            session = PromptSession(
                history=InMemoryHistory(),
                completer=create_completer(lambda: ctx.store.tasks),
                complete_while_typing=True,
                bottom_toolbar=make_bottom_toolbar(ctx),
                rprompt=make_right_prompt(ctx),
            )
        except Exception as e:
            # Fallback to simple input if prompt_toolkit fails
            console.print(f"[yellow]Warning:[/yellow] Running in simple input mode: {e}")
            use_simple_input = True

    console.print("[bold cyan]Taskpad REPL[/bold cyan] - Type 'help' for commands, 'exit' to quit")
    if use_simple_input:
        console.print("[dim](Running in simple mode - no autocomplete)[/dim]")
    console.print()

    while True:
        try:
            if use_simple_input or session is None:
                user_input = input(ctx.get_prompt())
            else:
                user_input = session.prompt(format_prompt(ctx))

            if not execute_command(parse_command(user_input), ctx):
                break

        except KeyboardInterrupt:
            console.print("[dim]^C (Press Ctrl+D or type 'exit' to quit)[/dim]")
            continue
        except EOFError:
            console.print()
            console.print("[dim]Goodbye![/dim]")
            break
        except Exception as e:
            # Unexpected error - show but don't crash
            logger.exception("Unhandled error in REPL command")
            console.print(f"[red]Unexpected error:[/red] {e}")
            console.print("[dim]" + traceback.format_exc() + "[/dim]")


def main() -> None:
    """
    Entry point for REPL mode.

    Called when user runs: taskpad repl (or plain: taskpad)
    """
    try:
        store = open_store(load_settings())
    except TaskpadError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if store.load_warning:
        console.print(
            f"[yellow]Warning:[/yellow] {store.load_warning} (continuing with no tasks)"
        )

    ctx = REPLContext(store)
    try:
        run_repl(ctx)
    finally:
        ctx.close()


if __name__ == "__main__":
    main()
