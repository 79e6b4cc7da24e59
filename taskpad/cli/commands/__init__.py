"""
FILE: taskpad/cli/commands/__init__.py
PURPOSE: CLI command modules
"""

# Export all command handlers for easy importing
from .tasks import (
    add,
    ls,
    done,
    rm,
    edit,
    show,
    stats,
)
from .system import (
    version,
    help,
    repl,
)

__all__ = [
    "add",
    "ls",
    "done",
    "rm",
    "edit",
    "show",
    "stats",
    "version",
    "help",
    "repl",
]
