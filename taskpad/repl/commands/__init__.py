"""
FILE: taskpad/repl/commands/__init__.py
PURPOSE: REPL command handler modules
"""

# Export all command handlers for easy importing
from .tasks import (
    handle_add_command,
    handle_ls_command,
    handle_done_command,
    handle_rm_command,
    handle_edit_command,
    handle_show_command,
)
from .system import (
    handle_filter_command,
    handle_sort_command,
    handle_stats_command,
    handle_help_command,
    handle_clear_command,
)

__all__ = [
    "handle_add_command",
    "handle_ls_command",
    "handle_done_command",
    "handle_rm_command",
    "handle_edit_command",
    "handle_show_command",
    "handle_filter_command",
    "handle_sort_command",
    "handle_stats_command",
    "handle_help_command",
    "handle_clear_command",
]
