"""
FILE: taskpad/repl/completer.py
PURPOSE: Autocomplete logic for REPL commands and arguments
EXPORTS:
  - TaskpadCompleter (Completer for command/arg completion)
  - create_completer(task_source) -> TaskpadCompleter
DEPENDENCIES:
  - prompt_toolkit.completion (Completer, Completion)
  - taskpad.core.constants (enum values)
NOTES:
  - Suggests command names when at start of line
  - Suggests filter values after "filter", fields/directions after "sort"
  - Suggests priority/status values after --priority/--status
  - Suggests task IDs for commands expecting IDs
  - Case-insensitive matching
"""

from typing import Callable, Iterable, Optional, Sequence

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from ..core.constants import Priority, Status, StatusFilter, SortField, SortDirection
from ..core.models import Task


class TaskpadCompleter(Completer):
    """
    Custom completer for the Taskpad REPL.

    Args:
        task_source: Callable returning the current tasks (for ID completion)
    """

    COMMANDS = [
        "add", "ls", "done", "toggle", "rm", "edit", "show", "filter", "sort",
        "stats", "help", "clear", "exit", "quit",
    ]

    COMMAND_FLAGS = {
        "add": ["--desc", "--priority", "--status", "--due"],
        "edit": ["--title", "--desc", "--priority", "--status", "--due", "--clear-due"],
    }

    FLAG_VALUES = {
        "--priority": Priority.values(),
        "--status": Status.values(),
    }

    ID_COMMANDS = {"done", "toggle", "rm", "edit", "show"}

    def __init__(self, task_source: Optional[Callable[[], Sequence[Task]]] = None):
        self.task_source = task_source

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        """
        Generate completions based on current input.

        Logic:
            1. Empty input or first word -> commands
            2. "filter <x>" -> filter values
            3. "sort <x> [<y>]" -> sort fields, then directions
            4. After --priority/--status -> enum values
            5. First arg of an ID command -> task IDs
            6. Otherwise -> flags for the command
        """
        text = document.text_before_cursor
        words = text.split()
        at_new_word = text.endswith(" ")

        if not words or (len(words) == 1 and not at_new_word):
            yield from self._complete_from(self.COMMANDS, words[0] if words else "")
            return

        command = words[0].lower()
        current = "" if at_new_word else words[-1]
        position = len(words) if at_new_word else len(words) - 1

        if command == "filter" and position == 1:
            yield from self._complete_from(StatusFilter.values(), current)
            return

        if command == "sort":
            if position == 1:
                yield from self._complete_from(SortField.values(), current)
            elif position == 2:
                yield from self._complete_from(SortDirection.values(), current)
            return

        previous = words[-1] if at_new_word else (words[-2] if len(words) >= 2 else "")
        if previous in self.FLAG_VALUES:
            yield from self._complete_from(self.FLAG_VALUES[previous], current)
            return

        if command in self.ID_COMMANDS and position == 1:
            yield from self._complete_task_ids(current)
            return

        if at_new_word or current.startswith("--"):
            yield from self._complete_from(self.COMMAND_FLAGS.get(command, []), current)

    def _complete_from(self, options: Iterable[str], word: str) -> Iterable[Completion]:
        word_lower = word.lower()
        for option in options:
            if option.lower().startswith(word_lower):
                yield Completion(option, start_position=-len(word))

    def _complete_task_ids(self, word: str) -> Iterable[Completion]:
        if self.task_source is None:
            return
        for task in self.task_source():
            if task.id.startswith(word):
                yield Completion(
                    task.id,
                    start_position=-len(word),
                    display_meta=task.title[:40],
                )


def create_completer(
    task_source: Optional[Callable[[], Sequence[Task]]] = None,
) -> TaskpadCompleter:
    """Create a completer; pass task_source to enable task ID completion."""
    return TaskpadCompleter(task_source)
