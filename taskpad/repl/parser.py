"""
FILE: taskpad/repl/parser.py
PURPOSE: Parse user input into commands and arguments for REPL
EXPORTS:
  - ParseResult (dataclass for parsed commands)
  - parse_command(input_str) -> ParseResult
DEPENDENCIES:
  - shlex (for shell-like parsing with quotes)
  - dataclasses (for ParseResult)
  - typing (type hints)
NOTES:
  - Handles quoted strings: add "task with spaces"
  - Supports value flags: --priority high, --due=2025-03-01
  - Boolean flags: --clear-due
  - Case-insensitive command names
"""

import shlex
from dataclasses import dataclass, field
from typing import List, Dict


@dataclass
class ParseResult:
    """
    Result of parsing a REPL command.

    Attributes:
        command: The command name (e.g., "add", "ls", "done")
        args: Positional arguments (e.g., ["task title", "3f2a"])
        flags: Flag arguments as dict (e.g., {"priority": "high", "clear-due": True})
        raw_input: Original input string
    """
    command: str
    args: List[str] = field(default_factory=list)
    flags: Dict[str, str | bool] = field(default_factory=dict)
    raw_input: str = ""

    def flag_value(self, name: str) -> str | None:
        """Value of a --name flag, or None if absent or given without a value."""
        value = self.flags.get(name)
        return value if isinstance(value, str) else None


def parse_command(input_str: str) -> ParseResult:
    """
    Parse REPL input into command, args, and flags.

    Examples:
        >>> parse_command('add "Write spec" --priority high')
        ParseResult(command="add", args=["Write spec"], flags={"priority": "high"})

        >>> parse_command("sort dueDate asc")
        ParseResult(command="sort", args=["dueDate", "asc"], flags={})

        >>> parse_command("edit 3f2a --due=2025-03-01")
        ParseResult(command="edit", args=["3f2a"], flags={"due": "2025-03-01"})

    Args:
        input_str: Raw user input from REPL prompt

    Returns:
        ParseResult with command, args, and flags extracted

    Notes:
        - Command is always the first token (case-insensitive)
        - A flag followed by another flag (or nothing) is boolean True
        - Unclosed quotes fall back to whitespace splitting
        - Empty input returns command="" with no args/flags
    """
    input_str = input_str.strip()
    if not input_str:
        return ParseResult(command="", raw_input=input_str)

    try:
        tokens = shlex.split(input_str)
    except ValueError:
        tokens = input_str.split()

    if not tokens:
        return ParseResult(command="", raw_input=input_str)

    command = tokens[0].lower()
    args: List[str] = []
    flags: Dict[str, str | bool] = {}
    i = 1

    while i < len(tokens):
        token = tokens[i]

        if token.startswith("--") and len(token) > 2:
            name = token[2:]
            if "=" in name:
                name, value = name.split("=", 1)
                flags[name] = value
                i += 1
            elif i + 1 < len(tokens) and not tokens[i + 1].startswith("--"):
                flags[name] = tokens[i + 1]
                i += 2
            else:
                flags[name] = True
                i += 1
        else:
            args.append(token)
            i += 1

    return ParseResult(command=command, args=args, flags=flags, raw_input=input_str)
