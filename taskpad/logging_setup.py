"""
FILE: taskpad/logging_setup.py
PURPOSE: One-time logging configuration for CLI and REPL runs
EXPORTS:
  - setup_logging(log_dir, console_level, file_level) -> None
DEPENDENCIES:
  - logging (stdlib)
  - pathlib (stdlib)
NOTES:
  - Console handler writes to stderr so --json output stays clean
  - Console only shows taskpad loggers; third-party logs need ERROR+
  - File handler keeps everything at DEBUG in <log_dir>/taskpad.log
"""

import logging
import sys
from pathlib import Path


class _ConsoleNoiseFilter(logging.Filter):
    """Keep our logs, hide chatty third-party loggers (httpx, httpcore)."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("taskpad"):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    log_dir: str | Path,
    console_level: int | str = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure root logging with a console and a file handler.

    Call once, early, before the first log line.
    """
    if isinstance(console_level, str):
        console_level = logging.getLevelName(console_level.upper())
        if not isinstance(console_level, int):
            console_level = logging.WARNING

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    log_dir = Path(log_dir)
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_dir / "taskpad.log"), encoding="utf-8")
    except OSError as e:
        root.warning("File logging disabled: %s", e)
        return

    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
