"""
FILE: taskpad/core/config.py
PURPOSE: Settings loaded from environment variables (+ optional .env file)
EXPORTS:
  - Settings (dataclass)
  - load_settings() -> Settings
  - DEFAULT_DATA_DIR
DEPENDENCIES:
  - python-dotenv (reads .env from the working directory)
  - os, pathlib, dataclasses (stdlib)
NOTES:
  - All variables use the TASKPAD_ prefix
  - No secrets required at import time; remote credentials are only
    checked when the remote repository is built
  - Bad numeric values fall back to defaults instead of failing
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .constants import BACKEND_LOCAL


ENV_PREFIX = "TASKPAD"

DEFAULT_DATA_DIR = Path.home() / ".taskpad"
DEFAULT_REMOTE_TIMEOUT = 15.0
DEFAULT_LOG_LEVEL = "WARNING"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return default
    return v.strip()


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = _env(name)
    if raw is None:
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True)
class Settings:
    """Resolved application settings."""

    backend: str = BACKEND_LOCAL
    data_dir: Path = DEFAULT_DATA_DIR
    remote_url: Optional[str] = None
    project_id: Optional[str] = None
    public_key: Optional[str] = None
    remote_timeout: float = DEFAULT_REMOTE_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def log_dir(self) -> Path:
        return self.data_dir / "logs"


def load_settings(use_dotenv: bool = True) -> Settings:
    """
    Read settings from the environment.

    Args:
        use_dotenv: Load ./.env from the working directory first
            (existing variables win)

    Returns:
        Settings instance
    """
    if use_dotenv:
        load_dotenv(Path.cwd() / ".env", override=False)

    return Settings(
        backend=(_env(_k("BACKEND"), BACKEND_LOCAL) or BACKEND_LOCAL).lower(),
        data_dir=_env_path(_k("DATA_DIR"), DEFAULT_DATA_DIR),
        remote_url=_env(_k("REMOTE_URL")),
        project_id=_env(_k("PROJECT_ID")),
        public_key=_env(_k("PUBLIC_KEY")),
        remote_timeout=_env_float(_k("REMOTE_TIMEOUT"), DEFAULT_REMOTE_TIMEOUT),
        log_level=(_env(_k("LOG_LEVEL"), DEFAULT_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper(),
    )
