"""
FILE: taskpad/core/storage.py
PURPOSE: Key/value storage media for the local task repository
EXPORTS:
  - KeyValueStore (Protocol)
  - FileKeyValueStore(path)
  - MemoryKeyValueStore()
DEPENDENCIES:
  - json, os, tempfile, pathlib (stdlib)
  - taskpad.core.exceptions (StorageError)
NOTES:
  - Values are plain strings; callers own the encoding of what they store
  - FileKeyValueStore keeps every key in one JSON object file
  - Writes go to a temp file in the same directory, then os.replace()
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

from .exceptions import StorageError


logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal string key/value medium."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryKeyValueStore:
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class FileKeyValueStore:
    """
    JSON-file-backed store.

    The file holds a single object mapping keys to string values. A missing
    file behaves like an empty store.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Could not read {self.path}: {e}")

        if not isinstance(data, dict):
            raise StorageError(f"Storage file {self.path} is not a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            raise StorageError(f"Stored value for '{key}' is not a string")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except StorageError:
            # A corrupt file is replaced rather than blocking every write
            logger.warning("Overwriting unreadable storage file %s", self.path)
            data = {}
        data[key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=self.path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise StorageError(f"Could not write {self.path}: {e}")
