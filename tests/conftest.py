"""Shared pytest configuration and fixtures for tests."""

import sys
import io
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Fix Windows console encoding
if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from taskpad.core.repository import LocalTaskRepository
from taskpad.core.service import TaskStore
from taskpad.core.storage import MemoryKeyValueStore


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Point every test at a temporary data dir with no remote settings."""
    for name in (
        "TASKPAD_BACKEND",
        "TASKPAD_REMOTE_URL",
        "TASKPAD_PROJECT_ID",
        "TASKPAD_PUBLIC_KEY",
        "TASKPAD_REMOTE_TIMEOUT",
        "TASKPAD_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TASKPAD_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.chdir(tmp_path)
    yield tmp_path

    # CLI runs install handlers on captured streams; drop them
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


class FakeClock:
    """Deterministic clock: each call is one minute after the previous."""

    def __init__(self, start=None):
        self.now = start or datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self):
        current = self.now
        self.now = current + timedelta(minutes=1)
        return current


@pytest.fixture
def memory_storage():
    return MemoryKeyValueStore()


@pytest.fixture
def local_repo(memory_storage):
    return LocalTaskRepository(memory_storage)


@pytest.fixture
def store(local_repo):
    """Empty, loaded store on in-memory storage with a fake clock."""
    s = TaskStore(local_repo, clock=FakeClock())
    s.load()
    return s
