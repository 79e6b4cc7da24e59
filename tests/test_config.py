"""
Tests for environment settings, repository selection and logging setup.
"""

import logging
from pathlib import Path

import pytest

from taskpad.core.config import DEFAULT_DATA_DIR, Settings, load_settings
from taskpad.core.exceptions import ConfigurationError
from taskpad.core.repository import (
    LocalTaskRepository,
    RemoteTaskRepository,
    create_repository,
)
from taskpad.core.service import open_store
from taskpad.core.storage import FileKeyValueStore
from taskpad.logging_setup import setup_logging


def test_defaults(monkeypatch):
    monkeypatch.delenv("TASKPAD_DATA_DIR")

    settings = load_settings(use_dotenv=False)

    assert settings.backend == "local"
    assert settings.data_dir == DEFAULT_DATA_DIR
    assert settings.remote_timeout == 15.0
    assert settings.log_level == "WARNING"
    assert settings.log_dir == DEFAULT_DATA_DIR / "logs"


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("TASKPAD_BACKEND", "Remote")
    monkeypatch.setenv("TASKPAD_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKPAD_REMOTE_URL", "https://records.example.test")
    monkeypatch.setenv("TASKPAD_PROJECT_ID", "proj-1")
    monkeypatch.setenv("TASKPAD_PUBLIC_KEY", "pk-123")
    monkeypatch.setenv("TASKPAD_REMOTE_TIMEOUT", "3.5")
    monkeypatch.setenv("TASKPAD_LOG_LEVEL", "debug")

    settings = load_settings(use_dotenv=False)

    assert settings.backend == "remote"
    assert settings.data_dir == tmp_path
    assert settings.remote_url == "https://records.example.test"
    assert settings.project_id == "proj-1"
    assert settings.public_key == "pk-123"
    assert settings.remote_timeout == 3.5
    assert settings.log_level == "DEBUG"


def test_bad_timeout_falls_back(monkeypatch):
    monkeypatch.setenv("TASKPAD_REMOTE_TIMEOUT", "soon")

    assert load_settings(use_dotenv=False).remote_timeout == 15.0


def test_dotenv_file_is_read(monkeypatch, tmp_path):
    """A .env in the working directory supplies missing variables."""
    # Registered so the value loaded from .env is removed afterwards
    monkeypatch.setenv("TASKPAD_PROJECT_ID", "placeholder")
    monkeypatch.delenv("TASKPAD_PROJECT_ID")
    (tmp_path / ".env").write_text("TASKPAD_PROJECT_ID=from-dotenv\n", encoding="utf-8")

    settings = load_settings()

    assert settings.project_id == "from-dotenv"


def test_create_local_repository(tmp_path):
    repo = create_repository(Settings(data_dir=tmp_path))

    assert isinstance(repo, LocalTaskRepository)
    assert isinstance(repo.storage, FileKeyValueStore)
    assert repo.storage.path == tmp_path / "storage.json"


def test_create_remote_repository():
    settings = Settings(
        backend="remote",
        remote_url="https://records.example.test",
        project_id="proj-1",
        public_key="pk-123",
    )

    repo = create_repository(settings)

    assert isinstance(repo, RemoteTaskRepository)
    assert repo.client.auth.is_authenticated
    repo.client.close()


def test_create_repository_rejects_bad_settings():
    with pytest.raises(ConfigurationError):
        create_repository(Settings(backend="sqlite"))
    with pytest.raises(ConfigurationError):
        create_repository(Settings(backend="remote"))


def test_open_store_uses_data_dir(tmp_path):
    store = open_store(Settings(data_dir=tmp_path))

    assert store.tasks == ()
    assert store.load_warning is None


def test_setup_logging_writes_file(tmp_path):
    log_dir = tmp_path / "logs"
    setup_logging(log_dir, "info")

    logging.getLogger("taskpad.test").debug("hello from test")
    for handler in logging.getLogger().handlers:
        handler.flush()

    log_file = Path(log_dir) / "taskpad.log"
    assert log_file.exists()
    assert "hello from test" in log_file.read_text(encoding="utf-8")


def test_setup_logging_replaces_handlers(tmp_path):
    setup_logging(tmp_path / "logs")
    setup_logging(tmp_path / "logs")

    assert len(logging.getLogger().handlers) == 2
