# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskledger.cli.bootstrap import create_initial_state
from taskledger.core.access import OwnerAccessControl
from taskledger.core.state import AppState
from taskledger.tasks.task_service import TaskService
from taskledger.tasks.task_store import TaskStore

from .fakes import RecordingSink

OWNER = "alice"
STRANGER = "mallory"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any local .env.
    """
    return SimpleNamespace(
        app_name="taskledger-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        owner=OWNER,
        caller=None,
    )


@pytest.fixture()
def store(tmp_path: Path) -> TaskStore:
    return TaskStore(tmp_path / "tasks.sqlite3")


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def service(store: TaskStore, sink: RecordingSink) -> TaskService:
    """
    TaskService over a real SQLite store.

    NOTE: the store is real on purpose; its existence tracking and id counter
    are part of what the service tests check.
    """
    access = OwnerAccessControl(store, initial_owner=OWNER)
    return TaskService(store, access, sink)


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    return create_initial_state(settings=settings)
