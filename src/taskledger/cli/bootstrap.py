# src/taskledger/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the store, access gate and event bus into a TaskService,
- returns an AppState for connectors.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.access import OwnerAccessControl
from ..core.state import AppState
from ..tasks.task_events import EventBus, log_event
from ..tasks.task_service import TaskService
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskStore(settings.tasks_db_path)
    access = OwnerAccessControl(store, initial_owner=settings.owner)

    events = EventBus()
    events.subscribe(log_event)

    service = TaskService(store, access, events)

    caller = getattr(settings, "caller", None) or access.current_owner()
    logger.info("Session caller=%s owner=%s", caller, access.current_owner())

    return AppState(
        settings=settings,
        task_store=store,
        events=events,
        tasks=service,
        caller=caller,
    )
