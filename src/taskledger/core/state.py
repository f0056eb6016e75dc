# src/taskledger/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_events import EventBus
from ..tasks.task_service import TaskService
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Store Settings on the state for easy access in connectors/commands.
    settings: object

    task_store: TaskStore
    events: EventBus
    tasks: TaskService

    # Identity the current session asserts (already verified by the environment).
    caller: str
