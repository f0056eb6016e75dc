# src/taskledger/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the service layer.

TaskService depends on Protocols instead of concrete implementations.
This keeps storage/access-control/notification swappable and makes testing easier.
"""

from typing import Any, Protocol


class AccessControl(Protocol):
    """Capability check for restricted operations."""

    def check(self, caller: str, action: str = "perform this action") -> None: ...
    def current_owner(self) -> str: ...
    def transfer(self, caller: str, new_owner: str) -> str: ...


class OwnerRepo(Protocol):
    """Durable slot holding the current owner identity."""

    def load_owner(self) -> str | None: ...
    def save_owner(self, owner: str) -> None: ...


class TaskRepo(Protocol):
    # Identity allocation
    def allocate(self) -> int: ...
    def insert_new(self, *, title: str, description: str) -> int: ...
    def total_count(self) -> int: ...

    # Records
    def put(self, task_id: int, *, title: str, description: str, completed: bool) -> None: ...
    def get(self, task_id: int) -> Any: ...  # Task; raises TaskNotFound
    def remove(self, task_id: int) -> None: ...
    def exists(self, task_id: int) -> bool: ...
    def list_all(self) -> list[Any]: ...
    def count_live(self) -> int: ...


class EventSink(Protocol):
    """Receives one event per successful mutation (after it is committed)."""

    def emit(self, event: Any) -> None: ...
