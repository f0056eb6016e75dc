# src/taskledger/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    title: str
    description: str
    completed: bool = False

    @property
    def status_label(self) -> str:
        return "done" if self.completed else "open"


# ---- events (each carries the full post-mutation field set) ----


@dataclass(frozen=True, slots=True)
class TaskCreated:
    task_id: int
    title: str
    description: str

    kind = "task_created"


@dataclass(frozen=True, slots=True)
class TaskUpdated:
    task_id: int
    title: str
    description: str
    completed: bool

    kind = "task_updated"


@dataclass(frozen=True, slots=True)
class TaskDeleted:
    task_id: int

    kind = "task_deleted"


@dataclass(frozen=True, slots=True)
class OwnershipTransferred:
    previous_owner: str
    new_owner: str

    kind = "ownership_transferred"


TaskEvent = TaskCreated | TaskUpdated | TaskDeleted | OwnershipTransferred
