# src/taskledger/tasks/task_service.py

from __future__ import annotations

"""
Task service.

Every mutating call runs the same pipeline:
    access.check(caller) -> store operation -> events.emit(event)

Reads (get/list/count/owner) are open to any caller and skip the access gate.
All calls are serialized on one lock, so a read never observes a half-applied
mutation and a create's allocate+put pair is never interleaved.
"""

import logging
import threading

from ..core.errors import AlreadyCompleted
from ..core.ports import AccessControl, EventSink, TaskRepo
from .task_models import OwnershipTransferred, Task, TaskCreated, TaskDeleted, TaskUpdated

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, store: TaskRepo, access: AccessControl, events: EventSink) -> None:
        self._store = store
        self._access = access
        self._events = events
        self._lock = threading.RLock()

    # ---- restricted ----

    def create_task(self, caller: str, title: str, description: str) -> Task:
        with self._lock:
            self._access.check(caller, "create tasks")
            task_id = self._store.insert_new(title=title, description=description)
            task = Task(id=task_id, title=title, description=description, completed=False)
            logger.info("Task created id=%s", task_id)
            self._events.emit(TaskCreated(task_id=task_id, title=title, description=description))
            return task

    def update_task(
        self,
        caller: str,
        task_id: int,
        title: str,
        description: str,
        completed: bool,
    ) -> Task:
        """Overwrite all fields, including completion (may reopen a completed task)."""
        with self._lock:
            self._access.check(caller, "update tasks")
            self._store.get(task_id)
            self._store.put(task_id, title=title, description=description, completed=completed)
            task = Task(id=task_id, title=title, description=description, completed=completed)
            logger.info("Task updated id=%s completed=%s", task_id, completed)
            self._events.emit(
                TaskUpdated(
                    task_id=task_id,
                    title=title,
                    description=description,
                    completed=completed,
                )
            )
            return task

    def mark_completed(self, caller: str, task_id: int) -> Task:
        with self._lock:
            self._access.check(caller, "complete tasks")
            current = self._store.get(task_id)
            if current.completed:
                raise AlreadyCompleted(task_id)

            self._store.put(
                task_id,
                title=current.title,
                description=current.description,
                completed=True,
            )
            task = Task(
                id=task_id,
                title=current.title,
                description=current.description,
                completed=True,
            )
            logger.info("Task completed id=%s", task_id)
            self._events.emit(
                TaskUpdated(
                    task_id=task_id,
                    title=task.title,
                    description=task.description,
                    completed=True,
                )
            )
            return task

    def delete_task(self, caller: str, task_id: int) -> None:
        with self._lock:
            self._access.check(caller, "delete tasks")
            self._store.remove(task_id)
            logger.info("Task deleted id=%s", task_id)
            self._events.emit(TaskDeleted(task_id=task_id))

    def transfer_ownership(self, caller: str, new_owner: str) -> str:
        """Returns the new owner."""
        with self._lock:
            previous = self._access.transfer(caller, new_owner)
            owner = self._access.current_owner()
            self._events.emit(OwnershipTransferred(previous_owner=previous, new_owner=owner))
            return owner

    # ---- open reads ----

    def get_task(self, task_id: int) -> Task:
        with self._lock:
            return self._store.get(task_id)

    def list_tasks(self) -> list[Task]:
        with self._lock:
            return self._store.list_all()

    def total_count(self) -> int:
        with self._lock:
            return self._store.total_count()

    def live_count(self) -> int:
        with self._lock:
            return self._store.count_live()

    def current_owner(self) -> str:
        with self._lock:
            return self._access.current_owner()
