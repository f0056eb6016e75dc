# src/taskledger/core/errors.py

"""
Domain errors.

Every failure is raised synchronously to the caller; nothing here is retried.
Transports (cli/commands.py) render TaskLedgerError subclasses as user-facing replies.
"""

from __future__ import annotations


class TaskLedgerError(Exception):
    """Base class for all domain errors."""


class Unauthorized(TaskLedgerError):
    def __init__(self, caller: str, action: str) -> None:
        super().__init__(f"{caller!r} is not the owner and may not {action}")
        self.caller = caller
        self.action = action


class TaskNotFound(TaskLedgerError, LookupError):
    def __init__(self, task_id: int) -> None:
        super().__init__(f"task {task_id} does not exist")
        self.task_id = task_id


class AlreadyCompleted(TaskLedgerError):
    def __init__(self, task_id: int) -> None:
        super().__init__(f"task {task_id} is already completed")
        self.task_id = task_id


class InvalidOwner(TaskLedgerError, ValueError):
    """Raised when an ownership transfer names an empty identity."""
