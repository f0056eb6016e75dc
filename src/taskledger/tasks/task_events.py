# src/taskledger/tasks/task_events.py

from __future__ import annotations

"""
Event sinks.

TaskService emits one event per committed mutation. EventBus fans it out to
in-process subscribers; a subscriber failure is logged and never undoes or
fails the mutation that already happened.
"""

import logging
from collections.abc import Callable

from ..logging_setup import AUDIT_LOGGER
from .task_models import OwnershipTransferred, TaskCreated, TaskDeleted, TaskEvent, TaskUpdated

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger(AUDIT_LOGGER)

EventHandler = Callable[[TaskEvent], None]


class EventBus:
    """Synchronous pub-sub: handlers run in subscription order, inside emit()."""

    def __init__(self) -> None:
        self._handlers: list[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        """Register a handler; returns a callable that unsubscribes it."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def emit(self, event: TaskEvent) -> None:
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception:
                logger.exception("Event handler %r failed for %s", handler, event.kind)


def describe_event(event: TaskEvent) -> str:
    if isinstance(event, TaskCreated):
        return f"created #{event.task_id} title={event.title!r}"
    if isinstance(event, TaskUpdated):
        state = "done" if event.completed else "open"
        return f"updated #{event.task_id} title={event.title!r} status={state}"
    if isinstance(event, TaskDeleted):
        return f"deleted #{event.task_id}"
    if isinstance(event, OwnershipTransferred):
        return f"owner {event.previous_owner} -> {event.new_owner}"
    return repr(event)


def log_event(event: TaskEvent) -> None:
    """Subscriber that writes every event to the audit logger."""
    audit_logger.info("%s: %s", event.kind, describe_event(event))
