# src/taskledger/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.errors import TaskLedgerError
from ..core.state import AppState
from ..tasks.task_models import Task

CommandEmitter = Callable[[str], None]
CommandHandler3 = Callable[[AppState, list[str], str], str]
CommandHandler4 = Callable[[AppState, list[str], str, CommandEmitter | None], str]
CommandHandler = CommandHandler3 | CommandHandler4

logger = logging.getLogger(__name__)

_TRUE_WORDS = {"done", "completed", "true", "1", "yes", "y"}
_FALSE_WORDS = {"open", "todo", "false", "0", "no", "n"}


class CommandError(ValueError):
    """Bad command usage; the message is shown to the user as-is."""


class CommandArgs(list[str]):
    """Whitespace-split arguments that also keep the text exactly as typed."""

    def __init__(self, raw: str) -> None:
        super().__init__(raw.split())
        self.raw = raw

    def text_after(self, n: int) -> str:
        """Raw text following the first `n` tokens ('' if there is none)."""
        parts = self.raw.split(None, n)
        return parts[n] if len(parts) > n else ""


class CommandRegistry:
    """Slash-command registry used by connectors (/help, /create, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        caller: str | None = None,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Domain errors (Unauthorized, TaskNotFound, ...) and usage errors become
        replies; anything else propagates to the connector.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(None, 1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = CommandArgs(parts[1] if len(parts) > 1 else "")

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        who = caller if caller is not None else state.caller

        nparams = len(inspect.signature(handler).parameters)

        try:
            if nparams >= 4:
                h4 = cast(CommandHandler4, handler)
                return h4(state, args, who, emit)
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, who)
        except CommandError as e:
            return f"Usage: {e}"
        except TaskLedgerError as e:
            logger.debug("Command /%s rejected: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- parsing helpers ----


def _parse_id(raw: str, usage: str) -> int:
    try:
        task_id = int(raw.lstrip("#"))
    except ValueError:
        raise CommandError(usage) from None
    if task_id <= 0:
        raise CommandError(usage)
    return task_id


def _split_fields(args: list[str], skip: int = 0) -> list[str]:
    """'a  b | c d' -> ['a  b', 'c d'] (inner whitespace kept as typed)"""
    if isinstance(args, CommandArgs):
        text = args.text_after(skip)
    else:
        text = " ".join(args[skip:])
    return [p.strip() for p in text.split("|")]


def _parse_completed(raw: str, usage: str) -> bool:
    word = raw.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise CommandError(usage)


def format_task(task: Task) -> str:
    line = f"#{task.id} [{task.status_label}] {task.title}"
    if task.description:
        line += f" - {task.description}"
    return line


# ---- handlers ----


def cmd_help(state: AppState, args: list[str], caller: str) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str], caller: str) -> str:
    svc = state.tasks
    return (
        "Status:\n"
        f"  Owner: {svc.current_owner()}\n"
        f"  You are: {caller}\n"
        f"  Live tasks: {svc.live_count()}\n"
        f"  Ids issued: {svc.total_count()}"
    )


def cmd_whoami(state: AppState, args: list[str], caller: str) -> str:
    role = "owner" if caller == state.tasks.current_owner() else "reader"
    return f"You are {caller} ({role})."


def cmd_as(state: AppState, args: list[str], caller: str) -> str:
    """
    /as <identity>  -> act as another identity

    Local testing aid: the console trusts whatever identity is typed here,
    including the owner's.
    """
    if len(args) != 1:
        raise CommandError("/as <identity>")
    state.caller = args[0]
    logger.debug("Session caller switched %s -> %s", caller, state.caller)
    return f"Now acting as {state.caller}."


def cmd_create(state: AppState, args: list[str], caller: str) -> str:
    """
    /create <title> | <description>
    """
    usage = "/create <title> | <description>"
    if not args:
        raise CommandError(usage)
    fields = _split_fields(args)
    if len(fields) > 2:
        raise CommandError(usage)
    title = fields[0]
    description = fields[1] if len(fields) == 2 else ""
    task = state.tasks.create_task(caller, title, description)
    return f"Created {format_task(task)}"


def cmd_update(state: AppState, args: list[str], caller: str) -> str:
    """
    /update <id> <title> | <description> | <open|done>
    """
    usage = "/update <id> <title> | <description> | <open|done>"
    if len(args) < 2:
        raise CommandError(usage)
    task_id = _parse_id(args[0], usage)
    fields = _split_fields(args, skip=1)
    if len(fields) != 3:
        raise CommandError(usage)
    title, description, status = fields
    completed = _parse_completed(status, usage)
    task = state.tasks.update_task(caller, task_id, title, description, completed)
    return f"Updated {format_task(task)}"


def cmd_done(state: AppState, args: list[str], caller: str) -> str:
    usage = "/done <id>"
    if len(args) != 1:
        raise CommandError(usage)
    task = state.tasks.mark_completed(caller, _parse_id(args[0], usage))
    return f"Completed {format_task(task)}"


def cmd_delete(state: AppState, args: list[str], caller: str) -> str:
    usage = "/delete <id>"
    if len(args) != 1:
        raise CommandError(usage)
    task_id = _parse_id(args[0], usage)
    state.tasks.delete_task(caller, task_id)
    return f"Deleted task #{task_id}."


def cmd_get(state: AppState, args: list[str], caller: str) -> str:
    usage = "/get <id>"
    if len(args) != 1:
        raise CommandError(usage)
    return format_task(state.tasks.get_task(_parse_id(args[0], usage)))


def cmd_list(state: AppState, args: list[str], caller: str) -> str:
    tasks = state.tasks.list_tasks()
    if not tasks:
        return "No tasks."
    lines = [f"Tasks ({len(tasks)}):"]
    lines.extend(f"  {format_task(t)}" for t in tasks)
    return "\n".join(lines)


def cmd_count(state: AppState, args: list[str], caller: str) -> str:
    return f"Ids issued: {state.tasks.total_count()}"


def cmd_owner(state: AppState, args: list[str], caller: str) -> str:
    return f"Owner: {state.tasks.current_owner()}"


def cmd_transfer(
    state: AppState,
    args: list[str],
    caller: str,
    emit: CommandEmitter | None = None,
) -> str:
    """
    /transfer <new_owner>  -> hand ownership over (owner only)
    """
    if len(args) != 1:
        raise CommandError("/transfer <new_owner>")
    if emit:
        emit(f"Transferring ownership from {caller} to {args[0]}...")
    owner = state.tasks.transfer_ownership(caller, args[0])
    return f"Ownership transferred. Owner: {owner}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show owner, your identity and counters.")
registry.register("whoami", cmd_whoami, help_text="Show the identity you act as.")
registry.register(
    "as",
    cmd_as,
    help_text="Act as another identity (local testing aid, no verification): /as <identity>.",
)
registry.register("create", cmd_create, help_text="Create a task: /create <title> | <description>.", aliases=["new", "add"])
registry.register(
    "update",
    cmd_update,
    help_text="Overwrite a task: /update <id> <title> | <description> | <open|done>.",
)
registry.register("done", cmd_done, help_text="Mark a task completed: /done <id>.", aliases=["complete"])
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("get", cmd_get, help_text="Show one task: /get <id>.", aliases=["show"])
registry.register("list", cmd_list, help_text="List live tasks in id order.", aliases=["ls"])
registry.register("count", cmd_count, help_text="Show how many task ids were ever issued.")
registry.register("owner", cmd_owner, help_text="Show the current owner.")
registry.register("transfer", cmd_transfer, help_text="Transfer ownership: /transfer <new_owner>.")
