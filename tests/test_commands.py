# tests/test_commands.py

from __future__ import annotations

from taskledger.cli.commands import CommandRegistry, registry

from .conftest import OWNER, STRANGER


def test_command_registry_routes_3_and_4_params(state) -> None:
    reg = CommandRegistry()
    called = {"h3": 0, "h4": 0}

    def h3(state, args, caller):
        called["h3"] += 1
        return f"h3:{caller}"

    def h4(state, args, caller, emit):
        called["h4"] += 1
        if emit is not None:
            emit("note")
        return "h4"

    reg.register("a", h3, "a")
    reg.register("b", h4, "b")

    assert reg.handle(state, "/a x") == f"h3:{OWNER}"
    assert reg.handle(state, "/a x", caller="bob") == "h3:bob"
    assert reg.handle(state, "/b y", emit=lambda _: None) == "h4"
    assert called["h3"] == 2
    assert called["h4"] == 1


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_create_list_and_get(state) -> None:
    assert registry.handle(state, "/create Buy milk | two litres") == (
        "Created #1 [open] Buy milk - two litres"
    )
    registry.handle(state, "/create Call mom")

    listing = registry.handle(state, "/list") or ""
    assert listing.splitlines() == [
        "Tasks (2):",
        "  #1 [open] Buy milk - two litres",
        "  #2 [open] Call mom",
    ]
    assert registry.handle(state, "/get 2") == "#2 [open] Call mom"


def test_update_done_delete(state) -> None:
    registry.handle(state, "/create a | b")

    assert registry.handle(state, "/update 1 New title | New desc | done") == (
        "Updated #1 [done] New title - New desc"
    )
    assert registry.handle(state, "/done 1") == "Error: task 1 is already completed"

    registry.handle(state, "/update 1 New title | New desc | open")
    assert registry.handle(state, "/done #1") == "Completed #1 [done] New title - New desc"

    assert registry.handle(state, "/delete 1") == "Deleted task #1."
    assert registry.handle(state, "/get 1") == "Error: task 1 does not exist"
    assert registry.handle(state, "/list") == "No tasks."
    assert registry.handle(state, "/count") == "Ids issued: 1"


def test_usage_errors(state) -> None:
    assert (registry.handle(state, "/create") or "").startswith("Usage: /create")
    assert (registry.handle(state, "/done abc") or "").startswith("Usage: /done")
    assert (registry.handle(state, "/get 0") or "").startswith("Usage: /get")
    assert (registry.handle(state, "/update 1 only | two") or "").startswith("Usage: /update")
    assert (registry.handle(state, "/update 1 a | b | maybe") or "").startswith("Usage: /update")


def test_identity_switch_and_unauthorized(state) -> None:
    registry.handle(state, "/create mine")

    assert registry.handle(state, f"/as {STRANGER}") == f"Now acting as {STRANGER}."
    assert registry.handle(state, "/whoami") == f"You are {STRANGER} (reader)."

    reply = registry.handle(state, "/delete 1") or ""
    assert reply.startswith("Error:")
    assert "not the owner" in reply
    # reads still work
    assert registry.handle(state, "/get 1") == "#1 [open] mine"


def test_transfer_and_status(state) -> None:
    notes: list[str] = []
    reply = registry.handle(state, "/transfer bob", emit=notes.append)
    assert reply == "Ownership transferred. Owner: bob"
    assert notes and "bob" in notes[0]
    assert registry.handle(state, "/owner") == "Owner: bob"

    status = registry.handle(state, "/status") or ""
    assert "Owner: bob" in status
    assert f"You are: {OWNER}" in status

    registry.handle(state, "/as bob")
    assert registry.handle(state, "/whoami") == "You are bob (owner)."


def test_help_lists_commands(state) -> None:
    text = registry.handle(state, "/help") or ""
    for name in ("create", "update", "done", "delete", "get", "list", "transfer"):
        assert f"/{name} " in text


def test_text_is_kept_as_typed(state) -> None:
    registry.handle(state, "/create a  b | c   d")
    task = state.tasks.get_task(1)
    assert (task.title, task.description) == ("a  b", "c   d")

    registry.handle(state, "/update 1   x    y |  z  z | open")
    task = state.tasks.get_task(1)
    assert (task.title, task.description) == ("x    y", "z  z")


def test_huge_id_is_reported_as_missing(state) -> None:
    huge = "99999999999999999999"
    assert registry.handle(state, f"/get {huge}") == f"Error: task {huge} does not exist"
    assert registry.handle(state, f"/done {huge}") == f"Error: task {huge} does not exist"
    assert registry.handle(state, f"/delete {huge}") == f"Error: task {huge} does not exist"


def test_as_is_labelled_a_testing_aid(state) -> None:
    help_line = next(
        line for line in (registry.handle(state, "/help") or "").splitlines() if "/as " in line
    )
    assert "testing aid" in help_line
