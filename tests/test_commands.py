# tests/test_commands.py

from __future__ import annotations

import pytest

from taskpod.cli.commands import CommandRegistry, parse_form_args, registry
from taskpod.core.controller import ViewMode


@pytest.mark.asyncio
async def test_command_registry_routes_handlers_and_emit(state) -> None:
    reg = CommandRegistry()
    notes: list[str] = []

    async def handler(state, args, emit):
        if emit is not None:
            emit("note")
        return "|".join(args)

    reg.register("a", handler, "a", aliases=["alias"])

    assert await reg.handle(state, '/a x "y z"', emit=notes.append) == "x|y z"
    assert await reg.handle(state, "/ALIAS q") == "q"
    assert notes == ["note"]


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")
    assert "Empty command" in (await reg.handle(state, "/") or "")
    assert "Cannot parse" in (await reg.handle(state, '/a "unclosed') or "")


def test_parse_form_args() -> None:
    assert parse_form_args(["name=sys-info", "command=uname -a"]) == {
        "name": "sys-info",
        "command": "uname -a",
    }
    with pytest.raises(ValueError):
        parse_form_args(["colour=red"])
    with pytest.raises(ValueError):
        parse_form_args(["name"])


@pytest.mark.asyncio
async def test_list_renders_table(state) -> None:
    out = await registry.handle(state, "/list")

    assert "current-date" in out
    assert "Success (2x)" in out
    assert "Not Executed" in out
    assert "Total 2 tasks" in out


@pytest.mark.asyncio
async def test_save_creates_task_when_not_editing(state, client) -> None:
    await registry.handle(state, "/list")

    out = await registry.handle(state, '/save name=sys-info owner=alice "command=uname -a"')

    assert "sys-info" in out
    assert any(call[0] == "create" for call in client.calls)
    assert "Total 3 tasks" in out


@pytest.mark.asyncio
async def test_save_shows_inline_errors_without_calling_the_store(state, client) -> None:
    await registry.handle(state, "/list")
    client.calls.clear()

    out = await registry.handle(state, '/save name=ok-name owner=alice "command=rm -rf /"')

    assert out.startswith("Cannot save:")
    assert "Only these commands are allowed" in out
    assert client.calls == []


@pytest.mark.asyncio
async def test_edit_save_updates_only_given_fields(state, client) -> None:
    await registry.handle(state, "/list")

    form = await registry.handle(state, "/edit t1")
    assert "Editing task t1" in form
    assert state.controller.state == ViewMode.EDITING

    await registry.handle(state, "/save owner=carol")

    assert client.tasks["t1"].owner == "carol"
    assert client.tasks["t1"].command == "date"
    assert state.controller.editing is None


@pytest.mark.asyncio
async def test_cancel_and_unknown_edit_target(state) -> None:
    await registry.handle(state, "/list")

    assert "No task with id=zzz" in await registry.handle(state, "/edit zzz")
    assert await registry.handle(state, "/cancel") == "Nothing is being edited."

    await registry.handle(state, "/edit t2")
    assert await registry.handle(state, "/cancel") == "Edit cancelled."
    assert state.controller.state == ViewMode.BROWSING


@pytest.mark.asyncio
async def test_run_reports_execution_and_reloads(state, client) -> None:
    await registry.handle(state, "/list")
    emitted: list[str] = []

    out = await registry.handle(state, "/run t1", emit=emitted.append)

    assert out.startswith("Success in 0.25s")
    assert "output of date" in out
    assert emitted == ["Executing task t1..."]
    assert client.tasks["t1"].execution_count == 1


@pytest.mark.asyncio
async def test_show_renders_history(state) -> None:
    await registry.handle(state, "/list")

    out = await registry.handle(state, "/show t2")

    assert "Execution History (2)" in out
    assert "Execution #1: Failed (Code: 1)" in out
    assert "Execution #2: Success" in out
    assert "Duration:   1.00s" in out
    assert "(no output)" in out


@pytest.mark.asyncio
async def test_search_then_all(state) -> None:
    await registry.handle(state, "/list")

    out = await registry.handle(state, "/search system")
    assert 'Search results for "system"' in out
    assert "Total 1 tasks" in out

    out = await registry.handle(state, "/all")
    assert "Search results" not in out
    assert "Total 2 tasks" in out


@pytest.mark.asyncio
async def test_sort_filter_and_page(state) -> None:
    await registry.handle(state, "/list")

    out = await registry.handle(state, "/sort executions desc")
    assert out.index("system-info") < out.index("current-date")
    assert "sort: executions desc" in out

    out = await registry.handle(state, "/filter not-executed")
    assert "system-info" not in out
    assert "Total 1 tasks" in out

    assert "Unknown sort key" in await registry.handle(state, "/sort colour")
    assert "Unknown filter" in await registry.handle(state, "/filter maybe")
    assert await registry.handle(state, "/page x") == "Usage: /page <number>"


@pytest.mark.asyncio
async def test_check_gives_inline_feedback(state) -> None:
    assert (await registry.handle(state, "/check echo hello")).startswith("OK")
    assert "Only these commands are allowed" in await registry.handle(state, "/check rm -rf /")
    assert await registry.handle(state, "/check") == "Please select or enter a command"


@pytest.mark.asyncio
async def test_delete_asks_before_deleting(state, client) -> None:
    await registry.handle(state, "/list")
    client.calls.clear()

    out = await registry.handle(state, "/delete t1")

    assert out.startswith("Are you sure you want to delete task t1?")
    assert state.pending_delete == "t1"
    assert client.calls == []
    assert "t1" in client.tasks


@pytest.mark.asyncio
async def test_delete_runs_after_confirmation(state, client) -> None:
    await registry.handle(state, "/list")

    out = await registry.handle(state, "/delete t1 yes")
    assert "t1" not in client.tasks
    assert "Total 1 tasks" in out

    await registry.handle(state, "/delete t2")
    out = await registry.handle(state, "/delete yes")
    assert "t2" not in client.tasks
    assert state.pending_delete is None
    assert "Total 0 tasks" in out

    assert await registry.handle(state, "/delete yes") == "Nothing to confirm. Use /delete <id> first."


@pytest.mark.asyncio
async def test_show_fetches_tasks_outside_the_current_list(state, client) -> None:
    await registry.handle(state, "/search system")
    client.calls.clear()

    out = await registry.handle(state, "/show t1")

    assert client.calls == [("get", "t1")]
    assert "Task Name: current-date" in out
    assert "No execution history yet" in out
    assert [t.id for t in state.controller.tasks] == ["t2"]

    assert await registry.handle(state, "/show zzz") == "No task with id=zzz."
