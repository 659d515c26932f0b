# src/taskpod/cli/commands.py

from __future__ import annotations

import contextlib
import logging
import shlex
from collections.abc import Awaitable, Callable

from ..core.state import AppState
from ..tasks.errors import InvalidTransitionError, ValidationError
from ..tasks.task_models import TaskDraft
from ..tasks.task_validation import ALLOWED_COMMANDS, validate_command, validate_draft
from ..tasks.task_view import ExecutionFilter, SortKey, build_page
from .render import render_details, render_execution, render_table, render_validation

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]

logger = logging.getLogger(__name__)

FORM_FIELDS = ("name", "owner", "command")


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /list, ...)."""

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

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return await handler(state, args, emit)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def render_current_table(state: AppState) -> str:
    page = build_page(state.controller.tasks, state.table_query)
    return render_table(page, state.table_query, state.controller.snapshot())


def parse_form_args(args: list[str]) -> dict[str, str]:
    """Parse ["name=x", "command=echo hi"] into a field dict. Raises ValueError."""
    out: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        key = key.strip().lower()
        if not sep or key not in FORM_FIELDS:
            raise ValueError(f"expected name=..., owner=... or command=..., got {arg!r}")
        out[key] = value
    return out


def _render_form(title: str, draft: TaskDraft) -> str:
    return (
        f"{title}\n"
        f"  name:    {draft.name}\n"
        f"  owner:   {draft.owner}\n"
        f"  command: {draft.command}\n"
        "Submit with /save name=... owner=... command=... (omitted fields keep their value)."
    )


async def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    snap = state.controller.snapshot()
    editing = snap.editing.id if snap.editing is not None else "-"
    return (
        "Status:\n"
        f"  Service: {getattr(state.settings, 'api_base_url', '?')}\n"
        f"  View: {snap.state.value}{' (loading)' if snap.loading else ''}\n"
        f"  Tasks shown: {len(snap.tasks)}\n"
        f"  Editing: {editing}\n"
        f"  Allowed commands: {', '.join(ALLOWED_COMMANDS)}"
    )


async def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    await state.controller.load()
    return render_current_table(state)


async def cmd_search(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /search <name>  -> server-side search by name
    /search         -> same as /list
    """
    await state.controller.search(" ".join(args))
    return render_current_table(state)


async def cmd_check(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    command = " ".join(args)
    err = validate_command(command)
    if err is None:
        return f"OK: '{command.strip()}' is allowed."
    return err.message


async def cmd_new(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    state.controller.cancel_edit()
    return _render_form("New task", TaskDraft(name="", owner="", command=""))


async def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) != 1:
        return "Usage: /edit <id>"
    task = state.controller.find_task(args[0])
    if task is None:
        return f"No task with id={args[0]} in the current list."
    try:
        state.controller.edit(task)
    except InvalidTransitionError as e:
        return e.message
    return _render_form(f"Editing task {task.id}", task.to_draft())


async def cmd_save(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /save name=... owner=... command=...

    Updates the task under edit, or creates a new task when nothing is being edited.
    """
    try:
        fields = parse_form_args(args)
    except ValueError as e:
        return f"Usage: /save name=... owner=... command=... ({e})"

    editing = state.controller.editing
    base = editing.to_draft() if editing is not None else TaskDraft(name="", owner="", command="")
    draft = TaskDraft(
        name=fields.get("name", base.name),
        owner=fields.get("owner", base.owner),
        command=fields.get("command", base.command),
    )

    errors = validate_draft(draft)
    if errors:
        return "Cannot save:\n" + render_validation(errors)

    try:
        ok = await state.controller.submit(draft)
    except ValidationError as e:
        return f"Cannot save: {e.message}"
    if not ok:
        return "Task not saved."
    return render_current_table(state)


async def cmd_cancel(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if state.controller.editing is None:
        return "Nothing is being edited."
    state.controller.cancel_edit()
    return "Edit cancelled."


async def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /delete <id>      -> ask for confirmation
    /delete <id> yes  -> delete
    /delete yes       -> delete the task from the last prompt
    """
    if len(args) == 1 and args[0].lower() == "yes":
        if state.pending_delete is None:
            return "Nothing to confirm. Use /delete <id> first."
        task_id = state.pending_delete
    elif len(args) == 2 and args[1].lower() == "yes":
        task_id = args[0]
    elif len(args) == 1:
        state.pending_delete = args[0]
        return (
            f"Are you sure you want to delete task {args[0]}? "
            f"Confirm with /delete {args[0]} yes."
        )
    else:
        return "Usage: /delete <id> [yes]"

    state.pending_delete = None
    await state.controller.delete_task(task_id)
    return render_current_table(state)


async def cmd_run(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) != 1:
        return "Usage: /run <id>"

    if emit:
        with contextlib.suppress(Exception):
            emit(f"Executing task {args[0]}...")

    execution = await state.controller.execute_task(args[0])
    if execution is None:
        return render_current_table(state)
    return render_execution(execution) + "\n\n" + render_current_table(state)


async def cmd_show(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) != 1:
        return "Usage: /show <id>"
    task = state.controller.find_task(args[0])
    if task is None:
        # Not in the current (possibly filtered) list; ask the service.
        task = await state.controller.fetch_task(args[0])
    if task is None:
        return f"No task with id={args[0]}."
    return render_details(task)


async def cmd_sort(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /sort name|owner|executions [asc|desc]
    /sort off
    """
    if not args:
        return "Usage: /sort name|owner|executions [asc|desc] | /sort off"

    if args[0].lower() == "off":
        state.table_query = state.table_query.with_sort(None)
        return render_current_table(state)

    try:
        key = SortKey(args[0].lower())
    except ValueError:
        return f"Unknown sort key: {args[0]}. Use name, owner or executions."

    direction = args[1].lower() if len(args) > 1 else "asc"
    if direction not in ("asc", "desc"):
        return "Sort direction must be asc or desc."

    state.table_query = state.table_query.with_sort(key, descending=direction == "desc")
    return render_current_table(state)


async def cmd_filter(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) != 1:
        return "Usage: /filter all|executed|not-executed"
    try:
        flt = ExecutionFilter(args[0].lower())
    except ValueError:
        return f"Unknown filter: {args[0]}. Use all, executed or not-executed."
    state.table_query = state.table_query.with_filter(flt)
    return render_current_table(state)


async def cmd_page(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) != 1 or not args[0].isdigit():
        return "Usage: /page <number>"
    state.table_query = state.table_query.with_page(int(args[0]))
    return render_current_table(state)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show service URL and view state.")
registry.register("list", cmd_list, help_text="Reload all tasks from the service.", aliases=["refresh", "all"])
registry.register("search", cmd_search, help_text="Search tasks by name: /search <name>.")
registry.register("check", cmd_check, help_text="Check whether a command is allowed: /check <command>.")
registry.register("new", cmd_new, help_text="Start a new task (stops editing).")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id>.")
registry.register(
    "save",
    cmd_save,
    help_text="Save the form: /save name=... owner=... command=...",
    aliases=["submit"],
)
registry.register("cancel", cmd_cancel, help_text="Cancel editing.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>, then confirm with /delete <id> yes.", aliases=["rm"])
registry.register("run", cmd_run, help_text="Execute a task remotely: /run <id>.", aliases=["exec"])
registry.register("show", cmd_show, help_text="Show task details and execution history: /show <id>.")
registry.register("sort", cmd_sort, help_text="Sort the table: /sort name|owner|executions [asc|desc] | off.")
registry.register("filter", cmd_filter, help_text="Filter the table: /filter all|executed|not-executed.")
registry.register("page", cmd_page, help_text="Show a table page: /page <n>.")
