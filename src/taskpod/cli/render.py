# src/taskpod/cli/render.py

"""Plain-text rendering of the task table and the task details view."""

from __future__ import annotations

from datetime import datetime

from ..core.controller import ViewMode, ViewSnapshot
from ..tasks.errors import ValidationError
from ..tasks.task_models import Task, TaskExecution
from ..tasks.task_status import derive_status
from ..tasks.task_view import ExecutionFilter, TablePage, TableQuery

_COLUMNS = ("ID", "Task Name", "Owner", "Command", "Status", "Executions")
_MAX_CELL = 32


def format_datetime(dt: datetime) -> str:
    return dt.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def format_duration(execution: TaskExecution) -> str:
    return f"{execution.duration_seconds:.2f}s"


def _cell(value: str) -> str:
    value = value.replace("\n", " ")
    if len(value) > _MAX_CELL:
        return value[: _MAX_CELL - 1] + "…"
    return value


def _row(task: Task) -> tuple[str, ...]:
    return (
        task.id or "-",
        task.name,
        task.owner,
        task.command,
        derive_status(task.task_executions).display(),
        str(task.execution_count),
    )


def render_table(page: TablePage, query: TableQuery, snapshot: ViewSnapshot) -> str:
    lines: list[str] = []

    if snapshot.search_query is not None:
        lines.append(f'Search results for "{snapshot.search_query}" (use /all to show all tasks)')

    if not page.rows:
        lines.append("No tasks found")
    else:
        rows = [tuple(_cell(c) for c in _row(t)) for t in page.rows]
        widths = [max(len(h), *(len(r[i]) for r in rows)) for i, h in enumerate(_COLUMNS)]
        lines.append("  ".join(h.ljust(w) for h, w in zip(_COLUMNS, widths)))
        lines.append("  ".join("-" * w for w in widths))
        for r in rows:
            lines.append("  ".join(c.ljust(w) for c, w in zip(r, widths)))

    footer = f"{page.total_label()} | page {page.page}/{page.page_count}"
    if query.sort_key is not None:
        footer += f" | sort: {query.sort_key.value} {'desc' if query.descending else 'asc'}"
    if query.execution_filter != ExecutionFilter.ALL:
        footer += f" | filter: {query.execution_filter.value}"
    if snapshot.state == ViewMode.EDITING and snapshot.editing is not None:
        footer += f" | editing: {snapshot.editing.id}"
    lines.append(footer)
    return "\n".join(lines)


def render_details(task: Task) -> str:
    lines = [
        "Task Details",
        f"  Task ID:   {task.id or '-'}",
        f"  Task Name: {task.name}",
        f"  Owner:     {task.owner}",
        f"  Command:   {task.command}",
        f"  Status:    {derive_status(task.task_executions).display()}",
    ]

    if not task.task_executions:
        lines.append("No execution history yet")
        return "\n".join(lines)

    lines.append(f"Execution History ({task.execution_count})")
    for i, ex in enumerate(task.task_executions, start=1):
        outcome = "Success" if ex.succeeded else f"Failed (Code: {ex.exit_code})"
        lines.append(f"  Execution #{i}: {outcome}")
        lines.append(f"    Start Time: {format_datetime(ex.start_time)}")
        lines.append(f"    End Time:   {format_datetime(ex.end_time)}")
        lines.append(f"    Duration:   {format_duration(ex)}")
        lines.append("    Output:")
        for out_line in (ex.output or "(no output)").splitlines() or ["(no output)"]:
            lines.append(f"      {out_line}")
    return "\n".join(lines)


def render_execution(execution: TaskExecution) -> str:
    outcome = "Success" if execution.succeeded else f"Failed (Code: {execution.exit_code})"
    output = execution.output.strip() or "(no output)"
    return f"{outcome} in {format_duration(execution)}\n{output}"


def render_validation(errors: dict[str, ValidationError]) -> str:
    return "\n".join(f"  {field}: {err.message}" for field, err in errors.items())
