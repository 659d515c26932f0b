# src/taskpod/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def _parse_timestamp(raw: Any) -> datetime:
    """
    Parse a wire timestamp.

    The service sends ISO-8601 strings (with or without a trailing "Z").
    Numbers are read as epoch milliseconds. Naive values are treated as UTC.
    Anything unparseable, including out-of-range epochs, raises ValueError.
    """
    if isinstance(raw, bool) or raw is None:
        raise ValueError(f"invalid timestamp: {raw!r}")
    if isinstance(raw, (int, float)):
        try:
            return datetime.fromtimestamp(raw / 1000, tz=timezone.utc)
        except (OverflowError, OSError) as e:
            raise ValueError(f"timestamp out of range: {raw!r}") from e
    if not isinstance(raw, str) or not raw.strip():
        raise ValueError(f"invalid timestamp: {raw!r}")

    s = raw.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _format_timestamp(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(slots=True, frozen=True)
class TaskExecution:
    """One remote run of a task's command. Never modified by the client."""

    start_time: datetime
    end_time: datetime
    output: str
    exit_code: int

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    @property
    def duration_seconds(self) -> float:
        return (self.end_time - self.start_time).total_seconds()

    @classmethod
    def from_wire(cls, raw: Any) -> TaskExecution:
        if not isinstance(raw, dict):
            raise ValueError(f"task execution must be an object, got {type(raw).__name__}")
        exit_code = raw.get("exitCode")
        if isinstance(exit_code, bool) or not isinstance(exit_code, int):
            raise ValueError(f"invalid exitCode: {exit_code!r}")
        return cls(
            start_time=_parse_timestamp(raw.get("startTime")),
            end_time=_parse_timestamp(raw.get("endTime")),
            output=str(raw.get("output") or ""),
            exit_code=exit_code,
        )

    def to_wire(self) -> dict[str, Any]:
        return {
            "startTime": _format_timestamp(self.start_time),
            "endTime": _format_timestamp(self.end_time),
            "output": self.output,
            "exitCode": self.exit_code,
        }


@dataclass(slots=True, frozen=True)
class TaskDraft:
    """Form data for creating or updating a task."""

    name: str
    owner: str
    command: str

    def normalized(self) -> TaskDraft:
        return TaskDraft(
            name=self.name.strip(),
            owner=self.owner.strip(),
            command=self.command.strip(),
        )


@dataclass(slots=True, frozen=True)
class Task:
    name: str
    owner: str
    command: str
    id: str | None = None

    # Chronological, append-only. Only the service adds entries.
    task_executions: tuple[TaskExecution, ...] = field(default_factory=tuple)

    @property
    def is_draft(self) -> bool:
        return not self.id

    @property
    def execution_count(self) -> int:
        return len(self.task_executions)

    @property
    def last_execution(self) -> TaskExecution | None:
        return self.task_executions[-1] if self.task_executions else None

    def to_draft(self) -> TaskDraft:
        return TaskDraft(name=self.name, owner=self.owner, command=self.command)

    @classmethod
    def from_wire(cls, raw: Any) -> Task:
        if not isinstance(raw, dict):
            raise ValueError(f"task must be an object, got {type(raw).__name__}")

        raw_id = raw.get("id")
        executions = raw.get("taskExecutions") or []
        if not isinstance(executions, list):
            raise ValueError("taskExecutions must be a list")

        return cls(
            id=str(raw_id) if raw_id not in (None, "") else None,
            name=str(raw.get("name") or ""),
            owner=str(raw.get("owner") or ""),
            command=str(raw.get("command") or ""),
            task_executions=tuple(TaskExecution.from_wire(e) for e in executions),
        )

    def to_wire(self) -> dict[str, Any]:
        """Upsert payload. The id key is omitted for drafts so the service assigns one."""
        out: dict[str, Any] = {
            "name": self.name,
            "owner": self.owner,
            "command": self.command,
            "taskExecutions": [e.to_wire() for e in self.task_executions],
        }
        if self.id:
            out = {"id": self.id, **out}
        return out
