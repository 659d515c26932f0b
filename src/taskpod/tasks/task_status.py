# src/taskpod/tasks/task_status.py

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from .task_models import TaskExecution


class ExecutionStatus(StrEnum):
    NOT_EXECUTED = "not_executed"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class ExecutionSummary:
    label: ExecutionStatus
    count: int

    def display(self) -> str:
        if self.label == ExecutionStatus.NOT_EXECUTED:
            return "Not Executed"
        if self.label == ExecutionStatus.SUCCESS:
            return f"Success ({self.count}x)"
        return f"Failed ({self.count}x)"


def derive_status(executions: Sequence[TaskExecution]) -> ExecutionSummary:
    """
    Summarize an execution history.

    Only the most recent run decides the label; earlier failures or successes
    do not affect it. The count always covers the whole history.
    """
    if not executions:
        return ExecutionSummary(ExecutionStatus.NOT_EXECUTED, 0)
    last = executions[-1]
    label = ExecutionStatus.SUCCESS if last.exit_code == 0 else ExecutionStatus.FAILED
    return ExecutionSummary(label, len(executions))
