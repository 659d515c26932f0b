# tests/test_task_status.py

from __future__ import annotations

from taskpod.tasks.task_status import ExecutionStatus, ExecutionSummary, derive_status

from .fakes import make_execution


def test_empty_history_is_not_executed() -> None:
    assert derive_status([]) == ExecutionSummary(ExecutionStatus.NOT_EXECUTED, 0)


def test_last_run_decides_the_label() -> None:
    recovered = derive_status([make_execution(1), make_execution(0)])
    regressed = derive_status([make_execution(0), make_execution(1)])

    assert recovered == ExecutionSummary(ExecutionStatus.SUCCESS, 2)
    assert regressed == ExecutionSummary(ExecutionStatus.FAILED, 2)


def test_any_nonzero_exit_code_is_failed() -> None:
    assert derive_status([make_execution(137)]).label == ExecutionStatus.FAILED
    assert derive_status([make_execution(-1)]).label == ExecutionStatus.FAILED


def test_display_labels() -> None:
    assert derive_status([]).display() == "Not Executed"
    assert derive_status([make_execution(0)] * 3).display() == "Success (3x)"
    assert derive_status([make_execution(2)]).display() == "Failed (1x)"
