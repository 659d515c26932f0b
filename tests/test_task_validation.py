# tests/test_task_validation.py

from __future__ import annotations

import pytest

from taskpod.tasks.errors import ValidationError, ValidationKind
from taskpod.tasks.task_models import TaskDraft
from taskpod.tasks.task_validation import (
    ALLOWED_COMMANDS,
    ensure_valid,
    validate_command,
    validate_draft,
    validate_name,
    validate_owner,
)


@pytest.mark.parametrize("command", ["echo hi", "date", "  uname -a  ", "pwd", "whoami", "echo\tx"])
def test_allowed_commands_pass(command: str) -> None:
    assert validate_command(command) is None


def test_disallowed_command_lists_the_allow_list() -> None:
    err = validate_command("rm -rf /")

    assert err is not None
    assert err.kind == ValidationKind.NOT_ALLOWED
    assert err.allowed == ALLOWED_COMMANDS
    assert err.message == "Only these commands are allowed: echo, date, uname, pwd, whoami"


def test_verb_must_match_exactly() -> None:
    assert validate_command("echoo hi") is not None
    assert validate_command("ECHO hi") is not None
    assert validate_command("/bin/echo hi") is not None


@pytest.mark.parametrize("command", ["", "   ", "\n\t"])
def test_blank_command_is_a_required_error(command: str) -> None:
    err = validate_command(command)
    assert err is not None
    assert err.kind == ValidationKind.REQUIRED
    assert err.allowed == ()


def test_name_length_bounds() -> None:
    assert validate_name("").kind == ValidationKind.REQUIRED
    assert validate_name("ab").kind == ValidationKind.TOO_SHORT
    assert validate_name("abc") is None
    assert validate_name("x" * 100) is None
    assert validate_name("x" * 101).kind == ValidationKind.TOO_LONG


def test_owner_min_length() -> None:
    assert validate_owner(" ").kind == ValidationKind.REQUIRED
    assert validate_owner("a").kind == ValidationKind.TOO_SHORT
    assert validate_owner("al") is None


def test_validate_draft_reports_every_field() -> None:
    errors = validate_draft(TaskDraft(name="x", owner="", command="ls"))

    assert list(errors) == ["name", "owner", "command"]
    assert errors["command"].kind == ValidationKind.NOT_ALLOWED


def test_ensure_valid_raises_first_error() -> None:
    ensure_valid(TaskDraft(name="sys-info", owner="alice", command="uname -a"))

    with pytest.raises(ValidationError) as exc:
        ensure_valid(TaskDraft(name="sys-info", owner="a", command="ls"))
    assert exc.value.field == "owner"
