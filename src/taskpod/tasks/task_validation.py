# src/taskpod/tasks/task_validation.py

"""
Form rules for tasks.

All checks are pure, so the console can run them on every edit for inline
feedback and the controller runs them again as the gate before submitting.
"""

from __future__ import annotations

from .errors import ValidationError, ValidationKind
from .task_models import TaskDraft

ALLOWED_COMMANDS: tuple[str, ...] = ("echo", "date", "uname", "pwd", "whoami")

NAME_MIN_LEN = 3
NAME_MAX_LEN = 100
OWNER_MIN_LEN = 2


def base_verb(command: str) -> str:
    parts = (command or "").split()
    return parts[0] if parts else ""


def validate_command(command: str) -> ValidationError | None:
    verb = base_verb(command)
    if not verb:
        return ValidationError(
            "command", ValidationKind.REQUIRED, "Please select or enter a command"
        )
    if verb not in ALLOWED_COMMANDS:
        return ValidationError(
            "command",
            ValidationKind.NOT_ALLOWED,
            f"Only these commands are allowed: {', '.join(ALLOWED_COMMANDS)}",
            allowed=ALLOWED_COMMANDS,
        )
    return None


def validate_name(name: str) -> ValidationError | None:
    value = (name or "").strip()
    if not value:
        return ValidationError("name", ValidationKind.REQUIRED, "Please enter task name")
    if len(value) < NAME_MIN_LEN:
        return ValidationError(
            "name",
            ValidationKind.TOO_SHORT,
            f"Task name must be at least {NAME_MIN_LEN} characters",
        )
    if len(value) > NAME_MAX_LEN:
        return ValidationError(
            "name",
            ValidationKind.TOO_LONG,
            f"Task name must be less than {NAME_MAX_LEN} characters",
        )
    return None


def validate_owner(owner: str) -> ValidationError | None:
    value = (owner or "").strip()
    if not value:
        return ValidationError("owner", ValidationKind.REQUIRED, "Please enter owner name")
    if len(value) < OWNER_MIN_LEN:
        return ValidationError(
            "owner",
            ValidationKind.TOO_SHORT,
            f"Owner name must be at least {OWNER_MIN_LEN} characters",
        )
    return None


def validate_draft(draft: TaskDraft) -> dict[str, ValidationError]:
    """Per-field errors in form order; empty when the draft is valid."""
    errors: dict[str, ValidationError] = {}
    for check, value in (
        (validate_name, draft.name),
        (validate_owner, draft.owner),
        (validate_command, draft.command),
    ):
        err = check(value)
        if err is not None:
            errors[err.field] = err
    return errors


def ensure_valid(draft: TaskDraft) -> None:
    """Raise the first field error, if any."""
    errors = validate_draft(draft)
    if errors:
        raise next(iter(errors.values()))
