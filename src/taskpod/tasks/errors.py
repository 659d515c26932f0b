# src/taskpod/tasks/errors.py

"""
Error taxonomy.

- ValidationError: local form-rule violation, raised before any network call.
- NetworkError / RemoteError: failures at the task service boundary.
- InvalidTransitionError: an action that the view state does not allow.
"""

from __future__ import annotations

from enum import StrEnum


class ValidationKind(StrEnum):
    REQUIRED = "required"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    NOT_ALLOWED = "not_allowed"


class TaskpodError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TaskpodError):
    def __init__(
        self,
        field: str,
        kind: ValidationKind,
        message: str,
        *,
        allowed: tuple[str, ...] = (),
    ) -> None:
        super().__init__(message)
        self.field = field
        self.kind = kind
        self.allowed = allowed

    def __repr__(self) -> str:
        return f"ValidationError(field={self.field!r}, kind={self.kind.value!r})"


class TaskServiceError(TaskpodError):
    """Base for failures talking to the task service."""


class NetworkError(TaskServiceError):
    """The request never got a response (unreachable host, timeout, ...)."""


class RemoteError(TaskServiceError):
    """The service answered with a failure status or an unreadable payload."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        server_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.server_message = server_message


class InvalidTransitionError(TaskpodError):
    pass
