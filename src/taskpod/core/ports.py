# src/taskpod/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The controller depends on Protocols instead of concrete implementations.
This keeps the HTTP client and the console swappable and makes testing easier.
"""

from typing import Protocol

from ..tasks.task_models import Task, TaskDraft, TaskExecution


class TaskStoreClient(Protocol):
    """Async boundary to the task service. Failures raise TaskServiceError subclasses."""

    async def list_tasks(self) -> list[Task]: ...
    async def get_task(self, task_id: str) -> Task: ...
    async def search_by_name(self, query: str) -> list[Task]: ...

    async def create(self, draft: TaskDraft) -> Task: ...
    async def update(self, task: Task) -> Task: ...
    async def delete(self, task_id: str) -> None: ...
    async def execute(self, task_id: str) -> TaskExecution: ...


class Notifier(Protocol):
    """
    Transient user-facing notifications (toast-like).

    One call per finished action; the connector decides how to show it.
    """

    def success(self, text: str) -> None: ...
    def info(self, text: str) -> None: ...
    def error(self, text: str) -> None: ...
