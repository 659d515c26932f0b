# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskpod.core.controller import ViewStateController
from taskpod.core.state import AppState
from taskpod.tasks.task_models import Task
from taskpod.tasks.task_view import TableQuery

from .fakes import FakeNotifier, FakeTaskStoreClient, make_execution


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskpod",
        api_base_url="http://task-service.test/api",
        connect_timeout_seconds=1.0,
        read_timeout_seconds=1.0,
        page_size=10,
        data_dir=tmp_path,
    )


@pytest.fixture()
def seed_tasks() -> list[Task]:
    return [
        Task(id="t1", name="current-date", owner="bob", command="date"),
        Task(
            id="t2",
            name="system-info",
            owner="alice",
            command="uname -a",
            task_executions=(make_execution(1), make_execution(0)),
        ),
    ]


@pytest.fixture()
def client(seed_tasks: list[Task]) -> FakeTaskStoreClient:
    return FakeTaskStoreClient(seed_tasks)


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def controller(client: FakeTaskStoreClient, notifier: FakeNotifier) -> ViewStateController:
    return ViewStateController(client, notifier)


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    client: FakeTaskStoreClient,
    controller: ViewStateController,
) -> AppState:
    """AppState wired with the in-memory store client."""
    return AppState(
        settings=settings,
        client=client,
        controller=controller,
        table_query=TableQuery(page_size=settings.page_size),
    )
