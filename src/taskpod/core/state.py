# src/taskpod/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_view import TableQuery
from .controller import ViewStateController
from .ports import TaskStoreClient


@dataclass
class AppState:
    # Settings live on the state so commands don't read global config.
    settings: Any

    client: TaskStoreClient
    controller: ViewStateController

    # Console table view (sort / filter / page); display-only.
    table_query: TableQuery = field(default_factory=TableQuery)

    # Task id awaiting "/delete yes".
    pending_delete: str | None = None
