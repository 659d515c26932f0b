# src/taskpod/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the HTTP store client, the notifier and the controller into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.controller import ViewStateController
from ..core.ports import Notifier, TaskStoreClient
from ..core.state import AppState
from ..tasks.task_client import HttpTaskStoreClient, make_timeout
from ..tasks.task_view import TableQuery

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    notifier: Notifier,
    client: TaskStoreClient | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and the client injectable makes the app easier to test and
    avoids hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if client is None:
        client = HttpTaskStoreClient(
            settings.api_base_url,
            timeout=make_timeout(
                connect_s=float(settings.connect_timeout_seconds),
                read_s=float(settings.read_timeout_seconds),
            ),
        )
        logger.info("Task service: %s", settings.api_base_url)

    return AppState(
        settings=settings,
        client=client,
        controller=ViewStateController(client, notifier),
        table_query=TableQuery(page_size=int(settings.page_size)),
    )


async def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    state.controller.close()
    aclose = getattr(state.client, "aclose", None)
    if aclose is None:
        return
    try:
        await aclose()
    except Exception:
        logger.debug("Client close failed.", exc_info=True)
