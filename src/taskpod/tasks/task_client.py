# src/taskpod/tasks/task_client.py

"""
HTTP client for the remote task service.

Every call is a single request: no retries, no caching. Transport failures
become NetworkError, failure statuses become RemoteError carrying the
server's message when it sent one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar
from urllib.parse import quote

import httpx

from .errors import NetworkError, RemoteError
from .task_models import Task, TaskDraft, TaskExecution

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Fallbacks shown when the service does not explain a failure.
LOAD_FAILED = "Failed to load tasks"
GET_FAILED = "Failed to load task"
SEARCH_FAILED = "Search failed"
CREATE_FAILED = "Failed to create task"
UPDATE_FAILED = "Failed to update task"
DELETE_FAILED = "Failed to delete task"
EXECUTE_FAILED = "Failed to execute task"


def make_timeout(connect_s: float, read_s: float) -> httpx.Timeout:
    # keep read >= connect as a sane baseline
    read_s = max(read_s, connect_s)
    return httpx.Timeout(connect=connect_s, read=read_s, write=10.0, pool=connect_s)


def extract_server_message(response: httpx.Response) -> str | None:
    """
    Pull a human-readable message out of an error body.

    Accepts {"message": "..."} and {"error": {"message": "..."}}. Anything
    else (HTML error pages, empty bodies) yields None.
    """
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None

    msg = body.get("message")
    if not msg and isinstance(body.get("error"), dict):
        msg = body["error"].get("message")
    if isinstance(msg, str) and msg.strip():
        return msg.strip()
    return None


class HttpTaskStoreClient:
    """
    Async client for the task service.

    Endpoints (relative to base_url):
    - GET    /tasks                 -> all tasks
    - GET    /tasks?id=<id>         -> one task
    - GET    /tasks/search?name=<q> -> tasks matching the name (server-defined)
    - PUT    /tasks                 -> upsert (id absent => created)
    - DELETE /tasks/<id>
    - PUT    /tasks/<id>/execute    -> the new TaskExecution
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: httpx.Timeout | float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if client is not None:
            self._client = client
            self._owns_client = False
        else:
            self._client = httpx.AsyncClient(
                base_url=base_url.rstrip("/"),
                timeout=timeout if timeout is not None else make_timeout(5.0, 30.0),
                headers={"Content-Type": "application/json", "Accept": "application/json"},
                transport=transport,
            )
            self._owns_client = True
        logger.debug("HttpTaskStoreClient ready base_url=%s", self._client.base_url)

    async def __aenter__(self) -> HttpTaskStoreClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ---- low-level helpers ----

    async def _request(
        self,
        method: str,
        url: str,
        *,
        fallback: str,
        params: dict[str, str] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, url, params=params, json=json)
        except httpx.TransportError as e:
            logger.warning("%s %s failed: %s", method, url, e.__class__.__name__)
            raise NetworkError(f"{fallback}: service unreachable") from e

        if response.is_success:
            logger.debug("%s %s -> %s", method, url, response.status_code)
            return response

        server_message = extract_server_message(response)
        logger.warning(
            "%s %s -> %s (%s)",
            method,
            url,
            response.status_code,
            server_message or "no message",
        )
        raise RemoteError(
            server_message or fallback,
            status_code=response.status_code,
            server_message=server_message,
        )

    @staticmethod
    def _decode(response: httpx.Response, parse: Callable[[Any], T], *, fallback: str) -> T:
        try:
            return parse(response.json())
        except ValueError as e:
            logger.warning("Malformed response for %s: %s", response.request.url, e)
            raise RemoteError(
                f"{fallback}: malformed response", status_code=response.status_code
            ) from e

    @staticmethod
    def _task_list(raw: Any) -> list[Task]:
        if not isinstance(raw, list):
            raise ValueError("expected a list of tasks")
        return [Task.from_wire(item) for item in raw]

    # ---- public API ----

    async def list_tasks(self) -> list[Task]:
        response = await self._request("GET", "/tasks", fallback=LOAD_FAILED)
        return self._decode(response, self._task_list, fallback=LOAD_FAILED)

    async def get_task(self, task_id: str) -> Task:
        response = await self._request(
            "GET", "/tasks", params={"id": task_id}, fallback=GET_FAILED
        )
        return self._decode(response, Task.from_wire, fallback=GET_FAILED)

    async def search_by_name(self, query: str) -> list[Task]:
        response = await self._request(
            "GET", "/tasks/search", params={"name": query}, fallback=SEARCH_FAILED
        )
        return self._decode(response, self._task_list, fallback=SEARCH_FAILED)

    async def create(self, draft: TaskDraft) -> Task:
        payload = Task(name=draft.name, owner=draft.owner, command=draft.command).to_wire()
        response = await self._request("PUT", "/tasks", json=payload, fallback=CREATE_FAILED)
        task = self._decode(response, Task.from_wire, fallback=CREATE_FAILED)
        logger.info("Task created id=%s name=%s", task.id, task.name)
        return task

    async def update(self, task: Task) -> Task:
        if task.is_draft:
            raise ValueError("update requires a persisted task (id is missing)")
        response = await self._request(
            "PUT", "/tasks", json=task.to_wire(), fallback=UPDATE_FAILED
        )
        updated = self._decode(response, Task.from_wire, fallback=UPDATE_FAILED)
        logger.info("Task updated id=%s", updated.id)
        return updated

    async def delete(self, task_id: str) -> None:
        await self._request("DELETE", f"/tasks/{quote(task_id, safe='')}", fallback=DELETE_FAILED)
        logger.info("Task deleted id=%s", task_id)

    async def execute(self, task_id: str) -> TaskExecution:
        response = await self._request(
            "PUT", f"/tasks/{quote(task_id, safe='')}/execute", fallback=EXECUTE_FAILED
        )
        execution = self._decode(response, TaskExecution.from_wire, fallback=EXECUTE_FAILED)
        logger.info("Task executed id=%s exit_code=%s", task_id, execution.exit_code)
        return execution
