# src/taskpod/core/controller.py

"""
View state controller.

Turns user actions into store calls and keeps the displayed collection in sync
with the service. Rules:

- every mutation (create/update/delete/execute) is followed by a full reload,
  issued only after the mutation succeeded;
- the cached collection is only ever replaced by a list the store returned,
  never patched locally;
- one action at a time: while `loading` is set, new actions are rejected;
- service errors become a single error notification and leave the cached
  collection as it was.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import StrEnum

from ..tasks.errors import InvalidTransitionError, TaskServiceError
from ..tasks.task_models import Task, TaskDraft, TaskExecution
from ..tasks.task_validation import ensure_valid
from .ports import Notifier, TaskStoreClient

logger = logging.getLogger(__name__)

BUSY_MESSAGE = "Another operation is in progress"


class ViewMode(StrEnum):
    IDLE = "idle"
    BROWSING = "browsing"
    SEARCH_ACTIVE = "search_active"
    EDITING = "editing"


@dataclass(slots=True, frozen=True)
class ViewSnapshot:
    state: ViewMode
    loading: bool
    tasks: tuple[Task, ...]
    editing: Task | None
    search_query: str | None


class ViewStateController:
    def __init__(self, client: TaskStoreClient, notifier: Notifier) -> None:
        self._client = client
        self._notifier = notifier

        # Browse mode only (IDLE/BROWSING/SEARCH_ACTIVE); editing is tracked separately.
        self._mode = ViewMode.IDLE
        self._tasks: tuple[Task, ...] = ()
        self._editing: Task | None = None
        self._search_query: str | None = None
        self._loading = False
        self._closed = False

    # ---- read side ----

    @property
    def state(self) -> ViewMode:
        return ViewMode.EDITING if self._editing is not None else self._mode

    @property
    def browse_mode(self) -> ViewMode:
        return self._mode

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    @property
    def editing(self) -> Task | None:
        return self._editing

    @property
    def search_query(self) -> str | None:
        return self._search_query

    def snapshot(self) -> ViewSnapshot:
        return ViewSnapshot(
            state=self.state,
            loading=self._loading,
            tasks=self._tasks,
            editing=self._editing,
            search_query=self._search_query,
        )

    def find_task(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def close(self) -> None:
        """Detach: results of calls still in flight are dropped when they arrive."""
        self._closed = True

    # ---- low-level helpers ----

    def _begin(self, action: str) -> bool:
        if self._loading:
            logger.info("Rejected %s: another operation is in progress", action)
            self._notifier.error(BUSY_MESSAGE)
            return False
        self._loading = True
        logger.debug("Action started: %s", action)
        return True

    def _end(self) -> None:
        self._loading = False

    def _fail(self, action: str, err: TaskServiceError) -> None:
        logger.warning("%s failed: %s", action, err.message)
        if not self._closed:
            self._notifier.error(err.message)

    async def _reload(self) -> bool:
        try:
            tasks = await self._client.list_tasks()
        except TaskServiceError as e:
            self._fail("load", e)
            return False

        if self._closed:
            return False

        self._tasks = tuple(tasks)
        self._mode = ViewMode.BROWSING
        self._search_query = None
        logger.info("Loaded %d tasks", len(self._tasks))
        self._notifier.success("Tasks loaded successfully")
        return True

    # ---- actions ----

    async def load(self) -> bool:
        if not self._begin("load"):
            return False
        try:
            return await self._reload()
        finally:
            self._end()

    async def search(self, query: str) -> bool:
        """Server-side name search. A blank query is the same as load()."""
        if not (query or "").strip():
            return await self.load()

        if not self._begin("search"):
            return False
        try:
            try:
                results = await self._client.search_by_name(query)
            except TaskServiceError as e:
                self._fail("search", e)
                return False

            if self._closed:
                return False

            self._tasks = tuple(results)
            self._mode = ViewMode.SEARCH_ACTIVE
            self._search_query = query
            logger.info("Search %r returned %d tasks", query, len(self._tasks))
            self._notifier.info(f"Found {len(self._tasks)} task(s)")
            return True
        finally:
            self._end()

    async def fetch_task(self, task_id: str) -> Task | None:
        """Fetch one task from the service. The cached collection is left alone."""
        if not self._begin("get"):
            return None
        try:
            try:
                task = await self._client.get_task(task_id)
            except TaskServiceError as e:
                self._fail("get", e)
                return None
            if self._closed:
                return None
            return task
        finally:
            self._end()

    def edit(self, task: Task) -> None:
        if self._mode == ViewMode.IDLE:
            raise InvalidTransitionError("Nothing to edit yet: load tasks first")
        if task.is_draft:
            raise ValueError("Only persisted tasks can be edited")
        self._editing = task
        logger.debug("Editing task id=%s", task.id)

    def cancel_edit(self) -> None:
        if self._editing is not None:
            logger.debug("Edit cancelled id=%s", self._editing.id)
        self._editing = None

    async def submit(self, draft: TaskDraft) -> bool:
        """
        Submit the form: update the task under edit, or create a new one.

        Raises ValidationError before anything else happens if the draft
        breaks a form rule.
        """
        draft = draft.normalized()
        ensure_valid(draft)

        target = self._editing
        if not self._begin("update" if target is not None else "create"):
            return False
        try:
            if target is not None:
                merged = replace(target, name=draft.name, owner=draft.owner, command=draft.command)
                try:
                    await self._client.update(merged)
                except TaskServiceError as e:
                    self._fail("update", e)
                    return False
                if self._closed:
                    return False
                if self._editing is not None and self._editing.id == target.id:
                    self._editing = None
                self._notifier.success(f'Task "{merged.name}" updated successfully')
            else:
                try:
                    created = await self._client.create(draft)
                except TaskServiceError as e:
                    self._fail("create", e)
                    return False
                if self._closed:
                    return False
                self._notifier.success(f'Task "{created.name}" created successfully')

            return await self._reload()
        finally:
            self._end()

    async def delete_task(self, task_id: str) -> bool:
        if not self._begin("delete"):
            return False
        try:
            try:
                await self._client.delete(task_id)
            except TaskServiceError as e:
                self._fail("delete", e)
                return False
            if self._closed:
                return False

            # A later submit would upsert the deleted task back into existence.
            if self._editing is not None and self._editing.id == task_id:
                self._editing = None

            self._notifier.success("Task deleted successfully")
            return await self._reload()
        finally:
            self._end()

    async def execute_task(self, task_id: str) -> TaskExecution | None:
        """Run a task remotely, then reload so the new history entry shows up."""
        if not self._begin("execute"):
            return None
        try:
            try:
                execution = await self._client.execute(task_id)
            except TaskServiceError as e:
                self._fail("execute", e)
                return None
            if self._closed:
                return None

            logger.info("Execution result id=%s exit_code=%s", task_id, execution.exit_code)
            self._notifier.success("Task executed successfully")
            await self._reload()
            return execution
        finally:
            self._end()
