# src/taskpod/tasks/task_view.py

"""
Client-side display transforms over an already fetched collection.

Sorting, the executed/not-executed filter and pagination only change what is
shown. Name search is not done here: the store computes it, and its result is
displayed as-is.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from enum import StrEnum

from .task_models import Task

DEFAULT_PAGE_SIZE = 10


class SortKey(StrEnum):
    NAME = "name"
    OWNER = "owner"
    EXECUTIONS = "executions"


class ExecutionFilter(StrEnum):
    ALL = "all"
    EXECUTED = "executed"
    NOT_EXECUTED = "not-executed"


def sort_tasks(tasks: Iterable[Task], key: SortKey, *, descending: bool = False) -> list[Task]:
    # Plain str ordering: case-sensitive, code point order.
    if key == SortKey.NAME:
        return sorted(tasks, key=lambda t: t.name, reverse=descending)
    if key == SortKey.OWNER:
        return sorted(tasks, key=lambda t: t.owner, reverse=descending)
    return sorted(tasks, key=lambda t: t.execution_count, reverse=descending)


def matches_filter(task: Task, execution_filter: ExecutionFilter) -> bool:
    if execution_filter == ExecutionFilter.EXECUTED:
        return task.execution_count > 0
    if execution_filter == ExecutionFilter.NOT_EXECUTED:
        return task.execution_count == 0
    return True


def filter_tasks(tasks: Iterable[Task], execution_filter: ExecutionFilter) -> list[Task]:
    return [t for t in tasks if matches_filter(t, execution_filter)]


@dataclass(slots=True, frozen=True)
class TableQuery:
    sort_key: SortKey | None = None
    descending: bool = False
    execution_filter: ExecutionFilter = ExecutionFilter.ALL
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def with_sort(self, key: SortKey | None, *, descending: bool = False) -> TableQuery:
        return replace(self, sort_key=key, descending=descending, page=1)

    def with_filter(self, execution_filter: ExecutionFilter) -> TableQuery:
        return replace(self, execution_filter=execution_filter, page=1)

    def with_page(self, page: int) -> TableQuery:
        return replace(self, page=page)


@dataclass(slots=True, frozen=True)
class TablePage:
    rows: tuple[Task, ...]
    total: int
    page: int
    page_count: int

    def total_label(self) -> str:
        return f"Total {self.total} tasks"


def build_page(tasks: Sequence[Task], query: TableQuery) -> TablePage:
    """Filter, then sort, then cut the requested page. The page is clamped into range."""
    rows = filter_tasks(tasks, query.execution_filter)
    if query.sort_key is not None:
        rows = sort_tasks(rows, query.sort_key, descending=query.descending)

    size = max(1, int(query.page_size))
    total = len(rows)
    page_count = max(1, math.ceil(total / size))
    page = min(max(1, int(query.page)), page_count)

    start = (page - 1) * size
    return TablePage(
        rows=tuple(rows[start : start + size]),
        total=total,
        page=page,
        page_count=page_count,
    )
