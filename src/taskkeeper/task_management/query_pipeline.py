"""Reactive filtered/searched/sorted view over the active tasks."""

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import assert_never

from .database import TASKS, TaskDatabase
from .models import SortOrder, Task, TaskFilter, TaskPriority, priority_rank

logger = logging.getLogger(__name__)

ViewListener = Callable[[tuple[Task, ...]], None]


def filter_tasks(tasks: Iterable[Task], task_filter: TaskFilter) -> list[Task]:
    """Keep the tasks matching a filter kind. Unknown kinds are a defect."""
    match task_filter:
        case TaskFilter.ALL:
            return list(tasks)
        case TaskFilter.PENDING:
            return [t for t in tasks if not t.completed]
        case TaskFilter.COMPLETED:
            return [t for t in tasks if t.completed]
        case TaskFilter.HIGH_PRIORITY:
            return [t for t in tasks if t.priority == TaskPriority.HIGH]
        case TaskFilter.MEDIUM_PRIORITY:
            return [t for t in tasks if t.priority == TaskPriority.MEDIUM]
        case TaskFilter.LOW_PRIORITY:
            return [t for t in tasks if t.priority == TaskPriority.LOW]
        case _:
            assert_never(task_filter)


def search_tasks(tasks: Iterable[Task], query: str) -> list[Task]:
    """
    Case-insensitive substring match over title or description.

    An empty query keeps every task.
    """
    if not query:
        return list(tasks)
    needle = query.casefold()
    return [
        t
        for t in tasks
        if needle in t.title.casefold()
        or (t.description is not None and needle in t.description.casefold())
    ]


def sort_tasks(tasks: Iterable[Task], sort_order: SortOrder) -> list[Task]:
    """
    Stable sort by the selected key.

    Priority orders break ties newest-created first in both directions;
    date and title orders keep the incoming order for ties.
    """
    match sort_order:
        case SortOrder.DATE_DESC:
            return sorted(tasks, key=lambda t: t.created_at, reverse=True)
        case SortOrder.DATE_ASC:
            return sorted(tasks, key=lambda t: t.created_at)
        case SortOrder.PRIORITY_DESC:
            return sorted(
                tasks,
                key=lambda t: (priority_rank(t.priority), t.created_at),
                reverse=True,
            )
        case SortOrder.PRIORITY_ASC:
            newest_first = sorted(tasks, key=lambda t: t.created_at, reverse=True)
            return sorted(newest_first, key=lambda t: priority_rank(t.priority))
        case SortOrder.TITLE_ASC:
            return sorted(tasks, key=lambda t: t.title)
        case SortOrder.TITLE_DESC:
            return sorted(tasks, key=lambda t: t.title, reverse=True)
        case _:
            assert_never(sort_order)


def apply_query(
    tasks: Sequence[Task],
    task_filter: TaskFilter = TaskFilter.ALL,
    search_query: str = "",
    sort_order: SortOrder = SortOrder.DATE_DESC,
) -> list[Task]:
    """
    Derive a view: filter, then search, then sort.

    Pure function - no I/O.
    """
    filtered = filter_tasks(tasks, task_filter)
    searched = search_tasks(filtered, search_query)
    return sort_tasks(searched, sort_order)


class TaskQueryPipeline:
    """
    Keeps a derived task view consistent with its inputs.

    The view is recomputed from scratch whenever the filter, the search
    query, the sort order or the task snapshot changes, and swapped in as a
    single immutable tuple.
    """

    def __init__(self, database: TaskDatabase) -> None:
        """
        Initialize the pipeline.

        Args:
            database: Store the task snapshot is read from
        """
        self._database = database
        self._task_filter = TaskFilter.ALL
        self._search_query = ""
        self._sort_order = SortOrder.DATE_DESC
        self._snapshot: tuple[Task, ...] = ()
        self._view: tuple[Task, ...] = ()
        self._view_listeners: list[ViewListener] = []
        self._unsubscribe: Callable[[], None] | None = None
        self._refresh_generation = 0

    @property
    def task_filter(self) -> TaskFilter:
        return self._task_filter

    @property
    def search_query(self) -> str:
        return self._search_query

    @property
    def sort_order(self) -> SortOrder:
        return self._sort_order

    @property
    def snapshot(self) -> tuple[Task, ...]:
        return self._snapshot

    @property
    def view(self) -> tuple[Task, ...]:
        """The latest derived view."""
        return self._view

    async def initialize(self) -> None:
        """Subscribe to task changes and load the first snapshot."""
        if self._unsubscribe is None:
            self._unsubscribe = self._database.subscribe(TASKS, self._on_tasks_changed)
        await self.refresh()

    async def shutdown(self) -> None:
        """Stop following task changes."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def refresh(self) -> None:
        """
        Re-read the active tasks and recompute the view.

        If another refresh starts while this one waits on the store, this
        result is stale and gets discarded.
        """
        self._refresh_generation += 1
        generation = self._refresh_generation

        tasks = await self._database.list_tasks()

        if generation != self._refresh_generation:
            logger.debug(f"Discarding stale task snapshot (generation {generation})")
            return
        self.update_snapshot(tasks)

    async def _on_tasks_changed(self, collection: str) -> None:
        await self.refresh()

    def add_view_listener(self, listener: ViewListener) -> Callable[[], None]:
        """
        Register a callback receiving every new view.

        Returns:
            Callable that removes the listener
        """
        self._view_listeners.append(listener)

        def remove() -> None:
            if listener in self._view_listeners:
                self._view_listeners.remove(listener)

        return remove

    def set_filter(self, task_filter: TaskFilter) -> None:
        self._task_filter = TaskFilter(task_filter)
        self._recompute()

    def set_search_query(self, query: str) -> None:
        self._search_query = query
        self._recompute()

    def set_sort_order(self, sort_order: SortOrder) -> None:
        self._sort_order = SortOrder(sort_order)
        self._recompute()

    def update_snapshot(self, tasks: Iterable[Task]) -> None:
        """Replace the task snapshot and recompute the view."""
        self._snapshot = tuple(tasks)
        self._recompute()

    def _recompute(self) -> None:
        view = tuple(
            apply_query(
                self._snapshot,
                self._task_filter,
                self._search_query,
                self._sort_order,
            )
        )
        self._view = view
        logger.debug(
            f"Recomputed view: {len(view)}/{len(self._snapshot)} tasks "
            f"(filter={self._task_filter.value}, sort={self._sort_order.value}, "
            f"query={self._search_query!r})"
        )
        for listener in list(self._view_listeners):
            listener(view)
