"""Soft-delete lifecycle: active tasks <-> trash, restore and purge."""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from .config import DEFAULT_TRASH_RETENTION_DAYS
from .database import TaskDatabase
from .models import Task, TrashedTask

logger = logging.getLogger(__name__)


class TrashManager:
    """
    Moves tasks between the active store and the trash.

    Every deletion passes through the trash; entries leave it only by
    restore (as a new task with a fresh id) or by purge. Moves are single
    store transactions, so a task is never both active and trashed, nor
    neither.
    """

    def __init__(
        self,
        database: TaskDatabase,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """
        Initialize Trash Manager.

        Args:
            database: Database holding tasks and trash
            clock: Source of deletion timestamps and of "now" for retention
        """
        self._database = database
        self._clock = clock

    async def move_to_trash(self, task: Task | int) -> TrashedTask:
        """
        Soft-delete a task.

        Args:
            task: The task (or its id) to move

        Returns:
            The trash entry holding the snapshot

        Raises:
            TaskNotFoundError: If the task is not active
            DatabaseError: If the move fails (nothing is applied)
        """
        task_id = task.id if isinstance(task, Task) else task
        if task_id is None:
            raise ValueError("Cannot trash a task that was never stored")

        trashed = await self._database.move_task_to_trash(task_id, self._clock())
        logger.info(f"Moved task {task_id} to trash as entry {trashed.id}")
        return trashed

    async def trash_completed_tasks(self) -> int:
        """
        Move every completed task to the trash.

        Returns:
            Number of tasks moved
        """
        moved = await self._database.move_completed_tasks_to_trash(self._clock())
        logger.info(f"Moved {moved} completed tasks to trash")
        return moved

    async def restore(self, trashed: TrashedTask | int) -> int:
        """
        Bring a trash entry back as an active task.

        The restored task keeps every field, including its creation
        timestamp, but gets a new id.

        Returns:
            ID of the restored task

        Raises:
            TrashedTaskNotFoundError: If the entry is no longer in the trash
            DatabaseError: If the restore fails (nothing is applied)
        """
        trashed_id = self._trashed_id(trashed)
        task_id = await self._database.restore_trashed_task(trashed_id)
        logger.info(f"Restored trash entry {trashed_id} as task {task_id}")
        return task_id

    async def purge_one(self, trashed: TrashedTask | int) -> None:
        """
        Permanently delete one trash entry.

        Raises:
            TrashedTaskNotFoundError: If the entry is no longer in the trash
        """
        trashed_id = self._trashed_id(trashed)
        await self._database.delete_trashed_task(trashed_id)
        logger.info(f"Permanently deleted trash entry {trashed_id}")

    async def purge_all(self) -> int:
        """Empty the trash. Returns the number of entries removed."""
        removed = await self._database.delete_all_trashed_tasks()
        logger.info(f"Emptied trash ({removed} entries)")
        return removed

    async def purge_older_than(self, threshold: datetime) -> int:
        """
        Permanently delete entries deleted strictly before ``threshold``.

        Returns:
            Number of entries removed
        """
        removed = await self._database.delete_trashed_older_than(threshold)
        logger.info(f"Purged {removed} trash entries deleted before {threshold}")
        return removed

    async def purge_expired(
        self, retention_days: int = DEFAULT_TRASH_RETENTION_DAYS
    ) -> int:
        """Apply the retention policy: purge entries older than N days."""
        if retention_days < 0:
            raise ValueError("retention_days must not be negative")
        return await self.purge_older_than(
            self._clock() - timedelta(days=retention_days)
        )

    async def list_trashed(self) -> list[TrashedTask]:
        """Trash entries, most recently deleted first."""
        return await self._database.list_trashed_tasks()

    async def get_trashed(self, trashed_id: int) -> TrashedTask:
        return await self._database.get_trashed_task(trashed_id)

    async def count(self) -> int:
        return await self._database.count_trashed_tasks()

    @staticmethod
    def _trashed_id(trashed: TrashedTask | int) -> int:
        trashed_id = trashed.id if isinstance(trashed, TrashedTask) else trashed
        if trashed_id is None:
            raise ValueError("Trash entry has no id")
        return trashed_id
