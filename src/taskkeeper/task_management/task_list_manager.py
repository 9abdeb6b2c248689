"""Task List Manager for managing active tasks with database persistence."""

import logging
from datetime import datetime

from .config import DEFAULT_CATEGORY
from .database import TaskDatabase
from .exceptions import ValidationError
from .models import Task, TaskPriority

logger = logging.getLogger(__name__)


def validate_title(title: str | None) -> str:
    """
    Normalize a task title.

    Raises:
        ValidationError: If the title is empty or whitespace only
    """
    if title is None or not title.strip():
        raise ValidationError("Task title must not be empty")
    return title.strip()


def normalize_category(category: str | None) -> str:
    if category is None or not category.strip():
        return DEFAULT_CATEGORY
    return category.strip()


class TaskListManager:
    """
    Manages the active task list with database persistence.

    Provides CRUD operations, completion toggling and statistics. Input is
    validated here, before anything reaches the store.
    """

    def __init__(self, database: TaskDatabase) -> None:
        """
        Initialize Task List Manager.

        Args:
            database: Database instance for task persistence
        """
        self._database = database
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize the database connection and schema."""
        logger.info("Initializing Task List Manager")
        await self._database.initialize()
        self._initialized = True

        stats = await self._database.get_statistics()
        logger.info(f"Task List Manager initialized with {stats['total']} tasks")

    async def add_task(
        self,
        title: str,
        description: str | None = None,
        priority: TaskPriority = TaskPriority.MEDIUM,
        category: str | None = None,
        due_date: datetime | None = None,
    ) -> int:
        """
        Add a new task.

        Args:
            title: Task title (required, non-empty)
            description: Optional description
            priority: Task priority
            category: Category, "General" when blank
            due_date: Optional due date

        Returns:
            ID assigned to the task by the store

        Raises:
            ValidationError: If the title is empty
            DatabaseError: If task creation fails
        """
        task = Task(
            title=validate_title(title),
            description=description or None,
            priority=TaskPriority(priority),
            category=normalize_category(category),
            due_date=due_date,
            created_at=datetime.now(),
        )

        task_id = await self._database.insert_task(task)
        logger.info(f"Added task {task_id}: {task.title}")
        return task_id

    async def get_task(self, task_id: int) -> Task:
        """
        Get a task by ID.

        Raises:
            TaskNotFoundError: If task not found
        """
        return await self._database.get_task(task_id)

    async def list_tasks(
        self,
        completed: bool | None = None,
        priority: TaskPriority | None = None,
        category: str | None = None,
    ) -> list[Task]:
        """
        List tasks with optional filters, newest first.

        Args:
            completed: Filter by completion flag
            priority: Filter by priority
            category: Filter by category

        Returns:
            List of tasks matching filters
        """
        return await self._database.list_tasks(
            completed=completed, priority=priority, category=category
        )

    async def search_tasks(self, query: str) -> list[Task]:
        return await self._database.search_tasks(query)

    async def list_categories(self) -> list[str]:
        return await self._database.list_categories()

    async def update_task(
        self,
        task_id: int,
        title: str | None = None,
        description: str | None = None,
        priority: TaskPriority | None = None,
        category: str | None = None,
        due_date: datetime | None = None,
        clear_due_date: bool = False,
    ) -> Task:
        """
        Edit the user-editable fields of a task.

        Fields left as None keep their current value. The id and the
        creation timestamp never change.

        Args:
            task_id: Task ID
            title: New title (validated when given)
            description: New description ("" clears it)
            priority: New priority
            category: New category
            due_date: New due date
            clear_due_date: Remove the due date

        Returns:
            The updated task

        Raises:
            ValidationError: If the new title is empty
            TaskNotFoundError: If task not found
            DatabaseError: If update fails
        """
        if title is not None:
            title = validate_title(title)

        task = await self._database.get_task(task_id)
        if title is not None:
            task.title = title
        if description is not None:
            task.description = description or None
        if priority is not None:
            task.priority = TaskPriority(priority)
        if category is not None:
            task.category = normalize_category(category)
        if clear_due_date:
            task.due_date = None
        elif due_date is not None:
            task.due_date = due_date

        await self._database.update_task(task)
        logger.info(f"Updated task {task_id}")
        return task

    async def toggle_completion(self, task_id: int) -> bool:
        """
        Flip the completion flag of a task.

        Returns:
            The new completion flag

        Raises:
            TaskNotFoundError: If task not found
        """
        task = await self._database.get_task(task_id)
        completed = not task.completed
        await self._database.set_task_completed(task_id, completed)

        logger.info(
            f"Marked task {task_id} as {'completed' if completed else 'pending'}"
        )
        return completed

    async def get_statistics(self) -> dict[str, int]:
        """
        Get task statistics.

        Returns:
            Dictionary with task counts:
            - total: Number of active tasks
            - pending: Number of pending tasks
            - completed: Number of completed tasks
            - high / medium / low: Counts per priority
            - trashed: Number of entries in the trash
        """
        return await self._database.get_statistics()

    async def shutdown(self) -> None:
        """
        Shutdown the manager and close database connection.

        Handles errors gracefully to ensure cleanup completes.
        """
        logger.info("Shutting down Task List Manager")
        try:
            await self._database.close()
        except Exception as e:
            logger.error(f"Error closing database: {e}")

        self._initialized = False
