"""Database layer for task management using SQLite."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

import aiosqlite

from .config import DEFAULT_WAL_MODE, SCHEMA_VERSION
from .exceptions import (
    DatabaseError,
    SchemaError,
    TaskManagementError,
    TaskNotFoundError,
    TrashedTaskNotFoundError,
)
from .models import Holiday, HolidayType, Task, TaskPriority, TrashedTask

logger = logging.getLogger(__name__)

TASKS = "tasks"
TRASH = "trash"
HOLIDAYS = "holidays"
COLLECTIONS = (TASKS, TRASH, HOLIDAYS)

ChangeListener = Callable[[str], Awaitable[None]]


def _format_timestamp(value: datetime | None) -> str | None:
    """Fixed-width ISO format so SQL ordering matches datetime ordering."""
    if value is None:
        return None
    return value.isoformat(timespec="microseconds")


def _parse_timestamp(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class TaskDatabase:
    """SQLite database for tasks, trashed tasks and holidays."""

    def __init__(self, db_path: str, wal_mode: bool = DEFAULT_WAL_MODE) -> None:
        """
        Initialize database connection.

        Args:
            db_path: Path to SQLite database file (use ":memory:" for in-memory)
            wal_mode: Enable WAL mode for concurrent access
        """
        self.db_path = db_path
        self.wal_mode = wal_mode
        self._connection: aiosqlite.Connection | None = None
        self._listeners: dict[str, list[ChangeListener]] = {
            name: [] for name in COLLECTIONS
        }

    async def initialize(self) -> None:
        """Initialize database schema and connection."""
        if self._connection is None:
            self._connection = await aiosqlite.connect(self.db_path)
            self._connection.row_factory = aiosqlite.Row

            # Enable WAL mode for concurrent access (not supported in :memory:)
            if self.wal_mode and self.db_path != ":memory:":
                await self._connection.execute("PRAGMA journal_mode=WAL")

        await self._create_schema()

    async def _create_schema(self) -> None:
        """Create database schema with tables and indexes."""
        try:
            async with self._get_connection() as conn:
                await conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS schema_version (
                        version INTEGER PRIMARY KEY,
                        applied_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
                    )
                    """
                )

                cursor = await conn.execute("SELECT MAX(version) FROM schema_version")
                result = await cursor.fetchone()
                current_version = result[0] if result and result[0] else 0

                if current_version > SCHEMA_VERSION:
                    raise SchemaError(
                        f"Database schema version {current_version} is newer than "
                        f"supported version {SCHEMA_VERSION}"
                    )

                if current_version < SCHEMA_VERSION:
                    await self._apply_migrations(conn, current_version)

                await conn.commit()
        except aiosqlite.Error as e:
            raise SchemaError(f"Failed to create schema: {e}") from e

    async def _apply_migrations(
        self, conn: aiosqlite.Connection, from_version: int
    ) -> None:
        """
        Apply database migrations.

        Args:
            conn: Database connection
            from_version: Current schema version
        """
        if from_version < 1:
            # AUTOINCREMENT keeps ids from ever being reused after deletion
            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT,
                    priority TEXT NOT NULL,
                    category TEXT NOT NULL,
                    completed INTEGER NOT NULL DEFAULT 0,
                    created_at TIMESTAMP NOT NULL,
                    due_date TIMESTAMP
                )
                """
            )
            await conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_tasks_completed ON tasks(completed)"
            )
            await conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_tasks_priority ON tasks(priority)"
            )
            await conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_tasks_category ON tasks(category)"
            )
            await conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks(created_at)"
            )

            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS trashed_tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    original_task_id INTEGER NOT NULL,
                    title TEXT NOT NULL,
                    description TEXT,
                    priority TEXT NOT NULL,
                    category TEXT NOT NULL,
                    completed INTEGER NOT NULL DEFAULT 0,
                    created_at TIMESTAMP NOT NULL,
                    due_date TIMESTAMP,
                    deleted_at TIMESTAMP NOT NULL
                )
                """
            )
            await conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_trash_deleted_at "
                "ON trashed_tasks(deleted_at)"
            )

            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS holidays (
                    date TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    holiday_type TEXT NOT NULL,
                    is_recurring INTEGER NOT NULL DEFAULT 1,
                    year INTEGER NOT NULL
                )
                """
            )
            await conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_holidays_year ON holidays(year)"
            )

            await conn.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,),
            )

    @asynccontextmanager
    async def _get_connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Get database connection context manager.

        Yields:
            Database connection

        Raises:
            DatabaseError: If connection is not initialized
        """
        if self._connection is None:
            raise DatabaseError("Database not initialized")
        yield self._connection

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Run a block of statements as one unit of work.

        Commits when the block completes and rolls back on any exception,
        so multi-step moves are never observable half-applied.
        """
        async with self._get_connection() as conn:
            try:
                yield conn
            except BaseException:
                await conn.rollback()
                raise
            else:
                await conn.commit()

    async def get_schema_version(self) -> int:
        """
        Get current schema version.

        Returns:
            Schema version number
        """
        async with self._get_connection() as conn:
            cursor = await conn.execute("SELECT MAX(version) FROM schema_version")
            result = await cursor.fetchone()
            return result[0] if result and result[0] else 0

    async def close(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    # Change notification

    def subscribe(
        self, collection: str, listener: ChangeListener
    ) -> Callable[[], None]:
        """
        Register interest in a collection.

        Args:
            collection: One of "tasks", "trash" or "holidays"
            listener: Coroutine function called with the collection name
                after every committed change to it

        Returns:
            Callable that removes the listener
        """
        if collection not in self._listeners:
            raise ValueError(f"Unknown collection: {collection}")
        self._listeners[collection].append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners[collection]:
                self._listeners[collection].remove(listener)

        return unsubscribe

    async def _notify(self, *collections: str) -> None:
        """Run listeners for collections whose changes were just committed."""
        for collection in collections:
            for listener in list(self._listeners[collection]):
                try:
                    await listener(collection)
                except Exception:
                    # The write is already committed; a broken observer cannot undo it
                    logger.exception(f"Change listener for '{collection}' failed")

    async def _execute_write(
        self, action: str, query: str, params: tuple[Any, ...] | list[Any] = ()
    ) -> aiosqlite.Cursor:
        """Execute and commit a single write statement."""
        try:
            async with self._transaction() as conn:
                return await conn.execute(query, params)
        except aiosqlite.Error as e:
            raise DatabaseError(f"Failed to {action}: {e}") from e

    async def _fetch_all(
        self, query: str, params: tuple[Any, ...] | list[Any] = ()
    ) -> list[aiosqlite.Row]:
        try:
            async with self._get_connection() as conn:
                cursor = await conn.execute(query, params)
                return list(await cursor.fetchall())
        except aiosqlite.Error as e:
            raise DatabaseError(f"Query failed: {e}") from e

    async def _fetch_one(
        self, query: str, params: tuple[Any, ...] | list[Any] = ()
    ) -> aiosqlite.Row | None:
        try:
            async with self._get_connection() as conn:
                cursor = await conn.execute(query, params)
                return await cursor.fetchone()
        except aiosqlite.Error as e:
            raise DatabaseError(f"Query failed: {e}") from e

    # Active tasks

    async def insert_task(self, task: Task) -> int:
        """
        Insert a new task into the database.

        The store assigns the identity; any id already set on ``task`` is ignored.

        Args:
            task: Task to insert

        Returns:
            ID assigned to the stored task

        Raises:
            DatabaseError: If insertion fails
        """
        try:
            async with self._transaction() as conn:
                task_id = await self._insert_task_row(conn, task)
        except aiosqlite.Error as e:
            raise DatabaseError(f"Failed to insert task: {e}") from e

        await self._notify(TASKS)
        return task_id

    async def _insert_task_row(self, conn: aiosqlite.Connection, task: Task) -> int:
        cursor = await conn.execute(
            """
            INSERT INTO tasks (
                title, description, priority, category, completed,
                created_at, due_date
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                task.title,
                task.description,
                task.priority.value,
                task.category,
                int(task.completed),
                _format_timestamp(task.created_at),
                _format_timestamp(task.due_date),
            ),
        )
        if cursor.lastrowid is None:
            raise DatabaseError("Store did not assign a task id")
        return cursor.lastrowid

    async def get_task(self, task_id: int) -> Task:
        """
        Get a task by ID.

        Args:
            task_id: Task ID

        Returns:
            Task object

        Raises:
            TaskNotFoundError: If task not found
        """
        row = await self._fetch_one("SELECT * FROM tasks WHERE id = ?", (task_id,))
        if row is None:
            raise TaskNotFoundError(f"Task with ID {task_id} not found")
        return self._row_to_task(row)

    async def update_task(self, task: Task) -> None:
        """
        Update the editable fields of a stored task.

        The creation timestamp is never rewritten.

        Raises:
            TaskNotFoundError: If task not found
            DatabaseError: If update fails
        """
        cursor = await self._execute_write(
            "update task",
            """
            UPDATE tasks
            SET title = ?, description = ?, priority = ?, category = ?,
                completed = ?, due_date = ?
            WHERE id = ?
            """,
            (
                task.title,
                task.description,
                task.priority.value,
                task.category,
                int(task.completed),
                _format_timestamp(task.due_date),
                task.id,
            ),
        )
        if cursor.rowcount == 0:
            raise TaskNotFoundError(f"Task with ID {task.id} not found")
        await self._notify(TASKS)

    async def set_task_completed(self, task_id: int, completed: bool) -> None:
        """
        Set the completion flag of a task.

        Raises:
            TaskNotFoundError: If task not found
        """
        cursor = await self._execute_write(
            "update task completion",
            "UPDATE tasks SET completed = ? WHERE id = ?",
            (int(completed), task_id),
        )
        if cursor.rowcount == 0:
            raise TaskNotFoundError(f"Task with ID {task_id} not found")
        await self._notify(TASKS)

    async def delete_task(self, task_id: int) -> None:
        """
        Delete a task row.

        Raises:
            TaskNotFoundError: If task not found
        """
        cursor = await self._execute_write(
            "delete task", "DELETE FROM tasks WHERE id = ?", (task_id,)
        )
        if cursor.rowcount == 0:
            raise TaskNotFoundError(f"Task with ID {task_id} not found")
        await self._notify(TASKS)

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
            List of tasks
        """
        query = "SELECT * FROM tasks WHERE 1=1"
        params: list[Any] = []

        if completed is not None:
            query += " AND completed = ?"
            params.append(int(completed))

        if priority is not None:
            # Handle both enum and string values
            priority_value = (
                priority.value if isinstance(priority, TaskPriority) else priority
            )
            query += " AND priority = ?"
            params.append(priority_value)

        if category is not None:
            query += " AND category = ?"
            params.append(category)

        query += " ORDER BY created_at DESC"
        rows = await self._fetch_all(query, params)
        return [self._row_to_task(row) for row in rows]

    async def search_tasks(self, query: str) -> list[Task]:
        """Tasks whose title or description contains ``query``, newest first."""
        rows = await self._fetch_all(
            """
            SELECT * FROM tasks
            WHERE title LIKE '%' || ? || '%' OR description LIKE '%' || ? || '%'
            ORDER BY created_at DESC
            """,
            (query, query),
        )
        return [self._row_to_task(row) for row in rows]

    async def list_categories(self) -> list[str]:
        """Distinct task categories in alphabetical order."""
        rows = await self._fetch_all(
            "SELECT DISTINCT category FROM tasks ORDER BY category ASC"
        )
        return [row[0] for row in rows]

    async def get_statistics(self) -> dict[str, int]:
        """
        Get task statistics.

        Returns:
            Dictionary with active task counts and the trash size
        """
        async with self._get_connection() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM tasks")
            total = (await cursor.fetchone())[0]

            cursor = await conn.execute(
                "SELECT COUNT(*) FROM tasks WHERE completed = 1"
            )
            completed = (await cursor.fetchone())[0]

            cursor = await conn.execute(
                "SELECT priority, COUNT(*) FROM tasks GROUP BY priority"
            )
            priority_counts = {row[0]: row[1] for row in await cursor.fetchall()}

            cursor = await conn.execute("SELECT COUNT(*) FROM trashed_tasks")
            trashed = (await cursor.fetchone())[0]

        return {
            "total": total,
            "pending": total - completed,
            "completed": completed,
            "high": priority_counts.get(TaskPriority.HIGH.value, 0),
            "medium": priority_counts.get(TaskPriority.MEDIUM.value, 0),
            "low": priority_counts.get(TaskPriority.LOW.value, 0),
            "trashed": trashed,
        }

    # Trash

    async def insert_trashed_task(self, trashed: TrashedTask) -> int:
        """
        Insert a trash entry without touching the active tasks.

        Returns:
            ID assigned to the trash entry
        """
        try:
            async with self._transaction() as conn:
                trashed_id = await self._insert_trashed_row(conn, trashed)
        except aiosqlite.Error as e:
            raise DatabaseError(f"Failed to insert trashed task: {e}") from e

        await self._notify(TRASH)
        return trashed_id

    async def _insert_trashed_row(
        self, conn: aiosqlite.Connection, trashed: TrashedTask
    ) -> int:
        cursor = await conn.execute(
            """
            INSERT INTO trashed_tasks (
                original_task_id, title, description, priority, category,
                completed, created_at, due_date, deleted_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                trashed.original_task_id,
                trashed.title,
                trashed.description,
                trashed.priority.value,
                trashed.category,
                int(trashed.completed),
                _format_timestamp(trashed.created_at),
                _format_timestamp(trashed.due_date),
                _format_timestamp(trashed.deleted_at),
            ),
        )
        if cursor.lastrowid is None:
            raise DatabaseError("Store did not assign a trash id")
        return cursor.lastrowid

    async def move_task_to_trash(self, task_id: int, deleted_at: datetime) -> TrashedTask:
        """
        Snapshot a task into the trash and remove it from the active tasks.

        Both statements run in one transaction: a task is either fully active
        or fully trashed.

        Args:
            task_id: ID of the active task
            deleted_at: Deletion timestamp recorded on the snapshot

        Returns:
            The stored trash entry

        Raises:
            TaskNotFoundError: If task not found
            DatabaseError: If either half fails (nothing is applied)
        """
        try:
            async with self._transaction() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM tasks WHERE id = ?", (task_id,)
                )
                row = await cursor.fetchone()
                if row is None:
                    raise TaskNotFoundError(f"Task with ID {task_id} not found")

                trashed = TrashedTask.from_task(self._row_to_task(row), deleted_at)
                trashed.id = await self._insert_trashed_row(conn, trashed)
                await conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        except TaskManagementError:
            raise
        except aiosqlite.Error as e:
            raise DatabaseError(f"Failed to move task {task_id} to trash: {e}") from e

        await self._notify(TASKS, TRASH)
        return trashed

    async def move_completed_tasks_to_trash(self, deleted_at: datetime) -> int:
        """
        Move every completed task to the trash in one transaction.

        Returns:
            Number of tasks moved
        """
        try:
            async with self._transaction() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM tasks WHERE completed = 1 ORDER BY created_at DESC"
                )
                rows = await cursor.fetchall()
                for row in rows:
                    task = self._row_to_task(row)
                    await self._insert_trashed_row(
                        conn, TrashedTask.from_task(task, deleted_at)
                    )
                await conn.execute("DELETE FROM tasks WHERE completed = 1")
        except aiosqlite.Error as e:
            raise DatabaseError(f"Failed to move completed tasks to trash: {e}") from e

        if rows:
            await self._notify(TASKS, TRASH)
        return len(rows)

    async def restore_trashed_task(self, trashed_id: int) -> int:
        """
        Re-insert a trash entry as a new active task and drop it from the trash.

        The restored task gets a fresh id and keeps its original creation
        timestamp. Both statements run in one transaction.

        Returns:
            ID of the restored active task

        Raises:
            TrashedTaskNotFoundError: If the trash entry does not exist
            DatabaseError: If either half fails (nothing is applied)
        """
        try:
            async with self._transaction() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM trashed_tasks WHERE id = ?", (trashed_id,)
                )
                row = await cursor.fetchone()
                if row is None:
                    raise TrashedTaskNotFoundError(
                        f"Trashed task with ID {trashed_id} not found"
                    )

                trashed = self._row_to_trashed_task(row)
                task_id = await self._insert_task_row(conn, trashed.to_task())
                await conn.execute(
                    "DELETE FROM trashed_tasks WHERE id = ?", (trashed_id,)
                )
        except TaskManagementError:
            raise
        except aiosqlite.Error as e:
            raise DatabaseError(
                f"Failed to restore trashed task {trashed_id}: {e}"
            ) from e

        await self._notify(TASKS, TRASH)
        return task_id

    async def get_trashed_task(self, trashed_id: int) -> TrashedTask:
        """
        Get a trash entry by ID.

        Raises:
            TrashedTaskNotFoundError: If the trash entry does not exist
        """
        row = await self._fetch_one(
            "SELECT * FROM trashed_tasks WHERE id = ?", (trashed_id,)
        )
        if row is None:
            raise TrashedTaskNotFoundError(
                f"Trashed task with ID {trashed_id} not found"
            )
        return self._row_to_trashed_task(row)

    async def list_trashed_tasks(self) -> list[TrashedTask]:
        """All trash entries, most recently deleted first."""
        rows = await self._fetch_all(
            "SELECT * FROM trashed_tasks ORDER BY deleted_at DESC"
        )
        return [self._row_to_trashed_task(row) for row in rows]

    async def count_trashed_tasks(self) -> int:
        row = await self._fetch_one("SELECT COUNT(*) FROM trashed_tasks")
        return row[0] if row else 0

    async def delete_trashed_task(self, trashed_id: int) -> None:
        """
        Permanently delete one trash entry.

        Raises:
            TrashedTaskNotFoundError: If the trash entry does not exist
        """
        cursor = await self._execute_write(
            "delete trashed task",
            "DELETE FROM trashed_tasks WHERE id = ?",
            (trashed_id,),
        )
        if cursor.rowcount == 0:
            raise TrashedTaskNotFoundError(
                f"Trashed task with ID {trashed_id} not found"
            )
        await self._notify(TRASH)

    async def delete_all_trashed_tasks(self) -> int:
        """Permanently delete every trash entry. Returns the number removed."""
        cursor = await self._execute_write(
            "empty trash", "DELETE FROM trashed_tasks"
        )
        if cursor.rowcount:
            await self._notify(TRASH)
        return cursor.rowcount

    async def delete_trashed_older_than(self, threshold: datetime) -> int:
        """
        Permanently delete trash entries deleted strictly before ``threshold``.

        Returns:
            Number of entries removed
        """
        cursor = await self._execute_write(
            "purge old trashed tasks",
            "DELETE FROM trashed_tasks WHERE deleted_at < ?",
            (_format_timestamp(threshold),),
        )
        if cursor.rowcount:
            await self._notify(TRASH)
        return cursor.rowcount

    # Holidays

    async def upsert_holiday(self, holiday: Holiday) -> None:
        """Insert a holiday or replace the one already stored for its date."""
        await self.upsert_holidays([holiday])

    async def upsert_holidays(self, holidays: list[Holiday]) -> None:
        """Insert or replace holidays keyed by date."""
        try:
            async with self._transaction() as conn:
                await conn.executemany(
                    """
                    INSERT OR REPLACE INTO holidays (
                        date, name, holiday_type, is_recurring, year
                    ) VALUES (?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            h.date,
                            h.name,
                            h.holiday_type.value,
                            int(h.is_recurring),
                            h.year,
                        )
                        for h in holidays
                    ],
                )
        except aiosqlite.Error as e:
            raise DatabaseError(f"Failed to upsert holidays: {e}") from e

        await self._notify(HOLIDAYS)

    async def get_holiday(self, date: str) -> Holiday | None:
        """Holiday falling on an ISO date, or None."""
        row = await self._fetch_one(
            "SELECT * FROM holidays WHERE date = ? LIMIT 1", (date,)
        )
        return self._row_to_holiday(row) if row else None

    async def list_holidays(self) -> list[Holiday]:
        rows = await self._fetch_all("SELECT * FROM holidays ORDER BY date ASC")
        return [self._row_to_holiday(row) for row in rows]

    async def list_holidays_by_year(self, year: int) -> list[Holiday]:
        rows = await self._fetch_all(
            "SELECT * FROM holidays WHERE year = ? ORDER BY date ASC", (year,)
        )
        return [self._row_to_holiday(row) for row in rows]

    async def list_holidays_by_month(self, year: int, month: int) -> list[Holiday]:
        rows = await self._fetch_all(
            """
            SELECT * FROM holidays
            WHERE year = ? AND CAST(substr(date, 6, 2) AS INTEGER) = ?
            ORDER BY date ASC
            """,
            (year, month),
        )
        return [self._row_to_holiday(row) for row in rows]

    async def list_holidays_in_range(self, start_date: str, end_date: str) -> list[Holiday]:
        """Holidays between two ISO dates, both inclusive."""
        rows = await self._fetch_all(
            "SELECT * FROM holidays WHERE date BETWEEN ? AND ? ORDER BY date ASC",
            (start_date, end_date),
        )
        return [self._row_to_holiday(row) for row in rows]

    async def delete_all_holidays(self) -> int:
        cursor = await self._execute_write("delete holidays", "DELETE FROM holidays")
        await self._notify(HOLIDAYS)
        return cursor.rowcount

    async def delete_holidays_by_year(self, year: int) -> int:
        cursor = await self._execute_write(
            "delete holidays", "DELETE FROM holidays WHERE year = ?", (year,)
        )
        await self._notify(HOLIDAYS)
        return cursor.rowcount

    # Row conversion

    def _row_to_task(self, row: aiosqlite.Row) -> Task:
        """
        Convert database row to Task object.

        Args:
            row: Database row

        Returns:
            Task object
        """
        return Task(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            priority=TaskPriority(row["priority"]),
            category=row["category"],
            completed=bool(row["completed"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            due_date=_parse_timestamp(row["due_date"]),
        )

    def _row_to_trashed_task(self, row: aiosqlite.Row) -> TrashedTask:
        return TrashedTask(
            id=row["id"],
            original_task_id=row["original_task_id"],
            title=row["title"],
            description=row["description"],
            priority=TaskPriority(row["priority"]),
            category=row["category"],
            completed=bool(row["completed"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            due_date=_parse_timestamp(row["due_date"]),
            deleted_at=datetime.fromisoformat(row["deleted_at"]),
        )

    def _row_to_holiday(self, row: aiosqlite.Row) -> Holiday:
        return Holiday(
            date=row["date"],
            name=row["name"],
            holiday_type=HolidayType(row["holiday_type"]),
            is_recurring=bool(row["is_recurring"]),
            year=row["year"],
        )
