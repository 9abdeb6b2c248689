"""Integration tests for Task List Manager with real database."""

from datetime import datetime, timedelta

import pytest

from taskkeeper.task_management.database import TaskDatabase
from taskkeeper.task_management.exceptions import TaskNotFoundError, ValidationError
from taskkeeper.task_management.models import TaskPriority
from taskkeeper.task_management.task_list_manager import TaskListManager


@pytest.mark.integration
@pytest.mark.asyncio
class TestTaskListManagerIntegration:
    """Integration tests with real in-memory database."""

    async def test_end_to_end_task_lifecycle(self):
        """Test complete task lifecycle from creation to edit and completion."""
        db = TaskDatabase(":memory:")
        manager = TaskListManager(db)
        await manager.initialize()

        try:
            due = datetime.now() + timedelta(days=7)
            task_id = await manager.add_task(
                "Complete integration test",
                description="Use the real store",
                priority=TaskPriority.HIGH,
                due_date=due,
            )

            task = await manager.get_task(task_id)
            assert task.title == "Complete integration test"
            assert task.completed is False
            assert task.category == "General"
            assert task.due_date == due
            created_at = task.created_at

            updated = await manager.update_task(
                task_id, category="QA", clear_due_date=True
            )
            assert updated.category == "QA"
            assert updated.due_date is None

            assert await manager.toggle_completion(task_id) is True
            task = await manager.get_task(task_id)
            assert task.completed is True
            assert task.created_at == created_at

            assert await manager.toggle_completion(task_id) is False
        finally:
            await manager.shutdown()

    async def test_multiple_tasks_with_filters(self):
        """Test managing multiple tasks with filtering."""
        db = TaskDatabase(":memory:")
        manager = TaskListManager(db)
        await manager.initialize()

        try:
            task_ids = []
            for i in range(5):
                task_id = await manager.add_task(
                    f"Task {i}",
                    priority=TaskPriority.HIGH if i % 2 == 0 else TaskPriority.LOW,
                    category="Even" if i % 2 == 0 else "Odd",
                )
                task_ids.append(task_id)

            await manager.toggle_completion(task_ids[0])

            assert len(await manager.list_tasks()) == 5
            assert len(await manager.list_tasks(priority=TaskPriority.HIGH)) == 3
            assert len(await manager.list_tasks(completed=True)) == 1
            assert len(await manager.list_tasks(category="Odd")) == 2
            assert await manager.list_categories() == ["Even", "Odd"]
            assert [t.title for t in await manager.search_tasks("task 3")] == ["Task 3"]

            stats = await manager.get_statistics()
            assert stats["total"] == 5
            assert stats["completed"] == 1
            assert stats["pending"] == 4
            assert stats["high"] == 3
            assert stats["low"] == 2
        finally:
            await manager.shutdown()

    async def test_invalid_input_never_reaches_store(self):
        db = TaskDatabase(":memory:")
        manager = TaskListManager(db)
        await manager.initialize()

        try:
            with pytest.raises(ValidationError):
                await manager.add_task("")
            task_id = await manager.add_task("Valid")
            with pytest.raises(ValidationError):
                await manager.update_task(task_id, title="  ")

            assert (await manager.get_task(task_id)).title == "Valid"
            with pytest.raises(TaskNotFoundError):
                await manager.toggle_completion(task_id + 1)
        finally:
            await manager.shutdown()

    async def test_persistence_across_sessions(self, tmp_path):
        """Test that tasks survive closing and reopening the database."""
        db_path = str(tmp_path / "tasks.db")

        manager = TaskListManager(TaskDatabase(db_path))
        await manager.initialize()
        task_id = await manager.add_task("Persistent task", category="Home")
        await manager.toggle_completion(task_id)
        await manager.shutdown()

        manager = TaskListManager(TaskDatabase(db_path))
        await manager.initialize()
        try:
            task = await manager.get_task(task_id)
            assert task.title == "Persistent task"
            assert task.completed is True
            assert task.category == "Home"
        finally:
            await manager.shutdown()
