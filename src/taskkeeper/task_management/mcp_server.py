"""MCP Server for task management using FastMCP."""

import asyncio
import logging
import os
from datetime import datetime
from typing import Any

from fastmcp import FastMCP

from .config import (
    DEFAULT_DATABASE_PATH,
    DEFAULT_MCP_HOST,
    DEFAULT_MCP_PORT,
    DEFAULT_MCP_SERVER_NAME,
    DEFAULT_TRASH_RETENTION_DAYS,
)
from .database import TaskDatabase
from .exceptions import (
    TaskManagementError,
    TaskNotFoundError,
    TrashedTaskNotFoundError,
    ValidationError,
)
from .holiday_manager import HolidayManager
from .models import CalendarDay, Holiday, SortOrder, Task, TaskFilter, TaskPriority, TrashedTask
from .query_pipeline import TaskQueryPipeline
from .task_list_manager import TaskListManager
from .trash_manager import TrashManager

logger = logging.getLogger(__name__)

TOOL_NAMES = [
    "list_tasks",
    "add_task",
    "update_task",
    "toggle_task",
    "delete_task",
    "trash_completed_tasks",
    "list_trash",
    "restore_task",
    "purge_trash_entry",
    "empty_trash",
    "purge_old_trash",
    "get_task_statistics",
    "list_categories",
    "list_holidays",
    "month_calendar",
]


def task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "priority": task.priority.value,
        "category": task.category,
        "completed": task.completed,
        "created_at": task.created_at.isoformat(),
        "due_date": task.due_date.isoformat() if task.due_date else None,
    }


def trashed_task_to_dict(trashed: TrashedTask) -> dict[str, Any]:
    return {
        "id": trashed.id,
        "original_task_id": trashed.original_task_id,
        "title": trashed.title,
        "description": trashed.description,
        "priority": trashed.priority.value,
        "category": trashed.category,
        "completed": trashed.completed,
        "created_at": trashed.created_at.isoformat(),
        "due_date": trashed.due_date.isoformat() if trashed.due_date else None,
        "deleted_at": trashed.deleted_at.isoformat(),
    }


def holiday_to_dict(holiday: Holiday) -> dict[str, Any]:
    return {
        "date": holiday.date,
        "name": holiday.name,
        "type": holiday.holiday_type.value,
        "is_recurring": holiday.is_recurring,
        "year": holiday.year,
    }


def calendar_day_to_dict(day: CalendarDay) -> dict[str, Any]:
    return {
        "day": day.day,
        "date": day.date.isoformat(),
        "in_displayed_month": day.in_displayed_month,
        "is_today": day.is_today,
        "is_holiday": day.is_holiday,
        "holiday": day.holiday.name if day.holiday else None,
    }


def _parse_due_date(due_date: str | None) -> datetime | None:
    if not due_date:
        return None
    return datetime.fromisoformat(due_date)


class TaskMCPServer:
    """
    Tool handlers over explicitly injected task services.

    Every handler reports its outcome in the returned dictionary: store and
    validation failures come back as ``{"success": False, "error": ...}``.
    """

    def __init__(
        self,
        task_manager: TaskListManager,
        trash_manager: TrashManager,
        holiday_manager: HolidayManager,
        pipeline: TaskQueryPipeline,
        server_name: str = DEFAULT_MCP_SERVER_NAME,
        host: str = DEFAULT_MCP_HOST,
        port: int = DEFAULT_MCP_PORT,
    ) -> None:
        """Initialize MCP Server handlers."""
        self._task_manager = task_manager
        self._trash_manager = trash_manager
        self._holiday_manager = holiday_manager
        self._pipeline = pipeline
        self._server_name = server_name
        self._host = host
        self._port = port
        self._initialized = False

    async def initialize(self) -> None:
        """Start following the task store."""
        await self._pipeline.initialize()
        self._initialized = True

    async def shutdown(self) -> None:
        """Stop following the task store and close it."""
        await self._pipeline.shutdown()
        await self._task_manager.shutdown()
        self._initialized = False

    def get_available_tools(self) -> list[str]:
        """Get list of available tools."""
        return list(TOOL_NAMES)

    async def list_tasks(
        self,
        filter: str | None = None,
        query: str | None = None,
        sort: str | None = None,
    ) -> dict[str, Any]:
        """Apply the given inputs to the pipeline and return its view."""
        try:
            task_filter = TaskFilter(filter) if filter else None
        except ValueError:
            return {"success": False, "error": f"Invalid filter: {filter}"}
        try:
            sort_order = SortOrder(sort) if sort else None
        except ValueError:
            return {"success": False, "error": f"Invalid sort order: {sort}"}

        if task_filter is not None:
            self._pipeline.set_filter(task_filter)
        if query is not None:
            self._pipeline.set_search_query(query)
        if sort_order is not None:
            self._pipeline.set_sort_order(sort_order)

        return {
            "filter": self._pipeline.task_filter.value,
            "query": self._pipeline.search_query,
            "sort": self._pipeline.sort_order.value,
            "tasks": [task_to_dict(task) for task in self._pipeline.view],
        }

    async def add_task(
        self,
        title: str,
        description: str | None = None,
        priority: str = "medium",
        category: str | None = None,
        due_date: str | None = None,
    ) -> dict[str, Any]:
        try:
            task_priority = TaskPriority(priority)
        except ValueError:
            return {"success": False, "error": f"Invalid priority: {priority}"}
        try:
            parsed_due_date = _parse_due_date(due_date)
        except ValueError:
            return {"success": False, "error": f"Invalid date format: {due_date}"}

        try:
            task_id = await self._task_manager.add_task(
                title=title,
                description=description,
                priority=task_priority,
                category=category,
                due_date=parsed_due_date,
            )
            return {"success": True, "task_id": task_id}
        except ValidationError as e:
            return {"success": False, "error": str(e)}
        except TaskManagementError as e:
            logger.error(f"Error adding task: {e}")
            return {"success": False, "error": str(e)}

    async def update_task(
        self,
        task_id: int,
        title: str | None = None,
        description: str | None = None,
        priority: str | None = None,
        category: str | None = None,
        due_date: str | None = None,
    ) -> dict[str, Any]:
        try:
            task_priority = TaskPriority(priority) if priority else None
        except ValueError:
            return {"success": False, "error": f"Invalid priority: {priority}"}
        try:
            parsed_due_date = _parse_due_date(due_date)
        except ValueError:
            return {"success": False, "error": f"Invalid date format: {due_date}"}

        try:
            task = await self._task_manager.update_task(
                task_id,
                title=title,
                description=description,
                priority=task_priority,
                category=category,
                due_date=parsed_due_date,
            )
            return {"success": True, "task": task_to_dict(task)}
        except TaskNotFoundError as e:
            logger.warning(f"Task not found: {e}")
            return {"success": False, "error": str(e)}
        except TaskManagementError as e:
            logger.error(f"Error updating task: {e}")
            return {"success": False, "error": str(e)}

    async def toggle_task(self, task_id: int) -> dict[str, Any]:
        try:
            completed = await self._task_manager.toggle_completion(task_id)
            return {"success": True, "completed": completed}
        except TaskNotFoundError as e:
            logger.warning(f"Task not found: {e}")
            return {"success": False, "error": str(e)}
        except TaskManagementError as e:
            logger.error(f"Error toggling task: {e}")
            return {"success": False, "error": str(e)}

    async def delete_task(self, task_id: int) -> dict[str, Any]:
        """Move a task to the trash."""
        try:
            trashed = await self._trash_manager.move_to_trash(task_id)
            return {"success": True, "trash_id": trashed.id}
        except TaskNotFoundError as e:
            logger.warning(f"Task not found: {e}")
            return {"success": False, "error": str(e)}
        except TaskManagementError as e:
            logger.error(f"Error moving task to trash: {e}")
            return {"success": False, "error": str(e)}

    async def trash_completed_tasks(self) -> dict[str, Any]:
        try:
            moved = await self._trash_manager.trash_completed_tasks()
            return {"success": True, "moved": moved}
        except TaskManagementError as e:
            logger.error(f"Error trashing completed tasks: {e}")
            return {"success": False, "error": str(e)}

    async def list_trash(self) -> dict[str, Any]:
        try:
            entries = await self._trash_manager.list_trashed()
            return {"trash": [trashed_task_to_dict(entry) for entry in entries]}
        except TaskManagementError as e:
            logger.error(f"Error listing trash: {e}")
            return {"success": False, "error": str(e)}

    async def restore_task(self, trash_id: int) -> dict[str, Any]:
        try:
            task_id = await self._trash_manager.restore(trash_id)
            return {"success": True, "task_id": task_id}
        except TrashedTaskNotFoundError as e:
            logger.warning(f"Trash entry not found: {e}")
            return {"success": False, "error": str(e)}
        except TaskManagementError as e:
            logger.error(f"Error restoring task: {e}")
            return {"success": False, "error": str(e)}

    async def purge_trash_entry(self, trash_id: int) -> dict[str, Any]:
        try:
            await self._trash_manager.purge_one(trash_id)
            return {"success": True}
        except TrashedTaskNotFoundError as e:
            logger.warning(f"Trash entry not found: {e}")
            return {"success": False, "error": str(e)}
        except TaskManagementError as e:
            logger.error(f"Error purging trash entry: {e}")
            return {"success": False, "error": str(e)}

    async def empty_trash(self) -> dict[str, Any]:
        try:
            removed = await self._trash_manager.purge_all()
            return {"success": True, "removed": removed}
        except TaskManagementError as e:
            logger.error(f"Error emptying trash: {e}")
            return {"success": False, "error": str(e)}

    async def purge_old_trash(
        self, days: int = DEFAULT_TRASH_RETENTION_DAYS
    ) -> dict[str, Any]:
        try:
            removed = await self._trash_manager.purge_expired(days)
            return {"success": True, "removed": removed}
        except ValueError as e:
            return {"success": False, "error": str(e)}
        except TaskManagementError as e:
            logger.error(f"Error purging old trash: {e}")
            return {"success": False, "error": str(e)}

    async def get_task_statistics(self) -> dict[str, Any]:
        try:
            return await self._task_manager.get_statistics()
        except TaskManagementError as e:
            logger.error(f"Error getting task statistics: {e}")
            return {"success": False, "error": str(e)}

    async def list_categories(self) -> dict[str, Any]:
        try:
            return {"categories": await self._task_manager.list_categories()}
        except TaskManagementError as e:
            logger.error(f"Error listing categories: {e}")
            return {"success": False, "error": str(e)}

    async def list_holidays(self, year: int) -> dict[str, Any]:
        try:
            holidays = await self._holiday_manager.ensure_year(year)
            return {"year": year, "holidays": [holiday_to_dict(h) for h in holidays]}
        except TaskManagementError as e:
            logger.error(f"Error listing holidays: {e}")
            return {"success": False, "error": str(e)}

    async def month_calendar(self, year: int, month: int) -> dict[str, Any]:
        try:
            grid = await self._holiday_manager.build_month_grid(year, month)
        except ValueError as e:
            return {"success": False, "error": str(e)}
        except TaskManagementError as e:
            logger.error(f"Error building calendar: {e}")
            return {"success": False, "error": str(e)}
        return {
            "year": year,
            "month": month,
            "days": [calendar_day_to_dict(day) for day in grid],
        }


def create_mcp_server(server: TaskMCPServer) -> FastMCP:
    """Register the handlers of ``server`` as FastMCP tools."""
    mcp = FastMCP(server._server_name)

    @mcp.tool()
    async def list_tasks(
        filter: str | None = None, query: str | None = None, sort: str | None = None
    ) -> dict[str, Any]:
        """
        List active tasks through the filter/search/sort pipeline.

        Args:
            filter: all, pending, completed, high_priority, medium_priority, low_priority
            query: Case-insensitive text matched against title and description
            sort: date_desc, date_asc, priority_desc, priority_asc, title_asc, title_desc

        Returns:
            Dictionary with the applied inputs and the tasks list
        """
        return await server.list_tasks(filter=filter, query=query, sort=sort)

    @mcp.tool()
    async def add_task(
        title: str,
        description: str | None = None,
        priority: str = "medium",
        category: str | None = None,
        due_date: str | None = None,
    ) -> dict[str, Any]:
        """
        Add a new task.

        Args:
            title: Task title (required)
            description: Optional description
            priority: Task priority (low, medium, high)
            category: Category (defaults to General)
            due_date: Due date in ISO format (optional)
        """
        return await server.add_task(
            title=title,
            description=description,
            priority=priority,
            category=category,
            due_date=due_date,
        )

    @mcp.tool()
    async def update_task(
        task_id: int,
        title: str | None = None,
        description: str | None = None,
        priority: str | None = None,
        category: str | None = None,
        due_date: str | None = None,
    ) -> dict[str, Any]:
        """Edit the title, description, priority, category or due date of a task."""
        return await server.update_task(
            task_id,
            title=title,
            description=description,
            priority=priority,
            category=category,
            due_date=due_date,
        )

    @mcp.tool()
    async def toggle_task(task_id: int) -> dict[str, Any]:
        """Flip a task between pending and completed."""
        return await server.toggle_task(task_id)

    @mcp.tool()
    async def delete_task(task_id: int) -> dict[str, Any]:
        """Move a task to the trash."""
        return await server.delete_task(task_id)

    @mcp.tool()
    async def trash_completed_tasks() -> dict[str, Any]:
        """Move every completed task to the trash."""
        return await server.trash_completed_tasks()

    @mcp.tool()
    async def list_trash() -> dict[str, Any]:
        """List trashed tasks, most recently deleted first."""
        return await server.list_trash()

    @mcp.tool()
    async def restore_task(trash_id: int) -> dict[str, Any]:
        """Restore a trashed task; it comes back with a new task id."""
        return await server.restore_task(trash_id)

    @mcp.tool()
    async def purge_trash_entry(trash_id: int) -> dict[str, Any]:
        """Permanently delete one trashed task."""
        return await server.purge_trash_entry(trash_id)

    @mcp.tool()
    async def empty_trash() -> dict[str, Any]:
        """Permanently delete everything in the trash."""
        return await server.empty_trash()

    @mcp.tool()
    async def purge_old_trash(days: int = DEFAULT_TRASH_RETENTION_DAYS) -> dict[str, Any]:
        """Permanently delete trashed tasks deleted more than N days ago."""
        return await server.purge_old_trash(days)

    @mcp.tool()
    async def get_task_statistics() -> dict[str, Any]:
        """Get task counts by completion, priority and trash size."""
        return await server.get_task_statistics()

    @mcp.tool()
    async def list_categories() -> dict[str, Any]:
        """List the distinct task categories."""
        return await server.list_categories()

    @mcp.tool()
    async def list_holidays(year: int) -> dict[str, Any]:
        """List the holidays of a year."""
        return await server.list_holidays(year)

    @mcp.tool()
    async def month_calendar(year: int, month: int) -> dict[str, Any]:
        """Get the 6x7 day grid of a month with today and holidays marked."""
        return await server.month_calendar(year, month)

    return mcp


async def build_server(db_path: str = DEFAULT_DATABASE_PATH) -> TaskMCPServer:
    """Open the database and wire the services into a server."""
    database = TaskDatabase(db_path)
    task_manager = TaskListManager(database)
    await task_manager.initialize()

    server = TaskMCPServer(
        task_manager=task_manager,
        trash_manager=TrashManager(database),
        holiday_manager=HolidayManager(database),
        pipeline=TaskQueryPipeline(database),
    )
    await server.initialize()
    return server


def run_server(transport: str = "stdio", db_path: str = DEFAULT_DATABASE_PATH) -> None:
    """
    Run the MCP server.

    Args:
        transport: Transport type - "stdio" for stdio, "sse" for HTTP/SSE
        db_path: SQLite database path
    """
    server = asyncio.run(build_server(db_path))
    mcp = create_mcp_server(server)

    logger.info(f"MCP Server initialized with {len(TOOL_NAMES)} tools (transport={transport})")

    # FastMCP's run() manages its own event loop
    if transport == "stdio":
        mcp.run(transport="stdio")
    else:
        logger.info(f"Server will listen on http://{DEFAULT_MCP_HOST}:{DEFAULT_MCP_PORT}")
        mcp.run(transport="sse", host=DEFAULT_MCP_HOST, port=DEFAULT_MCP_PORT)


def cli_entry() -> None:
    """CLI entry point for the MCP server."""
    import sys

    transport_type = "stdio"
    if len(sys.argv) > 1 and sys.argv[1] in ("stdio", "sse", "http"):
        transport_type = "sse" if sys.argv[1] == "http" else sys.argv[1]

    os.makedirs(os.path.dirname(DEFAULT_DATABASE_PATH), exist_ok=True)
    run_server(transport_type)


if __name__ == "__main__":
    cli_entry()
