"""Example demonstrating MCP Server usage."""

import asyncio
import logging

from taskkeeper.task_management.mcp_server import build_server

logging.basicConfig(level=logging.INFO)


async def main() -> None:
    """Demonstrate the task, trash and calendar tools."""
    mcp_server = await build_server(":memory:")

    print("Available MCP tools:", mcp_server.get_available_tools())
    print()

    # Example 1: Add tasks
    print("=== Adding tasks ===")
    result = await mcp_server.add_task("Write documentation", priority="high")
    print(f"Add task result: {result}")
    task_id = result["task_id"]
    await mcp_server.add_task("Water plants", priority="low", category="Home")
    print()

    # Example 2: List tasks through the pipeline
    print("=== Listing tasks by priority ===")
    result = await mcp_server.list_tasks(sort="priority_desc")
    print(f"Tasks: {result['tasks']}")
    print()

    # Example 3: Move a task to the trash
    print("=== Deleting task ===")
    result = await mcp_server.delete_task(task_id)
    print(f"Delete result: {result}")
    trash_id = result["trash_id"]
    print(f"Trash: {(await mcp_server.list_trash())['trash']}")
    print()

    # Example 4: Restore it
    print("=== Restoring task ===")
    result = await mcp_server.restore_task(trash_id)
    print(f"Restore result: {result}")
    print()

    # Example 5: Statistics
    print("=== Getting task statistics ===")
    print(f"Statistics: {await mcp_server.get_task_statistics()}")
    print()

    # Example 6: Month calendar with holidays
    print("=== April 2025 holidays ===")
    result = await mcp_server.month_calendar(2025, 4)
    print([day["date"] for day in result["days"] if day["is_holiday"]])

    await mcp_server.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
