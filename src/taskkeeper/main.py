"""Command-line interface for the task manager."""

import argparse
import asyncio
import os
import sys
from datetime import date, datetime

from .logging_utils import configure_logging, get_logger
from .task_management import calendar_engine
from .task_management.config import DEFAULT_DATABASE_PATH, DEFAULT_TRASH_RETENTION_DAYS
from .task_management.database import TaskDatabase
from .task_management.exceptions import TaskManagementError
from .task_management.holiday_manager import HolidayManager
from .task_management.models import CalendarDay, SortOrder, Task, TaskFilter, TaskPriority
from .task_management.query_pipeline import TaskQueryPipeline
from .task_management.task_list_manager import TaskListManager
from .task_management.trash_manager import TrashManager

logger = get_logger(__name__)

PRIORITY_MARKERS = {
    TaskPriority.HIGH: "!!!",
    TaskPriority.MEDIUM: "!! ",
    TaskPriority.LOW: "!  ",
}

WEEKDAY_LABELS = ["Mo", "Tu", "We", "Th", "Fr", "Sa", "Su"]


def format_task(task: Task) -> str:
    """One-line rendering of a task."""
    check = "[x]" if task.completed else "[ ]"
    line = f"{task.id:>4} {check} {PRIORITY_MARKERS.get(task.priority, '   ')} {task.title}"
    details = [task.category]
    if task.due_date:
        details.append(f"due {task.due_date:%Y-%m-%d}")
    return f"{line}  ({', '.join(details)})"


def format_month_grid(
    year: int,
    month: int,
    grid: list[CalendarDay],
    first_weekday: int = calendar_engine.SUNDAY,
) -> str:
    """
    Render a month grid as text.

    Holidays are marked with ``*``, today with ``>``, and days of the
    neighbouring months are shown in parentheses.
    """
    labels = [WEEKDAY_LABELS[(first_weekday + i) % 7] for i in range(7)]
    lines = [f"{date(year, month, 1):%B %Y}".center(7 * 5), " ".join(f" {d} " for d in labels)]

    for week in calendar_engine.grid_weeks(grid):
        cells = []
        for day in week:
            if not day.in_displayed_month:
                cells.append(f"({day.day:>2})")
            else:
                marker = ">" if day.is_today else " "
                suffix = "*" if day.is_holiday else " "
                cells.append(f"{marker}{day.day:>2}{suffix}")
        lines.append(" ".join(cells))

    holidays = [day.holiday for day in grid if day.holiday is not None]
    if holidays:
        lines.append("")
        for holiday in holidays:
            lines.append(f"* {holiday.date}: {holiday.name} ({holiday.holiday_type.value})")
    return "\n".join(lines)


class TaskCLI:
    """Command-line front end wiring the task services to one database."""

    def __init__(self, db_path: str = DEFAULT_DATABASE_PATH) -> None:
        """
        Initialize the CLI.

        Args:
            db_path: SQLite database path
        """
        self._database = TaskDatabase(db_path)
        self.tasks = TaskListManager(self._database)
        self.trash = TrashManager(self._database)
        self.holidays = HolidayManager(self._database)
        self.pipeline = TaskQueryPipeline(self._database)

    async def open(self) -> None:
        await self.tasks.initialize()
        await self.pipeline.initialize()

    async def close(self) -> None:
        await self.pipeline.shutdown()
        await self.tasks.shutdown()

    async def run(self, args: argparse.Namespace) -> int:
        """
        Execute one parsed command.

        Returns:
            Process exit code
        """
        handler = getattr(self, f"cmd_{args.command.replace('-', '_')}")
        return await handler(args)

    async def cmd_add(self, args: argparse.Namespace) -> int:
        task_id = await self.tasks.add_task(
            title=args.title,
            description=args.description,
            priority=TaskPriority(args.priority),
            category=args.category,
            due_date=args.due,
        )
        print(f"✅ Added task {task_id}")
        return 0

    async def cmd_list(self, args: argparse.Namespace) -> int:
        self.pipeline.set_filter(TaskFilter(args.filter))
        self.pipeline.set_search_query(args.search)
        self.pipeline.set_sort_order(SortOrder(args.sort))

        view = self.pipeline.view
        if not view:
            print("No tasks.")
        for task in view:
            print(format_task(task))
        return 0

    async def cmd_edit(self, args: argparse.Namespace) -> int:
        task = await self.tasks.update_task(
            args.task_id,
            title=args.title,
            description=args.description,
            priority=TaskPriority(args.priority) if args.priority else None,
            category=args.category,
            due_date=args.due,
            clear_due_date=args.clear_due,
        )
        print(f"✅ Updated: {format_task(task)}")
        return 0

    async def cmd_toggle(self, args: argparse.Namespace) -> int:
        completed = await self.tasks.toggle_completion(args.task_id)
        print(f"✅ Task {args.task_id} is now {'completed' if completed else 'pending'}")
        return 0

    async def cmd_delete(self, args: argparse.Namespace) -> int:
        trashed = await self.trash.move_to_trash(args.task_id)
        print(f"🗑️  Moved task {args.task_id} to trash (entry {trashed.id})")
        return 0

    async def cmd_clear_completed(self, args: argparse.Namespace) -> int:
        moved = await self.trash.trash_completed_tasks()
        print(f"🗑️  Moved {moved} completed tasks to trash")
        return 0

    async def cmd_trash(self, args: argparse.Namespace) -> int:
        entries = await self.trash.list_trashed()
        if not entries:
            print("Trash is empty.")
        for entry in entries:
            print(
                f"{entry.id:>4} {entry.title}  "
                f"(deleted {entry.deleted_at:%Y-%m-%d %H:%M}, was task {entry.original_task_id})"
            )
        return 0

    async def cmd_restore(self, args: argparse.Namespace) -> int:
        task_id = await self.trash.restore(args.trash_id)
        print(f"♻️  Restored trash entry {args.trash_id} as task {task_id}")
        return 0

    async def cmd_purge(self, args: argparse.Namespace) -> int:
        if args.all:
            removed = await self.trash.purge_all()
        elif args.older_than_days is not None:
            removed = await self.trash.purge_expired(args.older_than_days)
        elif args.trash_id is not None:
            await self.trash.purge_one(args.trash_id)
            removed = 1
        else:
            print("❌ Give a trash entry id, --all or --older-than-days")
            return 2
        print(f"🔥 Permanently deleted {removed} trash entries")
        return 0

    async def cmd_holidays(self, args: argparse.Namespace) -> int:
        if args.regenerate:
            holidays = await self.holidays.regenerate_year(args.year)
        else:
            holidays = await self.holidays.ensure_year(args.year)
        for holiday in holidays:
            print(f"{holiday.date}  {holiday.name} ({holiday.holiday_type.value})")
        return 0

    async def cmd_calendar(self, args: argparse.Namespace) -> int:
        first_weekday = (
            calendar_engine.MONDAY if args.monday_first else calendar_engine.SUNDAY
        )
        grid = await self.holidays.build_month_grid(
            args.year, args.month, first_weekday=first_weekday
        )
        print(format_month_grid(args.year, args.month, grid, first_weekday))
        return 0

    async def cmd_stats(self, args: argparse.Namespace) -> int:
        stats = await self.tasks.get_statistics()
        for key, value in stats.items():
            print(f"{key:>10}: {value}")
        return 0


def _parse_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid ISO date: {value}") from e


def _parse_month(value: str) -> int:
    month = int(value)
    if not 1 <= month <= 12:
        raise argparse.ArgumentTypeError("month must be in 1..12")
    return month


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="taskkeeper",
        description="Task Keeper CLI - personal tasks with trash and holiday calendar",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  taskkeeper add "Pay rent" -p high --due 2025-05-01
  taskkeeper list --filter pending --sort priority_desc
  taskkeeper list --search report
  taskkeeper delete 3                     # moves task 3 to the trash
  taskkeeper restore 1
  taskkeeper purge --older-than-days 30
  taskkeeper calendar 2025 4
  taskkeeper serve                        # MCP server over stdio
        """,
    )

    parser.add_argument(
        "--db",
        default=os.environ.get("TASKKEEPER_DB", DEFAULT_DATABASE_PATH),
        metavar="PATH",
        help="SQLite database file (default: ~/.taskkeeper/tasks.db)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging and debug information",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable trace logging (most verbose, includes all debug info)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Add a task")
    add.add_argument("title")
    add.add_argument("--description", "-d", default=None)
    add.add_argument(
        "--priority", "-p", choices=[p.value for p in TaskPriority], default="medium"
    )
    add.add_argument("--category", "-c", default=None)
    add.add_argument("--due", type=_parse_datetime, default=None, metavar="ISO_DATE")

    lst = sub.add_parser("list", help="List tasks")
    lst.add_argument("--filter", choices=[f.value for f in TaskFilter], default="all")
    lst.add_argument("--search", default="")
    lst.add_argument("--sort", choices=[s.value for s in SortOrder], default="date_desc")

    edit = sub.add_parser("edit", help="Edit a task")
    edit.add_argument("task_id", type=int)
    edit.add_argument("--title", default=None)
    edit.add_argument("--description", "-d", default=None)
    edit.add_argument("--priority", "-p", choices=[p.value for p in TaskPriority])
    edit.add_argument("--category", "-c", default=None)
    edit.add_argument("--due", type=_parse_datetime, default=None, metavar="ISO_DATE")
    edit.add_argument("--clear-due", action="store_true")

    toggle = sub.add_parser("toggle", help="Toggle a task between pending and completed")
    toggle.add_argument("task_id", type=int)

    delete = sub.add_parser("delete", help="Move a task to the trash")
    delete.add_argument("task_id", type=int)

    sub.add_parser("clear-completed", help="Move all completed tasks to the trash")
    sub.add_parser("trash", help="List the trash")

    restore = sub.add_parser("restore", help="Restore a trashed task")
    restore.add_argument("trash_id", type=int)

    purge = sub.add_parser("purge", help="Permanently delete trashed tasks")
    purge.add_argument("trash_id", type=int, nargs="?", default=None)
    purge.add_argument("--all", action="store_true")
    purge.add_argument(
        "--older-than-days",
        type=int,
        nargs="?",
        const=DEFAULT_TRASH_RETENTION_DAYS,
        default=None,
        metavar="DAYS",
    )

    holidays = sub.add_parser("holidays", help="List the holidays of a year")
    holidays.add_argument("year", type=int)
    holidays.add_argument("--regenerate", action="store_true")

    cal = sub.add_parser("calendar", help="Show a month grid with holidays")
    cal.add_argument("year", type=int)
    cal.add_argument("month", type=_parse_month)
    cal.add_argument("--monday-first", action="store_true")

    sub.add_parser("stats", help="Show task statistics")

    serve = sub.add_parser("serve", help="Run the MCP server")
    serve.add_argument("transport", nargs="?", choices=["stdio", "sse", "http"], default="stdio")

    return parser


def ensure_database_dir(db_path: str) -> None:
    """Create the parent directory of a database file."""
    db_dir = os.path.dirname(db_path)
    if db_dir and db_path != ":memory:":
        os.makedirs(db_dir, exist_ok=True)


async def main(args: argparse.Namespace) -> int:
    """Run one command against the configured database."""
    cli = TaskCLI(args.db)
    await cli.open()
    try:
        return await cli.run(args)
    except (TaskManagementError, ValueError) as e:
        logger.debug(f"Command {args.command} failed", exc_info=True)
        print(f"❌ {e}")
        return 1
    finally:
        await cli.close()


def cli_entry_with_args() -> None:
    """CLI entry point with argument parsing."""
    parser = create_argument_parser()
    args = parser.parse_args()

    configure_logging(verbose=args.verbose, trace=args.trace)
    ensure_database_dir(args.db)

    if args.command == "serve":
        from .task_management.mcp_server import run_server

        transport = "sse" if args.transport == "http" else args.transport
        run_server(transport, db_path=args.db)
        return

    try:
        sys.exit(asyncio.run(main(args)))
    except KeyboardInterrupt:
        pass  # Graceful shutdown


if __name__ == "__main__":
    cli_entry_with_args()
