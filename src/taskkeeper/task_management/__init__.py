"""Task management: active tasks, trash lifecycle, derived views and holidays."""

from .database import TaskDatabase
from .holiday_manager import HolidayManager
from .models import (
    CalendarDay,
    Holiday,
    HolidayType,
    SortOrder,
    Task,
    TaskFilter,
    TaskPriority,
    TrashedTask,
)
from .query_pipeline import TaskQueryPipeline, apply_query
from .task_list_manager import TaskListManager
from .trash_manager import TrashManager

__all__ = [
    "Task",
    "TrashedTask",
    "Holiday",
    "HolidayType",
    "CalendarDay",
    "TaskPriority",
    "TaskFilter",
    "SortOrder",
    "TaskDatabase",
    "TaskListManager",
    "TrashManager",
    "HolidayManager",
    "TaskQueryPipeline",
    "apply_query",
]
