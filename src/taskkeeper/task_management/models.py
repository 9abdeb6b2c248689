"""Data models for task management functionality."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from .config import DEFAULT_CATEGORY


class TaskPriority(str, Enum):
    """Task priority enumeration."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


PRIORITY_RANK: dict[str, int] = {
    TaskPriority.HIGH.value: 3,
    TaskPriority.MEDIUM.value: 2,
    TaskPriority.LOW.value: 1,
}


def priority_rank(priority: TaskPriority | str) -> int:
    """Sort rank of a priority: high=3, medium=2, low=1, anything else 0."""
    value = priority.value if isinstance(priority, TaskPriority) else priority
    return PRIORITY_RANK.get(value, 0)


class TaskFilter(str, Enum):
    """Filter kinds accepted by the query pipeline."""

    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"
    HIGH_PRIORITY = "high_priority"
    MEDIUM_PRIORITY = "medium_priority"
    LOW_PRIORITY = "low_priority"


class SortOrder(str, Enum):
    """Sort orders accepted by the query pipeline."""

    DATE_DESC = "date_desc"
    DATE_ASC = "date_asc"
    PRIORITY_DESC = "priority_desc"
    PRIORITY_ASC = "priority_asc"
    TITLE_ASC = "title_asc"
    TITLE_DESC = "title_desc"


class HolidayType(str, Enum):
    """Holiday classification."""

    NATIONAL = "National"
    RELIGIOUS = "Religious"
    REGIONAL = "Regional"


@dataclass
class Task:
    """Represents an active task item."""

    title: str
    created_at: datetime = field(default_factory=datetime.now)
    description: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    category: str = DEFAULT_CATEGORY
    completed: bool = False
    due_date: datetime | None = None
    id: int | None = None


@dataclass
class TrashedTask:
    """Snapshot of a task taken when it was moved to the trash."""

    original_task_id: int
    title: str
    created_at: datetime
    deleted_at: datetime
    description: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    category: str = DEFAULT_CATEGORY
    completed: bool = False
    due_date: datetime | None = None
    id: int | None = None

    @classmethod
    def from_task(cls, task: Task, deleted_at: datetime) -> "TrashedTask":
        """Snapshot every field of an active task."""
        if task.id is None:
            raise ValueError("Cannot trash a task that was never stored")
        return cls(
            original_task_id=task.id,
            title=task.title,
            created_at=task.created_at,
            deleted_at=deleted_at,
            description=task.description,
            priority=task.priority,
            category=task.category,
            completed=task.completed,
            due_date=task.due_date,
        )

    def to_task(self) -> Task:
        """Build the active task a restore inserts (identity left to the store)."""
        return Task(
            title=self.title,
            created_at=self.created_at,
            description=self.description,
            priority=self.priority,
            category=self.category,
            completed=self.completed,
            due_date=self.due_date,
        )


@dataclass(frozen=True)
class Holiday:
    """A holiday; its ISO date string is its identity."""

    date: str
    name: str
    holiday_type: HolidayType
    year: int
    is_recurring: bool = True


@dataclass(frozen=True)
class CalendarDay:
    """One cell of a month grid."""

    day: int
    date: date
    in_displayed_month: bool
    is_today: bool = False
    is_holiday: bool = False
    holiday: Holiday | None = None
