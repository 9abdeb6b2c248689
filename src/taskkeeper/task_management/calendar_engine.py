"""
Pure calendar computations - no I/O dependencies.

Holiday sets are derived per year (fixed dates plus the Easter based
moveable feasts) and month grids are always 6 weeks x 7 days.
"""

import calendar
from collections.abc import Iterable
from datetime import date, timedelta

from .config import CALENDAR_GRID_SIZE
from .models import CalendarDay, Holiday, HolidayType

SUNDAY = calendar.SUNDAY
MONDAY = calendar.MONDAY

# (month, day, name, classification)
FIXED_HOLIDAYS: tuple[tuple[int, int, str, HolidayType], ...] = (
    (1, 1, "New Year's Day", HolidayType.NATIONAL),
    (5, 1, "Labour Day", HolidayType.NATIONAL),
    (5, 21, "Navy Day", HolidayType.NATIONAL),
    (9, 18, "Independence Day", HolidayType.NATIONAL),
    (9, 19, "Army Day", HolidayType.NATIONAL),
    (7, 16, "Our Lady of Mount Carmel", HolidayType.RELIGIOUS),
    (8, 15, "Assumption of Mary", HolidayType.RELIGIOUS),
    (11, 1, "All Saints' Day", HolidayType.RELIGIOUS),
    (12, 8, "Immaculate Conception", HolidayType.RELIGIOUS),
    (12, 25, "Christmas Day", HolidayType.RELIGIOUS),
)

GOOD_FRIDAY = "Good Friday"
EASTER_MONDAY = "Easter Monday"


def easter_sunday(year: int) -> date:
    """
    Easter Sunday for a Gregorian year (anonymous Gregorian algorithm).

    Args:
        year: Calendar year

    Returns:
        Date of Easter Sunday
    """
    a = year % 19
    b = year // 100
    c = year % 100
    d = b // 4
    e = b % 4
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i = c // 4
    k = c % 4
    l = (32 + 2 * e + 2 * i - h - k) % 7  # noqa: E741
    m = (a + 11 * h + 22 * l) // 451
    month = (h + l - 7 * m + 114) // 31
    day = (h + l - 7 * m + 114) % 31 + 1
    return date(year, month, day)


def good_friday(year: int) -> date:
    return easter_sunday(year) - timedelta(days=2)


def easter_monday(year: int) -> date:
    return easter_sunday(year) + timedelta(days=1)


def holidays_for_year(year: int) -> list[Holiday]:
    """
    Build the holiday set for a year.

    Entries are keyed by ISO date; if two rules ever land on the same day
    the later rule wins, so the result never holds duplicate dates.

    Returns:
        Holidays sorted by date
    """
    by_date: dict[str, Holiday] = {}

    def add(day: date, name: str, holiday_type: HolidayType) -> None:
        iso = day.isoformat()
        by_date[iso] = Holiday(
            date=iso, name=name, holiday_type=holiday_type, year=year
        )

    for month, day, name, holiday_type in FIXED_HOLIDAYS:
        add(date(year, month, day), name, holiday_type)

    add(good_friday(year), GOOD_FRIDAY, HolidayType.RELIGIOUS)
    add(easter_monday(year), EASTER_MONDAY, HolidayType.RELIGIOUS)

    return [by_date[key] for key in sorted(by_date)]


def leading_padding(year: int, month: int, first_weekday: int = SUNDAY) -> int:
    """Number of previous-month days shown before day 1 of the month."""
    return (date(year, month, 1).weekday() - first_weekday) % 7


def month_grid(
    year: int,
    month: int,
    holidays: Iterable[Holiday] = (),
    today: date | None = None,
    first_weekday: int = SUNDAY,
) -> list[CalendarDay]:
    """
    Build the fixed 42-cell grid for a month.

    Args:
        year: Displayed year
        month: Displayed month (1-12)
        holidays: Holidays to mark; matched by exact ISO date
        today: Date flagged as today (defaults to date.today())
        first_weekday: Weekday in the first column (calendar.SUNDAY by default)

    Returns:
        Exactly 42 CalendarDay entries: trailing days of the previous month,
        every day of the month, then leading days of the next month

    Raises:
        ValueError: If month is not in 1..12
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be in 1..12, got {month}")

    today = today or date.today()
    holidays_by_date = {h.date: h for h in holidays}

    first = date(year, month, 1)
    days_in_month = calendar.monthrange(year, month)[1]
    padding = leading_padding(year, month, first_weekday)

    grid: list[CalendarDay] = []

    for offset in range(padding, 0, -1):
        day = first - timedelta(days=offset)
        grid.append(CalendarDay(day=day.day, date=day, in_displayed_month=False))

    for day_number in range(1, days_in_month + 1):
        day = date(year, month, day_number)
        holiday = holidays_by_date.get(day.isoformat())
        grid.append(
            CalendarDay(
                day=day_number,
                date=day,
                in_displayed_month=True,
                is_today=day == today,
                is_holiday=holiday is not None,
                holiday=holiday,
            )
        )

    next_month_start = first + timedelta(days=days_in_month)
    for offset in range(CALENDAR_GRID_SIZE - len(grid)):
        day = next_month_start + timedelta(days=offset)
        grid.append(CalendarDay(day=day.day, date=day, in_displayed_month=False))

    return grid


def grid_weeks(grid: list[CalendarDay]) -> list[list[CalendarDay]]:
    """Split a flat grid into rows of 7 days."""
    return [grid[i : i + 7] for i in range(0, len(grid), 7)]
