"""Tests for the pure calendar computations."""

from datetime import date, timedelta

import pytest

from taskkeeper.task_management import calendar_engine
from taskkeeper.task_management.calendar_engine import (
    MONDAY,
    easter_monday,
    easter_sunday,
    good_friday,
    holidays_for_year,
    leading_padding,
    month_grid,
)
from taskkeeper.task_management.models import Holiday, HolidayType


@pytest.mark.unit
class TestEasterSunday:
    """Test cases for the Easter date algorithm."""

    @pytest.mark.parametrize(
        ("year", "expected"),
        [
            (2023, date(2023, 4, 9)),
            (2024, date(2024, 3, 31)),
            (2025, date(2025, 4, 20)),
            (2000, date(2000, 4, 23)),
            (2038, date(2038, 4, 25)),
            (2285, date(2285, 3, 22)),
        ],
    )
    def test_golden_values(self, year: int, expected: date) -> None:
        """Test Easter Sunday against known dates."""
        assert easter_sunday(year) == expected

    def test_easter_is_always_a_sunday(self) -> None:
        """Test the computed date falls on a Sunday across many years."""
        for year in range(1900, 2200):
            assert easter_sunday(year).weekday() == 6, year

    def test_good_friday_is_two_days_before(self) -> None:
        """Test Good Friday offset."""
        assert good_friday(2024) == date(2024, 3, 29)
        assert easter_sunday(2025) - good_friday(2025) == timedelta(days=2)

    def test_easter_monday_is_one_day_after(self) -> None:
        """Test Easter Monday offset, including a month rollover."""
        assert easter_monday(2024) == date(2024, 4, 1)
        assert easter_monday(2025) - easter_sunday(2025) == timedelta(days=1)


@pytest.mark.unit
class TestHolidaysForYear:
    """Test cases for holiday set generation."""

    def test_generates_twelve_unique_dates(self) -> None:
        """Test ten fixed plus two moveable holidays, all on distinct dates."""
        holidays = holidays_for_year(2024)

        dates = [h.date for h in holidays]
        assert len(holidays) == 12
        assert len(set(dates)) == 12
        assert dates == sorted(dates)

    def test_fixed_holiday_classification(self) -> None:
        """Test fixed dates carry the expected classification."""
        by_date = {h.date: h for h in holidays_for_year(2025)}

        for md in ("01-01", "05-01", "05-21", "09-18", "09-19"):
            assert by_date[f"2025-{md}"].holiday_type == HolidayType.NATIONAL
        for md in ("07-16", "08-15", "11-01", "12-08", "12-25"):
            assert by_date[f"2025-{md}"].holiday_type == HolidayType.RELIGIOUS

    def test_moveable_holidays(self) -> None:
        """Test Good Friday and Easter Monday are emitted as religious holidays."""
        by_date = {h.date: h for h in holidays_for_year(2025)}

        assert by_date["2025-04-18"].name == calendar_engine.GOOD_FRIDAY
        assert by_date["2025-04-21"].name == calendar_engine.EASTER_MONDAY
        assert by_date["2025-04-18"].holiday_type == HolidayType.RELIGIOUS
        assert by_date["2025-04-21"].holiday_type == HolidayType.RELIGIOUS

    def test_every_holiday_tagged_with_year(self) -> None:
        """Test the generated year is recorded on each entry."""
        assert all(h.year == 2023 and h.is_recurring for h in holidays_for_year(2023))

    def test_generation_is_deterministic(self) -> None:
        """Test generating the same year twice yields equal sets."""
        assert holidays_for_year(2026) == holidays_for_year(2026)


@pytest.mark.unit
class TestMonthGrid:
    """Test cases for the 6x7 month grid."""

    @pytest.mark.parametrize("year", [2023, 2024, 2025, 2100])
    def test_always_42_days(self, year: int) -> None:
        """Test every month of several years yields exactly 42 cells."""
        for month in range(1, 13):
            grid = month_grid(year, month, today=date(2000, 1, 1))
            assert len(grid) == 42, (year, month)

    def test_days_are_consecutive(self) -> None:
        """Test the grid covers 42 consecutive dates."""
        grid = month_grid(2024, 7, today=date(2000, 1, 1))

        for previous, current in zip(grid, grid[1:]):
            assert current.date - previous.date == timedelta(days=1)

    def test_leap_february(self) -> None:
        """Test February of a leap year pads from January and into March."""
        grid = month_grid(2024, 2, today=date(2000, 1, 1))

        in_month = [d for d in grid if d.in_displayed_month]
        assert len(in_month) == 29
        # 2024-02-01 is a Thursday: Sunday..Wednesday come from January
        assert [d.date for d in grid[:4]] == [
            date(2024, 1, 28),
            date(2024, 1, 29),
            date(2024, 1, 30),
            date(2024, 1, 31),
        ]
        assert grid[4].date == date(2024, 2, 1)
        assert grid[-1].date == date(2024, 3, 9)
        assert not any(d.in_displayed_month for d in grid[:4] + grid[33:])

    def test_december_rolls_over_to_january(self) -> None:
        """Test December fills the tail with days of the next year."""
        grid = month_grid(2024, 12, today=date(2000, 1, 1))

        # 2024-12-01 is a Sunday: no leading padding
        assert grid[0].date == date(2024, 12, 1)
        assert grid[0].in_displayed_month is True
        assert grid[31].date == date(2025, 1, 1)
        assert grid[-1].date == date(2025, 1, 11)

    def test_monday_first_week(self) -> None:
        """Test a Monday-first grid pads a Sunday-starting month with six days."""
        grid = month_grid(2024, 12, today=date(2000, 1, 1), first_weekday=MONDAY)

        assert leading_padding(2024, 12, MONDAY) == 6
        assert grid[0].date == date(2024, 11, 25)
        assert grid[6].date == date(2024, 12, 1)
        assert len(grid) == 42

    def test_today_flag(self) -> None:
        """Test exactly the matching in-month day is flagged as today."""
        grid = month_grid(2024, 2, today=date(2024, 2, 14))

        today_cells = [d for d in grid if d.is_today]
        assert len(today_cells) == 1
        assert today_cells[0].date == date(2024, 2, 14)

    def test_padding_days_are_never_today(self) -> None:
        """Test today falling in the padding is not flagged."""
        # 2024-03-01 is a Friday: Feb 25..29 are padding
        grid = month_grid(2024, 3, today=date(2024, 2, 28))

        assert grid[3].date == date(2024, 2, 28)
        assert not any(d.is_today for d in grid)

    def test_holiday_lookup(self) -> None:
        """Test holiday flags and references come from exact date matches."""
        grid = month_grid(2025, 4, holidays_for_year(2025), today=date(2000, 1, 1))

        flagged = {d.date: d.holiday for d in grid if d.is_holiday}
        assert set(flagged) == {date(2025, 4, 18), date(2025, 4, 21)}
        assert flagged[date(2025, 4, 18)].name == calendar_engine.GOOD_FRIDAY

    def test_padding_days_never_marked_holiday(self) -> None:
        """Test a holiday in the neighbouring month is not flagged in padding."""
        holidays = [
            Holiday(
                date="2025-01-01",
                name="New Year's Day",
                holiday_type=HolidayType.NATIONAL,
                year=2025,
            )
        ]
        grid = month_grid(2024, 12, holidays, today=date(2000, 1, 1))

        jan_first = next(d for d in grid if d.date == date(2025, 1, 1))
        assert jan_first.is_holiday is False
        assert jan_first.holiday is None

    @pytest.mark.parametrize("month", [0, 13])
    def test_invalid_month(self, month: int) -> None:
        """Test months outside 1..12 are rejected."""
        with pytest.raises(ValueError):
            month_grid(2024, month)

    def test_grid_weeks(self) -> None:
        """Test splitting into six rows of seven."""
        weeks = calendar_engine.grid_weeks(month_grid(2025, 6, today=date(2000, 1, 1)))

        assert len(weeks) == 6
        assert all(len(week) == 7 for week in weeks)
