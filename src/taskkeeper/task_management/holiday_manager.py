"""Holiday Manager: stores generated holidays and builds month grids."""

import logging
from datetime import date

from . import calendar_engine
from .database import TaskDatabase
from .models import CalendarDay, Holiday

logger = logging.getLogger(__name__)


class HolidayManager:
    """Generates per-year holiday sets into the store and serves them."""

    def __init__(self, database: TaskDatabase) -> None:
        self._database = database

    async def generate_holidays_for_year(self, year: int) -> list[Holiday]:
        """
        Compute and upsert the holidays of a year.

        Running it again for the same year overwrites the same dates.

        Returns:
            The generated holidays
        """
        holidays = calendar_engine.holidays_for_year(year)
        await self._database.upsert_holidays(holidays)
        logger.info(f"Generated {len(holidays)} holidays for {year}")
        return holidays

    async def regenerate_year(self, year: int) -> list[Holiday]:
        """Drop every stored holiday of a year, then generate it again."""
        removed = await self._database.delete_holidays_by_year(year)
        logger.debug(f"Removed {removed} stored holidays for {year}")
        return await self.generate_holidays_for_year(year)

    async def ensure_year(self, year: int) -> list[Holiday]:
        """Holidays of a year, generating them first if none are stored."""
        holidays = await self._database.list_holidays_by_year(year)
        if holidays:
            return holidays
        return await self.generate_holidays_for_year(year)

    async def get_holidays_for_year(self, year: int) -> list[Holiday]:
        return await self._database.list_holidays_by_year(year)

    async def get_holidays_for_month(self, year: int, month: int) -> list[Holiday]:
        return await self._database.list_holidays_by_month(year, month)

    async def get_holidays_in_range(self, start: date, end: date) -> list[Holiday]:
        return await self._database.list_holidays_in_range(
            start.isoformat(), end.isoformat()
        )

    async def get_holiday(self, day: date | str) -> Holiday | None:
        """Holiday on a date, or None."""
        iso = day.isoformat() if isinstance(day, date) else day
        return await self._database.get_holiday(iso)

    async def list_holidays(self) -> list[Holiday]:
        return await self._database.list_holidays()

    async def clear_holidays(self) -> int:
        removed = await self._database.delete_all_holidays()
        logger.info(f"Cleared {removed} holidays")
        return removed

    async def build_month_grid(
        self,
        year: int,
        month: int,
        today: date | None = None,
        first_weekday: int = calendar_engine.SUNDAY,
    ) -> list[CalendarDay]:
        """
        Month grid with holidays from the store.

        The year's holidays are generated on first use.
        """
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be in 1..12, got {month}")

        await self.ensure_year(year)
        holidays = await self._database.list_holidays_by_month(year, month)
        return calendar_engine.month_grid(
            year, month, holidays, today=today, first_weekday=first_weekday
        )
