"""Tests for CLI argument parsing and command dispatch."""

import argparse
from datetime import date, datetime
from io import StringIO
from pathlib import Path
from unittest.mock import patch

import pytest

from taskkeeper.main import (
    create_argument_parser,
    ensure_database_dir,
    format_month_grid,
    format_task,
    main,
)
from taskkeeper.task_management.calendar_engine import month_grid
from taskkeeper.task_management.models import Task, TaskPriority


@pytest.mark.unit
class TestArgumentParser:
    """Test cases for CLI argument parsing."""

    def test_create_argument_parser_basic(self) -> None:
        """Test basic argument parser creation."""
        parser = create_argument_parser()

        assert isinstance(parser, argparse.ArgumentParser)
        assert "Task Keeper CLI" in parser.description

    def test_help_argument(self) -> None:
        """Test --help lists the global options."""
        parser = create_argument_parser()

        with patch("sys.stdout", new_callable=StringIO) as mock_stdout:
            with pytest.raises(SystemExit) as exc_info:
                parser.parse_args(["--help"])

            assert exc_info.value.code == 0
            help_output = mock_stdout.getvalue()
            assert "--db" in help_output
            assert "--verbose" in help_output
            assert "--trace" in help_output

    def test_command_is_required(self) -> None:
        parser = create_argument_parser()

        with patch("sys.stderr", new_callable=StringIO):
            with pytest.raises(SystemExit) as exc_info:
                parser.parse_args([])

        assert exc_info.value.code == 2

    def test_add_arguments(self) -> None:
        parser = create_argument_parser()

        args = parser.parse_args(
            ["add", "Pay rent", "-p", "high", "-c", "Home", "--due", "2025-05-01"]
        )

        assert args.command == "add"
        assert args.title == "Pay rent"
        assert args.priority == "high"
        assert args.category == "Home"
        assert args.due == datetime(2025, 5, 1)

    def test_invalid_due_date_rejected(self) -> None:
        parser = create_argument_parser()

        with patch("sys.stderr", new_callable=StringIO):
            with pytest.raises(SystemExit):
                parser.parse_args(["add", "Pay rent", "--due", "tomorrow"])

    def test_list_defaults(self) -> None:
        args = create_argument_parser().parse_args(["list"])

        assert args.filter == "all"
        assert args.search == ""
        assert args.sort == "date_desc"

    def test_list_rejects_unknown_sort(self) -> None:
        parser = create_argument_parser()

        with patch("sys.stderr", new_callable=StringIO):
            with pytest.raises(SystemExit):
                parser.parse_args(["list", "--sort", "random"])

    def test_purge_variants(self) -> None:
        parser = create_argument_parser()

        assert parser.parse_args(["purge", "4"]).trash_id == 4
        assert parser.parse_args(["purge", "--all"]).all is True
        assert parser.parse_args(["purge", "--older-than-days"]).older_than_days == 30
        assert parser.parse_args(["purge", "--older-than-days", "7"]).older_than_days == 7

    def test_calendar_month_range(self) -> None:
        parser = create_argument_parser()

        assert parser.parse_args(["calendar", "2025", "4"]).month == 4
        with patch("sys.stderr", new_callable=StringIO):
            with pytest.raises(SystemExit):
                parser.parse_args(["calendar", "2025", "13"])

    def test_serve_transport(self) -> None:
        parser = create_argument_parser()

        assert parser.parse_args(["serve"]).transport == "stdio"
        assert parser.parse_args(["serve", "http"]).transport == "http"

    def test_db_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TASKKEEPER_DB", "/tmp/elsewhere.db")

        args = create_argument_parser().parse_args(["stats"])

        assert args.db == "/tmp/elsewhere.db"


@pytest.mark.unit
class TestFormatting:
    """Test text rendering helpers."""

    def test_format_task(self) -> None:
        task = Task(
            id=3,
            title="Pay rent",
            priority=TaskPriority.HIGH,
            category="Home",
            completed=True,
            due_date=datetime(2025, 5, 1),
        )

        assert format_task(task) == "   3 [x] !!! Pay rent  (Home, due 2025-05-01)"

    def test_format_month_grid(self) -> None:
        grid = month_grid(2025, 4, today=date(2025, 4, 10))

        text = format_month_grid(2025, 4, grid)

        lines = text.splitlines()
        assert "April 2025" in lines[0]
        assert lines[1].split() == ["Su", "Mo", "Tu", "We", "Th", "Fr", "Sa"]
        assert len(lines) == 8
        assert ">10" in text


@pytest.mark.integration
@pytest.mark.asyncio
class TestCommands:
    """Run commands end to end against a temporary database."""

    async def run(self, db_path: Path, *argv: str) -> int:
        args = create_argument_parser().parse_args(["--db", str(db_path), *argv])
        return await main(args)

    async def test_add_list_delete_restore(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        db_path = tmp_path / "tasks.db"

        assert await self.run(db_path, "add", "Pay rent", "-p", "high") == 0
        assert await self.run(db_path, "add", "Buy milk", "-p", "low") == 0
        capsys.readouterr()

        assert await self.run(db_path, "list", "--sort", "priority_asc") == 0
        listed = capsys.readouterr().out.splitlines()
        assert "Buy milk" in listed[0]
        assert "Pay rent" in listed[1]

        assert await self.run(db_path, "delete", "1") == 0
        assert "Moved task 1 to trash" in capsys.readouterr().out

        assert await self.run(db_path, "trash") == 0
        assert "Pay rent" in capsys.readouterr().out

        assert await self.run(db_path, "restore", "1") == 0
        assert "as task 3" in capsys.readouterr().out

        assert await self.run(db_path, "list", "--search", "RENT") == 0
        assert "Pay rent" in capsys.readouterr().out

    async def test_errors_return_exit_code(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        db_path = tmp_path / "tasks.db"

        assert await self.run(db_path, "toggle", "99") == 1
        assert "❌" in capsys.readouterr().out

        assert await self.run(db_path, "add", "   ") == 1
        assert "must not be empty" in capsys.readouterr().out

    async def test_purge_requires_a_target(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert await self.run(tmp_path / "tasks.db", "purge") == 2

    async def test_clear_completed_and_stats(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        db_path = tmp_path / "tasks.db"
        await self.run(db_path, "add", "Done already")
        await self.run(db_path, "toggle", "1")
        capsys.readouterr()

        assert await self.run(db_path, "clear-completed") == 0
        assert "Moved 1 completed tasks" in capsys.readouterr().out

        assert await self.run(db_path, "stats") == 0
        out = capsys.readouterr().out
        assert "total: 0" in out
        assert "trashed: 1" in out

    async def test_holidays_and_calendar(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        db_path = tmp_path / "tasks.db"

        assert await self.run(db_path, "holidays", "2025") == 0
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 12
        assert lines[0].startswith("2025-01-01")

        assert await self.run(db_path, "calendar", "2025", "4", "--monday-first") == 0
        out = capsys.readouterr().out
        assert out.splitlines()[1].split()[0] == "Mo"
        assert "2025-04-18: Good Friday" in out


@pytest.mark.unit
def test_ensure_database_dir(tmp_path: Path) -> None:
    db_path = tmp_path / "nested" / "dir" / "tasks.db"

    ensure_database_dir(str(db_path))

    assert db_path.parent.is_dir()
