"""
test_cli.py
-----------
Tests for the diarydb maintenance commands, run through click's CliRunner.
"""
import sqlite3

import pytest
from datetime import date

from click.testing import CliRunner

from habitdiary.database.cli import cli
from habitdiary.database.manager import Diary


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, tmp_path, test_db_path):
    """Invoke diarydb with every path option pointing into tmp_path."""

    def _invoke(*args, db_path=None):
        return runner.invoke(
            cli,
            [
                "--db-path", str(db_path or test_db_path),
                "--log-dir", str(tmp_path / "logs"),
                "--backup-dir", str(tmp_path / "backups"),
                *args,
            ],
            obj={},
        )

    return _invoke


@pytest.fixture
def seeded(test_db_path):
    """Diary file with GAM/PNO and a few entries, closed before the CLI runs."""
    with Diary.create(test_db_path, ["GAM", "PNO"]) as diary:
        diary.upsert_entries(
            [
                (date(2024, 1, 8), {"GAM": True}),
                (date(2024, 1, 9), {"GAM": True}),
                (date(2024, 1, 11), {"PNO": True}),
            ]
        )
    return test_db_path


class TestSetupCommands:
    """Test create and generate."""

    def test_create(self, invoke, test_db_path):
        result = invoke("create", "GAM", "PNO")
        assert result.exit_code == 0, result.output
        assert "Diary created" in result.output

        with Diary.open(test_db_path) as diary:
            assert [c.abbreviation for c in diary.list_categories()] == ["GAM", "PNO"]

    def test_create_existing_fails(self, invoke, seeded):
        result = invoke("create", "GAM")
        assert result.exit_code == 1
        assert "Error: CreateError" in result.output

    def test_create_duplicate_categories_fails(self, invoke, test_db_path):
        result = invoke("create", "GAM", "gam")
        assert result.exit_code == 1
        assert "DuplicateCategory" in result.output
        assert not test_db_path.exists()

    def test_generate(self, invoke, test_db_path):
        result = invoke(
            "generate", "GAM", "PNO", "--days", "10", "--until", "2024-01-10", "--seed", "1"
        )
        assert result.exit_code == 0, result.output
        assert "2024-01-01 to 2024-01-10" in result.output


class TestMigrateCommand:
    """Test migrate."""

    def test_migrates_version_zero_with_backup(self, invoke, v0_diary_factory, tmp_path):
        path = v0_diary_factory(["GAM"])

        result = invoke("migrate", db_path=path)

        assert result.exit_code == 0, result.output
        assert "schema version 1" in result.output
        assert len(list((tmp_path / "backups" / "pre_migration").glob("*.db"))) == 1

    def test_check_reports_pending(self, invoke, v0_diary_factory):
        path = v0_diary_factory(["GAM"])
        before = path.read_bytes()

        result = invoke("migrate", "--check", db_path=path)

        assert result.exit_code == 0, result.output
        assert "Stored version: 0" in result.output
        assert "0 -> 1" in result.output
        assert path.read_bytes() == before

    def test_check_current(self, invoke, seeded):
        result = invoke("migrate", "--check")
        assert "Up to date" in result.output

    def test_check_rejects_foreign_sqlite_file(self, invoke, tmp_path):
        path = tmp_path / "other.db"
        conn = sqlite3.connect(str(path))
        conn.execute("CREATE TABLE t (x INTEGER)")
        conn.commit()
        conn.close()

        result = invoke("migrate", "--check", db_path=path)

        assert result.exit_code == 1
        assert "Not a diary file" in result.output
        assert "Pending steps" not in result.output

    def test_missing_file(self, invoke, test_db_path):
        result = invoke("migrate")
        assert result.exit_code == 1
        assert "Error: OpenError" in result.output
        assert not test_db_path.exists()


class TestCategoryCommands:
    """Test categories, add-category and hide-category."""

    def test_add_and_list(self, invoke, seeded):
        assert invoke("add-category", "RUN").exit_code == 0

        result = invoke("categories")
        assert result.exit_code == 0
        assert [line.split()[-1] for line in result.output.splitlines()] == ["GAM", "PNO", "RUN"]

    def test_hide(self, invoke, seeded):
        result = invoke("hide-category", "PNO")
        assert "hidden" in result.output

        assert "PNO" not in invoke("categories").output
        assert "PNO (hidden)" in invoke("categories", "--all").output
        assert "already hidden" in invoke("hide-category", "PNO").output

    def test_hide_unknown(self, invoke, seeded):
        result = invoke("hide-category", "RUN")
        assert result.exit_code == 1
        assert "CategoryNotFound" in result.output

    def test_add_duplicate(self, invoke, seeded):
        result = invoke("add-category", "gam")
        assert result.exit_code == 1
        assert "DuplicateCategory" in result.output


class TestQueryCommands:
    """Test compare, top and missing."""

    def test_compare(self, invoke, seeded):
        result = invoke("compare", "--period-days", "3", "--periods", "2", "--until", "2024-01-11")
        assert result.exit_code == 0, result.output
        assert "2024-01-09..2024-01-11 (total 2)" in result.output
        assert "2024-01-06..2024-01-08 (total 1)" in result.output

    def test_compare_invalid(self, invoke, seeded):
        result = invoke("compare", "--period-days", "0")
        assert result.exit_code == 1
        assert "ValidationError" in result.output

    def test_compare_out_of_range(self, invoke, seeded):
        result = invoke("compare", "--period-days", "1000000", "--periods", "1000")
        assert result.exit_code == 1
        assert "ValidationError" in result.output
        assert "supported date range" in result.output

    def test_top(self, invoke, seeded):
        result = invoke("top", "--days", "4", "--count", "2", "--until", "2024-01-11")
        assert result.exit_code == 0, result.output
        lines = [line.strip() for line in result.output.splitlines() if line.strip()]
        assert lines[-2:] == ["2  GAM", "1  PNO"]

    def test_top_defaults_to_whole_history(self, invoke, seeded):
        result = invoke("top", "--until", "2024-01-11")
        assert result.exit_code == 0, result.output
        assert "4 days to 2024-01-11" in result.output
        lines = [line.strip() for line in result.output.splitlines() if line.strip()]
        assert lines[-3:] == ["2  GAM", "1  PNO", "1  (none)"]

    def test_top_without_history(self, invoke, seeded):
        result = invoke("top", "--until", "2024-01-01")
        assert result.exit_code == 0, result.output
        assert "No entries recorded" in result.output

    def test_missing(self, invoke, seeded):
        result = invoke("missing", "--until", "2024-01-12")
        assert result.exit_code == 0, result.output
        assert "2024-01-10" in result.output
        assert "2024-01-12" in result.output
        assert "2024-01-09" not in result.output


class TestExchangeCommands:
    """Test export-csv and import-csv."""

    def test_export_then_import(self, invoke, seeded, tmp_path):
        csv_path = tmp_path / "habits.csv"
        result = invoke("export-csv", str(csv_path))
        assert result.exit_code == 0, result.output
        assert "Exported 3 days" in result.output

        copy_path = tmp_path / "copy.db"
        assert invoke("create", db_path=copy_path).exit_code == 0
        result = invoke("import-csv", str(csv_path), db_path=copy_path)
        assert result.exit_code == 0, result.output

        with Diary.open(copy_path) as copy:
            assert copy.get_entry(date(2024, 1, 11)).composition == frozenset({"PNO"})

    def test_import_malformed(self, invoke, seeded, tmp_path):
        csv_path = tmp_path / "bad.csv"
        csv_path.write_text("date,GAM\nnot-a-date,x\n")
        result = invoke("import-csv", str(csv_path))
        assert result.exit_code == 1
        assert "ExchangeError" in result.output
