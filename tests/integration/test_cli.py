"""Integration tests for the roster CLI."""

import sqlite3
from pathlib import Path

import pytest
from click.testing import CliRunner

from src.cli.main import cli

pytestmark = pytest.mark.integration


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def invoke(runner: CliRunner, temp_db: Path):
    """Run a CLI command against the temporary database."""

    def _invoke(*args: str, input: str | None = None):
        return runner.invoke(cli, ["--db", str(temp_db), *args], input=input, obj={})

    return _invoke


class TestInitDb:
    """Tests for the init-db command."""

    def test_creates_database(self, runner: CliRunner, tmp_path: Path):
        db_path = tmp_path / "fresh.db"

        result = runner.invoke(cli, ["--db", str(db_path), "init-db"], obj={})

        assert result.exit_code == 0
        assert "Database initialized" in result.output
        assert db_path.exists()

    def test_existing_database_needs_confirmation(self, invoke, temp_db: Path, insert_raw):
        insert_raw(("S1", "Kim", 1, 1, 1, 1))

        result = invoke("init-db", input="n\n")

        assert "Aborted" in result.output
        conn = sqlite3.connect(temp_db)
        assert conn.execute("SELECT COUNT(*) FROM student").fetchone()[0] == 1
        conn.close()

    def test_force_resets(self, invoke, temp_db: Path, insert_raw):
        insert_raw(("S1", "Kim", 1, 1, 1, 1))

        result = invoke("init-db", "--force")

        assert result.exit_code == 0
        conn = sqlite3.connect(temp_db)
        assert conn.execute("SELECT COUNT(*) FROM student").fetchone()[0] == 0
        conn.close()


class TestRecordCommands:
    """Tests for add, update, delete and find."""

    def test_add_then_find(self, invoke):
        added = invoke("add", "S1", "Kim", "95", "85", "105", "--", "-10")
        assert added.exit_code == 0
        assert "Success" in added.output

        found = invoke("find", "S1")
        assert found.exit_code == 0
        assert "Kim" in found.output
        assert "280" in found.output
        assert "70.00" in found.output

    def test_add_duplicate_reports_error(self, invoke, insert_raw):
        insert_raw(("S1", "Kim", 1, 1, 1, 1))

        result = invoke("add", "S1", "Lee", "1", "2", "3", "4")

        assert result.exit_code == 0
        assert "constraint" in result.output.lower()

    def test_update_unknown(self, invoke):
        result = invoke("update", "S9", "Nobody", "1", "2", "3", "4")
        assert "Error" in result.output

    def test_delete(self, invoke, insert_raw):
        insert_raw(("S1", "Kim", 1, 1, 1, 1))

        assert "Success" in invoke("delete", "S1").output
        assert "No student found" in invoke("find", "S1").output

    def test_find_missing(self, invoke):
        result = invoke("find", "S404")
        assert "No student found" in result.output


class TestOrderingCommands:
    """Tests for sort, list and status."""

    @pytest.fixture
    def seeded(self, insert_raw):
        insert_raw(
            ("S2", "Baek", 90, 90, 90, 95),
            ("S1", "Choi", 80, 80, 80, 80),
        )

    def test_sort_by_total(self, invoke, seeded):
        result = invoke("sort", "--by", "total")

        assert result.exit_code == 0
        assert result.output.index("Baek") < result.output.index("Choi")

    def test_list_by_id(self, invoke, seeded):
        result = invoke("list", "--by", "id")

        assert result.exit_code == 0
        assert result.output.index("Choi") < result.output.index("Baek")

    def test_invalid_sort_key_is_rejected(self, invoke, seeded):
        result = invoke("list", "--by", "grade")
        assert result.exit_code != 0

    def test_status(self, invoke, seeded):
        result = invoke("status")

        assert result.exit_code == 0
        assert "Student" in result.output
        assert "2" in result.output


class TestShell:
    """Tests for the interactive menu."""

    def test_add_then_search(self, invoke):
        script = "\n".join(["1", "S1", "Kim", "95", "85", "105", "-10", "4", "S1", "0"]) + "\n"

        result = invoke("shell", input=script)

        assert result.exit_code == 0
        assert "Success" in result.output
        assert "280" in result.output
        assert "Bye." in result.output

    def test_unknown_option(self, invoke):
        result = invoke("shell", input="9\n0\n")
        assert "Unknown option" in result.output

    def test_storage_error_keeps_shell_running(self, runner: CliRunner, tmp_path: Path):
        db_path = tmp_path / "no_schema.db"

        result = runner.invoke(cli, ["--db", str(db_path), "shell"], input="4\nS1\n0\n", obj={})

        assert result.exit_code == 0
        assert "Storage error" in result.output
        assert "Bye." in result.output
