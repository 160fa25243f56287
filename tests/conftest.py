"""Pytest configuration and fixtures for roster tests."""

import sqlite3
from pathlib import Path
from typing import Generator
from unittest.mock import MagicMock

import pytest

from src.database.connection import init_database
from src.database.gateway import SqliteGateway
from src.logutils import clear_context
from src.records import QueryEngine, RecordCache


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (SQLite database, CLI)")


@pytest.fixture(autouse=True)
def clear_log_context():
    """Start every test without a leftover log context."""
    clear_context()
    yield
    clear_context()


# ==================== FAKE GATEWAY ====================


def _row(sno: str, name: str, korean: int, english: int, math: int, science: int) -> dict:
    return {
        "sno": sno,
        "name": name,
        "korean": korean,
        "english": english,
        "math": math,
        "science": science,
    }


@pytest.fixture
def make_row():
    """Build a column-keyed storage row."""
    return _row


@pytest.fixture
def stored_rows() -> list[dict]:
    """Rows the fake gateway returns from a full scan, in storage order."""
    return [
        _row("S2", "Lee", 80, 90, 70, 80),  # total 320
        _row("S3", "Ahn", 100, 100, 110, 100),  # math 110 clamps to 100, total 400
        _row("S1", "Park", 70, 70, 70, 70),  # total 280
    ]


@pytest.fixture
def fake_gateway(stored_rows: list[dict]) -> MagicMock:
    """Gateway double: full scans return ``stored_rows``, writes touch one row."""
    gateway = MagicMock(spec=SqliteGateway)
    gateway.query.return_value = stored_rows
    gateway.execute.return_value = 1
    return gateway


@pytest.fixture
def cache(fake_gateway: MagicMock) -> RecordCache:
    return RecordCache(fake_gateway)


@pytest.fixture
def engine(cache: RecordCache, fake_gateway: MagicMock) -> QueryEngine:
    return QueryEngine(cache, fake_gateway)


# ==================== SQLITE ====================


@pytest.fixture(scope="function")
def temp_db(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary roster database with the schema applied."""
    db_path = tmp_path / "test_roster.db"
    init_database(db_path)
    yield db_path


@pytest.fixture
def insert_raw(temp_db: Path):
    """Write rows straight into the table, bypassing clamping."""

    def _insert(*rows: tuple) -> None:
        conn = sqlite3.connect(temp_db)
        conn.executemany(
            "INSERT INTO student (sno, name, korean, english, math, science) VALUES (?, ?, ?, ?, ?, ?)",
            rows,
        )
        conn.commit()
        conn.close()

    return _insert


@pytest.fixture
def sqlite_gateway(temp_db: Path) -> SqliteGateway:
    return SqliteGateway(temp_db)
