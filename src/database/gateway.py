"""Persistence gateway for the roster table.

The record cache only needs two capabilities from storage: run a query and
get rows back, or run a statement and learn how many rows it touched.
``Gateway`` names that contract; ``SqliteGateway`` fulfils it against a
SQLite file, one connection per call.
"""

import sqlite3
from pathlib import Path
from typing import Any, List, Mapping, Optional, Protocol, Sequence

from src.logutils import get_logger

from .connection import DB_PATH, get_db
from .errors import ConstraintViolationError, StorageUnavailableError

logger = get_logger(__name__)


class Gateway(Protocol):
    """Minimal query/execute interface consumed by the record cache."""

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[Mapping[str, Any]]:
        ...

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        ...


class SqliteGateway:
    """Gateway backed by a SQLite database file.

    Attributes:
        db_path: Path to the SQLite database file.

    Example:
        gateway = SqliteGateway()
        rows = gateway.query("SELECT * FROM student WHERE sno = ?", ("S1",))
    """

    def __init__(self, db_path: Optional[Path] = None):
        """Initialize the gateway with an optional custom database path.

        Args:
            db_path: Path to SQLite database. Uses default if not provided.
        """
        self.db_path = db_path or DB_PATH

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[Mapping[str, Any]]:
        """Run a SELECT and return every row as a dictionary.

        Raises:
            StorageUnavailableError: If the database is unreachable or the SQL fails.
        """
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.execute(sql, tuple(params))
                return [dict(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise self._translate(e, sql) from e

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run an INSERT, UPDATE or DELETE and return the affected row count.

        Raises:
            ConstraintViolationError: If the statement breaks a table constraint.
            StorageUnavailableError: If the database is unreachable or the SQL fails.
        """
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.execute(sql, tuple(params))
                affected = cursor.rowcount
        except sqlite3.Error as e:
            raise self._translate(e, sql) from e

        logger.debug("Statement executed", extra={"extra_data": {"rows": affected}})
        return affected

    @staticmethod
    def _translate(error: sqlite3.Error, sql: str) -> Exception:
        verb = sql.strip().split(None, 1)[0].upper() if sql.strip() else "SQL"
        if isinstance(error, sqlite3.IntegrityError):
            return ConstraintViolationError(f"{verb} violated a constraint: {error}")
        return StorageUnavailableError(f"{verb} failed: {error}")
