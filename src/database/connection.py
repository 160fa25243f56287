"""Database connection management for the student roster.

Every operation opens its own SQLite connection and closes it on the way
out. There is no pooling: a connection never outlives the statement it
was opened for.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from dotenv import load_dotenv

from src.logutils import get_logger

load_dotenv()

# Module logger
logger = get_logger(__name__)

# Default database path
DEFAULT_DB_PATH = Path(__file__).parent.parent.parent / "roster.db"
DB_PATH = Path(os.getenv("DATABASE_PATH", str(DEFAULT_DB_PATH)))

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

# Busy timeout handed to sqlite3.connect, in seconds
_CONNECT_TIMEOUT = float(os.getenv("DB_CONNECT_TIMEOUT", "5.0"))


def _validate_path(db_path: Path) -> Path:
    """Resolve a database path, refusing traversal into system directories.

    Args:
        db_path: Path to validate

    Returns:
        Resolved absolute path

    Raises:
        ValueError: If the path contains traversal segments or points at /etc or /var
    """
    resolved = db_path.resolve()
    str_path = str(resolved)
    if ".." in db_path.parts or str_path.startswith("/etc") or str_path.startswith("/var"):
        raise ValueError(f"Invalid database path: {db_path}")
    return resolved


def _create_connection(db_path: Path) -> sqlite3.Connection:
    """Open a connection with the row factory and pragmas the roster expects."""
    conn = sqlite3.connect(str(db_path), timeout=_CONNECT_TIMEOUT)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_db(db_path: Optional[Path] = None) -> Iterator[sqlite3.Connection]:
    """Context manager for a single-use database connection.

    Commits when the block succeeds, rolls back when it raises, and closes
    the connection on every exit path.

    Args:
        db_path: Path to database file (uses default if not provided)

    Yields:
        SQLite connection

    Example:
        with get_db() as conn:
            cursor = conn.execute("SELECT * FROM student")
            rows = cursor.fetchall()
    """
    path = _validate_path(db_path or DB_PATH)
    conn = _create_connection(path)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_database(db_path: Optional[Path] = None, force: bool = False) -> Path:
    """Create the roster table.

    Args:
        db_path: Path to database file (uses default if not provided)
        force: If True, delete the existing database file first

    Returns:
        Path to the database file
    """
    path = db_path or DB_PATH

    if force and path.exists():
        logger.info("Removing existing database", extra={"extra_data": {"path": str(path)}})
        path.unlink()

    with get_db(path) as conn:
        conn.executescript(SCHEMA_PATH.read_text())
        logger.info("Schema created", extra={"extra_data": {"source": str(SCHEMA_PATH)}})

    logger.info("Database initialized", extra={"extra_data": {"path": str(path)}})
    return path


def verify_database(db_path: Optional[Path] = None) -> dict:
    """Check that the roster table exists and count its rows."""
    path = db_path or DB_PATH

    if not path.exists():
        return {"exists": False, "tables": [], "error": "Database file not found"}

    try:
        with get_db(path) as conn:
            cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name")
            tables = [row["name"] for row in cursor.fetchall()]

            counts = {}
            if "student" in tables:
                cursor = conn.execute("SELECT COUNT(*) AS cnt FROM student")
                counts["student"] = cursor.fetchone()["cnt"]

            return {
                "exists": True,
                "path": str(path),
                "tables": tables,
                "row_counts": counts,
            }
    except sqlite3.Error as e:
        logger.warning("Database verification failed", extra={"extra_data": {"error": str(e)}})
        return {"exists": True, "error": str(e)}
