"""Database module for student roster storage."""

from .connection import get_db, init_database, verify_database
from .errors import ConstraintViolationError, RowDecodeError, StorageError, StorageUnavailableError
from .gateway import Gateway, SqliteGateway
from .models import Grade, RecordRow, StudentRecord

__all__ = [
    "ConstraintViolationError",
    "Gateway",
    "Grade",
    "RecordRow",
    "RowDecodeError",
    "SqliteGateway",
    "StorageError",
    "StorageUnavailableError",
    "StudentRecord",
    "get_db",
    "init_database",
    "verify_database",
]
