"""In-memory mirror of the ``student`` table.

The cache is loaded from storage once, on first use, and afterwards tracks
storage incrementally: each add, update or delete is written through the
gateway first and applied to the cache only when storage reports at least
one affected row. Nothing spans the write and the cache update, so a crash
between the two leaves them out of step until ``refresh()`` is called.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator, List, Optional

from src.database import statements
from src.database.errors import ConstraintViolationError, StorageError
from src.database.gateway import Gateway
from src.database.models import StudentRecord
from src.logutils import get_logger, with_context

from .metrics import refresh_metrics
from .normalizer import normalize_scores
from .results import OperationResult, Outcome

logger = get_logger(__name__)


class RecordCache:
    """Ordered collection of student records kept in sync with storage.

    Records stay in insertion order (storage row order for the initial load)
    until a sort reorders them. Uniqueness of ``sno`` is left to the table's
    primary key.

    Example:
        cache = RecordCache(SqliteGateway(db_path))
        result = cache.add(StudentRecord(sno="S1", name="Kim", korean=95))
        if not result.ok:
            print(result)
    """

    def __init__(self, gateway: Gateway):
        self.gateway = gateway
        self._records: List[StudentRecord] = []
        self._loaded = False

    # ==================== STATE ====================

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def records(self) -> tuple[StudentRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[StudentRecord]:
        return iter(list(self._records))

    # ==================== LOADING ====================

    def ensure_loaded(self) -> None:
        """Load every stored row into the cache, the first time only.

        Rows are normalized and given fresh metrics before they are cached.
        A cache emptied by deletions is not reloaded; use ``refresh()``.

        The scan is all or nothing: a row that cannot be read leaves the
        cache exactly as it was.

        Raises:
            StorageError: If the full scan fails or a stored row cannot be
                decoded. The cache stays unloaded.
        """
        if self._loaded:
            return

        rows = self.gateway.query(statements.SELECT_ALL)
        loaded = [refresh_metrics(normalize_scores(StudentRecord.from_row(row))) for row in rows]
        self._records = loaded
        self._loaded = True
        logger.info("Record cache loaded", extra={"extra_data": {"records": len(self._records)}})

    def refresh(self) -> None:
        """Drop cached records and load them again from storage."""
        self.clear()
        self.ensure_loaded()

    def clear(self) -> None:
        self._records.clear()
        self._loaded = False

    def reorder(self, key: Callable[[StudentRecord], Any], reverse: bool = False) -> None:
        """Permanently reorder the cached records."""
        self._records.sort(key=key, reverse=reverse)

    # ==================== MUTATIONS ====================

    def add(self, record: StudentRecord) -> OperationResult:
        """Insert a new record and append it to the cache.

        Scores are clamped before they are written, so storage and the
        cache hold the same values.

        Args:
            record: New record. The caller's object is not cached; a copy is.

        Returns:
            OperationResult; ``record`` holds the cached copy on success.
        """
        with with_context(operation="add", record_id=record.sno):
            candidate = normalize_scores(record.model_copy())
            params = (candidate.sno, candidate.name, *candidate.scores)

            affected = self._write("INSERT", statements.INSERT_STUDENT, params, candidate.sno)
            if isinstance(affected, OperationResult):
                return affected
            if affected == 0:
                logger.warning("Insert reported no affected rows")
                return OperationResult.failed(
                    Outcome.NO_ROWS_AFFECTED, candidate.sno, "insert affected no rows"
                )

            self._records.append(refresh_metrics(candidate))
            logger.info("Record added", extra={"extra_data": {"total": candidate.total}})
            return OperationResult.succeeded(candidate.sno, affected, record=candidate)

    def apply_update(self, record: StudentRecord) -> OperationResult:
        """Write a record's name and scores, then update the cached entry in place.

        Only the first cached entry with a matching ``sno`` is updated.

        Returns:
            OperationResult with ``NOT_FOUND`` when no stored row matched.
        """
        with with_context(operation="update", record_id=record.sno):
            candidate = normalize_scores(record.model_copy())
            params = (candidate.name, *candidate.scores, candidate.sno)

            affected = self._write("UPDATE", statements.UPDATE_STUDENT, params, candidate.sno)
            if isinstance(affected, OperationResult):
                return affected
            if affected == 0:
                logger.warning("Update matched no stored record")
                return OperationResult.failed(Outcome.NOT_FOUND, candidate.sno, "no such record")

            cached = self._find(candidate.sno)
            if cached is None:
                logger.warning("Updated record is not in the cache")
                return OperationResult.succeeded(candidate.sno, affected)

            cached.name = candidate.name
            for subject in StudentRecord.SUBJECTS:
                setattr(cached, subject, getattr(candidate, subject))
            refresh_metrics(cached)
            logger.info("Record updated", extra={"extra_data": {"total": cached.total}})
            return OperationResult.succeeded(candidate.sno, affected, record=cached)

    def remove(self, sno: str) -> OperationResult:
        """Delete a record from storage and drop every cached entry with its ``sno``."""
        with with_context(operation="delete", record_id=sno):
            affected = self._write("DELETE", statements.DELETE_STUDENT, (sno,), sno)
            if isinstance(affected, OperationResult):
                return affected
            if affected == 0:
                logger.warning("Delete matched no stored record")
                return OperationResult.failed(Outcome.NOT_FOUND, sno, "no such record")

            self._records[:] = [r for r in self._records if r.sno != sno]
            logger.info("Record deleted", extra={"extra_data": {"rows": affected}})
            return OperationResult.succeeded(sno, affected, detail=f"deleted {affected} row(s)")

    # ==================== HELPERS ====================

    def _find(self, sno: str) -> Optional[StudentRecord]:
        for record in self._records:
            if record.sno == sno:
                return record
        return None

    def _write(self, verb: str, sql: str, params: tuple, sno: str) -> int | OperationResult:
        """Load the cache if needed, then run one write statement.

        Storage errors are logged and turned into a failed OperationResult;
        they never reach the caller as exceptions.
        """
        try:
            self.ensure_loaded()
            return self.gateway.execute(sql, params)
        except ConstraintViolationError as e:
            logger.warning(f"{verb} rejected by storage: {e}")
            return OperationResult.failed(Outcome.CONSTRAINT_VIOLATION, sno, str(e))
        except StorageError as e:
            logger.error(f"{verb} failed: {e}", exc_info=True)
            return OperationResult.failed(Outcome.STORAGE_FAILURE, sno, str(e))
