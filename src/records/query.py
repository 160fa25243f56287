"""Search and ordering over the roster.

``find_by_id`` and ``sort_cache`` work on the record cache only.
``list_all_sorted`` goes to storage on every call and never touches the
cache, so it always reflects the current table.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterator, List, Optional

from src.database import statements
from src.database.errors import StorageError
from src.database.gateway import Gateway
from src.database.models import RecordRow, StudentRecord
from src.logutils import get_logger, with_context

from .cache import RecordCache
from .metrics import compute_total
from .normalizer import normalize_scores

logger = get_logger(__name__)


class ListingError(StorageError):
    """A storage-sorted listing could not be produced."""


class SortKey(Enum):
    """Orderings shared by the cache sort and the storage listing.

    The numbers match the console menu (1 name, 2 id, 3 total).
    """

    NAME = "name"
    ID = "id"
    TOTAL = "total"

    @classmethod
    def parse(cls, value: Any) -> Optional[SortKey]:
        """Interpret a key given as a SortKey, a name, or a menu number.

        Returns:
            The matching SortKey, or None if the value is not recognized.
        """
        if isinstance(value, SortKey):
            return value
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return _MENU_NUMBERS.get(value)
        if isinstance(value, str):
            text = value.strip().lower()
            if text.isdigit():
                return _MENU_NUMBERS.get(int(text))
            if text == "sno":
                return cls.ID
            for key in cls:
                if key.value == text:
                    return key
        return None


_MENU_NUMBERS = {1: SortKey.NAME, 2: SortKey.ID, 3: SortKey.TOTAL}

_LISTING_SQL = {
    SortKey.NAME: statements.ORDER_BY_NAME,
    SortKey.ID: statements.ORDER_BY_SNO,
    SortKey.TOTAL: statements.ORDER_BY_TOTAL,
}


class QueryEngine:
    """Read operations over a record cache and its gateway.

    Example:
        engine = QueryEngine(cache, gateway)
        record = engine.find_by_id("S1")
        if record is None:
            print("No such student")
    """

    def __init__(self, cache: RecordCache, gateway: Optional[Gateway] = None):
        self.cache = cache
        self.gateway = gateway or cache.gateway

    def find_by_id(self, sno: str) -> Optional[StudentRecord]:
        """Return the first cached record with this ``sno``, or None.

        Loads the cache on first use.

        Raises:
            StorageError: If the cache has to be loaded and the load fails.
        """
        self.cache.ensure_loaded()
        for record in self.cache:
            if record.sno == sno:
                return record
        logger.debug("No cached record matched", extra={"extra_data": {"sno": sno}})
        return None

    def sort_cache(self, key: Any) -> List[RecordRow]:
        """Reorder the cache in place and return its rows in the new order.

        Name and id sort ascending, total sorts descending. Unrecognized
        keys leave the order unchanged. Ties keep their previous relative
        order.
        """
        self.cache.ensure_loaded()
        sort_key = SortKey.parse(key)

        if sort_key is SortKey.NAME:
            self.cache.reorder(key=lambda r: r.name)
        elif sort_key is SortKey.ID:
            self.cache.reorder(key=lambda r: r.sno)
        elif sort_key is SortKey.TOTAL:
            self.cache.reorder(key=lambda r: r.total, reverse=True)
        else:
            logger.debug(f"Ignoring unrecognized sort key: {key!r}")

        return [record.to_row() for record in self.cache]

    def list_all_sorted(self, key: Any) -> Iterator[RecordRow]:
        """Stream every stored row in the requested order, bypassing the cache.

        Scores are normalized on the way out and ``total`` is computed from
        the normalized scores.

        Raises:
            ListingError: If the storage query fails (raised on first iteration).
        """
        sort_key = SortKey.parse(key)
        if sort_key is None:
            logger.warning(f"Invalid sort condition for listing: {key!r}")
            return

        with with_context(operation="list", sort_key=sort_key.value):
            try:
                rows = self.gateway.query(_LISTING_SQL[sort_key])
            except StorageError as e:
                logger.error(f"Storage listing failed: {e}")
                raise ListingError(f"Could not list records by {sort_key.value}: {e}") from e

            logger.debug("Storage listing fetched", extra={"extra_data": {"rows": len(rows)}})

        for row in rows:
            try:
                record = normalize_scores(StudentRecord.from_row(row))
            except StorageError as e:
                raise ListingError(f"Could not list records by {sort_key.value}: {e}") from e
            compute_total(record)
            yield record.to_row()
