"""Storage exceptions raised by the persistence gateway."""


class StorageError(Exception):
    """Base class for failures talking to the roster database."""


class StorageUnavailableError(StorageError):
    """The database could not be reached or rejected the SQL statement."""


class ConstraintViolationError(StorageError):
    """A statement violated a table constraint (e.g. a duplicate ``sno``)."""


class RowDecodeError(StorageError):
    """A stored row holds a value that cannot be read as a student record."""
