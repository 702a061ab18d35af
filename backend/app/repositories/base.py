"""
Repository errors.

Storage failures never leave the repository layer as raw driver exceptions:
they are logged here and re-raised with a fixed, storage-agnostic message.
"""
from sqlalchemy.exc import SQLAlchemyError

# Largest value an SQLite INTEGER (signed 64-bit) column can hold
MAX_STORED_ID = 2 ** 63 - 1

# Driver errors raised outside SQLAlchemy's hierarchy (e.g. binding an int
# beyond 64 bits) are translated like any SQLAlchemyError.
STORAGE_ERRORS = (SQLAlchemyError, OverflowError)


class RepositoryError(Exception):
    """A storage operation failed (connection, constraint, query)."""
    pass


class DuplicateRecordError(RepositoryError):
    """A unique constraint rejected the record (e.g. an email already registered)."""
    pass


def is_storable_id(value: int) -> bool:
    """True when value fits an INTEGER primary/foreign key; larger ids cannot exist."""
    return 0 < value <= MAX_STORED_ID
