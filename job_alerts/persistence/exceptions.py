"""Persistence layer exceptions.

Every exception raised by the persistence package derives from
PersistenceError, so callers can handle storage failures with one clause.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors."""

    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when the database cannot be initialized or reached.

    Examples:
    - Empty or malformed database URL
    - Database file not writable
    - Session requested before init_database()
    """

    pass


class RecordNotFoundError(PersistenceError):
    """Raised by write operations whose target row does not exist.

    Lookups return None instead of raising.
    """

    pass


class DataIntegrityError(PersistenceError):
    """Raised on constraint violations (duplicate id, unknown owner, ...)."""

    pass
