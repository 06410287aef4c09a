"""Persistence layer backed by SQLAlchemy.

Public API:
    - init_database(database_url) / close_database()
    - get_session() context manager
    - UserRepository, JobRepository, AlertRepository, ApplicationRepository
    - PersistenceError and its subclasses

Example:
    >>> from job_alerts.persistence import init_database, get_session, AlertRepository
    >>> init_database("sqlite:///./data/job_alerts.db")
    >>> with get_session() as session:
    ...     alerts = AlertRepository(session).get_active()
"""

from .database import close_database, get_engine, get_session, init_database
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    PersistenceError,
    RecordNotFoundError,
)
from .repositories import (
    AlertRepository,
    ApplicationRepository,
    JobRepository,
    UserRepository,
)

__all__ = [
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    "UserRepository",
    "JobRepository",
    "AlertRepository",
    "ApplicationRepository",
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "DataIntegrityError",
]
