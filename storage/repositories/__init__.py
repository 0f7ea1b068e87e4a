"""
Repository Layer Package.

============================================================
ARCHITECTURE PRINCIPLES
============================================================
1. Session Injection: Sessions are injected, not created internally
2. Explicit Methods: insert / insert_many / get, nothing generic
3. Immutability: rows are append-only
4. Exception Handling: All DB errors wrapped in repository exceptions

============================================================
USAGE
============================================================

    from storage.database import Database
    from storage.repositories import MoveResourceRepository

    with db.session_scope() as session:
        repo = MoveResourceRepository(session)
        repo.insert_many(records)

============================================================
"""

from storage.repositories.base import BaseRepository
from storage.repositories.exceptions import (
    ConnectionError,
    DuplicateRecordError,
    IntegrityError,
    QueryError,
    RecordNotFoundError,
    RepositoryException,
)
from storage.repositories.move_resources import MoveResourceRepository


__all__ = [
    "BaseRepository",
    "MoveResourceRepository",
    "RepositoryException",
    "RecordNotFoundError",
    "DuplicateRecordError",
    "IntegrityError",
    "ConnectionError",
    "QueryError",
]
