"""
Storage Package.

Persistence for normalized resource changes.

Modules:
- database: Engine and session management
- models/: ORM models
- mappers: ResourceChangeRecord <-> row conversion
- repositories/: Data access layer
"""

from storage.database import Database
from storage.repositories import MoveResourceRepository


__all__ = [
    "Database",
    "MoveResourceRepository",
]
