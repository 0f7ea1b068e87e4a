"""
Storage Models Package.

ORM models for the indexer database.

- Base (base.py): declarative base and shared column types
- MoveResource (move_resources.py): resource write/delete rows
"""

from storage.models.base import Base, JSONType
from storage.models.move_resources import MoveResource


__all__ = [
    "Base",
    "JSONType",
    "MoveResource",
]
