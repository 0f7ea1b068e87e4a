"""
Base ORM Model.

============================================================
PURPOSE
============================================================
Provides the declarative base and column types shared by the
indexer's ORM models.

============================================================
COMPONENTS
============================================================
- Base: SQLAlchemy declarative base for all models
- JSONType: JSONB on PostgreSQL, generic JSON elsewhere

============================================================
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase


# None is stored as SQL NULL, not the JSON literal null
JSONType = JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql")


class Base(DeclarativeBase):
    """
    Declarative base for all ORM models.

    All timestamps are stored timezone-aware.
    """

    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }
