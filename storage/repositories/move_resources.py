"""
Move Resource Repository.

============================================================
DATA LIFECYCLE
============================================================
- Mutability: IMMUTABLE (append-only)
- Never update or delete rows
- Re-ingesting a transaction must not fail: batch inserts skip
  keys that already exist

============================================================
"""

from typing import Iterable, Iterator, Optional

from sqlalchemy import insert
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from move_resources.models import ResourceChangeRecord
from storage.mappers import record_to_row, record_to_values, row_to_record
from storage.models.move_resources import MoveResource
from storage.repositories.base import BaseRepository


# Bind parameter caps per statement
MAX_INSERT_PARAMETERS = 65535
SQLITE_MAX_INSERT_PARAMETERS = 32766

_KEY_COLUMNS = ("transaction_version", "write_set_change_index")


def get_chunks(
    total: int,
    field_count: int,
    max_parameters: int = MAX_INSERT_PARAMETERS,
) -> Iterator[tuple[int, int]]:
    """
    Yield (start, end) slices so that no INSERT exceeds the parameter cap.
    """
    chunk_size = max(1, max_parameters // max(1, field_count))
    for start in range(0, total, chunk_size):
        yield start, min(start + chunk_size, total)


class MoveResourceRepository(BaseRepository[MoveResource]):
    """
    Repository for normalized resource changes.

    Accepts and returns ResourceChangeRecord; MoveResource rows stay
    inside the storage package.
    """

    def __init__(self, session: Session) -> None:
        super().__init__(session, MoveResource, "MoveResourceRepository")

    # =========================================================
    # CREATE OPERATIONS
    # =========================================================

    def insert(self, record: ResourceChangeRecord) -> ResourceChangeRecord:
        """
        Insert a single record.

        Raises:
            DuplicateRecordError: if the key is already stored
        """
        self._add(
            record_to_row(record),
            {"key_field": "transaction_version,write_set_change_index", "key": record.key},
        )
        return record

    def insert_many(self, records: Iterable[ResourceChangeRecord]) -> int:
        """
        Insert records in parameter-capped chunks, skipping existing keys.

        Returns:
            Number of rows the database reports as inserted
        """
        values = [record_to_values(record) for record in records]
        if not values:
            return 0

        field_count = len(MoveResource.__table__.columns)
        inserted = 0
        max_parameters = (
            SQLITE_MAX_INSERT_PARAMETERS if self.dialect_name == "sqlite" else MAX_INSERT_PARAMETERS
        )
        for start, end in get_chunks(len(values), field_count, max_parameters):
            chunk = values[start:end]
            result = self._execute(
                self._insert_ignoring_duplicates().values(chunk),
                "insert_many",
                {"first_key": (chunk[0]["transaction_version"], chunk[0]["write_set_change_index"])},
            )
            if result.rowcount and result.rowcount > 0:
                inserted += result.rowcount

        self._logger.info(f"Inserted {inserted} of {len(values)} move resources")
        return inserted

    def _insert_ignoring_duplicates(self):
        if self.dialect_name == "postgresql":
            return pg_insert(MoveResource).on_conflict_do_nothing(index_elements=list(_KEY_COLUMNS))
        if self.dialect_name == "sqlite":
            return sqlite_insert(MoveResource).on_conflict_do_nothing(index_elements=list(_KEY_COLUMNS))
        return insert(MoveResource)

    # =========================================================
    # READ OPERATIONS
    # =========================================================

    def get(
        self,
        transaction_version: int,
        write_set_change_index: int,
    ) -> Optional[ResourceChangeRecord]:
        """Get a record by its composite key, or None."""
        row = self._get_by_id((transaction_version, write_set_change_index))
        return row_to_record(row) if row is not None else None

    def get_or_raise(
        self,
        transaction_version: int,
        write_set_change_index: int,
    ) -> ResourceChangeRecord:
        """
        Get a record by its composite key.

        Raises:
            RecordNotFoundError: If not found
        """
        row = self._get_by_id_or_raise(
            (transaction_version, write_set_change_index),
            "transaction_version,write_set_change_index",
        )
        return row_to_record(row)
