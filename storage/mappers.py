"""
Record <-> row mapping.

Keeps ResourceChangeRecord free of any storage technology: the
repository converts at the boundary with these functions.
"""

from typing import Any

from core.clock import ensure_utc
from move_resources.models import ResourceChangeRecord
from storage.models.move_resources import MoveResource


def record_to_values(record: ResourceChangeRecord) -> dict[str, Any]:
    """Column values for an INSERT statement."""
    return {
        "transaction_version": record.transaction_version,
        "write_set_change_index": record.write_set_change_index,
        "transaction_block_height": record.transaction_block_height,
        "type": record.type_full,
        "module": record.module,
        "name": record.name,
        "generic_type_params": record.generic_type_params,
        "address": record.address,
        "data": record.data,
        "is_deleted": record.is_deleted,
        "inserted_at": record.inserted_at,
    }


def record_to_row(record: ResourceChangeRecord) -> MoveResource:
    return MoveResource(**record_to_values(record))


def row_to_record(row: MoveResource) -> ResourceChangeRecord:
    # SQLite hands back naive datetimes even for timezone-aware columns
    return ResourceChangeRecord(
        transaction_version=row.transaction_version,
        write_set_change_index=row.write_set_change_index,
        transaction_block_height=row.transaction_block_height,
        type_full=row.type,
        name=row.name,
        module=row.module,
        address=row.address,
        generic_type_params=row.generic_type_params,
        data=row.data,
        is_deleted=row.is_deleted,
        inserted_at=ensure_utc(row.inserted_at),
    )


__all__ = ["record_to_values", "record_to_row", "row_to_record"]
