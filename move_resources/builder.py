"""
Resource record builder.

============================================================
PURPOSE
============================================================
Turns one resource write or delete into one ResourceChangeRecord,
keyed by its position in the transaction history.

============================================================
FAILURE MODES
============================================================
- Generic parameter conversion failure: tolerated, the record
  carries generic_type_params=None
- Write payload conversion failure: PayloadConversionError, no
  record is produced

============================================================
"""

import logging
from typing import Optional

from core.clock import ClockFactory, ClockProtocol
from move_resources.exceptions import PayloadConversionError
from move_resources.models import (
    DeleteResource,
    MoveStructTag,
    ResourceChange,
    ResourceChangeRecord,
    WriteResource,
)
from move_resources.serialization import to_json_value
from move_resources.type_tag import TypeTagParser


logger = logging.getLogger(__name__)


class ResourceRecordBuilder:
    """
    Builds normalized records from resource write-set changes.

    Holds no mutable state; one instance may be shared across threads.
    """

    def __init__(
        self,
        clock: Optional[ClockProtocol] = None,
        parser: Optional[TypeTagParser] = None,
    ) -> None:
        """
        Args:
            clock: Source of inserted_at (defaults to the process clock)
            parser: Struct tag decomposer
        """
        self._clock = clock or ClockFactory.get_clock()
        self._parser = parser or TypeTagParser()

    def from_write(
        self,
        event: WriteResource,
        write_set_change_index: int,
        transaction_version: int,
        transaction_block_height: int,
    ) -> ResourceChangeRecord:
        """
        Build a record for a resource write.

        Raises:
            PayloadConversionError: if the resource data has no JSON form
        """
        type_full = str(event.type_tag)
        payload = {} if event.data is None else event.data
        try:
            data = to_json_value(payload)
        except (TypeError, ValueError) as e:
            raise PayloadConversionError(
                type_full=type_full,
                transaction_version=transaction_version,
                write_set_change_index=write_set_change_index,
                cause=e,
            ) from e

        return self._build(
            type_tag=event.type_tag,
            address=event.address,
            data=data,
            is_deleted=False,
            write_set_change_index=write_set_change_index,
            transaction_version=transaction_version,
            transaction_block_height=transaction_block_height,
        )

    def from_delete(
        self,
        event: DeleteResource,
        write_set_change_index: int,
        transaction_version: int,
        transaction_block_height: int,
    ) -> ResourceChangeRecord:
        """Build a record for a resource deletion. Deletions carry no data."""
        return self._build(
            type_tag=event.resource,
            address=event.address,
            data=None,
            is_deleted=True,
            write_set_change_index=write_set_change_index,
            transaction_version=transaction_version,
            transaction_block_height=transaction_block_height,
        )

    def from_change(
        self,
        change: Optional[ResourceChange],
        write_set_change_index: int,
        transaction_version: int,
        transaction_block_height: int,
    ) -> Optional[ResourceChangeRecord]:
        """Dispatch to from_write/from_delete; anything else yields None."""
        if isinstance(change, WriteResource):
            return self.from_write(
                change, write_set_change_index, transaction_version, transaction_block_height
            )
        if isinstance(change, DeleteResource):
            return self.from_delete(
                change, write_set_change_index, transaction_version, transaction_block_height
            )
        return None

    def _build(
        self,
        type_tag: MoveStructTag,
        address: str,
        data: Optional[object],
        is_deleted: bool,
        write_set_change_index: int,
        transaction_version: int,
        transaction_block_height: int,
    ) -> ResourceChangeRecord:
        identity = self._parser.decompose(type_tag)
        record = ResourceChangeRecord(
            transaction_version=transaction_version,
            write_set_change_index=write_set_change_index,
            transaction_block_height=transaction_block_height,
            type_full=str(type_tag),
            name=identity.name,
            module=identity.module,
            address=str(address),
            generic_type_params=identity.generic_type_params,
            data=data,
            is_deleted=is_deleted,
            inserted_at=self._clock.now(),
        )
        logger.debug(
            f"Built {'delete' if is_deleted else 'write'} record "
            f"{record.key} for {record.type_full} at {record.address}"
        )
        return record


__all__ = ["ResourceRecordBuilder"]
