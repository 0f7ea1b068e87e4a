"""
Write-set processing.

============================================================
PURPOSE
============================================================
Walks the write set of one committed transaction and builds a
record for every resource write or delete in it. The change
index of each record is the change's position in the write set,
counting module and table-item changes too.

============================================================
ERROR POLICY
============================================================
- RAISE: the first undecodable or unbuildable change aborts the
  transaction, nothing is returned
- SKIP: the change is logged at WARNING and counted as failed

============================================================
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Union

from core.config import ErrorPolicy, ProcessorConfig
from move_resources.builder import ResourceRecordBuilder
from move_resources.exceptions import MoveResourceError
from move_resources.models import (
    DeleteResource,
    ResourceChange,
    ResourceChangeRecord,
    WriteResource,
    decode_write_set_change,
)

if TYPE_CHECKING:
    from storage.repositories.move_resources import MoveResourceRepository


logger = logging.getLogger(__name__)


WriteSetChange = Union[ResourceChange, dict[str, Any], None]


@dataclass
class ProcessingResult:
    """Outcome of processing one transaction's write set."""
    transaction_version: int
    records: List[ResourceChangeRecord] = field(default_factory=list)
    skipped: int = 0
    failed: int = 0
    errors: List[MoveResourceError] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.records) + self.skipped + self.failed

    def to_dict(self) -> dict[str, Any]:
        return {
            "transaction_version": self.transaction_version,
            "records": len(self.records),
            "skipped": self.skipped,
            "failed": self.failed,
            "errors": [error.to_dict() for error in self.errors],
        }


class WriteSetProcessor:
    """
    Builds records for the resource changes of a transaction.

    Changes may be given as decoded WriteResource/DeleteResource
    events or as raw node API dicts.
    """

    def __init__(
        self,
        builder: Optional[ResourceRecordBuilder] = None,
        config: Optional[ProcessorConfig] = None,
    ) -> None:
        self._builder = builder or ResourceRecordBuilder()
        self._config = config or ProcessorConfig()

    @property
    def error_policy(self) -> ErrorPolicy:
        return self._config.error_policy

    def process_transaction(
        self,
        transaction_version: int,
        transaction_block_height: int,
        changes: Iterable[WriteSetChange],
    ) -> ProcessingResult:
        """
        Raises:
            MoveResourceError: under ErrorPolicy.RAISE, for the first
                change that cannot be decoded or built
        """
        result = ProcessingResult(transaction_version=transaction_version)

        for index, change in enumerate(changes):
            try:
                event = self._decode(change)
                record = self._builder.from_change(
                    event, index, transaction_version, transaction_block_height
                )
            except MoveResourceError as e:
                if self.error_policy is ErrorPolicy.RAISE:
                    logger.error(f"Aborting version {transaction_version}: {e.to_log_format()}")
                    raise
                logger.warning(
                    f"Skipping change {index} of version {transaction_version}: "
                    f"{e.to_log_format()}"
                )
                result.failed += 1
                result.errors.append(e)
                continue

            if record is None:
                result.skipped += 1
            else:
                result.records.append(record)

        logger.debug(
            f"Processed version {transaction_version}: {len(result.records)} records, "
            f"{result.skipped} skipped, {result.failed} failed"
        )
        return result

    def process_transactions(
        self,
        transactions: Iterable[tuple[int, int, Iterable[WriteSetChange]]],
    ) -> List[ProcessingResult]:
        """Process (version, block_height, changes) tuples in order."""
        return [
            self.process_transaction(version, block_height, changes)
            for version, block_height, changes in transactions
        ]

    @staticmethod
    def _decode(change: WriteSetChange) -> Optional[ResourceChange]:
        if isinstance(change, (WriteResource, DeleteResource)) or change is None:
            return change
        return decode_write_set_change(change)


def persist(
    results: Union[ProcessingResult, Iterable[ProcessingResult]],
    repository: "MoveResourceRepository",
) -> int:
    """Hand the records of one or more results to the repository."""
    if isinstance(results, ProcessingResult):
        results = [results]
    records = [record for result in results for record in result.records]
    return repository.insert_many(records)


__all__ = [
    "ProcessingResult",
    "WriteSetProcessor",
    "persist",
]
