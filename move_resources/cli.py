"""
Index resource changes from a file of transactions.

============================================================
INPUT
============================================================
JSON Lines, one node API transaction per line:

    {"version": "42", "block_height": "10", "changes": [...]}

Transactions without a "changes" list (e.g. block metadata with
an empty write set) are processed as empty.

EXIT CODES:
- 0: All transactions indexed
- 1: Input could not be read or parsed
- 2: Database initialization failed
- 3: Processing or persistence failed

============================================================
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterator, List, Optional

from core.config import ErrorPolicy, IndexerConfig
from core.logging_setup import setup_logging
from move_resources.exceptions import MoveResourceError
from move_resources.processor import WriteSetProcessor, persist


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_DATABASE_ERROR = 2
EXIT_PROCESSING_ERROR = 3


def read_transactions(path: Path) -> Iterator[tuple[int, int, List[Any]]]:
    """
    Yield (version, block_height, changes) from a JSON Lines file.

    Raises:
        ValueError: on malformed lines
    """
    with path.open("r", encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                txn = json.loads(line)
                version = int(txn["version"])
                block_height = int(txn["block_height"])
            except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
                raise ValueError(f"{path}:{line_number}: invalid transaction: {e}") from e
            yield version, block_height, txn.get("changes") or []


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="move-indexer",
        description="Normalize Move resource writes/deletes and store them",
    )
    parser.add_argument("input", type=Path, help="JSON Lines file of transactions")
    parser.add_argument("--database-url", help="Overrides MOVE_INDEXER_DATABASE_URL")
    parser.add_argument(
        "--error-policy",
        choices=[policy.value for policy in ErrorPolicy],
        help="Overrides MOVE_INDEXER_ERROR_POLICY",
    )
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--dry-run", action="store_true", help="Build records without storing them")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    config = IndexerConfig.from_env()
    if args.database_url:
        config.database.url = args.database_url
    if args.error_policy:
        config.processor.error_policy = ErrorPolicy(args.error_policy)
    if args.log_level:
        config.logging.level = args.log_level
    setup_logging(config.logging)

    processor = WriteSetProcessor(config=config.processor)
    try:
        results = processor.process_transactions(read_transactions(args.input))
    except MoveResourceError as e:
        logger.error(e.to_log_format())
        return EXIT_PROCESSING_ERROR
    except (OSError, ValueError) as e:
        logger.error(f"Cannot read input: {e}")
        return EXIT_INPUT_ERROR

    record_count = sum(len(result.records) for result in results)
    failed = sum(result.failed for result in results)
    logger.info(f"Built {record_count} records from {len(results)} transactions ({failed} failed)")

    if args.dry_run:
        return EXIT_OK

    # Deferred so a dry run needs no database driver
    from storage.database import Database, DatabasePersistenceError
    from storage.repositories import MoveResourceRepository, RepositoryException

    try:
        database = Database(config.database)
        database.create_tables()
    except DatabasePersistenceError as e:
        logger.error(f"Database initialization failed: {e}")
        return EXIT_DATABASE_ERROR

    try:
        with database.session_scope() as session:
            inserted = persist(results, MoveResourceRepository(session))
    except (RepositoryException, DatabasePersistenceError) as e:
        logger.error(f"Persistence failed: {e}")
        return EXIT_PROCESSING_ERROR
    finally:
        database.dispose()

    logger.info(f"Stored {inserted} new records")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
