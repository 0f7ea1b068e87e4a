"""
Move Resources Package - Normalized resource change records.

Turns resource writes and deletes from a Move chain's write sets
into flat records keyed by (transaction_version, write_set_change_index).

Quick Start:
    from move_resources import (
        MoveStructTag,
        ResourceRecordBuilder,
        WriteResource,
    )

    builder = ResourceRecordBuilder()
    event = WriteResource(
        address="0xabc",
        type_tag=MoveStructTag.from_str(
            "0x1::coin::CoinStore<0x1::aptos_coin::AptosCoin>"
        ),
        data={"coin": {"value": "100"}},
    )
    record = builder.from_write(
        event,
        write_set_change_index=0,
        transaction_version=42,
        transaction_block_height=10,
    )

    record.module               # "coin"
    record.name                 # "CoinStore"
    record.generic_type_params  # ["0x1::aptos_coin::AptosCoin"]

Failure modes:
- Generic type params that cannot be converted leave
  generic_type_params as None; this is never an error
- Write data that cannot be converted raises PayloadConversionError
"""

from move_resources.builder import ResourceRecordBuilder
from move_resources.exceptions import (
    EventDecodeError,
    MoveResourceError,
    PayloadConversionError,
    TypeTagSyntaxError,
    ValueConversionError,
)
from move_resources.models import (
    DeleteResource,
    MoveStructTag,
    ResourceChangeRecord,
    ResourceTypeIdentity,
    WriteResource,
    WriteSetChangeType,
    decode_write_set_change,
)
from move_resources.processor import ProcessingResult, WriteSetProcessor, persist
from move_resources.serialization import to_json_value
from move_resources.type_tag import TypeTagParser, decompose


__version__ = "0.1.0"

__all__ = [
    # Models
    "MoveStructTag",
    "WriteResource",
    "DeleteResource",
    "WriteSetChangeType",
    "decode_write_set_change",
    "ResourceTypeIdentity",
    "ResourceChangeRecord",

    # Components
    "TypeTagParser",
    "decompose",
    "ResourceRecordBuilder",
    "WriteSetProcessor",
    "ProcessingResult",
    "persist",
    "to_json_value",

    # Exceptions
    "MoveResourceError",
    "TypeTagSyntaxError",
    "EventDecodeError",
    "ValueConversionError",
    "PayloadConversionError",
]
