"""
Move Resource Data Models - Upstream events and normalized records.

Input side:
- MoveStructTag: a fully-qualified, possibly generic struct type
- WriteResource / DeleteResource: resource write-set changes as the
  node REST API reports them

Output side:
- ResourceTypeIdentity: module, name and generic params of a tag
- ResourceChangeRecord: one immutable, storage-ready row per change
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from core.clock import from_iso8601, to_iso8601
from move_resources.exceptions import EventDecodeError, TypeTagSyntaxError


class WriteSetChangeType(Enum):
    """Kinds of write-set change emitted by the node API."""
    WRITE_RESOURCE = "write_resource"
    DELETE_RESOURCE = "delete_resource"
    WRITE_MODULE = "write_module"
    DELETE_MODULE = "delete_module"
    WRITE_TABLE_ITEM = "write_table_item"
    DELETE_TABLE_ITEM = "delete_table_item"

    @property
    def is_resource_change(self) -> bool:
        return self in (WriteSetChangeType.WRITE_RESOURCE, WriteSetChangeType.DELETE_RESOURCE)


# ============================================================
# STRUCT TAGS
# ============================================================


@dataclass(frozen=True)
class MoveStructTag:
    """
    Fully-qualified Move struct type, e.g. ``0x1::coin::CoinStore<0x1::aptos_coin::AptosCoin>``.

    Generic parameters are either nested struct tags or, for
    primitives, vectors, references and type variables, their text.
    """
    address: str
    module: str
    name: str
    generic_type_params: tuple["MoveType", ...] = ()

    def __str__(self) -> str:
        base = f"{self.address}::{self.module}::{self.name}"
        if not self.generic_type_params:
            return base
        params = ", ".join(str(param) for param in self.generic_type_params)
        return f"{base}<{params}>"

    def to_json(self) -> str:
        """Structured value of a struct tag: its canonical string."""
        return str(self)

    @classmethod
    def from_str(cls, text: str) -> "MoveStructTag":
        """
        Parse the textual form used by the node API.

        Raises:
            TypeTagSyntaxError: if the text is not address::module::name
                with an optional balanced ``<...>`` parameter list
        """
        if not isinstance(text, str):
            raise TypeTagSyntaxError(repr(text), "expected a string")

        raw = text.strip()
        start = raw.find("<")
        head = raw if start == -1 else raw[:start]

        parts = [part.strip() for part in head.split("::")]
        if len(parts) != 3 or not all(parts):
            raise TypeTagSyntaxError(text, "expected address::module::name")
        address, module, name = parts

        params: tuple[MoveType, ...] = ()
        if start != -1:
            if not raw.endswith(">"):
                raise TypeTagSyntaxError(text, "unterminated generic parameter list")
            args = _split_type_args(raw[start + 1:-1], text)
            params = tuple(_parse_move_type(arg) for arg in args)

        return cls(address=address, module=module, name=name, generic_type_params=params)


MoveType = Union[MoveStructTag, str]


def _split_type_args(inner: str, original: str) -> list[str]:
    """Split a generic parameter list at top-level commas."""
    args: list[str] = []
    depth = 0
    current: list[str] = []
    for char in inner:
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
            if depth < 0:
                raise TypeTagSyntaxError(original, "unbalanced '>'")
        elif char == "," and depth == 0:
            args.append("".join(current).strip())
            current = []
            continue
        current.append(char)

    if depth != 0:
        raise TypeTagSyntaxError(original, "unbalanced '<'")
    args.append("".join(current).strip())

    if any(not arg for arg in args):
        raise TypeTagSyntaxError(original, "empty generic parameter")
    return args


def _parse_move_type(text: str) -> MoveType:
    # vector<...> and &T may contain '::' but are not struct tags themselves
    if "::" in text and not text.startswith(("vector<", "&")):
        return MoveStructTag.from_str(text)
    return text


# ============================================================
# WRITE-SET EVENTS
# ============================================================


def _require(payload: dict[str, Any], key: str, change_type: str) -> Any:
    if key not in payload or payload[key] is None:
        raise EventDecodeError(
            f"{change_type} change is missing '{key}'",
            change_type=change_type,
            field_name=key,
        )
    return payload[key]


def _parse_tag(text: Any, change_type: str, field_name: str) -> MoveStructTag:
    if isinstance(text, MoveStructTag):
        return text
    try:
        return MoveStructTag.from_str(text)
    except TypeTagSyntaxError as e:
        raise EventDecodeError(
            f"{change_type} change has an invalid '{field_name}'",
            change_type=change_type,
            field_name=field_name,
            cause=e,
        ) from e


@dataclass(frozen=True)
class WriteResource:
    """A resource written (created or modified) at an address."""
    address: str
    type_tag: MoveStructTag
    data: Any = field(default_factory=dict)
    state_key_hash: Optional[str] = None

    @classmethod
    def from_api_dict(cls, payload: dict[str, Any]) -> "WriteResource":
        """
        Build from a node API change::

            {"type": "write_resource", "address": "0x1",
             "data": {"type": "0x1::coin::CoinStore<...>", "data": {...}}}
        """
        change_type = WriteSetChangeType.WRITE_RESOURCE.value
        resource = _require(payload, "data", change_type)
        if not isinstance(resource, dict):
            raise EventDecodeError(
                f"{change_type} change 'data' must be an object",
                change_type=change_type,
                field_name="data",
            )
        type_tag = _parse_tag(_require(resource, "type", change_type), change_type, "data.type")
        data = resource.get("data")
        return cls(
            address=str(_require(payload, "address", change_type)),
            type_tag=type_tag,
            data={} if data is None else data,
            state_key_hash=payload.get("state_key_hash"),
        )


@dataclass(frozen=True)
class DeleteResource:
    """A resource removed from an address."""
    address: str
    resource: MoveStructTag
    state_key_hash: Optional[str] = None

    @classmethod
    def from_api_dict(cls, payload: dict[str, Any]) -> "DeleteResource":
        """
        Build from a node API change::

            {"type": "delete_resource", "address": "0x1",
             "resource": "0x1::coin::CoinStore<...>"}
        """
        change_type = WriteSetChangeType.DELETE_RESOURCE.value
        resource = _parse_tag(_require(payload, "resource", change_type), change_type, "resource")
        return cls(
            address=str(_require(payload, "address", change_type)),
            resource=resource,
            state_key_hash=payload.get("state_key_hash"),
        )


ResourceChange = Union[WriteResource, DeleteResource]


def decode_write_set_change(payload: dict[str, Any]) -> Optional[ResourceChange]:
    """
    Decode one node API write-set change.

    Returns None for module and table-item changes.

    Raises:
        EventDecodeError: unknown change type or malformed resource change
    """
    if not isinstance(payload, dict):
        raise EventDecodeError("write-set change must be an object")

    raw_type = payload.get("type")
    try:
        change_type = WriteSetChangeType(raw_type)
    except ValueError as e:
        raise EventDecodeError(
            f"Unknown write-set change type: {raw_type!r}",
            change_type=str(raw_type),
            field_name="type",
        ) from e

    if change_type is WriteSetChangeType.WRITE_RESOURCE:
        return WriteResource.from_api_dict(payload)
    if change_type is WriteSetChangeType.DELETE_RESOURCE:
        return DeleteResource.from_api_dict(payload)
    return None


# ============================================================
# NORMALIZED OUTPUT
# ============================================================


@dataclass(frozen=True)
class ResourceTypeIdentity:
    """Structural parts of a struct tag."""
    module: str
    name: str
    generic_type_params: Optional[list[Any]] = None


@dataclass(frozen=True)
class ResourceChangeRecord:
    """
    Normalized resource change - STRICT schema.

    Keyed by (transaction_version, write_set_change_index). Created
    once per change and never updated; a later change to the same
    resource is a new record with a new key.
    """
    transaction_version: int
    write_set_change_index: int
    transaction_block_height: int
    type_full: str
    name: str
    module: str
    address: str
    generic_type_params: Optional[list[Any]]
    data: Optional[Any]
    is_deleted: bool
    inserted_at: datetime

    @property
    def key(self) -> tuple[int, int]:
        """Composite primary key."""
        return (self.transaction_version, self.write_set_change_index)

    def content_equals(self, other: "ResourceChangeRecord") -> bool:
        """Compare every field except inserted_at."""
        return all(
            getattr(self, f.name) == getattr(other, f.name)
            for f in fields(self)
            if f.name != "inserted_at"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "transaction_version": self.transaction_version,
            "write_set_change_index": self.write_set_change_index,
            "transaction_block_height": self.transaction_block_height,
            "type_full": self.type_full,
            "name": self.name,
            "module": self.module,
            "address": self.address,
            "generic_type_params": self.generic_type_params,
            "data": self.data,
            "is_deleted": self.is_deleted,
            "inserted_at": to_iso8601(self.inserted_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ResourceChangeRecord":
        """Create from dictionary."""
        return cls(
            transaction_version=int(data["transaction_version"]),
            write_set_change_index=int(data["write_set_change_index"]),
            transaction_block_height=int(data["transaction_block_height"]),
            type_full=data["type_full"],
            name=data["name"],
            module=data["module"],
            address=data["address"],
            generic_type_params=data.get("generic_type_params"),
            data=data.get("data"),
            is_deleted=bool(data["is_deleted"]),
            inserted_at=from_iso8601(data["inserted_at"]),
        )


__all__ = [
    "WriteSetChangeType",
    "MoveStructTag",
    "MoveType",
    "WriteResource",
    "DeleteResource",
    "ResourceChange",
    "decode_write_set_change",
    "ResourceTypeIdentity",
    "ResourceChangeRecord",
]
