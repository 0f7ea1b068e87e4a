"""
Move Resource ORM Model.

============================================================
DATA LIFECYCLE ROLE
============================================================
- Mutability: IMMUTABLE (append-only)
- Source: resource write-set changes of committed transactions
- Key: (transaction_version, write_set_change_index)

A later change to the same resource is a new row at a new key;
rows are never updated.

============================================================
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import BigInteger, Boolean, DateTime, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from storage.models.base import Base, JSONType


class MoveResource(Base):
    """One resource write or delete, flattened for storage."""

    __tablename__ = "move_resources"

    # Composite Primary Key
    transaction_version: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
        comment="Version of the transaction that produced the change"
    )

    write_set_change_index: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
        comment="Position of the change within the transaction's write set"
    )

    transaction_block_height: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        comment="Block height of the transaction (denormalized)"
    )

    # Type identity
    type: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Fully-qualified struct tag, verbatim"
    )

    module: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    generic_type_params: Mapped[Optional[Any]] = mapped_column(
        JSONType,
        nullable=True,
        comment="Generic type arguments; NULL when none or unconvertible"
    )

    # Owner and contents
    address: Mapped[str] = mapped_column(
        String(66),
        nullable=False,
    )

    data: Mapped[Optional[Any]] = mapped_column(
        JSONType,
        nullable=True,
        comment="Resource contents at write time; NULL for deletions"
    )

    is_deleted: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
    )

    inserted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_move_resources_address_type", "address", "type"),
        Index("ix_move_resources_module_name", "module", "name"),
    )

    def __repr__(self) -> str:
        return (
            f"<MoveResource({self.transaction_version}, {self.write_set_change_index}) "
            f"{self.type} @ {self.address} deleted={self.is_deleted}>"
        )
