"""
Move Resource Exceptions - Custom exception hierarchy.

Only PayloadConversionError escapes the record builder. The other
errors belong to decoding upstream input (type strings, API dicts)
and to the value conversion helper.
"""

from typing import Any, Optional

from core.exceptions import DataError, Severity


class MoveResourceError(DataError):
    """Base exception for all Move resource indexing errors."""


class TypeTagSyntaxError(MoveResourceError, ValueError):
    """A textual struct tag could not be split into address, module, name and params."""

    def __init__(self, type_tag: str, reason: str) -> None:
        super().__init__(
            f"Malformed struct tag {type_tag!r}: {reason}",
            context={"type_tag": type_tag, "reason": reason},
        )
        self.type_tag = type_tag
        self.reason = reason


class EventDecodeError(MoveResourceError):
    """A write-set change dict is missing fields or has the wrong shape."""

    def __init__(
        self,
        message: str,
        change_type: Optional[str] = None,
        field_name: Optional[str] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        context: dict[str, Any] = {}
        if change_type:
            context["change_type"] = change_type
        if field_name:
            context["field_name"] = field_name
        super().__init__(message, context=context, cause=cause)
        self.change_type = change_type
        self.field_name = field_name


class ValueConversionError(MoveResourceError, TypeError):
    """A value has no JSON representation."""

    def __init__(self, value: Any, reason: str, path: str = "$") -> None:
        super().__init__(
            f"Cannot convert {type(value).__name__} at {path}: {reason}",
            context={"value_type": type(value).__name__, "path": path},
        )
        self.value = value
        self.reason = reason
        self.path = path


class PayloadConversionError(MoveResourceError):
    """
    A write event's resource data could not be converted to a structured value.

    Raised by the record builder; the caller decides whether to skip
    the change or abort the batch.
    """

    default_severity = Severity.HIGH

    def __init__(
        self,
        type_full: str,
        transaction_version: int,
        write_set_change_index: int,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            f"Failed to convert resource data for {type_full} "
            f"at version {transaction_version}, change {write_set_change_index}",
            context={
                "type_full": type_full,
                "transaction_version": transaction_version,
                "write_set_change_index": write_set_change_index,
            },
            cause=cause,
        )
        self.type_full = type_full
        self.transaction_version = transaction_version
        self.write_set_change_index = write_set_change_index


__all__ = [
    "MoveResourceError",
    "TypeTagSyntaxError",
    "EventDecodeError",
    "ValueConversionError",
    "PayloadConversionError",
]
