"""
Structured value conversion.

Turns resource payloads and Move types into plain JSON values
(dict, list, str, int, float, bool, None) ready for a JSON column.
"""

import math
from collections.abc import Mapping
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Generator

from move_resources.exceptions import ValueConversionError


def to_json_value(value: Any) -> Any:
    """
    Convert a value into a JSON-compatible structure.

    Objects exposing ``to_json()`` are converted through it, Decimals
    become strings, bytes become 0x-prefixed hex (the node API's form
    for ``vector<u8>``) and tuples become lists.

    Raises:
        ValueConversionError: non-string mapping keys, NaN/infinite
            floats, circular containers, nesting deeper than the
            interpreter recursion limit, unsupported types
    """
    try:
        return _convert(value, "$", set())
    except RecursionError as e:
        raise ValueConversionError(value, "nesting too deep") from e


def _convert(value: Any, path: str, seen: set[int]) -> Any:
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueConversionError(value, "non-finite float", path)
        return value
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueConversionError(value, "non-finite decimal", path)
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()

    to_json = getattr(value, "to_json", None)
    if callable(to_json):
        return _convert(to_json(), path, seen)

    if isinstance(value, Mapping):
        with _visiting(value, path, seen):
            result = {}
            for key, item in value.items():
                if not isinstance(key, str):
                    raise ValueConversionError(key, "mapping keys must be strings", path)
                result[key] = _convert(item, f"{path}.{key}", seen)
            return result

    if isinstance(value, (list, tuple)):
        with _visiting(value, path, seen):
            return [_convert(item, f"{path}[{i}]", seen) for i, item in enumerate(value)]

    raise ValueConversionError(value, "unsupported type", path)


@contextmanager
def _visiting(container: Any, path: str, seen: set[int]) -> Generator[None, None, None]:
    """Tracks containers on the current conversion path to reject cycles."""
    marker = id(container)
    if marker in seen:
        raise ValueConversionError(container, "circular reference", path)
    seen.add(marker)
    try:
        yield
    finally:
        seen.discard(marker)


__all__ = ["to_json_value"]
