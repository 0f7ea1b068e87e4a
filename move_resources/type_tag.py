"""
Struct tag decomposition.

Splits a MoveStructTag into the identity fields stored with every
resource change: module, name, and the generic type parameters as a
JSON list.
"""

from typing import Any, Optional

from move_resources.models import MoveStructTag, ResourceTypeIdentity
from move_resources.serialization import to_json_value


class TypeTagParser:
    """
    Decomposes struct tags into ResourceTypeIdentity.

    Generic parameters are all-or-nothing: if any one of them cannot
    be converted, generic_type_params is None rather than a partial
    list. A tag without parameters also yields None, never [].
    """

    def decompose(self, type_tag: MoveStructTag) -> ResourceTypeIdentity:
        return ResourceTypeIdentity(
            module=str(type_tag.module),
            name=str(type_tag.name),
            generic_type_params=self._convert_params(type_tag.generic_type_params),
        )

    @staticmethod
    def _convert_params(params: Any) -> Optional[list[Any]]:
        converted = []
        for param in params or ():
            try:
                converted.append(to_json_value(param))
            except (TypeError, ValueError):
                return None
        return converted or None


_default_parser = TypeTagParser()


def decompose(type_tag: MoveStructTag) -> ResourceTypeIdentity:
    """Decompose with the shared default parser."""
    return _default_parser.decompose(type_tag)


__all__ = ["TypeTagParser", "decompose"]
