"""Cursor encoder.

Captures the configured key fields of a record and packs them, in key
order, into a base64-wrapped JSON array.
"""

from __future__ import annotations

from typing import Any

from pydantic_core import PydanticSerializationError, to_json

from pagecursor.errors import CursorEncodeError, FieldNotFoundError
from pagecursor.legacy import encode_legacy
from pagecursor.wire import encode_payload, load_json

_MISSING = object()


class CursorEncoder:
    """Encode records into opaque pagination cursors.

    Field lookup is deferred to encode time; no schema is validated at
    construction.

    Args:
        *keys: Ordered field names captured by every cursor.
    """

    def __init__(self, *keys: str) -> None:
        self.keys = tuple(keys)

    def field_values(self, record: Any) -> list[Any]:
        """Read the key fields of ``record`` in key order.

        Raises:
            CursorEncodeError: If ``record`` is None.
            FieldNotFoundError: If a key is not an attribute of ``record``.
        """
        if record is None:
            raise CursorEncodeError("cannot encode a cursor from None")
        values = []
        for key in self.keys:
            value = getattr(record, key, _MISSING)
            if value is _MISSING:
                raise FieldNotFoundError(key)
            values.append(value)
        return values

    def encode(self, record: Any) -> str:
        """Encode the key fields of ``record`` into a cursor.

        Args:
            record: The boundary record, usually the last row of a page.

        Returns:
            A base64-encoded cursor string.

        Raises:
            CursorEncodeError: If a key value cannot be serialized to JSON,
                including non-finite floats.
            FieldNotFoundError: If a key is not an attribute of ``record``.
        """
        values = self.field_values(record)
        try:
            payload = to_json(values)
        except PydanticSerializationError as exc:
            raise CursorEncodeError(f"cannot serialize cursor values: {exc}") from exc
        try:
            load_json(payload)
        except ValueError as exc:
            raise CursorEncodeError(f"cursor values have no JSON representation: {exc}") from exc
        return encode_payload(payload)

    def encode_legacy(self, record: Any) -> str:
        """Encode ``record`` in the legacy ``value?KIND`` format.

        Only for migration tooling; ``encode`` never emits this format.
        """
        return encode_legacy(self.field_values(record))


def new_cursor_encoder(*keys: str) -> CursorEncoder:
    """Create a cursor encoder for the given ordered keys."""
    return CursorEncoder(*keys)
