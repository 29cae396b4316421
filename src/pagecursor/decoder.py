"""Cursor decoder.

Turns an incoming cursor back into the ordered key values it captured.
Current-format cursors (a JSON array) are decoded into each field's
declared type using the record schema. Legacy ``value?KIND`` cursors are
still accepted and yield plain strings and timestamps.

Malformed transport data and malformed legacy segments are not errors:
both decode to an empty list, which callers treat as "no cursor".
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from pagecursor.config import CursorSettings, get_settings
from pagecursor.errors import CursorDecodeError, InvalidLegacyFieldError
from pagecursor.legacy import decode_legacy
from pagecursor.schema import RecordSchema
from pagecursor.wire import decode_payload, load_json

logger = logging.getLogger(__name__)


class CursorDecoder:
    """Decode opaque pagination cursors into typed key values.

    Args:
        ref: Schema reference: a record class or instance, or any
            ``Optional``/``type``/collection wrapper around one.
        *keys: Ordered field names the cursor carries.
        settings: Optional settings override; defaults to ``get_settings()``.

    Raises:
        InvalidDecodeReferenceError: If ``ref`` does not reduce to a record type.
    """

    def __init__(self, ref: Any, *keys: str, settings: CursorSettings | None = None) -> None:
        self.schema = RecordSchema.from_ref(ref)
        self.keys = tuple(keys)
        self.settings = settings if settings is not None else get_settings()

    def decode(self, cursor: str) -> list[Any]:
        """Decode a cursor into values aligned with the configured keys.

        Args:
            cursor: A cursor produced by ``CursorEncoder.encode`` or a
                legacy cursor.

        Returns:
            The decoded values in key order, or an empty list when the
            cursor is not valid base64 or is a malformed legacy cursor.

        Raises:
            FieldNotFoundError: If a key does not exist on the record.
            CursorDecodeError: If a value cannot be decoded into its field type.
        """
        raw = decode_payload(cursor)
        if raw is None:
            logger.debug("Ignoring cursor that is not valid base64")
            return []

        try:
            elements = load_json(raw)
        except ValueError:
            return self._decode_legacy(raw)

        return self._decode_current(elements)

    def decode_mapping(self, cursor: str) -> dict[str, Any]:
        """Decode a cursor into a mapping of key name to value.

        Returns an empty dict wherever ``decode`` returns an empty list.
        """
        return dict(zip(self.keys, self.decode(cursor)))

    def _decode_current(self, elements: Any) -> list[Any]:
        if not isinstance(elements, list):
            raise CursorDecodeError(
                f"cursor payload should be a JSON array, got {type(elements).__name__}"
            )

        result: list[Any] = []
        for index, key in enumerate(self.keys):
            field = self.schema.field(key)
            if index >= len(elements):
                raise CursorDecodeError(
                    f"cursor has {len(elements)} values, expected {len(self.keys)}"
                )
            try:
                result.append(field.decode(elements[index]))
            except ValidationError as exc:
                raise CursorDecodeError(f"cannot decode cursor field {key}: {exc}") from exc

        if len(elements) > len(self.keys):
            raise CursorDecodeError(
                f"cursor has {len(elements)} values, expected {len(self.keys)}"
            )
        return result

    def _decode_legacy(self, raw: bytes) -> list[Any]:
        if not self.settings.legacy_decode_enabled:
            logger.debug("Ignoring non-JSON cursor, legacy decoding is disabled")
            return []

        try:
            values = decode_legacy(
                raw.decode("utf-8", errors="replace"),
                time_fallback=self.settings.legacy_time_fallback,
            )
        except InvalidLegacyFieldError as exc:
            logger.debug("Ignoring malformed legacy cursor: %s", exc)
            return []

        if len(values) != len(self.keys):
            logger.warning(
                "Legacy cursor has %d segments, expected %d keys", len(values), len(self.keys)
            )
        return values


def new_cursor_decoder(
    ref: Any, *keys: str, settings: CursorSettings | None = None
) -> CursorDecoder:
    """Create a cursor decoder for the given schema reference and ordered keys."""
    return CursorDecoder(ref, *keys, settings=settings)
