"""Opaque keyset pagination cursors.

Encodes the sort-key fields of a boundary record into a transportable
cursor string and decodes received cursors back into typed values,
including the legacy ``value?KIND`` format.
"""

from pagecursor.config import CursorSettings, get_settings
from pagecursor.decoder import CursorDecoder, new_cursor_decoder
from pagecursor.encoder import CursorEncoder, new_cursor_encoder
from pagecursor.errors import (
    CursorDecodeError,
    CursorEncodeError,
    CursorError,
    FieldNotFoundError,
    InvalidDecodeReferenceError,
    InvalidLegacyFieldError,
)
from pagecursor.legacy import LegacyFieldKind, decode_legacy, encode_legacy
from pagecursor.schema import FieldDescriptor, RecordSchema, resolve_record_type

__all__ = [
    "CursorDecodeError",
    "CursorDecoder",
    "CursorEncodeError",
    "CursorEncoder",
    "CursorError",
    "CursorSettings",
    "FieldDescriptor",
    "FieldNotFoundError",
    "InvalidDecodeReferenceError",
    "InvalidLegacyFieldError",
    "LegacyFieldKind",
    "RecordSchema",
    "decode_legacy",
    "encode_legacy",
    "get_settings",
    "new_cursor_decoder",
    "new_cursor_encoder",
    "resolve_record_type",
]
