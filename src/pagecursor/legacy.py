"""Legacy ``value?KIND`` cursor format.

Older cursors were a comma-joined list of ``<value>?<KIND>`` segments,
base64 wrapped. Only two kinds exist: ``TIME`` for timestamps (RFC 3339
with nanosecond precision) and ``STRING`` for everything else. Values
are never escaped, so a value containing ``,`` cannot round trip.

The encoder no longer produces this format. ``encode_legacy`` is kept
for migration tooling and tests; ``decode_legacy`` backs the decoder's
compatibility path.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pagecursor.errors import InvalidLegacyFieldError
from pagecursor.wire import encode_payload

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = ","
KIND_SEPARATOR = "?"

_RFC3339 = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d{1,9}))?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})$"
)


class LegacyFieldKind(str, Enum):
    """Kind tags carried by legacy cursor segments."""

    STRING = "STRING"
    TIME = "TIME"


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC 3339 timestamp with up to nanosecond precision.

    Fractions beyond microseconds are truncated.

    Raises:
        ValueError: If ``value`` is not an RFC 3339 timestamp.
    """
    match = _RFC3339.match(value)
    if match is None:
        raise ValueError(f"not an RFC 3339 timestamp: {value!r}")
    fraction = (match["fraction"] or "")[:6].ljust(6, "0")
    offset = "+00:00" if match["offset"] == "Z" else match["offset"]
    return datetime.fromisoformat(f"{match['base']}.{fraction}{offset}")


def format_rfc3339(value: datetime) -> str:
    """Format a timestamp as UTC RFC 3339 with trailing fraction zeros trimmed.

    Naive timestamps are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    text = value.strftime("%Y-%m-%dT%H:%M:%S")
    if value.microsecond:
        text += f".{value.microsecond:06d}".rstrip("0")
    return text + "Z"


def _convert(value: Any) -> str:
    if isinstance(value, datetime):
        return f"{format_rfc3339(value)}{KIND_SEPARATOR}{LegacyFieldKind.TIME.value}"
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif value is None:
        text = ""
    else:
        text = str(value)
    return f"{text}{KIND_SEPARATOR}{LegacyFieldKind.STRING.value}"


def encode_legacy(values: Sequence[Any]) -> str:
    """Encode an ordered list of key values in the legacy cursor format."""
    return encode_payload(FIELD_SEPARATOR.join(_convert(v) for v in values).encode("utf-8"))


def split_segment(segment: str) -> tuple[str, str]:
    """Split a ``value?KIND`` segment on its last ``?``.

    Raises:
        InvalidLegacyFieldError: If the segment has no ``?``.
    """
    value, sep, kind = segment.rpartition(KIND_SEPARATOR)
    if not sep:
        raise InvalidLegacyFieldError(segment)
    return value, kind


def _revert(segment: str, time_fallback: bool) -> Any:
    value, kind = split_segment(segment)
    if kind != LegacyFieldKind.TIME.value:
        return value
    try:
        return parse_rfc3339(value)
    except ValueError:
        if not time_fallback:
            raise InvalidLegacyFieldError(segment) from None
        logger.warning("Unparsable legacy cursor timestamp %r, substituting current time", value)
        return datetime.now(timezone.utc)


def decode_legacy(payload: str, *, time_fallback: bool = True) -> list[Any]:
    """Decode a legacy cursor payload into plain strings and timestamps.

    Args:
        payload: The base64-decoded cursor text.
        time_fallback: Substitute the current UTC time for ``TIME``
            segments that fail to parse. When False such a segment is
            treated as malformed.

    Returns:
        One value per segment: a ``datetime`` for ``TIME`` segments, the
        raw text for any other kind.

    Raises:
        InvalidLegacyFieldError: If any segment is malformed.
    """
    return [_revert(segment, time_fallback) for segment in payload.split(FIELD_SEPARATOR)]
