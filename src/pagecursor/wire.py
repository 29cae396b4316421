"""Wire helpers shared by both cursor formats.

Cursors travel as padded standard base64 so they are safe to embed in
JSON bodies, headers and (URL-encoded) query parameters. The current
format's payload is strict JSON: the ``NaN``/``Infinity`` extensions
Python's ``json`` module accepts by default are rejected.
"""

import base64
import binascii
import json
from typing import Any


def encode_payload(payload: bytes) -> str:
    """Wrap raw cursor bytes into their transport text form."""
    return base64.b64encode(payload).decode("ascii")


def decode_payload(cursor: str) -> bytes | None:
    """Unwrap a transport string into raw cursor bytes.

    Returns:
        The decoded bytes, or None if ``cursor`` is not valid padded
        base64 text.
    """
    try:
        return base64.b64decode(cursor, validate=True)
    except (binascii.Error, TypeError, ValueError):
        return None


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def load_json(payload: bytes) -> Any:
    """Parse a strict JSON payload.

    Raises:
        ValueError: If ``payload`` is not valid JSON, including the
            non-standard ``NaN``, ``Infinity`` and ``-Infinity`` tokens.
    """
    return json.loads(payload, parse_constant=_reject_constant)
