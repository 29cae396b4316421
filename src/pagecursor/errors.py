"""Exceptions raised by the cursor encoder and decoder.

Every error derives from ``CursorError``, itself a ``ValueError``, so
callers that already treat malformed cursors as ``ValueError`` keep
working unchanged.
"""


class CursorError(ValueError):
    """Base class for all cursor codec errors."""


class InvalidDecodeReferenceError(CursorError):
    """The schema reference given to a decoder does not reduce to a record type."""

    def __init__(self, ref: object) -> None:
        self.ref = ref
        super().__init__(f"decode reference should be a record type, got {ref!r}")


class FieldNotFoundError(CursorError):
    """A configured key does not exist on the record."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"cannot find the field in the record: {field}")


class InvalidLegacyFieldError(CursorError):
    """A legacy cursor segment has no ``?KIND`` suffix."""

    def __init__(self, segment: str) -> None:
        self.segment = segment
        super().__init__(f"invalid legacy field: {segment!r}")


class CursorEncodeError(CursorError):
    """A key value has no deterministic JSON representation."""


class CursorDecodeError(CursorError):
    """A current-format cursor element could not be decoded into its field type."""
