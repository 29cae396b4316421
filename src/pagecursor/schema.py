"""Record schema introspection.

Reduces a schema reference (a record class, an instance of one, or any
"reference to" / "collection of" wrapper around it) to a record type and
builds a read-only field table from it. Each field carries a pydantic
``TypeAdapter`` so decoders can turn raw JSON values back into the
field's declared Python type without re-inspecting the class per call.

Supported record types:
    - pydantic ``BaseModel`` subclasses
    - dataclasses
    - SQLAlchemy mapped classes (``Mapped[...]`` annotations, falling back
      to the mapper's column types)
    - any other class with resolvable type annotations
"""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Collection, Iterator, Mapping
from functools import cached_property
from typing import Annotated, Any, ClassVar, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel, TypeAdapter
from pydantic_core import to_json
from sqlalchemy import Column
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Mapped, Mapper

from pagecursor.errors import FieldNotFoundError, InvalidDecodeReferenceError

_UNION_ORIGINS = (Union, types.UnionType)
_NONE_TYPE = type(None)


def _strip_none(annotation: Any) -> tuple[Any, bool]:
    """Split ``T | None`` into ``(T, True)``; other annotations pass through."""
    if get_origin(annotation) not in _UNION_ORIGINS:
        return annotation, False
    args = get_args(annotation)
    rest = tuple(arg for arg in args if arg is not _NONE_TYPE)
    if len(rest) == len(args):
        return annotation, False
    if len(rest) == 1:
        return rest[0], True
    return Union[rest], True


@dataclasses.dataclass(frozen=True)
class FieldDescriptor:
    """A single record field as seen by the cursor decoder.

    Attributes:
        name: Attribute name on the record.
        annotation: Declared type of the field.
        nullable: True when the declared type is ``T | None``.
        target: The underlying type values are decoded into (``T`` for a
            nullable field, the declared type otherwise).
    """

    name: str
    annotation: Any
    nullable: bool
    target: Any

    @classmethod
    def from_annotation(cls, name: str, annotation: Any) -> FieldDescriptor:
        target, nullable = _strip_none(annotation)
        return cls(name=name, annotation=annotation, nullable=nullable, target=target)

    @cached_property
    def adapter(self) -> TypeAdapter[Any]:
        return TypeAdapter(self.target)

    def decode(self, raw: Any) -> Any:
        """Decode a raw JSON value into this field's type.

        Validation runs in strict JSON mode: ISO text becomes a timestamp,
        but numeric text is not coerced into a number.

        Raises:
            pydantic.ValidationError: If ``raw`` does not match the type.
        """
        if raw is None and self.nullable:
            return None
        return self.adapter.validate_json(to_json(raw), strict=True)


def _mapper_for(cls: type) -> Mapper[Any] | None:
    mapper = sa_inspect(cls, raiseerr=False)
    return mapper if isinstance(mapper, Mapper) else None


def _is_record_type(cls: Any) -> bool:
    if not isinstance(cls, type):
        return False
    if cls.__module__ == "builtins" or issubclass(cls, Mapping):
        return False
    if issubclass(cls, BaseModel) or dataclasses.is_dataclass(cls):
        return True
    if _mapper_for(cls) is not None:
        return True
    return bool(getattr(cls, "__annotations__", None))


def resolve_record_type(ref: Any) -> type:
    """Reduce a schema reference to the record type it describes.

    Unwraps ``Optional[...]``, ``type[...]``, SQLAlchemy ``Mapped[...]``,
    collection generics (``list[...]``, ``Sequence[...]``, ...), non-empty
    list/tuple instances and plain instances until a record class is
    reached. Named tuples are records, not collections.

    Raises:
        InvalidDecodeReferenceError: If the reference does not reduce to a
            record type.
    """
    current = ref
    while True:
        if isinstance(current, (list, tuple)) and not _is_record_type(type(current)):
            if not current:
                raise InvalidDecodeReferenceError(ref)
            current = current[0]
            continue

        origin = get_origin(current)
        if origin is not None:
            args = tuple(arg for arg in get_args(current) if arg is not _NONE_TYPE)
            if origin in _UNION_ORIGINS:
                if len(args) != 1:
                    raise InvalidDecodeReferenceError(ref)
                current = args[0]
                continue
            if origin is type or origin is Mapped or origin is Annotated:
                current = args[0]
                continue
            if (
                isinstance(origin, type)
                and issubclass(origin, Collection)
                and not issubclass(origin, (Mapping, str, bytes))
                and args
            ):
                current = args[0]
                continue
            raise InvalidDecodeReferenceError(ref)

        if not isinstance(current, type):
            current = type(current)
        break

    if not _is_record_type(current):
        raise InvalidDecodeReferenceError(ref)
    return current


def _declared_type(hint: Any) -> Any:
    """Unwrap ``Mapped[T]`` and ``Annotated[T, ...]`` down to ``T``."""
    while get_origin(hint) in (Mapped, Annotated):
        hint = get_args(hint)[0]
    return hint


def _resolved_hints(record_type: type) -> dict[str, Any]:
    hints = get_type_hints(record_type, include_extras=True)
    return {
        name: _declared_type(hint)
        for name, hint in hints.items()
        if get_origin(hint) is not ClassVar and hint is not ClassVar
    }


def _column_type(expression: Any) -> Any:
    """Python type of a mapped column or SQL expression, nullable columns as ``T | None``."""
    try:
        python_type: Any = expression.type.python_type
    except (AttributeError, NotImplementedError):
        return Any
    # column_property() expressions are labels, not columns, and carry no nullability
    if not isinstance(expression, Column) or expression.nullable:
        return typing.Optional[python_type]
    return python_type


def _mapped_annotations(record_type: type, mapper: Mapper[Any]) -> dict[str, Any]:
    try:
        hints = _resolved_hints(record_type)
    except (NameError, TypeError):
        hints = {}
    annotations: dict[str, Any] = {}
    for prop in mapper.column_attrs:
        if prop.key in hints:
            annotations[prop.key] = hints[prop.key]
        else:
            annotations[prop.key] = _column_type(prop.columns[0])
    return annotations


def _field_annotations(record_type: type) -> dict[str, Any]:
    if issubclass(record_type, BaseModel):
        return {name: info.annotation for name, info in record_type.model_fields.items()}

    mapper = _mapper_for(record_type)
    if mapper is not None:
        return _mapped_annotations(record_type, mapper)

    try:
        hints = _resolved_hints(record_type)
    except (NameError, TypeError) as exc:
        raise InvalidDecodeReferenceError(record_type) from exc

    if dataclasses.is_dataclass(record_type):
        names = [f.name for f in dataclasses.fields(record_type)]
        return {name: hints.get(name, Any) for name in names}

    return hints


class RecordSchema:
    """Read-only field table for a record type.

    Args:
        record_type: The record class.
        fields: Field descriptors keyed by attribute name.
    """

    def __init__(self, record_type: type, fields: Mapping[str, FieldDescriptor]) -> None:
        self.record_type = record_type
        self._fields = types.MappingProxyType(dict(fields))

    @classmethod
    def from_ref(cls, ref: Any) -> RecordSchema:
        """Build a schema from any supported schema reference.

        Raises:
            InvalidDecodeReferenceError: If the reference does not reduce to
                a record type.
        """
        record_type = resolve_record_type(ref)
        fields = {
            name: FieldDescriptor.from_annotation(name, annotation)
            for name, annotation in _field_annotations(record_type).items()
        }
        return cls(record_type, fields)

    def field(self, name: str) -> FieldDescriptor:
        try:
            return self._fields[name]
        except KeyError:
            raise FieldNotFoundError(name) from None

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"RecordSchema({self.record_type.__name__}, fields={list(self._fields)})"
