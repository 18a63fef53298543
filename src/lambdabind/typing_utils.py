"""Type descriptors for bindable field annotations.

``describe`` turns a Python annotation into one of a closed set of descriptor
shapes. The coercion engine dispatches on these shapes rather than on raw
annotations so that every field type is classified exactly once, when the
record type is first resolved.
"""

from __future__ import annotations

import datetime
import types
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Callable, NewType, Union, get_args, get_origin

from .exceptions import DescriptorError
from .objectid import NIL_OBJECT_ID, ObjectID
from .scalars import FloatWidth, IntWidth


@dataclass(frozen=True, slots=True)
class StringType:
    pass


@dataclass(frozen=True, slots=True)
class IntegerType:
    bits: int = 64
    signed: bool = True

    @property
    def width(self) -> IntWidth:
        return IntWidth(self.bits, self.signed)


@dataclass(frozen=True, slots=True)
class FloatType:
    bits: int = 64


@dataclass(frozen=True, slots=True)
class BooleanType:
    pass


@dataclass(frozen=True, slots=True)
class DateType:
    """Calendar date without a time component."""


@dataclass(frozen=True, slots=True)
class TimestampType:
    """Date and time with an offset, second precision."""


@dataclass(frozen=True, slots=True)
class IdentifierType:
    """Twelve byte identifier carried as 24 hex characters."""


@dataclass(frozen=True, slots=True)
class OptionalType:
    inner: "TypeDescriptor"


@dataclass(frozen=True, slots=True)
class ArrayType:
    element: "TypeDescriptor"
    container: type = list


@dataclass(frozen=True, slots=True)
class AliasType:
    """A distinct named type sharing ``inner``'s representation."""

    inner: "TypeDescriptor"
    target: Callable[[Any], Any]

    @property
    def name(self) -> str:
        return getattr(self.target, "__name__", repr(self.target))


ScalarType = Union[StringType, IntegerType, FloatType, BooleanType]
DomainType = Union[DateType, TimestampType, IdentifierType]
TypeDescriptor = Union[ScalarType, DomainType, OptionalType, ArrayType, AliasType]

_SIMPLE: dict[Any, TypeDescriptor] = {
    str: StringType(),
    bool: BooleanType(),
    int: IntegerType(),
    float: FloatType(),
    datetime.datetime: TimestampType(),
    datetime.date: DateType(),
    ObjectID: IdentifierType(),
}

_UNION_TYPES = (Union, types.UnionType)


def describe(annotation: Any) -> TypeDescriptor:
    """Classify ``annotation`` into a :data:`TypeDescriptor`.

    Raises :class:`DescriptorError` for annotations outside the supported set.
    """

    if get_origin(annotation) is Annotated:
        base, *metadata = get_args(annotation)
        for marker in metadata:
            if isinstance(marker, IntWidth):
                _require_base(annotation, base, int)
                return IntegerType(marker.bits, marker.signed)
            if isinstance(marker, FloatWidth):
                _require_base(annotation, base, float)
                return FloatType(marker.bits)
        return describe(base)

    origin = get_origin(annotation)
    if origin in _UNION_TYPES:
        options = [option for option in get_args(annotation) if option is not type(None)]
        if len(options) != 1:
            raise DescriptorError(f"unsupported union type {annotation!r}")
        inner = describe(options[0])
        if isinstance(inner, OptionalType):
            return inner
        return OptionalType(inner)

    if origin in (list, tuple):
        args = get_args(annotation)
        if origin is tuple and (len(args) != 2 or args[1] is not Ellipsis):
            raise DescriptorError(f"unsupported tuple type {annotation!r}, use tuple[T, ...]")
        if not args:
            raise DescriptorError(f"array type {annotation!r} must declare an element type")
        element = describe(args[0])
        if isinstance(element, ArrayType) or (
            isinstance(element, OptionalType) and isinstance(element.inner, ArrayType)
        ):
            raise DescriptorError(f"nested array type {annotation!r} is not supported")
        return ArrayType(element, origin)

    if isinstance(annotation, NewType):
        inner = describe(annotation.__supertype__)
        _require_scalar(annotation, inner)
        return AliasType(inner, annotation)

    try:
        return _SIMPLE[annotation]
    except (KeyError, TypeError):
        pass

    if isinstance(annotation, type) and origin is None:
        if issubclass(annotation, ObjectID):
            return AliasType(IdentifierType(), annotation)
        if issubclass(annotation, Enum) and not issubclass(annotation, (str, int)):
            raise DescriptorError(f"enum {annotation.__name__} must derive from str or int")
        for base in (str, bool, int, float):
            if issubclass(annotation, base):
                return AliasType(_SIMPLE[base], annotation)

    raise DescriptorError(f"unsupported field type {annotation!r}")


def _require_base(annotation: Any, base: Any, expected: type) -> None:
    if base is not expected:
        raise DescriptorError(f"width marker in {annotation!r} requires {expected.__name__}")


def _require_scalar(annotation: Any, inner: TypeDescriptor) -> None:
    if isinstance(inner, (OptionalType, ArrayType)):
        raise DescriptorError(f"alias {annotation.__name__} must wrap a scalar type")


def zero_value(descriptor: TypeDescriptor) -> Any:
    """Return the value a bare field of ``descriptor`` holds before binding."""

    if isinstance(descriptor, StringType):
        return ""
    if isinstance(descriptor, BooleanType):
        return False
    if isinstance(descriptor, IntegerType):
        return 0
    if isinstance(descriptor, FloatType):
        return 0.0
    if isinstance(descriptor, DateType):
        return datetime.date.min
    if isinstance(descriptor, TimestampType):
        return datetime.datetime.min.replace(tzinfo=datetime.timezone.utc)
    if isinstance(descriptor, IdentifierType):
        return NIL_OBJECT_ID
    if isinstance(descriptor, OptionalType):
        return None
    if isinstance(descriptor, ArrayType):
        return descriptor.container()
    if isinstance(descriptor, AliasType):
        underlying = zero_value(descriptor.inner)
        if isinstance(descriptor.target, NewType):
            return underlying
        if isinstance(underlying, ObjectID):
            return descriptor.target(underlying.binary)
        try:
            return descriptor.target(underlying)
        except ValueError:
            # Enums without a member for the zero value keep the raw representation.
            return underlying
    raise TypeError(f"unknown type descriptor {descriptor!r}")


__all__ = [
    "AliasType",
    "ArrayType",
    "BooleanType",
    "DateType",
    "DomainType",
    "FloatType",
    "IdentifierType",
    "IntegerType",
    "OptionalType",
    "ScalarType",
    "StringType",
    "TimestampType",
    "TypeDescriptor",
    "describe",
    "zero_value",
]
