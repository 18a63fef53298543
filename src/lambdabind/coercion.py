"""Coercion of raw request strings into declared field types."""

from __future__ import annotations

import datetime
import math
import re
import struct
from dataclasses import dataclass
from enum import Enum
from typing import Any, NewType, Sequence

import msgspec

from .exceptions import FieldError
from .objectid import ObjectID
from .scalars import is_truthy
from .serialization import convert
from .typing_utils import (
    AliasType,
    ArrayType,
    BooleanType,
    DateType,
    FloatType,
    IdentifierType,
    IntegerType,
    OptionalType,
    StringType,
    TimestampType,
    TypeDescriptor,
)


class SourceKind(str, Enum):
    """Where a field's value is read from."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    BODY = "body"


class _Absent:
    __slots__ = ()

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Any = _Absent()
"""Returned by :func:`coerce` when the request carries no value for a field."""


@dataclass(frozen=True, slots=True)
class SourceValues:
    """The raw string(s) a request holds for one ``(kind, key)`` lookup.

    ``single`` and ``multi`` are two views of the same occurrences and are
    not guaranteed to agree when a key occurs more than once.
    """

    single: str | None = None
    multi: Sequence[str] | None = None

    @property
    def occurrences(self) -> tuple[str, ...]:
        if self.multi:
            return tuple(self.multi)
        if self.single is not None:
            return (self.single,)
        return ()

    @property
    def is_absent(self) -> bool:
        occurrences = self.occurrences
        return not occurrences or occurrences == ("",)

    def scalar(self) -> str:
        """Return the value used for single-valued fields."""

        if self.single is not None:
            return self.single
        if self.multi:
            return self.multi[-1]
        return ""


_SIGNED_INT = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_INT = re.compile(r"[0-9]+")
_MAX_INT_DIGITS = 20
_FLOAT = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_FLOAT_SPECIAL = frozenset(
    sign + word for sign in ("", "+", "-") for word in ("inf", "infinity", "nan")
)
_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_TIMESTAMP = re.compile(
    r"([0-9]{4}-[0-9]{2}-[0-9]{2})[Tt]([0-9]{2}:[0-9]{2}:[0-9]{2})(?:\.[0-9]+)?"
    r"(?:([Zz])|([+-][0-9]{2}:[0-9]{2}))"
)


def coerce(descriptor: TypeDescriptor, values: SourceValues, *, key: str) -> Any:
    """Coerce ``values`` into ``descriptor``.

    Returns :data:`ABSENT` when the request has nothing for ``key``; the
    field then keeps whatever value it already holds. Raises
    :class:`FieldError` when a present value cannot be parsed.
    """

    if values.is_absent:
        return ABSENT
    if isinstance(descriptor, ArrayType):
        return _coerce_array(descriptor, values.occurrences, key)
    if isinstance(descriptor, OptionalType):
        return coerce(descriptor.inner, values, key=key)
    return coerce_scalar(descriptor, values.scalar(), key=key)


def _coerce_array(descriptor: ArrayType, occurrences: tuple[str, ...], key: str) -> Any:
    if len(occurrences) == 1:
        items: Sequence[str] = occurrences[0].split(",")
    else:
        items = occurrences
    return descriptor.container(_coerce_element(descriptor.element, item, key) for item in items)


def _coerce_element(descriptor: TypeDescriptor, raw: str, key: str) -> Any:
    if isinstance(descriptor, OptionalType):
        if raw == "":
            return None
        return coerce_scalar(descriptor.inner, raw, key=key)
    return coerce_scalar(descriptor, raw, key=key)


def coerce_scalar(descriptor: TypeDescriptor, raw: str, *, key: str) -> Any:
    """Parse one raw string as a scalar, domain scalar or alias."""

    if isinstance(descriptor, StringType):
        return raw
    if isinstance(descriptor, BooleanType):
        return is_truthy(raw)
    if isinstance(descriptor, IntegerType):
        return parse_int(raw, descriptor, key=key)
    if isinstance(descriptor, FloatType):
        return parse_float(raw, descriptor, key=key)
    if isinstance(descriptor, DateType):
        return parse_date(raw, key=key)
    if isinstance(descriptor, TimestampType):
        return parse_timestamp(raw, key=key)
    if isinstance(descriptor, IdentifierType):
        return parse_identifier(raw, key=key)
    if isinstance(descriptor, AliasType):
        value = coerce_scalar(descriptor.inner, raw, key=key)
        return convert_alias(descriptor, value, key=key)
    if isinstance(descriptor, OptionalType):
        return coerce_scalar(descriptor.inner, raw, key=key)
    raise FieldError(key, f"{key} has an unsupported type")


def parse_int(raw: str, descriptor: IntegerType = IntegerType(), *, key: str) -> int:
    if descriptor.signed:
        pattern, message = _SIGNED_INT, f"{key} must be a valid integer"
    else:
        pattern, message = _UNSIGNED_INT, f"{key} must be a valid, positive integer"
    if not pattern.fullmatch(raw):
        raise FieldError(key, message)
    # Wider than any supported width; also keeps int() under the digit limit.
    if len(raw.lstrip("+-").lstrip("0")) > _MAX_INT_DIGITS:
        raise FieldError(key, message)
    value = int(raw)
    width = descriptor.width
    if value < width.minimum or value > width.maximum:
        raise FieldError(key, message)
    return value


def parse_float(raw: str, descriptor: FloatType = FloatType(), *, key: str) -> float:
    message = f"{key} must be a valid floating point number"
    if not _FLOAT.fullmatch(raw) and raw.lower() not in _FLOAT_SPECIAL:
        raise FieldError(key, message)
    value = float(raw)
    if math.isinf(value) and raw.lower() not in _FLOAT_SPECIAL:
        raise FieldError(key, message)
    if descriptor.bits == 32:
        try:
            value = struct.unpack("<f", struct.pack("<f", value))[0]
        except OverflowError as exc:
            raise FieldError(key, message) from exc
    return value


def parse_date(raw: str, *, key: str) -> datetime.date:
    message = f"{key} must be a valid date (YYYY-MM-DD)"
    if not _DATE.fullmatch(raw):
        raise FieldError(key, message)
    try:
        return convert(raw, datetime.date)
    except msgspec.ValidationError as exc:
        raise FieldError(key, message) from exc


def parse_timestamp(raw: str, *, key: str) -> datetime.datetime:
    """Parse an RFC 3339 timestamp, dropping any fractional seconds."""

    message = f"{key} must be a valid RFC 3339 timestamp"
    match = _TIMESTAMP.fullmatch(raw)
    if match is None:
        raise FieldError(key, message)
    day, clock, zulu, offset = match.groups()
    if offset and (int(offset[1:3]) > 23 or int(offset[4:6]) > 59):
        raise FieldError(key, message)
    # The fraction is cut before parsing so it truncates instead of rounding.
    canonical = f"{day}T{clock}{'Z' if zulu else offset}"
    try:
        value = convert(canonical, datetime.datetime)
    except msgspec.ValidationError as exc:
        raise FieldError(key, message) from exc
    if value.tzinfo is None:
        raise FieldError(key, message)
    return value.replace(microsecond=0)


def parse_identifier(raw: str, *, key: str) -> ObjectID:
    try:
        return ObjectID.from_hex(raw)
    except ValueError as exc:
        raise FieldError(key, f"invalid identifier for {key}: {exc}") from exc


def convert_alias(descriptor: AliasType, value: Any, *, key: str) -> Any:
    """Reinterpret an already parsed ``value`` as the alias type."""

    target = descriptor.target
    if isinstance(target, NewType):
        return value
    try:
        if isinstance(value, ObjectID):
            return target(value.binary)
        return target(value)
    except ValueError as exc:
        if isinstance(target, type) and issubclass(target, Enum):
            choices = ", ".join(str(member.value) for member in target)
            raise FieldError(key, f"{key} must be one of: {choices}") from exc
        raise FieldError(key, f"{key} must be a valid {descriptor.name}") from exc


__all__ = [
    "ABSENT",
    "SourceKind",
    "SourceValues",
    "coerce",
    "coerce_scalar",
    "convert_alias",
    "parse_date",
    "parse_float",
    "parse_identifier",
    "parse_int",
    "parse_timestamp",
]
