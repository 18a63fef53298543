"""Fixed-width numeric annotations and the boolean vocabulary."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

import msgspec

TRUTHY_VALUES = frozenset({"1", "true", "on", "enabled", "t"})


def is_truthy(value: str | None) -> bool:
    """Return ``True`` when ``value`` is in the truthy vocabulary (case-insensitive)."""

    if value is None:
        return False
    return value.lower() in TRUTHY_VALUES


@dataclass(frozen=True, slots=True)
class IntWidth:
    """Marks an ``int`` annotation with a fixed bit width and signedness."""

    bits: int
    signed: bool = True

    @property
    def minimum(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def maximum(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1


@dataclass(frozen=True, slots=True)
class FloatWidth:
    """Marks a ``float`` annotation with a fixed bit width (32 or 64)."""

    bits: int


_FLOAT32_MAX = 3.4028234663852886e38


def _int(bits: int, signed: bool) -> object:
    width = IntWidth(bits, signed)
    return Annotated[int, width, msgspec.Meta(ge=width.minimum, le=width.maximum)]


Int8 = _int(8, True)
Int16 = _int(16, True)
Int32 = _int(32, True)
Int64 = _int(64, True)
UInt8 = _int(8, False)
UInt16 = _int(16, False)
UInt32 = _int(32, False)
UInt64 = _int(64, False)
Float32 = Annotated[float, FloatWidth(32), msgspec.Meta(ge=-_FLOAT32_MAX, le=_FLOAT32_MAX)]
Float64 = Annotated[float, FloatWidth(64)]

__all__ = [
    "Float32",
    "Float64",
    "FloatWidth",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "IntWidth",
    "TRUTHY_VALUES",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "is_truthy",
]
