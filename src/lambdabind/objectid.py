"""Twelve byte identifiers rendered as 24 character hexadecimal strings."""

from __future__ import annotations

import os
import struct
import threading
import time
from typing import Any

__all__ = ["NIL_OBJECT_ID", "ObjectID", "is_valid_hex"]

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_BYTE_LENGTH = 12
_HEX_LENGTH = _BYTE_LENGTH * 2

_counter_lock = threading.Lock()
_counter = int.from_bytes(os.urandom(3), "big")
# Five bytes of per-process randomness, generated once.
_process_unique = os.urandom(5)


def _next_counter() -> int:
    global _counter
    with _counter_lock:
        _counter = (_counter + 1) % 0xFFFFFF
        return _counter


def is_valid_hex(value: str) -> bool:
    """Return ``True`` when ``value`` is exactly 24 hexadecimal characters."""

    return len(value) == _HEX_LENGTH and all(char in _HEX_DIGITS for char in value)


class ObjectID:
    """Immutable identifier backed by 12 raw bytes.

    The layout follows the familiar database object id: a 4 byte big-endian
    timestamp, 5 bytes of process randomness and a 3 byte counter.  Only the
    byte length matters when parsing; any 24 hex characters are accepted.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: bytes | bytearray) -> None:
        data = bytes(raw)
        if len(data) != _BYTE_LENGTH:
            raise ValueError(f"ObjectID requires {_BYTE_LENGTH} bytes, got {len(data)}")
        object.__setattr__(self, "_raw", data)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("ObjectID is immutable")

    @classmethod
    def generate(cls, *, timestamp: float | None = None) -> "ObjectID":
        seconds = int(time.time() if timestamp is None else timestamp)
        head = struct.pack(">I", seconds & 0xFFFFFFFF)
        tail = _next_counter().to_bytes(3, "big")
        return cls(head + _process_unique + tail)

    @classmethod
    def from_hex(cls, value: str) -> "ObjectID":
        """Parse a 24 character hexadecimal string."""

        if not is_valid_hex(value):
            raise ValueError(f"the provided hex string is not a valid ObjectID: {value!r}")
        return cls(bytes.fromhex(value))

    @property
    def binary(self) -> bytes:
        return self._raw

    @property
    def generation_time(self) -> int:
        """Seconds since the epoch encoded in the first four bytes."""

        return struct.unpack(">I", self._raw[:4])[0]

    def hex(self) -> str:
        return self._raw.hex()

    def is_zero(self) -> bool:
        return self._raw == bytes(_BYTE_LENGTH)

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.hex()!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ObjectID):
            return self._raw == other._raw
        return NotImplemented

    def __lt__(self, other: "ObjectID") -> bool:
        if not isinstance(other, ObjectID):
            return NotImplemented
        return self._raw < other._raw

    def __hash__(self) -> int:
        return hash(self._raw)


NIL_OBJECT_ID = ObjectID(bytes(_BYTE_LENGTH))
