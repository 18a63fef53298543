from __future__ import annotations

import msgspec
import pytest

from lambdabind.objectid import ObjectID
from lambdabind.serialization import convert, json_decode, json_encode, to_builtins
from tests.support import AuthorID


class Record(msgspec.Struct):
    id: ObjectID
    author: AuthorID | None = None


def test_identifiers_encode_as_hex() -> None:
    identifier = ObjectID.from_hex("5f1a2b3c4d5e6f7a8b9c0d1e")
    assert json_encode({"id": identifier}) == b'{"id":"5f1a2b3c4d5e6f7a8b9c0d1e"}'
    assert to_builtins([identifier]) == ["5f1a2b3c4d5e6f7a8b9c0d1e"]


def test_identifiers_decode_from_hex() -> None:
    record = json_decode(b'{"id": "5f1a2b3c4d5e6f7a8b9c0d1e", "author": "000000000000000000000001"}', type=Record)
    assert record.id.hex() == "5f1a2b3c4d5e6f7a8b9c0d1e"
    assert type(record.author) is AuthorID
    assert convert({"id": "5f1a2b3c4d5e6f7a8b9c0d1e"}, Record).author is None


def test_invalid_identifiers_raise_validation_errors() -> None:
    with pytest.raises(msgspec.ValidationError):
        json_decode(b'{"id": "nothex"}', type=Record)
    with pytest.raises(msgspec.ValidationError):
        convert({"id": 12}, Record)


def test_unsupported_values_fail_to_encode() -> None:
    with pytest.raises((TypeError, NotImplementedError)):
        json_encode(object())
