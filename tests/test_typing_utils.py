from __future__ import annotations

import datetime
from enum import Enum
from typing import Annotated, NewType, Optional, Union

import pytest

from lambdabind.binding import Bind
from lambdabind.exceptions import DescriptorError
from lambdabind.objectid import NIL_OBJECT_ID, ObjectID
from lambdabind.scalars import Float32, Int16, UInt32
from lambdabind.typing_utils import (
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
    describe,
    zero_value,
)

from tests.support import AuthorID, Language, PostStatus, Priority

Plain = Enum("Plain", "A B")


def test_describe_scalars() -> None:
    assert describe(str) == StringType()
    assert describe(bool) == BooleanType()
    assert describe(int) == IntegerType(64, True)
    assert describe(float) == FloatType(64)
    assert describe(Int16) == IntegerType(16, True)
    assert describe(UInt32) == IntegerType(32, False)
    assert describe(Float32) == FloatType(32)


def test_describe_domain_scalars() -> None:
    assert describe(datetime.date) == DateType()
    assert describe(datetime.datetime) == TimestampType()
    assert describe(ObjectID) == IdentifierType()


def test_describe_ignores_binding_markers() -> None:
    assert describe(Annotated[UInt32, Bind("query.page")]) == IntegerType(32, False)


def test_describe_optional_and_arrays() -> None:
    assert describe(Optional[int]) == OptionalType(IntegerType())
    assert describe(int | None) == OptionalType(IntegerType())
    assert describe(list[str]) == ArrayType(StringType(), list)
    assert describe(tuple[int, ...]) == ArrayType(IntegerType(), tuple)
    assert describe(list[Optional[Language]]) == ArrayType(OptionalType(AliasType(StringType(), Language)))


def test_describe_aliases() -> None:
    assert describe(Language) == AliasType(StringType(), Language)
    assert describe(PostStatus) == AliasType(StringType(), PostStatus)
    assert describe(Priority) == AliasType(IntegerType(), Priority)
    assert describe(AuthorID) == AliasType(IdentifierType(), AuthorID)
    assert describe(Language).name == "Language"


@pytest.mark.parametrize(
    "annotation",
    [
        list[list[int]],
        list[Optional[list[int]]],
        tuple[int, str],
        Union[int, str],
        dict[str, str],
        bytes,
        Plain,
        NewType("Tags", list[str]),
        Annotated[str, Int16.__metadata__[0]],
    ],
)
def test_describe_rejects_unsupported(annotation: object) -> None:
    with pytest.raises(DescriptorError):
        describe(annotation)


def test_zero_values() -> None:
    assert zero_value(describe(str)) == ""
    assert zero_value(describe(int)) == 0
    assert zero_value(describe(float)) == 0.0
    assert zero_value(describe(bool)) is False
    assert zero_value(describe(Optional[int])) is None
    assert zero_value(describe(list[int])) == []
    assert zero_value(describe(tuple[int, ...])) == ()
    assert zero_value(describe(datetime.date)) == datetime.date.min
    assert zero_value(describe(datetime.datetime)).tzinfo is datetime.timezone.utc
    assert zero_value(describe(ObjectID)) == NIL_OBJECT_ID
    assert zero_value(describe(Language)) == ""
    assert zero_value(describe(PostStatus)) == ""
    assert isinstance(zero_value(describe(AuthorID)), AuthorID)
