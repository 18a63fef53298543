"""Record types shared by the binding tests."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, NewType, Optional

import msgspec

from lambdabind import Bind, Float32, Int8, Int64, ObjectID, UInt8, UInt64

Language = NewType("Language", str)
Score = NewType("Score", int)


class PostStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class Priority(int, Enum):
    LOW = 1
    HIGH = 2


class AuthorID(ObjectID):
    __slots__ = ()


class ListPostsInput(msgspec.Struct, kw_only=True):
    id: Annotated[UInt64, Bind("path.id")]
    page: Annotated[Int64, Bind("query.page")]
    page_size: Annotated[Optional[UInt64], Bind("query.page_size")] = None
    search: Annotated[str, Bind("query.search")]
    show_drafts: Annotated[bool, Bind("query.show_hidden")]
    languages: Annotated[list[str], Bind("header.Accept-Language")] = []
    terms: Annotated[list[str], Bind("query.terms")] = []
    ratio: Annotated[float, Bind("query.ratio")]


class ScalarInput(msgspec.Struct, kw_only=True):
    tiny: Annotated[Int8, Bind("query.tiny")] = 0
    byte: Annotated[UInt8, Bind("query.byte")] = 0
    single: Annotated[Float32, Bind("query.single")] = 0.0
    day: Annotated[datetime.date, Bind("query.day")] = datetime.date.min
    stamp: Annotated[Optional[datetime.datetime], Bind("query.stamp")] = None
    author: Annotated[Optional[ObjectID], Bind("query.author")] = None


class AliasInput(msgspec.Struct, kw_only=True):
    language: Annotated[Language, Bind("query.lang")] = Language("")
    score: Annotated[Score, Bind("query.score")] = Score(0)
    status: Annotated[PostStatus, Bind("query.status")] = PostStatus.DRAFT
    priority: Annotated[Optional[Priority], Bind("query.priority")] = None
    author: Annotated[Optional[AuthorID], Bind("path.author")] = None
    statuses: Annotated[list[PostStatus], Bind("query.statuses")] = []
    languages: Annotated[list[Optional[Language]], Bind("query.langs")] = []
    authors: Annotated[list[ObjectID], Bind("query.authors")] = []
    ids: Annotated[tuple[int, ...], Bind("query.ids")] = ()


class UpdatePostInput(msgspec.Struct, kw_only=True):
    id: Annotated[UInt64, Bind("path.id")]
    author: Annotated[str, Bind("header.Author")] = ""
    title: str = ""
    content: str = ""
    tags: list[str] = []
    published_at: Optional[datetime.datetime] = None


class RenamedBody(msgspec.Struct, kw_only=True, rename="camel"):
    post_id: Annotated[str, Bind("path.id")] = ""
    display_name: str = ""


@dataclass
class SearchInput:
    query: Annotated[str, Bind("query.q")]
    limit: Annotated[int, Bind("query.limit")] = 10
    tags: Annotated[list[str], Bind("query.tag")] = field(default_factory=list)
    note: str = ""


class FrozenInput(msgspec.Struct, frozen=True):
    page: Annotated[int, Bind("query.page")] = 0


class BadTagInput(msgspec.Struct):
    page: Annotated[int, Bind("query.page.size")] = 0


class BadLocationInput(msgspec.Struct):
    page: Annotated[int, Bind("cookie.page")] = 0


class MissingKeyInput(msgspec.Struct):
    page: Annotated[int, Bind("query")] = 0


class UnsupportedTypeInput(msgspec.Struct):
    data: Annotated[dict[str, str], Bind("query.data")] = {}
